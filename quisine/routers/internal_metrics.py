from __future__ import annotations

from fastapi import APIRouter, Depends

from quisine.core.metrics import request_metrics
from quisine.deps import current_tenant_id

router = APIRouter(prefix="/internal/metrics", tags=["internal-metrics"])


@router.get("/tenant")
def tenant_metrics(tenant_id: str = Depends(current_tenant_id)):
    return {"tenant_id": tenant_id, "metrics": request_metrics.snapshot_for_tenant(tenant_id)}
