# quisine/deps.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from quisine.core.database import get_db
from quisine.core.errors import AuthenticationError, ForbiddenError
from quisine.core.request_context import set_request_context
from quisine.models.shop import Shop
from quisine.services.auth import decode_access_token

# the Swagger "Authorize" button runs the OAuth2 password flow against this endpoint
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token", auto_error=False)

logger = logging.getLogger(__name__)


def _extract_shop_id(payload: Dict[str, Any]) -> Optional[int]:
    raw = payload.get("sub")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str) and raw.strip().isdigit():
        return int(raw.strip())
    return None


def get_current_shop(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> Shop:
    """Resolve the authenticated shop from the bearer token, once per request."""
    if not token:
        raise AuthenticationError()

    try:
        payload = decode_access_token(token)
    except ValueError:
        raise AuthenticationError("Invalid or expired token")

    shop_id = _extract_shop_id(payload)
    if shop_id is None:
        raise AuthenticationError("Invalid token")

    shop = db.query(Shop).filter(Shop.id == shop_id).first()
    if shop is None or shop.tenant_id != payload.get("tenant_id"):
        raise AuthenticationError("Shop not found")

    request.state.shop = shop
    set_request_context(tenant_id=shop.tenant_id)
    return shop


def _log_access_denied(*, shop: Shop, tenant_id: str, request: Request) -> None:
    logger.warning(
        "Access denied (tenant_mismatch): shop_tenant=%s tenant_id=%s endpoint=%s %s",
        shop.tenant_id,
        tenant_id,
        request.method,
        request.url.path,
    )


def ensure_same_tenant(shop: Shop, tenant_id: Optional[str], request: Request) -> str:
    """Return the principal's tenant; a client-supplied tenant must agree with it."""
    if tenant_id is not None and tenant_id != shop.tenant_id:
        _log_access_denied(shop=shop, tenant_id=tenant_id, request=request)
        raise ForbiddenError()
    return shop.tenant_id


def require_tenant_access(
    tenant_id: str,
    request: Request,
    shop: Shop = Depends(get_current_shop),
) -> str:
    """For routes carrying ``{tenant_id}`` in the path."""
    return ensure_same_tenant(shop, tenant_id, request)


def current_tenant_id(shop: Shop = Depends(get_current_shop)) -> str:
    """For id-addressed routes: the tenant comes from the token only."""
    return shop.tenant_id
