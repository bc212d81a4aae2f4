# quisine/routers/auth.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from quisine.core.database import get_db
from quisine.schemas.auth import LoginPayload, LoginResponse, SignupPayload
from quisine.services import shops as shop_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", status_code=201)
def signup(payload: SignupPayload, db: Session = Depends(get_db)):
    shop = shop_service.signup(db, payload)
    return {"msg": "Account created successfully", "tenant_id": shop.tenant_id}


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginPayload, db: Session = Depends(get_db)):
    return shop_service.login(db, payload.email, payload.password)


@router.post("/token")
def token(form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db)):
    """Endpoint used by the Swagger UI "Authorize" button (form fields username/password)."""
    result = shop_service.login(db, form_data.username, form_data.password)
    return {"access_token": result["token"], "token_type": "bearer"}
