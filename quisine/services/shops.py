from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from quisine.core.errors import NotFoundError, ValidationError
from quisine.models.shop import Shop
from quisine.models.staff_member import StaffMember
from quisine.schemas.auth import SignupPayload
from quisine.schemas.shop import StaffCreate
from quisine.services.auth import create_access_token, hash_password, verify_password
from quisine.services.menu import create_empty_menu, find_menu, menu_to_dict

logger = logging.getLogger(__name__)
AUTH_PREFIX = "[AUTH]"
STAFF_PREFIX = "[STAFF]"

PROFILE_FIELDS = ("shop_name", "address", "contact_phone", "primary_color", "secondary_color")


def _new_tenant_id() -> str:
    return uuid4().hex


def _normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def staff_to_dict(member: StaffMember) -> dict:
    return {
        "id": member.id,
        "name": member.name,
        "pin": member.pin,
        "role": member.role,
        "created_at": member.created_at.isoformat() if member.created_at else None,
    }


def shop_to_dict(shop: Shop) -> dict:
    """Admin view of the shop: everything except the password hash."""
    return {
        "tenant_id": shop.tenant_id,
        "username": shop.username,
        "email": shop.email,
        "shop_name": shop.shop_name,
        "address": shop.address,
        "contact_phone": shop.contact_phone,
        "logo": shop.logo,
        "cover": shop.cover,
        "primary_color": shop.primary_color,
        "secondary_color": shop.secondary_color,
        "staff": [staff_to_dict(member) for member in shop.staff],
        "created_at": shop.created_at.isoformat() if shop.created_at else None,
        "updated_at": shop.updated_at.isoformat() if shop.updated_at else None,
    }


def public_shop_to_dict(shop: Shop) -> dict:
    return {
        "tenant_id": shop.tenant_id,
        "shop_name": shop.shop_name,
        "address": shop.address,
        "contact_phone": shop.contact_phone,
        "logo": shop.logo,
        "cover": shop.cover,
        "primary_color": shop.primary_color,
        "secondary_color": shop.secondary_color,
    }


def find_shop(db: Session, tenant_id: str) -> Optional[Shop]:
    return (
        db.query(Shop)
        .options(selectinload(Shop.staff))
        .filter(Shop.tenant_id == tenant_id)
        .first()
    )


def get_shop(db: Session, tenant_id: str) -> Shop:
    shop = find_shop(db, tenant_id)
    if shop is None:
        raise NotFoundError("Shop")
    return shop


# =========================
# SIGNUP / LOGIN
# =========================
def signup(db: Session, payload: SignupPayload) -> Shop:
    """Create the shop and its empty menu in a single transaction.

    Either both rows exist afterwards or neither does.
    """
    email = _normalize_email(payload.email)
    if db.query(Shop.id).filter(Shop.email == email).first():
        raise ValidationError("Email already exists")

    tenant_id = _new_tenant_id()
    shop = Shop(
        tenant_id=tenant_id,
        username=payload.username,
        email=email,
        password_hash=hash_password(payload.password),
        contact_phone=payload.phone,
        shop_name=payload.shop_name,
    )
    try:
        db.add(shop)
        db.flush()
        create_empty_menu(db, tenant_id)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        logger.warning("%s signup conflict email=%s", AUTH_PREFIX, email)
        raise ValidationError("Email already exists") from exc
    except Exception:
        db.rollback()
        logger.exception("%s signup rolled back email=%s", AUTH_PREFIX, email)
        raise

    db.refresh(shop)
    logger.info("%s signup tenant_id=%s", AUTH_PREFIX, tenant_id)
    return shop


def login(db: Session, email: str, password: str) -> Dict[str, Any]:
    shop = db.query(Shop).filter(Shop.email == _normalize_email(email)).first()
    if shop is None or not verify_password(password, shop.password_hash):
        logger.info("%s login rejected", AUTH_PREFIX)
        raise ValidationError("Invalid credentials")

    token = create_access_token(shop.id, shop.tenant_id)
    logger.info("%s login tenant_id=%s", AUTH_PREFIX, shop.tenant_id)
    return {
        "tenant_id": shop.tenant_id,
        "email": shop.email,
        "token": token,
        "token_type": "bearer",
    }


# =========================
# PROFILE
# =========================
def update_profile(
    db: Session,
    tenant_id: str,
    fields: Dict[str, Optional[str]],
    upload_logo: Optional[Callable[[], str]] = None,
    upload_cover: Optional[Callable[[], str]] = None,
) -> Shop:
    """Selective profile update; uploads run before anything is written."""
    shop = get_shop(db, tenant_id)

    changes = {name: value for name, value in fields.items() if name in PROFILE_FIELDS and value is not None}
    if upload_logo is not None:
        changes["logo"] = upload_logo()
    if upload_cover is not None:
        changes["cover"] = upload_cover()

    for name, value in changes.items():
        setattr(shop, name, value)
    db.commit()
    db.refresh(shop)
    logger.info("%s profile updated tenant_id=%s fields=%s", AUTH_PREFIX, tenant_id, sorted(changes))
    return shop


def storefront(db: Session, tenant_id: str) -> Dict[str, Any]:
    shop = get_shop(db, tenant_id)
    menu = find_menu(db, tenant_id)
    return {
        "shop": public_shop_to_dict(shop),
        "menu": menu_to_dict(menu) if menu is not None else None,
    }


# =========================
# STAFF
# =========================
def list_staff(db: Session, tenant_id: str) -> list[StaffMember]:
    shop = find_shop(db, tenant_id)
    if shop is None:
        return []
    return list(shop.staff)


def add_staff(db: Session, tenant_id: str, payload: StaffCreate) -> list[StaffMember]:
    shop = get_shop(db, tenant_id)
    if any(member.pin == payload.pin for member in shop.staff):
        raise ValidationError("PIN already in use")

    shop.staff.append(StaffMember(name=payload.name, pin=payload.pin, role=payload.role))
    try:
        db.commit()
    except IntegrityError as exc:
        # same PIN registered concurrently by another request
        db.rollback()
        raise ValidationError("PIN already in use") from exc

    db.refresh(shop)
    logger.info("%s added tenant_id=%s role=%s", STAFF_PREFIX, tenant_id, payload.role)
    return list(shop.staff)


def delete_staff(db: Session, tenant_id: str, staff_id: int) -> None:
    """Idempotent; a staff id from another shop is never touched."""
    deleted = (
        db.query(StaffMember)
        .filter(
            StaffMember.id == staff_id,
            StaffMember.shop_id.in_(select(Shop.id).where(Shop.tenant_id == tenant_id)),
        )
        .delete(synchronize_session=False)
    )
    db.commit()
    logger.info("%s delete tenant_id=%s staff_id=%s removed=%s", STAFF_PREFIX, tenant_id, staff_id, deleted)
