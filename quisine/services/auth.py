from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
from jose import JWTError, jwt

from quisine.core.config import JWT_ALGORITHM, JWT_EXPIRE_MINUTES, JWT_SECRET_KEY


# =========================
# PASSWORDS (bcrypt)
# =========================
def _normalize_password_for_bcrypt(password: str) -> bytes:
    """bcrypt only looks at the first 72 bytes; longer input is truncated instead of raising."""
    pw = (password or "").encode("utf-8")
    if len(pw) <= 72:
        return pw
    return pw[:72]


def hash_password(password: str) -> str:
    pw = _normalize_password_for_bcrypt(password)
    return bcrypt.hashpw(pw, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    try:
        pw = _normalize_password_for_bcrypt(plain_password)
        return bcrypt.checkpw(pw, (password_hash or "").encode("utf-8"))
    except ValueError:
        return False


# =========================
# JWT HELPERS
# =========================
def create_access_token(
    shop_id: int,
    tenant_id: str,
    extra: Optional[Dict[str, Any]] = None,
    expires_minutes: int = JWT_EXPIRE_MINUTES,
) -> str:
    """
    "sub" must be a string, so the numeric shop id is stringified.
    "tenant_id" is what every admin route is authorized against.
    """
    now = datetime.now(timezone.utc)
    exp = now + timedelta(minutes=expires_minutes)

    payload: Dict[str, Any] = {
        "sub": str(shop_id),
        "tenant_id": tenant_id,
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
    }
    if extra:
        payload.update(extra)

    return jwt.encode(payload, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> Dict[str, Any]:
    """Return the JWT payload or raise ValueError when invalid or expired."""
    try:
        return jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError as e:
        raise ValueError("Invalid or expired token") from e
