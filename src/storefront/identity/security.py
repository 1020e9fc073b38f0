"""Password hashing, bearer tokens and reset tokens."""

import hashlib
import os
import secrets
from datetime import UTC, datetime, timedelta

import jwt
from passlib.context import CryptContext

from storefront.shared.errors import NotAuthenticated

JWT_ALGORITHM = "HS256"
RESET_TOKEN_TTL = timedelta(minutes=10)

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def _jwt_secret() -> str:
    return os.getenv("JWT_SECRET", "storefront-dev-secret")


def _jwt_lifetime() -> timedelta:
    return timedelta(days=int(os.getenv("JWT_EXPIRES_DAYS", "7")))


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def create_access_token(user_id: str, role: str) -> str:
    now = datetime.now(UTC)
    payload = {"id": str(user_id), "role": role, "iat": now, "exp": now + _jwt_lifetime()}
    return jwt.encode(payload, _jwt_secret(), algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    try:
        payload = jwt.decode(token, _jwt_secret(), algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise NotAuthenticated("Token expired") from None
    except jwt.InvalidTokenError:
        raise NotAuthenticated("Not authorized to access this route") from None

    if not payload.get("id"):
        raise NotAuthenticated("Not authorized to access this route")
    return payload


def new_reset_token() -> tuple[str, str]:
    """Return a raw reset token and the digest that gets stored."""
    token = secrets.token_hex(20)
    return token, digest_reset_token(token)


def digest_reset_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()
