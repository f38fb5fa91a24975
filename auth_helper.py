from datetime import datetime, timedelta, timezone

import jwt
from passlib.context import CryptContext

from config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

TOKEN_ALGORITHM = "HS256"


class MissingSecretError(RuntimeError):
    """JWT_SECRET is not configured; tokens can be neither issued nor verified."""


def _secret() -> str:
    if not settings.jwt_secret:
        raise MissingSecretError("JWT_SECRET environment variable is not set")
    return settings.jwt_secret


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def compare_password(password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(password, hashed_password or "")
    except ValueError:
        # unrecognised or malformed hash
        return False


def issue_token(user_id) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "_id": str(user_id),
        "iat": now,
        "exp": now + timedelta(days=settings.token_expiry_days),
    }
    return jwt.encode(payload, _secret(), algorithm=TOKEN_ALGORITHM)


def verify_token(token: str) -> dict:
    """Return the token payload; raises jwt.PyJWTError on a bad signature or expiry."""
    return jwt.decode(token, _secret(), algorithms=[TOKEN_ALGORITHM])
