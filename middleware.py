import logging
from typing import Optional

import jwt
from fastapi import Depends, Header, Request
from fastapi.responses import JSONResponse

import database
from auth_helper import verify_token
from utils import ensure_object_id

logger = logging.getLogger(__name__)


class EnvelopeError(Exception):
    """Raised by route guards; rendered as the bare envelope instead of FastAPI's {"detail": ...}."""

    def __init__(self, status_code: int, message: str, error: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.error = error


async def envelope_error_handler(request: Request, exc: EnvelopeError):
    content = {"success": False, "message": exc.message}
    if exc.error is not None:
        content["error"] = exc.error
    return JSONResponse(status_code=exc.status_code, content=content)


def require_sign_in(authorization: Optional[str] = Header(None)) -> dict:
    token = (authorization or "").strip()
    if token.lower().startswith("bearer "):
        token = token[7:].strip()
    if not token:
        raise EnvelopeError(401, "Unauthorized: Invalid or missing token")
    try:
        return verify_token(token)
    except jwt.PyJWTError as exc:
        logger.info("Rejected bearer token: %s", exc)
        raise EnvelopeError(401, "Unauthorized: Invalid or missing token")


def is_admin(auth: dict = Depends(require_sign_in)) -> dict:
    try:
        user = database.collection("user").find_one({"_id": ensure_object_id(auth.get("_id"))})
    except Exception as exc:
        logger.error("Error in admin middleware: %s", exc)
        raise EnvelopeError(401, "Error in admin middleware", str(exc))
    if not user or user.get("role") != 1:
        raise EnvelopeError(401, "UnAuthorized Access")
    return auth
