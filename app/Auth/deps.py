from fastapi import HTTPException, Request, status
from jose import JWTError
from typing import Any, TypedDict

from app.Core.config import Settings
from .service import decode_access_token


def _extract_cookie_or_bearer(request: Request, settings: Settings) -> str | None:
    cookie = request.cookies.get(settings.cookie_name)
    if cookie:
        return cookie
    auth = request.headers.get("Authorization", "")
    if auth.startswith("Bearer "):
        return auth.removeprefix("Bearer ").strip() or None
    return None


class Claims(TypedDict, total=False):
    sub: str
    email: str
    role: str
    exp: int


def get_current_claims(request: Request) -> Claims:
    settings: Settings = request.app.state.settings
    token = _extract_cookie_or_bearer(request, settings)
    if not token:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Unauthorized - No token provided")
    try:
        claims: dict[str, Any] = decode_access_token(token, settings)
    except JWTError:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Unauthorized - Invalid token")
    if not claims.get("sub"):
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Unauthorized - Invalid token")
    return claims  # type: ignore[return-value]
