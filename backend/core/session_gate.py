import logging
from urllib.parse import quote

import jwt
from fastapi import Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi_users.jwt import decode_jwt

from core.auth import SECRET, TOKEN_AUDIENCE
from core.config import settings

logger = logging.getLogger(__name__)

# Reachable without a session.
PUBLIC_PREFIXES = ("/login", "/api/auth/login", "/uploads/", "/static/", "/favicon.ico")


def is_public(path: str) -> bool:
    return any(path == p or path.startswith(p) for p in PUBLIC_PREFIXES)


def has_valid_session(request: Request) -> bool:
    token = request.cookies.get(settings.session_cookie_name)
    if not token:
        return False
    try:
        decode_jwt(token, SECRET, TOKEN_AUDIENCE)
    except jwt.PyJWTError:
        return False
    return True


async def session_gate(request: Request, call_next):
    """Reject requests without a verifiable session cookie.

    API callers get a 401; browser navigation is sent to the login page.
    """
    path = request.url.path
    if is_public(path) or has_valid_session(request):
        return await call_next(request)

    if path.startswith("/api/"):
        return JSONResponse({"detail": "Unauthorized"}, status_code=status.HTTP_401_UNAUTHORIZED)
    logger.debug("Redirecting unauthenticated request for %s to login", path)
    return RedirectResponse(f"/login?next={quote(path)}", status_code=status.HTTP_307_TEMPORARY_REDIRECT)
