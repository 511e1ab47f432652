"""
Shared dependencies: the record store for the request and the current user from the session cookie or a Bearer token.
"""
import logging
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from taskboard.config import settings
from taskboard.database import get_db
from taskboard.models.user import User
from taskboard.services.auth import decode_session
from taskboard.services.store import Store

security = HTTPBearer(auto_error=False)
logger = logging.getLogger(__name__)


def get_store(db: Session = Depends(get_db)) -> Store:
    return Store(db)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    store: Store = Depends(get_store),
) -> User:
    """Require a valid session (cookie first, then Bearer header); return User or 401."""
    tokens = [
        request.cookies.get(settings.session_cookie_name),
        (getattr(credentials, "credentials", None) or "").strip() if credentials else None,
    ]
    tokens = [t for t in tokens if t]
    if not tokens:
        logger.debug("Auth failed: no session cookie or Bearer token in request")
        raise _unauthorized("Not authenticated")
    # A stale cookie does not shadow a valid Bearer token
    claims = next((c for c in map(decode_session, tokens) if c is not None), None)
    if claims is None:
        logger.debug("Auth failed: invalid or expired token")
        raise _unauthorized("Invalid or expired session")
    user = store.users.find_by_id(claims.user_id)
    if not user:
        raise _unauthorized("User not found")
    return user


def forbidden(detail: str = "Permission denied") -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def not_found(what: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{what} not found")


def bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def server_error(action: str, exc: Exception) -> HTTPException:
    """500 for an unexpected failure; detail carries the exception only in debug mode."""
    detail = f"{action} failed. Check server logs for details."
    if getattr(settings, "debug", False):
        detail = f"{action} failed: {type(exc).__name__}: {exc}"
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)
