"""
Auth routes: login (JWT + session cookie), register (role student), logout, GET /api/auth/me.
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from taskboard.config import settings
from taskboard.models.types import STUDENT
from taskboard.models.user import User
from taskboard.schemas.auth import LoginRequest, LoginResponse, RegisterRequest, UserEnvelope, UserResponse
from taskboard.schemas.common import MessageResponse
from taskboard.services.auth import authenticate_user, create_access_token, hash_password
from taskboard.services.store import Store
from taskboard.api.deps import get_current_user, get_store, bad_request, server_error

router = APIRouter(prefix="/api/auth", tags=["auth"])
logger = logging.getLogger(__name__)


def user_to_response(user: User) -> UserResponse:
    return UserResponse(id=str(user.id), email=user.email, name=user.name, role=user.role)


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_max_age_seconds,
        httponly=True,
        samesite="lax",
        secure=settings.is_production,
    )


@router.post("/login", response_model=LoginResponse)
def login(data: LoginRequest, response: Response, store: Store = Depends(get_store)):
    """Login with email/password; returns user + JWT and sets the session cookie."""
    user = authenticate_user(store, data.email, data.password)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")
    token = create_access_token(user.id, user.email, user.role)
    set_session_cookie(response, token)
    logger.info("Login user_id=%s role=%s", user.id, user.role)
    return LoginResponse(user=user_to_response(user), token=token)


@router.post("/register", response_model=UserEnvelope, status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, store: Store = Depends(get_store)):
    """Self-registration; new accounts are students."""
    email = data.email.strip().lower()
    if store.users.find_by_email(email):
        raise bad_request("Email already registered")
    try:
        user = store.users.create(
            email=email,
            password_hash=hash_password(data.password),
            name=data.name.strip(),
            role=STUDENT,
        )
    except IntegrityError as e:
        store.rollback()
        logger.warning("Register IntegrityError: %s", e)
        raise bad_request("Email already registered")
    except SQLAlchemyError as e:
        store.rollback()
        logger.exception("Register failed: %s", e)
        raise server_error("Registration", e)
    return UserEnvelope(user=user_to_response(user))


@router.post("/logout", response_model=MessageResponse)
def logout(response: Response):
    """Clear the session cookie. The JWT itself stays valid until it expires."""
    response.delete_cookie(settings.session_cookie_name, httponly=True, samesite="lax")
    return MessageResponse(message="Logged out")


@router.get("/me", response_model=UserEnvelope)
def me(current_user: User = Depends(get_current_user)):
    """Return current user (id, email, name, role)."""
    return UserEnvelope(user=user_to_response(current_user))
