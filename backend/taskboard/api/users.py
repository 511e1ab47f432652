"""
Users API: list (admin/teacher, never exposes password hashes), create and update (admin).
"""
import logging
import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from taskboard.models.types import STUDENT
from taskboard.models.user import User
from taskboard.schemas.auth import Role, UserCreateRequest, UserEnvelope, UserListResponse, UserUpdateRequest
from taskboard.services import permissions
from taskboard.services.auth import hash_password
from taskboard.services.store import Store
from taskboard.api.auth import user_to_response
from taskboard.api.deps import get_current_user, get_store, bad_request, forbidden, not_found, server_error

router = APIRouter(prefix="/api/users", tags=["users"])
logger = logging.getLogger(__name__)


@router.get("", response_model=UserListResponse)
def list_users(
    role: Role | None = None,
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """List users (id, email, name, role), optionally filtered by role."""
    if not permissions.can_list_users(current_user):
        raise forbidden("Access denied - admin or teacher only")
    users = store.users.find_all(role=role)
    return UserListResponse(users=[user_to_response(u) for u in users])


@router.post("", response_model=UserEnvelope, status_code=status.HTTP_201_CREATED)
def create_user(
    data: UserCreateRequest,
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    if not permissions.can_manage_users(current_user):
        raise forbidden("Access denied - admin only")
    email = data.email.strip().lower()
    if store.users.find_by_email(email):
        raise bad_request("Email already registered")
    try:
        user = store.users.create(
            email=email,
            password_hash=hash_password(data.password),
            name=data.name.strip(),
            role=data.role,
        )
    except IntegrityError as e:
        store.rollback()
        logger.warning("User create IntegrityError: %s", e)
        raise bad_request("Email already registered")
    except SQLAlchemyError as e:
        store.rollback()
        logger.exception("User create failed: %s", e)
        raise server_error("User creation", e)
    logger.info("User %s (%s) created by admin user_id=%s", user.id, user.role, current_user.id)
    return UserEnvelope(user=user_to_response(user))


@router.put("/{user_id}", response_model=UserEnvelope)
def update_user(
    user_id: uuid.UUID,
    data: UserUpdateRequest,
    current_user: User = Depends(get_current_user),
    store: Store = Depends(get_store),
):
    """Change name, role or password. Email is immutable."""
    if not permissions.can_manage_users(current_user):
        raise forbidden("Access denied - admin only")
    user = store.users.find_by_id(user_id)
    if user is None:
        raise not_found("User")
    fields = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    if not fields:
        raise bad_request("No fields to update")
    # Tasks, shares and class memberships may only reference students
    if fields.get("role", STUDENT) != STUDENT and user.role == STUDENT and store.users.has_student_records(user.id):
        raise bad_request("Cannot change the role of a student who has tasks, shared tasks or class memberships")
    if "password" in fields:
        fields["password_hash"] = hash_password(fields.pop("password"))
    if "name" in fields:
        fields["name"] = fields["name"].strip()
    try:
        user = store.users.update(user_id, fields)
    except SQLAlchemyError as e:
        store.rollback()
        logger.exception("User update failed: %s", e)
        raise server_error("User update", e)
    if user is None:
        raise not_found("User")
    return UserEnvelope(user=user_to_response(user))
