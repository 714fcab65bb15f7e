"""
User Service — registration, login and admin role management.
"""
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from smarthourly.core.exceptions import (
    AuthenticationError,
    BusinessRuleViolationError,
    NotFoundError,
    ValidationError,
)
from smarthourly.models.user import DEFAULT_ROLE, ROLES, Profile, User, UserRole
from smarthourly.repositories.user_repository import UserRepository
from smarthourly.schemas.user import (
    AdminUserView,
    LoginRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from smarthourly.utils.events import RoleChangedEvent, get_event_bus
from smarthourly.utils.security import create_access_token, get_password_hash, verify_password


logger = logging.getLogger(__name__)


def to_user_response(user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        name=user.name,
        role=user.role,
        department=user.profile.department if user.profile else None,
        phone=user.profile.phone if user.profile else None,
    )


class UserService:

    def __init__(self, db: Session):
        self._repo = UserRepository(db)
        self._bus = get_event_bus()

    def register(self, body: RegisterRequest) -> User:
        email = body.email.strip().lower()
        if "@" not in email:
            raise ValidationError("A valid email address is required.", field="email")
        if self._repo.get_by_email(email):
            raise BusinessRuleViolationError(f"User '{email}' already exists.")

        user = User(email=email, hashed_password=get_password_hash(body.password))
        user.role_entry = UserRole(role=DEFAULT_ROLE)
        user.profile = Profile(name=body.name.strip(), department=body.department, phone=body.phone)
        result = self._repo.create(user)
        logger.info("user_registered id=%s role=%s", result.id, DEFAULT_ROLE)
        return result

    def login(self, body: LoginRequest) -> TokenResponse:
        user = self._repo.get_by_email(body.email)
        if not user or not user.is_active or not verify_password(body.password, user.hashed_password):
            raise AuthenticationError("Incorrect email or password.")
        return TokenResponse(access_token=create_access_token(user.id, user.role), role=user.role)

    def list_users(self, current_user_id: Optional[int] = None, search: Optional[str] = None) -> List[AdminUserView]:
        views = []
        for user in self._repo.list_with_roles():
            profile = user.profile
            views.append(AdminUserView(
                id=user.id,
                email=user.email,
                name=(profile.name if profile and profile.name else "Unknown User"),
                role=user.role,
                department=(profile.department if profile and profile.department else "-"),
                phone=(profile.phone if profile and profile.phone else "-"),
                is_current_user=user.id == current_user_id,
            ))

        if search:
            needle = search.strip().lower()
            views = [
                v for v in views
                if needle in v.name.lower()
                or needle in v.email.lower()
                or needle in v.department.lower()
                or needle in v.phone
            ]
        return sorted(views, key=lambda v: v.name.lower())

    def change_role(self, user_id: int, new_role: str, changed_by: Optional[int] = None) -> UserRole:
        if new_role not in ROLES:
            raise ValidationError(f"Role must be one of {', '.join(ROLES)}.", field="role")
        user = self._repo.get_by_id(user_id)
        if not user:
            raise NotFoundError("User", user_id)

        old_role = self._repo.get_role(user_id)
        if old_role == "admin" and new_role != "admin" and self._repo.count_role("admin") <= 1:
            raise BusinessRuleViolationError("Cannot remove the last admin.")

        entry = self._repo.upsert_role(user_id, new_role)
        logger.info("role_changed user_id=%s old=%s new=%s by=%s", user_id, old_role, new_role, changed_by)
        self._bus.publish(RoleChangedEvent(
            entity_type="user", entity_id=user_id, user_id=changed_by,
            old_role=old_role, new_role=new_role,
        ))
        return entry
