from typing import Callable, List

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from smarthourly.core.exceptions import AuthenticationError
from smarthourly.database import get_db
from smarthourly.models.user import User
from smarthourly.repositories.user_repository import UserRepository
from smarthourly.services.role_service import RoleResolver
from smarthourly.utils.security import decode_access_token


bearer_scheme = HTTPBearer()


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    user_id = decode_access_token(credentials.credentials)
    if user_id is None:
        raise AuthenticationError("Invalid or expired token.")
    user = UserRepository(db).get_by_id(user_id)
    if not user or not user.is_active:
        raise AuthenticationError("User not found or inactive.")
    return user


def require_roles(roles: List[str]) -> Callable[..., User]:
    """Role is looked up on every request so a role change applies immediately."""

    def checker(
        current_user: User = Depends(get_current_user),
        db: Session = Depends(get_db),
    ) -> User:
        RoleResolver(db).require(current_user.id, roles)
        return current_user

    return checker
