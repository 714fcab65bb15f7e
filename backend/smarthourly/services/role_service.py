"""
Role resolution — single capability-check collaborator.

Roles live in ``user_roles``; a user without a row is treated as having no
role at all, not as an operator.
"""
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from smarthourly.core.exceptions import PermissionDeniedError
from smarthourly.repositories.user_repository import UserRepository


class RoleResolver:
    def __init__(self, db: Session):
        self._repo = UserRepository(db)

    def role_of(self, user_id: int) -> Optional[str]:
        return self._repo.get_role(user_id)

    def require(self, user_id: int, allowed: Iterable[str]) -> str:
        allowed = list(allowed)
        role = self.role_of(user_id)
        if role not in allowed:
            raise PermissionDeniedError(
                f"Role '{role or 'none'}' is not permitted; requires one of {', '.join(allowed)}."
            )
        return role

    def atl_roster(self) -> List[str]:
        """Names eligible for the ATL field: profiles of supervisor-role users."""
        return self._repo.profile_names_for_role("supervisor")
