from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from smarthourly.core.exceptions import BusinessRuleViolationError
from smarthourly.models.user import Profile, User, UserRole
from smarthourly.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    def __init__(self, db: Session):
        super().__init__(User, db)

    def get_by_email(self, email: str) -> Optional[User]:
        with self.guarded():
            return self.db.query(User).filter(User.email == email.strip().lower()).first()

    def create(self, obj: User) -> User:
        # the unique email index decides a registration race
        try:
            return super().create(obj)
        except IntegrityError as exc:
            raise BusinessRuleViolationError(f"User '{obj.email}' already exists.") from exc

    def list_with_roles(self) -> List[User]:
        with self.guarded():
            return (
                self.db.query(User)
                .join(UserRole, UserRole.id == User.id)
                .options(joinedload(User.role_entry), joinedload(User.profile))
                .all()
            )

    def get_role(self, user_id: int) -> Optional[str]:
        with self.guarded():
            row = self.db.query(UserRole.role).filter(UserRole.id == user_id).first()
        return row.role if row else None

    def upsert_role(self, user_id: int, role: str) -> UserRole:
        with self.guarded():
            entry = self.db.query(UserRole).filter(UserRole.id == user_id).first()
        if entry:
            entry.role = role
        else:
            entry = UserRole(id=user_id, role=role)
            self.db.add(entry)
        self.commit()
        with self.guarded():
            self.db.refresh(entry)
        return entry

    def count_role(self, role: str) -> int:
        with self.guarded():
            return self.db.query(UserRole).filter(UserRole.role == role).count()

    def profile_names_for_role(self, role: str) -> List[str]:
        with self.guarded():
            rows = (
                self.db.query(Profile.name)
                .join(UserRole, UserRole.id == Profile.id)
                .filter(UserRole.role == role, Profile.name.isnot(None), Profile.name != "")
                .order_by(Profile.name.asc())
                .all()
            )
        return [r.name for r in rows]
