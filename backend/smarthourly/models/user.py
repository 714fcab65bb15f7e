from typing import Optional

from sqlalchemy import (
    Column,
    Integer,
    String,
    Boolean,
    DateTime,
    ForeignKey,
    CheckConstraint,
    func,
)
from sqlalchemy.orm import relationship
from smarthourly.database import Base


ROLES = ("operator", "supervisor", "admin")
DEFAULT_ROLE = "operator"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=func.now(), nullable=False)

    role_entry = relationship("UserRole", uselist=False, back_populates="user", cascade="all, delete-orphan")
    profile = relationship("Profile", uselist=False, back_populates="user", cascade="all, delete-orphan")

    @property
    def role(self) -> Optional[str]:
        # no user_roles row means no role, matching RoleResolver
        return self.role_entry.role if self.role_entry else None

    @property
    def name(self) -> str:
        if self.profile and self.profile.name:
            return self.profile.name
        return self.email.split("@")[0]


class UserRole(Base):
    __tablename__ = "user_roles"
    __table_args__ = (
        CheckConstraint(
            "role IN ('operator', 'supervisor', 'admin')",
            name="ck_user_roles_role",
        ),
    )

    id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    role = Column(String(20), nullable=False, default=DEFAULT_ROLE, index=True)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

    user = relationship("User", back_populates="role_entry")


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    name = Column(String(200), nullable=True)
    department = Column(String(100), nullable=True)
    phone = Column(String(50), nullable=True)

    user = relationship("User", back_populates="profile")
