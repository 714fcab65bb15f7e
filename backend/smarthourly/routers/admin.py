from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from smarthourly.database import get_db
from smarthourly.dependencies import require_roles
from smarthourly.models.user import User
from smarthourly.schemas.user import AdminUserView, RoleUpdateRequest
from smarthourly.services.user_service import UserService


router = APIRouter(prefix="/admin", tags=["User Administration"])

ADMIN_ROLES = ["admin"]


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db)


@router.get("/users", response_model=List[AdminUserView])
def list_users(
    search: Optional[str] = None,
    service: UserService = Depends(get_user_service),
    current_user: User = Depends(require_roles(ADMIN_ROLES)),
):
    return service.list_users(current_user_id=current_user.id, search=search)


@router.put("/users/{user_id}/role")
def change_role(
    user_id: int,
    body: RoleUpdateRequest,
    service: UserService = Depends(get_user_service),
    current_user: User = Depends(require_roles(ADMIN_ROLES)),
):
    entry = service.change_role(user_id, body.role, changed_by=current_user.id)
    return {"id": entry.id, "role": entry.role}
