"""
Auth Router — Thin Controller (SRP / DIP)
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from smarthourly.database import get_db
from smarthourly.dependencies import get_current_user
from smarthourly.models.user import User
from smarthourly.schemas.user import LoginRequest, RegisterRequest, TokenResponse, UserResponse
from smarthourly.services.user_service import UserService, to_user_response

router = APIRouter(prefix="/auth", tags=["Authentication"])


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return UserService(db)


@router.post("/register", response_model=UserResponse, status_code=201)
def register(body: RegisterRequest, service: UserService = Depends(get_user_service)):
    return to_user_response(service.register(body))


@router.post("/login", response_model=TokenResponse)
def login(body: LoginRequest, service: UserService = Depends(get_user_service)):
    return service.login(body)


@router.get("/me", response_model=UserResponse)
def me(current_user: User = Depends(get_current_user)):
    return to_user_response(current_user)
