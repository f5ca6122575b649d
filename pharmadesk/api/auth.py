"""
Authentication API - Register, Login, JWT Token
"""
from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from pharmadesk.api.deps import get_app_settings, get_current_active_user, get_current_user
from pharmadesk.core import Settings, get_db
from pharmadesk.models import AppUser
from pharmadesk.schemas.auth import LoginRequest, Token, UserCreate, UserResponse
from pharmadesk.services import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(
    data: UserCreate,
    db: Session = Depends(get_db),
    current_user: Optional[AppUser] = Depends(get_current_user),
):
    """Open a cashier account; other roles need an admin token"""
    return AuthService.register(db, data, created_by=current_user)


@router.post("/login", response_model=Token)
def login(data: LoginRequest, db: Session = Depends(get_db), settings: Settings = Depends(get_app_settings)):
    """Login with username/password, returns a bearer token"""
    user = AuthService.authenticate(db, data.username, data.password)
    return Token(
        access_token=AuthService.issue_token(settings, user),
        token_type="bearer",
        user=UserResponse.model_validate(user),
    )


@router.get("/me", response_model=UserResponse)
def read_current_user(current_user: AppUser = Depends(get_current_active_user)):
    return current_user
