"""
Shared API dependencies: settings, service context, current user
"""
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from pharmadesk.core import Settings, get_db
from pharmadesk.core.exceptions import AuthenticationError, PermissionDenied
from pharmadesk.models import AppUser
from pharmadesk.services import AuthService, NotificationCenter, ServiceContext

# OAuth2 scheme
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_notifier(request: Request) -> NotificationCenter:
    return request.app.state.notifier


def get_context(request: Request, db: Session = Depends(get_db)) -> ServiceContext:
    """Unit of work for one request"""
    return ServiceContext(db, request.app.state.locks, request.app.state.notifier)


def get_current_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> Optional[AppUser]:
    """Get current user from JWT token, None when no token was sent"""
    if not token:
        return None
    return AuthService.user_from_token(db, settings, token)


def get_current_active_user(current_user: Optional[AppUser] = Depends(get_current_user)) -> AppUser:
    """Require authenticated and active user"""
    if not current_user:
        raise AuthenticationError("Not authenticated")
    return current_user


def require_role(*roles: str):
    """Dependency factory: the current user must hold one of ``roles``"""
    def checker(user: AppUser = Depends(get_current_active_user)) -> AppUser:
        if user.role not in roles:
            raise PermissionDenied(f"Role '{user.role}' may not perform this action")
        return user
    return checker
