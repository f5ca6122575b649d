"""
Auth Service - password hashing, JWT tokens and staff accounts
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from pharmadesk.core.config import Settings
from pharmadesk.core.exceptions import AuthenticationError, DuplicateKey, PermissionDenied
from pharmadesk.models import AppUser
from pharmadesk.schemas.auth import UserCreate

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"

# Role anyone may register for without an admin token
SELF_SERVICE_ROLE = "cashier"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash using bcrypt"""
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def get_password_hash(password: str) -> str:
    """Hash a password using bcrypt"""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def create_access_token(settings: Settings, data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token"""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(settings: Settings, token: str) -> dict:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError as e:
        raise AuthenticationError("Could not validate credentials") from e


class AuthService:
    """Staff account business logic"""

    @staticmethod
    def get_user_by_username(db: Session, username: str) -> Optional[AppUser]:
        return db.query(AppUser).filter(AppUser.username == username).first()

    @staticmethod
    def get_user_by_id(db: Session, user_id: int) -> Optional[AppUser]:
        return db.query(AppUser).filter(AppUser.id == user_id).first()

    @staticmethod
    def register(db: Session, data: UserCreate, created_by: Optional[AppUser] = None) -> AppUser:
        """Create a staff account.

        Anyone may open a cashier account; admin and pharmacist accounts
        can only be created by an admin.
        """
        if data.role != SELF_SERVICE_ROLE and (created_by is None or created_by.role != "admin"):
            requester = created_by.username if created_by else "anonymous"
            logger.warning(f"Refused {data.role} account {data.username} requested by {requester}")
            raise PermissionDenied(f"Only an admin may create {data.role} accounts")

        if AuthService.get_user_by_username(db, data.username):
            raise DuplicateKey(f"Username {data.username} is already taken")

        user = AppUser(
            username=data.username,
            hashed_password=get_password_hash(data.password),
            full_name=data.full_name,
            email=data.email,
            role=data.role,
            is_active=True,
        )
        db.add(user)
        db.commit()
        db.refresh(user)

        logger.info(f"Registered user {user.username} ({user.role})")
        return user

    @staticmethod
    def ensure_admin(db: Session, username: str, password: str) -> AppUser:
        """Create the configured administrator if the username is free"""
        user = AuthService.get_user_by_username(db, username)
        if user:
            return user

        user = AppUser(
            username=username,
            hashed_password=get_password_hash(password),
            full_name="Administrator",
            role="admin",
            is_active=True,
        )
        db.add(user)
        db.commit()
        db.refresh(user)

        logger.info(f"Created administrator account {username}")
        return user

    @staticmethod
    def authenticate(db: Session, username: str, password: str) -> AppUser:
        user = AuthService.get_user_by_username(db, username)
        if not user or not verify_password(password, user.hashed_password):
            logger.warning(f"Failed login attempt for {username}")
            raise AuthenticationError("Incorrect username or password")

        if not user.is_active:
            raise AuthenticationError("User account is disabled")

        return user

    @staticmethod
    def issue_token(settings: Settings, user: AppUser) -> str:
        return create_access_token(settings, {"sub": str(user.id), "username": user.username, "role": user.role})

    @staticmethod
    def user_from_token(db: Session, settings: Settings, token: str) -> AppUser:
        payload = decode_access_token(settings, token)
        user_id = payload.get("sub")
        if user_id is None:
            raise AuthenticationError("Could not validate credentials")

        user = AuthService.get_user_by_id(db, int(user_id))
        if not user or not user.is_active:
            raise AuthenticationError("Could not validate credentials")
        return user
