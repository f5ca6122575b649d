"""
Application User & Notification Preferences
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from pharmadesk.core import Base
from .base import IdMixin

class AppUser(Base, IdMixin):
    """Staff account"""
    __tablename__ = "app_user"

    username = Column(String(100), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    full_name = Column(String(200))
    email = Column(String(200))
    role = Column(String(20), nullable=False, default="cashier")  # admin, pharmacist, cashier
    is_active = Column(Boolean, default=True, nullable=False)
    date_joined = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    notification_preference = relationship(
        "NotificationPreference", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )

class NotificationPreference(Base, IdMixin):
    """Per-user opt-in for each notification kind; no row means every kind is on"""
    __tablename__ = "notification_preference"

    user_id = Column(Integer, ForeignKey("app_user.id"), unique=True, nullable=False)
    low_stock = Column(Boolean, default=True, nullable=False)
    expiry_warning = Column(Boolean, default=True, nullable=False)
    order_status_changed = Column(Boolean, default=True, nullable=False)
    new_prescription = Column(Boolean, default=True, nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    user = relationship("AppUser", back_populates="notification_preference")
