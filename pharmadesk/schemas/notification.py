"""
Notification Preference Schemas
"""
from typing import Optional

from pydantic import BaseModel

class NotificationPreferences(BaseModel):
    """Which notification kinds the user receives; every field is required on update"""
    low_stock: bool
    expiry_warning: bool
    order_status_changed: bool
    new_prescription: bool

    class Config:
        from_attributes = True
        extra = "forbid"

class RecipientResponse(BaseModel):
    id: int
    username: str
    full_name: Optional[str]
    email: Optional[str]
    role: str

    class Config:
        from_attributes = True
