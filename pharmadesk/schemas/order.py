"""
Purchase Order Schemas
"""
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import date, datetime

class OrderItemCreate(BaseModel):
    medicine_id: int
    quantity: int = Field(gt=0)
    unit_cost: Optional[int] = Field(default=None, ge=0)

    class Config:
        extra = "forbid"

class OrderCreate(BaseModel):
    supplier_id: int
    expected_delivery_date: Optional[date] = None
    notes: Optional[str] = None
    items: List[OrderItemCreate] = []

    class Config:
        extra = "forbid"

class OrderItemResponse(BaseModel):
    id: int
    order_id: int
    medicine_id: int
    quantity: int
    unit_cost: Optional[int]

    class Config:
        from_attributes = True

class OrderResponse(BaseModel):
    id: int
    supplier_id: int
    order_date: datetime
    expected_delivery_date: Optional[date]
    status: str
    notes: Optional[str]
    fulfilled: bool
    fulfilled_at: Optional[datetime]
    items: List[OrderItemResponse] = []

    class Config:
        from_attributes = True

class AuditEntryResponse(BaseModel):
    id: int
    action: str
    before_data: Optional[dict]
    after_data: Optional[dict]
    performed_by: Optional[int]
    performed_at: Optional[datetime]

    class Config:
        from_attributes = True
