"""
Transaction Schemas
"""
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

class TransactionItemCreate(BaseModel):
    medicine_id: int
    quantity: int = Field(gt=0)
    unit_price: Optional[int] = Field(default=None, ge=0)  # defaults to the medicine price

    class Config:
        extra = "forbid"

class TransactionCreate(BaseModel):
    patient_id: int
    prescription_id: Optional[int] = None

    class Config:
        extra = "forbid"

class StatusUpdate(BaseModel):
    status: str

class TransactionItemResponse(BaseModel):
    id: int
    transaction_id: int
    medicine_id: int
    quantity: int
    unit_price: int
    line_price: int

    class Config:
        from_attributes = True

class TransactionResponse(BaseModel):
    id: int
    patient_id: int
    prescription_id: Optional[int]
    transaction_number: str
    date: datetime
    total_amount: int
    status: str
    items: List[TransactionItemResponse] = []

    class Config:
        from_attributes = True
