"""
Medicine Schemas
"""
from pydantic import BaseModel, Field, computed_field, field_validator
from typing import Optional
from datetime import date

from pharmadesk.stock import MedicineKind, reorder_quantity

class MedicineCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    category: str = Field(min_length=1, max_length=100)
    kind: MedicineKind = MedicineKind.PRESCRIPTION
    price: int = Field(ge=0)  # cents
    stock_quantity: int = Field(default=0, ge=0)
    expiry_date: Optional[date] = None
    batch_number: Optional[str] = None
    supplier_id: Optional[int] = None

    class Config:
        extra = "forbid"

class MedicineUpdate(BaseModel):
    """Settable fields; stock_status is never accepted"""
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    category: Optional[str] = Field(default=None, min_length=1, max_length=100)
    kind: Optional[MedicineKind] = None
    price: Optional[int] = Field(default=None, ge=0)
    stock_quantity: Optional[int] = Field(default=None, ge=0)
    expiry_date: Optional[date] = None
    batch_number: Optional[str] = None
    supplier_id: Optional[int] = None

    @field_validator("name", "category", "kind", "price", "stock_quantity", mode="before")
    @classmethod
    def not_null(cls, v):
        # Omitted means unchanged; these columns can never be cleared
        if v is None:
            raise ValueError("may not be null")
        return v

    class Config:
        extra = "forbid"

class MedicineResponse(BaseModel):
    id: int
    name: str
    description: Optional[str]
    category: str
    kind: str
    price: int
    stock_quantity: int
    stock_status: str
    expiry_date: Optional[date]
    batch_number: Optional[str]
    supplier_id: Optional[int]

    @computed_field
    @property
    def reorder_quantity(self) -> int:
        return reorder_quantity(self.kind, self.stock_quantity, self.category)

    class Config:
        from_attributes = True

class ExpiringMedicineResponse(MedicineResponse):
    days_remaining: int
