"""
Prescription Schemas
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import date

class PrescriptionItemCreate(BaseModel):
    medicine_id: int
    dosage: str = Field(min_length=1)
    frequency: str = Field(min_length=1)
    duration: str = Field(min_length=1)
    quantity: int = Field(gt=0)

    class Config:
        extra = "forbid"

class PrescriptionCreate(BaseModel):
    patient_id: int
    doctor_id: int
    prescription_number: str = Field(min_length=1, max_length=50)
    issue_date: date
    notes: Optional[str] = None
    items: List[PrescriptionItemCreate] = []

    class Config:
        extra = "forbid"

class PrescriptionUpdate(BaseModel):
    doctor_id: Optional[int] = None
    issue_date: Optional[date] = None
    notes: Optional[str] = None

    @field_validator("doctor_id", "issue_date", mode="before")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v

    class Config:
        extra = "forbid"

class PrescriptionItemResponse(BaseModel):
    id: int
    prescription_id: int
    medicine_id: int
    dosage: str
    frequency: str
    duration: str
    quantity: int

    class Config:
        from_attributes = True

class PrescriptionResponse(BaseModel):
    id: int
    patient_id: int
    doctor_id: int
    prescription_number: str
    issue_date: date
    notes: Optional[str]
    items: List[PrescriptionItemResponse] = []

    class Config:
        from_attributes = True
