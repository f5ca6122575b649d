"""
Patient, Doctor & Supplier Schemas
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import date

# ===================== PATIENT =====================

class PatientCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    contact_number: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    allergies: Optional[str] = None
    medical_history: Optional[str] = None

    class Config:
        extra = "forbid"

class PatientUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    contact_number: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    allergies: Optional[str] = None
    medical_history: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def name_not_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v

    class Config:
        extra = "forbid"

class PatientResponse(PatientCreate):
    id: int

    class Config:
        from_attributes = True

# ===================== DOCTOR =====================

class DoctorCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    specialization: Optional[str] = None
    contact_number: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    license_number: Optional[str] = None

    class Config:
        extra = "forbid"

class DoctorUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    specialization: Optional[str] = None
    contact_number: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    license_number: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def name_not_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v

    class Config:
        extra = "forbid"

class DoctorResponse(DoctorCreate):
    id: int

    class Config:
        from_attributes = True

# ===================== SUPPLIER =====================

class SupplierCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    contact_person: Optional[str] = None
    contact_number: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None

    class Config:
        extra = "forbid"

class SupplierUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    contact_person: Optional[str] = None
    contact_number: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def name_not_null(cls, v):
        if v is None:
            raise ValueError("may not be null")
        return v

    class Config:
        extra = "forbid"

class SupplierResponse(SupplierCreate):
    id: int

    class Config:
        from_attributes = True
