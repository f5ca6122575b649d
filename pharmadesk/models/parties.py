"""
Reference Entities: Patient, Doctor, Supplier
"""
from sqlalchemy import Column, String, Date, Text
from sqlalchemy.orm import relationship
from pharmadesk.core import Base
from .base import IdMixin, TimestampMixin

class Patient(Base, IdMixin, TimestampMixin):
    """Patient"""
    __tablename__ = "patient"

    name = Column(String(200), nullable=False, index=True)
    date_of_birth = Column(Date)
    gender = Column(String(20))
    contact_number = Column(String(30))
    email = Column(String(200))
    address = Column(Text)
    allergies = Column(Text)
    medical_history = Column(Text)

    # Relationships
    prescriptions = relationship("Prescription", back_populates="patient")
    transactions = relationship("Transaction", back_populates="patient")

class Doctor(Base, IdMixin, TimestampMixin):
    """Prescribing Doctor"""
    __tablename__ = "doctor"

    name = Column(String(200), nullable=False, index=True)
    specialization = Column(String(100))
    contact_number = Column(String(30))
    email = Column(String(200))
    address = Column(Text)
    license_number = Column(String(50))

    # Relationships
    prescriptions = relationship("Prescription", back_populates="doctor")

class Supplier(Base, IdMixin, TimestampMixin):
    """Medicine Supplier"""
    __tablename__ = "supplier"

    name = Column(String(200), nullable=False, index=True)
    contact_person = Column(String(200))
    contact_number = Column(String(30))
    email = Column(String(200))
    address = Column(Text)
    notes = Column(Text)

    # Relationships
    medicines = relationship("Medicine", back_populates="supplier")
    orders = relationship("PurchaseOrder", back_populates="supplier")
