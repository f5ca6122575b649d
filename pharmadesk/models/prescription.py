"""
Prescription Models
"""
from sqlalchemy import Column, String, Integer, Date, ForeignKey, Text
from sqlalchemy.orm import relationship
from pharmadesk.core import Base
from .base import IdMixin, TimestampMixin

class Prescription(Base, IdMixin, TimestampMixin):
    """Prescription Header"""
    __tablename__ = "prescription"

    patient_id = Column(Integer, ForeignKey("patient.id"), nullable=False, index=True)
    doctor_id = Column(Integer, ForeignKey("doctor.id"), nullable=False, index=True)
    prescription_number = Column(String(50), unique=True, nullable=False, index=True)
    issue_date = Column(Date, nullable=False)
    notes = Column(Text)

    # Relationships
    patient = relationship("Patient", back_populates="prescriptions")
    doctor = relationship("Doctor", back_populates="prescriptions")
    items = relationship("PrescriptionItem", back_populates="prescription", cascade="all, delete-orphan")
    transactions = relationship("Transaction", back_populates="prescription")

class PrescriptionItem(Base, IdMixin):
    """Prescribed medicine line (informational, never moves stock)"""
    __tablename__ = "prescription_item"

    prescription_id = Column(Integer, ForeignKey("prescription.id"), nullable=False, index=True)
    medicine_id = Column(Integer, ForeignKey("medicine.id"), nullable=False, index=True)
    dosage = Column(String(100), nullable=False)
    frequency = Column(String(100), nullable=False)
    duration = Column(String(100), nullable=False)
    quantity = Column(Integer, nullable=False)

    # Relationships
    prescription = relationship("Prescription", back_populates="items")
    medicine = relationship("Medicine")
