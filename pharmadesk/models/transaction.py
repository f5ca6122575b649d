"""
Sales Transaction Models
"""
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from pharmadesk.core import Base
from .base import IdMixin, TimestampMixin

class Transaction(Base, IdMixin, TimestampMixin):
    """Sale to a patient"""
    __tablename__ = "sale_transaction"

    patient_id = Column(Integer, ForeignKey("patient.id"), nullable=False, index=True)
    prescription_id = Column(Integer, ForeignKey("prescription.id"), index=True)
    transaction_number = Column(String(30), unique=True, nullable=False, index=True)
    date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    total_amount = Column(Integer, nullable=False, default=0)  # cents, sum of line prices
    status = Column(String(20), nullable=False, default="pending", index=True)  # pending, completed, cancelled

    # Relationships
    patient = relationship("Patient", back_populates="transactions")
    prescription = relationship("Prescription", back_populates="transactions")
    items = relationship("TransactionItem", back_populates="transaction", cascade="all, delete-orphan")

class TransactionItem(Base, IdMixin):
    """Sold medicine line"""
    __tablename__ = "transaction_item"

    transaction_id = Column(Integer, ForeignKey("sale_transaction.id"), nullable=False, index=True)
    medicine_id = Column(Integer, ForeignKey("medicine.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Integer, nullable=False)
    line_price = Column(Integer, nullable=False)

    # Relationships
    transaction = relationship("Transaction", back_populates="items")
    medicine = relationship("Medicine")
