"""
Purchase Order Models
"""
from sqlalchemy import Column, String, Integer, Boolean, Date, DateTime, ForeignKey, Text, func
from sqlalchemy.orm import relationship
from pharmadesk.core import Base
from .base import IdMixin, TimestampMixin

class PurchaseOrder(Base, IdMixin, TimestampMixin):
    """Purchase order to a supplier"""
    __tablename__ = "purchase_order"

    supplier_id = Column(Integer, ForeignKey("supplier.id"), nullable=False, index=True)
    order_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    expected_delivery_date = Column(Date)
    status = Column(String(20), nullable=False, default="pending", index=True)  # pending, processing, shipped, delivered, cancelled
    notes = Column(Text)

    # Set once the delivered stock has been credited
    fulfilled = Column(Boolean, nullable=False, default=False)
    fulfilled_at = Column(DateTime(timezone=True))

    # Relationships
    supplier = relationship("Supplier", back_populates="orders")
    items = relationship("PurchaseOrderItem", back_populates="order", cascade="all, delete-orphan")

class PurchaseOrderItem(Base, IdMixin):
    """Ordered medicine line"""
    __tablename__ = "purchase_order_item"

    order_id = Column(Integer, ForeignKey("purchase_order.id"), nullable=False, index=True)
    medicine_id = Column(Integer, ForeignKey("medicine.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    unit_cost = Column(Integer)  # cents

    # Relationships
    order = relationship("PurchaseOrder", back_populates="items")
    medicine = relationship("Medicine")
