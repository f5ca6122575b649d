"""
Medicine Model
"""
from sqlalchemy import Column, String, Integer, Date, ForeignKey, Text, CheckConstraint
from sqlalchemy.orm import relationship
from pharmadesk.core import Base
from .base import IdMixin, TimestampMixin

class Medicine(Base, IdMixin, TimestampMixin):
    """Medicine master with on-hand stock"""
    __tablename__ = "medicine"

    name = Column(String(200), nullable=False, index=True)
    description = Column(Text)
    category = Column(String(100), nullable=False, index=True)
    kind = Column(String(20), nullable=False, default="prescription")  # otc, prescription, antibiotic, painkiller

    price = Column(Integer, nullable=False, default=0)  # minor units (cents)

    # Stock - stock_status is always derive_status(stock_quantity)
    stock_quantity = Column(Integer, nullable=False, default=0)
    stock_status = Column(String(20), nullable=False, default="out_of_stock", index=True)

    expiry_date = Column(Date, index=True)
    batch_number = Column(String(50))
    supplier_id = Column(Integer, ForeignKey("supplier.id"), index=True)

    # Optimistic concurrency counter
    version = Column(Integer, nullable=False, default=1)

    # Relationships
    supplier = relationship("Supplier", back_populates="medicines")

    __table_args__ = (
        CheckConstraint("stock_quantity >= 0", name="ck_medicine_stock_non_negative"),
    )
    __mapper_args__ = {"version_id_col": version}
