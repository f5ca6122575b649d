from .base import IdMixin, TimestampMixin
from .medicine import Medicine
from .parties import Patient, Doctor, Supplier
from .prescription import Prescription, PrescriptionItem
from .transaction import Transaction, TransactionItem
from .order import PurchaseOrder, PurchaseOrderItem
from .user import AppUser, NotificationPreference
from .audit import AuditLog

__all__ = [
    # Base
    "IdMixin", "TimestampMixin",
    # Inventory
    "Medicine",
    # Parties
    "Patient", "Doctor", "Supplier",
    # Prescription
    "Prescription", "PrescriptionItem",
    # Sales
    "Transaction", "TransactionItem",
    # Purchasing
    "PurchaseOrder", "PurchaseOrderItem",
    # Users & audit
    "AppUser", "NotificationPreference", "AuditLog",
]
