# Pydantic Schemas Package
from .medicine import MedicineCreate, MedicineUpdate, MedicineResponse, ExpiringMedicineResponse
from .parties import (
    PatientCreate, PatientUpdate, PatientResponse,
    DoctorCreate, DoctorUpdate, DoctorResponse,
    SupplierCreate, SupplierUpdate, SupplierResponse,
)
from .prescription import PrescriptionCreate, PrescriptionUpdate, PrescriptionItemCreate, PrescriptionResponse
from .transaction import TransactionCreate, TransactionItemCreate, TransactionResponse, StatusUpdate
from .order import OrderCreate, OrderItemCreate, OrderResponse
from .notification import NotificationPreferences, RecipientResponse

__all__ = [
    "MedicineCreate", "MedicineUpdate", "MedicineResponse", "ExpiringMedicineResponse",
    "PatientCreate", "PatientUpdate", "PatientResponse",
    "DoctorCreate", "DoctorUpdate", "DoctorResponse",
    "SupplierCreate", "SupplierUpdate", "SupplierResponse",
    "PrescriptionCreate", "PrescriptionUpdate", "PrescriptionItemCreate", "PrescriptionResponse",
    "TransactionCreate", "TransactionItemCreate", "TransactionResponse", "StatusUpdate",
    "OrderCreate", "OrderItemCreate", "OrderResponse",
    "NotificationPreferences", "RecipientResponse",
]
