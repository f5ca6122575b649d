# Services Package
from .context import ServiceContext, medicine_key, order_key
from .notification_service import NotificationCenter, NotificationEvent, WebhookDeliverer, log_deliverer
from .preference_service import PreferenceService, RecipientDirectory
from .inventory_service import InventoryService, StockChange
from .medicine_service import MedicineService
from .alert_service import AlertService
from .parties_service import PatientService, DoctorService, SupplierService
from .prescription_service import PrescriptionService
from .transaction_service import TransactionService, TransactionStatus
from .order_service import OrderService, OrderStatus
from .auth_service import AuthService
from .dashboard_service import DashboardService

__all__ = [
    "ServiceContext", "medicine_key", "order_key",
    "NotificationCenter", "NotificationEvent", "WebhookDeliverer", "log_deliverer",
    "PreferenceService", "RecipientDirectory",
    "InventoryService", "StockChange",
    "MedicineService",
    "AlertService",
    "PatientService", "DoctorService", "SupplierService",
    "PrescriptionService",
    "TransactionService", "TransactionStatus",
    "OrderService", "OrderStatus",
    "AuthService",
    "DashboardService",
]
