"""
Patient, Doctor & Supplier Services
"""
from pharmadesk.models import Patient, Doctor, Supplier, Prescription, Transaction, Medicine, PurchaseOrder
from pharmadesk.services.base import EntityService


class PatientService(EntityService):
    model = Patient
    resource = "Patient"
    search_fields = ("name", "contact_number", "email")
    references = (
        (Prescription, Prescription.patient_id),
        (Transaction, Transaction.patient_id),
    )


class DoctorService(EntityService):
    model = Doctor
    resource = "Doctor"
    search_fields = ("name", "specialization", "license_number")
    references = (
        (Prescription, Prescription.doctor_id),
    )


class SupplierService(EntityService):
    model = Supplier
    resource = "Supplier"
    search_fields = ("name", "contact_person")
    references = (
        (Medicine, Medicine.supplier_id),
        (PurchaseOrder, PurchaseOrder.supplier_id),
    )
