"""
Prescription Service - Business Logic for Prescriptions
"""
import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from pharmadesk.core.exceptions import DuplicateKey, NotFound
from pharmadesk.models import Prescription, PrescriptionItem, Patient, Doctor, Medicine, Transaction
from pharmadesk.schemas.prescription import PrescriptionCreate, PrescriptionItemCreate, PrescriptionUpdate
from pharmadesk.services.base import ensure_unreferenced
from pharmadesk.services.context import ServiceContext
from pharmadesk.services.notification_service import new_prescription_event

logger = logging.getLogger(__name__)


class PrescriptionService:
    """Prescriptions are informational: they never move stock"""

    @staticmethod
    def _require(db: Session, model, resource: str, record_id: int) -> None:
        if not db.query(model.id).filter(model.id == record_id).first():
            raise NotFound(resource, record_id)

    @staticmethod
    def _build_item(db: Session, item_data: PrescriptionItemCreate) -> PrescriptionItem:
        PrescriptionService._require(db, Medicine, "Medicine", item_data.medicine_id)
        return PrescriptionItem(**item_data.model_dump())

    @staticmethod
    def get_prescriptions(
        db: Session,
        patient_id: Optional[int] = None,
        doctor_id: Optional[int] = None,
        search: Optional[str] = None,
    ) -> List[Prescription]:
        query = db.query(Prescription)

        if patient_id:
            query = query.filter(Prescription.patient_id == patient_id)

        if doctor_id:
            query = query.filter(Prescription.doctor_id == doctor_id)

        if search:
            query = query.filter(Prescription.prescription_number.ilike(f"%{search}%"))

        return query.order_by(Prescription.issue_date.desc(), Prescription.id.desc()).all()

    @staticmethod
    def get_prescription_by_id(db: Session, prescription_id: int) -> Optional[Prescription]:
        return db.query(Prescription).filter(Prescription.id == prescription_id).first()

    @staticmethod
    def get_prescription_by_number(db: Session, number: str) -> Optional[Prescription]:
        return db.query(Prescription).filter(Prescription.prescription_number == number).first()

    @staticmethod
    def get_patient_prescriptions(db: Session, patient_id: int) -> List[Prescription]:
        PrescriptionService._require(db, Patient, "Patient", patient_id)
        return PrescriptionService.get_prescriptions(db, patient_id=patient_id)

    @staticmethod
    def create_prescription(ctx: ServiceContext, data: PrescriptionCreate) -> Prescription:
        """Create prescription with its items and announce it"""
        db = ctx.db
        PrescriptionService._require(db, Patient, "Patient", data.patient_id)
        PrescriptionService._require(db, Doctor, "Doctor", data.doctor_id)

        if PrescriptionService.get_prescription_by_number(db, data.prescription_number):
            raise DuplicateKey(f"Prescription number {data.prescription_number} already exists")

        prescription = Prescription(
            patient_id=data.patient_id,
            doctor_id=data.doctor_id,
            prescription_number=data.prescription_number,
            issue_date=data.issue_date,
            notes=data.notes,
        )
        for item_data in data.items:
            prescription.items.append(PrescriptionService._build_item(db, item_data))

        db.add(prescription)
        try:
            db.flush()
        except IntegrityError as e:
            # Lost a race on the unique number
            ctx.rollback()
            raise DuplicateKey(f"Prescription number {data.prescription_number} already exists") from e

        ctx.emit(new_prescription_event(prescription.id, prescription.prescription_number))
        ctx.commit()
        db.refresh(prescription)

        logger.info(f"Created prescription {prescription.prescription_number} with {len(prescription.items)} item(s)")
        return prescription

    @staticmethod
    def update_prescription(db: Session, prescription_id: int, data: PrescriptionUpdate) -> Optional[Prescription]:
        prescription = PrescriptionService.get_prescription_by_id(db, prescription_id)
        if not prescription:
            return None

        changes = data.model_dump(exclude_unset=True)
        if changes.get("doctor_id") is not None:
            PrescriptionService._require(db, Doctor, "Doctor", changes["doctor_id"])

        for field, value in changes.items():
            setattr(prescription, field, value)

        db.commit()
        db.refresh(prescription)
        return prescription

    @staticmethod
    def add_item(db: Session, prescription_id: int, item_data: PrescriptionItemCreate) -> PrescriptionItem:
        prescription = PrescriptionService.get_prescription_by_id(db, prescription_id)
        if not prescription:
            raise NotFound("Prescription", prescription_id)

        item = PrescriptionService._build_item(db, item_data)
        prescription.items.append(item)

        db.commit()
        db.refresh(item)
        return item

    @staticmethod
    def delete_prescription(db: Session, prescription_id: int) -> bool:
        prescription = PrescriptionService.get_prescription_by_id(db, prescription_id)
        if not prescription:
            return False

        ensure_unreferenced(db, "Prescription", prescription_id, ((Transaction, Transaction.prescription_id),))

        db.delete(prescription)
        db.commit()
        logger.info(f"Deleted prescription #{prescription_id}")
        return True
