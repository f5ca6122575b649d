"""
Transaction Service - sales to patients

Adding an item is a sale: the medicine's stock is decremented in the same
database transaction that records the line.
"""
import enum
import logging
import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from pharmadesk.core.exceptions import ConsistencyError, InvalidTransition, NotFound, ValidationError
from pharmadesk.models import AuditLog, Medicine, Patient, Prescription, Transaction, TransactionItem
from pharmadesk.schemas.transaction import TransactionCreate, TransactionItemCreate
from pharmadesk.services.context import ServiceContext, medicine_key
from pharmadesk.services.inventory_service import InventoryService

logger = logging.getLogger(__name__)


class TransactionStatus(str, enum.Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# No items may be added once a transaction reaches one of these
CLOSED_STATUSES = (TransactionStatus.COMPLETED.value, TransactionStatus.CANCELLED.value)


def parse_transaction_status(value: str) -> TransactionStatus:
    try:
        return TransactionStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in TransactionStatus)
        raise ValidationError(f"Unknown transaction status '{value}' (expected one of: {allowed})")


class TransactionService:
    """Transaction business logic"""

    @staticmethod
    def get_transactions(
        db: Session,
        patient_id: Optional[int] = None,
        status: Optional[str] = None,
    ) -> List[Transaction]:
        query = db.query(Transaction)

        if patient_id:
            query = query.filter(Transaction.patient_id == patient_id)

        if status:
            query = query.filter(Transaction.status == parse_transaction_status(status).value)

        return query.order_by(Transaction.date.desc(), Transaction.id.desc()).all()

    @staticmethod
    def get_transaction_by_id(db: Session, transaction_id: int) -> Optional[Transaction]:
        return db.query(Transaction).filter(Transaction.id == transaction_id).first()

    @staticmethod
    def get_transaction_or_404(db: Session, transaction_id: int) -> Transaction:
        transaction = TransactionService.get_transaction_by_id(db, transaction_id)
        if not transaction:
            raise NotFound("Transaction", transaction_id)
        return transaction

    @staticmethod
    def _number_for(transaction: Transaction) -> str:
        """Display number derived from the row id, so it is unique without a counter"""
        return f"TX-{transaction.date:%Y%m%d}-{transaction.id:04d}"

    @staticmethod
    def create_transaction(db: Session, data: TransactionCreate) -> Transaction:
        """Open an empty pending transaction"""
        if not db.query(Patient.id).filter(Patient.id == data.patient_id).first():
            raise NotFound("Patient", data.patient_id)

        if data.prescription_id is not None:
            if not db.query(Prescription.id).filter(Prescription.id == data.prescription_id).first():
                raise NotFound("Prescription", data.prescription_id)

        transaction = Transaction(
            patient_id=data.patient_id,
            prescription_id=data.prescription_id,
            # Placeholder until the insert assigns an id
            transaction_number=f"TX-NEW-{uuid.uuid4().hex[:16]}",
            date=datetime.now(),
            total_amount=0,
            status=TransactionStatus.PENDING.value,
        )

        try:
            db.add(transaction)
            db.flush()
            transaction.transaction_number = TransactionService._number_for(transaction)
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise ConsistencyError(f"Could not open transaction: {e.orig}") from e

        db.refresh(transaction)

        logger.info(f"Opened transaction {transaction.transaction_number} for patient {data.patient_id}")
        return transaction

    @staticmethod
    def add_item(ctx: ServiceContext, transaction_id: int, item_data: TransactionItemCreate) -> TransactionItem:
        """Sell a medicine line: decrement stock, record the line, update the total"""
        db = ctx.db
        transaction = TransactionService.get_transaction_or_404(db, transaction_id)

        if transaction.status in CLOSED_STATUSES:
            raise ConsistencyError(
                f"Cannot add items to {transaction.status} transaction {transaction.transaction_number}"
            )

        with ctx.locks.hold(medicine_key(item_data.medicine_id)):
            try:
                InventoryService(ctx).record_sale(item_data.medicine_id, item_data.quantity, commit=False)

                medicine = db.get(Medicine, item_data.medicine_id)
                unit_price = item_data.unit_price if item_data.unit_price is not None else medicine.price

                item = TransactionItem(
                    medicine_id=item_data.medicine_id,
                    quantity=item_data.quantity,
                    unit_price=unit_price,
                    line_price=unit_price * item_data.quantity,
                )
                transaction.items.append(item)
                transaction.total_amount = (transaction.total_amount or 0) + item.line_price

                ctx.commit()
            except Exception:
                ctx.rollback()
                raise

        db.refresh(item)
        logger.info(
            f"Transaction {transaction.transaction_number}: sold {item.quantity} x medicine "
            f"#{item.medicine_id} for {item.line_price}"
        )
        return item

    @staticmethod
    def update_status(
        ctx: ServiceContext,
        transaction_id: int,
        new_status: str,
        performed_by: Optional[int] = None,
    ) -> Transaction:
        """Update status; nothing leaves cancelled, re-issuing the current status is a no-op"""
        requested = parse_transaction_status(new_status).value
        transaction = TransactionService.get_transaction_or_404(ctx.db, transaction_id)

        old_status = transaction.status
        if requested == old_status:
            return transaction

        if old_status == TransactionStatus.CANCELLED.value:
            raise InvalidTransition("transaction", old_status, requested)

        transaction.status = requested
        ctx.db.add(AuditLog(
            table_name=Transaction.__tablename__,
            record_id=str(transaction_id),
            action="STATUS_CHANGE",
            performed_by=performed_by,
            before_data={"status": old_status},
            after_data={"status": requested},
        ))
        ctx.commit()
        ctx.db.refresh(transaction)

        logger.info(f"Transaction {transaction.transaction_number}: {old_status} -> {requested}")
        return transaction
