"""
Medicine Service - Business Logic for the medicine catalogue
"""
import logging
from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from pharmadesk.core.exceptions import NotFound
from pharmadesk.models import Medicine, PrescriptionItem, TransactionItem, PurchaseOrderItem, Supplier
from pharmadesk.schemas.medicine import MedicineCreate, MedicineUpdate
from pharmadesk.services.base import ensure_unreferenced
from pharmadesk.services.context import ServiceContext, medicine_key
from pharmadesk.services.inventory_service import InventoryService
from pharmadesk.stock import derive_status

logger = logging.getLogger(__name__)


class MedicineService:
    """Medicine CRUD; stock edits are delegated to InventoryService"""

    references = (
        (PrescriptionItem, PrescriptionItem.medicine_id),
        (TransactionItem, TransactionItem.medicine_id),
        (PurchaseOrderItem, PurchaseOrderItem.medicine_id),
    )

    @staticmethod
    def get_medicines(
        db: Session,
        search: Optional[str] = None,
        category: Optional[str] = None,
        stock_status: Optional[str] = None,
        kind: Optional[str] = None,
        supplier_id: Optional[int] = None,
    ) -> List[Medicine]:
        """Get medicines with filters"""
        query = db.query(Medicine)

        if category:
            query = query.filter(Medicine.category == category)

        if stock_status:
            query = query.filter(Medicine.stock_status == stock_status)

        if kind:
            query = query.filter(Medicine.kind == kind)

        if supplier_id:
            query = query.filter(Medicine.supplier_id == supplier_id)

        if search:
            search_term = f"%{search.lower()}%"
            query = query.filter(
                or_(
                    func.lower(Medicine.name).like(search_term),
                    func.lower(Medicine.batch_number).like(search_term),
                )
            )

        return query.order_by(Medicine.name).all()

    @staticmethod
    def get_medicine_by_id(db: Session, medicine_id: int) -> Optional[Medicine]:
        return db.query(Medicine).filter(Medicine.id == medicine_id).first()

    @staticmethod
    def get_medicine_or_404(db: Session, medicine_id: int) -> Medicine:
        medicine = MedicineService.get_medicine_by_id(db, medicine_id)
        if not medicine:
            raise NotFound("Medicine", medicine_id)
        return medicine

    @staticmethod
    def get_medicine_by_name(db: Session, name: str) -> Optional[Medicine]:
        """Case-insensitive lookup by name"""
        return db.query(Medicine).filter(func.lower(Medicine.name) == name.lower()).first()

    @staticmethod
    def _check_supplier(db: Session, supplier_id: Optional[int]) -> None:
        if supplier_id is not None and not db.query(Supplier).filter(Supplier.id == supplier_id).first():
            raise NotFound("Supplier", supplier_id)

    @staticmethod
    def create_medicine(db: Session, medicine_data: MedicineCreate) -> Medicine:
        """Create new medicine with a derived stock status"""
        MedicineService._check_supplier(db, medicine_data.supplier_id)

        values = medicine_data.model_dump()
        values["kind"] = medicine_data.kind.value
        medicine = Medicine(**values)
        medicine.stock_status = derive_status(medicine.stock_quantity).value

        db.add(medicine)
        db.commit()
        db.refresh(medicine)

        logger.info(f"Created medicine {medicine.name} (#{medicine.id}) with {medicine.stock_quantity} units")
        return medicine

    @staticmethod
    def update_medicine(ctx: ServiceContext, medicine_id: int, medicine_data: MedicineUpdate) -> Optional[Medicine]:
        """Update medicine; a stock_quantity change is a stock adjustment"""
        changes = medicine_data.model_dump(exclude_unset=True)

        with ctx.locks.hold(medicine_key(medicine_id)):
            medicine = MedicineService.get_medicine_by_id(ctx.db, medicine_id)
            if not medicine:
                return None

            if "supplier_id" in changes:
                MedicineService._check_supplier(ctx.db, changes["supplier_id"])

            new_quantity = changes.pop("stock_quantity", None)

            for field, value in changes.items():
                if field == "kind" and value is not None:
                    value = value.value
                setattr(medicine, field, value)

            if new_quantity is not None:
                # Flush field edits before the stock row is re-read under lock
                ctx.db.flush()
                InventoryService(ctx).adjust_stock(medicine_id, new_quantity, commit=False)

            ctx.commit()
            ctx.db.refresh(medicine)
            return medicine

    @staticmethod
    def delete_medicine(db: Session, medicine_id: int) -> bool:
        medicine = MedicineService.get_medicine_by_id(db, medicine_id)
        if not medicine:
            return False

        ensure_unreferenced(db, "Medicine", medicine_id, MedicineService.references)

        db.delete(medicine)
        db.commit()
        logger.info(f"Deleted medicine #{medicine_id}")
        return True
