"""
Order Service - purchase orders to suppliers

Entering ``delivered`` credits the ordered quantities to stock exactly once;
the order's ``fulfilled`` flag guards against a second credit.
"""
import enum
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from pharmadesk.core.exceptions import ConsistencyError, InvalidTransition, NotFound, ValidationError
from pharmadesk.models import AuditLog, Medicine, PurchaseOrder, PurchaseOrderItem, Supplier
from pharmadesk.schemas.order import OrderCreate, OrderItemCreate
from pharmadesk.services.context import ServiceContext, order_key
from pharmadesk.services.inventory_service import InventoryService
from pharmadesk.services.notification_service import order_status_changed_event

logger = logging.getLogger(__name__)


class OrderStatus(str, enum.Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


def parse_order_status(value: str) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in OrderStatus)
        raise ValidationError(f"Unknown order status '{value}' (expected one of: {allowed})")


class OrderService:
    """Purchase order business logic"""

    # Valid status transitions (forward skips allowed, cancel from any open state)
    STATUS_TRANSITIONS = {
        "pending": ["processing", "shipped", "delivered", "cancelled"],
        "processing": ["shipped", "delivered", "cancelled"],
        "shipped": ["delivered", "cancelled"],
        "delivered": [],
        "cancelled": [],
    }

    # Items may only be added while the order is still being assembled
    EDITABLE_STATUSES = ("pending", "processing")

    @staticmethod
    def get_orders(
        db: Session,
        status: Optional[str] = None,
        supplier_id: Optional[int] = None,
    ) -> List[PurchaseOrder]:
        query = db.query(PurchaseOrder)

        if status:
            query = query.filter(PurchaseOrder.status == parse_order_status(status).value)

        if supplier_id:
            query = query.filter(PurchaseOrder.supplier_id == supplier_id)

        return query.order_by(PurchaseOrder.order_date.desc(), PurchaseOrder.id.desc()).all()

    @staticmethod
    def get_order_by_id(db: Session, order_id: int) -> Optional[PurchaseOrder]:
        return db.query(PurchaseOrder).filter(PurchaseOrder.id == order_id).first()

    @staticmethod
    def get_order_or_404(db: Session, order_id: int) -> PurchaseOrder:
        order = OrderService.get_order_by_id(db, order_id)
        if not order:
            raise NotFound("Order", order_id)
        return order

    @staticmethod
    def _build_item(db: Session, item_data: OrderItemCreate) -> PurchaseOrderItem:
        if not db.query(Medicine.id).filter(Medicine.id == item_data.medicine_id).first():
            raise NotFound("Medicine", item_data.medicine_id)
        return PurchaseOrderItem(**item_data.model_dump())

    @staticmethod
    def create_order(db: Session, order_data: OrderCreate) -> PurchaseOrder:
        """Create a pending order with its items"""
        if not db.query(Supplier.id).filter(Supplier.id == order_data.supplier_id).first():
            raise NotFound("Supplier", order_data.supplier_id)

        order = PurchaseOrder(
            supplier_id=order_data.supplier_id,
            order_date=datetime.now(),
            expected_delivery_date=order_data.expected_delivery_date,
            notes=order_data.notes,
            status=OrderStatus.PENDING.value,
            fulfilled=False,
        )
        for item_data in order_data.items:
            order.items.append(OrderService._build_item(db, item_data))

        db.add(order)
        db.commit()
        db.refresh(order)

        logger.info(f"Created order #{order.id} for supplier {order.supplier_id} with {len(order.items)} item(s)")
        return order

    @staticmethod
    def add_item(ctx: ServiceContext, order_id: int, item_data: OrderItemCreate) -> PurchaseOrderItem:
        db = ctx.db
        # Serialized with status changes so an item cannot slip in after delivery
        with ctx.locks.hold(order_key(order_id)):
            order = OrderService.get_order_or_404(db, order_id)
            db.refresh(order)

            if order.status not in OrderService.EDITABLE_STATUSES:
                raise ConsistencyError(f"Cannot add items to order {order_id} in status {order.status}")

            item = OrderService._build_item(db, item_data)
            order.items.append(item)
            ctx.commit()

        db.refresh(item)
        return item

    @staticmethod
    def update_status(
        ctx: ServiceContext,
        order_id: int,
        new_status: str,
        performed_by: Optional[int] = None,
    ) -> PurchaseOrder:
        """Update order status with validation; delivery restocks the items"""
        requested = parse_order_status(new_status).value
        db = ctx.db

        with ctx.locks.hold(order_key(order_id)):
            order = OrderService.get_order_or_404(db, order_id)
            db.refresh(order)

            current_status = order.status
            if requested == current_status:
                # Re-issuing the current status changes nothing
                return order

            allowed = OrderService.STATUS_TRANSITIONS.get(current_status, [])
            if requested not in allowed:
                raise InvalidTransition("order", current_status, requested)

            try:
                order.status = requested
                db.add(AuditLog(
                    table_name=PurchaseOrder.__tablename__,
                    record_id=str(order_id),
                    action="STATUS_CHANGE",
                    performed_by=performed_by,
                    before_data={"status": current_status},
                    after_data={"status": requested},
                ))

                if requested == OrderStatus.DELIVERED.value:
                    # Status must reach the database before the order row is re-read under lock
                    db.flush()
                    InventoryService(ctx).record_delivery(order_id, commit=False)

                ctx.emit(order_status_changed_event(order_id, current_status, requested))
                ctx.commit()
            except Exception:
                ctx.rollback()
                raise

            db.refresh(order)

        logger.info(f"Order #{order_id}: {current_status} -> {requested}")
        return order

    @staticmethod
    def get_history(db: Session, order_id: int) -> List[AuditLog]:
        """Status changes of an order, oldest first"""
        OrderService.get_order_or_404(db, order_id)
        return db.query(AuditLog).filter(
            AuditLog.table_name == PurchaseOrder.__tablename__,
            AuditLog.record_id == str(order_id),
        ).order_by(AuditLog.performed_at, AuditLog.id).all()
