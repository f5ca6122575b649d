"""
Inventory Service - stock reconciliation for sales and deliveries

Every quantity change goes through ``_apply`` so that stock_status is
recomputed before the row is persisted. Mutations of one medicine are
serialized by the per-medicine lock and a row lock (SELECT ... FOR UPDATE
where the database supports it); the medicine's version column catches
anything that slips past both.
"""
import logging
from collections import OrderedDict
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from pharmadesk.core.exceptions import ConsistencyError, NotFound, ValidationError
from pharmadesk.models import Medicine, PurchaseOrder
from pharmadesk.services.context import ServiceContext, medicine_key, order_key
from pharmadesk.services.notification_service import NotificationEvent, low_stock_event
from pharmadesk.stock import crossed_into_alert, derive_status

logger = logging.getLogger(__name__)


@dataclass
class StockChange:
    medicine_id: int
    name: str
    old_quantity: int
    new_quantity: int
    old_status: str
    new_status: str

    @property
    def delta(self) -> int:
        return self.new_quantity - self.old_quantity

    @property
    def raises_alert(self) -> bool:
        return crossed_into_alert(self.old_status, self.new_status)

    def alert_event(self) -> Optional[NotificationEvent]:
        if not self.raises_alert:
            return None
        return low_stock_event(self.medicine_id, self.name, self.new_status, self.new_quantity)


class InventoryService:
    """Stock reconciliation business logic"""

    def __init__(self, ctx: ServiceContext):
        self.ctx = ctx
        self.db = ctx.db

    def _load_medicine(self, medicine_id: int) -> Medicine:
        medicine = self.db.query(Medicine).filter(
            Medicine.id == medicine_id
        ).with_for_update().populate_existing().first()

        if not medicine:
            raise NotFound("Medicine", medicine_id)
        return medicine

    def _apply(self, medicine: Medicine, new_quantity: int) -> StockChange:
        if new_quantity < 0:
            raise ConsistencyError(
                f"Stock of {medicine.name} cannot go below zero (requested {new_quantity})"
            )

        change = StockChange(
            medicine_id=medicine.id,
            name=medicine.name,
            old_quantity=medicine.stock_quantity,
            new_quantity=new_quantity,
            old_status=medicine.stock_status,
            new_status=derive_status(new_quantity).value,
        )
        medicine.stock_quantity = change.new_quantity
        medicine.stock_status = change.new_status

        event = change.alert_event()
        if event:
            self.ctx.emit(event)

        logger.info(
            f"Stock {medicine.name} (#{medicine.id}): {change.old_quantity} -> {change.new_quantity}, "
            f"{change.old_status} -> {change.new_status}"
        )
        return change

    def record_sale(self, medicine_id: int, quantity: int, commit: bool = True) -> StockChange:
        """Consume stock for a sold item. Rejects oversell instead of going negative."""
        if quantity <= 0:
            raise ValidationError("Sale quantity must be positive")

        with self.ctx.locks.hold(medicine_key(medicine_id)):
            medicine = self._load_medicine(medicine_id)

            if quantity > medicine.stock_quantity:
                logger.warning(
                    f"Rejected sale of {quantity} x {medicine.name} (#{medicine.id}): "
                    f"only {medicine.stock_quantity} on hand"
                )
                raise ConsistencyError(
                    f"Insufficient stock for {medicine.name}: requested {quantity}, "
                    f"on hand {medicine.stock_quantity}"
                )

            change = self._apply(medicine, medicine.stock_quantity - quantity)
            if commit:
                self.ctx.commit()
            return change

    def adjust_stock(self, medicine_id: int, new_quantity: int, commit: bool = True) -> StockChange:
        """Direct stock edit (stock count, correction)"""
        with self.ctx.locks.hold(medicine_key(medicine_id)):
            medicine = self._load_medicine(medicine_id)
            change = self._apply(medicine, new_quantity)
            if commit:
                self.ctx.commit()
            return change

    def record_delivery(self, order_id: int, commit: bool = True) -> List[StockChange]:
        """Credit a delivered purchase order's items to stock, exactly once."""
        with self.ctx.locks.hold(order_key(order_id)):
            order = self.db.query(PurchaseOrder).filter(
                PurchaseOrder.id == order_id
            ).with_for_update().populate_existing().first()

            if not order:
                raise NotFound("Order", order_id)

            if order.fulfilled:
                raise ConsistencyError(f"Order {order_id} has already been received into stock")

            # Sum per medicine so each row is touched once
            quantities = OrderedDict()
            for item in order.items:
                quantities[item.medicine_id] = quantities.get(item.medicine_id, 0) + item.quantity

            with self.ctx.locks.hold(*[medicine_key(mid) for mid in quantities]):
                changes = []
                for medicine_id, quantity in quantities.items():
                    medicine = self._load_medicine(medicine_id)
                    changes.append(self._apply(medicine, medicine.stock_quantity + quantity))

                order.fulfilled = True
                order.fulfilled_at = datetime.now(timezone.utc)

                logger.info(f"Order {order_id} received: {len(changes)} medicine(s) restocked")

                if commit:
                    self.ctx.commit()
                return changes
