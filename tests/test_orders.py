"""Tests for the purchase order lifecycle."""

import pytest

from pharmadesk.core.exceptions import ConsistencyError, InvalidTransition, NotFound, ValidationError
from pharmadesk.schemas.order import OrderCreate, OrderItemCreate
from pharmadesk.services import OrderService


@pytest.fixture
def order_for(db, supplier):
    def factory(medicine, quantity=50):
        return OrderService.create_order(db, OrderCreate(
            supplier_id=supplier.id,
            items=[OrderItemCreate(medicine_id=medicine.id, quantity=quantity)],
        ))
    return factory


class TestOrderLifecycle:

    def test_full_progression_restocks_once(self, ctx, db, notifier, make_medicine, order_for):
        """Order of 50 for a medicine at 4 ends at 54 in_stock; re-issuing delivered is a no-op."""
        medicine = make_medicine(stock=4)
        order = order_for(medicine)

        for status in ("processing", "shipped", "delivered"):
            OrderService.update_status(ctx, order.id, status)

        db.refresh(medicine)
        assert (medicine.stock_quantity, medicine.stock_status) == (54, "in_stock")

        again = OrderService.update_status(ctx, order.id, "delivered")

        db.refresh(medicine)
        assert again.status == "delivered"
        assert medicine.stock_quantity == 54
        assert [e.payload["new_status"] for e in notifier.recent(kind="order_status_changed")] == [
            "delivered", "shipped", "processing",
        ]

    def test_skip_straight_to_delivered(self, ctx, db, make_medicine, order_for):
        medicine = make_medicine(stock=0)
        order = order_for(medicine, quantity=12)

        OrderService.update_status(ctx, order.id, "delivered")

        db.refresh(medicine)
        assert (medicine.stock_quantity, medicine.stock_status) == (12, "low_stock")

    def test_only_delivered_touches_stock(self, ctx, db, make_medicine, order_for):
        medicine = make_medicine(stock=4)
        order = order_for(medicine)

        OrderService.update_status(ctx, order.id, "processing")
        OrderService.update_status(ctx, order.id, "shipped")

        db.refresh(medicine)
        assert medicine.stock_quantity == 4

    def test_cancel_from_open_state(self, ctx, make_medicine, order_for):
        order = order_for(make_medicine())

        OrderService.update_status(ctx, order.id, "shipped")
        cancelled = OrderService.update_status(ctx, order.id, "cancelled")

        assert cancelled.status == "cancelled"

    @pytest.mark.parametrize("path, target", [
        (["delivered"], "pending"),
        (["delivered"], "cancelled"),
        (["cancelled"], "processing"),
        (["shipped"], "processing"),
        (["processing"], "pending"),
    ])
    def test_invalid_transitions(self, ctx, db, make_medicine, order_for, path, target):
        medicine = make_medicine(stock=4)
        order = order_for(medicine)
        for status in path:
            OrderService.update_status(ctx, order.id, status)
        db.refresh(medicine)
        quantity_before = medicine.stock_quantity

        with pytest.raises(InvalidTransition):
            OrderService.update_status(ctx, order.id, target)

        db.refresh(medicine)
        assert medicine.stock_quantity == quantity_before

    def test_unknown_status(self, ctx, make_medicine, order_for):
        order = order_for(make_medicine())

        with pytest.raises(ValidationError):
            OrderService.update_status(ctx, order.id, "lost")

    def test_unknown_order(self, ctx):
        with pytest.raises(NotFound):
            OrderService.update_status(ctx, 999, "processing")

    def test_history_records_each_change(self, ctx, db, make_medicine, order_for):
        order = order_for(make_medicine())

        OrderService.update_status(ctx, order.id, "processing")
        OrderService.update_status(ctx, order.id, "processing")
        OrderService.update_status(ctx, order.id, "cancelled")

        history = OrderService.get_history(db, order.id)
        assert [(h.before_data["status"], h.after_data["status"]) for h in history] == [
            ("pending", "processing"),
            ("processing", "cancelled"),
        ]


class TestOrderItems:

    def test_create_requires_existing_supplier(self, db):
        with pytest.raises(NotFound):
            OrderService.create_order(db, OrderCreate(supplier_id=77))

    def test_create_requires_existing_medicine(self, db, supplier):
        with pytest.raises(NotFound):
            OrderService.create_order(db, OrderCreate(
                supplier_id=supplier.id,
                items=[OrderItemCreate(medicine_id=404, quantity=1)],
            ))

    def test_items_added_while_processing(self, ctx, make_medicine, order_for):
        medicine = make_medicine()
        order = order_for(medicine)
        OrderService.update_status(ctx, order.id, "processing")

        item = OrderService.add_item(ctx, order.id, OrderItemCreate(medicine_id=medicine.id, quantity=5))

        assert item.order_id == order.id

    def test_items_refused_once_shipped(self, ctx, make_medicine, order_for):
        medicine = make_medicine()
        order = order_for(medicine)
        OrderService.update_status(ctx, order.id, "shipped")

        with pytest.raises(ConsistencyError):
            OrderService.add_item(ctx, order.id, OrderItemCreate(medicine_id=medicine.id, quantity=5))

    def test_added_items_are_delivered(self, ctx, db, make_medicine, order_for):
        medicine = make_medicine(stock=0)
        order = order_for(medicine, quantity=10)
        OrderService.add_item(ctx, order.id, OrderItemCreate(medicine_id=medicine.id, quantity=15))

        OrderService.update_status(ctx, order.id, "delivered")

        db.refresh(medicine)
        assert medicine.stock_quantity == 25
