"""Pytest configuration for PharmaDesk tests."""

import pytest
from fastapi.testclient import TestClient

from pharmadesk.app import create_app
from pharmadesk.core import Settings
from pharmadesk.models import Medicine, Supplier, Patient, Doctor, PurchaseOrder, PurchaseOrderItem
from pharmadesk.services import ServiceContext
from pharmadesk.stock import derive_status


@pytest.fixture
def settings():
    """In-memory database, inline notification delivery, no background jobs."""
    return Settings(
        DATABASE_URL="sqlite://",
        SCHEDULER_ENABLED=False,
        NOTIFY_ASYNC=False,
        NOTIFY_WEBHOOK_URL=None,
        SEED_DEMO_DATA=False,
        LOGS_PATH=None,
        SECRET_KEY="test-secret",
        ADMIN_USERNAME="admin",
        ADMIN_PASSWORD="admin-pass-123",
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def db(app):
    session = app.state.session_factory()
    yield session
    session.close()


@pytest.fixture
def ctx(app, db):
    """Service context bound to the test session."""
    return ServiceContext(db, app.state.locks, app.state.notifier)


@pytest.fixture
def notifier(app):
    return app.state.notifier


@pytest.fixture
def supplier(db):
    record = Supplier(name="MedSupply Co", contact_person="Dana Reyes")
    db.add(record)
    db.commit()
    return record


@pytest.fixture
def make_medicine(db):
    """Factory for medicines with a consistent stock status."""
    def factory(name="Amoxicillin 500mg", stock=25, price=1250, kind="antibiotic",
                category="Antibiotics", expiry_date=None, supplier_id=None):
        medicine = Medicine(
            name=name,
            category=category,
            kind=kind,
            price=price,
            stock_quantity=stock,
            stock_status=derive_status(stock).value,
            expiry_date=expiry_date,
            supplier_id=supplier_id,
        )
        db.add(medicine)
        db.commit()
        return medicine
    return factory


@pytest.fixture
def make_order(db, supplier):
    """Factory for a pending purchase order with (medicine_id, quantity) lines."""
    def factory(*lines):
        order = PurchaseOrder(supplier_id=supplier.id, status="pending", fulfilled=False)
        for medicine_id, quantity in lines:
            order.items.append(PurchaseOrderItem(medicine_id=medicine_id, quantity=quantity))
        db.add(order)
        db.commit()
        return order
    return factory


@pytest.fixture
def patient(db):
    record = Patient(name="Alex Morgan")
    db.add(record)
    db.commit()
    return record


@pytest.fixture
def doctor(db):
    record = Doctor(name="Dr. Priya Nair", specialization="General Practice")
    db.add(record)
    db.commit()
    return record
