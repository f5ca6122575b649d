"""
Demo data for a fresh install. Safe to run repeatedly: rows are matched by name.
"""
import logging
from datetime import date, timedelta

from sqlalchemy.orm import Session

from pharmadesk.models import Doctor, Medicine, Patient, Supplier
from pharmadesk.stock import derive_status

logger = logging.getLogger(__name__)

SUPPLIERS = [
    {"name": "MedSupply Co", "contact_person": "Dana Reyes", "contact_number": "555-0100", "email": "orders@medsupply.example"},
    {"name": "HealthLine Distributors", "contact_person": "Sam Okafor", "contact_number": "555-0142", "email": "sales@healthline.example"},
]

# (name, category, kind, price in cents, stock, days to expiry, supplier)
MEDICINES = [
    ("Amoxicillin 500mg", "Antibiotics", "antibiotic", 1250, 120, 400, "MedSupply Co"),
    ("Paracetamol 500mg", "Analgesics", "otc", 399, 18, 600, "HealthLine Distributors"),
    ("Ibuprofen 200mg", "Analgesics", "painkiller", 549, 45, 20, "HealthLine Distributors"),
    ("Tramadol 50mg", "Opioid Analgesics", "painkiller", 2100, 4, 365, "MedSupply Co"),
    ("Lisinopril 10mg", "Cardiovascular", "prescription", 1875, 0, 300, "MedSupply Co"),
    ("Cetirizine 10mg", "Antihistamines", "otc", 650, 75, -5, "HealthLine Distributors"),
]

DOCTORS = [
    {"name": "Dr. Priya Nair", "specialization": "General Practice", "license_number": "GP-20931"},
]

PATIENTS = [
    {"name": "Alex Morgan", "date_of_birth": date(1984, 3, 12), "gender": "female", "allergies": "Penicillin"},
    {"name": "Jordan Lee", "date_of_birth": date(1991, 11, 2), "gender": "male"},
]


def _get_or_create(db: Session, model, values: dict):
    record = db.query(model).filter(model.name == values["name"]).first()
    if record:
        return record, False
    record = model(**values)
    db.add(record)
    db.flush()
    return record, True


def seed_demo_data(db: Session) -> int:
    """Insert the demo catalogue; returns the number of rows created"""
    created = 0
    today = date.today()

    suppliers = {}
    for values in SUPPLIERS:
        supplier, is_new = _get_or_create(db, Supplier, values)
        suppliers[supplier.name] = supplier
        created += is_new

    for index, (name, category, kind, price, stock, expires_in, supplier_name) in enumerate(MEDICINES, start=1):
        _, is_new = _get_or_create(db, Medicine, {
            "name": name,
            "category": category,
            "kind": kind,
            "price": price,
            "stock_quantity": stock,
            "stock_status": derive_status(stock).value,
            "expiry_date": today + timedelta(days=expires_in),
            "batch_number": f"DEMO-{index:03d}",
            "supplier_id": suppliers[supplier_name].id,
        })
        created += is_new

    for values in DOCTORS:
        created += _get_or_create(db, Doctor, values)[1]

    for values in PATIENTS:
        created += _get_or_create(db, Patient, values)[1]

    db.commit()
    logger.info(f"Demo data seeded: {created} new record(s)")
    return created
