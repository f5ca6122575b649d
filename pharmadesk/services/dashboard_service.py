"""
Dashboard Service - headline figures for the home screen
"""
from datetime import date, timedelta
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from pharmadesk.models import Medicine, Patient, PurchaseOrder, Transaction
from pharmadesk.stock import LOW_STOCK_STATUSES, StockStatus

OPEN_ORDER_STATUSES = ("pending", "processing", "shipped")


class DashboardService:

    @staticmethod
    def get_stats(db: Session, expiry_days: int = 30, today: Optional[date] = None) -> dict:
        today = today or date.today()

        status_counts = dict(
            db.query(Medicine.stock_status, func.count(Medicine.id))
            .group_by(Medicine.stock_status)
            .all()
        )
        by_status = {s.value: status_counts.get(s.value, 0) for s in StockStatus}

        expiring_soon = db.query(func.count(Medicine.id)).filter(
            Medicine.expiry_date.isnot(None),
            Medicine.expiry_date <= today + timedelta(days=expiry_days),
        ).scalar()

        prescription_sales = db.query(func.count(Transaction.id)).filter(
            Transaction.prescription_id.isnot(None)
        ).scalar()

        revenue = db.query(func.sum(Transaction.total_amount)).filter(
            Transaction.status == "completed"
        ).scalar() or 0

        open_orders = db.query(func.count(PurchaseOrder.id)).filter(
            PurchaseOrder.status.in_(OPEN_ORDER_STATUSES)
        ).scalar()

        return {
            "total_medicines": sum(by_status.values()),
            "stock_status_counts": by_status,
            "low_stock_count": sum(by_status[s.value] for s in LOW_STOCK_STATUSES),
            "expiring_soon_count": expiring_soon,
            "total_patients": db.query(func.count(Patient.id)).scalar(),
            "total_transactions": db.query(func.count(Transaction.id)).scalar(),
            "prescription_transactions": prescription_sales,
            "revenue": int(revenue),
            "open_orders": open_orders,
        }
