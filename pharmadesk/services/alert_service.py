"""
Alert Service - low stock and expiry queries, and the periodic alert run
"""
import logging
from datetime import date, timedelta
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from pharmadesk.models import Medicine
from pharmadesk.services.context import ServiceContext
from pharmadesk.services.notification_service import expiry_warning_event, low_stock_event
from pharmadesk.stock import LOW_STOCK_STATUSES

logger = logging.getLogger(__name__)


class AlertService:
    """Read-only alert queries over the medicine catalogue"""

    @staticmethod
    def low_stock_medicines(db: Session) -> List[Medicine]:
        """Medicines whose status is low_stock or critical"""
        return db.query(Medicine).filter(
            Medicine.stock_status.in_([s.value for s in LOW_STOCK_STATUSES])
        ).order_by(Medicine.stock_quantity, Medicine.name).all()

    @staticmethod
    def expiring_medicines(
        db: Session,
        days_threshold: int,
        today: Optional[date] = None,
    ) -> List[Tuple[Medicine, int]]:
        """
        Medicines expiring within ``days_threshold`` days, already expired
        ones included, soonest first. Returns (medicine, days_remaining).
        """
        today = today or date.today()
        cutoff = today + timedelta(days=days_threshold)

        medicines = db.query(Medicine).filter(
            Medicine.expiry_date.isnot(None),
            Medicine.expiry_date <= cutoff,
        ).order_by(Medicine.expiry_date, Medicine.name).all()

        return [(medicine, (medicine.expiry_date - today).days) for medicine in medicines]

    @staticmethod
    def run_expiry_check(ctx: ServiceContext, days_threshold: int) -> int:
        """Publish one expiry_warning covering every expiring medicine"""
        expiring = AlertService.expiring_medicines(ctx.db, days_threshold)
        if expiring:
            ctx.emit(expiry_warning_event(expiring, days_threshold))
        ctx.commit()

        logger.info(f"Expiry check: {len(expiring)} medicine(s) within {days_threshold} days")
        return len(expiring)

    @staticmethod
    def run_low_stock_check(ctx: ServiceContext) -> int:
        """Publish a low_stock reminder for every medicine still running low"""
        medicines = AlertService.low_stock_medicines(ctx.db)
        for medicine in medicines:
            ctx.emit(low_stock_event(
                medicine.id, medicine.name, medicine.stock_status, medicine.stock_quantity, reminder=True
            ))
        ctx.commit()

        logger.info(f"Low stock check: {len(medicines)} medicine(s) running low")
        return len(medicines)

    @staticmethod
    def run_alert_checks(ctx: ServiceContext, days_threshold: int) -> dict:
        return {
            "expiring": AlertService.run_expiry_check(ctx, days_threshold),
            "low_stock": AlertService.run_low_stock_check(ctx),
        }
