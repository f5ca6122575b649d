"""
Alert Scheduler - periodic low stock and expiry checks
"""
import logging
from datetime import datetime

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy.orm import sessionmaker

from pharmadesk.core.locks import KeyedLocks
from pharmadesk.services.alert_service import AlertService
from pharmadesk.services.context import ServiceContext
from pharmadesk.services.notification_service import NotificationCenter

logger = logging.getLogger(__name__)

JOB_ID = "alert_checks"


class AlertScheduler:
    """
    Runs the alert checks every ``interval_hours`` with its own session.
    Owned by the application; started and stopped from its lifespan.
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        locks: KeyedLocks,
        notifier: NotificationCenter,
        interval_hours: int = 24,
        expiry_days: int = 30,
    ):
        self.session_factory = session_factory
        self.locks = locks
        self.notifier = notifier
        self.interval_hours = interval_hours
        self.expiry_days = expiry_days
        self.scheduler = AsyncIOScheduler()
        self.is_running = False

    def start(self):
        """Start the scheduler"""
        if self.is_running:
            return

        self.scheduler.add_job(
            func=self.run_checks,
            trigger=IntervalTrigger(hours=self.interval_hours),
            id=JOB_ID,
            name="Low stock & expiry alerts",
            next_run_time=datetime.now(),
            replace_existing=True,
            max_instances=1,  # Prevent overlapping runs
        )
        self.scheduler.start()
        self.is_running = True
        logger.info(f"Alert scheduler started: checks every {self.interval_hours}h")

    def stop(self):
        """Stop the scheduler"""
        if self.is_running:
            self.scheduler.shutdown(wait=False)
            self.is_running = False
            logger.info("Alert scheduler stopped")

    def run_checks(self) -> dict:
        """Execute one round of alert checks"""
        db = self.session_factory()
        try:
            ctx = ServiceContext(db, self.locks, self.notifier)
            result = AlertService.run_alert_checks(ctx, self.expiry_days)
            logger.info(
                f"Scheduled alert checks completed: expiring={result['expiring']}, "
                f"low_stock={result['low_stock']}"
            )
            return result
        except Exception as e:
            logger.error(f"Scheduled alert checks failed: {e}", exc_info=e)
            return {}
        finally:
            db.close()
