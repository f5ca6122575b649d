"""
Service Context - one request's session, stock locks and pending events
"""
import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from pharmadesk.core.exceptions import ConsistencyError
from pharmadesk.core.locks import KeyedLocks
from pharmadesk.services.notification_service import NotificationCenter, NotificationEvent

logger = logging.getLogger(__name__)


def medicine_key(medicine_id: int) -> str:
    return f"medicine:{medicine_id}"


def order_key(order_id: int) -> str:
    return f"order:{order_id}"


class ServiceContext:
    """Unit of work shared by the services handling one request.

    Events are queued with ``emit`` and published by ``commit`` once the
    database transaction is durable; a rollback drops them.
    """

    def __init__(self, db: Session, locks: KeyedLocks, notifier: NotificationCenter):
        self.db = db
        self.locks = locks
        self.notifier = notifier
        self._pending: List[NotificationEvent] = []

    def emit(self, event: NotificationEvent) -> None:
        self._pending.append(event)

    def commit(self) -> None:
        try:
            self.db.commit()
        except StaleDataError as e:
            self.rollback()
            logger.warning(f"Concurrent modification detected: {e}")
            raise ConsistencyError("Record was modified concurrently, please retry") from e
        except IntegrityError as e:
            self.rollback()
            logger.warning(f"Integrity violation on commit: {e.orig}")
            raise ConsistencyError("Operation violates a data integrity constraint") from e

        events, self._pending = self._pending, []
        if events:
            self.notifier.publish(*events)

    def rollback(self) -> None:
        self.db.rollback()
        self._pending = []
