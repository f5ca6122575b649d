"""
Notification Service - events raised by stock, order and prescription changes

Services publish events only after their database transaction commits.
The center keeps a bounded history and fans each event out to the
registered deliverers (log line, webhook). A failing deliverer is logged
and never reaches the caller.
"""
import logging
import threading
from collections import deque
from concurrent.futures import Executor
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Callable, Deque, Dict, Iterable, List, Optional

import httpx

logger = logging.getLogger(__name__)

LOW_STOCK = "low_stock"
EXPIRY_WARNING = "expiry_warning"
ORDER_STATUS_CHANGED = "order_status_changed"
NEW_PRESCRIPTION = "new_prescription"

EVENT_KINDS = (LOW_STOCK, EXPIRY_WARNING, ORDER_STATUS_CHANGED, NEW_PRESCRIPTION)


@dataclass
class NotificationEvent:
    kind: str
    payload: Dict
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict:
        return {
            "kind": self.kind,
            "payload": self.payload,
            "created_at": self.created_at.isoformat(),
        }


# ===================== EVENT BUILDERS =====================

def low_stock_event(medicine_id: int, name: str, status: str, quantity: int, reminder: bool = False) -> NotificationEvent:
    return NotificationEvent(LOW_STOCK, {
        "medicine_id": medicine_id,
        "name": name,
        "status": status,
        "stock_quantity": quantity,
        "reminder": reminder,
    })


def expiry_warning_event(expiring: Iterable, days_threshold: int) -> NotificationEvent:
    """``expiring`` yields (medicine, days_remaining) pairs."""
    medicines = [
        {
            "medicine_id": medicine.id,
            "name": medicine.name,
            "expiry_date": medicine.expiry_date.isoformat() if isinstance(medicine.expiry_date, date) else None,
            "days_remaining": days_remaining,
        }
        for medicine, days_remaining in expiring
    ]
    return NotificationEvent(EXPIRY_WARNING, {"days_threshold": days_threshold, "medicines": medicines})


def order_status_changed_event(order_id: int, old_status: str, new_status: str) -> NotificationEvent:
    return NotificationEvent(ORDER_STATUS_CHANGED, {
        "order_id": order_id,
        "old_status": old_status,
        "new_status": new_status,
    })


def new_prescription_event(prescription_id: int, prescription_number: str) -> NotificationEvent:
    return NotificationEvent(NEW_PRESCRIPTION, {
        "prescription_id": prescription_id,
        "prescription_number": prescription_number,
    })


# ===================== CENTER =====================

Deliverer = Callable[[NotificationEvent], None]


class NotificationCenter:
    """Event history plus fan-out to deliverers.

    With an executor, delivery runs on its worker threads; without one it
    runs inline. Either way ``publish`` returns normally.
    """

    def __init__(self, history_size: int = 200, executor: Optional[Executor] = None):
        self._history: Deque[NotificationEvent] = deque(maxlen=history_size)
        self._deliverers: List[Deliverer] = []
        self._lock = threading.Lock()
        self._executor = executor

    def subscribe(self, deliverer: Deliverer) -> None:
        with self._lock:
            self._deliverers.append(deliverer)

    def publish(self, *events: NotificationEvent) -> None:
        with self._lock:
            self._history.extend(events)
            deliverers = list(self._deliverers)

        for event in events:
            for deliverer in deliverers:
                if self._executor is not None:
                    try:
                        self._executor.submit(self._deliver, deliverer, event)
                    except RuntimeError:
                        # Executor already shut down
                        logger.warning(f"Dropped {event.kind} notification: dispatcher is shut down")
                else:
                    self._deliver(deliverer, event)

    @staticmethod
    def _deliver(deliverer: Deliverer, event: NotificationEvent) -> None:
        try:
            deliverer(event)
        except Exception:
            logger.exception(f"Notification deliverer failed for {event.kind}")

    def recent(self, limit: int = 50, kind: Optional[str] = None) -> List[NotificationEvent]:
        """Most recent events first"""
        with self._lock:
            events = list(self._history)
        if kind:
            events = [e for e in events if e.kind == kind]
        return list(reversed(events))[:limit]

    def shutdown(self) -> None:
        """Drain queued deliveries, then release deliverer resources"""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
        for deliverer in self._deliverers:
            close = getattr(deliverer, "close", None)
            if close is not None:
                close()


# ===================== DELIVERERS =====================

def log_deliverer(event: NotificationEvent) -> None:
    logger.info(f"[notify] {event.kind}: {event.payload}")


class WebhookDeliverer:
    """POSTs each event as JSON to an external notifier (email/SMS gateway).

    With ``recipients``, a callable mapping an event kind to contact dicts,
    the body carries the opted-in recipients and an event nobody wants is
    not sent at all.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 5.0,
        client: Optional[httpx.Client] = None,
        recipients: Optional[Callable[[str], List[Dict]]] = None,
    ):
        self.url = url
        self.client = client or httpx.Client(timeout=timeout)
        self.recipients = recipients

    def __call__(self, event: NotificationEvent) -> None:
        body = event.to_dict()
        if self.recipients is not None:
            body["recipients"] = self.recipients(event.kind)
            if not body["recipients"]:
                logger.info(f"No recipients opted in to {event.kind}, webhook skipped")
                return

        try:
            response = self.client.post(self.url, json=body)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"Webhook delivery of {event.kind} to {self.url} failed: {e}")

    def close(self) -> None:
        self.client.close()
