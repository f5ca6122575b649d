"""Tests for the notification center and its deliverers."""

from concurrent.futures import ThreadPoolExecutor

import httpx

from pharmadesk.services.notification_service import (
    NotificationCenter,
    WebhookDeliverer,
    low_stock_event,
    new_prescription_event,
)


class TestNotificationCenter:

    def test_recent_returns_newest_first(self):
        center = NotificationCenter()
        center.publish(new_prescription_event(1, "RX-1"))
        center.publish(new_prescription_event(2, "RX-2"))

        assert [e.payload["prescription_id"] for e in center.recent()] == [2, 1]

    def test_history_is_bounded(self):
        center = NotificationCenter(history_size=3)
        for i in range(5):
            center.publish(new_prescription_event(i, f"RX-{i}"))

        assert [e.payload["prescription_id"] for e in center.recent()] == [4, 3, 2]

    def test_filter_by_kind_and_limit(self):
        center = NotificationCenter()
        center.publish(
            low_stock_event(1, "A", "critical", 2),
            new_prescription_event(1, "RX-1"),
            low_stock_event(2, "B", "out_of_stock", 0),
        )

        assert len(center.recent(kind="low_stock")) == 2
        assert len(center.recent(limit=1)) == 1

    def test_subscribers_receive_events(self):
        center = NotificationCenter()
        received = []
        center.subscribe(received.append)

        event = new_prescription_event(7, "RX-7")
        center.publish(event)

        assert received == [event]

    def test_failing_deliverer_does_not_propagate(self):
        center = NotificationCenter()
        received = []

        def broken(event):
            raise RuntimeError("smtp down")

        center.subscribe(broken)
        center.subscribe(received.append)

        center.publish(new_prescription_event(1, "RX-1"))

        assert len(received) == 1
        assert len(center.recent()) == 1

    def test_executor_delivery(self):
        center = NotificationCenter(executor=ThreadPoolExecutor(max_workers=1))
        received = []
        center.subscribe(received.append)

        center.publish(new_prescription_event(1, "RX-1"))
        center.shutdown()

        assert len(received) == 1

    def test_publish_after_shutdown_keeps_history(self):
        center = NotificationCenter(executor=ThreadPoolExecutor(max_workers=1))
        center.subscribe(lambda event: None)
        center.shutdown()

        center.publish(new_prescription_event(1, "RX-1"))

        assert len(center.recent()) == 1


class TestWebhookDeliverer:

    def test_posts_event_as_json(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(202)

        client = httpx.Client(transport=httpx.MockTransport(handler))
        deliverer = WebhookDeliverer("https://notify.example/hook", client=client)

        deliverer(low_stock_event(3, "Tramadol 50mg", "critical", 4))

        [request] = requests
        assert request.method == "POST"
        assert b'"kind":"low_stock"' in request.content.replace(b" ", b"")

    def test_http_errors_are_logged_not_raised(self):
        client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(500)))
        deliverer = WebhookDeliverer("https://notify.example/hook", client=client)

        deliverer(new_prescription_event(1, "RX-1"))
