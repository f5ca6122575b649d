"""Tests for notification preferences and recipient filtering."""

import json

import httpx
import pytest

from pharmadesk.core.exceptions import ValidationError
from pharmadesk.models import AppUser
from pharmadesk.schemas.notification import NotificationPreferences
from pharmadesk.services import PreferenceService, RecipientDirectory, WebhookDeliverer
from pharmadesk.services.notification_service import low_stock_event, new_prescription_event


@pytest.fixture
def make_user(db):
    def factory(username, role="pharmacist", is_active=True):
        user = AppUser(username=username, hashed_password="unused", role=role, is_active=is_active,
                       email=f"{username}@pharmacy.example")
        db.add(user)
        db.commit()
        return user
    return factory


def preferences(**overrides):
    values = {"low_stock": True, "expiry_warning": True, "order_status_changed": True, "new_prescription": True}
    values.update(overrides)
    return NotificationPreferences(**values)


class TestPreferences:

    def test_defaults_to_everything(self, db, make_user):
        user = make_user("sam")

        assert PreferenceService.get_preferences(db, user) == {
            "low_stock": True,
            "expiry_warning": True,
            "order_status_changed": True,
            "new_prescription": True,
        }

    def test_update_is_stored(self, db, make_user):
        user = make_user("sam")

        PreferenceService.update_preferences(db, user, preferences(low_stock=False))
        result = PreferenceService.update_preferences(db, user, preferences(low_stock=False, new_prescription=False))

        assert result["low_stock"] is False
        assert result["new_prescription"] is False
        assert result["expiry_warning"] is True
        db.refresh(user)
        assert user.notification_preference.new_prescription is False


class TestRecipients:

    def usernames(self, db, kind):
        return [user.username for user in PreferenceService.recipients_for(db, kind)]

    def test_opted_out_user_excluded_for_that_kind_only(self, db, make_user):
        sam = make_user("sam")
        make_user("kim")
        PreferenceService.update_preferences(db, sam, preferences(low_stock=False))

        assert self.usernames(db, "low_stock") == ["admin", "kim"]
        assert self.usernames(db, "expiry_warning") == ["admin", "sam", "kim"]

    def test_cashiers_and_inactive_users_excluded(self, db, make_user):
        make_user("till", role="cashier")
        make_user("gone", is_active=False)

        assert self.usernames(db, "new_prescription") == ["admin"]

    def test_unknown_kind(self, db):
        with pytest.raises(ValidationError):
            PreferenceService.recipients_for(db, "weather")


class TestWebhookRecipients:

    def capture(self):
        requests = []

        def handler(request):
            requests.append(json.loads(request.content))
            return httpx.Response(204)

        return requests, httpx.Client(transport=httpx.MockTransport(handler))

    def test_body_lists_opted_in_recipients(self, app, db, make_user):
        sam = make_user("sam")
        make_user("kim")
        PreferenceService.update_preferences(db, sam, preferences(low_stock=False))
        requests, client = self.capture()
        deliverer = WebhookDeliverer("https://notify.example/hook", client=client,
                                     recipients=RecipientDirectory(app.state.session_factory))

        deliverer(low_stock_event(1, "Tramadol 50mg", "critical", 4))

        assert [r["username"] for r in requests[0]["recipients"]] == ["admin", "kim"]
        assert requests[0]["recipients"][1]["email"] == "kim@pharmacy.example"

    def test_skipped_when_nobody_opted_in(self, db):
        requests, client = self.capture()
        deliverer = WebhookDeliverer("https://notify.example/hook", client=client, recipients=lambda kind: [])

        deliverer(new_prescription_event(7, "RX-1001"))

        assert requests == []
