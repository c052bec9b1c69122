"""Unit tests for the low-stock notifier, its sinks and the delivery task."""

from __future__ import annotations

import smtplib
from unittest.mock import MagicMock, patch

import pytest
from django.core import mail
from kombu.exceptions import OperationalError

from modules.inventory.constants import NotificationOutcome
from modules.inventory.exceptions import NotificationDispatchFailed
from modules.inventory.notifications import (
    CeleryNotificationSink,
    EmailNotificationSink,
    INotificationSink,
    LowStockNotifier,
    build_low_stock_notifier,
    low_stock_body,
    low_stock_subject,
    smtp_configured,
)
from modules.inventory.tasks import send_notification_email

pytestmark = pytest.mark.unit

RECIPIENT = "admin@ricemart.test"


class RecordingSink(INotificationSink):
    def __init__(self):
        self.sent = []

    def send(self, recipient, subject, body):
        self.sent.append((recipient, subject, body))


class BrokenSink(INotificationSink):
    def send(self, recipient, subject, body):
        raise NotificationDispatchFailed("smtp down")


@pytest.fixture()
def sink():
    return RecordingSink()


class TestMessageContent:
    def test_subject_names_product(self):
        assert low_stock_subject("Basmati") == "Low Stock Alert: Basmati"

    def test_body_states_quantity_in_kg(self):
        body = low_stock_body("Basmati", 40)

        assert '"Basmati"' in body
        assert "Current available quantity: 40 kg." in body
        assert "Please restock soon." in body


class TestLowStockNotifier:
    def test_dispatches_at_or_below_threshold(self, sink):
        notifier = LowStockNotifier(sink, threshold=50, recipient=RECIPIENT)

        assert notifier.maybe_notify("Basmati", 40) is NotificationOutcome.DISPATCHED
        assert notifier.maybe_notify("Basmati", 50) is NotificationOutcome.DISPATCHED
        assert sink.sent[0][0] == RECIPIENT
        assert sink.sent[0][1] == "Low Stock Alert: Basmati"

    def test_above_threshold_sends_nothing(self, sink):
        notifier = LowStockNotifier(sink, threshold=50, recipient=RECIPIENT)

        assert notifier.maybe_notify("Basmati", 51) is NotificationOutcome.ABOVE_THRESHOLD
        assert sink.sent == []

    def test_every_low_call_alerts_again(self, sink):
        notifier = LowStockNotifier(sink, threshold=50, recipient=RECIPIENT)

        notifier.maybe_notify("Basmati", 40)
        notifier.maybe_notify("Basmati", 20)

        assert len(sink.sent) == 2

    def test_negative_available_is_low(self, sink):
        notifier = LowStockNotifier(sink, threshold=50, recipient=RECIPIENT)

        assert notifier.maybe_notify("Basmati", -3) is NotificationOutcome.DISPATCHED
        assert "-3 kg" in sink.sent[0][2]

    def test_missing_recipient_is_reported(self, sink):
        notifier = LowStockNotifier(sink, threshold=50, recipient="")

        assert notifier.maybe_notify("Basmati", 10) is NotificationOutcome.NO_RECIPIENT
        assert sink.sent == []

    def test_sink_failure_is_contained(self):
        notifier = LowStockNotifier(BrokenSink(), threshold=50, recipient=RECIPIENT)

        assert notifier.maybe_notify("Basmati", 10) is NotificationOutcome.FAILED

    def test_unexpected_sink_error_is_contained(self):
        sink = MagicMock(spec=INotificationSink)
        sink.send.side_effect = TypeError("Object of type Decimal is not JSON serializable")
        notifier = LowStockNotifier(sink, threshold=50, recipient=RECIPIENT)

        assert notifier.maybe_notify("Basmati", 10) is NotificationOutcome.FAILED

    def test_build_reads_settings(self, settings, sink):
        settings.LOW_STOCK_THRESHOLD = 25
        settings.LOW_STOCK_ALERT_RECIPIENT = "stock@ricemart.test"

        notifier = build_low_stock_notifier(sink)

        assert notifier.threshold == 25
        assert notifier.recipient == "stock@ricemart.test"
        assert notifier.sink is sink

    def test_build_defaults_to_queued_delivery(self):
        assert isinstance(build_low_stock_notifier().sink, CeleryNotificationSink)


class TestEmailNotificationSink:
    def test_sends_through_django_mail(self):
        EmailNotificationSink().send(RECIPIENT, "Low Stock Alert: Basmati", "body")

        assert len(mail.outbox) == 1
        assert mail.outbox[0].to == [RECIPIENT]
        assert mail.outbox[0].subject == "Low Stock Alert: Basmati"
        assert mail.outbox[0].from_email == "Rice Mart <alerts@ricemart.test>"

    def test_incomplete_smtp_settings_only_simulate(self, settings):
        settings.EMAIL_HOST_PASSWORD = ""

        assert smtp_configured() is False
        EmailNotificationSink().send(RECIPIENT, "subject", "body")

        assert mail.outbox == []

    def test_smtp_error_becomes_dispatch_failure(self):
        with patch(
            "modules.inventory.notifications.send_mail",
            side_effect=smtplib.SMTPAuthenticationError(535, b"bad credentials"),
        ):
            with pytest.raises(NotificationDispatchFailed):
                EmailNotificationSink().send(RECIPIENT, "subject", "body")


class TestCeleryNotificationSink:
    def test_queues_delivery_task(self):
        CeleryNotificationSink().send(RECIPIENT, "Low Stock Alert: Ponni", "body")

        # Tasks run eagerly under the test settings.
        assert [message.subject for message in mail.outbox] == ["Low Stock Alert: Ponni"]

    def test_broker_outage_becomes_dispatch_failure(self):
        fake_task = MagicMock()
        fake_task.delay.side_effect = OperationalError("connection refused")

        with patch("modules.inventory.tasks.send_notification_email", fake_task):
            with pytest.raises(NotificationDispatchFailed):
                CeleryNotificationSink().send(RECIPIENT, "subject", "body")

    def test_redis_connection_reset_becomes_dispatch_failure(self):
        with patch(
            "modules.inventory.tasks.send_notification_email.delay",
            side_effect=ConnectionResetError("redis reset"),
        ):
            with pytest.raises(NotificationDispatchFailed, match="redis reset"):
                CeleryNotificationSink().send(RECIPIENT, "subject", "body")


class TestSendNotificationEmailTask:
    def test_returns_delivery_status(self):
        result = send_notification_email.apply(args=(RECIPIENT, "subject", "body"))

        assert result.get() == {"status": "sent", "recipient": RECIPIENT}
        assert len(mail.outbox) == 1

    def test_retries_on_dispatch_failure(self):
        with patch.object(
            EmailNotificationSink, "send", side_effect=NotificationDispatchFailed("down")
        ), patch.object(send_notification_email, "retry", side_effect=RuntimeError("retry")) as retry:
            with pytest.raises(RuntimeError, match="retry"):
                send_notification_email.run(RECIPIENT, "subject", "body")

        assert retry.call_count == 1
