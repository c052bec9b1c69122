"""Low-stock alerts.

``LowStockNotifier`` decides whether a product's available quantity is at
or below the alert threshold and hands an email to a notification sink.
No delivery error reaches the caller: every failure comes back as
``NotificationOutcome.FAILED`` and a log line.

Two sinks are provided:

* ``EmailNotificationSink`` sends through Django's mail framework.  When the
  SMTP settings are incomplete it only logs the message it would have sent.
* ``CeleryNotificationSink`` queues ``inventory.send_notification_email`` so
  checkout never waits on SMTP.  This is the sink used by the API.
"""

from __future__ import annotations

import smtplib
from abc import ABC, abstractmethod
from typing import Optional

import structlog
from django.conf import settings
from django.core.mail import send_mail
from kombu.exceptions import OperationalError

from modules.inventory.constants import (
    DEFAULT_LOW_STOCK_THRESHOLD,
    STOCK_UNIT,
    NotificationOutcome,
)
from modules.inventory.exceptions import NotificationDispatchFailed
from shared.domain.exceptions import DegradedSideEffect

logger = structlog.get_logger(__name__)


def low_stock_subject(product_name: str) -> str:
    return f"Low Stock Alert: {product_name}"


def low_stock_body(product_name: str, available: int) -> str:
    return (
        "Dear Admin,\n\n"
        f'The stock for "{product_name}" is running low.\n\n'
        f"Current available quantity: {available} {STOCK_UNIT}.\n\n"
        "Please restock soon.\n\n"
        "Regards,\nRice Mart System"
    )


# ---------------------------------------------------------------------------
# Sinks
# ---------------------------------------------------------------------------


class INotificationSink(ABC):
    @abstractmethod
    def send(self, recipient: str, subject: str, body: str) -> None:
        """Deliver or queue one message.

        Raises:
            NotificationDispatchFailed: the message could not be handed over.
        """


def smtp_configured() -> bool:
    return all(
        (
            settings.EMAIL_HOST,
            settings.EMAIL_PORT,
            settings.EMAIL_HOST_USER,
            settings.EMAIL_HOST_PASSWORD,
            settings.DEFAULT_FROM_EMAIL,
        )
    )


class EmailNotificationSink(INotificationSink):
    def send(self, recipient: str, subject: str, body: str) -> None:
        log = logger.bind(recipient=recipient, subject=subject)
        if not smtp_configured():
            log.warning("notification.email_simulated", body=body[:100])
            return
        try:
            send_mail(
                subject,
                body,
                settings.DEFAULT_FROM_EMAIL,
                [recipient],
                fail_silently=False,
            )
        except (smtplib.SMTPException, OSError) as exc:
            log.error("notification.email_failed", error=str(exc))
            raise NotificationDispatchFailed(str(exc)) from exc
        log.info("notification.email_sent")


class CeleryNotificationSink(INotificationSink):
    def send(self, recipient: str, subject: str, body: str) -> None:
        from modules.inventory.tasks import send_notification_email

        try:
            send_notification_email.delay(recipient, subject, body)
        except OperationalError as exc:
            logger.error("notification.enqueue_failed", error=str(exc))
            raise NotificationDispatchFailed(str(exc)) from exc
        except Exception as exc:
            logger.exception("notification.enqueue_failed", error=str(exc))
            raise NotificationDispatchFailed(str(exc)) from exc


# ---------------------------------------------------------------------------
# Notifier
# ---------------------------------------------------------------------------


class LowStockNotifier:
    """Alerts the administrator when a product is at or below ``threshold``.

    There is no deduplication: every call that finds the product low sends
    another alert.
    """

    def __init__(
        self,
        sink: INotificationSink,
        threshold: int = DEFAULT_LOW_STOCK_THRESHOLD,
        recipient: str = "",
    ) -> None:
        self.sink = sink
        self.threshold = threshold
        self.recipient = recipient

    def maybe_notify(self, product_name: str, available: int) -> NotificationOutcome:
        log = logger.bind(
            product_name=product_name, available=available, threshold=self.threshold
        )
        if available > self.threshold:
            log.debug("notification.above_threshold")
            return NotificationOutcome.ABOVE_THRESHOLD

        if not self.recipient:
            log.error("notification.no_recipient")
            return NotificationOutcome.NO_RECIPIENT

        try:
            self.sink.send(
                self.recipient,
                low_stock_subject(product_name),
                low_stock_body(product_name, available),
            )
        except DegradedSideEffect as exc:
            log.error("notification.low_stock_failed", error=str(exc))
            return NotificationOutcome.FAILED
        except Exception as exc:
            log.exception("notification.low_stock_failed", error=str(exc))
            return NotificationOutcome.FAILED

        log.info("notification.low_stock_dispatched", recipient=self.recipient)
        return NotificationOutcome.DISPATCHED


def build_low_stock_notifier(sink: Optional[INotificationSink] = None) -> LowStockNotifier:
    """Notifier wired from ``LOW_STOCK_THRESHOLD`` / ``LOW_STOCK_ALERT_RECIPIENT``."""
    return LowStockNotifier(
        sink=sink or CeleryNotificationSink(),
        threshold=settings.LOW_STOCK_THRESHOLD,
        recipient=settings.LOW_STOCK_ALERT_RECIPIENT,
    )
