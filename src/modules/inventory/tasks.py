"""Celery tasks of the inventory module."""

import structlog
from celery import shared_task

from modules.inventory.exceptions import NotificationDispatchFailed
from modules.inventory.notifications import EmailNotificationSink

logger = structlog.get_logger(__name__)


@shared_task(
    bind=True,
    name="inventory.send_notification_email",
    max_retries=3,
    default_retry_delay=30,
)
def send_notification_email(self, recipient: str, subject: str, body: str):
    """Deliver one alert email, retrying SMTP failures."""
    try:
        EmailNotificationSink().send(recipient, subject, body)
    except NotificationDispatchFailed as exc:
        logger.warning(
            "notification.delivery_retry",
            recipient=recipient,
            attempt=self.request.retries + 1,
        )
        raise self.retry(exc=exc)
    return {"status": "sent", "recipient": recipient}
