"""
Notification dispatcher.

Persists notifications and, when a webhook is configured, queues a push
through Django-Q. Dispatch is best-effort: callers get True/False back and
are never interrupted by a delivery problem.
"""
import logging
from typing import Optional

from django.conf import settings
from django.db import transaction
from django.utils import timezone
from django_q.tasks import async_task

from .models import Notification

logger = logging.getLogger(__name__)

PUSH_TASK = 'notifications.tasks.push_notification'


def build_action_url(path: str) -> str:
    """Absolute link into the frontend for ``path``."""
    base = getattr(settings, 'FRONTEND_URL', '')
    return f"{base}/{path.lstrip('/')}" if base else path


class NotificationDispatcher:
    """Side-effect sink for workflow notifications."""

    def notify(
        self,
        user_id,
        title: str,
        message: str,
        action_url: Optional[str] = None,
        *,
        type: str = Notification.Type.INFO,
        category: str = '',
    ) -> bool:
        """
        Persist a notification for ``user_id`` and queue its push.

        Returns:
            True if the notification was stored, False otherwise
        """
        try:
            with transaction.atomic():
                notification = Notification.objects.create(
                    user_id=user_id,
                    title=title,
                    message=message,
                    action_url=action_url or '',
                    type=type,
                    category=category,
                )
        except Exception as exc:  # noqa: BLE001
            logger.warning("Failed to store notification for user %s: %s", user_id, exc)
            return False

        self.queue_push(notification)
        return True

    @staticmethod
    def push_enabled() -> bool:
        return bool(getattr(settings, 'NOTIFICATION_WEBHOOK_URL', ''))

    def queue_push(self, notification: Notification) -> None:
        """
        Queue webhook delivery for ``notification`` if push is enabled.

        A queueing failure leaves the row FAILED so a later retry picks it up.
        """
        if not self.push_enabled():
            return

        # Marked before queueing; a synchronous cluster may deliver immediately.
        Notification.objects.filter(pk=notification.pk).update(
            delivery_status=Notification.Delivery.QUEUED,
        )
        notification.delivery_status = Notification.Delivery.QUEUED

        try:
            async_task(PUSH_TASK, notification.id)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Could not queue push for notification %s: %s", notification.id, exc)
            Notification.objects.filter(pk=notification.pk).update(
                delivery_status=Notification.Delivery.FAILED,
            )
            notification.delivery_status = Notification.Delivery.FAILED


def mark_read(notification: Notification) -> Notification:
    if not notification.is_read:
        notification.is_read = True
        notification.read_at = timezone.now()
        notification.save(update_fields=['is_read', 'read_at'])
    return notification


def mark_all_read(user) -> int:
    """Mark every unread notification of ``user`` as read; returns the count."""
    return Notification.objects.filter(user=user, is_read=False).update(
        is_read=True,
        read_at=timezone.now(),
    )
