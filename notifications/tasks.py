"""
Background tasks for the notifications app using Django-Q.
"""
import logging

import requests
from django.conf import settings
from django.db.models import F
from django.utils import timezone

from .models import Notification
from .services import NotificationDispatcher

logger = logging.getLogger(__name__)


def _payload(notification: Notification) -> dict:
    return {
        'id': notification.id,
        'user_id': notification.user_id,
        'title': notification.title,
        'message': notification.message,
        'type': notification.type,
        'category': notification.category,
        'action_url': notification.action_url,
        'created_at': notification.created_at.isoformat(),
    }


def push_notification(notification_id: int) -> None:
    """
    Deliver one notification to the configured webhook.

    Safe to re-run: delivered notifications are skipped. Can be called
    directly or queued via Django-Q's async_task(). Delivery errors mark the
    row FAILED and are re-raised so the cluster retries.
    """
    try:
        notification = Notification.objects.get(id=notification_id)
    except Notification.DoesNotExist:
        logger.info("Notification %s not found; nothing to push.", notification_id)
        return

    if notification.delivery_status == Notification.Delivery.DELIVERED:
        logger.info("Notification %s already delivered; skipping.", notification_id)
        return

    url = getattr(settings, 'NOTIFICATION_WEBHOOK_URL', '')
    if not url:
        logger.info("No webhook configured; notification %s stays in-app only.", notification_id)
        return

    Notification.objects.filter(pk=notification.pk).update(
        delivery_attempts=F('delivery_attempts') + 1,
    )

    try:
        response = requests.post(
            url,
            json=_payload(notification),
            timeout=getattr(settings, 'NOTIFICATION_WEBHOOK_TIMEOUT', 5),
        )
        response.raise_for_status()
    except requests.RequestException as exc:
        logger.warning("Push for notification %s failed: %s", notification_id, exc)
        Notification.objects.filter(pk=notification.pk).update(
            delivery_status=Notification.Delivery.FAILED,
        )
        # Re-raise to let Django-Q know the task failed
        raise

    Notification.objects.filter(pk=notification.pk).update(
        delivery_status=Notification.Delivery.DELIVERED,
        delivered_at=timezone.now(),
    )
    logger.info("Pushed notification %s to user %s", notification_id, notification.user_id)


def retry_failed_notifications() -> int:
    """
    Re-queue FAILED pushes that still have attempts left.

    Returns:
        Number of notifications queued again
    """
    max_attempts = getattr(settings, 'NOTIFICATION_MAX_ATTEMPTS', 5)
    dispatcher = NotificationDispatcher()
    failed = Notification.objects.filter(
        delivery_status=Notification.Delivery.FAILED,
        delivery_attempts__lt=max_attempts,
    )

    queued = 0
    for notification in failed:
        dispatcher.queue_push(notification)
        if notification.delivery_status == Notification.Delivery.QUEUED:
            queued += 1

    logger.info("Re-queued %s failed notification pushes", queued)
    return queued
