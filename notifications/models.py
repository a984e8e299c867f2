"""
Notifications app models

Notification rows are the persisted side effect of workflow transitions.
Push delivery to the configured webhook is tracked on the same row.
"""
from django.conf import settings
from django.db import models


class Notification(models.Model):
    """In-app notification addressed to a single user."""

    class Type(models.TextChoices):
        INFO = 'INFO', 'Info'
        SUCCESS = 'SUCCESS', 'Success'
        WARNING = 'WARNING', 'Warning'
        ERROR = 'ERROR', 'Error'
        VERIFICATION = 'VERIFICATION', 'Verification'
        MESSAGE = 'MESSAGE', 'Message'

    class Delivery(models.TextChoices):
        NOT_REQUIRED = 'NOT_REQUIRED', 'Not required'
        QUEUED = 'QUEUED', 'Queued'
        DELIVERED = 'DELIVERED', 'Delivered'
        FAILED = 'FAILED', 'Failed'

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='notifications',
    )
    title = models.CharField(max_length=255)
    message = models.TextField()
    type = models.CharField(max_length=20, choices=Type.choices, default=Type.INFO)
    category = models.CharField(max_length=64, blank=True)
    action_url = models.CharField(max_length=500, blank=True)

    is_read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)

    delivery_status = models.CharField(
        max_length=20,
        choices=Delivery.choices,
        default=Delivery.NOT_REQUIRED,
    )
    delivery_attempts = models.PositiveIntegerField(default=0)
    delivered_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.title} -> {self.user_id}"

    class Meta:
        verbose_name = 'Notification'
        verbose_name_plural = 'Notifications'
        ordering = ['-created_at']
