"""
Verification app models

VerificationRequest tracks one verification attempt for an experience,
VerificationMessage holds the "more information needed" exchanges on it, and
AuditLog is the append-only history of every workflow mutation.
"""
from django.conf import settings
from django.db import models
from django.db.models import Q

from experience.models import VerificationStatus


class VerificationRequest(models.Model):
    """
    One submission of an experience to an organization.

    Created PENDING by ``submit``; closed (APPROVED, REJECTED, or DRAFT when
    withdrawn) with ``processed_at``/``processed_by`` set. A new submission
    creates a new request, so closed requests are the verification history.
    """

    EXPERIENCE = 'EXPERIENCE'

    type = models.CharField(max_length=30, default=EXPERIENCE)
    title = models.CharField(max_length=255)
    message = models.TextField(blank=True)
    response_note = models.TextField(blank=True)
    status = models.CharField(
        max_length=10,
        choices=VerificationStatus.choices,
        default=VerificationStatus.PENDING,
        db_index=True,
    )
    priority = models.PositiveSmallIntegerField(default=1)

    student = models.ForeignKey(
        'profiles.StudentProfile',
        on_delete=models.CASCADE,
        related_name='verification_requests',
    )
    organization = models.ForeignKey(
        'organizations.Organization',
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name='verification_requests',
    )
    experience = models.ForeignKey(
        'experience.Experience',
        on_delete=models.CASCADE,
        related_name='verification_requests',
    )
    document = models.ForeignKey(
        'experience.Document',
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name='verification_requests',
    )
    assigned_to = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name='assigned_verification_requests',
    )
    processed_at = models.DateTimeField(null=True, blank=True)
    processed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name='processed_verification_requests',
    )
    due_date = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.title} [{self.status}]"

    @property
    def is_open(self) -> bool:
        return self.status == VerificationStatus.PENDING

    class Meta:
        verbose_name = 'Verification Request'
        verbose_name_plural = 'Verification Requests'
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(
                fields=['experience'],
                condition=Q(status=VerificationStatus.PENDING),
                name='one_open_request_per_experience',
            ),
        ]


class VerificationMessage(models.Model):
    """A note exchanged on an open verification request."""

    request = models.ForeignKey(
        VerificationRequest,
        on_delete=models.CASCADE,
        related_name='messages',
    )
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        on_delete=models.SET_NULL,
        related_name='verification_messages',
    )
    body = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['created_at']


class AuditLogImmutable(Exception):
    """Raised on any attempt to modify or remove audit history."""


class AuditLogQuerySet(models.QuerySet):
    def update(self, **kwargs):
        raise AuditLogImmutable("Audit log entries cannot be updated.")

    def delete(self):
        raise AuditLogImmutable("Audit log entries cannot be deleted.")


class AuditLog(models.Model):
    """
    Append-only record of a workflow mutation.

    ``old_values``/``new_values`` are JSON snapshots of the audited fields
    before and after the change.
    """

    action = models.CharField(max_length=64, db_index=True)
    entity = models.CharField(max_length=64)
    entity_id = models.CharField(max_length=64, db_index=True)
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        on_delete=models.PROTECT,
        related_name='audit_logs',
    )
    old_values = models.JSONField(null=True, blank=True)
    new_values = models.JSONField(null=True, blank=True)
    details = models.JSONField(default=dict, blank=True)
    ip_address = models.GenericIPAddressField(null=True, blank=True)
    user_agent = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    objects = AuditLogQuerySet.as_manager()

    def __str__(self):
        return f"{self.action} {self.entity}#{self.entity_id}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise AuditLogImmutable("Audit log entries cannot be updated.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise AuditLogImmutable("Audit log entries cannot be deleted.")

    class Meta:
        verbose_name = 'Audit Log'
        verbose_name_plural = 'Audit Logs'
        ordering = ['created_at', 'id']
        indexes = [
            models.Index(fields=['entity', 'entity_id'], name='audit_entity_idx'),
        ]
