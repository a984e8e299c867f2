"""
Verification engine.

Enforces the experience status state machine:

    DRAFT -> PENDING            submit (owning student)
    REJECTED -> PENDING         submit again (owning student)
    PENDING -> DRAFT            withdraw (owning student)
    PENDING -> APPROVED         approve (organization member or admin)
    PENDING -> REJECTED         reject (organization member or admin)

Every status change is a conditional UPDATE on the expected current status,
so two reviewers racing on the same experience cannot both win: the loser
gets ``Conflict``. The status change, the verification request update and the
audit entry commit together. Notifications go out after the commit and are
best-effort.

Public methods never raise workflow errors; they return a
``TransitionResult`` whose ``error`` carries the failure kind.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.utils import timezone

from experience.models import Experience, VerificationStatus
from notifications.models import Notification
from notifications.services import NotificationDispatcher, build_action_url
from organizations.models import Organization

from . import audit, errors
from .models import VerificationMessage, VerificationRequest

logger = logging.getLogger(__name__)

SUBMITTABLE = (VerificationStatus.DRAFT, VerificationStatus.REJECTED)


@dataclass
class TransitionResult:
    experience: Optional[Experience] = None
    request: Optional[VerificationRequest] = None
    error: Optional[errors.VerificationError] = None
    notified: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class BulkResult:
    successful: int = 0
    failed: List[Dict] = field(default_factory=list)


class VerificationEngine:
    """Applies verification transitions on behalf of an ``ActorContext``."""

    BULK_OPERATIONS = ('approve', 'reject')

    def __init__(self, dispatcher: Optional[NotificationDispatcher] = None):
        self.dispatcher = dispatcher or NotificationDispatcher()

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def submit(self, experience_id, actor, organization_id=None, document_id=None, message: str = '') -> TransitionResult:
        """Send a DRAFT or REJECTED experience to its organization for review."""
        return self._run(
            'submit', experience_id, actor, self._submit,
            organization_id=organization_id, document_id=document_id, message=message,
        )

    def approve(self, experience_id, actor, note: Optional[str] = None, request_id=None) -> TransitionResult:
        """
        Approve a PENDING experience.

        With ``request_id`` the approval only applies while that request is
        still the open one.
        """
        return self._run('approve', experience_id, actor, self._approve, note=note, request_id=request_id)

    def reject(self, experience_id, actor, reason: str, request_id=None) -> TransitionResult:
        return self._run('reject', experience_id, actor, self._reject, reason=reason, request_id=request_id)

    def request_more_info(self, experience_id, actor, message: str, request_id=None) -> TransitionResult:
        """Ask the student for more information without changing status."""
        return self._run(
            'request_more_info', experience_id, actor, self._request_more_info,
            message=message, request_id=request_id,
        )

    def withdraw(self, experience_id, actor) -> TransitionResult:
        """Pull a PENDING experience back to DRAFT."""
        return self._run('withdraw', experience_id, actor, self._withdraw)

    def assign(self, request_id, actor, assignee_id) -> TransitionResult:
        """Assign an open verification request to a fellow organization member."""
        return self._run('assign', request_id, actor, self._assign, assignee_id=assignee_id)

    def bulk(self, experience_ids: Iterable, actor, operation: str, note=None, reason=None) -> BulkResult:
        """
        Approve or reject several experiences, one transition each.

        Each experience succeeds or fails on its own; failures are reported
        with their error kind.
        """
        if operation not in self.BULK_OPERATIONS:
            raise ValueError(f"Unsupported bulk operation: {operation}")

        outcome = BulkResult()
        for experience_id in experience_ids:
            if operation == 'approve':
                result = self.approve(experience_id, actor, note=note)
            else:
                result = self.reject(experience_id, actor, reason=reason)

            if result.ok:
                outcome.successful += 1
            else:
                outcome.failed.append({
                    'experience_id': experience_id,
                    'error': result.error.message,
                    'kind': result.error.kind.value,
                })

        logger.info(
            "Bulk %s by user %s: %s succeeded, %s failed",
            operation,
            actor.user_id,
            outcome.successful,
            len(outcome.failed),
        )
        return outcome

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def _submit(self, experience_id, actor, organization_id=None, document_id=None, message=''):
        experience = self._fetch_experience(experience_id)
        self._authorize_owner(experience, actor)
        self._require_status(experience, SUBMITTABLE, 'submit')

        organization = experience.organization
        if organization_id is not None:
            organization = Organization.objects.filter(pk=organization_id, is_active=True).first()
            if organization is None:
                raise errors.NotFound('Organization not found.')
        if organization is None:
            raise errors.ValidationError('Choose the organization that should verify this experience.')

        document = None
        if document_id is not None:
            document = experience.documents.filter(pk=document_id).first()
            if document is None:
                raise errors.NotFound('Document not found.')

        expected = experience.status
        old_values = audit.snapshot(experience)

        try:
            with transaction.atomic():
                # The previous rejection reason lives on in the audit trail only.
                self._transition(
                    experience,
                    expected,
                    status=VerificationStatus.PENDING,
                    organization_id=organization.pk,
                    rejection_reason='',
                )
                request = VerificationRequest.objects.create(
                    student_id=experience.student_id,
                    organization=organization,
                    experience=experience,
                    document=document,
                    title=experience.title,
                    message=message or '',
                )
                audit.record(
                    'EXPERIENCE_SUBMITTED',
                    'experience',
                    experience.pk,
                    actor,
                    old_values,
                    audit.snapshot(experience),
                    details={
                        'request_id': request.pk,
                        'resubmission': expected == VerificationStatus.REJECTED,
                    },
                )
        except IntegrityError as exc:
            raise errors.Conflict('This experience already has an open verification request.') from exc

        notified = self._notify_reviewers(
            organization,
            'New verification request',
            f'{experience.student.full_name} submitted "{experience.title}" for verification.',
            build_action_url(f'organization/requests/{request.pk}'),
        )
        return TransitionResult(experience=experience, request=request, notified=notified)

    def _approve(self, experience_id, actor, note=None, request_id=None):
        experience = self._fetch_experience(experience_id)
        self._authorize_reviewer(experience, actor)
        self._require_status(experience, (VerificationStatus.PENDING,), 'approve')

        note = (note or '').strip()
        old_values = audit.snapshot(experience)
        now = timezone.now()

        with transaction.atomic():
            self._require_open_request(experience, request_id)
            self._transition(
                experience,
                VerificationStatus.PENDING,
                status=VerificationStatus.APPROVED,
                verified_at=now,
                verified_by_id=actor.user_id,
                verification_note=note,
                is_public=True,
            )
            request = self._close_request(experience, VerificationStatus.APPROVED, actor, note, now)
            audit.record(
                'EXPERIENCE_APPROVED',
                'experience',
                experience.pk,
                actor,
                old_values,
                audit.snapshot(experience),
                details={'request_id': getattr(request, 'pk', None), 'note': note},
            )

        notified = self._notify(
            experience.student.user_id,
            'Experience verified',
            f'"{experience.title}" was verified by {experience.organization.name}.',
            build_action_url(f'student/experiences/{experience.pk}'),
            type=Notification.Type.SUCCESS,
        )
        return TransitionResult(experience=experience, request=request, notified=int(notified))

    def _reject(self, experience_id, actor, reason='', request_id=None):
        experience = self._fetch_experience(experience_id)
        self._authorize_reviewer(experience, actor)

        reason = (reason or '').strip()
        if not reason:
            raise errors.ValidationError('A rejection reason is required.')
        self._require_status(experience, (VerificationStatus.PENDING,), 'reject')

        old_values = audit.snapshot(experience)
        now = timezone.now()

        with transaction.atomic():
            self._require_open_request(experience, request_id)
            self._transition(
                experience,
                VerificationStatus.PENDING,
                status=VerificationStatus.REJECTED,
                verified_at=now,
                verified_by_id=actor.user_id,
                rejection_reason=reason,
            )
            request = self._close_request(experience, VerificationStatus.REJECTED, actor, reason, now)
            audit.record(
                'EXPERIENCE_REJECTED',
                'experience',
                experience.pk,
                actor,
                old_values,
                audit.snapshot(experience),
                details={'request_id': getattr(request, 'pk', None), 'reason': reason},
            )

        notified = self._notify(
            experience.student.user_id,
            'Experience not verified',
            f'{experience.organization.name} could not verify "{experience.title}": {reason}',
            build_action_url(f'student/experiences/{experience.pk}'),
            type=Notification.Type.WARNING,
        )
        return TransitionResult(experience=experience, request=request, notified=int(notified))

    def _request_more_info(self, experience_id, actor, message='', request_id=None):
        experience = self._fetch_experience(experience_id)
        self._authorize_reviewer(experience, actor)

        message = (message or '').strip()
        if not message:
            raise errors.ValidationError('A message is required.')
        self._require_status(experience, (VerificationStatus.PENDING,), 'request more information on')

        with transaction.atomic():
            request = self._require_open_request(experience, request_id)
            if request is None:
                raise errors.Conflict()
            VerificationMessage.objects.create(request=request, author_id=actor.user_id, body=message)
            audit.record(
                'VERIFICATION_INFO_REQUESTED',
                'verification_request',
                request.pk,
                actor,
                details={'experience_id': experience.pk, 'message': message},
            )

        notified = self._notify(
            experience.student.user_id,
            'More information needed',
            f'{experience.organization.name} needs more information about "{experience.title}": {message}',
            build_action_url(f'student/verification-requests/{request.pk}'),
            type=Notification.Type.MESSAGE,
        )
        return TransitionResult(experience=experience, request=request, notified=int(notified))

    def _withdraw(self, experience_id, actor):
        experience = self._fetch_experience(experience_id)
        self._authorize_owner(experience, actor)
        self._require_status(experience, (VerificationStatus.PENDING,), 'withdraw')

        old_values = audit.snapshot(experience)
        now = timezone.now()

        with transaction.atomic():
            self._transition(experience, VerificationStatus.PENDING, status=VerificationStatus.DRAFT)
            request = self._close_request(
                experience, VerificationStatus.DRAFT, actor, 'Withdrawn by student', now,
            )
            audit.record(
                'VERIFICATION_WITHDRAWN',
                'experience',
                experience.pk,
                actor,
                old_values,
                audit.snapshot(experience),
                details={'request_id': getattr(request, 'pk', None)},
            )

        notified = self._notify_reviewers(
            experience.organization,
            'Verification request withdrawn',
            f'{experience.student.full_name} withdrew "{experience.title}" from verification.',
        )
        return TransitionResult(experience=experience, request=request, notified=notified)

    def _assign(self, request_id, actor, assignee_id=None):
        request = (
            VerificationRequest.objects.select_related('experience', 'organization')
            .filter(pk=request_id)
            .first()
        )
        if request is None:
            raise errors.NotFound('Verification request not found.')
        if not (actor.is_admin or actor.is_member_of(request.organization_id)):
            raise errors.Unauthorized('You are not a member of the organization handling this request.')
        if not request.is_open:
            raise errors.InvalidState('Only open verification requests can be assigned.')

        assignee = (
            get_user_model().objects.filter(
                pk=assignee_id,
                organization_id=request.organization_id,
                role='ORGANIZATION',
                is_active=True,
            ).first()
        )
        if assignee is None:
            raise errors.ValidationError('The assignee must be a member of the organization.')

        old_values = audit.snapshot(request, audit.REQUEST_FIELDS)
        with transaction.atomic():
            updated = VerificationRequest.objects.filter(
                pk=request.pk, status=VerificationStatus.PENDING,
            ).update(assigned_to=assignee, updated_at=timezone.now())
            if not updated:
                raise errors.Conflict()
            request.refresh_from_db()
            audit.record(
                'VERIFICATION_ASSIGNED',
                'verification_request',
                request.pk,
                actor,
                old_values,
                audit.snapshot(request, audit.REQUEST_FIELDS),
            )

        notified = 0
        if assignee.pk != actor.user_id:
            notified = int(self._notify(
                assignee.pk,
                'Verification request assigned to you',
                f'You were assigned to review "{request.title}".',
                build_action_url(f'organization/requests/{request.pk}'),
                type=Notification.Type.VERIFICATION,
            ))
        return TransitionResult(experience=request.experience, request=request, notified=notified)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _run(self, operation, subject_id, actor, handler, **kwargs) -> TransitionResult:
        try:
            result = handler(subject_id, actor, **kwargs)
        except errors.VerificationError as exc:
            logger.info(
                "%s on %s by user %s refused: %s (%s)",
                operation, subject_id, actor.user_id, exc.kind.value, exc.message,
            )
            return TransitionResult(error=exc)

        logger.info(
            "%s on %s by user %s succeeded; experience status %s",
            operation, subject_id, actor.user_id, result.experience.status,
        )
        return result

    def _fetch_experience(self, experience_id) -> Experience:
        try:
            return Experience.objects.select_related('student', 'organization').get(pk=experience_id)
        except (Experience.DoesNotExist, ValueError, TypeError):
            raise errors.NotFound("Experience not found.") from None

    @staticmethod
    def _authorize_owner(experience, actor):
        if not (actor.is_student and experience.student.user_id == actor.user_id):
            raise errors.Unauthorized('Only the student who owns this experience can do this.')

    @staticmethod
    def _authorize_reviewer(experience, actor):
        if actor.is_admin:
            return
        if experience.organization_id is None or not actor.is_member_of(experience.organization_id):
            raise errors.Unauthorized('You are not a member of the organization verifying this experience.')

    @staticmethod
    def _require_status(experience, allowed, verb):
        if experience.status not in allowed:
            raise errors.InvalidState(
                f'Cannot {verb} an experience that is {experience.get_status_display().lower()}.'
            )

    @staticmethod
    def _transition(experience, expected_status, **changes):
        """Conditional update: applies ``changes`` only if status is still ``expected_status``."""
        updated = Experience.objects.filter(pk=experience.pk, status=expected_status).update(
            updated_at=timezone.now(),
            **changes,
        )
        if not updated:
            raise errors.Conflict()
        experience.refresh_from_db()

    def _require_open_request(self, experience, request_id=None) -> Optional[VerificationRequest]:
        """
        Lock the open request of ``experience``.

        When ``request_id`` is given it must be that open request; a reviewer
        looking at an older submission gets ``Conflict``.
        """
        request = self._open_request(experience)
        if request_id is None:
            return request
        if request is None or str(request.pk) != str(request_id):
            raise errors.Conflict('This verification request is no longer open.')
        return request

    @staticmethod
    def _open_request(experience) -> Optional[VerificationRequest]:
        return (
            VerificationRequest.objects.select_for_update()
            .filter(experience=experience, status=VerificationStatus.PENDING)
            .first()
        )

    def _close_request(self, experience, status, actor, note, now) -> Optional[VerificationRequest]:
        request = self._open_request(experience)
        if request is None:
            logger.warning("Experience %s had no open verification request to close.", experience.pk)
            return None

        updated = VerificationRequest.objects.filter(
            pk=request.pk, status=VerificationStatus.PENDING,
        ).update(
            status=status,
            processed_at=now,
            processed_by_id=actor.user_id,
            response_note=note,
            updated_at=now,
        )
        if not updated:
            raise errors.Conflict()
        request.refresh_from_db()
        return request

    def _notify(self, user_id, title, message, action_url=None, type=Notification.Type.VERIFICATION) -> bool:
        try:
            return self.dispatcher.notify(
                user_id, title, message, action_url, type=type, category='verification',
            )
        except Exception as exc:  # noqa: BLE001
            logger.warning("Notification to user %s failed: %s", user_id, exc)
            return False

    def _notify_reviewers(self, organization, title, message, action_url=None) -> int:
        if organization is None:
            return 0
        try:
            reviewer_ids = list(organization.reviewers().values_list('id', flat=True))
        except Exception as exc:  # noqa: BLE001
            logger.warning("Could not load reviewers for organization %s: %s", organization.pk, exc)
            return 0
        return sum(1 for user_id in reviewer_ids if self._notify(user_id, title, message, action_url))
