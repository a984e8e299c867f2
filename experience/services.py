"""
Experience Service Layer
Handles validation and business logic for experience management.

Status changes are not made here; they belong to the verification engine.
This module owns the student-editable content, supporting documents,
portfolio visibility and the public listing.
"""
from datetime import date, datetime
import logging
from typing import Dict, Optional

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from verification import audit, errors
from .models import Document, Experience, VerificationStatus

logger = logging.getLogger(__name__)


class ExperienceService:
    """Service for managing student experiences with validation."""

    VALID_TYPES = [choice for choice, _ in Experience.Type.choices]
    VALID_LEVELS = [choice for choice, _ in Experience.Level.choices]
    DATE_FORMAT = '%Y-%m-%d'

    PUBLIC_SORTS = {
        'recent': ['-created_at'],
        'featured': ['-is_highlighted', '-created_at'],
        'title': ['title'],
    }

    @staticmethod
    def _parse_date(value, field_name: str, errors_out: list) -> Optional[date]:
        if value in (None, ''):
            return None
        if isinstance(value, date):
            return value
        try:
            return datetime.strptime(str(value), ExperienceService.DATE_FORMAT).date()
        except ValueError:
            errors_out.append(f"{field_name} must be in YYYY-MM-DD format")
            return None

    @staticmethod
    def validate_experience(data: Dict) -> Dict:
        """
        Validate experience data structure and types.

        Args:
            data: Dictionary with experience fields

        Returns:
            Cleaned data dictionary

        Raises:
            ValidationError: If validation fails
        """
        errors_out = []

        # Required fields
        required = ['title', 'description', 'type']
        for field in required:
            if not data.get(field):
                errors_out.append(f"{field} is required")

        # Enum validation
        if data.get('type') and data['type'] not in ExperienceService.VALID_TYPES:
            errors_out.append(f"type must be one of: {', '.join(ExperienceService.VALID_TYPES)}")

        level = data.get('level') or Experience.Level.BEGINNER
        if level not in ExperienceService.VALID_LEVELS:
            errors_out.append(f"level must be one of: {', '.join(ExperienceService.VALID_LEVELS)}")

        # Date validation
        is_ongoing = bool(data.get('is_ongoing', False))
        start_date = ExperienceService._parse_date(data.get('start_date'), 'start_date', errors_out)
        end_date = ExperienceService._parse_date(data.get('end_date'), 'end_date', errors_out)

        if is_ongoing and end_date:
            errors_out.append("end_date should be empty when is_ongoing is true")
        if start_date and end_date and end_date < start_date:
            errors_out.append("end_date cannot be before start_date")

        # Skills must be a list of strings
        skills = data.get('skills', [])
        if not isinstance(skills, list) or not all(isinstance(s, str) for s in skills):
            errors_out.append("skills must be a list of strings")

        # Achievements must be a list of strings
        achievements = data.get('achievements', [])
        if not isinstance(achievements, list) or not all(isinstance(a, str) for a in achievements):
            errors_out.append("achievements must be a list of strings")

        if errors_out:
            raise ValidationError(errors_out)

        # Return cleaned data
        return {
            'title': data['title'].strip(),
            'description': data['description'].strip(),
            'type': data['type'],
            'level': level,
            'start_date': start_date,
            'end_date': None if is_ongoing else end_date,
            'is_ongoing': is_ongoing,
            'location': (data.get('location') or '').strip(),
            'skills': [s.strip() for s in skills if s.strip()],
            'achievements': [a.strip() for a in achievements if a.strip()],
        }

    @staticmethod
    def get_owned_experience(experience_id, actor) -> Experience:
        """
        Load an experience owned by the acting student.

        Raises:
            errors.NotFound: No such experience
            errors.Unauthorized: The actor does not own it
        """
        try:
            experience = Experience.objects.select_related('student', 'organization').get(pk=experience_id)
        except (Experience.DoesNotExist, ValueError, TypeError):
            raise errors.NotFound('Experience not found.') from None
        if not (actor.is_student and experience.student.user_id == actor.user_id):
            raise errors.Unauthorized('Only the student who owns this experience can do this.')
        return experience

    @staticmethod
    def create_experience(student, data: Dict, organization=None) -> Experience:
        """
        Create a DRAFT experience for ``student``.

        Raises:
            ValidationError: If validation fails
        """
        clean_data = ExperienceService.validate_experience(data)
        experience = Experience.objects.create(
            student=student,
            organization=organization,
            status=VerificationStatus.DRAFT,
            **clean_data,
        )
        logger.info("Experience %s created for student %s", experience.pk, student.pk)
        return experience

    @staticmethod
    def update_experience(experience_id, actor, data: Dict, organization=None) -> Experience:
        """
        Update an experience's content.

        Only DRAFT and REJECTED experiences are editable; a PENDING one is
        under review and an APPROVED one is part of the verified record.

        Raises:
            ValidationError: If validation fails
            errors.InvalidState: If the experience is locked
        """
        experience = ExperienceService.get_owned_experience(experience_id, actor)
        if not experience.is_editable:
            raise errors.InvalidState(
                f'Cannot edit an experience that is {experience.get_status_display().lower()}.'
            )

        clean_data = ExperienceService.validate_experience(data)

        # Conditional so a concurrent submit cannot be overwritten.
        changes = dict(clean_data)
        if organization is not None:
            changes['organization'] = organization
        updated = Experience.objects.filter(
            pk=experience.pk,
            status__in=[VerificationStatus.DRAFT, VerificationStatus.REJECTED],
        ).update(updated_at=timezone.now(), **changes)
        if not updated:
            raise errors.Conflict('The experience changed while you were editing it.')

        experience.refresh_from_db()
        return experience

    @staticmethod
    def delete_experience(experience_id, actor) -> None:
        """Delete a DRAFT or REJECTED experience."""
        experience = ExperienceService.get_owned_experience(experience_id, actor)
        if not experience.is_editable:
            raise errors.InvalidState(
                f'Cannot delete an experience that is {experience.get_status_display().lower()}.'
            )

        pk = experience.pk
        with transaction.atomic():
            old_values = audit.snapshot(experience)
            experience.delete()
            audit.record('EXPERIENCE_DELETED', 'experience', pk, actor, old_values, None)
        logger.info("Experience %s deleted by user %s", pk, actor.user_id)

    @staticmethod
    def set_visibility(experience_id, actor, is_public: bool) -> Experience:
        """
        Show or hide an experience on the student's portfolio.

        Publishing requires APPROVED; hiding is always allowed.
        """
        experience = ExperienceService.get_owned_experience(experience_id, actor)
        if experience.is_public == is_public:
            return experience

        filters = {'pk': experience.pk}
        if is_public:
            if experience.status != VerificationStatus.APPROVED:
                raise errors.InvalidState('Only verified experiences can be shown on the portfolio.')
            filters['status'] = VerificationStatus.APPROVED

        old_values = audit.snapshot(experience)
        with transaction.atomic():
            updated = Experience.objects.filter(**filters).update(
                is_public=is_public,
                updated_at=timezone.now(),
            )
            if not updated:
                raise errors.Conflict('The experience changed; reload and try again.')
            experience.refresh_from_db()
            audit.record(
                'EXPERIENCE_PUBLISHED' if is_public else 'EXPERIENCE_UNPUBLISHED',
                'experience',
                experience.pk,
                actor,
                old_values,
                audit.snapshot(experience),
            )
        return experience

    @staticmethod
    def add_document(experience_id, actor, data: Dict) -> Document:
        """Attach a supporting document link to an owned experience."""
        experience = ExperienceService.get_owned_experience(experience_id, actor)

        url = (data.get('url') or '').strip()
        if not url:
            raise ValidationError("url is required")
        doc_type = data.get('type') or Document.Type.OTHER
        if doc_type not in Document.Type.values:
            raise ValidationError(f"type must be one of: {', '.join(Document.Type.values)}")

        return Document.objects.create(
            experience=experience,
            url=url,
            type=doc_type,
            title=(data.get('title') or '').strip(),
        )

    @staticmethod
    def history(experience_id, actor):
        """
        Audit trail of an experience.

        Visible to the owning student, members of its organization and admins.
        """
        try:
            experience = Experience.objects.select_related('student').get(pk=experience_id)
        except (Experience.DoesNotExist, ValueError, TypeError):
            raise errors.NotFound('Experience not found.') from None

        allowed = (
            actor.is_admin
            or experience.student.user_id == actor.user_id
            or (experience.organization_id is not None and actor.is_member_of(experience.organization_id))
        )
        if not allowed:
            raise errors.Unauthorized('You cannot view the history of this experience.')
        return audit.history('experience', experience.pk)

    @staticmethod
    def get_public_experiences(filters: Optional[Dict] = None):
        """
        Verified experiences that their students chose to show publicly.

        Args:
            filters: Optional search, type, level, organization, skill,
                featured and sort values

        Returns:
            QuerySet of APPROVED, public experiences
        """
        filters = filters or {}
        queryset = Experience.objects.filter(
            is_public=True,
            status=VerificationStatus.APPROVED,
        ).select_related('student', 'organization')

        search = filters.get('search')
        if search:
            queryset = queryset.filter(Q(title__icontains=search) | Q(description__icontains=search))
        if filters.get('type'):
            queryset = queryset.filter(type=filters['type'])
        if filters.get('level'):
            queryset = queryset.filter(level=filters['level'])
        if filters.get('organization'):
            queryset = queryset.filter(organization__name__icontains=filters['organization'])
        if filters.get('featured') in (True, 'true', '1'):
            queryset = queryset.filter(is_highlighted=True)

        ordering = ExperienceService.PUBLIC_SORTS.get(filters.get('sort') or 'recent', ['-created_at'])
        queryset = queryset.order_by(*ordering)

        skill = (filters.get('skill') or '').strip().lower()
        if skill:
            # JSON containment lookups are not portable to SQLite; filter in Python.
            ids = [
                exp.pk for exp in queryset
                if skill in (s.lower() for s in exp.skills or [])
            ]
            queryset = queryset.filter(pk__in=ids).order_by(*ordering)

        return queryset
