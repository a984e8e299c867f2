"""
Experience app models

Experience is the record a student asks an organization to verify.
Status only moves through the verification engine
(``verification.engine.VerificationEngine``); the portfolio reads it.

DRAFT -> PENDING -> APPROVED | REJECTED, REJECTED -> PENDING on resubmission,
PENDING -> DRAFT when the student withdraws.
"""
from django.conf import settings
from django.db import models
from django.db.models import Q


class VerificationStatus(models.TextChoices):
    DRAFT = 'DRAFT', 'Draft'
    PENDING = 'PENDING', 'Pending'
    APPROVED = 'APPROVED', 'Approved'
    REJECTED = 'REJECTED', 'Rejected'


class Experience(models.Model):
    """
    A student's internship, project, course or other achievement.

    ``is_public`` controls portfolio visibility and can only be true while the
    experience is APPROVED (enforced by a check constraint).
    """

    class Type(models.TextChoices):
        INTERNSHIP = 'INTERNSHIP', 'Internship'
        PROJECT = 'PROJECT', 'Project'
        COMPETITION = 'COMPETITION', 'Competition'
        COURSE = 'COURSE', 'Course'
        WORKSHOP = 'WORKSHOP', 'Workshop'
        CERTIFICATION = 'CERTIFICATION', 'Certification'
        VOLUNTEER = 'VOLUNTEER', 'Volunteer'
        RESEARCH = 'RESEARCH', 'Research'

    class Level(models.TextChoices):
        BEGINNER = 'BEGINNER', 'Beginner'
        INTERMEDIATE = 'INTERMEDIATE', 'Intermediate'
        ADVANCED = 'ADVANCED', 'Advanced'
        EXPERT = 'EXPERT', 'Expert'

    student = models.ForeignKey(
        'profiles.StudentProfile',
        on_delete=models.CASCADE,
        related_name='experiences',
    )
    organization = models.ForeignKey(
        'organizations.Organization',
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name='experiences',
    )

    title = models.CharField(max_length=255)
    description = models.TextField()
    type = models.CharField(max_length=20, choices=Type.choices)
    level = models.CharField(max_length=20, choices=Level.choices, default=Level.BEGINNER)
    start_date = models.DateField(null=True, blank=True)
    end_date = models.DateField(null=True, blank=True)
    is_ongoing = models.BooleanField(default=False)
    location = models.CharField(max_length=255, blank=True)
    skills = models.JSONField(default=list, blank=True)
    achievements = models.JSONField(default=list, blank=True)

    # Verification state
    status = models.CharField(
        max_length=10,
        choices=VerificationStatus.choices,
        default=VerificationStatus.DRAFT,
        db_index=True,
    )
    verified_at = models.DateTimeField(null=True, blank=True)
    verified_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        related_name='verified_experiences',
    )
    verification_note = models.TextField(blank=True)
    rejection_reason = models.TextField(blank=True)

    # Portfolio visibility
    is_public = models.BooleanField(default=False)
    is_highlighted = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.title} ({self.status})"

    @property
    def is_editable(self) -> bool:
        return self.status in (VerificationStatus.DRAFT, VerificationStatus.REJECTED)

    class Meta:
        verbose_name = 'Experience'
        verbose_name_plural = 'Experiences'
        ordering = ['-created_at']
        constraints = [
            models.CheckConstraint(
                condition=Q(is_public=False) | Q(status=VerificationStatus.APPROVED),
                name='experience_public_requires_approval',
            ),
        ]


class Document(models.Model):
    """
    Supporting document for an experience, stored by URL.

    Upload itself happens against the storage provider; only the resulting
    link is kept here.
    """

    class Type(models.TextChoices):
        CERTIFICATE = 'CERTIFICATE', 'Certificate'
        TRANSCRIPT = 'TRANSCRIPT', 'Transcript'
        PORTFOLIO = 'PORTFOLIO', 'Portfolio'
        RECOMMENDATION = 'RECOMMENDATION', 'Recommendation'
        PROJECT_REPORT = 'PROJECT_REPORT', 'Project report'
        OTHER = 'OTHER', 'Other'

    experience = models.ForeignKey(
        Experience,
        on_delete=models.CASCADE,
        related_name='documents',
    )
    url = models.URLField(max_length=500)
    type = models.CharField(max_length=20, choices=Type.choices, default=Type.OTHER)
    title = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.title or self.url

    class Meta:
        ordering = ['-created_at']
