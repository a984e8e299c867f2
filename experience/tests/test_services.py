from django.core.exceptions import ValidationError
from django.test import SimpleTestCase, TestCase

from experience.models import VerificationStatus
from experience.services import ExperienceService
from verification import errors
from verification.engine import VerificationEngine
from verification.models import AuditLog
from verification.tests.utils import actor_for, make_experience, make_member, make_organization, make_student


class ValidateExperienceTests(SimpleTestCase):
    """Validation helpers that do not hit the database."""

    def valid_data(self, **overrides):
        data = {
            'title': '  Research assistant ',
            'description': 'Lab work',
            'type': 'RESEARCH',
            'start_date': '2024-01-15',
            'end_date': '2024-06-30',
            'skills': ['Python', ' '],
        }
        data.update(overrides)
        return data

    def test_clean_data(self) -> None:
        clean = ExperienceService.validate_experience(self.valid_data())

        self.assertEqual(clean['title'], 'Research assistant')
        self.assertEqual(clean['level'], 'BEGINNER')
        self.assertEqual(clean['start_date'].isoformat(), '2024-01-15')
        self.assertEqual(clean['skills'], ['Python'])

    def test_collects_every_problem(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            ExperienceService.validate_experience({'type': 'PARTY', 'start_date': '15/01/2024'})

        messages = ctx.exception.messages
        self.assertIn('title is required', messages)
        self.assertIn('description is required', messages)
        self.assertIn('start_date must be in YYYY-MM-DD format', messages)
        self.assertTrue(any(message.startswith('type must be one of') for message in messages))

    def test_end_before_start(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            ExperienceService.validate_experience(self.valid_data(end_date='2023-12-31'))

        self.assertIn('end_date cannot be before start_date', ctx.exception.messages)

    def test_ongoing_experience_has_no_end_date(self) -> None:
        with self.assertRaises(ValidationError):
            ExperienceService.validate_experience(self.valid_data(is_ongoing=True))

    def test_skills_must_be_a_list(self) -> None:
        with self.assertRaises(ValidationError):
            ExperienceService.validate_experience(self.valid_data(skills='Python'))


class ExperienceServiceTests(TestCase):
    def setUp(self) -> None:
        self.organization = make_organization()
        self.reviewer = make_member(self.organization)
        self.student_user, self.student = make_student()
        self.actor = actor_for(self.student_user)
        self.experience = make_experience(self.student, self.organization)

    def content(self, **overrides):
        data = {'title': 'Updated title', 'description': 'Updated', 'type': 'PROJECT'}
        data.update(overrides)
        return data

    def test_create_starts_in_draft(self) -> None:
        experience = ExperienceService.create_experience(self.student, self.content())

        self.assertEqual(experience.status, VerificationStatus.DRAFT)
        self.assertFalse(experience.is_public)

    def test_update_draft(self) -> None:
        experience = ExperienceService.update_experience(self.experience.pk, self.actor, self.content())

        self.assertEqual(experience.title, 'Updated title')

    def test_pending_experience_is_locked(self) -> None:
        VerificationEngine().submit(self.experience.pk, self.actor)

        with self.assertRaises(errors.InvalidState):
            ExperienceService.update_experience(self.experience.pk, self.actor, self.content())
        with self.assertRaises(errors.InvalidState):
            ExperienceService.delete_experience(self.experience.pk, self.actor)

    def test_other_students_cannot_edit(self) -> None:
        other_user, _ = make_student('other-student', 'Ben Ortiz')

        with self.assertRaises(errors.Unauthorized):
            ExperienceService.update_experience(self.experience.pk, actor_for(other_user), self.content())

    def test_delete_is_audited(self) -> None:
        pk = self.experience.pk

        ExperienceService.delete_experience(pk, self.actor)

        entry = AuditLog.objects.get(action='EXPERIENCE_DELETED')
        self.assertEqual(entry.entity_id, str(pk))
        self.assertEqual(entry.old_values['status'], VerificationStatus.DRAFT)

    def test_only_approved_experiences_can_be_published(self) -> None:
        with self.assertRaises(errors.InvalidState):
            ExperienceService.set_visibility(self.experience.pk, self.actor, True)

    def test_unpublish_and_publish_approved_experience(self) -> None:
        engine = VerificationEngine()
        engine.submit(self.experience.pk, self.actor)
        engine.approve(self.experience.pk, actor_for(self.reviewer))

        hidden = ExperienceService.set_visibility(self.experience.pk, self.actor, False)
        self.assertFalse(hidden.is_public)
        shown = ExperienceService.set_visibility(self.experience.pk, self.actor, True)
        self.assertTrue(shown.is_public)

        actions = list(AuditLog.objects.values_list('action', flat=True))
        self.assertEqual(actions[-2:], ['EXPERIENCE_UNPUBLISHED', 'EXPERIENCE_PUBLISHED'])

    def test_public_listing_filters(self) -> None:
        engine = VerificationEngine()
        approved = make_experience(self.student, self.organization, title='Robotics club', skills=['C++'])
        engine.submit(approved.pk, self.actor)
        engine.approve(approved.pk, actor_for(self.reviewer))

        self.assertEqual(list(ExperienceService.get_public_experiences()), [approved])
        self.assertEqual(list(ExperienceService.get_public_experiences({'skill': 'c++'})), [approved])
        self.assertEqual(list(ExperienceService.get_public_experiences({'skill': 'rust'})), [])
        self.assertEqual(list(ExperienceService.get_public_experiences({'search': 'robotics'})), [approved])

    def test_history_visible_to_reviewers_not_strangers(self) -> None:
        VerificationEngine().submit(self.experience.pk, self.actor)

        entries = ExperienceService.history(self.experience.pk, actor_for(self.reviewer))
        self.assertEqual([entry.action for entry in entries], ['EXPERIENCE_SUBMITTED'])

        stranger, _ = make_student('stranger', 'Carl Diaz')
        with self.assertRaises(errors.Unauthorized):
            ExperienceService.history(self.experience.pk, actor_for(stranger))
