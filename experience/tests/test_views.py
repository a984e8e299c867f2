from django.test import TestCase
from rest_framework.test import APIClient

from experience.models import Experience, VerificationStatus
from verification.engine import VerificationEngine
from verification.tests.utils import actor_for, make_experience, make_member, make_organization, make_student

EXPERIENCES_URL = '/api/experiences/'


class ExperienceApiTests(TestCase):
    def setUp(self) -> None:
        self.client = APIClient()
        self.organization = make_organization()
        self.reviewer = make_member(self.organization)
        self.student_user, self.student = make_student()
        self.client.force_authenticate(self.student_user)

    def payload(self, **overrides):
        data = {
            'title': 'Summer internship',
            'description': 'Backend work',
            'type': 'INTERNSHIP',
            'start_date': '2024-06-01',
            'end_date': '2024-08-31',
            'skills': ['Django'],
            'organization': self.organization.pk,
        }
        data.update(overrides)
        return data

    def test_create_draft(self) -> None:
        response = self.client.post(EXPERIENCES_URL, self.payload(), format='json')

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data['status'], VerificationStatus.DRAFT)
        self.assertEqual(response.data['organization'], self.organization.pk)

    def test_create_and_submit(self) -> None:
        response = self.client.post(EXPERIENCES_URL, self.payload(submit=True), format='json')

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data['status'], VerificationStatus.PENDING)

    def test_create_with_invalid_dates(self) -> None:
        response = self.client.post(EXPERIENCES_URL, self.payload(end_date='2024-01-01'), format='json')

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data['kind'], 'VALIDATION_ERROR')
        self.assertFalse(Experience.objects.exists())

    def test_reviewers_cannot_create(self) -> None:
        self.client.force_authenticate(self.reviewer)

        response = self.client.post(EXPERIENCES_URL, self.payload(), format='json')

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.data['kind'], 'UNAUTHORIZED')

    def test_editing_pending_experience_is_refused(self) -> None:
        experience = make_experience(self.student, self.organization)
        VerificationEngine().submit(experience.pk, actor_for(self.student_user))

        response = self.client.patch(f'{EXPERIENCES_URL}{experience.pk}/', {'title': 'New'}, format='json')

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data['kind'], 'INVALID_STATE')

    def test_partial_update_keeps_other_fields(self) -> None:
        experience = make_experience(self.student, self.organization)

        response = self.client.patch(f'{EXPERIENCES_URL}{experience.pk}/', {'title': 'Renamed'}, format='json')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['title'], 'Renamed')
        self.assertEqual(response.data['skills'], ['Python', 'SQL'])

    def test_submit_and_withdraw(self) -> None:
        experience = make_experience(self.student, self.organization)

        submitted = self.client.post(f'{EXPERIENCES_URL}{experience.pk}/submit-verification/', {}, format='json')
        withdrawn = self.client.post(f'{EXPERIENCES_URL}{experience.pk}/withdraw-verification/', format='json')

        self.assertEqual(submitted.data['status'], VerificationStatus.PENDING)
        self.assertEqual(withdrawn.status_code, 200)
        self.assertEqual(withdrawn.data['status'], VerificationStatus.DRAFT)

    def test_publishing_a_draft_is_refused(self) -> None:
        experience = make_experience(self.student, self.organization)

        response = self.client.post(f'{EXPERIENCES_URL}{experience.pk}/publish/')

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data['kind'], 'INVALID_STATE')

    def test_documents(self) -> None:
        experience = make_experience(self.student, self.organization)
        url = f'{EXPERIENCES_URL}{experience.pk}/documents/'

        created = self.client.post(url, {'url': 'https://files.example.com/cert.pdf', 'type': 'CERTIFICATE'}, format='json')
        listed = self.client.get(url)

        self.assertEqual(created.status_code, 201)
        self.assertEqual(len(listed.data), 1)

    def test_history(self) -> None:
        experience = make_experience(self.student, self.organization)
        VerificationEngine().submit(experience.pk, actor_for(self.student_user))

        response = self.client.get(f'{EXPERIENCES_URL}{experience.pk}/history/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data[0]['action'], 'EXPERIENCE_SUBMITTED')
        self.assertEqual(response.data[0]['actor_username'], 'student')

    def test_reviewers_do_not_see_drafts(self) -> None:
        make_experience(self.student, self.organization)
        self.client.force_authenticate(self.reviewer)

        response = self.client.get(EXPERIENCES_URL)

        self.assertEqual(response.data['count'], 0)


class PublicExperienceApiTests(TestCase):
    def test_anonymous_listing_shows_only_verified_public_experiences(self) -> None:
        organization = make_organization()
        reviewer = make_member(organization)
        student_user, student = make_student()
        approved = make_experience(student, organization, title='Verified one')
        make_experience(student, organization, title='Still a draft')
        engine = VerificationEngine()
        engine.submit(approved.pk, actor_for(student_user))
        engine.approve(approved.pk, actor_for(reviewer))

        response = APIClient().get('/api/public/experiences/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual([item['title'] for item in response.data['results']], ['Verified one'])
