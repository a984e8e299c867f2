"""
End-to-end verification workflow over the HTTP API.
"""
from django.test import TestCase
from rest_framework.test import APIClient

from accounts.models import User
from notifications.models import Notification
from organizations.models import Organization
from verification.models import AuditLog


class VerificationWorkflowTests(TestCase):
    def setUp(self) -> None:
        self.organization = Organization.objects.create(name='Acme University', slug='acme-university')
        self.reviewer = User.objects.create_user(
            username='reviewer', password='pass12345', role=User.ORGANIZATION, organization=self.organization,
        )
        self.student = User.objects.create_user(username='ana', password='pass12345', role=User.STUDENT)
        self.student_client = APIClient()
        self.student_client.force_authenticate(self.student)
        self.reviewer_client = APIClient()
        self.reviewer_client.force_authenticate(self.reviewer)

    def test_reject_resubmit_approve_and_publish(self) -> None:
        profile = self.student_client.post('/api/profiles/', {'full_name': 'Ana Lopez'}, format='json')
        self.assertEqual(profile.status_code, 201)

        created = self.student_client.post(
            '/api/experiences/',
            {
                'title': 'Teaching assistant',
                'description': 'Ran weekly lab sessions',
                'type': 'COURSE',
                'start_date': '2024-02-01',
                'organization': self.organization.pk,
                'submit': True,
            },
            format='json',
        )
        self.assertEqual(created.status_code, 201)
        self.assertEqual(created.data['status'], 'PENDING')
        experience_id = created.data['id']

        queue = self.reviewer_client.get('/api/organizations/verification-requests/', {'status': 'PENDING'})
        request_id = queue.data['results'][0]['id']

        rejected = self.reviewer_client.post(
            f'/api/organizations/verification-requests/{request_id}/reject/',
            {'reason': 'Start date does not match our records'},
            format='json',
        )
        self.assertEqual(rejected.status_code, 200)

        edited = self.student_client.patch(
            f'/api/experiences/{experience_id}/', {'start_date': '2024-03-01'}, format='json',
        )
        self.assertEqual(edited.status_code, 200)
        self.assertEqual(edited.data['rejection_reason'], 'Start date does not match our records')

        resubmitted = self.student_client.post(f'/api/experiences/{experience_id}/submit-verification/', {}, format='json')
        self.assertEqual(resubmitted.data['status'], 'PENDING')
        self.assertEqual(resubmitted.data['rejection_reason'], '')

        queue = self.reviewer_client.get('/api/organizations/verification-requests/', {'status': 'PENDING'})
        approved = self.reviewer_client.post(
            f"/api/organizations/verification-requests/{queue.data['results'][0]['id']}/approve/",
            {'note': 'Confirmed'},
            format='json',
        )
        self.assertEqual(approved.status_code, 200)

        portfolio = self.student_client.get('/api/portfolio/me/')
        self.assertEqual(portfolio.data['slug'], 'ana-lopez')
        public = APIClient().get('/api/public/portfolios/ana-lopez/')
        self.assertEqual(public.status_code, 200)
        self.assertEqual([item['title'] for item in public.data['experiences']], ['Teaching assistant'])

        actions = list(
            AuditLog.objects.filter(entity='experience', entity_id=str(experience_id))
            .values_list('action', flat=True)
        )
        self.assertEqual(
            actions,
            ['EXPERIENCE_SUBMITTED', 'EXPERIENCE_REJECTED', 'EXPERIENCE_SUBMITTED', 'EXPERIENCE_APPROVED'],
        )
        self.assertEqual(Notification.objects.filter(user=self.student).count(), 2)

        dashboard = self.student_client.get('/api/dashboard/')
        self.assertEqual(dashboard.data['experiences'], {'APPROVED': 1})
        self.assertEqual(dashboard.data['public_experiences'], 1)
        self.assertEqual(dashboard.data['unread_notifications'], 2)

    def test_health(self) -> None:
        response = APIClient().get('/api/health/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {'status': 'ok'})
