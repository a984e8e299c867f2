from django.test import TestCase
from rest_framework.test import APIClient

from accounts.models import User
from organizations.models import Organization


class OrganizationApiTests(TestCase):
    def setUp(self) -> None:
        self.acme = Organization.objects.create(name='Acme University', slug='acme')
        Organization.objects.create(name='Closed Club', slug='closed', is_active=False)
        self.member = User.objects.create_user(
            username='reviewer', password='pass12345', role=User.ORGANIZATION, organization=self.acme,
        )
        self.client = APIClient()
        self.client.force_authenticate(User.objects.create_user(username='ana', password='pass12345'))

    def test_lists_active_organizations(self) -> None:
        response = self.client.get('/api/organizations/', {'search': 'acme'})

        self.assertEqual(response.status_code, 200)
        self.assertEqual([item['slug'] for item in response.data['results']], ['acme'])

    def test_reviewers(self) -> None:
        User.objects.create_user(username='inactive', password='pass12345', role=User.ORGANIZATION,
                                 organization=self.acme, is_active=False)

        self.assertEqual(list(self.acme.reviewers()), [self.member])
