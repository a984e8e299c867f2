from django.test import RequestFactory, SimpleTestCase, TestCase, override_settings

from accounts.context import ActorContext
from accounts.models import User
from accounts.utils import get_client_ip
from organizations.models import Organization


class ActorContextTests(SimpleTestCase):
    def test_membership(self) -> None:
        actor = ActorContext(user_id=1, role='ORGANIZATION', organization_id=5)

        self.assertTrue(actor.is_member_of(5))
        self.assertFalse(actor.is_member_of(6))
        self.assertFalse(actor.is_admin)

    def test_students_and_admins_are_not_members(self) -> None:
        self.assertFalse(ActorContext(user_id=1, role='STUDENT', organization_id=5).is_member_of(5))
        self.assertFalse(ActorContext(user_id=2, role='ADMIN').is_member_of(None))

    @override_settings(TRUSTED_PROXY=True)
    def test_client_ip_prefers_forwarded_header_behind_trusted_proxy(self) -> None:
        request = RequestFactory().get('/', HTTP_X_FORWARDED_FOR='203.0.113.9, 10.0.0.1')

        self.assertEqual(get_client_ip(request), '203.0.113.9')


class ActorFromRequestTests(TestCase):
    def test_from_request(self) -> None:
        organization = Organization.objects.create(name='Acme', slug='acme')
        user = User.objects.create_user(
            username='reviewer', password='pass12345', role=User.ORGANIZATION, organization=organization,
        )
        request = RequestFactory().get('/', HTTP_USER_AGENT='pytest', REMOTE_ADDR='198.51.100.4')
        request.user = user

        actor = ActorContext.from_request(request)

        self.assertEqual(actor.user_id, user.pk)
        self.assertEqual(actor.organization_id, organization.pk)
        self.assertEqual(actor.ip_address, '198.51.100.4')
        self.assertEqual(actor.user_agent, 'pytest')


class ClientIpTests(SimpleTestCase):
    def setUp(self) -> None:
        self.factory = RequestFactory()

    def test_forwarded_header_ignored_without_trusted_proxy(self) -> None:
        request = self.factory.get('/', HTTP_X_FORWARDED_FOR='203.0.113.9', REMOTE_ADDR='198.51.100.4')

        self.assertEqual(get_client_ip(request), '198.51.100.4')

    @override_settings(TRUSTED_PROXY=True)
    def test_invalid_forwarded_value_falls_back_to_remote_addr(self) -> None:
        request = self.factory.get('/', HTTP_X_FORWARDED_FOR='garbage', REMOTE_ADDR='198.51.100.4')

        self.assertEqual(get_client_ip(request), '198.51.100.4')

    def test_invalid_remote_addr_is_dropped(self) -> None:
        request = self.factory.get('/', REMOTE_ADDR='not-an-ip')

        self.assertIsNone(get_client_ip(request))
