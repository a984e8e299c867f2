from django.test import TestCase
from rest_framework.test import APIClient

from notifications.services import NotificationDispatcher
from verification.tests.utils import make_student


class NotificationApiTests(TestCase):
    def setUp(self) -> None:
        self.user, _ = make_student()
        other, _ = make_student('other-student', 'Ben Ortiz')
        dispatcher = NotificationDispatcher()
        dispatcher.notify(self.user.pk, 'Experience verified', 'Well done')
        dispatcher.notify(self.user.pk, 'More information needed', 'Send the certificate')
        dispatcher.notify(other.pk, 'Not yours', 'Hidden')
        self.client = APIClient()
        self.client.force_authenticate(self.user)

    def test_list_own_notifications(self) -> None:
        response = self.client.get('/api/notifications/')

        self.assertEqual(response.data['count'], 2)

    def test_read_and_unread_count(self) -> None:
        notification_id = self.client.get('/api/notifications/').data['results'][0]['id']

        read = self.client.post(f'/api/notifications/{notification_id}/read/')
        count = self.client.get('/api/notifications/unread-count/')

        self.assertTrue(read.data['is_read'])
        self.assertEqual(count.data, {'unread': 1})

    def test_read_all(self) -> None:
        response = self.client.post('/api/notifications/read-all/')

        self.assertEqual(response.data, {'updated': 2})
        self.assertEqual(self.client.get('/api/notifications/', {'unread': 'true'}).data['count'], 0)
