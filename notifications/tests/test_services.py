from unittest import mock

from django.db import DatabaseError
from django.test import TestCase, override_settings

from notifications.models import Notification
from notifications.services import NotificationDispatcher, build_action_url, mark_all_read, mark_read
from verification.tests.utils import make_student

WEBHOOK = 'https://hooks.example.com/academix'


class NotificationDispatcherTests(TestCase):
    def setUp(self) -> None:
        self.user, _ = make_student()
        self.dispatcher = NotificationDispatcher()

    def test_notify_stores_an_in_app_notification(self) -> None:
        stored = self.dispatcher.notify(
            self.user.pk, 'Experience verified', 'Well done', '/student', type=Notification.Type.SUCCESS,
        )

        self.assertTrue(stored)
        notification = Notification.objects.get(user=self.user)
        self.assertEqual(notification.type, Notification.Type.SUCCESS)
        self.assertEqual(notification.delivery_status, Notification.Delivery.NOT_REQUIRED)

    @mock.patch('notifications.services.Notification.objects.create', side_effect=DatabaseError('db down'))
    def test_notify_reports_storage_failure(self, mock_create) -> None:
        stored = self.dispatcher.notify(self.user.pk, 'Lost', 'Nobody home')

        self.assertFalse(stored)
        self.assertFalse(Notification.objects.exists())

    @override_settings(NOTIFICATION_WEBHOOK_URL=WEBHOOK)
    @mock.patch('notifications.services.async_task')
    def test_push_is_queued_when_webhook_configured(self, mock_async) -> None:
        self.dispatcher.notify(self.user.pk, 'Hello', 'World')

        notification = Notification.objects.get(user=self.user)
        mock_async.assert_called_once_with('notifications.tasks.push_notification', notification.id)
        self.assertEqual(notification.delivery_status, Notification.Delivery.QUEUED)

    @override_settings(NOTIFICATION_WEBHOOK_URL=WEBHOOK)
    @mock.patch('notifications.services.async_task', side_effect=ConnectionError('broker down'))
    def test_queue_failure_marks_failed(self, mock_async) -> None:
        stored = self.dispatcher.notify(self.user.pk, 'Hello', 'World')

        self.assertTrue(stored)
        notification = Notification.objects.get(user=self.user)
        self.assertEqual(notification.delivery_status, Notification.Delivery.FAILED)

    def test_mark_read(self) -> None:
        self.dispatcher.notify(self.user.pk, 'One', 'First')
        self.dispatcher.notify(self.user.pk, 'Two', 'Second')

        notification = mark_read(Notification.objects.filter(user=self.user).first())
        self.assertTrue(notification.is_read)
        self.assertIsNotNone(notification.read_at)
        self.assertEqual(mark_all_read(self.user), 1)

    @override_settings(FRONTEND_URL='https://app.example.com')
    def test_build_action_url(self) -> None:
        self.assertEqual(build_action_url('/student/experiences/3'), 'https://app.example.com/student/experiences/3')
