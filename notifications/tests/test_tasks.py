from unittest import mock

import requests
from django.test import TestCase, override_settings

from notifications.models import Notification
from notifications.tasks import push_notification, retry_failed_notifications
from verification.tests.utils import make_student

WEBHOOK = 'https://hooks.example.com/academix'


@override_settings(NOTIFICATION_WEBHOOK_URL=WEBHOOK, NOTIFICATION_WEBHOOK_TIMEOUT=3)
class PushNotificationTaskTests(TestCase):
    def setUp(self) -> None:
        self.user, _ = make_student()
        self.notification = Notification.objects.create(
            user=self.user,
            title='Experience verified',
            message='Well done',
            delivery_status=Notification.Delivery.QUEUED,
        )

    @mock.patch('notifications.tasks.requests.post')
    def test_successful_push(self, mock_post) -> None:
        mock_post.return_value = mock.Mock(status_code=200)

        push_notification(self.notification.id)

        mock_post.assert_called_once()
        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], WEBHOOK)
        self.assertEqual(kwargs['timeout'], 3)
        self.assertEqual(kwargs['json']['title'], 'Experience verified')

        self.notification.refresh_from_db()
        self.assertEqual(self.notification.delivery_status, Notification.Delivery.DELIVERED)
        self.assertEqual(self.notification.delivery_attempts, 1)
        self.assertIsNotNone(self.notification.delivered_at)

    @mock.patch('notifications.tasks.requests.post')
    def test_failed_push_is_marked_and_reraised(self, mock_post) -> None:
        mock_post.side_effect = requests.ConnectionError('refused')

        with self.assertRaises(requests.ConnectionError):
            push_notification(self.notification.id)

        self.notification.refresh_from_db()
        self.assertEqual(self.notification.delivery_status, Notification.Delivery.FAILED)
        self.assertEqual(self.notification.delivery_attempts, 1)

    @mock.patch('notifications.tasks.requests.post')
    def test_delivered_notifications_are_skipped(self, mock_post) -> None:
        Notification.objects.filter(pk=self.notification.pk).update(
            delivery_status=Notification.Delivery.DELIVERED,
        )

        push_notification(self.notification.id)

        mock_post.assert_not_called()

    @mock.patch('notifications.tasks.requests.post')
    def test_missing_notification_is_ignored(self, mock_post) -> None:
        push_notification(123456)

        mock_post.assert_not_called()

    @mock.patch('notifications.services.async_task')
    def test_retry_requeues_failed_with_attempts_left(self, mock_async) -> None:
        Notification.objects.filter(pk=self.notification.pk).update(
            delivery_status=Notification.Delivery.FAILED, delivery_attempts=1,
        )
        exhausted = Notification.objects.create(
            user=self.user,
            title='Old',
            message='Gave up',
            delivery_status=Notification.Delivery.FAILED,
            delivery_attempts=5,
        )

        with override_settings(NOTIFICATION_MAX_ATTEMPTS=5):
            queued = retry_failed_notifications()

        self.assertEqual(queued, 1)
        mock_async.assert_called_once_with('notifications.tasks.push_notification', self.notification.id)
        exhausted.refresh_from_db()
        self.assertEqual(exhausted.delivery_status, Notification.Delivery.FAILED)
