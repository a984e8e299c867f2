"""
Register the notification Django-Q schedules.

Safe to run on every deploy: existing schedules are updated in place.
"""
import logging

from django.conf import settings
from django.core.management.base import BaseCommand
from django_q.models import Schedule

logger = logging.getLogger(__name__)

RETRY_SCHEDULE_NAME = 'retry-failed-notifications'
RETRY_TASK = 'notifications.tasks.retry_failed_notifications'


class Command(BaseCommand):
    help = 'Create or update the Django-Q schedule that retries failed notification pushes.'

    def handle(self, *args, **options):
        minutes = getattr(settings, 'NOTIFICATION_RETRY_MINUTES', 15)
        schedule, created = Schedule.objects.update_or_create(
            name=RETRY_SCHEDULE_NAME,
            defaults={
                'func': RETRY_TASK,
                'schedule_type': Schedule.MINUTES,
                'minutes': minutes,
                'repeats': -1,
            },
        )
        logger.info("%s schedule %s every %s minutes", 'Created' if created else 'Updated', schedule.name, minutes)
        self.stdout.write(self.style.SUCCESS(f"Schedule '{schedule.name}' runs every {minutes} minutes."))
