from io import StringIO

from django.core.management import call_command
from django.test import TestCase, override_settings
from django_q.models import Schedule

from notifications.management.commands.setup_schedules import RETRY_SCHEDULE_NAME, RETRY_TASK


class SetupSchedulesCommandTests(TestCase):
    @override_settings(NOTIFICATION_RETRY_MINUTES=10)
    def test_registers_retry_schedule(self) -> None:
        call_command('setup_schedules', stdout=StringIO())

        schedule = Schedule.objects.get(name=RETRY_SCHEDULE_NAME)
        self.assertEqual(schedule.func, RETRY_TASK)
        self.assertEqual(schedule.schedule_type, Schedule.MINUTES)
        self.assertEqual(schedule.minutes, 10)
        self.assertEqual(schedule.repeats, -1)

    def test_running_twice_keeps_one_schedule(self) -> None:
        call_command('setup_schedules', stdout=StringIO())
        with override_settings(NOTIFICATION_RETRY_MINUTES=30):
            call_command('setup_schedules', stdout=StringIO())

        schedules = Schedule.objects.filter(name=RETRY_SCHEDULE_NAME)
        self.assertEqual(schedules.count(), 1)
        self.assertEqual(schedules.get().minutes, 30)
