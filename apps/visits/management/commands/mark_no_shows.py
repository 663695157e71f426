# apps/visits/management/commands/mark_no_shows.py
from django.core.management.base import BaseCommand

from apps.visits.services.appointment_service import AppointmentService


class Command(BaseCommand):
    help = "Mark scheduled appointments past their grace period as no-shows (run periodically, e.g. from cron)"

    def add_arguments(self, parser):
        parser.add_argument(
            "--grace-minutes",
            type=int,
            default=None,
            help="Minutes after the scheduled time before an appointment counts as missed",
        )

    def handle(self, *args, **options):
        marked = AppointmentService.mark_no_shows(grace_minutes=options["grace_minutes"])
        self.stdout.write(self.style.SUCCESS(f"Marked {marked} appointment(s) as no-show"))
