"""
Django management command to purge old officer location history.

Removes position rows older than the retention window that are not tied
to a case. Case-linked rows are kept as part of the case record.

Usage:
    python manage.py purge_location_history
    python manage.py purge_location_history --days 14
    python manage.py purge_location_history --dry-run
"""

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone


class Command(BaseCommand):
    help = 'Delete officer location history older than the retention window'

    def add_arguments(self, parser):
        parser.add_argument(
            '--days',
            type=int,
            default=None,
            help='Retention window in days (default: LOCATION_TRACKING["RETENTION_DAYS"])',
        )
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Report how many rows would be deleted without deleting them',
        )

    def handle(self, *args, **options):
        from audit.models import AuditEventType, AuditLog
        from responders.tracking import LocationTracker

        days = options['days']
        if days is None:
            days = settings.LOCATION_TRACKING['RETENTION_DAYS']
        if days < 0:
            raise CommandError('--days must not be negative')

        dry_run = options['dry_run']

        self.stdout.write(
            self.style.NOTICE(f"Location history purge started at {timezone.now().isoformat()}")
        )
        if dry_run:
            self.stdout.write(self.style.WARNING("DRY RUN MODE - No changes will be made"))

        count = LocationTracker().purge_stale_history(days, dry_run=dry_run)

        if dry_run:
            self.stdout.write(f"Would delete {count} rows older than {days} days")
            return

        AuditLog.log(
            event_type=AuditEventType.LOCATION_HISTORY_PURGED,
            description=f"Purged {count} location history rows older than {days} days",
            metadata={'deleted': count, 'retention_days': days},
        )
        self.stdout.write(self.style.SUCCESS(f"Deleted {count} rows older than {days} days"))
