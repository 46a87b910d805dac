"""
Django management command to retry auto-assignment.

Finds every case still in CREATED without an officer and runs the
assignment engine on it again. Safe to run repeatedly: a case that picked
up an officer in the meantime is skipped by the engine itself.

Usage:
    python manage.py retry_auto_assignment
    python manage.py retry_auto_assignment --dry-run
    python manage.py retry_auto_assignment --verbose
"""

from django.core.management.base import BaseCommand
from django.utils import timezone


class Command(BaseCommand):
    help = 'Retry auto-assignment for SOS cases still waiting for an officer'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='List the cases that would be retried without assigning',
        )
        parser.add_argument(
            '--verbose',
            action='store_true',
            help='Show the outcome for each case',
        )

    def handle(self, *args, **options):
        from cases.models import CaseStatus, SOSCase
        from dispatch.engine import AssignmentEngine
        from dispatch.services import record_assignment

        dry_run = options['dry_run']
        verbose = options['verbose']

        self.stdout.write(
            self.style.NOTICE(f"Assignment retry started at {timezone.now().isoformat()}")
        )
        if dry_run:
            self.stdout.write(self.style.WARNING("DRY RUN MODE - No changes will be made"))

        waiting = list(
            SOSCase.objects.filter(status=CaseStatus.CREATED, officer__isnull=True)
            .order_by('created_at')
        )
        self.stdout.write(f"Found {len(waiting)} unassigned cases")

        engine = AssignmentEngine()
        assigned_count = 0
        unassigned_count = 0
        error_count = 0

        for case in waiting:
            if dry_run:
                if verbose:
                    self.stdout.write(f"  Would retry {case.case_number}")
                continue

            try:
                result = engine.auto_assign(case.pk, (case.latitude, case.longitude))
            except Exception as e:
                error_count += 1
                self.stdout.write(self.style.ERROR(f"Error assigning {case.case_number}: {e}"))
                continue

            record_assignment(result, case)

            if result.assigned:
                assigned_count += 1
                if verbose:
                    self.stdout.write(
                        f"  {case.case_number}: assigned {result.officer_code} "
                        f"({result.distance_km:.2f}km)"
                    )
            else:
                unassigned_count += 1
                if verbose:
                    self.stdout.write(f"  {case.case_number}: {result.reason}")

        self.stdout.write("")
        self.stdout.write(self.style.SUCCESS("=== Assignment Retry Summary ==="))
        self.stdout.write(f"  Waiting: {len(waiting)}")
        self.stdout.write(f"  Assigned: {assigned_count}")
        self.stdout.write(f"  Still unassigned: {unassigned_count}")
        self.stdout.write(f"  Errors: {error_count}")

        if dry_run:
            self.stdout.write(self.style.WARNING("DRY RUN - No actual changes were made"))
