"""
Unit tests for maintenance management commands.
"""
from datetime import timedelta
from io import StringIO

import pytest
from django.core.management import call_command
from django.utils import timezone

from audit.models import AuditEventType, AuditLog
from cases.models import CaseStatus
from responders.models import Officer, OfficerLocationLog, Station

pytestmark = [pytest.mark.unit, pytest.mark.django_db]


def run(name, *args):
    out = StringIO()
    call_command(name, *args, stdout=out)
    return out.getvalue()


class TestPurgeLocationHistory:

    def test_purges_and_audits(self, officer):
        row = OfficerLocationLog.objects.create(officer=officer, latitude=20.0, longitude=85.0)
        OfficerLocationLog.objects.filter(pk=row.pk).update(timestamp=timezone.now() - timedelta(days=30))

        output = run('purge_location_history', '--days', '14')

        assert 'Deleted 1 rows' in output
        assert not OfficerLocationLog.objects.exists()
        assert AuditLog.objects.filter(event_type=AuditEventType.LOCATION_HISTORY_PURGED).count() == 1

    def test_dry_run_keeps_rows(self, officer):
        row = OfficerLocationLog.objects.create(officer=officer, latitude=20.0, longitude=85.0)
        OfficerLocationLog.objects.filter(pk=row.pk).update(timestamp=timezone.now() - timedelta(days=30))

        output = run('purge_location_history', '--dry-run')

        assert 'Would delete 1 rows' in output
        assert OfficerLocationLog.objects.count() == 1


class TestRetryAutoAssignment:

    def test_assigns_waiting_cases(self, make_case, make_officer):
        make_case()
        officer = make_officer()

        output = run('retry_auto_assignment', '--verbose')

        assert 'Assigned: 1' in output
        officer.refresh_from_db()
        assert officer.cases.get().status == CaseStatus.ASSIGNED

    def test_reports_cases_still_waiting(self, make_case):
        make_case()

        output = run('retry_auto_assignment')

        assert 'Still unassigned: 1' in output
        assert AuditLog.objects.filter(event_type=AuditEventType.SOS_ASSIGNMENT_FAILED).count() == 1

    def test_dry_run(self, make_case, make_officer):
        case = make_case()
        make_officer()

        run('retry_auto_assignment', '--dry-run')

        case.refresh_from_db()
        assert case.status == CaseStatus.CREATED


class TestSeedDispatchDemo:

    def test_seed_is_idempotent(self):
        run('seed_dispatch_demo')
        run('seed_dispatch_demo')

        assert Station.objects.count() == 2
        assert Officer.objects.count() == 4
