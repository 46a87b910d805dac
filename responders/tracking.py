"""
Officer position tracking.

Every update overwrites the officer's last known position; a history row
is appended only while the officer is working a live case.
"""

import logging
from datetime import timedelta

from django.db import DEFAULT_DB_ALIAS, transaction
from django.utils import timezone

from cases.models import SOSCase
from cases.state_machine import CaseStateMachine
from core.exceptions import NotFound

from .models import Officer, OfficerLocationLog, OfficerStatus

logger = logging.getLogger(__name__)


class LocationTracker:

    def __init__(self, history_limit=100, using=DEFAULT_DB_ALIAS):
        self.history_limit = history_limit
        self.db = using

    def update_location(self, officer_id, lat, lng, accuracy=None, case_id=None):
        """
        Record a position fix for an officer.

        Returns the history row when one was written, otherwise None.
        """
        now = timezone.now()

        with transaction.atomic(using=self.db):
            updated = (
                Officer.objects.using(self.db)
                .filter(pk=officer_id)
                .update(
                    current_lat=lat,
                    current_lng=lng,
                    last_location_update=now,
                    updated_at=now,
                )
            )
            if not updated:
                raise NotFound("Officer not found")

            if case_id is None:
                return None

            case_status = (
                SOSCase.objects.using(self.db)
                .filter(pk=case_id)
                .values_list('status', flat=True)
                .first()
            )
            if case_status is None:
                raise NotFound("Case not found")

            if CaseStateMachine.is_terminal(case_status):
                logger.debug(f"Case {case_id} is closed, not recording history for officer {officer_id}")
                return None

            return OfficerLocationLog.objects.using(self.db).create(
                officer_id=officer_id,
                case_id=case_id,
                latitude=lat,
                longitude=lng,
                accuracy=accuracy,
            )

    def history(self, officer_id, case_id=None):
        """Position history for an officer, newest first."""
        qs = OfficerLocationLog.objects.using(self.db).filter(officer_id=officer_id)
        if case_id is not None:
            qs = qs.filter(case_id=case_id)
        return list(qs.order_by('-timestamp', '-id')[:self.history_limit])

    def active_locations(self):
        """Last known positions of every officer who is not off duty."""
        return list(
            Officer.objects.using(self.db)
            .exclude(status=OfficerStatus.OFF_DUTY)
            .filter(current_lat__isnull=False, current_lng__isnull=False)
            .order_by('officer_code')
            .values(
                'id', 'officer_code', 'status', 'current_lat', 'current_lng',
                'last_location_update', 'station_id', 'station__name',
            )
        )

    def purge_stale_history(self, retention_days, dry_run=False):
        """
        Delete history rows older than the retention window that are not
        tied to a case. Returns the number of rows removed (or that would be).
        """
        cutoff = timezone.now() - timedelta(days=retention_days)
        stale = OfficerLocationLog.objects.using(self.db).filter(
            timestamp__lt=cutoff,
            case__isnull=True,
        )
        if dry_run:
            return stale.count()

        deleted, _ = stale.delete()
        logger.info(f"Purged {deleted} location history rows older than {retention_days} days")
        return deleted
