"""
Case intake and lifecycle services.

Every lifecycle write happens inside one transaction together with its
CaseStatusLog row, so the log can never disagree with the case.
"""

import logging

from django.db import DEFAULT_DB_ALIAS, transaction
from django.utils import timezone

from core.exceptions import NotFound, PreconditionFailed
from responders.models import Officer, OfficerStatus

from .models import CaseStatus, CaseStatusLog, SOSCase
from .state_machine import CaseStateMachine, TransitionContext

logger = logging.getLogger(__name__)


class CaseService:

    def __init__(self, using=DEFAULT_DB_ALIAS):
        self.db = using

    def create_case(self, reported_by, latitude, longitude, description='',
                    accuracy=None, address=None, priority=1):
        """Create a case in its initial status together with its creation log row."""
        now = timezone.now()

        with transaction.atomic(using=self.db):
            case = SOSCase(
                case_number=SOSCase.generate_case_number(now),
                reported_by=reported_by,
                latitude=latitude,
                longitude=longitude,
                accuracy=accuracy,
                address=address or '',
                description=description or '',
                priority=priority,
                status=CaseStateMachine.initial_status(),
            )
            case.save(using=self.db)

            CaseStatusLog.objects.using(self.db).create(
                case=case,
                from_status=None,
                to_status=case.status,
                changed_by=str(reported_by.pk) if reported_by else 'SYSTEM',
                notes="SOS created",
                timestamp=now,
            )

        logger.info(f"SOS case {case.case_number} created at {latitude}, {longitude}")
        return case

    def update_status(self, case_id, new_status, actor, notes=''):
        """
        Move a case to new_status on behalf of actor.

        Returns (case, log_entry). log_entry is None when new_status equals
        the current status, in which case nothing is written.
        """
        now = timezone.now()

        with transaction.atomic(using=self.db):
            case = self._lock_case(case_id)
            current = case.status

            CaseStateMachine.validate_with_context(
                current, new_status, self._context_for(case, actor)
            )

            if current == new_status:
                return case, None

            # ASSIGNED needs an officer; only the assignment engine sets both
            if new_status == CaseStatus.ASSIGNED:
                raise PreconditionFailed(
                    "Cases are assigned through auto-assign or reassign, not a status update"
                )

            case.status = new_status
            update_fields = ['status', 'updated_at']
            if new_status == CaseStatus.CLOSED:
                case.closed_at = now
                case.closure_notes = notes
                update_fields += ['closed_at', 'closure_notes']
            case.save(using=self.db, update_fields=update_fields)

            if new_status == CaseStatus.CLOSED and case.officer_id is not None:
                Officer.objects.using(self.db).filter(pk=case.officer_id).update(
                    status=OfficerStatus.AVAILABLE, updated_at=now
                )

            entry = CaseStatusLog.objects.using(self.db).create(
                case=case,
                from_status=current,
                to_status=new_status,
                changed_by=str(actor.pk),
                notes=notes,
                timestamp=now,
            )

        logger.info(f"Case {case.case_number}: {current} -> {new_status} by {actor.pk}")
        return case, entry

    def status_history(self, case_id):
        """Status log rows for a case, oldest first."""
        if not SOSCase.objects.using(self.db).filter(pk=case_id).exists():
            raise NotFound("Case not found")
        return list(
            CaseStatusLog.objects.using(self.db)
            .filter(case_id=case_id)
            .order_by('timestamp', 'id')
        )

    def _lock_case(self, case_id):
        try:
            return SOSCase.objects.using(self.db).select_for_update().get(pk=case_id)
        except SOSCase.DoesNotExist:
            raise NotFound("Case not found")

    @staticmethod
    def _context_for(case, actor):
        officer = getattr(actor, 'officer_profile', None) if actor.is_officer else None
        return TransitionContext(
            has_officer_assigned=case.officer_id is not None,
            actor_is_assigned_officer=(
                officer is not None and case.officer_id == officer.pk
            ),
            actor_is_admin=actor.is_admin,
        )
