"""
Post-commit follow-ups for assignment results.

The engine itself only touches cases, officers and the status log. The
audit trail and notifications for an assignment are written here, after
the engine's transaction has returned.
"""

import logging

from audit.models import AuditEventType, AuditLog, AuditSeverity
from notifications.services import notify_after_commit

logger = logging.getLogger(__name__)


def assignment_summary(result):
    """JSON-friendly view of an engine result."""
    if result.assigned:
        return {
            'assigned': True,
            'officer_id': str(result.officer_id),
            'officer_code': result.officer_code,
            'station_id': str(result.station_id) if result.station_id else None,
            'distance_km': result.distance_km,
        }
    return {
        'assigned': False,
        'reason': result.reason,
    }


def record_assignment(result, case, actor=None, request=None):
    """Audit an assignment attempt and notify on success."""
    if result.assigned:
        AuditLog.log(
            event_type=AuditEventType.SOS_ASSIGNED,
            actor=actor,
            target=case,
            request=request,
            description=f"Officer {result.officer_code} assigned to {case.case_number}",
            metadata=assignment_summary(result),
        )
        notify_after_commit(result.status_log)
        return

    AuditLog.log(
        event_type=AuditEventType.SOS_ASSIGNMENT_FAILED,
        actor=actor,
        target=case,
        request=request,
        success=False,
        severity=AuditSeverity.WARNING,
        description=f"No officer assigned to {case.case_number}: {result.reason}",
        metadata=assignment_summary(result),
    )
