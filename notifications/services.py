"""
Notification service for Saathi Backend.

Called by views after a case transition has committed. Creating a
notification never feeds back into the case: a failure here is logged by
the caller and the transition stands.

Usage:
    from notifications.services import NotificationService

    NotificationService.notify_case_created(case)
    NotificationService.notify_status_change(log_entry)
"""

import logging

from django.utils import timezone

from authentication.models import User, UserRole
from cases.models import CaseStatus
from .models import Notification, NotificationType

logger = logging.getLogger(__name__)


class NotificationService:

    @classmethod
    def _admins(cls):
        return User.objects.filter(role=UserRole.ADMIN, is_active=True)

    @classmethod
    def _create_notification(cls, recipient, title, message,
                             notification_type=NotificationType.GENERAL, case=None):
        return Notification.objects.create(
            recipient=recipient,
            title=title,
            message=message,
            notification_type=notification_type,
            case=case,
        )

    @classmethod
    def _bulk_notify(cls, recipients, title, message,
                     notification_type=NotificationType.GENERAL, case=None):
        notifications = [
            Notification(
                recipient=recipient,
                title=title,
                message=message,
                notification_type=notification_type,
                case=case,
            )
            for recipient in recipients
        ]
        if notifications:
            Notification.objects.bulk_create(notifications)
        return len(notifications)

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    @classmethod
    def notify_case_created(cls, case):
        """Tell every admin a new SOS came in."""
        count = cls._bulk_notify(
            recipients=cls._admins(),
            title=f"New SOS: {case.case_number}",
            message=(
                f"SOS raised at {case.address or f'{case.latitude}, {case.longitude}'}.\n\n"
                f"{case.description}"
            ).strip(),
            notification_type=NotificationType.CASE_CREATED,
            case=case,
        )
        logger.info(f"Notified {count} admins about case {case.case_number}")
        return count

    @classmethod
    def notify_status_change(cls, log_entry):
        """
        Create the in-app notifications for one committed status log row.

        - the assigned officer on assignment and reassignment
        - the reporting citizen on every change
        - admins when the case closes
        """
        case = log_entry.case
        sent = 0

        if log_entry.is_reassignment or log_entry.to_status == CaseStatus.ASSIGNED:
            officer = case.officer
            if officer is not None:
                notification_type = (
                    NotificationType.CASE_REASSIGNED
                    if log_entry.is_reassignment else NotificationType.CASE_ASSIGNED
                )
                cls._create_notification(
                    recipient=officer.user,
                    title=f"Case assigned: {case.case_number}",
                    message=(
                        f"You have been assigned SOS case {case.case_number}.\n\n"
                        f"{log_entry.notes}"
                    ).strip(),
                    notification_type=notification_type,
                    case=case,
                )
                sent += 1

        if case.reported_by_id and not log_entry.is_reassignment:
            cls._create_notification(
                recipient=case.reported_by,
                title=f"Your SOS is now {CaseStatus(log_entry.to_status).label}",
                message=f"Case {case.case_number} moved to {CaseStatus(log_entry.to_status).label}.",
                notification_type=(
                    NotificationType.CASE_CLOSED
                    if log_entry.to_status == CaseStatus.CLOSED else NotificationType.STATUS_CHANGED
                ),
                case=case,
            )
            sent += 1

        if log_entry.to_status == CaseStatus.CLOSED and not log_entry.is_reassignment:
            sent += cls._bulk_notify(
                recipients=cls._admins(),
                title=f"Case closed: {case.case_number}",
                message=log_entry.notes or f"Case {case.case_number} was closed.",
                notification_type=NotificationType.CASE_CLOSED,
                case=case,
            )

        logger.info(f"Sent {sent} notifications for case {case.case_number} ({log_entry.to_status})")
        return sent

    @classmethod
    def mark_all_read(cls, user):
        return Notification.objects.filter(recipient=user, is_read=False).update(
            is_read=True, read_at=timezone.now()
        )

    @classmethod
    def get_unread_count(cls, user):
        return Notification.objects.filter(recipient=user, is_read=False).count()


def notify_after_commit(log_entry):
    """
    Notify for a committed transition from a view.

    The transition has already happened, so a notification failure is
    logged and reported as zero sent rather than raised.
    """
    if log_entry is None:
        return 0
    try:
        return NotificationService.notify_status_change(log_entry)
    except Exception:
        logger.exception(f"Notification failed for status log {log_entry.pk}")
        return 0
