"""
Audit models for Saathi Backend.

Implements immutable, append-only audit logging for compliance.

Audit logs track:
- SOS case creation
- Officer assignment and reassignment
- Case status changes
- Location history maintenance

Case lifecycle transitions themselves are recorded in cases.CaseStatusLog
inside the same transaction as the change; AuditLog adds the request
context (actor, IP, user agent) around those actions.
"""

import uuid
from django.db import models
from django.utils import timezone


class AuditEventType(models.TextChoices):
    """Audit event type constants."""

    SOS_CREATED = 'sos.created', 'SOS Created'
    SOS_ASSIGNED = 'sos.assigned', 'SOS Assigned'
    SOS_ASSIGNMENT_FAILED = 'sos.assignment.failed', 'SOS Assignment Failed'
    OFFICER_REASSIGNED = 'sos.reassigned', 'Officer Reassigned'
    STATUS_CHANGED = 'sos.status.changed', 'Status Changed'
    CASE_CLOSED = 'sos.closed', 'Case Closed'
    LOCATION_HISTORY_PURGED = 'location.history.purged', 'Location History Purged'


class AuditSeverity(models.TextChoices):
    """Severity levels for audit events."""
    INFO = 'info', 'Info'
    WARNING = 'warning', 'Warning'
    ERROR = 'error', 'Error'


class AuditLogManager(models.Manager):
    """
    Custom manager for AuditLog.
    Prevents any modifications to existing records.
    """

    def update(self, *args, **kwargs):
        raise PermissionError("Audit logs are immutable and cannot be updated.")

    def delete(self, *args, **kwargs):
        raise PermissionError("Audit logs are immutable and cannot be deleted.")


class AuditLog(models.Model):
    """
    Immutable audit log for dispatch actions.

    - UUID primary key
    - No foreign keys (stores IDs as strings for immutability)
    - No update/delete operations allowed

    This model does not inherit from BaseModel because audit logs must
    never be soft-deleted or modified.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False
    )

    event_type = models.CharField(
        max_length=50,
        choices=AuditEventType.choices,
        db_index=True,
        help_text="Type of event being logged"
    )

    severity = models.CharField(
        max_length=10,
        choices=AuditSeverity.choices,
        default=AuditSeverity.INFO,
        db_index=True
    )

    timestamp = models.DateTimeField(
        default=timezone.now,
        db_index=True,
        help_text="When the event occurred"
    )

    # Actor information (who performed the action)
    actor_id = models.CharField(
        max_length=36,
        blank=True,
        db_index=True,
        help_text="UUID of user who performed action, or SYSTEM"
    )

    actor_role = models.CharField(max_length=20, blank=True)

    actor_identifier = models.CharField(max_length=255, blank=True)

    # Target information (what was acted upon)
    target_type = models.CharField(max_length=50, blank=True)

    target_id = models.CharField(
        max_length=36,
        blank=True,
        db_index=True
    )

    # Request context
    ip_address = models.GenericIPAddressField(null=True, blank=True)

    user_agent = models.CharField(max_length=500, blank=True)

    request_method = models.CharField(max_length=10, blank=True)

    request_path = models.CharField(max_length=500, blank=True)

    description = models.TextField(blank=True)

    metadata = models.JSONField(
        default=dict,
        blank=True,
        help_text="Additional structured data about the event"
    )

    success = models.BooleanField(default=True)

    objects = AuditLogManager()

    class Meta:
        db_table = 'audit_logs'
        verbose_name = 'Audit Log'
        verbose_name_plural = 'Audit Logs'
        ordering = ['-timestamp']
        indexes = [
            models.Index(fields=['event_type', 'timestamp'], name='audit_event_time_idx'),
            models.Index(fields=['target_id', 'timestamp'], name='audit_target_time_idx'),
        ]

    def __str__(self):
        return f"{self.timestamp} | {self.event_type} | {self.actor_identifier or 'system'}"

    def save(self, *args, **kwargs):
        """
        Override save to enforce append-only behavior.
        Only allows creation, not updates.
        """
        if not self._state.adding:
            raise PermissionError("Audit logs are immutable and cannot be updated.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise PermissionError("Audit logs are immutable and cannot be deleted.")

    @classmethod
    def log(cls, event_type, actor=None, target=None, request=None,
            success=True, description='', metadata=None, severity=None):
        """
        Create an audit log entry.

        Args:
            event_type: One of AuditEventType
            actor: User performing the action (or None for system)
            target: Object being acted upon (optional)
            request: Django request object for context
            success: Whether action succeeded
            description: Human-readable description
            metadata: Additional structured data
            severity: Severity level (auto-determined if not provided)
        """
        if severity is None:
            severity = AuditSeverity.INFO if success else AuditSeverity.WARNING

        actor_id = 'SYSTEM'
        actor_role = ''
        actor_identifier = ''

        if actor:
            actor_id = str(actor.id)
            actor_role = actor.role
            actor_identifier = actor.identifier

        target_type = ''
        target_id = ''

        if target:
            target_type = target.__class__.__name__
            target_id = str(target.pk)

        ip_address = None
        user_agent = ''
        request_method = ''
        request_path = ''

        if request:
            ip_address = cls._get_client_ip(request)
            user_agent = request.META.get('HTTP_USER_AGENT', '')[:500]
            request_method = request.method
            request_path = request.path[:500]

        return cls.objects.create(
            event_type=event_type,
            severity=severity,
            actor_id=actor_id,
            actor_role=actor_role,
            actor_identifier=actor_identifier,
            target_type=target_type,
            target_id=target_id,
            ip_address=ip_address,
            user_agent=user_agent,
            request_method=request_method,
            request_path=request_path,
            description=description,
            metadata=metadata or {},
            success=success,
        )

    @staticmethod
    def _get_client_ip(request):
        """Extract client IP from request, handling proxies."""
        x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
        if x_forwarded_for:
            return x_forwarded_for.split(',')[0].strip()
        return request.META.get('REMOTE_ADDR')
