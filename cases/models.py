"""
SOS case models for Saathi Backend.

Contains:
- SOSCase: a single emergency incident tracked through a fixed lifecycle
- CaseStatusLog: append-only audit ledger of every lifecycle change

A case is created in CREATED by the intake service and then only changes
through the assignment engine or state-machine gated status updates.
Cases are never deleted.
"""

import random

from django.db import models
from django.utils import timezone

from core.models import BaseModel

SYSTEM_ACTOR = 'SYSTEM'


class CaseStatus(models.TextChoices):
    """Case lifecycle states, in canonical order."""
    CREATED = 'CREATED', 'Created'
    ASSIGNED = 'ASSIGNED', 'Assigned'
    ACKNOWLEDGED = 'ACKNOWLEDGED', 'Acknowledged'
    EN_ROUTE = 'EN_ROUTE', 'En Route'
    ON_SCENE = 'ON_SCENE', 'On Scene'
    ACTION_TAKEN = 'ACTION_TAKEN', 'Action Taken'
    CLOSED = 'CLOSED', 'Closed'


class SOSCase(BaseModel):
    """
    Emergency case raised by a citizen.

    Invariants:
    - status != CREATED implies a creation row exists in CaseStatusLog
    - officer is set only when status is ASSIGNED or later
    """

    case_number = models.CharField(
        max_length=32,
        unique=True,
        db_index=True,
        help_text="Human-readable case number (e.g., SOS-20240115-103000-4821)"
    )

    reported_by = models.ForeignKey(
        'authentication.User',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='sos_cases',
        help_text="Citizen who raised the SOS"
    )

    latitude = models.FloatField()

    longitude = models.FloatField()

    accuracy = models.FloatField(
        null=True,
        blank=True,
        help_text="GPS accuracy radius in metres"
    )

    address = models.TextField(
        blank=True,
        help_text="Reverse geocoded address (best effort)"
    )

    description = models.TextField(blank=True)

    status = models.CharField(
        max_length=20,
        choices=CaseStatus.choices,
        default=CaseStatus.CREATED,
        db_index=True
    )

    priority = models.PositiveSmallIntegerField(default=1)

    officer = models.ForeignKey(
        'responders.Officer',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='cases',
        help_text="Assigned officer"
    )

    assigned_at = models.DateTimeField(null=True, blank=True)

    assigned_by = models.CharField(
        max_length=36,
        blank=True,
        help_text="User id of the assigner, or SYSTEM for auto-assignment"
    )

    closed_at = models.DateTimeField(null=True, blank=True)

    closure_notes = models.TextField(blank=True)

    class Meta:
        db_table = 'sos_cases'
        verbose_name = 'SOS Case'
        verbose_name_plural = 'SOS Cases'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', 'created_at'], name='case_status_created_idx'),
            models.Index(fields=['officer', 'status'], name='case_officer_status_idx'),
        ]

    def __str__(self):
        return f"{self.case_number} ({self.status})"

    def delete(self, *args, **kwargs):
        raise PermissionError("SOS cases are never deleted; close them instead.")

    @classmethod
    def generate_case_number(cls, now=None):
        """
        Generate a unique case number.
        Format: SOS-YYYYMMDD-HHMMSS-NNNN
        """
        now = now or timezone.now()
        while True:
            candidate = f"SOS-{now:%Y%m%d-%H%M%S}-{random.randint(1000, 9999)}"
            if not cls.all_objects.filter(case_number=candidate).exists():
                return candidate


class CaseStatusLogManager(models.Manager):
    """Status log rows can only be inserted."""

    def update(self, *args, **kwargs):
        raise PermissionError("Status log entries are immutable and cannot be updated.")

    def delete(self, *args, **kwargs):
        raise PermissionError("Status log entries are immutable and cannot be deleted.")


class CaseStatusLog(models.Model):
    """
    Immutable status change history for a case.

    from_status is empty only for the creation row. Reassignments are
    recorded with from_status == to_status.
    """

    case = models.ForeignKey(
        SOSCase,
        on_delete=models.PROTECT,
        related_name='status_logs'
    )

    from_status = models.CharField(
        max_length=20,
        choices=CaseStatus.choices,
        null=True,
        blank=True,
        help_text="Previous status (null for initial creation)"
    )

    to_status = models.CharField(
        max_length=20,
        choices=CaseStatus.choices
    )

    changed_by = models.CharField(
        max_length=36,
        help_text="User id of the actor, or SYSTEM for automated transitions"
    )

    notes = models.TextField(blank=True)

    timestamp = models.DateTimeField(default=timezone.now, db_index=True)

    objects = CaseStatusLogManager()

    class Meta:
        db_table = 'case_status_logs'
        verbose_name = 'Case Status Log'
        verbose_name_plural = 'Case Status Logs'
        ordering = ['timestamp', 'id']

    def __str__(self):
        return f"{self.case_id}: {self.from_status} -> {self.to_status}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise PermissionError("Status log entries are immutable and cannot be updated.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise PermissionError("Status log entries are immutable and cannot be deleted.")

    @property
    def is_reassignment(self):
        return self.from_status is not None and self.from_status == self.to_status
