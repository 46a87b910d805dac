"""
Notification models for Saathi Backend.

In-app notifications raised after a case transition has committed.
Delivery channels beyond the in-app inbox are not handled here.
"""

from django.db import models
from django.utils import timezone

from core.models import BaseModel, SoftDeleteManager


class NotificationType(models.TextChoices):
    CASE_CREATED = 'case_created', 'Case Created'
    CASE_ASSIGNED = 'case_assigned', 'Case Assigned'
    CASE_REASSIGNED = 'case_reassigned', 'Case Reassigned'
    STATUS_CHANGED = 'status_changed', 'Status Changed'
    CASE_CLOSED = 'case_closed', 'Case Closed'
    GENERAL = 'general', 'General'


class NotificationManager(SoftDeleteManager):
    """Notifications are never deleted, only marked as read."""

    def delete(self, *args, **kwargs):
        raise PermissionError("Notifications cannot be deleted.")


class Notification(BaseModel):

    recipient = models.ForeignKey(
        'authentication.User',
        on_delete=models.CASCADE,
        related_name='notifications',
        help_text="User who receives this notification"
    )

    title = models.CharField(max_length=200)

    message = models.TextField()

    notification_type = models.CharField(
        max_length=30,
        choices=NotificationType.choices,
        default=NotificationType.GENERAL,
        db_index=True
    )

    case = models.ForeignKey(
        'cases.SOSCase',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='notifications'
    )

    is_read = models.BooleanField(default=False, db_index=True)

    read_at = models.DateTimeField(null=True, blank=True)

    objects = NotificationManager()
    all_objects = models.Manager()

    class Meta:
        db_table = 'notifications'
        verbose_name = 'Notification'
        verbose_name_plural = 'Notifications'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['recipient', 'is_read', '-created_at'], name='notif_recipient_read_idx'),
        ]

    def __str__(self):
        return f"[{self.recipient_id}] {self.title}"

    def mark_as_read(self):
        if not self.is_read:
            self.is_read = True
            self.read_at = timezone.now()
            self.save(update_fields=['is_read', 'read_at', 'updated_at'])
