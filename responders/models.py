"""
Responder models for Saathi Backend.

Contains:
- Station: fixed-location grouping of officers used to bias search locality
- Officer: field responder with availability and last known position
- OfficerLocationLog: position history recorded while an officer works a case

Ownership is deliberately one-directional: an officer knows its station id,
the station never owns the officer's lifecycle.
"""

from django.db import models

from core.models import BaseModel


class OfficerStatus(models.TextChoices):
    """Officer availability states."""
    AVAILABLE = 'AVAILABLE', 'Available'
    ON_DUTY = 'ON_DUTY', 'On Duty'
    BUSY = 'BUSY', 'Busy'
    OFF_DUTY = 'OFF_DUTY', 'Off Duty'


class Station(BaseModel):
    """
    Police station with fixed coordinates.
    """

    name = models.CharField(max_length=200)

    address = models.TextField(blank=True)

    latitude = models.FloatField()

    longitude = models.FloatField()

    district = models.CharField(max_length=100, blank=True, db_index=True)

    state = models.CharField(max_length=100, blank=True, db_index=True)

    phone = models.CharField(max_length=30, blank=True)

    is_active = models.BooleanField(
        default=True,
        db_index=True,
        help_text="Inactive stations are ignored by auto-assignment"
    )

    class Meta:
        db_table = 'stations'
        verbose_name = 'Station'
        verbose_name_plural = 'Stations'
        ordering = ['name']

    def __str__(self):
        return self.name


class Officer(BaseModel):
    """
    Field officer profile.

    BUSY is true iff the officer currently holds a non-terminal case.
    Only the assignment engine and case closure toggle BUSY/AVAILABLE;
    ON_DUTY/OFF_DUTY belong to duty management.
    """

    user = models.OneToOneField(
        'authentication.User',
        on_delete=models.PROTECT,
        related_name='officer_profile'
    )

    officer_code = models.CharField(
        max_length=30,
        unique=True,
        help_text="Badge number"
    )

    status = models.CharField(
        max_length=20,
        choices=OfficerStatus.choices,
        default=OfficerStatus.OFF_DUTY,
        db_index=True
    )

    current_lat = models.FloatField(null=True, blank=True)

    current_lng = models.FloatField(null=True, blank=True)

    last_location_update = models.DateTimeField(
        null=True,
        blank=True,
        help_text="Timestamp of the last position fix"
    )

    station = models.ForeignKey(
        Station,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='officers',
        help_text="Home station (optional)"
    )

    class Meta:
        db_table = 'officers'
        verbose_name = 'Officer'
        verbose_name_plural = 'Officers'
        ordering = ['officer_code']
        indexes = [
            models.Index(fields=['status', 'station'], name='officer_status_station_idx'),
        ]

    def __str__(self):
        return f"{self.officer_code} ({self.status})"

    @property
    def has_position(self):
        return self.current_lat is not None and self.current_lng is not None


class OfficerLocationLog(models.Model):
    """
    Immutable position history row.

    Rows are appended only while the officer works an active case; the
    retention purge is the only thing allowed to remove them.
    """

    officer = models.ForeignKey(
        Officer,
        on_delete=models.CASCADE,
        related_name='location_logs'
    )

    case = models.ForeignKey(
        'cases.SOSCase',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='officer_locations'
    )

    latitude = models.FloatField()

    longitude = models.FloatField()

    accuracy = models.FloatField(
        null=True,
        blank=True,
        help_text="GPS accuracy radius in metres"
    )

    timestamp = models.DateTimeField(auto_now_add=True, db_index=True)

    class Meta:
        db_table = 'officer_location_logs'
        ordering = ['-timestamp', '-id']
        indexes = [
            models.Index(fields=['officer', '-timestamp'], name='loclog_officer_time_idx'),
            models.Index(fields=['case', '-timestamp'], name='loclog_case_time_idx'),
        ]

    def __str__(self):
        return f"{self.officer_id} @ {self.latitude},{self.longitude}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise PermissionError("Location history rows are immutable.")
        super().save(*args, **kwargs)
