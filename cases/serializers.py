"""
Serializers for SOS cases.
"""

from rest_framework import serializers

from .models import CaseStatus, CaseStatusLog, SOSCase


class SOSCreateSerializer(serializers.Serializer):
    """
    Validates an incoming SOS.

    Only the position is required; address is resolved server-side when
    the client does not send one.
    """
    latitude = serializers.FloatField(min_value=-90, max_value=90)
    longitude = serializers.FloatField(min_value=-180, max_value=180)
    accuracy = serializers.FloatField(min_value=0, required=False, allow_null=True)
    description = serializers.CharField(required=False, allow_blank=True, max_length=2000)
    address = serializers.CharField(required=False, allow_blank=True)
    priority = serializers.IntegerField(min_value=1, max_value=5, required=False, default=1)


class SOSCaseSerializer(serializers.ModelSerializer):

    status_display = serializers.CharField(source='get_status_display', read_only=True)
    officer_code = serializers.SerializerMethodField()
    reported_by = serializers.SerializerMethodField()

    class Meta:
        model = SOSCase
        fields = [
            'id',
            'case_number',
            'status',
            'status_display',
            'latitude',
            'longitude',
            'accuracy',
            'address',
            'description',
            'priority',
            'reported_by',
            'officer',
            'officer_code',
            'assigned_at',
            'assigned_by',
            'closed_at',
            'closure_notes',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_officer_code(self, obj):
        return obj.officer.officer_code if obj.officer_id else None

    def get_reported_by(self, obj):
        return str(obj.reported_by_id) if obj.reported_by_id else None


class CaseStatusLogSerializer(serializers.ModelSerializer):

    class Meta:
        model = CaseStatusLog
        fields = ['id', 'from_status', 'to_status', 'changed_by', 'notes', 'timestamp']
        read_only_fields = fields


class StatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=CaseStatus.choices)
    notes = serializers.CharField(required=False, allow_blank=True, default='', max_length=2000)


class ReassignSerializer(serializers.Serializer):
    officer_id = serializers.UUIDField()
