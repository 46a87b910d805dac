"""
Serializers for officer positions.
"""

from rest_framework import serializers

from .models import OfficerLocationLog


class LocationUpdateSerializer(serializers.Serializer):
    latitude = serializers.FloatField(min_value=-90, max_value=90)
    longitude = serializers.FloatField(min_value=-180, max_value=180)
    accuracy = serializers.FloatField(min_value=0, required=False, allow_null=True)
    case_id = serializers.UUIDField(required=False, allow_null=True)


class ActiveLocationSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    officer_code = serializers.CharField()
    status = serializers.CharField()
    latitude = serializers.FloatField(source='current_lat')
    longitude = serializers.FloatField(source='current_lng')
    last_location_update = serializers.DateTimeField(allow_null=True)
    station_id = serializers.UUIDField(allow_null=True)
    station_name = serializers.CharField(source='station__name', allow_null=True)


class LocationLogSerializer(serializers.ModelSerializer):

    class Meta:
        model = OfficerLocationLog
        fields = ['id', 'case', 'latitude', 'longitude', 'accuracy', 'timestamp']
        read_only_fields = fields


class HistoryQuerySerializer(serializers.Serializer):
    case_id = serializers.UUIDField(required=False)
