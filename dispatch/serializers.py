"""
Serializers for dispatcher queries.
"""

from rest_framework import serializers


class LocationQuerySerializer(serializers.Serializer):
    """Query parameters for the nearby listings: ?lat=..&lng=..&limit=.."""
    lat = serializers.FloatField(min_value=-90, max_value=90)
    lng = serializers.FloatField(min_value=-180, max_value=180)
    limit = serializers.IntegerField(min_value=1, max_value=50, required=False)


class NearbyOfficerSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    officer_code = serializers.CharField()
    status = serializers.CharField()
    current_lat = serializers.FloatField()
    current_lng = serializers.FloatField()
    last_location_update = serializers.DateTimeField(allow_null=True)
    station_id = serializers.UUIDField(allow_null=True)
    distance_km = serializers.FloatField()


class NearbyStationSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    name = serializers.CharField()
    latitude = serializers.FloatField()
    longitude = serializers.FloatField()
    distance_km = serializers.FloatField()
    available_count = serializers.IntegerField()
    available_officers = NearbyOfficerSerializer(many=True)
