"""
Officer position views for Saathi Backend.

Provides REST API endpoints for:
- Officer position updates (own position only)
- Fleet map of active officers (admin)
- Position history of one officer
"""

from django.conf import settings
from rest_framework import views
from rest_framework.response import Response

from authentication.permissions import IsAdmin, IsAuthenticated, IsOfficer
from cases.models import SOSCase
from core.exceptions import Forbidden, NotFound

from .models import Officer
from .serializers import (
    ActiveLocationSerializer, HistoryQuerySerializer, LocationLogSerializer, LocationUpdateSerializer,
)
from .tracking import LocationTracker


def get_tracker():
    return LocationTracker(history_limit=settings.LOCATION_TRACKING['HISTORY_LIMIT'])


class LocationUpdateView(views.APIView):
    """
    Report the calling officer's current position.

    POST /api/v1/responders/location/

    Request:
    {
        "latitude": 20.2961,
        "longitude": 85.8245,
        "accuracy": 8.0,
        "case_id": "uuid (optional, a case assigned to the caller)"
    }
    """

    permission_classes = [IsOfficer]

    def post(self, request):
        serializer = LocationUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        officer = request.user.officer_profile
        case_id = data.get('case_id')
        if case_id is not None:
            try:
                case = SOSCase.objects.only('officer_id').get(pk=case_id)
            except SOSCase.DoesNotExist:
                raise NotFound("Case not found")
            if case.officer_id != officer.pk:
                raise Forbidden("You can only record positions for a case assigned to you.")

        entry = get_tracker().update_location(
            officer.pk,
            data['latitude'],
            data['longitude'],
            accuracy=data.get('accuracy'),
            case_id=case_id,
        )

        return Response({
            'officer_id': str(officer.pk),
            'history_recorded': entry is not None,
        })


class ActiveLocationsView(views.APIView):
    """
    GET /api/v1/responders/locations/active/

    Last known position of every officer who is not off duty.
    """

    permission_classes = [IsAdmin]

    def get(self, request):
        locations = get_tracker().active_locations()
        return Response({
            'count': len(locations),
            'results': ActiveLocationSerializer(locations, many=True).data,
        })


class LocationHistoryView(views.APIView):
    """
    GET /api/v1/responders/{officer_id}/location-history/?case_id=...

    Newest first. Admins see any officer; officers only themselves.
    """

    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        user = request.user
        if not user.is_admin:
            officer = getattr(user, 'officer_profile', None) if user.is_officer else None
            if officer is None or officer.pk != pk:
                raise Forbidden("You can only view your own location history.")

        if not Officer.objects.filter(pk=pk).exists():
            raise NotFound("Officer not found")

        query = HistoryQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        entries = get_tracker().history(pk, case_id=query.validated_data.get('case_id'))
        return Response({
            'officer_id': str(pk),
            'count': len(entries),
            'results': LocationLogSerializer(entries, many=True).data,
        })
