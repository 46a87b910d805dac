"""
Dispatch views for Saathi Backend.

Provides REST API endpoints for:
- Nearby officers / stations around a point (dispatcher map)
- Manual retry of auto-assignment for a case
"""

from rest_framework import views
from rest_framework.response import Response

from authentication.permissions import IsAdmin, IsOfficerOrAdmin
from cases.models import SOSCase
from core.exceptions import NotFound

from .engine import AssignmentEngine
from .serializers import LocationQuerySerializer, NearbyOfficerSerializer, NearbyStationSerializer
from .services import assignment_summary, record_assignment


class NearbyOfficersView(views.APIView):
    """
    GET /api/v1/dispatch/nearby-officers/?lat=20.29&lng=85.82&limit=10

    AVAILABLE and ON_DUTY officers within the assignment radius.
    """

    permission_classes = [IsOfficerOrAdmin]

    def get(self, request):
        query = LocationQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data

        officers = AssignmentEngine().nearby_officers(
            (params['lat'], params['lng']), limit=params.get('limit', 10)
        )
        return Response({
            'count': len(officers),
            'results': NearbyOfficerSerializer(officers, many=True).data,
        })


class NearbyStationsView(views.APIView):
    """
    GET /api/v1/dispatch/nearby-stations/?lat=20.29&lng=85.82&limit=5

    Active stations within the assignment radius with their available officers.
    """

    permission_classes = [IsOfficerOrAdmin]

    def get(self, request):
        query = LocationQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data

        stations = AssignmentEngine().nearby_officers_by_station(
            (params['lat'], params['lng']), limit=params.get('limit', 5)
        )
        return Response({
            'count': len(stations),
            'results': NearbyStationSerializer(stations, many=True).data,
        })


class AutoAssignView(views.APIView):
    """
    Re-run auto-assignment for a case still waiting for an officer.

    POST /api/v1/dispatch/cases/{id}/auto-assign/
    """

    permission_classes = [IsAdmin]

    def post(self, request, pk):
        try:
            case = SOSCase.objects.get(pk=pk)
        except SOSCase.DoesNotExist:
            raise NotFound("Case not found")

        result = AssignmentEngine().auto_assign(case.pk, (case.latitude, case.longitude))
        record_assignment(result, case, actor=request.user, request=request)

        return Response({
            'case_id': str(case.pk),
            'case_number': case.case_number,
            'assignment': assignment_summary(result),
        })
