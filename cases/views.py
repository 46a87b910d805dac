"""
SOS case views for Saathi Backend.

Provides REST API endpoints for:
- SOS intake (create, auto-assign, notify)
- Case listing and detail (based on role)
- Status updates through the case state machine
- Status history
- Admin reassignment

Lifecycle changes are committed by CaseService or the assignment engine;
audit rows and notifications are written afterwards and never undo them.
"""

import logging

from rest_framework import generics, status, views
from rest_framework.response import Response

from audit.models import AuditEventType, AuditLog
from authentication.permissions import IsAdmin, IsAuthenticated, IsOfficerOrAdmin
from core.exceptions import NotFound
from dispatch.engine import AssignmentEngine
from dispatch.services import assignment_summary, record_assignment
from notifications.services import NotificationService, notify_after_commit

from .filters import SOSCaseFilter
from .geocoding import LocationResolverService
from .models import CaseStatus, SOSCase
from .serializers import (
    CaseStatusLogSerializer,
    ReassignSerializer,
    SOSCaseSerializer,
    SOSCreateSerializer,
    StatusUpdateSerializer,
)
from .services import CaseService

logger = logging.getLogger(__name__)


def visible_cases(user):
    """Cases the user may see: admins all, officers their own, citizens their reports."""
    queryset = SOSCase.objects.select_related('officer')
    if user.is_admin:
        return queryset
    if user.is_officer:
        return queryset.filter(officer__user=user)
    return queryset.filter(reported_by=user)


def get_visible_case(user, pk):
    try:
        return visible_cases(user).get(pk=pk)
    except SOSCase.DoesNotExist:
        raise NotFound("Case not found")


class CaseListCreateView(generics.ListAPIView):
    """
    GET  /api/v1/cases/   list visible cases, newest first
    POST /api/v1/cases/   raise an SOS

    Request (POST):
    {
        "latitude": 20.2961,
        "longitude": 85.8245,
        "accuracy": 12.5,
        "description": "optional"
    }

    Query parameters (GET):
    - status, officer, priority
    - created_at_after, created_at_before (ISO 8601)

    Response (POST): the case plus the auto-assignment outcome.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = SOSCaseSerializer
    filterset_class = SOSCaseFilter

    def get_queryset(self):
        return visible_cases(self.request.user).order_by('-created_at')

    def post(self, request):
        serializer = SOSCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        case = CaseService().create_case(
            reported_by=request.user,
            latitude=data['latitude'],
            longitude=data['longitude'],
            description=data.get('description', ''),
            accuracy=data.get('accuracy'),
            address=data.get('address'),
            priority=data.get('priority', 1),
        )

        AuditLog.log(
            event_type=AuditEventType.SOS_CREATED,
            actor=request.user,
            target=case,
            request=request,
            description=f"SOS raised: {case.case_number}",
            metadata={'latitude': case.latitude, 'longitude': case.longitude},
        )

        result = AssignmentEngine().auto_assign(case.pk, (case.latitude, case.longitude))
        record_assignment(result, case, actor=request.user, request=request)

        # Outside the transaction - non-critical
        try:
            NotificationService.notify_case_created(case)
        except Exception:
            logger.exception(f"Admin notification failed for case {case.case_number}")

        if not case.address:
            resolved = LocationResolverService.resolve_address(case.latitude, case.longitude)
            if resolved:
                SOSCase.objects.filter(pk=case.pk).update(address=resolved)

        case.refresh_from_db()
        return Response(
            {
                'case': SOSCaseSerializer(case).data,
                'assignment': assignment_summary(result),
            },
            status=status.HTTP_201_CREATED
        )


class CaseDetailView(views.APIView):
    """
    GET /api/v1/cases/{id}/
    """

    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        case = get_visible_case(request.user, pk)
        return Response(SOSCaseSerializer(case).data)


class CaseStatusUpdateView(views.APIView):
    """
    Move a case along its lifecycle.

    POST /api/v1/cases/{id}/status/

    Request:
    {
        "status": "ACKNOWLEDGED",
        "notes": "optional"
    }

    The assigned officer drives ACKNOWLEDGED through ACTION_TAKEN; an admin
    may also close a case from any open state.
    """

    permission_classes = [IsOfficerOrAdmin]

    def post(self, request, pk):
        serializer = StatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        get_visible_case(request.user, pk)
        case, entry = CaseService().update_status(
            pk,
            serializer.validated_data['status'],
            actor=request.user,
            notes=serializer.validated_data['notes'],
        )

        if entry is not None:
            closed = entry.to_status == CaseStatus.CLOSED
            AuditLog.log(
                event_type=AuditEventType.CASE_CLOSED if closed else AuditEventType.STATUS_CHANGED,
                actor=request.user,
                target=case,
                request=request,
                description=f"{case.case_number}: {entry.from_status} -> {entry.to_status}",
                metadata={'from_status': entry.from_status, 'to_status': entry.to_status},
            )
            notify_after_commit(entry)

        return Response(SOSCaseSerializer(case).data)


class CaseHistoryView(views.APIView):
    """
    GET /api/v1/cases/{id}/history/

    Status log, oldest first.
    """

    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        case = get_visible_case(request.user, pk)
        entries = CaseService().status_history(case.pk)
        return Response({
            'case_id': str(case.pk),
            'case_number': case.case_number,
            'history': CaseStatusLogSerializer(entries, many=True).data,
        })


class CaseReassignView(views.APIView):
    """
    Hand a case to another officer (admin override).

    POST /api/v1/cases/{id}/reassign/

    Request:
    {
        "officer_id": "uuid"
    }
    """

    permission_classes = [IsAdmin]

    def post(self, request, pk):
        serializer = ReassignSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = AssignmentEngine().reassign(
            pk, serializer.validated_data['officer_id'], actor_id=request.user.pk
        )
        case = SOSCase.objects.select_related('officer').get(pk=result.case_id)

        AuditLog.log(
            event_type=AuditEventType.OFFICER_REASSIGNED,
            actor=request.user,
            target=case,
            request=request,
            description=result.status_log.notes,
            metadata={
                'officer_id': str(result.officer_id),
                'previous_officer_id': (
                    str(result.previous_officer_id) if result.previous_officer_id else None
                ),
            },
        )
        notify_after_commit(result.status_log)

        return Response(SOSCaseSerializer(case).data)
