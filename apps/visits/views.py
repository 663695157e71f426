# apps/visits/views.py

from django.utils import timezone
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.constants import AppointmentStatus, UserRoles
from core.exceptions import DomainError, error_response
from core.permissions import IsQueueViewer, IsStaff, has_branch_access
from .models import Appointment, QueueEntry
from .serializers import (
    AppointmentRescheduleSerializer,
    AppointmentSerializer,
    CancelSerializer,
    QueueAddSerializer,
    QueueEntrySerializer,
    QueueTransferSerializer,
    QueueTransitionSerializer,
    RescheduleSerializer,
)
from .services.appointment_service import AppointmentService
from .services.queue_board import get_branch_board
from .services.queue_service import QueueService


def board_payload(branch_id):
    board = get_branch_board(branch_id)
    return {
        'branch': branch_id,
        'waiting': QueueEntrySerializer(board['waiting'], many=True).data,
        'serving': QueueEntrySerializer(board['serving'], many=True).data,
        'complete': QueueEntrySerializer(board['complete'], many=True).data,
        'total_waiting': len(board['waiting']),
        'total_serving': len(board['serving']),
        'total_complete': len(board['complete']),
    }


def requested_branch(request):
    value = request.query_params.get('branch') or request.user.branch_id
    try:
        return int(value) if value else None
    except (TypeError, ValueError):
        return None


def forbidden_branch():
    return Response(
        {'error': 'You do not have access to this branch'},
        status=status.HTTP_403_FORBIDDEN,
    )


class AppointmentViewSet(viewsets.ReadOnlyModelViewSet):
    """ViewSet for Appointment model"""

    queryset = Appointment.objects.select_related('service', 'branch', 'service_point')
    serializer_class = AppointmentSerializer
    lookup_value_regex = r'\d+'
    filterset_fields = ['branch', 'service', 'status']

    def get_permissions(self):
        if self.action in ['check_in', 'checked_in']:
            return [IsAuthenticated(), IsStaff()]
        return [IsAuthenticated()]

    def get_queryset(self):
        """Admins see everything, staff their branch, patients their own"""
        queryset = super().get_queryset()
        user = self.request.user

        if user.role == UserRoles.ADMIN:
            return queryset
        if user.role in [UserRoles.STAFF, UserRoles.VISUALIZER]:
            return queryset.filter(branch_id=user.branch_id)
        return queryset.filter(user=user)

    @action(detail=True, methods=['post'])
    def reschedule(self, request, pk=None):
        serializer = RescheduleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            appointment = AppointmentService.reschedule(
                pk,
                request.user,
                data.get('date'),
                data.get('time'),
                reason=data.get('reason', ''),
            )
        except DomainError as exc:
            return error_response(exc)

        return Response({
            'message': 'Appointment rescheduled',
            'appointment': AppointmentSerializer(appointment).data,
        })

    @action(detail=True, methods=['get'], url_path='reschedule-history')
    def reschedule_history(self, request, pk=None):
        try:
            history = AppointmentService.history(pk, request.user)
        except DomainError as exc:
            return error_response(exc)
        return Response(AppointmentRescheduleSerializer(history, many=True).data)

    @action(detail=True, methods=['post'])
    def cancel(self, request, pk=None):
        serializer = CancelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            appointment = AppointmentService.cancel(
                pk, request.user, reason=serializer.validated_data['reason']
            )
        except DomainError as exc:
            return error_response(exc)

        return Response({
            'message': 'Appointment cancelled',
            'appointment': AppointmentSerializer(appointment).data,
        })

    @action(detail=True, methods=['post'], url_path='check-in')
    def check_in(self, request, pk=None):
        try:
            appointment = AppointmentService.check_in(pk, request.user)
        except DomainError as exc:
            return error_response(exc)
        return Response(AppointmentSerializer(appointment).data)

    @action(detail=False, methods=['get'], url_path='checked-in')
    def checked_in(self, request):
        """Today's checked-in appointments that are not queued yet"""
        branch_id = requested_branch(request)
        if not branch_id:
            return Response({'error': 'branch is required'}, status=status.HTTP_400_BAD_REQUEST)
        if not has_branch_access(request.user, branch_id):
            return forbidden_branch()

        appointments = (
            Appointment.objects.filter(
                branch_id=branch_id,
                status=AppointmentStatus.CHECKED_IN,
                scheduled_at__date=timezone.localdate(),
                queue_entries__isnull=True,
            )
            .select_related('service', 'branch')
            .order_by('attended_at', 'id')
        )
        return Response(AppointmentSerializer(appointments, many=True).data)


class QueueViewSet(viewsets.GenericViewSet):
    """Live service queue of a branch"""

    queryset = QueueEntry.objects.filter(is_active=True).select_related('appointment', 'service_point')
    serializer_class = QueueEntrySerializer
    lookup_value_regex = r'\d+'

    def get_permissions(self):
        if self.action == 'list':
            return [IsAuthenticated(), IsQueueViewer()]
        return [IsAuthenticated(), IsStaff()]

    def get_queue_service(self):
        return QueueService()

    def list(self, request):
        branch_id = requested_branch(request)
        if not branch_id:
            return Response({'error': 'branch is required'}, status=status.HTTP_400_BAD_REQUEST)
        if not has_branch_access(request.user, branch_id):
            return forbidden_branch()

        try:
            return Response(board_payload(branch_id))
        except DomainError as exc:
            return error_response(exc)

    @action(detail=False, methods=['post'])
    def add(self, request):
        serializer = QueueAddSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        branch_id = (
            Appointment.objects.filter(pk=data['appointment'])
            .values_list('branch_id', flat=True)
            .first()
        )
        if branch_id is not None and not has_branch_access(request.user, branch_id):
            return forbidden_branch()

        try:
            entry = self.get_queue_service().add_to_queue(
                data['appointment'], data['service_point'], user=request.user
            )
            return Response({
                'entry': QueueEntrySerializer(entry).data,
                'board': board_payload(entry.branch_id),
            }, status=status.HTTP_201_CREATED)
        except DomainError as exc:
            return error_response(exc)

    @action(detail=True, methods=['post'])
    def transition(self, request, pk=None):
        serializer = QueueTransitionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        denied = self._check_entry_branch(request, pk)
        if denied:
            return denied

        try:
            entry = self.get_queue_service().change_status(
                pk, serializer.validated_data['status'], user=request.user
            )
            return Response({
                'entry': QueueEntrySerializer(entry).data,
                'board': board_payload(entry.branch_id),
            })
        except DomainError as exc:
            return error_response(exc)

    @action(detail=True, methods=['post'])
    def transfer(self, request, pk=None):
        serializer = QueueTransferSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        denied = self._check_entry_branch(request, pk)
        if denied:
            return denied

        try:
            entry = self.get_queue_service().transfer(
                pk, serializer.validated_data['service_point'], user=request.user
            )
            return Response({
                'entry': QueueEntrySerializer(entry).data,
                'board': board_payload(entry.branch_id),
            })
        except DomainError as exc:
            return error_response(exc)

    def _check_entry_branch(self, request, pk):
        branch_id = QueueEntry.objects.filter(pk=pk).values_list('branch_id', flat=True).first()
        if branch_id is not None and not has_branch_access(request.user, branch_id):
            return forbidden_branch()
        return None
