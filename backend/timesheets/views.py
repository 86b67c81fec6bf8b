import datetime
import logging

from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.contrib.auth import get_user_model
from django.db import InterfaceError, OperationalError
from django.db.models import Count, Sum
from accounts.identity import UserIdentityProvider
from accounts.serializers import UserSerializer
from .clock import SystemClock
from .exceptions import (
    ActorNotPermitted, DuplicateTimesheet, IncompleteTimesheet, InvalidTimeEntry,
    InvalidTransition, StorageUnavailable, TimesheetError,
)
from .guard import week_start_for
from .models import Timesheet
from .notifications import find_employees_missing_timesheet
from .repository import DjangoTimesheetRepository
from .rules import load_wage_rules
from .serializers import (
    TimesheetSerializer, TimesheetCreateSerializer, TimesheetUpdateSerializer,
    TimesheetCorrectionSerializer, WeekPreviewSerializer, day_entries,
)
from .services import get_lifecycle, get_submission_guard
from .tasks import send_missing_timesheet_reminders_task
from .weekly import compute_week

logger = logging.getLogger(__name__)

User = get_user_model()


def timesheet_error_response(e):
    """Map a workflow error onto an HTTP response."""
    if isinstance(e, DuplicateTimesheet):
        return Response(
            {'error': str(e), 'timesheet_id': e.timesheet_id},
            status=status.HTTP_409_CONFLICT
        )
    if isinstance(e, ActorNotPermitted):
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
    if isinstance(e, InvalidTransition):
        return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)
    if isinstance(e, IncompleteTimesheet):
        return Response(
            {'error': str(e), 'missing_days': list(e.missing_days)},
            status=status.HTTP_400_BAD_REQUEST
        )
    if isinstance(e, InvalidTimeEntry):
        return Response({'error': str(e), 'day': e.day}, status=status.HTTP_400_BAD_REQUEST)
    if isinstance(e, StorageUnavailable):
        return Response(
            {'error': 'Timesheet storage is temporarily unavailable. Please retry.'},
            status=status.HTTP_503_SERVICE_UNAVAILABLE
        )
    logger.error(f"Unhandled timesheet error: {e}", exc_info=True)
    return Response({'error': str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


def timesheet_gone_response(timesheet):
    logger.warning(f"Timesheet #{timesheet.pk} was deleted before it could be locked")
    return Response({'error': 'Timesheet not found'}, status=status.HTTP_404_NOT_FOUND)


def is_true(value):
    return value in (True, 'true', 'True', '1', 1)


def parse_week(value, clock=None):
    """Monday of the week containing ``value`` (ISO date), or of today."""
    if not value:
        return week_start_for((clock or SystemClock()).today())
    try:
        return week_start_for(datetime.date.fromisoformat(value))
    except ValueError:
        return None


class TimesheetViewSet(viewsets.ModelViewSet):
    queryset = Timesheet.objects.all()
    serializer_class = TimesheetSerializer
    permission_classes = [IsAuthenticated]
    filterset_fields = ['employee', 'week_start', 'status', 'compensation_class']
    search_fields = ['employee__username', 'employee__first_name', 'employee__last_name']
    ordering_fields = ['week_start', 'submitted_at', 'status']

    identity = UserIdentityProvider()

    def get_queryset(self):
        """Employees see their own timesheets, admins see everyone's."""
        user = self.request.user
        queryset = super().get_queryset()

        if not user.is_admin():
            queryset = queryset.filter(employee=user)

        return queryset.select_related('employee', 'approved_by').prefetch_related('days', 'expenses')

    def handle_exception(self, exc):
        if isinstance(exc, (OperationalError, InterfaceError)):
            logger.error(f"Timesheet storage unavailable: {exc}", exc_info=True)
            return timesheet_error_response(StorageUnavailable(str(exc)))
        return super().handle_exception(exc)

    def get_actor(self):
        return self.identity.actor_for(self.request.user)

    def get_serializer_context(self):
        context = super().get_serializer_context()
        if self.request is not None and self.request.user.is_authenticated:
            context['lifecycle'] = get_lifecycle()
            context['actor'] = self.get_actor()
        return context

    def _respond(self, timesheet, status_code=status.HTTP_200_OK):
        # Re-read so days and totals reflect the committed state.
        fresh = self.get_queryset().get(pk=timesheet.pk)
        return Response(self.get_serializer(fresh).data, status=status_code)

    def _transition(self, request, action_name, **payload):
        timesheet = self.get_object()
        try:
            updated = get_lifecycle().transition(timesheet, action_name, self.get_actor(), **payload)
        except Timesheet.DoesNotExist:
            return timesheet_gone_response(timesheet)
        except TimesheetError as e:
            return timesheet_error_response(e)
        return self._respond(updated)

    def create(self, request, *args, **kwargs):
        """Create a draft timesheet. Admins may create one for any employee."""
        serializer = TimesheetCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        employee_id = data.get('employee', request.user.id)

        try:
            timesheet_id = get_submission_guard().submit_new(
                employee_id,
                data['week_start'],
                self.get_actor(),
                entries=day_entries(data.get('days')),
                expenses=data.get('expenses'),
            )
        except User.DoesNotExist:
            return Response({'error': 'Employee not found'}, status=status.HTTP_404_NOT_FOUND)
        except TimesheetError as e:
            return timesheet_error_response(e)

        return self._respond(Timesheet(pk=timesheet_id), status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        """Owner edit of a draft or rejected timesheet."""
        serializer = TimesheetUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        return self._transition(
            request,
            'edit',
            entries=day_entries(data.get('days')),
            expenses=data.get('expenses'),
            certified=data.get('certified'),
        )

    def partial_update(self, request, *args, **kwargs):
        return self.update(request, *args, **kwargs)

    def destroy(self, request, *args, **kwargs):
        """Owner delete of a draft timesheet."""
        timesheet = self.get_object()
        try:
            get_lifecycle().transition(timesheet, 'delete', self.get_actor())
        except Timesheet.DoesNotExist:
            return timesheet_gone_response(timesheet)
        except TimesheetError as e:
            return timesheet_error_response(e)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['post'])
    def submit(self, request, pk=None):
        """Submit for approval. The employee must certify the hours."""
        certified = request.data.get('certified')
        if certified is not None:
            certified = is_true(certified)
        return self._transition(request, 'submit', certified=certified)

    @action(detail=True, methods=['post'])
    def certify(self, request, pk=None):
        return self._transition(request, 'certify')

    @action(detail=True, methods=['post'])
    def approve(self, request, pk=None):
        """Approve a submitted timesheet. Requires ``approved: true``."""
        approved = is_true(request.data.get('approved'))
        return self._transition(request, 'approve', approved=approved)

    @action(detail=True, methods=['post'])
    def reject(self, request, pk=None):
        reason = request.data.get('reason')
        if not reason or not str(reason).strip():
            return Response(
                {'error': 'A rejection reason is required'},
                status=status.HTTP_400_BAD_REQUEST
            )
        return self._transition(request, 'reject', reason=str(reason))

    @action(detail=True, methods=['post'])
    def correct(self, request, pk=None):
        """Admin correction of days, expenses or notes after submission."""
        serializer = TimesheetCorrectionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        return self._transition(
            request,
            'correct',
            entries=day_entries(data.get('days')),
            expenses=data.get('expenses'),
            admin_notes=data.get('admin_notes'),
        )

    @action(detail=False, methods=['get'])
    def current_week(self, request):
        """The current user's timesheet for this week, if any."""
        week_start = parse_week(None)
        timesheet = self.get_queryset().filter(employee=request.user, week_start=week_start).first()
        if timesheet is None:
            return Response(
                {'error': 'No timesheet for the current week', 'week_start': week_start},
                status=status.HTTP_404_NOT_FOUND
            )
        return Response(self.get_serializer(timesheet).data)

    def _require_admin(self, request):
        if not request.user.is_admin():
            return Response(
                {'error': 'You do not have permission to perform this action'},
                status=status.HTTP_403_FORBIDDEN
            )
        return None

    @action(detail=False, methods=['get'])
    def weekly(self, request):
        """Admin summary of every timesheet for a week."""
        denied = self._require_admin(request)
        if denied:
            return denied

        week_start = parse_week(request.query_params.get('week_start'))
        if week_start is None:
            return Response({'error': 'Invalid week_start'}, status=status.HTTP_400_BAD_REQUEST)

        timesheets = self.get_queryset().filter(week_start=week_start)
        week_rows = Timesheet.objects.filter(week_start=week_start)
        totals = week_rows.aggregate(
            regular_hours=Sum('regular_hours'),
            overtime_hours=Sum('overtime_hours'),
            double_time_hours=Sum('double_time_hours'),
            travel_hours=Sum('travel_hours'),
        )
        by_status = {
            row['status']: row['count']
            for row in week_rows.values('status').annotate(count=Count('id'))
        }

        return Response({
            'week_start': week_start,
            'count': timesheets.count(),
            'by_status': by_status,
            'totals': {key: value or 0 for key, value in totals.items()},
            'results': self.get_serializer(timesheets, many=True).data,
        })

    @action(detail=False, methods=['get'])
    def missing(self, request):
        """Admin: active hourly employees without a timesheet for the week."""
        denied = self._require_admin(request)
        if denied:
            return denied

        week_start = parse_week(request.query_params.get('week_start'))
        if week_start is None:
            return Response({'error': 'Invalid week_start'}, status=status.HTTP_400_BAD_REQUEST)

        employees = find_employees_missing_timesheet(week_start)
        return Response({
            'week_start': week_start,
            'count': employees.count(),
            'results': UserSerializer(employees, many=True).data,
        })

    @action(detail=False, methods=['post'])
    def send_reminders(self, request):
        """Admin: queue reminder emails for employees missing a timesheet."""
        denied = self._require_admin(request)
        if denied:
            return denied

        week_start = parse_week(request.data.get('week_start'))
        if week_start is None:
            return Response({'error': 'Invalid week_start'}, status=status.HTTP_400_BAD_REQUEST)

        result = send_missing_timesheet_reminders_task.delay(week_start.isoformat())
        logger.info(f"Queued timesheet reminders for week {week_start} (task {result.id})")
        return Response(
            {'detail': 'Reminders queued', 'week_start': week_start, 'task_id': result.id},
            status=status.HTTP_202_ACCEPTED
        )

    @action(detail=False, methods=['post'])
    def preview(self, request):
        """Compute weekly totals for unsaved day entries."""
        serializer = WeekPreviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        employee_id = data.get('employee', request.user.id)
        if employee_id != request.user.id and not request.user.is_admin():
            return Response(
                {'error': 'You do not have permission to preview other employees\' hours'},
                status=status.HTTP_403_FORBIDDEN
            )

        try:
            compensation_class = self.identity.compensation_class(employee_id)
        except User.DoesNotExist:
            return Response({'error': 'Employee not found'}, status=status.HTTP_404_NOT_FOUND)

        prior_week_tail = None
        if data.get('week_start'):
            week_start = week_start_for(data['week_start'])
            prior_week_tail = DjangoTimesheetRepository().prior_week_tail(employee_id, week_start)

        try:
            totals = compute_week(
                day_entries(data['days']),
                prior_week_tail,
                compensation_class,
                load_wage_rules(),
            )
        except TimesheetError as e:
            return timesheet_error_response(e)

        return Response(totals.to_dict())
