"""
Run Service - run lifecycle

State machine:
    draft -> scheduled -> in_progress -> completed
    draft | scheduled | in_progress -> cancelled

completed and cancelled are terminal. Runs normally complete through task
completion (see task_service); force_complete is the administrative
shortcut.
"""
import logging
from datetime import date, datetime, time
from decimal import Decimal, ROUND_HALF_UP

from dateutil import parser as date_parser
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count, Q
from django.utils import timezone

from core.audit.services import AuditService
from HR.offboarding.dtos import ExitInterviewDTO, OffboardingStatsDTO, ProgressDTO, RunFilterDTO
from HR.offboarding.exceptions import NotFoundError
from HR.offboarding.models import (
    EmployeeOffboarding,
    EmployeeOffboardingTask,
    RunStatus,
    TaskStatus,
)
from HR.offboarding.services.task_service import close_run_if_done

logger = logging.getLogger(__name__)

PIPELINE = 'pipeline'
HISTORY = 'history'
ALL = 'all'

VIEW_STATUSES = {
    PIPELINE: RunStatus.active(),
    HISTORY: [RunStatus.COMPLETED, RunStatus.CANCELLED],
    ALL: None,
}


def _percentage(part, whole, empty=0):
    if not whole:
        return empty
    value = Decimal(part * 100) / Decimal(whole)
    return int(value.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def _interview_timestamp(value):
    """Date or ISO 8601 string to an aware datetime; now when omitted."""
    if value in (None, ''):
        return timezone.now()
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime.combine(value, time.min)
    else:
        try:
            parsed = date_parser.isoparse(str(value).strip())
        except (ValueError, OverflowError):
            raise ValidationError({'completed_at': f"'{value}' is not a valid date (YYYY-MM-DD)"})
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed)
    return parsed


class RunService:
    """Service layer for offboarding runs"""

    @staticmethod
    def get_run(scope, run_id, for_update=False) -> EmployeeOffboarding:
        queryset = EmployeeOffboarding.objects.all()
        if for_update:
            queryset = queryset.select_for_update()
        run = queryset.for_scope(scope).select_related('employee').filter(pk=run_id).first()
        if run is None:
            raise NotFoundError(f"Offboarding run {run_id} not found")
        return run

    @classmethod
    def _force_status(cls, scope, run_id, new_status) -> EmployeeOffboarding:
        run = cls.get_run(scope, run_id)
        if run.is_terminal:
            raise ValidationError(f"Offboarding run {run.pk} is {run.status} and cannot change status")
        old_status = run.status
        run.status = new_status
        run.save(update_fields=['status'])
        logger.info(f"Offboarding run {run.pk}: {old_status} -> {new_status}")
        return run

    @classmethod
    def pause(cls, scope, run_id) -> EmployeeOffboarding:
        """Set a non-terminal run back to draft."""
        return cls._force_status(scope, run_id, RunStatus.DRAFT)

    @classmethod
    def start(cls, scope, run_id) -> EmployeeOffboarding:
        """Set a non-terminal run to in_progress."""
        return cls._force_status(scope, run_id, RunStatus.IN_PROGRESS)

    @classmethod
    @transaction.atomic
    def cancel(cls, scope, run_id, reason='') -> EmployeeOffboarding:
        """
        Cancel a run and put the employee back to active.

        Tasks are left exactly as they are; completed tasks stay completed.

        Raises:
            NotFoundError: If the run is not in scope
            ValidationError: If the run is already completed or cancelled
        """
        run = cls.get_run(scope, run_id, for_update=True)
        if run.status not in RunStatus.active():
            raise ValidationError(f"Only an open offboarding run can be cancelled (run is {run.status})")

        run.status = RunStatus.CANCELLED
        run.cancelled_at = timezone.now()
        run.save(update_fields=['status', 'cancelled_at'])

        employee = run.employee
        employee.restore_active()

        AuditService.log_best_effort(
            event_type='offboarding_cancelled',
            record_type='EmployeeOffboarding',
            record_id=run.pk,
            related_employee=employee,
            description='Offboarding cancelled',
            metadata={'reason': reason} if reason else None,
            scope=scope,
        )
        logger.info(f"Offboarding run {run.pk} cancelled; employee {employee.pk} restored to active")
        return run

    @classmethod
    def force_complete(cls, scope, run_id) -> EmployeeOffboarding:
        """
        Complete every remaining required task of an open run, then close it.

        Automated actions attached to those tasks are not executed.
        """
        with transaction.atomic():
            run = cls.get_run(scope, run_id, for_update=True)
            if run.is_terminal:
                raise ValidationError(f"Offboarding run {run.pk} is already {run.status}")

            forced = EmployeeOffboardingTask.objects.for_scope(scope).filter(
                offboarding_id=run.pk, required=True
            ).exclude(status=TaskStatus.COMPLETED).update(
                status=TaskStatus.COMPLETED,
                completed_at=timezone.now(),
                blocked_reason=None,
            )

        AuditService.log_best_effort(
            event_type='offboarding_force_completed',
            record_type='EmployeeOffboarding',
            record_id=run.pk,
            related_employee=run.employee,
            description=f"Force completed {forced} remaining required task(s)",
            metadata={'forced_tasks': forced},
            scope=scope,
        )

        run, _closed = close_run_if_done(scope, run.pk, employee=run.employee)
        return run

    @classmethod
    def record_exit_interview(cls, scope, run_id, dto: ExitInterviewDTO) -> EmployeeOffboarding:
        """
        Store the exit interview outcome on a run.

        Args:
            scope: ScopeContext
            run_id: EmployeeOffboarding id
            dto: ExitInterviewDTO (notes, rating 1-5, completed_at; the
                interview date defaults to now)

        Returns:
            EmployeeOffboarding

        Raises:
            NotFoundError: If the run is not in scope
            ValidationError: If the rating or date is invalid, or the run is cancelled
        """
        rating = dto.rating
        if rating is not None and (isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5):
            raise ValidationError({'rating': "Rating must be a whole number from 1 to 5"})
        completed_at = _interview_timestamp(dto.completed_at)

        run = cls.get_run(scope, run_id)
        if run.status == RunStatus.CANCELLED:
            raise ValidationError(f"Offboarding run {run.pk} is cancelled; no exit interview can be recorded")

        run.exit_interview_notes = (dto.notes or '').strip()
        run.exit_interview_rating = rating
        run.exit_interview_completed_at = completed_at
        run.save(update_fields=['exit_interview_notes', 'exit_interview_rating', 'exit_interview_completed_at'])

        AuditService.log_best_effort(
            event_type='offboarding_exit_interview_recorded',
            record_type='EmployeeOffboarding',
            record_id=run.pk,
            related_employee=run.employee,
            description=f"Exit interview recorded for {run.employee.full_name}",
            metadata={'rating': rating, 'completed_at': completed_at.isoformat()},
            scope=scope,
        )
        return run

    @staticmethod
    def active_runs_for(scope, employee, exclude_run_id=None):
        """Open (draft, scheduled or in progress) runs of one employee in scope."""
        employee_id = getattr(employee, 'pk', employee)
        queryset = EmployeeOffboarding.objects.for_scope(scope).filter(
            employee_id=employee_id, status__in=RunStatus.active()
        )
        if exclude_run_id is not None:
            queryset = queryset.exclude(pk=exclude_run_id)
        return queryset.order_by('last_day', 'id')

    @classmethod
    def get_progress(cls, scope, run_id) -> ProgressDTO:
        """
        Completion counts for all tasks and for required tasks only.
        Percentages are rounded half up; a run without required tasks is
        100% done on its required subset.
        """
        cls.get_run(scope, run_id)
        counts = EmployeeOffboardingTask.objects.for_scope(scope).filter(
            offboarding_id=run_id
        ).aggregate(
            total=Count('id'),
            completed=Count('id', filter=Q(status=TaskStatus.COMPLETED)),
            required_total=Count('id', filter=Q(required=True)),
            required_completed=Count('id', filter=Q(required=True, status=TaskStatus.COMPLETED)),
        )
        return ProgressDTO(
            total=counts['total'],
            completed=counts['completed'],
            percentage=_percentage(counts['completed'], counts['total']),
            required_total=counts['required_total'],
            required_completed=counts['required_completed'],
            required_percentage=_percentage(
                counts['required_completed'], counts['required_total'], empty=100
            ),
        )

    @staticmethod
    def list_runs(scope, filters: RunFilterDTO = None):
        """
        Runs in scope for the pipeline (open runs) or history (closed runs)
        view, narrowed by the optional filters.
        """
        filters = filters or RunFilterDTO()
        if filters.view not in VIEW_STATUSES:
            raise ValidationError({'view': f"Unknown view '{filters.view}'"})

        queryset = EmployeeOffboarding.objects.for_scope(scope).select_related(
            'employee', 'department', 'manager', 'template'
        )

        statuses = VIEW_STATUSES[filters.view]
        if statuses is not None:
            queryset = queryset.filter(status__in=statuses)
        if filters.status:
            queryset = queryset.filter(status=filters.status)
        if filters.exit_type:
            queryset = queryset.filter(exit_type=filters.exit_type)
        if filters.manager_id:
            queryset = queryset.filter(manager_id=filters.manager_id)
        if filters.department_id:
            queryset = queryset.filter(department_id=filters.department_id)
        if filters.employee_id:
            queryset = queryset.filter(employee_id=filters.employee_id)
        if filters.search:
            term = filters.search.strip()
            queryset = queryset.filter(
                Q(employee__first_name__icontains=term) |
                Q(employee__last_name__icontains=term) |
                Q(employee__employee_number__icontains=term) |
                Q(employee__work_email__icontains=term)
            )

        if filters.view == PIPELINE:
            return queryset.order_by('last_day', 'id')
        return queryset.order_by('-created_at', '-id')

    @staticmethod
    def get_stats(scope, today: date = None) -> OffboardingStatsDTO:
        """Dashboard figures: open runs, this month's closures, average completion time."""
        today = today or timezone.localdate()
        month_start = today.replace(day=1)
        runs = EmployeeOffboarding.objects.for_scope(scope)

        stats = OffboardingStatsDTO(
            active=runs.filter(status__in=RunStatus.active()).count(),
            completed_this_month=runs.filter(
                status=RunStatus.COMPLETED,
                completed_at__date__gte=month_start,
                completed_at__date__lte=today,
            ).count(),
            cancelled_this_month=runs.filter(
                status=RunStatus.CANCELLED,
                cancelled_at__date__gte=month_start,
                cancelled_at__date__lte=today,
            ).count(),
            by_status={
                row['status']: row['count']
                for row in runs.values('status').annotate(count=Count('id')).order_by()
            },
        )

        durations = [
            (completed_at - created_at).total_seconds() / 86400
            for created_at, completed_at in runs.filter(
                status=RunStatus.COMPLETED, completed_at__isnull=False
            ).values_list('created_at', 'completed_at')
        ]
        if durations:
            average = Decimal(str(sum(durations) / len(durations)))
            stats.average_completion_days = int(average.quantize(Decimal('1'), rounding=ROUND_HALF_UP))
        return stats
