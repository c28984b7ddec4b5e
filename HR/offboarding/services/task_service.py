"""
Task Service - task lifecycle

Completion runs the task's automated action (if any), marks the task
completed and then re-evaluates the whole run: a run closes exactly when
every required task is completed. The re-evaluation always recomputes from
the full task set under a row lock on the run, so concurrent completions of
sibling tasks converge on the same run status.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Max
from django.utils import timezone

from core.audit.services import AuditService
from core.notifications.outbox import SideEffectOutbox
from core.scope.context import ScopeContext
from core.scope.exceptions import ScopeError
from HR.offboarding.dtos import ManualTaskCreateDTO, TaskUpdateDTO
from HR.offboarding.exceptions import NotFoundError
from HR.offboarding.models import (
    EmployeeOffboarding,
    EmployeeOffboardingTask,
    Role,
    RunStatus,
    TaskStatus,
)
from HR.offboarding.services.automation import run_system_action
from HR.person.models import Employee

logger = logging.getLogger(__name__)


@dataclass
class TaskCompletionResult:
    task: EmployeeOffboardingTask
    run: EmployeeOffboarding
    task_completed: bool
    run_completed: bool
    system_result: Optional[Any] = None

    def as_dict(self) -> Dict[str, Any]:
        return {
            'task_completed': self.task_completed,
            'run_completed': self.run_completed,
            'system_result': self.system_result.as_dict() if self.system_result is not None else None,
        }


def close_run_if_done(scope, run_id, employee=None):
    """
    Recompute run completion from the full task set.

    Locks the run row, reloads every task of the run and, when all required
    tasks are completed and the run is not terminal, closes the run and
    terminates the employee.

    Returns:
        (run, closed): The locked run and whether this call closed it
    """
    with transaction.atomic():
        run = EmployeeOffboarding.objects.select_for_update().for_scope(scope).get(pk=run_id)
        statuses = list(
            EmployeeOffboardingTask.objects.for_scope(scope).filter(
                offboarding_id=run.pk, required=True
            ).values_list('status', flat=True)
        )
        all_required_done = all(s == TaskStatus.COMPLETED for s in statuses)

        if not all_required_done or run.is_terminal:
            return run, False

        run.status = RunStatus.COMPLETED
        run.completed_at = timezone.now()
        run.save(update_fields=['status', 'completed_at'])

        if employee is None:
            employee = Employee.objects.filter(pk=run.employee_id).first()
        if employee is not None:
            employee.mark_terminated()

    logger.info(f"Offboarding run {run.pk} completed; employee {run.employee_id} terminated")
    AuditService.log_best_effort(
        event_type='offboarding_completed',
        record_type='EmployeeOffboarding',
        record_id=run.pk,
        related_employee=employee,
        description=f"Offboarding completed for {employee.full_name if employee else ''}".rstrip(),
        metadata={'required_tasks': len(statuses)},
        scope=scope,
    )
    return run, True


class TaskService:
    """Service layer for offboarding task instances"""

    @classmethod
    def complete(cls, scope, task_id, user=None) -> TaskCompletionResult:
        """
        Complete a task and close its run if it was the last required one.

        The scope comes from the task record itself. A caller scope, when
        given, only restricts which tasks are visible.

        Args:
            scope: ScopeContext of the caller, or None
            task_id: EmployeeOffboardingTask id
            user: Acting user (defaults to scope.user)

        Returns:
            TaskCompletionResult

        Raises:
            NotFoundError: If the task or its run cannot be found in scope
            ScopeError: If the task record carries no entity
            ValidationError: If the run has been cancelled
        """
        task = EmployeeOffboardingTask.objects.filter(pk=task_id).first()
        if task is None:
            raise NotFoundError(f"Offboarding task {task_id} not found")
        if not task.entity_id:
            raise ScopeError(f"Offboarding task {task_id} is missing entity_id (scope)")
        if scope is not None and not scope.owns(task):
            raise NotFoundError(f"Offboarding task {task_id} not found")

        if user is None and scope is not None:
            user = scope.user
        task_scope = ScopeContext(entity_id=task.entity_id, user=user)

        run = EmployeeOffboarding.objects.for_scope(task_scope).select_related('manager__user').filter(
            pk=task.offboarding_id
        ).first()
        if run is None:
            raise NotFoundError(f"Offboarding run {task.offboarding_id} not found for task {task_id}")
        if run.status == RunStatus.CANCELLED:
            raise ValidationError(f"Offboarding run {run.pk} is cancelled; its tasks can no longer be completed")

        employee = Employee.objects.filter(pk=run.employee_id).first()
        if employee is None:
            logger.warning(f"Employee {run.employee_id} for offboarding run {run.pk} not found")

        outbox = SideEffectOutbox()
        system_result = None

        # Only the caller that flips the locked row runs the action and audits
        with transaction.atomic():
            task = EmployeeOffboardingTask.objects.select_for_update().get(pk=task.pk)
            completed_now = task.status != TaskStatus.COMPLETED
            if completed_now:
                system_result = run_system_action(task_scope, task, employee, run, outbox)
                if system_result is not None and not system_result.ok:
                    logger.warning(
                        f"Automated action {task.system_code} for task {task.pk} failed: {system_result.error}; "
                        f"completing task anyway"
                    )

                task.status = TaskStatus.COMPLETED
                task.completed_at = timezone.now()
                task.blocked_reason = None
                task.save(update_fields=['status', 'completed_at', 'blocked_reason'])

        if completed_now:
            AuditService.log_best_effort(
                event_type='offboarding_task_completed',
                record_type='EmployeeOffboardingTask',
                record_id=task.pk,
                related_employee=employee,
                description=(
                    f'Completed offboarding task "{task.title}" for '
                    f'{employee.full_name if employee else ""}'
                ).rstrip(),
                metadata={
                    'offboarding_id': run.pk,
                    'system_code': task.system_code or None,
                    'system_result': system_result.as_dict() if system_result is not None else None,
                },
                scope=task_scope,
            )
        else:
            logger.info(f"Task {task.pk} already completed; re-checking run {run.pk}")

        run, _closed = close_run_if_done(task_scope, run.pk, employee=employee)

        outbox.dispatch()

        return TaskCompletionResult(
            task=task,
            run=run,
            task_completed=True,
            run_completed=run.status == RunStatus.COMPLETED,
            system_result=system_result,
        )

    # ==================== SIMPLE TRANSITIONS ====================

    @staticmethod
    def get_task(scope, task_id) -> EmployeeOffboardingTask:
        task = EmployeeOffboardingTask.objects.for_scope(scope).filter(pk=task_id).first()
        if task is None:
            raise NotFoundError(f"Offboarding task {task_id} not found")
        return task

    @classmethod
    def start(cls, scope, task_id) -> EmployeeOffboardingTask:
        """not_started -> in_progress"""
        task = cls.get_task(scope, task_id)
        if task.status != TaskStatus.NOT_STARTED:
            raise ValidationError(f"Only a not started task can be started (task is {task.status})")
        task.status = TaskStatus.IN_PROGRESS
        task.save(update_fields=['status'])
        return task

    @classmethod
    def block(cls, scope, task_id, reason) -> EmployeeOffboardingTask:
        """Any non-terminal state -> blocked, with a reason."""
        reason = (reason or '').strip()
        if not reason:
            raise ValidationError({'blocked_reason': "A reason is required to block a task"})
        task = cls.get_task(scope, task_id)
        if task.status == TaskStatus.COMPLETED:
            raise ValidationError("A completed task cannot be blocked")
        task.status = TaskStatus.BLOCKED
        task.blocked_reason = reason
        task.save(update_fields=['status', 'blocked_reason'])
        return task

    @classmethod
    def unblock(cls, scope, task_id) -> EmployeeOffboardingTask:
        """blocked -> not_started, reason cleared"""
        task = cls.get_task(scope, task_id)
        if task.status != TaskStatus.BLOCKED:
            raise ValidationError(f"Only a blocked task can be unblocked (task is {task.status})")
        task.status = TaskStatus.NOT_STARTED
        task.blocked_reason = None
        task.save(update_fields=['status', 'blocked_reason'])
        return task

    @classmethod
    def update(cls, scope, task_id, dto: TaskUpdateDTO) -> EmployeeOffboardingTask:
        """Change due date and/or assignee of a task that is not completed."""
        task = cls.get_task(scope, task_id)
        if task.status == TaskStatus.COMPLETED:
            raise ValidationError("A completed task cannot be edited")

        fields = []
        if dto.clear_due_date:
            task.due_date = None
            fields.append('due_date')
        elif dto.due_date is not None:
            task.due_date = dto.due_date
            fields.append('due_date')

        if dto.clear_assigned_employee:
            task.assigned_employee = None
            fields.append('assigned_employee')
        elif dto.assigned_employee_id is not None:
            assignee = Employee.objects.for_scope(scope).filter(pk=dto.assigned_employee_id).first()
            if assignee is None:
                raise NotFoundError(f"Employee {dto.assigned_employee_id} not found")
            task.assigned_employee = assignee
            fields.append('assigned_employee')

        if fields:
            task.save(update_fields=fields)
        return task

    # ==================== MANUAL TASKS ====================

    @staticmethod
    def add_task(scope, run_id, dto: ManualTaskCreateDTO) -> EmployeeOffboardingTask:
        """
        Add a task that does not come from a template to an open run.
        The task is appended after the run's existing tasks.
        """
        title = (dto.title or '').strip()
        if not title:
            raise ValidationError({'title': "Task title is required"})

        run = EmployeeOffboarding.objects.for_scope(scope).filter(pk=run_id).first()
        if run is None:
            raise NotFoundError(f"Offboarding run {run_id} not found")
        if run.is_terminal:
            raise ValidationError(f"Cannot add tasks to a {run.status} offboarding run")

        assignee = None
        if dto.assigned_employee_id is not None:
            assignee = Employee.objects.for_scope(scope).filter(pk=dto.assigned_employee_id).first()
            if assignee is None:
                raise NotFoundError(f"Employee {dto.assigned_employee_id} not found")

        last_index = run.tasks.aggregate(last=Max('order_index'))['last']
        task = EmployeeOffboardingTask.objects.create(
            entity_id=scope.entity_id,
            offboarding=run,
            title=title,
            description=dto.description or '',
            category=dto.category or '',
            assigned_role=Role.coerce(dto.assigned_role, context=f"manual task on run {run.pk}"),
            assigned_employee=assignee,
            due_date=dto.due_date,
            required=dto.required,
            link_url=dto.link_url or '',
            order_index=(last_index if last_index is not None else -1) + 1,
        )

        AuditService.log_best_effort(
            event_type='offboarding_task_added',
            record_type='EmployeeOffboardingTask',
            record_id=task.pk,
            related_employee=run.employee,
            description=f'Added offboarding task "{task.title}"',
            metadata={'offboarding_id': run.pk, 'required': task.required},
            scope=scope,
        )
        return task

    @staticmethod
    def tasks_by_role(scope, run_id) -> Dict[str, List[EmployeeOffboardingTask]]:
        """Tasks of a run grouped by assigned role, each group in checklist order."""
        if not EmployeeOffboarding.objects.for_scope(scope).filter(pk=run_id).exists():
            raise NotFoundError(f"Offboarding run {run_id} not found")

        groups = {role.value: [] for role in Role}
        tasks = EmployeeOffboardingTask.objects.for_scope(scope).filter(
            offboarding_id=run_id
        ).order_by('order_index', 'id')
        for task in tasks:
            groups.setdefault(task.assigned_role, []).append(task)
        return groups
