"""
Task Service Tests
==================

Task completion (scope resolution, automated actions, run re-aggregation)
and the simple task transitions.
"""
from datetime import date
from unittest.mock import Mock, patch

from django.core.exceptions import ValidationError
from django.test import TestCase, TransactionTestCase
from django.utils import timezone

from core.audit.models import AuditEvent
from core.base.test_utils import create_employee
from core.identity.exceptions import ExternalServiceFailure
from core.identity.providers import SuspensionResult
from core.notifications.models import Notification
from core.scope.context import ScopeContext
from core.scope.exceptions import ScopeError
from HR.offboarding.dtos import ManualTaskCreateDTO, OffboardingCreateDTO, TaskUpdateDTO
from HR.offboarding.exceptions import NotFoundError
from HR.offboarding.models import (
    EmployeeOffboarding,
    EmployeeOffboardingTask,
    RunStatus,
    SystemCode,
    TaskStatus,
)
from HR.offboarding.services import OffboardingService, RunService, TaskService, close_run_if_done
from HR.offboarding.tests.helpers import OffboardingFixtureMixin, create_template
from HR.person.models import Employee

PROVIDER = 'HR.offboarding.services.automation.get_identity_provider'


def provider_returning(result=None, error=None):
    provider = Mock()
    if error is not None:
        provider.suspend.side_effect = error
    else:
        provider.suspend.return_value = result
    return Mock(return_value=provider)


class TaskCompletionTests(OffboardingFixtureMixin, TestCase):

    def setUp(self):
        self.create_people()
        self.scope = ScopeContext.for_entity(self.entity)
        self.template = create_template(
            self.entity,
            tasks=[
                {'title': 'Return laptop', 'assigned_role': 'manager', 'due_offset_days': 0},
                {'title': 'Exit interview', 'assigned_role': 'hr', 'due_offset_days': -2},
                {'title': 'Farewell card', 'assigned_role': 'hr', 'required': False},
            ],
        )
        self.run = OffboardingService.create(self.scope, OffboardingCreateDTO(
            employee_id=self.employee.pk,
            template_id=self.template.pk,
            last_day='2024-06-30',
            exit_type='voluntary',
        ))
        self.laptop, self.interview, self.card = list(self.run.tasks.order_by('order_index'))

    def test_completing_all_required_tasks_closes_run(self):
        """2 required + 1 optional: required done -> run completed, employee terminated"""
        first = TaskService.complete(self.scope, self.laptop.pk)
        self.assertTrue(first.task_completed)
        self.assertFalse(first.run_completed)

        second = TaskService.complete(self.scope, self.interview.pk)
        self.assertTrue(second.run_completed)

        self.run.refresh_from_db()
        self.assertEqual(self.run.status, RunStatus.COMPLETED)
        self.assertIsNotNone(self.run.completed_at)

        self.employee.refresh_from_db()
        self.assertEqual(self.employee.status, Employee.Status.TERMINATED)

        self.card.refresh_from_db()
        self.assertEqual(self.card.status, TaskStatus.NOT_STARTED)
        self.assertIsNone(self.card.completed_at)

        self.assertEqual(AuditEvent.objects.filter(event_type='offboarding_completed').count(), 1)

    def test_optional_tasks_never_close_run(self):
        result = TaskService.complete(self.scope, self.card.pk)

        self.assertFalse(result.run_completed)
        self.run.refresh_from_db()
        self.assertEqual(self.run.status, RunStatus.SCHEDULED)
        self.assertIsNone(self.run.completed_at)
        self.employee.refresh_from_db()
        self.assertEqual(self.employee.status, Employee.Status.OFFBOARDING)

    def test_task_gets_completion_timestamp_and_audit(self):
        TaskService.complete(self.scope, self.laptop.pk)

        self.laptop.refresh_from_db()
        self.assertEqual(self.laptop.status, TaskStatus.COMPLETED)
        self.assertIsNotNone(self.laptop.completed_at)

        audit = AuditEvent.objects.get(event_type='offboarding_task_completed')
        self.assertEqual(audit.record_id, str(self.laptop.pk))
        self.assertEqual(audit.description, 'Completed offboarding task "Return laptop" for Jane Doe')
        self.assertEqual(audit.entity_id, self.entity.pk)

    def test_completing_twice_is_idempotent(self):
        TaskService.complete(self.scope, self.laptop.pk)
        self.laptop.refresh_from_db()
        first_completed_at = self.laptop.completed_at

        result = TaskService.complete(self.scope, self.laptop.pk)

        self.assertTrue(result.task_completed)
        self.laptop.refresh_from_db()
        self.assertEqual(self.laptop.completed_at, first_completed_at)
        self.assertEqual(AuditEvent.objects.filter(event_type='offboarding_task_completed').count(), 1)

    def test_completion_without_caller_scope_uses_task_scope(self):
        result = TaskService.complete(None, self.laptop.pk)
        self.assertEqual(result.run.pk, self.run.pk)

    def test_unknown_task(self):
        with self.assertRaises(NotFoundError):
            TaskService.complete(self.scope, 999999)

    def test_task_from_other_scope_is_not_found(self):
        with self.assertRaises(NotFoundError):
            TaskService.complete(ScopeContext.for_entity(self.other_entity), self.laptop.pk)
        self.laptop.refresh_from_db()
        self.assertEqual(self.laptop.status, TaskStatus.NOT_STARTED)

    def test_task_without_entity_is_scope_error(self):
        EmployeeOffboardingTask.objects.filter(pk=self.laptop.pk).update(entity=None)
        with self.assertRaises(ScopeError):
            TaskService.complete(None, self.laptop.pk)

    def test_run_in_other_scope_is_not_found(self):
        EmployeeOffboardingTask.objects.filter(pk=self.laptop.pk).update(entity=self.other_entity)
        with self.assertRaises(NotFoundError):
            TaskService.complete(None, self.laptop.pk)

    def test_cancelled_run_rejects_completion(self):
        RunService.cancel(self.scope, self.run.pk)
        with self.assertRaises(ValidationError):
            TaskService.complete(self.scope, self.laptop.pk)

    def test_run_already_completed_is_not_closed_again(self):
        RunService.force_complete(self.scope, self.run.pk)
        result = TaskService.complete(self.scope, self.card.pk)

        self.assertTrue(result.run_completed)
        self.assertEqual(AuditEvent.objects.filter(event_type='offboarding_completed').count(), 1)

    def test_reaggregation_is_idempotent(self):
        EmployeeOffboardingTask.objects.filter(offboarding=self.run, required=True).update(
            status=TaskStatus.COMPLETED,
            completed_at=timezone.now(),
        )
        run, closed = close_run_if_done(self.scope, self.run.pk)
        self.assertTrue(closed)
        self.assertEqual(run.status, RunStatus.COMPLETED)

        run, closed = close_run_if_done(self.scope, self.run.pk)
        self.assertFalse(closed)
        self.assertEqual(run.status, RunStatus.COMPLETED)
        self.assertEqual(AuditEvent.objects.filter(event_type='offboarding_completed').count(), 1)

    # ==================== AUTOMATED ACTIONS ====================

    def add_suspend_task(self):
        return EmployeeOffboardingTask.objects.create(
            entity=self.entity,
            offboarding=self.run,
            title='Suspend Google account',
            assigned_role='it',
            system_code=SystemCode.GOOGLE_ACCOUNT_SUSPEND,
            order_index=10,
        )

    def test_suspension_success_is_audited_and_manager_notified(self):
        task = self.add_suspend_task()

        with patch(PROVIDER, provider_returning(SuspensionResult(ok=True))):
            result = TaskService.complete(self.scope, task.pk)

        self.assertTrue(result.system_result.ok)
        self.assertTrue(AuditEvent.objects.filter(event_type='google_account_suspended').exists())
        notification = Notification.objects.get(type='google_account_suspended')
        self.assertEqual(notification.recipient, self.manager.user)
        self.assertEqual(notification.link, f'/employee/{self.employee.pk}')

    def test_suspension_failure_does_not_block_completion(self):
        task = self.add_suspend_task()

        with patch(PROVIDER, provider_returning(SuspensionResult(ok=False, error='No Google account found'))):
            result = TaskService.complete(self.scope, task.pk)

        self.assertTrue(result.task_completed)
        self.assertFalse(result.system_result.ok)
        self.assertEqual(result.as_dict()['system_result'], {'ok': False, 'error': 'No Google account found'})
        task.refresh_from_db()
        self.assertEqual(task.status, TaskStatus.COMPLETED)
        error = AuditEvent.objects.get(event_type='google_account_error')
        self.assertIn('No Google account found', error.description)

    def test_transport_failure_is_captured(self):
        task = self.add_suspend_task()

        with patch(PROVIDER, provider_returning(error=ExternalServiceFailure('connection reset'))):
            result = TaskService.complete(self.scope, task.pk)

        self.assertFalse(result.system_result.ok)
        self.assertIn('connection reset', result.system_result.error)
        self.assertTrue(AuditEvent.objects.filter(event_type='google_account_error').exists())

    def test_unexpected_action_error_is_captured(self):
        task = self.add_suspend_task()

        with patch(PROVIDER, provider_returning(error=RuntimeError('bug'))):
            result = TaskService.complete(self.scope, task.pk)

        self.assertFalse(result.system_result.ok)
        task.refresh_from_db()
        self.assertEqual(task.status, TaskStatus.COMPLETED)
        self.assertTrue(AuditEvent.objects.filter(event_type='offboarding_automation_error').exists())

    def test_default_provider_reports_not_configured(self):
        task = self.add_suspend_task()
        result = TaskService.complete(self.scope, task.pk)
        self.assertEqual(result.system_result.error, 'No identity provider configured')

    def test_manual_task_has_no_system_result(self):
        result = TaskService.complete(self.scope, self.laptop.pk)
        self.assertIsNone(result.system_result)
        self.assertIsNone(result.as_dict()['system_result'])


class ConcurrentTaskCompletionTests(OffboardingFixtureMixin, TransactionTestCase):
    """Two callers completing the same task; the second read the task before the first committed."""

    def setUp(self):
        self.create_people()
        self.scope = ScopeContext.for_entity(self.entity)
        self.run = OffboardingService.create(self.scope, OffboardingCreateDTO(
            employee_id=self.employee.pk,
            last_day='2024-06-30',
        ))
        self.task = EmployeeOffboardingTask.objects.create(
            entity=self.entity,
            offboarding=self.run,
            title='Suspend Google account',
            assigned_role='it',
            system_code=SystemCode.GOOGLE_ACCOUNT_SUSPEND,
        )

    def test_simultaneous_completions_run_action_once(self):
        stale = EmployeeOffboardingTask.objects.get(pk=self.task.pk)
        factory = provider_returning(SuspensionResult(ok=True))

        with patch(PROVIDER, factory):
            first = TaskService.complete(self.scope, self.task.pk)
            stale_lookup = Mock(first=Mock(return_value=stale))
            with patch.object(EmployeeOffboardingTask.objects, 'filter', return_value=stale_lookup):
                second = TaskService.complete(self.scope, self.task.pk)

        self.assertTrue(first.system_result.ok)
        self.assertTrue(second.task_completed)
        self.assertIsNone(second.system_result)
        factory.return_value.suspend.assert_called_once()

        self.assertEqual(AuditEvent.objects.filter(event_type='offboarding_task_completed').count(), 1)
        self.assertEqual(AuditEvent.objects.filter(event_type='google_account_suspended').count(), 1)
        self.assertEqual(AuditEvent.objects.filter(event_type='offboarding_completed').count(), 1)

    def test_second_completion_keeps_first_timestamp(self):
        stale = EmployeeOffboardingTask.objects.get(pk=self.task.pk)

        with patch(PROVIDER, provider_returning(SuspensionResult(ok=True))):
            TaskService.complete(self.scope, self.task.pk)
            completed_at = EmployeeOffboardingTask.objects.get(pk=self.task.pk).completed_at
            with patch.object(
                EmployeeOffboardingTask.objects, 'filter', return_value=Mock(first=Mock(return_value=stale))
            ):
                TaskService.complete(self.scope, self.task.pk)

        self.task.refresh_from_db()
        self.assertEqual(self.task.status, TaskStatus.COMPLETED)
        self.assertEqual(self.task.completed_at, completed_at)


class TaskTransitionTests(OffboardingFixtureMixin, TestCase):

    def setUp(self):
        self.create_people()
        self.scope = ScopeContext.for_entity(self.entity)
        template = create_template(
            self.entity,
            tasks=[
                {'title': 'Return laptop', 'assigned_role': 'manager', 'due_offset_days': 0},
                {'title': 'Sign exit form', 'assigned_role': 'employee'},
                {'title': 'Revoke access', 'assigned_role': 'it'},
            ],
        )
        self.run = OffboardingService.create(self.scope, OffboardingCreateDTO(
            employee_id=self.employee.pk, template_id=template.pk, last_day='2024-06-30',
        ))
        self.task = self.run.tasks.order_by('order_index').first()

    def test_start(self):
        task = TaskService.start(self.scope, self.task.pk)
        self.assertEqual(task.status, TaskStatus.IN_PROGRESS)

        with self.assertRaises(ValidationError):
            TaskService.start(self.scope, self.task.pk)

    def test_block_requires_reason(self):
        with self.assertRaises(ValidationError):
            TaskService.block(self.scope, self.task.pk, '   ')

        task = TaskService.block(self.scope, self.task.pk, 'Laptop in repair')
        self.assertEqual(task.status, TaskStatus.BLOCKED)
        self.assertEqual(task.blocked_reason, 'Laptop in repair')

    def test_block_from_in_progress(self):
        TaskService.start(self.scope, self.task.pk)
        task = TaskService.block(self.scope, self.task.pk, 'Waiting on courier')
        self.assertEqual(task.status, TaskStatus.BLOCKED)

    def test_completed_task_cannot_be_blocked(self):
        TaskService.complete(self.scope, self.task.pk)
        with self.assertRaises(ValidationError):
            TaskService.block(self.scope, self.task.pk, 'Too late')

    def test_unblock_clears_reason(self):
        TaskService.block(self.scope, self.task.pk, 'Laptop in repair')
        task = TaskService.unblock(self.scope, self.task.pk)

        self.assertEqual(task.status, TaskStatus.NOT_STARTED)
        self.assertIsNone(task.blocked_reason)

        with self.assertRaises(ValidationError):
            TaskService.unblock(self.scope, self.task.pk)

    def test_completing_blocked_task_clears_reason(self):
        TaskService.block(self.scope, self.task.pk, 'Laptop in repair')
        TaskService.complete(self.scope, self.task.pk)
        self.task.refresh_from_db()
        self.assertEqual(self.task.status, TaskStatus.COMPLETED)
        self.assertIsNone(self.task.blocked_reason)

    def test_update_due_date_and_assignee(self):
        colleague = create_employee(self.entity, first_name='Sam', last_name='Smith')
        task = TaskService.update(self.scope, self.task.pk, TaskUpdateDTO(
            due_date=date(2024, 7, 2), assigned_employee_id=colleague.pk
        ))
        self.assertEqual(task.due_date, date(2024, 7, 2))
        self.assertEqual(task.assigned_employee, colleague)

        task = TaskService.update(self.scope, self.task.pk, TaskUpdateDTO(
            clear_due_date=True, clear_assigned_employee=True
        ))
        self.assertIsNone(task.due_date)
        self.assertIsNone(task.assigned_employee)

    def test_update_rejects_assignee_from_other_scope(self):
        outsider = create_employee(self.other_entity)
        with self.assertRaises(NotFoundError):
            TaskService.update(self.scope, self.task.pk, TaskUpdateDTO(assigned_employee_id=outsider.pk))

    def test_completed_task_cannot_be_edited(self):
        TaskService.complete(self.scope, self.task.pk)
        with self.assertRaises(ValidationError):
            TaskService.update(self.scope, self.task.pk, TaskUpdateDTO(due_date=date(2024, 7, 2)))

    def test_transitions_respect_scope(self):
        other_scope = ScopeContext.for_entity(self.other_entity)
        with self.assertRaises(NotFoundError):
            TaskService.start(other_scope, self.task.pk)

    # ==================== MANUAL TASKS ====================

    def test_add_manual_task(self):
        task = TaskService.add_task(self.scope, self.run.pk, ManualTaskCreateDTO(
            title='Archive mailbox', assigned_role='it', required=False
        ))
        self.assertEqual(task.entity_id, self.entity.pk)
        self.assertEqual(task.order_index, 3)
        self.assertIsNone(task.task_template)
        self.assertFalse(task.required)
        self.assertTrue(AuditEvent.objects.filter(event_type='offboarding_task_added').exists())

    def test_add_task_to_closed_run_fails(self):
        RunService.cancel(self.scope, self.run.pk)
        with self.assertRaises(ValidationError):
            TaskService.add_task(self.scope, self.run.pk, ManualTaskCreateDTO(title='Too late'))

    def test_add_task_requires_title(self):
        with self.assertRaises(ValidationError):
            TaskService.add_task(self.scope, self.run.pk, ManualTaskCreateDTO(title='  '))

    def test_add_required_task_keeps_run_open(self):
        for task in self.run.tasks.exclude(pk=self.task.pk):
            TaskService.complete(self.scope, task.pk)
        TaskService.add_task(self.scope, self.run.pk, ManualTaskCreateDTO(title='Extra sign-off'))
        TaskService.complete(self.scope, self.task.pk)

        self.run.refresh_from_db()
        self.assertEqual(self.run.status, RunStatus.SCHEDULED)

    def test_tasks_by_role(self):
        groups = TaskService.tasks_by_role(self.scope, self.run.pk)

        self.assertEqual(list(groups), ['employee', 'manager', 'hr', 'it', 'finance'])
        self.assertEqual([t.title for t in groups['manager']], ['Return laptop'])
        self.assertEqual([t.title for t in groups['employee']], ['Sign exit form'])
        self.assertEqual(groups['finance'], [])

    def test_tasks_by_role_unknown_run(self):
        with self.assertRaises(NotFoundError):
            TaskService.tasks_by_role(ScopeContext.for_entity(self.other_entity), self.run.pk)
