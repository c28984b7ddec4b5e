"""
Offboarding Service Tests
=========================

Run instantiation: scope and input validation, task materialization with
due dates, document generation, notifications, audit and degraded paths.
"""
from datetime import date, datetime
from unittest.mock import patch

from django.core.exceptions import ValidationError
from django.db import DatabaseError
from django.test import TestCase

from core.audit.models import AuditEvent
from core.base.test_utils import create_department, create_employee, create_user
from core.notifications.models import Notification
from core.scope.context import ScopeContext
from core.scope.exceptions import ScopeError
from HR.documents.models import Document, DocumentTemplate
from HR.offboarding.dtos import OffboardingCreateDTO
from HR.offboarding.exceptions import NotFoundError
from HR.offboarding.models import (
    EmployeeOffboarding,
    EmployeeOffboardingTask,
    OffboardingTaskTemplate,
    OffboardingTemplate,
    RunStatus,
    TaskStatus,
)
from HR.offboarding.services import OffboardingService, normalize_last_day
from HR.offboarding.tests.helpers import OffboardingFixtureMixin, create_template
from HR.person.models import Employee


class NormalizeLastDayTests(TestCase):

    def test_accepts_dates_and_iso_strings(self):
        self.assertEqual(normalize_last_day('2024-07-15'), date(2024, 7, 15))
        self.assertEqual(normalize_last_day(' 2024-07-15 '), date(2024, 7, 15))
        self.assertEqual(normalize_last_day('2024-07-15T09:30:00'), date(2024, 7, 15))
        self.assertEqual(normalize_last_day(date(2024, 7, 15)), date(2024, 7, 15))
        self.assertEqual(normalize_last_day(datetime(2024, 7, 15, 18, 0)), date(2024, 7, 15))

    def test_rejects_missing_or_invalid(self):
        for value in (None, '', 'next friday', '2024-02-30', 20240715):
            with self.subTest(value=value):
                with self.assertRaises(ValidationError):
                    normalize_last_day(value)


class OffboardingCreateTests(OffboardingFixtureMixin, TestCase):

    def setUp(self):
        self.create_people()
        self.hr_user = create_user()
        self.scope = ScopeContext.for_entity(self.entity, user=self.hr_user)
        self.template = create_template(
            self.entity,
            tasks=[
                {'title': 'Receive resignation letter', 'assigned_role': 'hr', 'due_offset_days': -14},
                {'title': 'Return laptop', 'assigned_role': 'manager', 'due_offset_days': 0},
                {'title': 'Sign exit form', 'assigned_role': 'employee', 'due_offset_days': -3},
                {'title': 'Final pay', 'assigned_role': 'finance', 'required': False},
            ],
        )

    def dto(self, **kwargs):
        data = {
            'employee_id': self.employee.pk,
            'template_id': self.template.pk,
            'last_day': '2024-08-10',
            'exit_type': 'voluntary',
            'reason': 'New opportunity',
        }
        data.update(kwargs)
        return OffboardingCreateDTO(**data)

    def test_without_template(self):
        """Run scheduled with no tasks; employee moves to offboarding"""
        run = OffboardingService.create(self.scope, self.dto(template_id=None, last_day='2024-07-15'))

        self.assertEqual(run.status, RunStatus.SCHEDULED)
        self.assertEqual(run.entity_id, self.entity.pk)
        self.assertEqual(run.tasks.count(), 0)
        self.assertIsNone(run.completed_at)

        self.employee.refresh_from_db()
        self.assertEqual(self.employee.status, Employee.Status.OFFBOARDING)
        self.assertEqual(self.employee.termination_date, date(2024, 7, 15))

    def test_creates_one_task_per_template_with_due_dates(self):
        run = OffboardingService.create(self.scope, self.dto())

        tasks = list(run.tasks.order_by('order_index'))
        self.assertEqual(len(tasks), 4)
        self.assertEqual(
            [t.due_date for t in tasks],
            [date(2024, 7, 27), date(2024, 8, 10), date(2024, 8, 7), None]
        )
        self.assertEqual([t.required for t in tasks], [True, True, True, False])
        self.assertTrue(all(t.entity_id == self.entity.pk for t in tasks))
        self.assertTrue(all(t.status == TaskStatus.NOT_STARTED for t in tasks))

    def test_run_snapshots_employee_context(self):
        department = create_department(self.entity, name='Sales')
        self.employee.department = department
        self.employee.save()

        run = OffboardingService.create(self.scope, self.dto())

        self.assertEqual(run.manager, self.manager)
        self.assertEqual(run.department, department)
        self.assertEqual(run.template, self.template)
        self.assertEqual(run.created_by, self.hr_user)
        self.assertEqual(run.last_day, date(2024, 8, 10))

    def test_unknown_role_is_coerced_to_hr(self):
        legal = create_template(self.entity, name='Legal', tasks=[{'title': 'Legal review', 'assigned_role': 'Legal'}])
        mixed_case = create_template(self.entity, name='Mixed case', tasks=[{'title': 'Access', 'assigned_role': ' IT '}])

        with self.assertLogs('HR.offboarding.models.run', level='WARNING') as logs:
            run = OffboardingService.create(self.scope, self.dto(template_id=legal.pk))
        self.assertEqual(run.tasks.get().assigned_role, 'hr')
        self.assertIn("'Legal'", logs.output[0])

        other = create_employee(self.entity)
        run = OffboardingService.create(self.scope, self.dto(employee_id=other.pk, template_id=mixed_case.pk))
        self.assertEqual(run.tasks.get().assigned_role, 'it')

    def test_missing_entity_fails_before_any_write(self):
        unscoped = Employee.objects.create(first_name='No', last_name='Scope')
        document_template = DocumentTemplate.objects.create(
            name='Termination letter', file_url='https://files.test/letter.pdf', file_name='letter.pdf'
        )
        self.template.termination_template = document_template
        self.template.save()

        with self.assertRaises(ScopeError):
            OffboardingService.create(None, self.dto(employee_id=unscoped.pk))

        self.assertEqual(EmployeeOffboarding.objects.count(), 0)
        self.assertEqual(EmployeeOffboardingTask.objects.count(), 0)
        self.assertEqual(Document.objects.count(), 0)
        unscoped.refresh_from_db()
        self.assertEqual(unscoped.status, Employee.Status.ACTIVE)

    def test_caller_scope_must_match_employee(self):
        with self.assertRaises(ScopeError):
            OffboardingService.create(ScopeContext.for_entity(self.other_entity), self.dto())
        self.assertEqual(EmployeeOffboarding.objects.count(), 0)

    def test_invalid_last_day_fails_before_any_write(self):
        with self.assertRaises(ValidationError):
            OffboardingService.create(self.scope, self.dto(last_day='31/02/2024'))
        self.assertEqual(EmployeeOffboarding.objects.count(), 0)
        self.employee.refresh_from_db()
        self.assertEqual(self.employee.status, Employee.Status.ACTIVE)

    def test_unknown_employee(self):
        with self.assertRaises(NotFoundError):
            OffboardingService.create(self.scope, self.dto(employee_id=999999))

    def test_missing_template_is_tolerated(self):
        run = OffboardingService.create(self.scope, self.dto(template_id=999999))
        self.assertIsNone(run.template)
        self.assertEqual(run.tasks.count(), 0)

    def test_template_of_other_entity_is_not_used(self):
        foreign = create_template(self.other_entity, tasks=[{'title': 'Secret'}])
        run = OffboardingService.create(self.scope, self.dto(template_id=foreign.pk))
        self.assertEqual(run.tasks.count(), 0)

    def test_template_metadata_failure_still_creates_tasks(self):
        """Only document generation depends on the template row itself"""
        letter = DocumentTemplate.objects.create(
            name='Termination letter', file_url='https://files.test/letter.pdf', file_name='letter.pdf'
        )
        self.template.termination_template = letter
        self.template.save()

        with patch.object(
            OffboardingTemplate.objects, 'shared_or_for_scope', side_effect=DatabaseError('metadata read failed')
        ):
            with self.assertLogs('HR.offboarding.services.offboarding_service', level='WARNING'):
                run = OffboardingService.create(self.scope, self.dto())

        self.assertIsNone(run.template)
        self.assertEqual(
            list(run.tasks.values_list('title', flat=True)),
            ['Receive resignation letter', 'Return laptop', 'Sign exit form', 'Final pay']
        )
        self.assertFalse(Document.objects.exists())

    def test_task_template_read_failure_is_recorded(self):
        with patch.object(
            OffboardingTaskTemplate.objects, 'filter', side_effect=DatabaseError('task read failed')
        ):
            with self.assertLogs('HR.offboarding.services.offboarding_service', level='ERROR'):
                run = OffboardingService.create(self.scope, self.dto())

        self.assertEqual(run.tasks.count(), 0)
        self.employee.refresh_from_db()
        self.assertEqual(self.employee.status, Employee.Status.OFFBOARDING)
        audit = AuditEvent.objects.get(event_type='offboarding_started')
        self.assertEqual(len(audit.metadata['tasks']['errors']), 1)

    def test_idempotency_key_returns_existing_run(self):
        first = OffboardingService.create(self.scope, self.dto(idempotency_key='req-1'))
        second = OffboardingService.create(self.scope, self.dto(idempotency_key='req-1'))

        self.assertEqual(first.pk, second.pk)
        self.assertEqual(EmployeeOffboarding.objects.count(), 1)
        self.assertEqual(EmployeeOffboardingTask.objects.count(), 4)
        self.assertEqual(AuditEvent.objects.filter(event_type='offboarding_started').count(), 1)

    def test_idempotency_key_of_other_employee_is_rejected(self):
        first = OffboardingService.create(self.scope, self.dto(idempotency_key='req-1'))
        colleague = create_employee(self.entity, first_name='Sam', last_name='Colleague')

        with self.assertRaises(ValidationError) as ctx:
            OffboardingService.create(self.scope, self.dto(employee_id=colleague.pk, idempotency_key='req-1'))

        self.assertIn('idempotency_key', ctx.exception.message_dict)
        self.assertEqual(EmployeeOffboarding.objects.get().pk, first.pk)
        colleague.refresh_from_db()
        self.assertEqual(colleague.status, Employee.Status.ACTIVE)

    def test_second_run_without_key_is_allowed(self):
        OffboardingService.create(self.scope, self.dto())
        OffboardingService.create(self.scope, self.dto())
        self.assertEqual(EmployeeOffboarding.objects.filter(employee=self.employee).count(), 2)

    # ==================== SIDE EFFECTS ====================

    def test_generates_documents_from_templates(self):
        letter = DocumentTemplate.objects.create(
            name='Termination letter', file_url='https://files.test/letter.pdf',
            file_name='letter.pdf', file_size_bytes=1200, file_mime_type='application/pdf'
        )
        exit_form = DocumentTemplate.objects.create(
            entity=self.entity, name='Exit form', file_url='https://files.test/exit.pdf', file_name='exit.pdf'
        )
        self.template.termination_template = letter
        self.template.save()
        self.template.exit_document_templates.add(exit_form, letter)

        run = OffboardingService.create(self.scope, self.dto())

        documents = Document.objects.filter(owner_employee=self.employee).order_by('id')
        self.assertEqual(documents.count(), 2)
        first = documents[0]
        self.assertEqual(first.file_name, 'letter.pdf')
        self.assertEqual(first.file_size, 1200)
        self.assertEqual(first.category, 'Offboarding')
        self.assertEqual(first.visibility, 'admin')
        self.assertEqual(first.notes, 'Generated from template: Termination letter')
        self.assertEqual(first.entity_id, self.entity.pk)
        self.assertEqual(first.related_offboarding_id, run.pk)
        self.assertEqual(first.uploaded_by, self.hr_user)

    def test_document_failure_does_not_block_tasks(self):
        letter = DocumentTemplate.objects.create(
            name='Termination letter', file_url='https://files.test/letter.pdf', file_name='letter.pdf'
        )
        self.template.termination_template = letter
        self.template.save()

        with patch(
            'HR.offboarding.services.offboarding_service.DocumentService.create_from_template',
            side_effect=DatabaseError('storage offline'),
        ):
            run = OffboardingService.create(self.scope, self.dto())

        self.assertEqual(run.tasks.count(), 4)
        audit = AuditEvent.objects.get(event_type='offboarding_started')
        self.assertEqual(audit.metadata['documents']['failed'], 1)

    def test_bulk_create_failure_falls_back_to_single_creates(self):
        with patch.object(
            EmployeeOffboardingTask.objects, 'bulk_create', side_effect=DatabaseError('bulk not supported')
        ):
            run = OffboardingService.create(self.scope, self.dto())

        self.assertEqual(run.tasks.count(), 4)

    def test_partial_task_failure_keeps_successes(self):
        original_save = EmployeeOffboardingTask.save

        def flaky_save(task, *args, **kwargs):
            if task.title == 'Return laptop':
                raise DatabaseError('insert failed')
            return original_save(task, *args, **kwargs)

        with patch.object(EmployeeOffboardingTask.objects, 'bulk_create', side_effect=DatabaseError('bulk failed')), \
                patch.object(EmployeeOffboardingTask, 'save', autospec=True, side_effect=flaky_save):
            run = OffboardingService.create(self.scope, self.dto())

        self.assertEqual(
            sorted(run.tasks.values_list('title', flat=True)),
            ['Final pay', 'Receive resignation letter', 'Sign exit form']
        )
        self.employee.refresh_from_db()
        self.assertEqual(self.employee.status, Employee.Status.OFFBOARDING)

        metadata = AuditEvent.objects.get(event_type='offboarding_started').metadata
        self.assertEqual(metadata['tasks']['succeeded'], 3)
        self.assertEqual(metadata['tasks']['failed'], 1)

    def test_task_owner_and_manager_notifications(self):
        run = OffboardingService.create(self.scope, self.dto())

        assigned = Notification.objects.filter(type='offboarding_task_assigned')
        self.assertEqual(assigned.count(), 2)
        self.assertEqual(
            set(assigned.values_list('recipient_id', flat=True)),
            {self.employee.user_id, self.manager.user_id}
        )
        employee_note = assigned.get(recipient=self.employee.user)
        self.assertEqual(employee_note.message, 'Jane Doe: Sign exit form')
        self.assertEqual(employee_note.link, f'/offboarding/manage/{run.pk}')
        self.assertEqual(employee_note.related_run_id, run.pk)

        started = Notification.objects.get(type='offboarding_started')
        self.assertEqual(started.recipient, self.manager.user)
        self.assertEqual(started.message, 'Jane Doe has begun the offboarding process.')

    def test_no_manager_no_manager_notifications(self):
        loner = create_employee(self.entity, first_name='Solo', last_name='Worker')
        OffboardingService.create(self.scope, self.dto(employee_id=loner.pk))

        self.assertFalse(Notification.objects.filter(type='offboarding_started').exists())
        self.assertEqual(Notification.objects.filter(type='offboarding_task_assigned').count(), 1)

    def test_notification_failure_is_not_fatal(self):
        with patch('core.notifications.outbox.NotificationService.send', side_effect=RuntimeError('queue down')):
            run = OffboardingService.create(self.scope, self.dto())

        self.assertEqual(run.status, RunStatus.SCHEDULED)
        self.assertEqual(run.tasks.count(), 4)
        self.assertEqual(Notification.objects.count(), 0)

    def test_audit_entry(self):
        run = OffboardingService.create(self.scope, self.dto())

        audit = AuditEvent.objects.get(event_type='offboarding_started')
        self.assertEqual(audit.record_type, 'EmployeeOffboarding')
        self.assertEqual(audit.record_id, str(run.pk))
        self.assertEqual(audit.related_employee, self.employee)
        self.assertEqual(audit.actor, self.hr_user)
        self.assertEqual(audit.entity_id, self.entity.pk)
        self.assertEqual(audit.description, 'Started offboarding for Jane Doe (voluntary)')
        self.assertEqual(audit.metadata['tasks']['succeeded'], 4)

    def test_audit_failure_is_not_fatal(self):
        with patch('core.audit.services.AuditEvent.objects.create', side_effect=DatabaseError('audit db down')):
            run = OffboardingService.create(self.scope, self.dto())

        self.assertEqual(run.tasks.count(), 4)
        self.assertFalse(AuditEvent.objects.exists())

    def test_employee_update_failure_propagates(self):
        with patch.object(Employee, 'mark_offboarding', side_effect=DatabaseError('locked')):
            with self.assertRaises(DatabaseError):
                OffboardingService.create(self.scope, self.dto())
