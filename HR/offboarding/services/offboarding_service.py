"""
Offboarding Service - run instantiation

Creates an offboarding run for an employee, materializes its tasks and
documents from a template, moves the employee into offboarding and fires
the follow-up side effects.

Each step commits on its own. Only the run insert and the employee update
are fatal; documents, task instances, notifications and the audit entry
degrade and are logged.
"""
import logging
from datetime import date, datetime, timedelta

from dateutil import parser as date_parser
from django.core.exceptions import ValidationError
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Q

from core.audit.services import AuditService
from core.notifications.outbox import SideEffectOutbox
from core.scope.context import ScopeContext
from core.scope.exceptions import ScopeError
from HR.documents.services import DocumentService
from HR.offboarding.dtos import OffboardingCreateDTO
from HR.offboarding.exceptions import NotFoundError, PartialFailure
from HR.offboarding.models import (
    EmployeeOffboarding,
    EmployeeOffboardingTask,
    OffboardingTaskTemplate,
    OffboardingTemplate,
    Role,
    RunStatus,
    TaskStatus,
)
from HR.person.models import Employee

logger = logging.getLogger(__name__)

DEFAULT_TASK_TITLE = 'Untitled task'


def normalize_last_day(value) -> date:
    """
    Coerce a last day to a calendar date.

    Accepts date and datetime objects, 'YYYY-MM-DD' strings and ISO 8601
    datetime strings.

    Raises:
        ValidationError: If the value is missing or not a valid date
    """
    if value in (None, ''):
        raise ValidationError({'last_day': "Last day is required (YYYY-MM-DD)"})
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date_parser.isoparse(value.strip()).date()
        except (ValueError, OverflowError):
            pass
    raise ValidationError({'last_day': f"'{value}' is not a valid date (YYYY-MM-DD)"})


def run_link(run):
    return f"/offboarding/manage/{run.pk}"


class OffboardingService:
    """Service layer for starting offboarding runs"""

    @classmethod
    def create(cls, scope, dto: OffboardingCreateDTO) -> EmployeeOffboarding:
        """
        Start offboarding for an employee.

        Args:
            scope: ScopeContext of the caller, or None to take the scope from
                the employee. Its user is recorded as creator and audit actor.
            dto: OffboardingCreateDTO

        Returns:
            EmployeeOffboarding: The new run, or the existing run when the
            idempotency key was already used in this scope

        Raises:
            NotFoundError: If the employee does not exist
            ScopeError: If the employee has no entity or belongs to another scope
            ValidationError: If the last day is missing or invalid
        """
        employee = Employee.objects.select_related('user', 'manager__user').filter(
            pk=dto.employee_id
        ).first()
        if employee is None:
            raise NotFoundError(f"Employee {dto.employee_id} not found")

        user = scope.user if scope is not None else None
        employee_scope = ScopeContext.for_employee(employee, user=user)
        if scope is not None and scope.entity_id != employee_scope.entity_id:
            raise ScopeError(
                f"Employee {employee.pk} belongs to entity {employee.entity_id}, not {scope.entity_id}"
            )
        scope = employee_scope

        last_day = normalize_last_day(dto.last_day)
        exit_type = (dto.exit_type or '').strip()

        if dto.idempotency_key:
            existing = EmployeeOffboarding.objects.for_scope(scope).filter(
                idempotency_key=dto.idempotency_key
            ).first()
            if existing is not None:
                cls._check_key_owner(existing, employee, dto.idempotency_key)
                logger.info(
                    f"Offboarding request {dto.idempotency_key!r} already created run {existing.pk}; returning it"
                )
                return existing

        template = cls._load_template(scope, dto.template_id) if dto.template_id else None

        try:
            with transaction.atomic():
                run = EmployeeOffboarding.objects.create(
                    entity_id=scope.entity_id,
                    employee=employee,
                    template=template,
                    department_id=employee.department_id,
                    manager_id=employee.manager_id,
                    last_day=last_day,
                    exit_type=exit_type,
                    reason=dto.reason or '',
                    status=RunStatus.SCHEDULED,
                    idempotency_key=dto.idempotency_key or None,
                    created_by=user,
                )
        except IntegrityError:
            if not dto.idempotency_key:
                raise
            # Lost a race with a concurrent request carrying the same key
            existing = EmployeeOffboarding.objects.for_scope(scope).get(idempotency_key=dto.idempotency_key)
            cls._check_key_owner(existing, employee, dto.idempotency_key)
            return existing

        logger.info(
            f"Created offboarding run {run.pk} for employee {employee.pk} "
            f"(entity {scope.entity_id}, last day {last_day.isoformat()})"
        )

        outbox = SideEffectOutbox()
        documents = PartialFailure(step='documents')
        tasks = PartialFailure(step='tasks')

        if dto.template_id:
            task_templates = cls._load_task_templates(scope, dto.template_id)

            if template is not None:
                documents = cls._generate_documents(scope, template, employee, run)

            instances = [
                cls._build_task(scope, run, task_template, last_day)
                for task_template in task_templates or []
            ]
            tasks = cls._materialize_tasks(run, instances)
            if task_templates is None:
                tasks.record_error(f"Task templates of template {dto.template_id} could not be loaded")

            for instance in instances:
                owner = cls._task_owner(employee, instance.assigned_role)
                if owner is not None:
                    outbox.add_notification(
                        recipient=owner.user,
                        type='offboarding_task_assigned',
                        title='New offboarding task',
                        message=f"{employee.full_name}: {instance.title}",
                        link=run_link(run),
                        related_employee=employee,
                        related_run_id=run.pk,
                    )

        employee.mark_offboarding(last_day)

        AuditService.log_best_effort(
            event_type='offboarding_started',
            record_type='EmployeeOffboarding',
            record_id=run.pk,
            related_employee=employee,
            description=f"Started offboarding for {employee.full_name} ({exit_type})",
            metadata={
                'template_id': template.pk if template is not None else None,
                'last_day': last_day.isoformat(),
                'tasks': tasks.as_dict(),
                'documents': documents.as_dict(),
            },
            scope=scope,
        )

        if employee.manager is not None:
            outbox.add_notification(
                recipient=employee.manager.user,
                type='offboarding_started',
                title='Offboarding started',
                message=f"{employee.full_name} has begun the offboarding process.",
                link=run_link(run),
                related_employee=employee,
                related_run_id=run.pk,
            )

        report = outbox.dispatch()
        if not report.ok:
            logger.warning(
                f"Offboarding run {run.pk}: {len(report.failed)} notification(s) could not be delivered"
            )

        return run

    # ==================== STEPS ====================

    @staticmethod
    def _check_key_owner(existing, employee, key):
        if existing.employee_id != employee.pk:
            raise ValidationError({
                'idempotency_key': f"Key {key!r} was already used for another employee's offboarding"
            })

    @staticmethod
    def _load_template(scope, template_id):
        """Template visible to the scope; a missing template is tolerated."""
        try:
            template = OffboardingTemplate.objects.shared_or_for_scope(scope).filter(pk=template_id).first()
        except DatabaseError as e:
            logger.warning(f"Could not load offboarding template {template_id}: {e}")
            return None
        if template is None:
            logger.warning(
                f"Offboarding template {template_id} not found in entity {scope.entity_id}; "
                f"starting run without tasks or documents"
            )
        return template

    @staticmethod
    def _load_task_templates(scope, template_id):
        """
        Task templates of a template visible to the scope, in checklist order.
        Read independently of the template row itself; returns None if the
        read fails.
        """
        try:
            return list(
                OffboardingTaskTemplate.objects.filter(template_id=template_id).filter(
                    Q(template__entity__isnull=True) | Q(template__entity_id=scope.entity_id)
                ).order_by('order_index', 'id')
            )
        except DatabaseError as e:
            logger.error(f"Could not load task templates of offboarding template {template_id}: {e}")
            return None

    @staticmethod
    def _generate_documents(scope, template, employee, run) -> PartialFailure:
        outcome = PartialFailure(step='documents')
        try:
            document_templates = template.document_templates()
        except DatabaseError as e:
            logger.warning(f"Could not load document templates for offboarding template {template.pk}: {e}")
            outcome.record_error(e)
            return outcome

        for document_template in document_templates:
            outcome.attempted += 1
            try:
                DocumentService.create_from_template(
                    document_template,
                    employee,
                    scope,
                    category=DocumentService.OFFBOARDING_CATEGORY,
                    offboarding=run,
                )
                outcome.succeeded += 1
            except Exception as e:
                outcome.record_error(e)
                logger.error(
                    f"Failed to generate document from template {document_template.pk} "
                    f"for offboarding run {run.pk}: {e}"
                )
        if outcome.degraded:
            logger.warning(
                f"Offboarding run {run.pk}: {outcome.succeeded}/{outcome.attempted} documents generated"
            )
        return outcome

    @staticmethod
    def _build_task(scope, run, task_template, last_day) -> EmployeeOffboardingTask:
        due_date = None
        if task_template.due_offset_days is not None:
            due_date = last_day + timedelta(days=task_template.due_offset_days)

        return EmployeeOffboardingTask(
            entity_id=scope.entity_id,
            offboarding=run,
            task_template=task_template,
            title=task_template.title or DEFAULT_TASK_TITLE,
            description=task_template.description or '',
            category=task_template.category or '',
            assigned_role=Role.coerce(task_template.assigned_role, context=f"task template {task_template.pk}"),
            assigned_employee=None,
            due_date=due_date,
            required=task_template.required is not False,
            link_url=task_template.link_url or '',
            system_code=task_template.system_code or '',
            order_index=task_template.order_index or 0,
            status=TaskStatus.NOT_STARTED,
        )

    @staticmethod
    def _materialize_tasks(run, instances) -> PartialFailure:
        """
        Insert all task instances in one statement, falling back to one
        insert per task. Tasks created before a failure are kept.
        """
        outcome = PartialFailure(step='tasks', attempted=len(instances))
        if not instances:
            return outcome

        try:
            with transaction.atomic():
                EmployeeOffboardingTask.objects.bulk_create(instances)
            outcome.succeeded = len(instances)
            logger.info(f"Offboarding run {run.pk}: bulk created {len(instances)} tasks")
            return outcome
        except DatabaseError as e:
            logger.error(f"Offboarding run {run.pk}: bulk task create failed, creating one by one: {e}")

        for instance in instances:
            instance.pk = None
            try:
                with transaction.atomic():
                    instance.save(force_insert=True)
                outcome.succeeded += 1
            except DatabaseError as e:
                outcome.record_error(e)
                logger.error(f"Offboarding run {run.pk}: failed to create task {instance.title!r}: {e}")

        logger.info(
            f"Offboarding run {run.pk}: individual creates: {outcome.succeeded} succeeded, {outcome.failed} failed"
        )
        return outcome

    @staticmethod
    def _task_owner(employee, role):
        if role == Role.EMPLOYEE:
            return employee
        if role == Role.MANAGER:
            return employee.manager
        return None
