import logging

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from core.base.models import ScopedMixin
from core.base.managers import ScopedManager

logger = logging.getLogger(__name__)


class RunStatus(models.TextChoices):
    DRAFT = 'draft', 'Draft'
    SCHEDULED = 'scheduled', 'Scheduled'
    IN_PROGRESS = 'in_progress', 'In Progress'
    COMPLETED = 'completed', 'Completed'
    CANCELLED = 'cancelled', 'Cancelled'

    @classmethod
    def terminal(cls):
        return {cls.COMPLETED, cls.CANCELLED}

    @classmethod
    def active(cls):
        return [cls.DRAFT, cls.SCHEDULED, cls.IN_PROGRESS]


class TaskStatus(models.TextChoices):
    NOT_STARTED = 'not_started', 'Not Started'
    IN_PROGRESS = 'in_progress', 'In Progress'
    BLOCKED = 'blocked', 'Blocked'
    COMPLETED = 'completed', 'Completed'


class Role(models.TextChoices):
    EMPLOYEE = 'employee', 'Employee'
    MANAGER = 'manager', 'Manager'
    HR = 'hr', 'HR'
    IT = 'it', 'IT'
    FINANCE = 'finance', 'Finance'

    @classmethod
    def coerce(cls, value, context=''):
        """
        Map a raw role string onto a Role. Unknown or empty values become HR
        and the coercion is logged.
        """
        normalized = (value or '').strip().lower()
        if normalized in cls.values:
            return cls(normalized)
        logger.warning(f"Unknown task role {value!r}{' (' + context + ')' if context else ''}; assigning to hr")
        return cls.HR


class SystemCode(models.TextChoices):
    GOOGLE_ACCOUNT_SUSPEND = 'GOOGLE_ACCOUNT_SUSPEND', 'Suspend Google Workspace account'


class EmployeeOffboarding(ScopedMixin, models.Model):
    """
    An offboarding run: one instantiated process for one employee.

    Status lifecycle:
        draft -> scheduled -> in_progress -> completed
        draft | scheduled | in_progress -> cancelled

    completed_at is set if and only if status is completed.
    """
    employee = models.ForeignKey(
        'person.Employee',
        on_delete=models.PROTECT,
        related_name='offboardings'
    )
    template = models.ForeignKey(
        'offboarding.OffboardingTemplate',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='runs'
    )
    department = models.ForeignKey(
        'work_structures.Department',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        help_text="Employee's department when the run started"
    )
    manager = models.ForeignKey(
        'person.Employee',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='managed_offboardings'
    )
    last_day = models.DateField()
    exit_type = models.CharField(max_length=50, blank=True)
    reason = models.TextField(blank=True)
    status = models.CharField(
        max_length=20,
        choices=RunStatus.choices,
        default=RunStatus.SCHEDULED,
        db_index=True
    )
    idempotency_key = models.CharField(
        max_length=100,
        null=True,
        blank=True,
        help_text="Client supplied key; repeating a create with the same key returns the existing run"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_offboardings'
    )
    exit_interview_notes = models.TextField(blank=True)
    exit_interview_rating = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        validators=[MinValueValidator(1), MaxValueValidator(5)],
        help_text="1 (poor) to 5 (excellent)"
    )
    exit_interview_completed_at = models.DateTimeField(null=True, blank=True)

    objects = ScopedManager()

    class Meta:
        db_table = 'employee_offboarding'
        ordering = ['-created_at', '-id']
        constraints = [
            models.UniqueConstraint(
                fields=['entity', 'idempotency_key'],
                name='unique_offboarding_idempotency_key_per_entity'
            ),
        ]
        indexes = [
            models.Index(fields=['entity', 'status'], name='offboarding_entity_status_idx'),
        ]

    def __str__(self):
        return f"Offboarding {self.pk} ({self.employee_id}, {self.status})"

    @property
    def is_terminal(self):
        return self.status in RunStatus.terminal()

    @property
    def exit_interview_missing(self):
        """A completed run with no exit interview on record."""
        return self.status == RunStatus.COMPLETED and self.exit_interview_completed_at is None

    def clean(self):
        super().clean()
        if (self.status == RunStatus.COMPLETED) != (self.completed_at is not None):
            raise ValidationError({'completed_at': "completed_at must be set exactly when the run is completed"})


class EmployeeOffboardingTask(ScopedMixin, models.Model):
    """One unit of work within a run."""
    offboarding = models.ForeignKey(
        EmployeeOffboarding,
        on_delete=models.CASCADE,
        related_name='tasks'
    )
    task_template = models.ForeignKey(
        'offboarding.OffboardingTaskTemplate',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='instances'
    )
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    category = models.CharField(max_length=60, blank=True)
    assigned_role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.HR
    )
    assigned_employee = models.ForeignKey(
        'person.Employee',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='assigned_offboarding_tasks'
    )
    due_date = models.DateField(null=True, blank=True)
    required = models.BooleanField(default=True)
    link_url = models.CharField(max_length=500, blank=True)
    system_code = models.CharField(max_length=50, blank=True)
    order_index = models.IntegerField(default=0)
    status = models.CharField(
        max_length=20,
        choices=TaskStatus.choices,
        default=TaskStatus.NOT_STARTED
    )
    blocked_reason = models.TextField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = ScopedManager()

    class Meta:
        db_table = 'employee_offboarding_task'
        ordering = ['order_index', 'id']
        indexes = [
            models.Index(fields=['offboarding', 'required', 'status'], name='offboarding_task_progress_idx'),
        ]

    def __str__(self):
        return f"{self.title} ({self.status})"

    def clean(self):
        super().clean()
        if (self.status == TaskStatus.COMPLETED) != (self.completed_at is not None):
            raise ValidationError({'completed_at': "completed_at must be set exactly when the task is completed"})
        if self.status == TaskStatus.BLOCKED and not (self.blocked_reason or '').strip():
            raise ValidationError({'blocked_reason': "A blocked task needs a reason"})
