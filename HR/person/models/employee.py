from django.conf import settings
from django.db import models

from core.base.models import AuditMixin, ScopedMixin
from core.base.managers import ScopedManager


class Employee(ScopedMixin, AuditMixin, models.Model):
    """
    Employee record.

    Lifecycle status is driven by HR processes:
    - onboarding -> active when onboarding finishes (outside this codebase)
    - active -> offboarding when an offboarding run is started
    - offboarding -> terminated when every required offboarding task is done
    - offboarding -> active when the offboarding run is cancelled

    The entity (ScopedMixin) is the scope every offboarding record created
    for this employee is stamped with. It is nullable only because imported
    records may arrive without one; the engine refuses to work on such
    employees.
    """

    class Status(models.TextChoices):
        ACTIVE = 'active', 'Active'
        ONBOARDING = 'onboarding', 'Onboarding'
        OFFBOARDING = 'offboarding', 'Offboarding'
        TERMINATED = 'terminated', 'Terminated'

    class EmploymentType(models.TextChoices):
        FULL_TIME = 'full_time', 'Full-time'
        PART_TIME = 'part_time', 'Part-time'
        CONTRACTOR = 'contractor', 'Contractor'
        CASUAL = 'casual', 'Casual'
        INTERN = 'intern', 'Intern'

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='employee_record',
        help_text="Login account; notifications for this employee go here"
    )
    employee_number = models.CharField(max_length=50, blank=True)
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    work_email = models.EmailField(
        blank=True,
        help_text="Workspace (e.g. Google) primary email, used for account suspension"
    )
    department = models.ForeignKey(
        'work_structures.Department',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='employees'
    )
    employment_type = models.CharField(
        max_length=20,
        choices=EmploymentType.choices,
        default=EmploymentType.FULL_TIME
    )
    manager = models.ForeignKey(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='direct_reports'
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.ACTIVE
    )
    hire_date = models.DateField(null=True, blank=True)
    termination_date = models.DateField(
        null=True,
        blank=True,
        help_text="Last day of employment; set when offboarding starts"
    )

    objects = ScopedManager()

    class Meta:
        db_table = 'employee'
        ordering = ['last_name', 'first_name']
        indexes = [
            models.Index(fields=['entity', 'status'], name='employee_entity_status_idx'),
        ]

    def __str__(self):
        return f"{self.employee_number or self.pk} - {self.full_name}"

    @property
    def full_name(self):
        return ' '.join(p for p in [self.first_name, self.last_name] if p)

    # ==================== LIFECYCLE TRANSITIONS ====================

    def mark_offboarding(self, last_day):
        self.status = self.Status.OFFBOARDING
        self.termination_date = last_day
        self.save(update_fields=['status', 'termination_date', 'updated_at'])

    def mark_terminated(self):
        self.status = self.Status.TERMINATED
        self.save(update_fields=['status', 'updated_at'])

    def restore_active(self):
        """Undo an offboarding: back to active with no termination date."""
        self.status = self.Status.ACTIVE
        self.termination_date = None
        self.save(update_fields=['status', 'termination_date', 'updated_at'])
