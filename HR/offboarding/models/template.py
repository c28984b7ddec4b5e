from django.db import models

from core.base.models import AuditMixin, ScopedMixin
from core.base.managers import ScopedManager
from HR.person.models import Employee


class OffboardingTemplate(ScopedMixin, AuditMixin, models.Model):
    """
    Checklist blueprint for an offboarding run.

    Optional restrictions (entity, department, employment type, exit type)
    do not filter templates out of resolution except for the entity; they
    only raise a template's match score. A template without an entity is
    available to every entity.
    """
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    department = models.ForeignKey(
        'work_structures.Department',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='offboarding_templates'
    )
    employment_type = models.CharField(
        max_length=20,
        choices=Employee.EmploymentType.choices,
        blank=True,
        help_text="Blank matches any employment type"
    )
    exit_type = models.CharField(
        max_length=50,
        blank=True,
        help_text="e.g. voluntary, involuntary, redundancy; blank matches any"
    )
    is_default = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    termination_template = models.ForeignKey(
        'documents.DocumentTemplate',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        help_text="Termination letter generated when a run starts"
    )
    exit_document_templates = models.ManyToManyField(
        'documents.DocumentTemplate',
        blank=True,
        related_name='+'
    )

    objects = ScopedManager()

    class Meta:
        db_table = 'offboarding_template'
        ordering = ['id']

    def __str__(self):
        return self.name

    def document_templates(self):
        """Termination letter first, then exit documents, without duplicates."""
        templates = []
        if self.termination_template_id and self.termination_template.is_active:
            templates.append(self.termination_template)
        for template in self.exit_document_templates.filter(is_active=True).order_by('id'):
            if template.pk != self.termination_template_id:
                templates.append(template)
        return templates


class OffboardingTaskTemplate(models.Model):
    """One checklist item of an OffboardingTemplate."""
    template = models.ForeignKey(
        OffboardingTemplate,
        on_delete=models.CASCADE,
        related_name='task_templates'
    )
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    category = models.CharField(max_length=60, blank=True)
    assigned_role = models.CharField(
        max_length=20,
        default='hr',
        help_text="employee, manager, hr, it or finance"
    )
    required = models.BooleanField(default=True)
    order_index = models.IntegerField(default=0)
    due_offset_days = models.IntegerField(
        null=True,
        blank=True,
        help_text="Days relative to the last day (negative = before)"
    )
    system_code = models.CharField(
        max_length=50,
        blank=True,
        help_text="Automated action run on completion; blank for manual tasks"
    )
    link_url = models.CharField(max_length=500, blank=True)

    class Meta:
        db_table = 'offboarding_task_template'
        ordering = ['order_index', 'id']

    def __str__(self):
        return f"{self.template_id}: {self.title}"
