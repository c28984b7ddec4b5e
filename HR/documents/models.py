from django.conf import settings
from django.db import models

from core.base.models import AuditMixin, ScopedMixin
from core.base.managers import ScopedManager


class DocumentTemplate(ScopedMixin, AuditMixin, models.Model):
    """
    Reusable document file (e.g. termination letter). A template without an
    entity is shared by every entity.
    """
    name = models.CharField(max_length=200)
    file_url = models.URLField(max_length=500)
    file_name = models.CharField(max_length=255)
    file_size_bytes = models.PositiveIntegerField(null=True, blank=True)
    file_mime_type = models.CharField(max_length=100, blank=True)
    is_active = models.BooleanField(default=True)

    objects = ScopedManager()

    class Meta:
        db_table = 'hr_document_template'
        ordering = ['name']

    def __str__(self):
        return self.name


class Document(ScopedMixin, models.Model):
    """A document filed against an employee."""

    class Visibility(models.TextChoices):
        ADMIN = 'admin', 'Admin only'
        MANAGER = 'manager', 'Admin and manager'
        EMPLOYEE = 'employee', 'Employee'

    owner_employee = models.ForeignKey(
        'person.Employee',
        on_delete=models.CASCADE,
        related_name='documents'
    )
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='uploaded_hr_documents'
    )
    source_template = models.ForeignKey(
        DocumentTemplate,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='generated_documents'
    )
    related_offboarding_id = models.BigIntegerField(null=True, blank=True, db_index=True)
    related_offboarding_task_id = models.BigIntegerField(null=True, blank=True)
    file_url = models.URLField(max_length=500)
    file_name = models.CharField(max_length=255)
    file_size = models.PositiveIntegerField(null=True, blank=True)
    file_type = models.CharField(max_length=100, blank=True)
    category = models.CharField(max_length=60, blank=True)
    visibility = models.CharField(
        max_length=20,
        choices=Visibility.choices,
        default=Visibility.ADMIN
    )
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = ScopedManager()

    class Meta:
        db_table = 'hr_document'
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"{self.file_name} ({self.owner_employee_id})"
