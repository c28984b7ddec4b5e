from django.conf import settings
from django.db import models

from core.base.models import ScopedMixin
from core.base.managers import ScopedManager


class AuditEvent(ScopedMixin, models.Model):
    """
    One audit log entry.

    record_type/record_id identify the record the event is about
    (e.g. 'EmployeeOffboardingTask' / '42'); the ScopedMixin entity is the
    tenant the event happened in.
    """
    event_type = models.CharField(max_length=60, db_index=True)
    record_type = models.CharField(max_length=60)
    record_id = models.CharField(max_length=64)
    related_employee = models.ForeignKey(
        'person.Employee',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='audit_events'
    )
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='audit_events'
    )
    description = models.TextField(blank=True)
    metadata = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = ScopedManager()

    class Meta:
        db_table = 'audit_event'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['record_type', 'record_id'], name='audit_event_record_idx'),
        ]

    def __str__(self):
        return f"{self.event_type} {self.record_type}#{self.record_id}"
