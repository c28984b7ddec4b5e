from django.db import models
from django.conf import settings


class AuditMixin(models.Model):
    """
    Adds audit fields to track creation and modification metadata.

    Fields:
        - created_at: Timestamp when record was created
        - updated_at: Timestamp when record was last modified
        - created_by: User who created the record (optional)
        - updated_by: User who last modified the record (optional)

    Note: created_by and updated_by are set by the service layer, never
    inferred from a request.
    """
    created_at = models.DateTimeField(
        auto_now_add=True,
        help_text="Timestamp when record was created"
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="Timestamp when record was last modified"
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='%(app_label)s_%(class)s_created',
        help_text="User who created this record"
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='%(app_label)s_%(class)s_updated',
        help_text="User who last updated this record"
    )

    class Meta:
        abstract = True


class ScopedMixin(models.Model):
    """
    Stamps a record with the entity (tenant scope) it belongs to.

    Every offboarding record carries the same entity as the employee it
    belongs to. The column is nullable only so that legacy or shared rows
    (e.g. templates available to every entity) can exist; services treat a
    missing entity on a scoped record as a ScopeError.

    Usage:
        class EmployeeOffboarding(ScopedMixin, models.Model):
            objects = ScopedManager()

        EmployeeOffboarding.objects.for_scope(scope)
    """
    entity = models.ForeignKey(
        'scope.Entity',
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='%(app_label)s_%(class)s_set',
        help_text="Entity (tenant scope) this record belongs to"
    )

    class Meta:
        abstract = True

    @property
    def scope_id(self):
        return self.entity_id
