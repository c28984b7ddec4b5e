from django.db import models

from core.base.models import AuditMixin, ScopedMixin
from core.base.managers import ScopedManager


class Department(ScopedMixin, AuditMixin, models.Model):
    """
    Department inside an entity.

    Mixins:
    - ScopedMixin: entity (tenant) the department belongs to
    - AuditMixin: Tracks created_by, updated_by, created_at, updated_at

    The code is unique per entity; the name is what offboarding presets are
    matched against (e.g. "Engineering" -> ENGINEERING presets).
    """
    code = models.CharField(max_length=50)
    name = models.CharField(max_length=128)
    is_active = models.BooleanField(default=True)

    objects = ScopedManager()

    class Meta:
        db_table = 'hr_department'
        verbose_name = 'Department'
        verbose_name_plural = 'Departments'
        ordering = ['name']
        constraints = [
            models.UniqueConstraint(
                fields=['entity', 'code'],
                name='unique_department_code_per_entity'
            ),
        ]

    def __str__(self):
        return f"{self.code} - {self.name}"
