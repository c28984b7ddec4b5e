"""
Core Base Managers Module

Scope-aware querysets and managers shared by every tenant-scoped model.

Exports:
    QuerySets:
        - ScopedQuerySet: for_scope(), shared_or_for_scope()

    Managers:
        - ScopedManager: For ScopedMixin models

Usage:
    from core.base.managers import ScopedManager

    class EmployeeOffboardingTask(ScopedMixin, models.Model):
        objects = ScopedManager()

    EmployeeOffboardingTask.objects.for_scope(scope).filter(offboarding_id=run_id)
"""

from django.db import models
from django.db.models import Q


def _entity_id(scope):
    """Accept a ScopeContext, an Entity or a raw entity id."""
    return getattr(scope, 'entity_id', None) or getattr(scope, 'pk', None) or scope


class ScopedQuerySet(models.QuerySet):
    """
    QuerySet for ScopedMixin models.

    Methods:
        - for_scope(scope): rows stamped with the scope's entity
        - shared_or_for_scope(scope): rows for the entity plus unscoped (shared) rows
    """

    def for_scope(self, scope):
        """Return only rows belonging to the given scope."""
        return self.filter(entity_id=_entity_id(scope))

    def shared_or_for_scope(self, scope):
        """Return rows belonging to the scope or not restricted to any entity."""
        return self.filter(Q(entity__isnull=True) | Q(entity_id=_entity_id(scope)))


class ScopedManager(models.Manager.from_queryset(ScopedQuerySet)):
    """
    Manager for ScopedMixin models.

    Model.objects.for_scope(scope)
    Model.objects.shared_or_for_scope(scope)
    """
    pass
