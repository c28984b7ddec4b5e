"""
Core Base Module

Shared abstract models and managers for the HR platform.

Exports:
    Mixins:
        - AuditMixin: Adds created_at, updated_at, created_by, updated_by
        - ScopedMixin: Adds the entity (tenant scope) foreign key

    Managers & QuerySets:
        - ScopedQuerySet: for_scope() / shared_or_for_scope() filters
        - ScopedManager: Manager for ScopedMixin models

Import from the submodules directly (core.base.models, core.base.managers)
inside models.py files to avoid AppRegistryNotReady errors.
"""

__all__ = [
    'AuditMixin',
    'ScopedMixin',
    'ScopedQuerySet',
    'ScopedManager',
]
