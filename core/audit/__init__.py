"""
Audit Domain

Append-only log of meaningful state transitions.

Usage:
    from core.audit.services import AuditService

    AuditService.log(
        event_type='offboarding_started',
        entity_type='EmployeeOffboarding',
        entity_id=run.pk,
        description='Started offboarding for Jane Doe (voluntary)',
        related_employee=employee,
        scope=scope,
    )
"""
