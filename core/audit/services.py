"""
Audit Service

Writes AuditEvent rows. The engine calls ``log_best_effort`` so that an
audit write failure is logged but never unwinds the state transition it
describes.
"""
import logging

from django.db import DatabaseError, transaction

from core.audit.models import AuditEvent

logger = logging.getLogger(__name__)


class AuditService:
    """Service layer for the audit log"""

    @staticmethod
    def log(event_type, record_type, record_id, description='', related_employee=None,
            metadata=None, scope=None, actor=None) -> AuditEvent:
        """
        Record an audit event.

        Args:
            event_type: e.g. 'offboarding_started'
            record_type: Model name of the audited record
            record_id: Primary key of the audited record
            description: Human readable summary
            related_employee: Employee the event concerns (optional)
            metadata: JSON-serializable dict (optional)
            scope: ScopeContext; supplies entity and, if actor is omitted, the actor
            actor: User performing the action (optional)

        Returns:
            AuditEvent
        """
        if actor is None and scope is not None:
            actor = scope.user

        return AuditEvent.objects.create(
            entity_id=scope.entity_id if scope is not None else None,
            event_type=event_type,
            record_type=record_type,
            record_id=str(record_id),
            related_employee=related_employee,
            actor=actor,
            description=description,
            metadata=metadata or {},
        )

    @classmethod
    def log_best_effort(cls, **kwargs):
        """
        Same as log(), but a failed write is logged and swallowed.

        Returns:
            AuditEvent, or None if the write failed
        """
        try:
            with transaction.atomic():
                return cls.log(**kwargs)
        except DatabaseError as e:
            logger.error(
                f"Audit write failed for {kwargs.get('event_type')} "
                f"{kwargs.get('record_type')}#{kwargs.get('record_id')}: {e}"
            )
            return None

    @staticmethod
    def history(record_type, record_id):
        """All events for one record, newest first."""
        return AuditEvent.objects.filter(record_type=record_type, record_id=str(record_id))
