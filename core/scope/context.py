"""
Explicit scope value passed into every engine call.

The scope is never inferred implicitly: callers build a ScopeContext from
the employee being processed, from an HTTP request header, or from an
Entity, and hand it to the service layer.
"""

from dataclasses import dataclass
from typing import Any, Optional

from core.scope.exceptions import ScopeError


@dataclass(frozen=True)
class ScopeContext:
    """Active entity id plus the acting user (may be None for system actions)."""
    entity_id: int
    user: Optional[Any] = None

    def __post_init__(self):
        if not self.entity_id:
            raise ScopeError("Scope requires an entity id")

    @classmethod
    def for_entity(cls, entity, user=None):
        return cls(entity_id=entity.pk, user=user)

    @classmethod
    def for_employee(cls, employee, user=None):
        """
        Build the scope an employee's records must carry.

        Raises:
            ScopeError: If the employee is not stamped with an entity
        """
        entity_id = getattr(employee, 'entity_id', None)
        if not entity_id:
            raise ScopeError(
                f"Employee {getattr(employee, 'pk', None)} is missing entity_id "
                f"(cannot create scoped offboarding records)"
            )
        return cls(entity_id=entity_id, user=user)

    def with_user(self, user):
        return ScopeContext(entity_id=self.entity_id, user=user)

    def owns(self, record):
        """True if the record is stamped with this scope's entity."""
        return getattr(record, 'entity_id', None) == self.entity_id

    def check(self, record):
        """
        Raise ScopeError unless the record belongs to this scope.
        """
        record_entity = getattr(record, 'entity_id', None)
        if record_entity != self.entity_id:
            raise ScopeError(
                f"{record.__class__.__name__} {getattr(record, 'pk', None)} belongs to entity "
                f"{record_entity}, not {self.entity_id}"
            )
        return record
