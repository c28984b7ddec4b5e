from dataclasses import dataclass, field
from typing import List

from django.core.exceptions import ObjectDoesNotExist


class NotFoundError(ObjectDoesNotExist):
    """A referenced task, run or employee is absent or outside the active scope."""
    pass


@dataclass
class PartialFailure:
    """
    Outcome of a fan-out step that may partially fail (task materialization,
    document generation). Never raised; logged and recorded in audit metadata.
    """
    step: str
    attempted: int = 0
    succeeded: int = 0
    errors: List[str] = field(default_factory=list)

    @property
    def failed(self):
        return self.attempted - self.succeeded

    @property
    def degraded(self):
        return self.failed > 0

    def record_error(self, error):
        self.errors.append(str(error))

    def as_dict(self):
        return {
            'attempted': self.attempted,
            'succeeded': self.succeeded,
            'failed': self.failed,
            'errors': self.errors[:10],
        }
