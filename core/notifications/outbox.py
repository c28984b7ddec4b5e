"""
Side-effect outbox.

Engines record the effects a state transition should trigger as
SideEffectIntent values while they run, then dispatch them once the
primary writes are done. Dispatch never raises: each intent is attempted
up to settings.OFFBOARDING_SIDE_EFFECT_MAX_ATTEMPTS times and failures end
up in the DispatchReport and the log.

Usage:
    outbox = SideEffectOutbox()
    outbox.add_notification(
        recipient=manager.user,
        type='offboarding_started',
        title='Offboarding started',
        message='Jane Doe has begun the offboarding process.',
        link=f'/offboarding/manage/{run.pk}',
        related_employee=employee,
        related_run_id=run.pk,
    )
    report = outbox.dispatch()
    report.failed  # [(intent, 'error text'), ...]
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from django.conf import settings
from django.db import transaction

from core.notifications.services import NotificationService

logger = logging.getLogger(__name__)


KIND_NOTIFICATION = 'notification'


def _send_notification(payload):
    return NotificationService.send(**payload)


HANDLERS = {
    KIND_NOTIFICATION: _send_notification,
}


@dataclass
class SideEffectIntent:
    """A side effect described as data: what to do and with which arguments."""
    kind: str
    payload: Dict[str, Any]
    label: str = ''
    attempts: int = 0

    def describe(self):
        return self.label or self.kind


@dataclass
class DispatchReport:
    dispatched: List[SideEffectIntent] = field(default_factory=list)
    failed: List[Tuple[SideEffectIntent, str]] = field(default_factory=list)

    @property
    def ok(self):
        return not self.failed


class SideEffectOutbox:
    """Collects intents during an operation and dispatches them afterwards."""

    def __init__(self, max_attempts=None):
        if max_attempts is None:
            max_attempts = getattr(settings, 'OFFBOARDING_SIDE_EFFECT_MAX_ATTEMPTS', 1)
        self.max_attempts = max(1, int(max_attempts))
        self.pending: List[SideEffectIntent] = []

    def __len__(self):
        return len(self.pending)

    def add(self, kind, label='', **payload):
        if kind not in HANDLERS:
            raise ValueError(f"Unknown side-effect kind '{kind}'")
        intent = SideEffectIntent(kind=kind, payload=payload, label=label)
        self.pending.append(intent)
        return intent

    def add_notification(self, recipient, type, title, message='', link='',
                         related_employee=None, related_run_id=None):
        """
        Queue an in-app notification. Intents without a recipient are dropped,
        matching "no direct owner" in task assignment.
        """
        if recipient is None:
            return None
        return self.add(
            KIND_NOTIFICATION,
            label=f"{type} -> user {recipient.pk}",
            recipient=recipient,
            type=type,
            title=title,
            message=message,
            link=link,
            related_employee=related_employee,
            related_run_id=related_run_id,
        )

    def dispatch(self) -> DispatchReport:
        """
        Attempt every pending intent; the outbox is empty afterwards.
        """
        report = DispatchReport()
        intents, self.pending = self.pending, []

        for intent in intents:
            error = self._attempt(intent)
            if error is None:
                report.dispatched.append(intent)
            else:
                logger.error(
                    f"Side effect {intent.describe()} failed after {intent.attempts} attempt(s): {error}"
                )
                report.failed.append((intent, error))

        if intents:
            logger.info(
                f"Dispatched {len(report.dispatched)} side effect(s), {len(report.failed)} failed"
            )
        return report

    def _attempt(self, intent):
        handler = HANDLERS[intent.kind]
        last_error = None
        while intent.attempts < self.max_attempts:
            intent.attempts += 1
            try:
                with transaction.atomic():
                    handler(intent.payload)
                return None
            except Exception as e:
                last_error = str(e) or e.__class__.__name__
                logger.warning(
                    f"Side effect {intent.describe()} attempt {intent.attempts}/{self.max_attempts} failed: {last_error}"
                )
        return last_error
