"""
Automated task actions.

A task whose system code is registered in ``ACTIONS`` runs its action
before it is marked completed. The action's result is informational: it
never prevents the task from completing.
"""
import logging

from core.audit.services import AuditService
from core.identity.exceptions import ExternalServiceFailure
from core.identity.providers import SuspensionResult, get_identity_provider
from HR.offboarding.models import SystemCode

logger = logging.getLogger(__name__)


def suspend_google_account(scope, employee, run, outbox) -> SuspensionResult:
    """
    Suspend the employee's Google Workspace account.

    Success is audited and the run's manager is notified through the
    outbox; failure is audited as google_account_error.
    """
    try:
        result = get_identity_provider().suspend(employee)
    except ExternalServiceFailure as e:
        logger.error(f"Identity provider failed for employee {employee.pk}: {e}")
        result = SuspensionResult(ok=False, error=str(e))

    if result.ok:
        AuditService.log_best_effort(
            event_type='google_account_suspended',
            record_type='Employee',
            record_id=employee.pk,
            related_employee=employee,
            description=f"Google Workspace account suspended for {employee.full_name}",
            metadata={'work_email': employee.work_email},
            scope=scope,
        )
        manager = run.manager if run is not None else None
        if manager is not None:
            outbox.add_notification(
                recipient=manager.user,
                type='google_account_suspended',
                title='Google account suspended',
                message=f"Google account suspended for {employee.full_name}.",
                link=f"/employee/{employee.pk}",
                related_employee=employee,
            )
        return result

    AuditService.log_best_effort(
        event_type='google_account_error',
        record_type='Employee',
        record_id=employee.pk,
        related_employee=employee,
        description=f"Failed to suspend Google account for {employee.full_name}: {result.error}",
        metadata={'work_email': employee.work_email, 'error': result.error},
        scope=scope,
    )
    return result


ACTIONS = {
    SystemCode.GOOGLE_ACCOUNT_SUSPEND: suspend_google_account,
}


def run_system_action(scope, task, employee, run, outbox):
    """
    Execute the automated action for a task, if any.

    Returns:
        SuspensionResult-like result with ``ok``/``error``, or None when the
        task has no recognized system code or no employee to act on
    """
    action = ACTIONS.get(task.system_code)
    if action is None:
        if task.system_code:
            logger.warning(f"Task {task.pk} has unrecognized system code {task.system_code!r}; skipping")
        return None
    if employee is None:
        logger.warning(f"Task {task.pk}: no employee resolved, skipping {task.system_code}")
        return None

    try:
        return action(scope, employee, run, outbox)
    except Exception as e:
        logger.exception(f"Automated action {task.system_code} failed for task {task.pk}")
        AuditService.log_best_effort(
            event_type='offboarding_automation_error',
            record_type='EmployeeOffboardingTask',
            record_id=task.pk,
            related_employee=employee,
            description=f"{task.system_code} failed: {e}",
            metadata={'system_code': task.system_code, 'error': str(e)},
            scope=scope,
        )
        return SuspensionResult(ok=False, error=str(e))
