from .template_resolver import resolve, find_template
from .offboarding_service import OffboardingService, normalize_last_day
from .task_service import TaskService, TaskCompletionResult, close_run_if_done
from .run_service import RunService

__all__ = [
    'resolve',
    'find_template',
    'OffboardingService',
    'normalize_last_day',
    'TaskService',
    'TaskCompletionResult',
    'close_run_if_done',
    'RunService',
]
