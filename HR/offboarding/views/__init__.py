from .run_views import (
    run_list,
    run_detail,
    run_pause,
    run_start,
    run_cancel,
    run_force_complete,
    run_exit_interview,
    run_progress,
    run_tasks_by_role,
    run_add_task,
    offboarding_stats,
)
from .task_views import (
    task_detail,
    task_complete,
    task_start,
    task_block,
    task_unblock,
)
from .template_views import template_resolve

__all__ = [
    'run_list',
    'run_detail',
    'run_pause',
    'run_start',
    'run_cancel',
    'run_force_complete',
    'run_exit_interview',
    'run_progress',
    'run_tasks_by_role',
    'run_add_task',
    'offboarding_stats',
    'task_detail',
    'task_complete',
    'task_start',
    'task_block',
    'task_unblock',
    'template_resolve',
]
