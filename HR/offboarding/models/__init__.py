from .template import OffboardingTemplate, OffboardingTaskTemplate
from .run import (
    RunStatus,
    TaskStatus,
    Role,
    SystemCode,
    EmployeeOffboarding,
    EmployeeOffboardingTask,
)

__all__ = [
    'OffboardingTemplate',
    'OffboardingTaskTemplate',
    'RunStatus',
    'TaskStatus',
    'Role',
    'SystemCode',
    'EmployeeOffboarding',
    'EmployeeOffboardingTask',
]
