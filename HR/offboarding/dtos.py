"""
Data Transfer Objects for the Offboarding Domain
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Optional


@dataclass
class OffboardingCreateDTO:
    """DTO for starting an offboarding run"""
    employee_id: int
    last_day: Any
    template_id: Optional[int] = None
    exit_type: str = ''
    reason: str = ''
    idempotency_key: Optional[str] = None


@dataclass
class TaskUpdateDTO:
    """DTO for editing a task instance; only supplied fields change"""
    due_date: Optional[date] = None
    assigned_employee_id: Optional[int] = None
    clear_due_date: bool = False
    clear_assigned_employee: bool = False


@dataclass
class ManualTaskCreateDTO:
    """DTO for adding a task that does not come from a template"""
    title: str
    description: str = ''
    category: str = ''
    assigned_role: str = 'hr'
    assigned_employee_id: Optional[int] = None
    due_date: Optional[date] = None
    required: bool = True
    link_url: str = ''


@dataclass
class ExitInterviewDTO:
    """DTO for recording the exit interview of a run"""
    notes: str = ''
    rating: Optional[int] = None
    completed_at: Any = None


@dataclass
class RunFilterDTO:
    """Filters for listing runs"""
    view: str = 'pipeline'
    status: Optional[str] = None
    exit_type: Optional[str] = None
    manager_id: Optional[int] = None
    department_id: Optional[int] = None
    employee_id: Optional[int] = None
    search: Optional[str] = None


@dataclass
class ProgressDTO:
    total: int
    completed: int
    percentage: int
    required_total: int
    required_completed: int
    required_percentage: int

    def as_dict(self) -> Dict[str, int]:
        return {
            'total': self.total,
            'completed': self.completed,
            'percentage': self.percentage,
            'required_total': self.required_total,
            'required_completed': self.required_completed,
            'required_percentage': self.required_percentage,
        }


@dataclass
class OffboardingStatsDTO:
    active: int = 0
    completed_this_month: int = 0
    cancelled_this_month: int = 0
    average_completion_days: Optional[int] = None
    by_status: Dict[str, int] = field(default_factory=dict)
