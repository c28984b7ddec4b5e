"""
Offboarding checklist presets.

Due presets name an offset in days from the employee's last day.
Department presets are starter checklists used to seed templates; a
department is matched when its name contains the preset key.
"""
from dataclasses import dataclass
from typing import Dict, List

from HR.offboarding.models import Role


OFFBOARDING_DUE_PRESETS: Dict[str, int] = {
    'DAY_MINUS_14': -14,
    'DAY_MINUS_7': -7,
    'DAY_MINUS_3': -3,
    'DAY_MINUS_2': -2,
    'DAY_MINUS_1': -1,
    'DAY_0': 0,
    'DAY_PLUS_1': 1,
    'DAY_PLUS_3': 3,
    'DAY_PLUS_5': 5,
}


@dataclass(frozen=True)
class TaskPreset:
    key: str
    title: str
    role: str
    due_preset: str

    @property
    def due_offset_days(self):
        return resolve_due_offset(self.due_preset)


_RESIGNATION_LETTER = TaskPreset('resignation-letter', 'Receive formal resignation letter', Role.HR, 'DAY_MINUS_14')
_EXIT_INTERVIEW = TaskPreset('exit-interview', 'Conduct exit interview', Role.HR, 'DAY_MINUS_2')

OFFBOARDING_DEPARTMENT_PRESETS: Dict[str, List[TaskPreset]] = {
    'GENERAL': [
        _RESIGNATION_LETTER,
        _EXIT_INTERVIEW,
        TaskPreset('return-equipment', 'Collect company equipment (laptop, badge)', Role.MANAGER, 'DAY_0'),
        TaskPreset('remove-access', 'Revoke system access', Role.IT, 'DAY_0'),
        TaskPreset('final-pay', 'Process final pay', Role.FINANCE, 'DAY_PLUS_3'),
    ],
    'ENGINEERING': [
        _RESIGNATION_LETTER,
        TaskPreset('knowledge-transfer', 'Complete code handover / knowledge transfer', Role.MANAGER, 'DAY_MINUS_3'),
        TaskPreset('revoke-aws', 'Revoke AWS / Cloud access', Role.IT, 'DAY_0'),
        TaskPreset('revoke-github', 'Remove from GitHub organization', Role.IT, 'DAY_0'),
        TaskPreset('return-equipment', 'Collect laptop and hardware keys', Role.MANAGER, 'DAY_0'),
        _EXIT_INTERVIEW,
    ],
    'SALES': [
        _RESIGNATION_LETTER,
        TaskPreset('transfer-accounts', 'Transfer active accounts to new rep', Role.MANAGER, 'DAY_MINUS_3'),
        TaskPreset('revoke-crm', 'Revoke CRM access (Salesforce/HubSpot)', Role.IT, 'DAY_0'),
        TaskPreset('return-equipment', 'Collect laptop and phone', Role.MANAGER, 'DAY_0'),
        TaskPreset('commission-calc', 'Calculate final commissions', Role.FINANCE, 'DAY_PLUS_5'),
    ],
    'FINANCE': [
        _RESIGNATION_LETTER,
        TaskPreset('revoke-banking', 'Revoke banking / payroll access', Role.IT, 'DAY_0'),
        TaskPreset('handover-books', 'Handover financial records access', Role.MANAGER, 'DAY_MINUS_2'),
        TaskPreset('return-equipment', 'Collect equipment', Role.MANAGER, 'DAY_0'),
    ],
    'IT': [
        _RESIGNATION_LETTER,
        TaskPreset('admin-revoke', 'Revoke Global Admin rights', Role.IT, 'DAY_MINUS_1'),
        TaskPreset('credential-rotation', 'Rotate shared credentials', Role.IT, 'DAY_0'),
        TaskPreset('return-equipment', 'Collect equipment and security keys', Role.MANAGER, 'DAY_0'),
    ],
}


def resolve_due_offset(preset):
    """Offset in days for a due preset name; unknown presets mean the last day itself."""
    return OFFBOARDING_DUE_PRESETS.get(preset, 0)


def get_department_presets(department_name=None):
    """
    Starter checklist for a department name.

    The first preset key (in declaration order) contained in the upper-cased
    name wins, so 'Finance & IT' resolves to FINANCE. Falls back to GENERAL.
    """
    if not department_name:
        return OFFBOARDING_DEPARTMENT_PRESETS['GENERAL']
    upper_name = department_name.upper()
    for key, presets in OFFBOARDING_DEPARTMENT_PRESETS.items():
        if key in upper_name:
            return presets
    return OFFBOARDING_DEPARTMENT_PRESETS['GENERAL']
