"""
Person Domain Models

Models:
- Employee: Employee record with lifecycle status (active/onboarding/offboarding/terminated)
"""

from .employee import Employee

__all__ = [
    'Employee',
]
