"""
Template resolution.

Scores candidate offboarding templates against an employee and an exit type
and picks the best match. ``resolve`` is pure: it reads only its arguments.
"""
from typing import Iterable, Optional

from HR.offboarding.models import OffboardingTemplate

ENTITY_MATCH = 4
DEPARTMENT_MATCH = 2
EMPLOYMENT_TYPE_MATCH = 2
EXIT_TYPE_MATCH = 3
DEFAULT_BONUS = 1


def score(template, employee, exit_type) -> int:
    points = 0
    if template.entity_id and template.entity_id == employee.entity_id:
        points += ENTITY_MATCH
    if template.department_id and template.department_id == employee.department_id:
        points += DEPARTMENT_MATCH
    if template.employment_type and template.employment_type == employee.employment_type:
        points += EMPLOYMENT_TYPE_MATCH
    if template.exit_type and exit_type and template.exit_type == exit_type:
        points += EXIT_TYPE_MATCH
    if template.is_default:
        points += DEFAULT_BONUS
    return points


def resolve(employee, exit_type, templates: Iterable) -> Optional[OffboardingTemplate]:
    """
    Pick the best template for an employee leaving with the given exit type.

    Candidates restricted to another entity are dropped. Among the rest the
    highest score wins; equal scores keep input order.

    Returns:
        The winning template, or None when no candidate remains
    """
    candidates = [
        t for t in templates
        if not t.entity_id or t.entity_id == employee.entity_id
    ]
    if not candidates:
        return None
    # sorted() is stable, so ties resolve to the earliest candidate
    ranked = sorted(candidates, key=lambda t: score(t, employee, exit_type), reverse=True)
    return ranked[0]


def find_template(scope, employee, exit_type) -> Optional[OffboardingTemplate]:
    """Resolve against the active templates visible to the scope, oldest first."""
    templates = OffboardingTemplate.objects.shared_or_for_scope(scope).filter(
        is_active=True
    ).order_by('id')
    return resolve(employee, exit_type, list(templates))
