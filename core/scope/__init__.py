"""
Scope Domain

Supplies the active entity (tenant/organization) that every read and write
of the HR engine is filtered by and stamped with.

Usage:
    from core.scope.context import ScopeContext
    from core.scope.exceptions import ScopeError

    scope = ScopeContext.for_employee(employee)      # raises ScopeError
    EmployeeOffboarding.objects.for_scope(scope)
"""
