"""
Scope decorators for function-based views.
"""
from functools import wraps

from django.conf import settings
from rest_framework import status
from rest_framework.response import Response

from core.scope.context import ScopeContext
from core.scope.models import Entity


def _read_entity_id(request):
    header = getattr(settings, 'OFFBOARDING_SCOPE_HEADER', 'X-Entity-ID')
    raw = request.headers.get(header) or request.query_params.get('entity_id')
    if raw in (None, ''):
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def require_scope(view_func):
    """
    Resolve the active entity for the request and pass it to the view as
    the ``scope`` keyword argument.

    The entity id is read from the ``X-Entity-ID`` header (configurable via
    settings.OFFBOARDING_SCOPE_HEADER) or the ``entity_id`` query parameter.

    Usage:
        @api_view(['GET'])
        @require_scope
        def run_list(request, scope):
            ...

    Returns:
        400 Bad Request if no valid, active entity can be resolved
    """
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        entity_id = _read_entity_id(request)
        if entity_id is None:
            return Response(
                {'error': 'Entity scope required', 'detail': 'Send the X-Entity-ID header'},
                status=status.HTTP_400_BAD_REQUEST
            )

        if not Entity.objects.filter(pk=entity_id, is_active=True).exists():
            return Response(
                {'error': 'Unknown entity scope', 'detail': f'Entity {entity_id} not found or inactive'},
                status=status.HTTP_400_BAD_REQUEST
            )

        user = request.user if request.user.is_authenticated else None
        kwargs['scope'] = ScopeContext(entity_id=entity_id, user=user)
        return view_func(request, *args, **kwargs)

    return wrapper
