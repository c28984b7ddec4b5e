"""
Standardized API responses for the HR platform.

Every response body follows:
{
    "status": "success" | "error",
    "message": "string message or empty",
    "data": {...} | [] | null
}

Domain exceptions raised by the service layer (scope, validation and
not-found failures) are translated here so views can let them propagate.
"""
import logging

from django.core.exceptions import ObjectDoesNotExist, ValidationError as DjangoValidationError
from django.http import Http404
from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework import status as http_status
from rest_framework.renderers import JSONRenderer

from core.scope.exceptions import ScopeError

logger = logging.getLogger(__name__)


def custom_exception_handler(exc, context):
    """
    Format every error response as {"status": "error", "message": ..., "data": null}.

    DRF handles its own exceptions first; domain exceptions it does not know
    about are mapped to HTTP status codes here:
        - ScopeError -> 400
        - django ValidationError -> 400
        - ObjectDoesNotExist (incl. NotFoundError) -> 404
    """
    response = exception_handler(exc, context)

    if response is None:
        response = _handle_domain_exception(exc)

    if response is not None:
        response.data = format_error_response(response.data, response.status_code)

    return response


def _handle_domain_exception(exc):
    if isinstance(exc, ScopeError):
        return Response({'detail': str(exc)}, status=http_status.HTTP_400_BAD_REQUEST)

    if isinstance(exc, DjangoValidationError):
        if hasattr(exc, 'message_dict'):
            return Response(exc.message_dict, status=http_status.HTTP_400_BAD_REQUEST)
        return Response(exc.messages, status=http_status.HTTP_400_BAD_REQUEST)

    if isinstance(exc, (ObjectDoesNotExist, Http404)):
        return Response({'detail': str(exc) or 'Not found.'}, status=http_status.HTTP_404_NOT_FOUND)

    return None


def format_error_response(errors, status_code):
    """
    Collapse DRF/Django error payloads into a single message string.

    - {"field": ["error1", "error2"]} -> "field: error1, error2"
    - {"detail": "message"} -> "message"
    - ["error1", "error2"] -> "error1, error2"
    """
    message = ""

    if isinstance(errors, dict):
        error_messages = []
        for field, field_errors in errors.items():
            if field == 'detail':
                message = str(field_errors)
            elif isinstance(field_errors, list):
                error_messages.append(f"{field}: {', '.join(str(e) for e in field_errors)}")
            elif isinstance(field_errors, dict):
                error_messages.append(f"{field}: {format_nested_errors(field_errors)}")
            else:
                error_messages.append(f"{field}: {field_errors}")

        if error_messages:
            message = "; ".join(error_messages)

    elif isinstance(errors, list):
        message = ", ".join(str(e) for e in errors)

    else:
        message = str(errors)

    if status_code >= 500:
        logger.error(f"Server error response ({status_code}): {message}")

    return {
        "status": "error",
        "message": message,
        "data": None
    }


def format_nested_errors(errors_dict):
    """Format nested error dictionaries."""
    messages = []
    for key, value in errors_dict.items():
        if isinstance(value, list):
            messages.append(f"{key}: {', '.join(str(v) for v in value)}")
        elif isinstance(value, dict):
            messages.append(f"{key}: {format_nested_errors(value)}")
        else:
            messages.append(f"{key}: {value}")
    return "; ".join(messages)


class StandardizedJSONRenderer(JSONRenderer):
    """
    JSON renderer that wraps responses not already in the standard envelope.
    """

    def render(self, data, accepted_media_type=None, renderer_context=None):
        response = renderer_context.get('response') if renderer_context else None
        if response is not None and response.status_code == 204:
            return b''
        if response is not None and not self.is_already_formatted(data):
            if response.status_code >= 400:
                data = format_error_response(data, response.status_code)
            else:
                data = self.format_success_response(data)

        return super().render(data, accepted_media_type, renderer_context)

    def is_already_formatted(self, data):
        return isinstance(data, dict) and {'status', 'message', 'data'} <= set(data.keys())

    def format_success_response(self, data):
        if isinstance(data, dict) and 'detail' in data:
            return {"status": "success", "message": str(data['detail']), "data": None}
        if data is None or (isinstance(data, dict) and not data):
            return {"status": "success", "message": "", "data": None}
        return {"status": "success", "message": "", "data": data}


def success_response(data=None, message="", status_code=http_status.HTTP_200_OK):
    """
    Build a success envelope.

    Usage:
        return success_response(
            data=serializer.data,
            message="Offboarding started",
            status_code=status.HTTP_201_CREATED
        )
    """
    return Response({
        "status": "success",
        "message": message,
        "data": data
    }, status=status_code)


def error_response(message, data=None, status_code=http_status.HTTP_400_BAD_REQUEST):
    """Build an error envelope."""
    return Response({
        "status": "error",
        "message": message,
        "data": data
    }, status=status_code)
