"""
Custom exception handling for Saathi Backend.

Provides:
- The dispatch error taxonomy (NotFound, InvalidTransition, Forbidden,
  PreconditionFailed, ConcurrencyConflict)
- A DRF exception handler giving every error the same response envelope

Never exposes internal details in error responses.
"""

import logging
from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework import status

security_logger = logging.getLogger('saathi.security')


class SaathiAPIException(Exception):
    """Base exception class for Saathi-specific errors."""

    default_code = 'ERROR'
    default_message = 'An error occurred.'
    default_status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message=None, code=None, status_code=None):
        self.message = message or self.default_message
        self.code = code or self.default_code
        self.status_code = status_code or self.default_status_code
        super().__init__(self.message)


class NotFound(SaathiAPIException):
    """Raised when a case, officer or station does not exist."""
    default_code = 'NOT_FOUND'
    default_message = 'The requested resource was not found.'
    default_status_code = status.HTTP_404_NOT_FOUND


class InvalidTransition(SaathiAPIException):
    """Raised when a status change is not on the canonical lifecycle chain."""
    default_code = 'INVALID_TRANSITION'
    default_message = 'Invalid status transition.'
    default_status_code = status.HTTP_409_CONFLICT

    def __init__(self, current, requested, message=None):
        self.current = current
        self.requested = requested
        super().__init__(
            message or f"Invalid status transition: cannot move from {current} to {requested}"
        )


class Forbidden(SaathiAPIException):
    """Raised when the actor's role does not allow the transition."""
    default_code = 'FORBIDDEN'
    default_message = 'You do not have permission to perform this action.'
    default_status_code = status.HTTP_403_FORBIDDEN


class PreconditionFailed(SaathiAPIException):
    """Raised when the case is not in a state that allows the action."""
    default_code = 'PRECONDITION_FAILED'
    default_message = 'The resource is not in the required state.'
    default_status_code = status.HTTP_412_PRECONDITION_FAILED


class ConcurrencyConflict(SaathiAPIException):
    """
    Raised inside an assignment commit when the officer row changed
    between ranking and commit. Safe to retry with another candidate.
    """
    default_code = 'CONCURRENCY_CONFLICT'
    default_message = 'Request conflicts with a concurrent update.'
    default_status_code = status.HTTP_409_CONFLICT


def custom_exception_handler(exc, context):
    """
    Custom exception handler that:
    1. Maps Saathi exceptions to HTTP responses
    2. Provides consistent error response format
    3. Logs security-relevant exceptions

    Response format:
    {
        "success": false,
        "error": {
            "code": "ERROR_CODE",
            "message": "User-friendly message"
        }
    }
    """
    request = context.get('request')
    view = context.get('view')

    if isinstance(exc, SaathiAPIException):
        if exc.status_code == status.HTTP_403_FORBIDDEN:
            _log_security_event(exc, request, view, exc.status_code)
        return Response(
            {
                'success': False,
                'error': {
                    'code': exc.code,
                    'message': exc.message,
                }
            },
            status=exc.status_code
        )

    # Call REST framework's default exception handler for everything else
    response = exception_handler(exc, context)

    if response is not None:
        custom_response = {
            'success': False,
            'error': {
                'code': _get_error_code(response.status_code),
                'message': _get_safe_message(exc, response.status_code),
            }
        }

        if response.status_code in [401, 403, 429]:
            _log_security_event(exc, request, view, response.status_code)

        response.data = custom_response

    return response


def _get_error_code(status_code):
    """Map HTTP status codes to error codes."""
    error_codes = {
        400: 'BAD_REQUEST',
        401: 'UNAUTHORIZED',
        403: 'FORBIDDEN',
        404: 'NOT_FOUND',
        405: 'METHOD_NOT_ALLOWED',
        409: 'CONFLICT',
        412: 'PRECONDITION_FAILED',
        429: 'RATE_LIMIT_EXCEEDED',
        500: 'INTERNAL_ERROR',
        503: 'SERVICE_UNAVAILABLE',
    }
    return error_codes.get(status_code, 'UNKNOWN_ERROR')


def _get_safe_message(exc, status_code):
    """
    Get a safe, user-friendly error message.
    Never expose internal details or stack traces.
    """
    safe_messages = {
        400: 'Invalid request. Please check your input.',
        401: 'Authentication required.',
        403: 'You do not have permission to perform this action.',
        404: 'The requested resource was not found.',
        405: 'This method is not allowed.',
        409: 'Request conflicts with current state.',
        429: 'Too many requests. Please try again later.',
        500: 'An internal error occurred. Please try again later.',
        503: 'Service temporarily unavailable.',
    }

    # Validation errors can be more specific
    if status_code == 400 and hasattr(exc, 'detail'):
        if isinstance(exc.detail, dict):
            for field, errors in exc.detail.items():
                if isinstance(errors, list) and errors:
                    return f"Validation error: {field} - {errors[0]}"
        elif isinstance(exc.detail, str):
            return exc.detail

    return safe_messages.get(status_code, 'An error occurred.')


def _log_security_event(exc, request, view, status_code):
    """Log security-relevant events for monitoring."""
    user_info = 'anonymous'
    if request and hasattr(request, 'user') and request.user.is_authenticated:
        user_info = str(request.user.id)

    ip_address = _get_client_ip(request)
    view_name = view.__class__.__name__ if view else 'unknown'

    security_logger.warning(
        f"Security event: status={status_code}, "
        f"user={user_info}, ip={ip_address}, "
        f"view={view_name}, exception={exc.__class__.__name__}"
    )


def _get_client_ip(request):
    """
    Extract client IP address from request.
    Handles proxy headers (X-Forwarded-For).
    """
    if not request:
        return 'unknown'

    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        return x_forwarded_for.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR', 'unknown')
