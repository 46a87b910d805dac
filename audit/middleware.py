"""
Audit logging middleware for Saathi Backend.

Logs every API request for security monitoring.
"""

import logging
import time
from django.utils import timezone

audit_logger = logging.getLogger('saathi.audit')


class AuditLoggingMiddleware:
    """
    Middleware to log all API requests for audit purposes.

    Captures method, path, user, status code, duration and client IP.
    Action-level logging is done in views using AuditLog.log().
    """

    skip_prefixes = (
        '/static/',
        '/media/',
        '/health/',
        '/favicon.ico',
    )

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        start_time = time.time()
        response = self.get_response(request)
        duration = time.time() - start_time

        if not request.path.startswith(self.skip_prefixes):
            self._log_request(request, response, duration)

        return response

    def _log_request(self, request, response, duration):
        user_id = 'anonymous'
        user_role = 'none'

        if hasattr(request, 'user') and request.user.is_authenticated:
            user_id = str(request.user.id)
            user_role = request.user.role

        log_data = {
            'timestamp': timezone.now().isoformat(),
            'method': request.method,
            'path': request.path,
            'user_id': user_id,
            'user_role': user_role,
            'status_code': response.status_code,
            'duration_ms': round(duration * 1000, 2),
            'ip_address': self._get_client_ip(request),
        }

        if response.status_code >= 500:
            audit_logger.error(f"API Request: {log_data}")
        elif response.status_code >= 400:
            audit_logger.warning(f"API Request: {log_data}")
        else:
            audit_logger.info(f"API Request: {log_data}")

    def _get_client_ip(self, request):
        x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
        if x_forwarded_for:
            return x_forwarded_for.split(',')[0].strip()
        return request.META.get('REMOTE_ADDR', 'unknown')
