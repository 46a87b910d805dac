"""
URL configuration for Saathi Backend.

API Structure:
- /api/v1/auth/           - JWT token endpoints
- /api/v1/cases/          - SOS intake and case lifecycle
- /api/v1/dispatch/       - Nearby officers/stations, assignment retry
- /api/v1/responders/     - Officer positions
- /api/v1/notifications/  - In-app notifications
- /admin/                 - Django admin (stations, officers)
"""

from django.contrib import admin
from django.http import JsonResponse
from django.urls import include, path


def health_check(request):
    """Health check endpoint for load balancers."""
    return JsonResponse({
        'status': 'healthy',
        'service': 'saathi-backend'
    })


def api_root(request):
    """API root endpoint with version info."""
    return JsonResponse({
        'name': 'Saathi Dispatch API',
        'version': 'v1',
        'endpoints': {
            'auth': '/api/v1/auth/',
            'cases': '/api/v1/cases/',
            'dispatch': '/api/v1/dispatch/',
            'responders': '/api/v1/responders/',
            'notifications': '/api/v1/notifications/',
        }
    })


urlpatterns = [
    path('health/', health_check, name='health-check'),

    path('api/v1/', api_root, name='api-root'),

    path('api/v1/auth/', include('authentication.urls', namespace='auth')),
    path('api/v1/cases/', include('cases.urls', namespace='cases')),
    path('api/v1/dispatch/', include('dispatch.urls', namespace='dispatch')),
    path('api/v1/responders/', include('responders.urls', namespace='responders')),
    path('api/v1/notifications/', include('notifications.urls', namespace='notifications')),

    path('admin/', admin.site.urls),
]
