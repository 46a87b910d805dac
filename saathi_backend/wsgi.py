"""
WSGI config for Saathi Backend.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'saathi_backend.settings')

application = get_wsgi_application()
