"""
Settings for the test run.

Fast password hashing, no throttling, quiet logging and an in-memory
database.
"""

import os

os.environ.setdefault('SECRET_KEY', 'saathi-test-secret-key-not-for-production')
os.environ.setdefault('DEBUG', 'False')

from .settings import *  # noqa: E402,F401,F403

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

SECURE_SSL_REDIRECT = False
SESSION_COOKIE_SECURE = False
CSRF_COOKIE_SECURE = False

REST_FRAMEWORK = {
    **REST_FRAMEWORK,  # noqa: F405
    'DEFAULT_THROTTLE_CLASSES': [],
    'DEFAULT_RENDERER_CLASSES': ['rest_framework.renderers.JSONRenderer'],
}

OFFICER_ASSIGNMENT = {
    'AUTO_ASSIGN_ENABLED': True,
    'MAX_DISTANCE_KM': 10.0,
    'MAX_COMMIT_ATTEMPTS': 3,
    'LOCATION_STALE_MINUTES': 30,
}

LOCATION_TRACKING = {
    'HISTORY_LIMIT': 100,
    'RETENTION_DAYS': 7,
}

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'handlers': {
        'null': {'class': 'logging.NullHandler'},
    },
    'root': {'handlers': ['null']},
}
