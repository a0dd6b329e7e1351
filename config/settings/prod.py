"""Production settings for the SportBook project.

Sensitive values must be provided via environment variables. PostgreSQL
is expected in production (`DB_ENGINE=django.db.backends.postgresql`) so
that the facility row lock taken by the reservation guard is a real
`SELECT ... FOR UPDATE`.
"""

from .base import *  # noqa: F401,F403

DEBUG = False

ALLOWED_HOSTS = os.environ.get('DJANGO_ALLOWED_HOSTS', '').split(',')  # noqa: F405

CSRF_COOKIE_SECURE = True
SESSION_COOKIE_SECURE = True

DATABASES['default']['CONN_MAX_AGE'] = int(os.environ.get('DB_CONN_MAX_AGE', 60))  # noqa: F405
