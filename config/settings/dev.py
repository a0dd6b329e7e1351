"""Development settings for the SportBook project.

Extends the base settings with debug mode, open hosts and a
human-readable console log renderer. Do not use these settings in
production!
"""

import structlog

from .base import *  # noqa: F401,F403

DEBUG = True

ALLOWED_HOSTS = ['*']

LOGGING["formatters"]["json"]["processor"] = structlog.dev.ConsoleRenderer()  # noqa: F405
