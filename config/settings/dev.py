"""Development settings for the hostel facilities project.

This module extends the base settings with development specific
configuration, such as enabling debug and allowing all hosts. Do not use
these settings in production!
"""

from .base import *  # noqa: F401,F403

# Enable debug mode for development
DEBUG = True

# Allow all hosts in development
ALLOWED_HOSTS = ['*']

# Readable console output instead of JSON lines
LOGGING['formatters']['json']['processors'] = [  # noqa: F405
    structlog.stdlib.ProcessorFormatter.remove_processors_meta,  # noqa: F405
    structlog.dev.ConsoleRenderer(colors=False),  # noqa: F405
]
