"""Settings used by the test suite."""

from .base import *  # noqa: F401,F403

DEBUG = False

TEST_DB_ENGINE = os.environ.get('TEST_DB_ENGINE', 'django.db.backends.sqlite3')  # noqa: F405

DATABASES = {
    'default': {
        'ENGINE': TEST_DB_ENGINE,
        'NAME': os.environ.get('TEST_DB_NAME', BASE_DIR / 'test_db.sqlite3'),  # noqa: F405
        'USER': os.environ.get('DB_USER', ''),  # noqa: F405
        'PASSWORD': os.environ.get('DB_PASSWORD', ''),  # noqa: F405
        'HOST': os.environ.get('DB_HOST', ''),  # noqa: F405
        'PORT': os.environ.get('DB_PORT', ''),  # noqa: F405
    }
}

if TEST_DB_ENGINE == 'django.db.backends.sqlite3':
    DATABASES['default']['OPTIONS'] = {'transaction_mode': 'IMMEDIATE', 'timeout': 20}
    # Threads get their own connections; a shared in-memory database locks whole tables
    DATABASES['default']['TEST'] = {'NAME': str(BASE_DIR / 'test_db.sqlite3')}  # noqa: F405

TIME_ZONE = 'Asia/Kolkata'

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

STORAGES = {
    'default': {'BACKEND': 'django.core.files.storage.FileSystemStorage'},
    'staticfiles': {'BACKEND': 'django.contrib.staticfiles.storage.StaticFilesStorage'},
}

# Tasks run inline; nothing talks to Redis
CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'

FACILITIES = {
    'SLOT_MINUTES': 45,
    'MAX_SLOTS_PER_DAY': 16,
    'LAST_SLOT_HOUR': 23,
    'GRACE_PERIOD_MINUTES': 15,
    'MINIMUM_USABLE_MINUTES': 25,
    'REAPER_INTERVAL_SECONDS': 60,
}

LOGGING['root']['level'] = 'CRITICAL'  # noqa: F405
LOGGING['handlers']['console']['level'] = 'CRITICAL'  # noqa: F405
