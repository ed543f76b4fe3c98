"""
Django settings for pmhub.

The migration config file (``migrate-config.yaml`` beside manage.py, or the
path in ``PMHUB_MIGRATE_CONFIG``) supplies both database connections: the
target store becomes ``default`` and the legacy ZenTao database becomes
``legacy``. Without it a local sqlite file is used and no legacy alias exists.
"""
import os
from pathlib import Path

from tracker.migration.config import load_config

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get('DJANGO_SECRET_KEY', 'django-insecure-pmhub-dev-key')
DEBUG = os.environ.get('DJANGO_DEBUG', 'false').lower() == 'true'
ALLOWED_HOSTS = []

INSTALLED_APPS = [
    'tracker',
]

MIDDLEWARE = []

# Database
MIGRATE_CONFIG_PATH = Path(
    os.environ.get('PMHUB_MIGRATE_CONFIG', BASE_DIR / 'migrate-config.yaml')
)

if MIGRATE_CONFIG_PATH.exists():
    DATABASES = load_config(MIGRATE_CONFIG_PATH).django_databases(BASE_DIR)
else:
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': BASE_DIR / 'db.sqlite3',
        }
    }

DATABASE_ROUTERS = ['tracker.routers.LegacyRouter']

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# Internationalization
LANGUAGE_CODE = 'en-us'
TIME_ZONE = os.environ.get('TIME_ZONE', 'UTC')
USE_I18N = True
USE_TZ = True

# Logging
LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '%(asctime)s - %(levelname)s - %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
        'file': {
            'class': 'logging.FileHandler',
            'filename': BASE_DIR / 'migration.log',
            'mode': 'a',
            'encoding': 'utf-8',
            'formatter': 'verbose',
        },
    },
    'loggers': {
        'tracker': {
            'handlers': ['console', 'file'],
            'level': LOG_LEVEL,
            'propagate': False,
        },
    },
}
