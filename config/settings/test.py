"""
Test settings for the family note project.
"""
from .base import *

DEBUG = False

SECRET_KEY = 'test-secret-key'

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

# Run tasks inline, no broker needed
CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'

FAMILY_MAX_REPRESENTATIVES = 3
FAMILY_INVITATION_EXPIRY_DAYS = 7
CREATOR_DATA_PURGE_HANDLER = 'apps.lifecycle.signals.request_creator_data_purge'

LOGGING['loggers']['apps']['level'] = 'WARNING'
LOGGING['loggers']['api']['level'] = 'WARNING'
