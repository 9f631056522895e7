import os

from .base import *

if os.getenv("DB_HOST"):
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.postgresql',
            'NAME': 'clubdues',
            'USER': 'clubdues',
            'PASSWORD': 'clubdues',
            "HOST": os.getenv("DB_HOST"),
            'PORT': '5432',
        }
    }

    name = os.getenv("POSTGRES_DB", "clubdues_test")
    worker = os.getenv("PYTEST_XDIST_WORKER")
    if worker:
        name = f"{name}_{worker}"
    DATABASES["default"]["TEST"] = {"NAME": name}
else:
    DATABASES = {
        'default': {
            'ENGINE': 'django.db.backends.sqlite3',
            'NAME': ':memory:',
        }
    }

DEBUG = False
EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'
PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': 'WARN',
    },
}

ADMINS = [
    ('test', 'test@test.it')
]
