import os

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.postgresql',
        'NAME': 'clubdues',
        'USER': 'clubdues',
        'PASSWORD': 'clubdues',
        "HOST": os.getenv("DB_HOST", "postgres"),
        'PORT': '5432',
        'TEST': {
            'NAME': 'test_clubdues',
        },
   }
}

name = os.getenv("POSTGRES_DB", "clubdues_test")
worker = os.getenv("PYTEST_XDIST_WORKER")
if worker:
    name = f"{name}_{worker}"
    DATABASES["default"]["NAME"] = name
    DATABASES["default"]["TEST"] = {"NAME": name}

DEBUG = False
EMAIL_BACKEND = 'django.core.mail.backends.locmem.EmailBackend'

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
        'level': 'DEBUG',
    },
}

ADMINS = [
    ('test', 'test@test.it')
]
