import os

DEBUG = False

SECRET_KEY = os.environ['SECRET_KEY']

ALLOWED_HOSTS = os.environ.get('ALLOWED_HOSTS', '').split(',')

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.postgresql',
        'NAME': os.environ.get('DB_NAME', 'clubdues'),
        'USER': os.environ.get('DB_USER', 'clubdues'),
        'PASSWORD': os.environ['DB_PASSWORD'],
        'HOST': os.environ.get('DB_HOST', 'localhost'),
        'PORT': os.environ.get('DB_PORT', '5432'),
        'CONN_MAX_AGE': 60,
    }
}

# Copy this file to prod.py and adjust the unit fees if the club changes them
DUES_FIXED_UNIT_FEE = 180
DUES_SINGLE_UNIT_FEE = 220

ADMINS = [
    ('admin', os.environ.get('ADMIN_EMAIL', 'admin@example.com'))
]
