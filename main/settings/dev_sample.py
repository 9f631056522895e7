DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.postgresql',
        'NAME': 'clubdues',
        'USER': 'clubdues',
        'PASSWORD': 'clubdues',
        'HOST': 'localhost',
        'PORT': '5432',
    }
}

# CREATE DATABASE clubdues;
# CREATE USER clubdues WITH PASSWORD 'clubdues';
# ALTER USER clubdues CREATEDB;
# ALTER DATABASE clubdues OWNER TO clubdues;
# GRANT ALL PRIVILEGES ON DATABASE clubdues TO clubdues;

ADMINS = [
    ('test', 'test@test.it')
]
