# config/settings/test.py
from .base import *  # noqa: F401,F403

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

TIME_ZONE = 'UTC'

# Let pytest's caplog see application records
for _logger in LOGGING['loggers'].values():
    _logger['handlers'] = []
    _logger['propagate'] = True
