# config/settings/test.py

from .base import *

# === TESTES ===

DEBUG = False

SECRET_KEY = 'test-secret-key'

ALLOWED_HOSTS = ['testserver', 'localhost']

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'ticketboard-test-cache',
    }
}

CHANNEL_LAYERS = {
    'default': {
        'BACKEND': 'channels.layers.InMemoryChannelLayer'
    }
}

# Hash rápido para criação de usuários nos testes
PASSWORD_HASHERS = ['django.contrib.auth.hashers.MD5PasswordHasher']

# Logs só no console, sem arquivo
LOGGING['handlers'] = {
    'console': {
        'level': 'WARNING',
        'class': 'logging.StreamHandler',
        'formatter': 'simple',
    },
}
LOGGING['root']['handlers'] = ['console']
LOGGING['loggers']['django']['handlers'] = ['console']
LOGGING['loggers']['apps']['handlers'] = ['console']
LOGGING['loggers']['apps']['propagate'] = True
