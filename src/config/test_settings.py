"""
Settings para a suíte de testes.

Banco SQLite em memória, cache local e publisher em memória: os
testes não dependem de PostgreSQL, Redis nem RabbitMQ.
"""

from .settings import *  # noqa: F401,F403

DEBUG = False

DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': ':memory:',
    }
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
        'LOCATION': 'testes',
    }
}

PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

EVENT_PUBLISHER_MODE = 'memory'

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True

PROTOCOLO_SLA_HORAS = {
    'ALTA': 24,
    'MEDIA': 48,
    'BAIXA': 72,
}

LOGGING['root']['level'] = 'WARNING'  # noqa: F405
