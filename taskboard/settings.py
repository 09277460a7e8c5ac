"""
Django settings for the taskboard API.

Values come from the environment (or .env) through taskboard.config.
"""
from datetime import timedelta
from pathlib import Path

from taskboard.config import settings as config

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = config.SECRET_KEY
DEBUG = config.DEBUG
ALLOWED_HOSTS = [host.strip() for host in config.ALLOWED_HOSTS.split(",") if host.strip()]

INSTALLED_APPS = [
    'django.contrib.contenttypes',
    'django.contrib.auth',
    'corsheaders',
    'rest_framework',
    'drf_spectacular',
    'task',
    'user',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'corsheaders.middleware.CorsMiddleware',
    'django.middleware.common.CommonMiddleware',
    'taskboard.middleware.RequestLoggingMiddleware',
]

ROOT_URLCONF = 'taskboard.urls'
WSGI_APPLICATION = 'taskboard.wsgi.application'

# Records live in MongoDB (or the in-memory fallback), not in a SQL database.
DATABASES = {}

MONGODB_URI = config.MONGODB_URI
MONGODB_DB_NAME = config.MONGODB_DB_NAME
MONGODB_TIMEOUT_MS = config.MONGODB_TIMEOUT_MS

LANGUAGE_CODE = 'en-us'
TIME_ZONE = config.TIME_ZONE
USE_I18N = True
USE_TZ = True

DEFAULT_AUTO_FIELD = 'django.db.models.BigAutoField'

# CORS
CORS_ALLOWED_ORIGINS = [origin.strip() for origin in config.CORS_ORIGINS.split(",") if origin.strip()]
CORS_ALLOW_CREDENTIALS = True

REST_FRAMEWORK = {
    'DEFAULT_AUTHENTICATION_CLASSES': [
        'taskboard.jwt_auth.StoreJWTAuthentication',
    ],
    'DEFAULT_PERMISSION_CLASSES': [
        'rest_framework.permissions.IsAuthenticated',
    ],
    'DEFAULT_RENDERER_CLASSES': [
        'rest_framework.renderers.JSONRenderer',
    ],
    'DEFAULT_SCHEMA_CLASS': 'drf_spectacular.openapi.AutoSchema',
    'EXCEPTION_HANDLER': 'taskboard.exceptions.api_exception_handler',
    'UNAUTHENTICATED_USER': None,
}

SIMPLE_JWT = {
    'ACCESS_TOKEN_LIFETIME': timedelta(minutes=config.ACCESS_TOKEN_MINUTES),
    'REFRESH_TOKEN_LIFETIME': timedelta(days=config.REFRESH_TOKEN_DAYS),
    'ALGORITHM': 'HS256',
    'SIGNING_KEY': config.JWT_SECRET,
    'ISSUER': config.JWT_ISSUER,
    'AUDIENCE': config.JWT_AUDIENCE,
    'AUTH_HEADER_TYPES': ('Bearer',),
    'USER_ID_FIELD': 'id',
    'USER_ID_CLAIM': 'user_id',
    'UPDATE_LAST_LOGIN': False,
}

# Refresh token cookie
REFRESH_COOKIE_NAME = 'refresh_token'
REFRESH_COOKIE_PATH = '/api/auth/'
REFRESH_COOKIE_MAX_AGE = config.REFRESH_TOKEN_DAYS * 24 * 60 * 60
REFRESH_COOKIE_SECURE = not DEBUG

SPECTACULAR_SETTINGS = {
    'TITLE': 'Taskboard API',
    'DESCRIPTION': 'Tasks, priority boards and authentication',
    'VERSION': '1.0.0',
    'SERVE_INCLUDE_SCHEMA': False,
}

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'verbose': {
            'format': '%(asctime)s %(levelname)s %(name)s: %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'verbose',
        },
    },
    'root': {
        'handlers': ['console'],
        'level': config.LOG_LEVEL,
    },
    'loggers': {
        'django': {
            'handlers': ['console'],
            'level': 'WARNING',
            'propagate': False,
        },
    },
}
