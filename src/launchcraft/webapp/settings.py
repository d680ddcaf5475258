"""
Django settings for the LaunchCraft API.

Only the API surface is served: no templates, static files or sessions.
"""

import os

from django.core.management.utils import get_random_secret_key

from launchcraft.core.config import Config

_config = Config.load()

# A random key is fine for local use; set LAUNCHCRAFT_SECRET_KEY for anything shared
SECRET_KEY = _config.secret_key or get_random_secret_key()

DEBUG = os.getenv("LAUNCHCRAFT_DEBUG", "").lower() in ("1", "true", "yes")

ALLOWED_HOSTS = [
    host.strip()
    for host in os.getenv("LAUNCHCRAFT_ALLOWED_HOSTS", "localhost,127.0.0.1,[::1]").split(",")
    if host.strip()
]

INSTALLED_APPS = [
    "django.contrib.contenttypes",
    "django.contrib.auth",
    "rest_framework",
    "corsheaders",
]

MIDDLEWARE = [
    "corsheaders.middleware.CorsMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "launchcraft.webapp.urls"

WSGI_APPLICATION = "launchcraft.webapp.wsgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

USE_TZ = True

# REST Framework configuration
REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [
        "rest_framework.permissions.AllowAny",
    ],
    "UNAUTHENTICATED_USER": None,
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",
    ],
    "DEFAULT_PARSER_CLASSES": [
        "rest_framework.parsers.JSONParser",
    ],
}

# CORS settings
CORS_ALLOW_ALL_ORIGINS = True
CORS_ALLOW_METHODS = ["POST", "OPTIONS"]
CORS_ALLOW_HEADERS = ["content-type"]

# Package loggers are configured by launchcraft.core.logging
LOGGING_CONFIG = None

DATA_UPLOAD_MAX_MEMORY_SIZE = 1048576  # 1MB
