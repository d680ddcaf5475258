"""WSGI entry point for the LaunchCraft API."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "launchcraft.webapp.settings")

application = get_wsgi_application()
