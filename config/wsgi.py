"""WSGI entrypoint for companion-studio (gunicorn config.wsgi on Render)."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")

application = get_wsgi_application()
