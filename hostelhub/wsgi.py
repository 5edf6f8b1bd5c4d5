"""WSGI config for the hostelhub project."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'hostelhub.settings')

application = get_wsgi_application()
