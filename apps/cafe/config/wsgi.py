"""
WSGI config for the cafe ordering backend.
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "apps.cafe.config.settings")

application = get_wsgi_application()
