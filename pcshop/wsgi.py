"""
WSGI config for the PC Shop project.
"""
import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'pcshop.settings')

application = get_wsgi_application()
