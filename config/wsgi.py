# config/wsgi.py

import os
from django.core.wsgi import get_wsgi_application

# Apenas HTTP (API JSON + admin). WebSocket do board exige ASGI: daphne config.asgi:application
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.production')

application = get_wsgi_application()
