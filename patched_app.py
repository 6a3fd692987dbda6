"""
Gevent-patched application entrypoint.

gevent.monkey.patch_all() must run before anything imports socket, ssl
or the Redis client, so this module is the gunicorn target in production:

    gunicorn -k gevent -w 1 patched_app:app
"""

# Monkey-patch FIRST, before ANY other imports
from gevent import monkey
monkey.patch_all()

import os  # noqa: E402

from classifieds import create_app  # noqa: E402

# socketio.init_app already wraps the WSGI app with the Socket.IO middleware
application = create_app(os.getenv('FLASK_ENV', 'production'))

# For compatibility, also expose as 'app'
app = application
