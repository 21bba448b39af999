"""
WSGI Application Entry Point

    gunicorn -c gunicorn.conf.py wsgi:application

Viewer sessions live in process memory, so run a single worker process
(gunicorn.conf.py defaults to one gthread worker).
"""
import os
import sys

# Allow running from a checkout without installing the package
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "src"))

from portfolio_viewer.app import configure_logging, create_app

configure_logging()

app = create_app()

# WSGI application
application = app

if __name__ == "__main__":
    app.run()
