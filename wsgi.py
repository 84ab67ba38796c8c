"""
WSGI entry point for PoolStrip CV Service.

Usage:
    gunicorn -w 4 -b 0.0.0.0:5000 wsgi:application

Each worker builds its own read-only palette and layout tables at import,
so workers never share mutable state.
"""

from app import app

application = app
