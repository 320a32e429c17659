"""
Flask-Migrate / Alembic entry point.

Usage:
    flask db init       # first time only (creates migrations/)
    flask db migrate -m "description"
    flask db upgrade
    flask seed-modules
    flask create-global-admin admin@example.com 'secret' 'Acme'
"""

from producthub import create_app

app = create_app()
