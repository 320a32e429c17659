"""
Product Hub data models.

``db`` is the single Flask-SQLAlchemy extension instance; the app factory
binds it with ``db.init_app(app)`` and imports every model module so that
``db.create_all()`` and Alembic autogenerate see the full metadata.
"""

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
