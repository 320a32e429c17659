"""
Shared column helpers for Product Hub models.

TimestampMixin adds created_at / updated_at with UTC defaults, and
iso() renders nullable datetimes for to_dict() payloads.
"""

from datetime import datetime, timezone

from producthub.models import db


def utcnow():
    return datetime.now(timezone.utc)


def iso(value):
    """Render a date/datetime as ISO-8601, or None."""
    return value.isoformat() if value else None


class TimestampMixin:
    """created_at / updated_at columns maintained by SQLAlchemy defaults."""

    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)
