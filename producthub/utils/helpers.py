"""Shared utility functions used by services and blueprints.

parse_date:        lenient date parsing for roadmap item windows
parse_int:         strict integer coercion for JSON payload fields
commit_or_raise:   commit the session, translating IntegrityError to ConflictError
"""
import logging
from datetime import date, datetime

from sqlalchemy.exc import IntegrityError

from producthub.core.exceptions import ConflictError, ValidationError
from producthub.models import db

logger = logging.getLogger(__name__)


def parse_date(value):
    """Parse a date string (ISO or DD.MM.YYYY) to a date object.

    Returns None for empty/invalid input. Supports:
    - YYYY-MM-DD (ISO format)
    - YYYY-MM-DDTHH:MM:SS (datetime ISO → .date())
    - DD.MM.YYYY (European format)
    """
    if not value:
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except (ValueError, TypeError):
        pass
    try:
        return datetime.fromisoformat(str(value)).date()
    except (ValueError, TypeError):
        pass
    try:
        return datetime.strptime(str(value), "%d.%m.%Y").date()
    except (ValueError, TypeError):
        return None


def parse_int(value, field, *, minimum=None, maximum=None, required=True):
    """Coerce a JSON payload value to int or raise ValidationError.

    Booleans and non-integral floats (``2.9``) are rejected; ``2.0`` is
    accepted as 2.
    """
    if value is None or value == "":
        if required:
            raise ValidationError(f"{field} is required", details={field: "required"})
        return None
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValidationError(f"{field} must be an integer", details={field: "invalid"})
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an integer", details={field: "invalid"})
    if minimum is not None and number < minimum:
        raise ValidationError(f"{field} must be >= {minimum}", details={field: "out_of_range"})
    if maximum is not None and number > maximum:
        raise ValidationError(f"{field} must be <= {maximum}", details={field: "out_of_range"})
    return number


# ── Database commit helper ───────────────────────────────────────────────────

def commit_or_raise(resource, field, value=None):
    """Commit the current session; a unique-constraint race becomes ConflictError.

    The application-level duplicate check runs before this call, so an
    IntegrityError here means a concurrent writer won the race.

    Usage::

        db.session.add(role)
        commit_or_raise("Role", "name", role.name)
    """
    try:
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        logger.warning("Integrity error on commit (%s.%s): %s", resource, field, exc.orig)
        raise ConflictError(resource=resource, field=field, value=value) from exc
