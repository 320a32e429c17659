"""
Startup diagnostics — runs once when the Flask app starts.

Checks critical dependencies and logs a summary banner.
"""

import logging
import sys

from flask import Flask
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import SQLAlchemyError

from producthub.models import db

logger = logging.getLogger(__name__)


def run_startup_diagnostics(app: Flask):
    """Run diagnostic checks during app startup (inside app context)."""
    if app.config.get("TESTING"):
        return  # skip during tests for speed

    issues: list[str] = []

    with app.app_context():
        # ── Python version ───────────────────────────────────────────
        py = f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"

        # ── Database connectivity ────────────────────────────────────
        db_status = "ok"
        db_uri = str(app.config.get("SQLALCHEMY_DATABASE_URI", ""))
        db_type = "PostgreSQL" if "postgresql" in db_uri else "SQLite" if "sqlite" in db_uri else "unknown"
        try:
            db.session.execute(db.text("SELECT 1"))
        except SQLAlchemyError as exc:
            db_status = "FAILED"
            issues.append(f"Database unreachable: {exc}")

        # ── Table count ──────────────────────────────────────────────
        try:
            table_count = len(sa_inspect(db.engine).get_table_names())
            if table_count == 0:
                issues.append("No tables found — run 'flask db upgrade'")
        except SQLAlchemyError:
            table_count = "?"

        # ── Rate limiter storage ─────────────────────────────────────
        limiter_storage = "redis" if "redis" in (app.config.get("RATELIMIT_STORAGE_URI") or "") else "memory"

        # ── Module catalog ───────────────────────────────────────────
        from producthub.services.module_service import list_active_modules
        try:
            module_count = len(list_active_modules())
            if module_count == 0:
                issues.append("Module catalog is empty — run 'flask seed-modules'")
        except SQLAlchemyError:
            module_count = "?"

        logger.info(
            "Startup diagnostics: python=%s env=%s debug=%s database=%s (%s) "
            "tables=%s modules=%s rate_limit_storage=%s",
            py, app.config.get("APP_ENV", "development"), app.debug,
            db_type, db_status, table_count, module_count, limiter_storage,
        )

        if issues:
            logger.warning("Startup issues detected:")
            for issue in issues:
                logger.warning("  ⚠ %s", issue)
        else:
            logger.info("All startup checks passed")
