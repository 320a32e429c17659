"""
Product Hub
Flask Application Factory.

Usage:
    from producthub import create_app
    app = create_app()           # defaults to "development"
    app = create_app("testing")  # explicit config
"""

import logging
import os

import click
from flask import Flask
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate

from producthub.config import config
from producthub.models import db
from producthub.middleware.logging_config import configure_logging
from producthub.middleware.timing import init_request_timing
from producthub.middleware.diagnostics import run_startup_diagnostics
from producthub.middleware.error_handlers import init_error_handlers
from producthub.middleware.security_headers import init_security_headers
from producthub.middleware.rate_limiter import init_rate_limits
from producthub.middleware.jwt_auth import init_jwt_middleware
from producthub.middleware.tenant_context import init_tenant_context

logger = logging.getLogger(__name__)

# ── SQLite FK enforcement (global engine event) ─────────────────────────
from sqlalchemy import event as _sa_event, engine as _sa_engine


@_sa_event.listens_for(_sa_engine.Engine, "connect")
def _enable_sqlite_fk(dbapi_conn, connection_record):
    """Enable foreign key enforcement for SQLite connections."""
    if "sqlite" in type(dbapi_conn).__module__:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

migrate = Migrate()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[],  # per-blueprint limits only; storage from RATELIMIT_STORAGE_URI
)


def create_app(config_name=None):
    """
    Create and configure the Flask application.

    Args:
        config_name: Configuration environment name.
                     One of: "development", "testing", "production".
                     Defaults to APP_ENV env var, or "development" if unset.

    Returns:
        Configured Flask application instance.
    """
    if config_name is None:
        config_name = os.getenv("APP_ENV", "development")

    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config[config_name])

    # ── Structured logging (must be first) ───────────────────────────────
    configure_logging(app)

    if str(app.config.get("SQLALCHEMY_DATABASE_URI", "")).startswith("sqlite:///") and not app.testing:
        os.makedirs(os.path.join(os.path.dirname(app.root_path), "instance"), exist_ok=True)

    # ── Extensions ───────────────────────────────────────────────────────
    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)
    cors_origins = app.config.get("CORS_ORIGINS", "*")
    if cors_origins and cors_origins != "*":
        CORS(app, origins=[o.strip() for o in cors_origins.split(",") if o.strip()])
    else:
        CORS(app)

    # ── Security headers (CSP, HSTS, X-Frame-Options, etc.) ─────────────
    init_security_headers(app)

    # ── Request timing middleware ────────────────────────────────────────
    init_request_timing(app)

    # ── JWT auth middleware → tenant context (sets g.principal) ──────────
    init_jwt_middleware(app)
    init_tenant_context(app)

    # ── Request guards (input length + Content-Type) ─────────────────────
    @app.before_request
    def _guard_request():
        from flask import request as _req, abort
        # Input length cap
        max_len = app.config.get("MAX_CONTENT_LENGTH")
        if max_len and _req.content_length and _req.content_length > max_len:
            abort(413, description="Request body too large")
        # Content-Type validation for mutating methods
        if _req.method in ("POST", "PUT", "PATCH") and _req.path.startswith("/api/"):
            ct = _req.content_type or ""
            if _req.data and "json" not in ct:
                abort(415, description="Content-Type must be application/json")

    # ── Error handlers (domain exceptions + HTTP errors → JSON) ─────────
    init_error_handlers(app)

    # ── Import all models so Alembic can detect them ─────────────────────
    from producthub.models import auth as _auth_models          # noqa: F401
    from producthub.models import product as _product_models    # noqa: F401
    from producthub.models import backlog as _backlog_models    # noqa: F401
    from producthub.models import roadmap as _roadmap_models    # noqa: F401
    from producthub.models import capacity as _capacity_models  # noqa: F401

    # ── Auto-create tables (CREATE IF NOT EXISTS) ──
    with app.app_context():
        try:
            db.create_all()
            app.logger.info("db.create_all() completed successfully")
        except Exception as e:
            app.logger.warning("db.create_all() failed: %s", e)

    # ── Blueprints ───────────────────────────────────────────────────────
    from producthub.blueprints.health_bp import health_bp
    from producthub.blueprints.auth_bp import auth_bp
    from producthub.blueprints.admin_bp import admin_bp
    from producthub.blueprints.organizations_bp import organizations_bp
    from producthub.blueprints.product_bp import product_bp
    from producthub.blueprints.roadmap_bp import roadmap_bp
    from producthub.blueprints.capacity_bp import capacity_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(organizations_bp)
    app.register_blueprint(product_bp)
    app.register_blueprint(roadmap_bp)
    app.register_blueprint(capacity_bp)

    # ── CLI commands ─────────────────────────────────────────────────────
    @app.cli.command("seed-modules")
    def seed_modules_cmd():
        """Seed the default module catalog (idempotent)."""
        from producthub.services.module_service import seed_default_modules
        count = seed_default_modules()
        db.session.commit()
        logger.info("Seeded %s new modules.", count)
        click.echo(f"Seeded {count} new module(s).")

    @app.cli.command("create-global-admin")
    @click.argument("email")
    @click.argument("password")
    @click.argument("org_name")
    def create_global_admin_cmd(email, password, org_name):
        """Create a global superadmin in ORG_NAME (created when missing)."""
        from producthub.core.exceptions import ConflictError, ValidationError
        from producthub.services.organization_service import create_global_admin
        try:
            user = create_global_admin(email, password, org_name)
        except (ConflictError, ValidationError) as exc:
            raise click.ClickException(str(exc))
        click.echo(f"Global superadmin {user.email} created (id={user.id}).")

    # ── Startup diagnostics ──────────────────────────────────────────────
    run_startup_diagnostics(app)

    # ── Rate limiting (after blueprints registered) ──────────────────────
    init_rate_limits(app, limiter)

    return app
