"""
Flask CLI commands: module seeding and global admin bootstrap.
"""

from producthub.models import db
from producthub.models.auth import User
from producthub.models.product import DEFAULT_MODULES, Module


def test_seed_modules_is_idempotent(app):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["seed-modules"])
    assert result.exit_code == 0
    assert f"Seeded {len(DEFAULT_MODULES)} new module(s)." in result.output

    result = runner.invoke(args=["seed-modules"])
    assert "Seeded 0 new module(s)." in result.output
    assert db.session.query(Module).count() == len(DEFAULT_MODULES)


def test_create_global_admin(app):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["create-global-admin", "Root@Example.com", "s3cret-pw", "HQ"])
    assert result.exit_code == 0, result.output

    user = db.session.query(User).filter_by(email="root@example.com").one()
    assert user.is_global_superadmin
    assert user.is_superadmin
    assert user.organization.name == "HQ"


def test_create_global_admin_rejects_bad_input(app):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["create-global-admin", "not-an-email", "s3cret-pw", "HQ"])
    assert result.exit_code != 0
    assert "Error" in result.output
    assert db.session.query(User).count() == 0
