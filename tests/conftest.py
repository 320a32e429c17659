"""
Shared pytest fixtures for the Product Hub test suite.

Provides:
    - app: Flask application (session-scoped)
    - _setup_db: Database table creation/teardown (session-scoped)
    - session: Per-test DB cleanup w/ rollback + recreate (autouse)
    - client: Flask test client (function-scoped)
    - modules: Seeded module catalog
    - make_org / make_user / make_product: entity factories
    - auth_headers: Bearer header for a user
"""

import pytest

from producthub import create_app
from producthub.models import db as _db
from producthub.models.auth import Organization, User
from producthub.models.product import Product, ProductModule
from producthub.services.jwt_service import generate_access_token
from producthub.services.module_service import list_active_modules, seed_default_modules
from producthub.utils.crypto import hash_password

DEFAULT_PASSWORD = "password123"

# bcrypt at 12 rounds is slow; hash the shared test password once per run.
_PASSWORD_HASH = None


def _password_hash():
    global _PASSWORD_HASH
    if _PASSWORD_HASH is None:
        _PASSWORD_HASH = hash_password(DEFAULT_PASSWORD)
    return _PASSWORD_HASH


# ── App & DB fixtures ────────────────────────────────────────────────────


@pytest.fixture(scope="session")
def app():
    """Create the Flask application once per test session."""
    application = create_app("testing")
    return application


@pytest.fixture(scope="session")
def _setup_db(app):
    """Create all tables at session start, drop at end."""
    with app.app_context():
        _db.create_all()
    yield
    with app.app_context():
        _db.drop_all()


@pytest.fixture(autouse=True)
def session(app, _setup_db):
    """Per-test: open app context, rollback after test, recreate tables."""
    with app.app_context():
        yield
        _db.session.rollback()
        _db.drop_all()
        _db.create_all()


@pytest.fixture()
def client(app):
    """Flask test client."""
    return app.test_client()


# ── Factories ────────────────────────────────────────────────────────────


@pytest.fixture()
def modules():
    """Seed and return the default module catalog."""
    seed_default_modules()
    _db.session.commit()
    return list_active_modules()


@pytest.fixture()
def make_org():
    def _make(name="Acme"):
        org = Organization(name=name)
        _db.session.add(org)
        _db.session.commit()
        return org
    return _make


@pytest.fixture()
def make_user():
    def _make(email, org=None, *, superadmin=False, global_admin=False, role=None):
        user = User(
            email=email,
            password_hash=_password_hash(),
            organization=org,
            is_superadmin=superadmin or global_admin,
            is_global_superadmin=global_admin,
            role=role,
        )
        _db.session.add(user)
        _db.session.commit()
        return user
    return _make


@pytest.fixture()
def make_product():
    """Create a product owned by ``owner`` with one ProductModule per given module."""
    def _make(owner, name="Product", modules=()):
        product = Product(name=name, owner=owner, organization_id=owner.organization_id)
        _db.session.add(product)
        for module in modules:
            product.product_modules.append(ProductModule(module=module))
        _db.session.commit()
        return product
    return _make


@pytest.fixture()
def auth_headers():
    def _headers(user):
        return {"Authorization": f"Bearer {generate_access_token(user)}"}
    return _headers


# ── Convenience fixtures ─────────────────────────────────────────────────


@pytest.fixture()
def org(make_org):
    return make_org("Acme")


@pytest.fixture()
def other_org(make_org):
    return make_org("Globex")


@pytest.fixture()
def admin(make_user, org):
    """Org admin (superadmin) of ``org``."""
    return make_user("admin@example.com", org, superadmin=True)


@pytest.fixture()
def member(make_user, org):
    """Regular user of ``org``."""
    return make_user("member@example.com", org)


@pytest.fixture()
def global_admin(make_user, org):
    return make_user("root@example.com", org, global_admin=True)


@pytest.fixture()
def product(make_product, member, modules):
    """Product owned by ``member`` with every catalog module."""
    return make_product(member, "Checkout", modules)
