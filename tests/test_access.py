"""
Principal resolution & authorization gate unit tests.

The gate never trusts privilege claims from the token: resolve_principal
always re-reads the user row.
"""

import pytest

from producthub.core.exceptions import AuthenticationError, ForbiddenError
from producthub.services.access import (
    Principal,
    require_global_admin,
    require_org_admin,
    require_self_or_above,
    resolve_principal,
)


def _principal(user_id=1, org_id=1, superadmin=False, global_admin=False):
    return Principal(
        user_id=user_id, organization_id=org_id,
        is_superadmin=superadmin, is_global_superadmin=global_admin,
    )


class TestResolvePrincipal:
    def test_missing_claims(self):
        with pytest.raises(AuthenticationError):
            resolve_principal(None)
        with pytest.raises(AuthenticationError):
            resolve_principal({})

    def test_unknown_user(self):
        with pytest.raises(AuthenticationError):
            resolve_principal({"sub": 4242})

    def test_uses_current_row_not_claims(self, member):
        principal = resolve_principal({
            "sub": member.id,
            "is_superadmin": True,
            "is_global_superadmin": True,
            "organization_id": 999,
        })
        assert principal.user_id == member.id
        assert principal.organization_id == member.organization_id
        assert principal.is_superadmin is False
        assert principal.is_global_superadmin is False


class TestGate:
    def test_self_or_above(self):
        require_self_or_above(_principal(user_id=5), 5)
        require_self_or_above(_principal(user_id=5, superadmin=True), 6)
        require_self_or_above(_principal(user_id=5, global_admin=True), 6)
        with pytest.raises(ForbiddenError):
            require_self_or_above(_principal(user_id=5), 6)

    def test_org_admin(self):
        require_org_admin(_principal(superadmin=True))
        require_org_admin(_principal(global_admin=True))
        with pytest.raises(ForbiddenError):
            require_org_admin(_principal())

    def test_global_admin(self):
        require_global_admin(_principal(global_admin=True))
        with pytest.raises(ForbiddenError):
            require_global_admin(_principal(superadmin=True))
