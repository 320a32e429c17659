"""
Tenant-scoped accessor tests.

Roles are global rows; an organization sees a role only while one of its
users holds it, and may manage only roles it created that touch nothing
outside the organization.
"""

import pytest

from producthub.core.exceptions import InvalidStateError
from producthub.models import db
from producthub.models.auth import Role
from producthub.services import tenant_scope
from producthub.services.access import Principal


def _role(name, product_modules=(), org=None):
    role = Role(name=name, organization_id=org.id if org else None)
    role.product_modules = list(product_modules)
    db.session.add(role)
    db.session.commit()
    return role


class TestRoleVisibility:
    def test_only_roles_held_in_org_are_visible(self, org, other_org, make_user):
        mine = _role("Editors")
        theirs = _role("Viewers")
        _role("Unheld")
        make_user("a@example.com", org, role=mine)
        make_user("b@example.com", org, role=mine)
        make_user("c@example.com", other_org, role=theirs)

        visible = tenant_scope.roles_visible_to(org.id)
        assert [r.name for r in visible] == ["Editors"]

    def test_principal_without_org_is_invalid_state(self):
        principal = Principal(
            user_id=1, organization_id=None, is_superadmin=True, is_global_superadmin=False,
        )
        with pytest.raises(InvalidStateError):
            tenant_scope.list_roles(principal)


class TestRoleManageable:
    def test_fresh_role_is_manageable_only_by_creator(self, org, other_org):
        role = _role("Fresh", org=other_org)
        assert tenant_scope.role_manageable_by(role, other_org.id)
        assert not tenant_scope.role_manageable_by(role, org.id)

    def test_creator_loses_role_held_outside_org(self, org, other_org, make_user):
        role = _role("Lent", org=org)
        make_user("y@example.com", other_org, role=role)
        assert not tenant_scope.role_manageable_by(role, org.id)

    def test_role_without_recorded_creator_falls_back_to_holders(self, org):
        assert tenant_scope.role_manageable_by(_role("Legacy"), org.id)

    def test_role_held_by_foreign_user_is_not_manageable(self, org, other_org, make_user):
        role = _role("Shared")
        make_user("x@example.com", org, role=role)
        make_user("y@example.com", other_org, role=role)
        assert not tenant_scope.role_manageable_by(role, org.id)

    def test_role_with_foreign_product_module_is_not_manageable(
        self, org, other_org, make_user, make_product, modules,
    ):
        outsider = make_user("out@example.com", other_org)
        foreign = make_product(outsider, "Foreign", modules[:1])
        role = _role("Leaky", foreign.product_modules)
        assert not tenant_scope.role_manageable_by(role, org.id)
        assert tenant_scope.role_manageable_by(role, other_org.id)


class TestProductModules:
    def test_ids_filtered_to_org(self, org, other_org, make_user, make_product, modules):
        insider = make_user("in@example.com", org)
        outsider = make_user("out@example.com", other_org)
        mine = make_product(insider, "Mine", modules[:2])
        theirs = make_product(outsider, "Theirs", modules[:1])

        ids = [pm.id for pm in mine.product_modules] + [theirs.product_modules[0].id]
        assert tenant_scope.product_module_ids_in_org(org.id, ids) == {
            pm.id for pm in mine.product_modules
        }
        assert tenant_scope.product_module_ids_in_org(org.id, []) == set()
