"""
Product API tests — ownership/role access, listing order, module toggles.
"""

import pytest

from producthub.models import db
from producthub.models.auth import Role
from producthub.models.product import Product, ProductModule
from producthub.services.product_access import has_product_access, list_accessible_products


def _grant(user, *product_modules, name="Grant"):
    role = Role(name=name)
    role.product_modules = list(product_modules)
    db.session.add(role)
    user.role = role
    db.session.commit()
    return role


class TestCreate:
    def test_create_enables_active_modules(self, client, member, modules, auth_headers):
        res = client.post("/api/products", headers=auth_headers(member), json={"name": "  Atlas "})
        assert res.status_code == 201
        data = res.get_json()
        assert data["name"] == "Atlas"
        assert data["user_id"] == member.id
        assert data["organization_id"] == member.organization_id

        pms = db.session.query(ProductModule).filter_by(product_id=data["id"]).all()
        assert sorted(pm.module_id for pm in pms) == sorted(m.id for m in modules)

    def test_inactive_modules_not_enabled(self, client, member, modules, auth_headers):
        modules[0].is_active = False
        db.session.commit()
        res = client.post("/api/products", headers=auth_headers(member), json={"name": "Atlas"})
        pms = db.session.query(ProductModule).filter_by(product_id=res.get_json()["id"]).all()
        assert len(pms) == len(modules) - 1

    @pytest.mark.parametrize("body", [{}, {"name": ""}, {"name": "   "}, {"name": 42}])
    def test_name_required(self, client, member, auth_headers, body):
        res = client.post("/api/products", headers=auth_headers(member), json=body)
        assert res.status_code == 400

    def test_requires_login(self, client):
        assert client.post("/api/products", json={"name": "X"}).status_code == 401


class TestListing:
    def test_union_of_owned_and_granted_sorted_by_name(
        self, make_user, make_product, member, org, modules,
    ):
        other = make_user("other@example.com", org)
        mine_b = make_product(member, "beta", modules[:1])
        mine_a = make_product(member, "Alpha", modules[:1])
        granted = make_product(other, "Gamma", modules[:2])
        make_product(other, "Hidden", modules[:1])
        # Two grants on the same product must not duplicate it; a grant on
        # an owned product must not duplicate it either.
        _grant(member, *granted.product_modules, mine_b.product_modules[0])

        names = [p.name for p in list_accessible_products(member.id)]
        assert names == ["Alpha", "beta", "Gamma"]
        assert [p.id for p in list_accessible_products(member.id)][0] == mine_a.id

    def test_equal_names_keep_id_order(self, make_product, member):
        first = make_product(member, "Same")
        second = make_product(member, "same")
        assert [p.id for p in list_accessible_products(member.id)] == [first.id, second.id]

    def test_api_listing(self, client, member, product, auth_headers):
        res = client.get("/api/products", headers=auth_headers(member))
        assert res.status_code == 200
        assert [p["id"] for p in res.get_json()] == [product.id]

    def test_user_without_products_sees_empty_list(self, client, admin, product, auth_headers):
        res = client.get("/api/products", headers=auth_headers(admin))
        assert res.get_json() == []


class TestAccess:
    def test_unrelated_user_gets_404_like_missing(self, client, admin, product, auth_headers):
        hidden = client.get(f"/api/products/{product.id}", headers=auth_headers(admin))
        missing = client.get("/api/products/99999", headers=auth_headers(admin))
        assert hidden.status_code == missing.status_code == 404
        assert hidden.get_json()["error"] == missing.get_json()["error"]

    def test_role_grant_gives_read_access(self, client, admin, product, auth_headers):
        _grant(admin, product.product_modules[0])
        assert has_product_access(admin.id, product.id)
        res = client.get(f"/api/products/{product.id}", headers=auth_headers(admin))
        assert res.status_code == 200

    def test_granted_non_owner_cannot_rename_or_delete(self, client, admin, product, auth_headers):
        _grant(admin, product.product_modules[0])
        headers = auth_headers(admin)
        assert client.put(
            f"/api/products/{product.id}", headers=headers, json={"name": "Mine"},
        ).status_code == 403
        assert client.delete(f"/api/products/{product.id}", headers=headers).status_code == 403
        assert db.session.get(Product, product.id).name == "Checkout"

    def test_owner_renames_and_deletes(self, client, member, product, auth_headers):
        headers = auth_headers(member)
        product_id = product.id
        res = client.put(f"/api/products/{product_id}", headers=headers, json={"name": "Renamed"})
        assert res.status_code == 200
        assert res.get_json()["name"] == "Renamed"

        assert client.delete(f"/api/products/{product_id}", headers=headers).status_code == 200
        assert client.get(f"/api/products/{product_id}", headers=headers).status_code == 404
        assert db.session.query(ProductModule).filter_by(product_id=product_id).count() == 0

    def test_orphaned_product_is_invisible(self, client, member, product, auth_headers):
        product.owner = None
        db.session.commit()
        res = client.get(f"/api/products/{product.id}", headers=auth_headers(member))
        assert res.status_code == 404


class TestProductModules:
    def test_list(self, client, member, product, modules, auth_headers):
        res = client.get(f"/api/products/{product.id}/modules", headers=auth_headers(member))
        assert res.status_code == 200
        data = res.get_json()
        assert len(data) == len(modules)
        assert data[0]["module"]["name"] == modules[0].name
        assert data[0]["product_name"] == "Checkout"

    def test_toggle_and_completion(self, client, member, product, auth_headers):
        pm = product.product_modules[0]
        res = client.put(
            f"/api/products/{product.id}/modules/{pm.id}", headers=auth_headers(member),
            json={"is_enabled": False, "completion_percentage": 40},
        )
        assert res.status_code == 200
        data = res.get_json()
        assert data["is_enabled"] is False
        assert data["completion_percentage"] == 40

    @pytest.mark.parametrize("body", [
        {"completion_percentage": 101},
        {"completion_percentage": -1},
        {"completion_percentage": "lots"},
        {"is_enabled": "yes"},
    ])
    def test_invalid_update(self, client, member, product, auth_headers, body):
        pm = product.product_modules[0]
        res = client.put(
            f"/api/products/{product.id}/modules/{pm.id}", headers=auth_headers(member), json=body,
        )
        assert res.status_code == 400

    def test_module_of_other_product_is_404(
        self, client, member, product, make_product, modules, auth_headers,
    ):
        other = make_product(member, "Other", modules[:1])
        res = client.put(
            f"/api/products/{product.id}/modules/{other.product_modules[0].id}",
            headers=auth_headers(member), json={"is_enabled": False},
        )
        assert res.status_code == 404
