"""
Backlog & hypothesis API tests.
"""

import pytest

from producthub.models import db
from producthub.models.backlog import BacklogEpic


def _epics(*ids):
    return [{"epic_id": i, "name": f"Epic {i}", "theme_name": "Growth"} for i in ids]


class TestBacklog:
    def test_empty_backlog(self, client, member, product, auth_headers):
        res = client.get(f"/api/products/{product.id}/backlog", headers=auth_headers(member))
        assert res.status_code == 200
        assert res.get_json()["epics"] == []

    def test_save_preserves_order(self, client, member, product, auth_headers):
        headers = auth_headers(member)
        res = client.post(
            f"/api/products/{product.id}/backlog", headers=headers,
            json={"epics": _epics("E-2", "E-1", "E-3")},
        )
        assert res.status_code == 200

        data = client.get(f"/api/products/{product.id}/backlog", headers=headers).get_json()
        assert [e["epic_id"] for e in data["epics"]] == ["E-2", "E-1", "E-3"]
        assert data["epics"][0]["status"] == "new"
        assert data["epics"][0]["theme_name"] == "Growth"

    def test_resave_replaces_epics(self, client, member, product, auth_headers):
        headers = auth_headers(member)
        url = f"/api/products/{product.id}/backlog"
        client.post(url, headers=headers, json={"epics": _epics("E-1", "E-2")})
        res = client.post(url, headers=headers, json={"epics": _epics("E-2", "E-9")})
        assert res.status_code == 200
        assert [e["epic_id"] for e in res.get_json()["epics"]] == ["E-2", "E-9"]
        assert db.session.query(BacklogEpic).filter_by(product_id=product.id).count() == 2

    @pytest.mark.parametrize("epics", [
        _epics("E-1", "E-1"),
        [{"epic_id": "E-1"}],
        [{"name": "No id"}],
        [{"epic_id": "E-1", "name": "Bad", "status": "someday"}],
        "not-a-list",
    ])
    def test_invalid_backlog(self, client, member, product, auth_headers, epics):
        res = client.post(
            f"/api/products/{product.id}/backlog", headers=auth_headers(member),
            json={"epics": epics},
        )
        assert res.status_code == 400
        assert db.session.query(BacklogEpic).count() == 0

    def test_no_access(self, client, admin, product, auth_headers):
        res = client.get(f"/api/products/{product.id}/backlog", headers=auth_headers(admin))
        assert res.status_code == 404


class TestHypothesis:
    def test_empty(self, client, member, product, auth_headers):
        res = client.get(f"/api/products/{product.id}/hypothesis", headers=auth_headers(member))
        assert res.status_code == 200
        data = res.get_json()
        assert data["id"] is None
        assert data["hypothesis_statement"] is None

    def test_save_replaces_all_fields(self, client, member, product, auth_headers):
        headers = auth_headers(member)
        url = f"/api/products/{product.id}/hypothesis"
        client.post(url, headers=headers, json={
            "hypothesis_statement": "We believe...", "success_metrics": "NPS > 40",
        })
        res = client.post(url, headers=headers, json={"assumptions": "Users pay"})
        assert res.status_code == 200
        data = client.get(url, headers=headers).get_json()
        assert data["assumptions"] == "Users pay"
        assert data["hypothesis_statement"] is None

    def test_non_string_field(self, client, member, product, auth_headers):
        res = client.post(
            f"/api/products/{product.id}/hypothesis", headers=auth_headers(member),
            json={"themes": ["a", "b"]},
        )
        assert res.status_code == 400
