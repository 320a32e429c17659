"""
Capacity planning tests — teams, quarterly plans, rating thresholds.
"""

import pytest

from producthub.models import db
from producthub.models.capacity import EffortRatingConfig, EpicEffort, Team


@pytest.fixture()
def headers(member, auth_headers):
    return auth_headers(member)


@pytest.fixture()
def base(product):
    return f"/api/products/{product.id}/capacity-planning"


def _team(client, headers, base, name):
    return client.post(f"{base}/teams", headers=headers, json={"name": name})


# ═══════════════════════════════════════════════════════════════
# Teams
# ═══════════════════════════════════════════════════════════════

class TestTeams:
    def test_create_and_list(self, client, headers, base):
        res = _team(client, headers, base, "  Web ")
        assert res.status_code == 201
        assert res.get_json()["name"] == "Web"
        _team(client, headers, base, "API")

        names = [t["name"] for t in client.get(f"{base}/teams", headers=headers).get_json()]
        assert names == ["API", "Web"]

    def test_duplicate_active_name(self, client, headers, base):
        _team(client, headers, base, "Web")
        res = _team(client, headers, base, "Web")
        assert res.status_code == 409

    def test_name_reusable_after_deactivation(self, client, headers, base):
        team_id = _team(client, headers, base, "Web").get_json()["id"]
        res = client.delete(f"{base}/teams/{team_id}", headers=headers)
        assert res.status_code == 200
        assert db.session.get(Team, team_id).is_active is False

        assert _team(client, headers, base, "Web").status_code == 201
        teams = client.get(f"{base}/teams", headers=headers).get_json()
        assert len(teams) == 1
        assert teams[0]["id"] != team_id

    def test_reactivation_checks_name(self, client, headers, base):
        old_id = _team(client, headers, base, "Web").get_json()["id"]
        client.delete(f"{base}/teams/{old_id}", headers=headers)
        _team(client, headers, base, "Web")

        res = client.put(
            f"{base}/teams/{old_id}", headers=headers, json={"name": "Web", "is_active": True},
        )
        assert res.status_code == 409

    def test_update(self, client, headers, base):
        team_id = _team(client, headers, base, "Web").get_json()["id"]
        res = client.put(
            f"{base}/teams/{team_id}", headers=headers,
            json={"name": "Frontend", "description": "UI"},
        )
        assert res.status_code == 200
        assert res.get_json()["name"] == "Frontend"
        assert res.get_json()["description"] == "UI"

    def test_team_of_other_product_is_404(
        self, client, headers, base, make_product, member,
    ):
        other = make_product(member, "Other")
        foreign = Team(product_id=other.id, name="Theirs")
        db.session.add(foreign)
        db.session.commit()

        res = client.put(f"{base}/teams/{foreign.id}", headers=headers, json={"name": "Mine"})
        assert res.status_code == 404

    def test_name_required(self, client, headers, base):
        assert client.post(f"{base}/teams", headers=headers, json={}).status_code == 400


# ═══════════════════════════════════════════════════════════════
# Plans
# ═══════════════════════════════════════════════════════════════

@pytest.fixture()
def planned(client, headers, base, product):
    """Q1 2025 roadmap with two epics and two active teams."""
    client.post(
        f"/api/products/{product.id}/roadmap/2025/1", headers=headers,
        json={"roadmap_items": [
            {"epic_id": "E-1", "epic_name": "Alpha"},
            {"epic_id": "E-2", "epic_name": "Beta"},
        ]},
    )
    return [_team(client, headers, base, n).get_json()["id"] for n in ("Web", "Mobile")]


class TestPlans:
    def test_first_read_seeds_efforts(self, client, headers, base, planned):
        res = client.get(f"{base}/2025/1", headers=headers)
        assert res.status_code == 200
        data = res.get_json()
        assert data["effort_unit"] == "days"
        assert len(data["teams"]) == 2
        efforts = data["epic_efforts"]
        assert len(efforts) == 4
        assert {(e["epic_id"], e["team_id"]) for e in efforts} == {
            (epic, team) for epic in ("E-1", "E-2") for team in planned
        }
        assert all(e["effort_days"] == 0 for e in efforts)

    def test_second_read_does_not_reseed(self, client, headers, base, planned):
        client.get(f"{base}/2025/1", headers=headers)
        client.get(f"{base}/2025/1", headers=headers)
        assert db.session.query(EpicEffort).count() == 4

    def test_plan_without_roadmap_is_empty(self, client, headers, base):
        data = client.get(f"{base}/2025/3", headers=headers).get_json()
        assert data["epic_efforts"] == []

    def test_save_upserts_by_epic_and_team(self, client, headers, base, planned):
        web, mobile = planned
        client.get(f"{base}/2025/1", headers=headers)

        res = client.post(f"{base}/2025/1", headers=headers, json={
            "effort_unit": "points",
            "epic_efforts": [
                {"epic_id": "E-1", "team_id": web, "effort_days": 5, "notes": "spike first"},
                {"epic_id": "E-3", "epic_name": "Gamma", "team_id": mobile, "effort_days": 2},
            ],
        })
        assert res.status_code == 200
        data = res.get_json()
        assert data["effort_unit"] == "points"
        by_key = {(e["epic_id"], e["team_id"]): e for e in data["epic_efforts"]}
        assert len(by_key) == 5
        assert by_key[("E-1", web)]["effort_days"] == 5
        assert by_key[("E-1", web)]["notes"] == "spike first"
        assert by_key[("E-3", mobile)]["team_name"] == "Mobile"

    def test_save_creates_missing_plan(self, client, headers, base, planned):
        res = client.post(f"{base}/2026/2", headers=headers, json={
            "epic_efforts": [{"epic_id": "E-9", "team_id": planned[0], "effort_days": 1}],
        })
        assert res.status_code == 200
        assert len(res.get_json()["epic_efforts"]) == 1

    def test_foreign_team_rejected(self, client, headers, base, planned, make_product, member):
        other = make_product(member, "Other")
        foreign = Team(product_id=other.id, name="Theirs")
        db.session.add(foreign)
        db.session.commit()

        res = client.post(f"{base}/2025/1", headers=headers, json={
            "epic_efforts": [{"epic_id": "E-1", "team_id": foreign.id, "effort_days": 3}],
        })
        assert res.status_code == 404

    @pytest.mark.parametrize("effort", [
        {"epic_id": "E-1", "effort_days": -1},
        {"epic_id": "E-1", "effort_days": "a lot"},
        {"epic_id": "E-1", "effort_days": 2.9},
        {"epic_id": "", "effort_days": 1},
    ])
    def test_invalid_effort(self, client, headers, base, planned, effort):
        res = client.post(f"{base}/2025/1", headers=headers, json={
            "epic_efforts": [{**effort, "team_id": planned[0]}],
        })
        assert res.status_code == 400

    def test_invalid_quarter(self, client, headers, base):
        assert client.get(f"{base}/2025/7", headers=headers).status_code == 400

    def test_no_access(self, client, admin, base, auth_headers):
        assert client.get(f"{base}/teams", headers=auth_headers(admin)).status_code == 404


# ═══════════════════════════════════════════════════════════════
# Rating thresholds
# ═══════════════════════════════════════════════════════════════

class TestRatingConfig:
    def test_upsert_per_unit(self, client, headers, base):
        body = {"unit_type": "days", "star1_max": 5, "star2_max": 10, "star3_max": 20, "star4_max": 40}
        assert client.put(f"{base}/effort-rating-config", headers=headers, json=body).status_code == 200

        res = client.put(
            f"{base}/effort-rating-config", headers=headers, json={**body, "star4_max": 60},
        )
        assert res.status_code == 200
        assert res.get_json()["star4_max"] == 60
        assert db.session.query(EffortRatingConfig).count() == 1

        listing = client.get(f"{base}/effort-rating-config", headers=headers).get_json()
        assert [c["star4_max"] for c in listing] == [60]

    def test_unit_defaults_to_days(self, client, headers, base):
        res = client.put(f"{base}/effort-rating-config", headers=headers, json={
            "star1_max": 1, "star2_max": 2, "star3_max": 3, "star4_max": 4,
        })
        assert res.get_json()["unit_type"] == "days"

    @pytest.mark.parametrize("body", [
        {"star1_max": 10, "star2_max": 5, "star3_max": 20, "star4_max": 40},
        {"star1_max": -1, "star2_max": 5, "star3_max": 20, "star4_max": 40},
        {"star1_max": 1, "star2_max": 5, "star3_max": 20},
    ])
    def test_invalid_thresholds(self, client, headers, base, body):
        res = client.put(f"{base}/effort-rating-config", headers=headers, json=body)
        assert res.status_code == 400
        assert db.session.query(EffortRatingConfig).count() == 0
