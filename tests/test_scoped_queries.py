"""
Tests for producthub/services/helpers/scoped_queries.py

These tests are security-critical: they verify the tenant isolation
helper behaves correctly under adversarial conditions.

Scenarios covered:
  1. ValueError when called with no scope parameter at all
  2. ValueError when the provided scope field does not exist on the model
  3. NotFoundError when PK is correct but scope does not match
  4. Correct entity returned when PK + scope both match
"""

import pytest

from producthub.core.exceptions import NotFoundError
from producthub.models import db
from producthub.models.auth import User
from producthub.models.capacity import Team
from producthub.services.helpers.scoped_queries import get_scoped


def _make_team(product, name="Core"):
    team = Team(product_id=product.id, name=name)
    db.session.add(team)
    db.session.commit()
    return team


class TestGetScopedRequiresAtLeastOneScope:
    def test_get_scoped_without_scope_raises_value_error(self):
        with pytest.raises(ValueError, match="requires at least one scope filter"):
            get_scoped(Team, 999)

    def test_all_scope_kwargs_none_is_equivalent_to_no_scope(self):
        with pytest.raises(ValueError):
            get_scoped(Team, 1, organization_id=None, product_id=None)


class TestGetScopedRejectsUnknownScopeField:
    def test_scope_column_missing_on_model(self):
        with pytest.raises(ValueError, match="do not exist as columns"):
            get_scoped(Team, 1, organization_id=1)

    def test_user_has_no_product_scope(self):
        with pytest.raises(ValueError):
            get_scoped(User, 1, product_id=1)


class TestGetScopedIsolation:
    def test_matching_scope_returns_entity(self, product):
        team = _make_team(product)
        assert get_scoped(Team, team.id, product_id=product.id) is team

    def test_other_product_cannot_see_team(self, product, make_product, member):
        team = _make_team(product)
        other = make_product(member, "Other")
        with pytest.raises(NotFoundError):
            get_scoped(Team, team.id, product_id=other.id)

    def test_missing_pk(self, product):
        with pytest.raises(NotFoundError):
            get_scoped(Team, 12345, product_id=product.id)

    def test_user_scoped_by_organization(self, member, org, other_org):
        assert get_scoped(User, member.id, organization_id=org.id) is member
        with pytest.raises(NotFoundError):
            get_scoped(User, member.id, organization_id=other_org.id)
