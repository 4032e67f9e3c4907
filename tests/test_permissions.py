"""
Tests for request context resolution and the role guards.
"""

import pytest

from ordo_api.services.permissions import (
    AuthUser,
    RequestContext,
    is_authed,
    require_role,
    resolve_user,
)
from ordo_shared.config.constants import ADMIN_ONLY, KITCHEN_ROLES, STAFF_ROLES
from ordo_shared.security.auth import sign_jwt, sign_session_token
from ordo_shared.utils.exceptions import ForbiddenError, UnauthorizedError
from tests.helpers import OPENING_HOURS

CONFIG_BODY = {
    "name": "New Restaurant",
    "slug": "new-restaurant",
    "opening_hours": OPENING_HOURS,
}


class TestGuards:
    """Guards are plain predicates over the request context."""

    def _ctx(self, role=None):
        user = AuthUser(id=1, email="x@test.com", role=role) if role else None
        return RequestContext(db=None, user=user)

    def test_is_authed_rejects_anonymous(self):
        with pytest.raises(UnauthorizedError):
            is_authed(self._ctx())

    def test_is_authed_accepts_any_role(self):
        ctx = self._ctx("CUSTOMER")
        assert is_authed(ctx) is ctx

    def test_require_role_anonymous_is_unauthorized(self):
        with pytest.raises(UnauthorizedError):
            require_role(ADMIN_ONLY)(self._ctx())

    def test_require_role_wrong_role_is_forbidden(self):
        with pytest.raises(ForbiddenError):
            require_role(KITCHEN_ROLES)(self._ctx("WAITER"))

    @pytest.mark.parametrize("role", sorted(STAFF_ROLES))
    def test_staff_roles_pass_staff_guard(self, role):
        assert require_role(STAFF_ROLES)(self._ctx(role)).role == role

    def test_customer_fails_staff_guard(self):
        with pytest.raises(ForbiddenError):
            require_role(STAFF_ROLES)(self._ctx("CUSTOMER"))


class TestResolveUser:
    """Credential resolution never raises; bad credentials mean anonymous."""

    def test_valid_token(self, db_session, kitchen_user):
        token = sign_session_token(kitchen_user.id, kitchen_user.email, kitchen_user.role)
        user = resolve_user(db_session, token)
        assert user == AuthUser(id=kitchen_user.id, email="kitchen@test.com", role="KITCHEN")

    def test_missing_token(self, db_session):
        assert resolve_user(db_session, None) is None

    def test_garbage_token(self, db_session):
        assert resolve_user(db_session, "garbage") is None

    def test_expired_token(self, db_session, kitchen_user):
        token = sign_jwt(
            {"userId": kitchen_user.id, "email": kitchen_user.email, "role": "KITCHEN"},
            ttl_seconds=-5,
        )
        assert resolve_user(db_session, token) is None

    def test_unknown_user(self, db_session):
        assert resolve_user(db_session, sign_session_token(999, "ghost@test.com", "ADMIN")) is None

    def test_role_comes_from_database(self, db_session, waiter_user):
        """A token claiming ADMIN does not outrank the stored role."""
        token = sign_session_token(waiter_user.id, waiter_user.email, "ADMIN")
        assert resolve_user(db_session, token).role == "WAITER"


class TestAdminOnlyRoute:
    """Creating the restaurant configuration is ADMIN only."""

    def test_no_token_is_unauthorized(self, client):
        response = client.post("/api/restaurant/config", json=CONFIG_BODY)
        assert response.status_code == 401
        assert response.json()["code"] == "UNAUTHORIZED"

    def test_kitchen_is_forbidden(self, client, kitchen_headers):
        response = client.post("/api/restaurant/config", json=CONFIG_BODY, headers=kitchen_headers)
        assert response.status_code == 403
        assert response.json()["code"] == "FORBIDDEN"

    def test_admin_succeeds(self, client, admin_headers):
        response = client.post("/api/restaurant/config", json=CONFIG_BODY, headers=admin_headers)
        assert response.status_code == 201
        assert response.json()["slug"] == "new-restaurant"

    def test_invalid_token_is_unauthorized_not_error(self, client):
        """A broken token on a guarded route is 401, never a 500."""
        response = client.post(
            "/api/restaurant/config",
            json=CONFIG_BODY,
            headers={"Authorization": "Bearer broken.token.value"},
        )
        assert response.status_code == 401

    def test_bearer_wins_over_cookie(self, client, admin_user, kitchen_headers):
        """With both credentials present the bearer header decides."""
        client.post("/api/auth/login", json={"email": "admin@test.com", "password": "admin123"})
        response = client.post("/api/restaurant/config", json=CONFIG_BODY, headers=kitchen_headers)
        assert response.status_code == 403
