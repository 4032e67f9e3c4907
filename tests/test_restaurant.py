"""
Tests for restaurant configuration, opening status, stats and dining tables.
"""

from ordo_api.services.domain.schedule import DayWindow, day_window
from tests.helpers import MONDAY, OPENING_HOURS, SUNDAY, next_weekday, order_payload

NEW_CONFIG = {
    "name": "Casa Ordo",
    "slug": "casa-ordo",
    "opening_hours": OPENING_HOURS,
    "services": {"dine_in": True, "takeout": True, "delivery": False, "reservations": True},
}


class TestDayWindow:
    """Opening-hours arithmetic."""

    def test_monday_window(self):
        window = day_window(OPENING_HOURS, next_weekday(MONDAY))
        assert window == DayWindow(weekday="monday", open_minutes=9 * 60, close_minutes=22 * 60)

    def test_closed_day(self):
        assert day_window(OPENING_HOURS, next_weekday(SUNDAY)) is None

    def test_missing_schedule(self):
        assert day_window({}, next_weekday(MONDAY)) is None

    def test_close_is_exclusive(self):
        window = DayWindow(weekday="monday", open_minutes=540, close_minutes=1320)
        assert window.contains(540)
        assert window.contains(1319)
        assert not window.contains(1320)

    def test_booking_cutoff(self):
        window = DayWindow(weekday="monday", open_minutes=540, close_minutes=1320)
        assert window.last_booking_minutes == 1200
        assert window.accepts_booking_at(1200)
        assert not window.accepts_booking_at(1230)
        assert not window.accepts_booking_at(539)


class TestRestaurantConfig:
    def test_config_is_null_before_setup(self, client):
        response = client.get("/api/restaurant/config")
        assert response.status_code == 200
        assert response.json() is None

    def test_get_config(self, client, restaurant_config):
        data = client.get("/api/restaurant/config").json()
        assert data["slug"] == "test-restaurant"
        assert data["delivery_config"]["fee_cents"] == 2500
        assert data["opening_hours"]["sunday"]["is_closed"] is True

    def test_create_config_twice_conflicts(self, client, admin_headers):
        assert client.post("/api/restaurant/config", json=NEW_CONFIG, headers=admin_headers).status_code == 201
        response = client.post("/api/restaurant/config", json=NEW_CONFIG, headers=admin_headers)
        assert response.status_code == 409

    def test_create_rejects_bad_slug(self, client, admin_headers):
        response = client.post(
            "/api/restaurant/config",
            json={**NEW_CONFIG, "slug": "Casa Ordo!"},
            headers=admin_headers,
        )
        assert response.status_code == 400

    def test_create_rejects_bad_hours(self, client, admin_headers):
        hours = {**OPENING_HOURS, "monday": {"open": "9am", "close": "22:00"}}
        response = client.post(
            "/api/restaurant/config",
            json={**NEW_CONFIG, "opening_hours": hours},
            headers=admin_headers,
        )
        assert response.status_code == 400

    def test_update_keeps_slug(self, client, admin_headers, restaurant_config):
        response = client.patch(
            "/api/restaurant/config",
            json={"name": "Renamed", "slug": "other-slug", "delivery_config": {"fee_cents": 3000}},
            headers=admin_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Renamed"
        assert data["slug"] == "test-restaurant"
        assert data["delivery_config"]["fee_cents"] == 3000

    def test_update_without_config(self, client, admin_headers):
        response = client.patch("/api/restaurant/config", json={"name": "Renamed"}, headers=admin_headers)
        assert response.status_code == 404

    def test_waiter_cannot_update(self, client, waiter_headers, restaurant_config):
        response = client.patch("/api/restaurant/config", json={"name": "Renamed"}, headers=waiter_headers)
        assert response.status_code == 403

    def test_by_slug(self, client, restaurant_config):
        assert client.get("/api/restaurant/by-slug/test-restaurant").json()["name"] == "Test Restaurant"

    def test_by_unknown_slug(self, client, restaurant_config):
        assert client.get("/api/restaurant/by-slug/nowhere").status_code == 404


class TestOpenStatus:
    def test_is_open_shape(self, client, restaurant_config):
        response = client.get("/api/restaurant/is-open")
        assert response.status_code == 200
        data = response.json()
        assert isinstance(data["is_open"], bool)
        assert data["restaurant_name"] == "Test Restaurant"
        assert len(data["current_time"]) == 5
        if not data["is_open"]:
            assert data["reason"]

    def test_is_open_without_config(self, client):
        data = client.get("/api/restaurant/is-open").json()
        assert data["is_open"] is False
        assert data["reason"] == "Restaurant configuration not found"


class TestDashboardStats:
    def test_stats(self, client, waiter_headers, guacamole):
        paid = client.post("/api/orders", json=order_payload(guacamole.id)).json()
        client.post("/api/orders", json=order_payload(guacamole.id))
        client.post(f"/api/orders/{paid['id']}/payment", json={}, headers=waiter_headers)

        response = client.get("/api/restaurant/stats", headers=waiter_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["today_orders"] == 2
        assert data["total_customers"] == 1
        assert data["today_sales_cents"] == paid["total_cents"]

    def test_stats_require_login(self, client):
        assert client.get("/api/restaurant/stats").status_code == 401


class TestDiningTables:
    def test_create_table(self, client, admin_headers):
        response = client.post(
            "/api/restaurant/tables",
            json={"number": 7, "seats": 6, "label": "Terraza"},
            headers=admin_headers,
        )
        assert response.status_code == 201
        assert response.json()["is_active"] is True

    def test_duplicate_number(self, client, admin_headers, dining_tables):
        response = client.post("/api/restaurant/tables", json={"number": 1, "seats": 2}, headers=admin_headers)
        assert response.status_code == 409

    def test_deactivated_tables_hidden_by_default(self, client, admin_headers, waiter_headers, dining_tables):
        client.patch(
            f"/api/restaurant/tables/{dining_tables[0].id}", json={"is_active": False}, headers=admin_headers
        )
        active = client.get("/api/restaurant/tables", headers=waiter_headers).json()
        everything = client.get(
            "/api/restaurant/tables", params={"include_inactive": True}, headers=waiter_headers
        ).json()
        assert [t["number"] for t in active] == [2]
        assert [t["number"] for t in everything] == [1, 2]

    def test_update_unknown_table(self, client, admin_headers):
        response = client.patch("/api/restaurant/tables/999", json={"seats": 4}, headers=admin_headers)
        assert response.status_code == 404

    def test_waiter_cannot_create_table(self, client, waiter_headers):
        response = client.post("/api/restaurant/tables", json={"number": 9, "seats": 2}, headers=waiter_headers)
        assert response.status_code == 403
