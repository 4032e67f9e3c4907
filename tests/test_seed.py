"""
Tests for demo data seeding.
"""

from sqlalchemy import func, select

from ordo_api.models import DiningTable, MenuCategory, MenuItem, RestaurantConfig, User
from ordo_api.seed import seed


class TestSeed:
    def test_seed_populates_demo_data(self, db_session):
        seed(db_session)
        assert db_session.scalar(select(func.count(RestaurantConfig.id))) == 1
        assert db_session.scalar(select(func.count(DiningTable.id))) == 6
        assert db_session.scalar(select(func.count(MenuCategory.id))) == 4
        admin = db_session.scalar(select(User).where(User.email == "admin@restaurant.com"))
        assert admin.role == "ADMIN"

    def test_seed_is_idempotent(self, db_session):
        seed(db_session)
        items = db_session.scalar(select(func.count(MenuItem.id)))
        seed(db_session)
        assert db_session.scalar(select(func.count(MenuItem.id))) == items
        assert db_session.scalar(select(func.count(User.id))) == 2

    def test_seeded_admin_can_log_in(self, client, db_session):
        seed(db_session)
        response = client.post(
            "/api/auth/login",
            json={"email": "admin@restaurant.com", "password": "admin123"},
        )
        assert response.status_code == 200

    def test_seeded_menu_is_browsable(self, client, db_session):
        seed(db_session)
        featured = {item["name"] for item in client.get("/api/menu/items/featured").json()}
        assert {"Guacamole Tradicional", "Tacos de Carnitas"} <= featured
