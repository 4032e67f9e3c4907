"""
Tests for menu browsing and staff menu management.
"""

from ordo_api.models import MenuItem


class TestMenuBrowsing:
    """Public reads only show active categories and available items."""

    def test_categories_with_preview(self, client, guacamole):
        response = client.get("/api/menu/categories")
        assert response.status_code == 200
        data = response.json()
        assert len(data) == 1
        assert data[0]["name"] == "Entradas"
        assert data[0]["item_count"] == 1
        assert data[0]["preview_items"][0]["name"] == "Guacamole Tradicional"

    def test_unavailable_items_not_counted(self, client, db_session, guacamole):
        guacamole.is_available = False
        db_session.commit()
        data = client.get("/api/menu/categories").json()
        assert data[0]["item_count"] == 0
        assert data[0]["preview_items"] == []

    def test_full_menu(self, client, guacamole, extra_cheese):
        data = client.get("/api/menu/full").json()
        assert data[0]["items"][0]["price_cents"] == 8500
        assert data[0]["items"][0]["modifiers"][0]["name"] == "Queso extra"

    def test_items_by_category(self, client, menu_category, guacamole):
        response = client.get(f"/api/menu/categories/{menu_category.id}/items")
        assert [item["id"] for item in response.json()] == [guacamole.id]

    def test_featured(self, client, db_session, menu_category, guacamole):
        db_session.add(MenuItem(category_id=menu_category.id, name="Sopa del día", price_cents=6000))
        db_session.commit()
        names = [item["name"] for item in client.get("/api/menu/items/featured").json()]
        assert names == ["Guacamole Tradicional"]

    def test_get_item(self, client, guacamole):
        response = client.get(f"/api/menu/items/{guacamole.id}")
        assert response.status_code == 200
        assert response.json()["ingredients"] == ["aguacate", "cebolla", "cilantro"]

    def test_get_unknown_item(self, client):
        response = client.get("/api/menu/items/999")
        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"


class TestMenuSearch:
    def test_search_by_name_is_case_insensitive(self, client, guacamole):
        response = client.get("/api/menu/items/search", params={"q": "GUACA"})
        assert response.status_code == 200
        assert [item["id"] for item in response.json()] == [guacamole.id]

    def test_search_matches_ingredients(self, client, db_session, menu_category):
        item = MenuItem(
            category_id=menu_category.id,
            name="Tacos al Pastor",
            price_cents=9000,
            ingredients=["cerdo", "piña", "chipotle"],
        )
        db_session.add(item)
        db_session.commit()
        response = client.get("/api/menu/items/search", params={"q": "chipotle"})
        assert [found["name"] for found in response.json()] == ["Tacos al Pastor"]

    def test_search_query_too_short(self, client):
        response = client.get("/api/menu/items/search", params={"q": "a"})
        assert response.status_code == 400
        assert response.json()["code"] == "BAD_REQUEST"

    def test_search_skips_unavailable(self, client, db_session, guacamole):
        guacamole.is_available = False
        db_session.commit()
        assert client.get("/api/menu/items/search", params={"q": "guacamole"}).json() == []

    def test_search_wildcards_are_literal(self, client, guacamole):
        assert client.get("/api/menu/items/search", params={"q": "%%"}).json() == []


class TestCategoryManagement:
    def test_create_category(self, client, waiter_headers):
        response = client.post(
            "/api/menu/categories",
            json={"name": "Postres", "sort_order": 4},
            headers=waiter_headers,
        )
        assert response.status_code == 201
        assert response.json()["is_active"] is True

    def test_customer_cannot_create_category(self, client, customer_headers):
        response = client.post("/api/menu/categories", json={"name": "Postres"}, headers=customer_headers)
        assert response.status_code == 403

    def test_update_category(self, client, waiter_headers, menu_category):
        response = client.patch(
            f"/api/menu/categories/{menu_category.id}",
            json={"description": "Para empezar"},
            headers=waiter_headers,
        )
        assert response.json()["description"] == "Para empezar"
        assert response.json()["name"] == "Entradas"

    def test_delete_with_available_items_refused(self, client, waiter_headers, menu_category, guacamole):
        response = client.delete(f"/api/menu/categories/{menu_category.id}", headers=waiter_headers)
        assert response.status_code == 412
        assert response.json()["code"] == "PRECONDITION_FAILED"

    def test_delete_is_soft(self, client, db_session, waiter_headers, menu_category):
        response = client.delete(f"/api/menu/categories/{menu_category.id}", headers=waiter_headers)
        assert response.status_code == 200
        assert response.json()["is_active"] is False
        assert client.get("/api/menu/categories").json() == []
        db_session.refresh(menu_category)
        assert menu_category.is_active is False


class TestItemManagement:
    def test_create_item(self, client, waiter_headers, menu_category):
        response = client.post(
            "/api/menu/items",
            json={
                "category_id": menu_category.id,
                "name": "Quesadilla",
                "price_cents": 7500,
                "dietary_info": {"vegetarian": True},
            },
            headers=waiter_headers,
        )
        assert response.status_code == 201
        data = response.json()
        assert data["dietary_info"]["vegetarian"] is True
        assert data["modifiers"] == []

    def test_create_item_requires_positive_price(self, client, waiter_headers, menu_category):
        response = client.post(
            "/api/menu/items",
            json={"category_id": menu_category.id, "name": "Gratis", "price_cents": 0},
            headers=waiter_headers,
        )
        assert response.status_code == 400

    def test_create_item_unknown_category(self, client, waiter_headers):
        response = client.post(
            "/api/menu/items",
            json={"category_id": 999, "name": "Huérfano", "price_cents": 1000},
            headers=waiter_headers,
        )
        assert response.status_code == 404

    def test_update_item_price(self, client, waiter_headers, guacamole):
        response = client.patch(
            f"/api/menu/items/{guacamole.id}", json={"price_cents": 9000}, headers=waiter_headers
        )
        assert response.json()["price_cents"] == 9000
        assert response.json()["name"] == "Guacamole Tradicional"

    def test_toggle_availability_is_idempotent(self, client, waiter_headers, guacamole):
        """Setting the same value twice leaves it unchanged."""
        url = f"/api/menu/items/{guacamole.id}/availability"
        first = client.post(url, json={"is_available": False}, headers=waiter_headers)
        second = client.post(url, json={"is_available": False}, headers=waiter_headers)
        assert first.json()["is_available"] is False
        assert second.json()["is_available"] is False

        restored = client.post(url, json={"is_available": True}, headers=waiter_headers)
        assert restored.json()["is_available"] is True


class TestModifierManagement:
    def test_create_modifier(self, client, waiter_headers, guacamole):
        response = client.post(
            "/api/menu/modifiers",
            json={
                "menu_item_id": guacamole.id,
                "name": "Totopos extra",
                "price_adjustment_cents": 2000,
                "options": [{"name": "Maíz"}, {"name": "Harina"}],
            },
            headers=waiter_headers,
        )
        assert response.status_code == 201
        assert [o["name"] for o in response.json()["options"]] == ["Maíz", "Harina"]

    def test_create_modifier_unknown_item(self, client, waiter_headers):
        response = client.post(
            "/api/menu/modifiers",
            json={"menu_item_id": 999, "name": "Nada"},
            headers=waiter_headers,
        )
        assert response.status_code == 404

    def test_update_modifier(self, client, waiter_headers, extra_cheese):
        response = client.patch(
            f"/api/menu/modifiers/{extra_cheese.id}",
            json={"price_adjustment_cents": 2000, "is_required": True},
            headers=waiter_headers,
        )
        assert response.json()["price_adjustment_cents"] == 2000
        assert response.json()["is_required"] is True

    def test_delete_modifier(self, client, waiter_headers, guacamole, extra_cheese):
        response = client.delete(f"/api/menu/modifiers/{extra_cheese.id}", headers=waiter_headers)
        assert response.status_code == 204
        assert client.get(f"/api/menu/items/{guacamole.id}").json()["modifiers"] == []

    def test_customer_cannot_manage_modifiers(self, client, customer_headers, extra_cheese):
        response = client.delete(f"/api/menu/modifiers/{extra_cheese.id}", headers=customer_headers)
        assert response.status_code == 403
