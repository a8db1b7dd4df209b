"""
Tests for the public menu and dish option endpoints.
"""

from tableside_api.models import Dish


class TestMenu:

    def test_menu_grouped_by_category(self, client, seed_dish, seed_groups, seed_plain_dish):
        response = client.get("/api/public/menu")
        assert response.status_code == 200
        menu = response.json()

        assert [c["label"] for c in menu] == ["🍔 Burgers", "🥤 Drinks"]
        burger = menu[0]["dishes"][0]
        assert burger["name"] == "Classic Burger"
        assert burger["price"] == 5000
        assert burger["hasCustomization"] is True
        assert menu[1]["dishes"][0]["hasCustomization"] is False

    def test_unavailable_dishes_hidden(self, client, db_session, seed_dish):
        seed_dish.is_available = False
        db_session.commit()

        menu = client.get("/api/public/menu").json()
        assert menu[0]["dishes"] == []

    def test_single_dish(self, client, seed_dish):
        response = client.get(f"/api/public/dishes/{seed_dish.id}")
        assert response.status_code == 200
        assert response.json()["name"] == "Classic Burger"

    def test_unknown_dish(self, client):
        response = client.get("/api/public/dishes/9999")
        assert response.status_code == 404


class TestDishOptions:

    def test_aggregated_options(self, client, seed_dish, seed_groups):
        response = client.get(f"/api/public/dishes/{seed_dish.id}/options")
        assert response.status_code == 200
        groups = response.json()["optionGroups"]

        assert [g["name"] for g in groups] == ["Cooking", "Sauce", "Extras"]
        cooking = groups[0]
        assert cooking["selectionType"] == "single"
        assert cooking["isRequired"] is True
        assert cooking["displayOrder"] == 0
        assert [o["name"] for o in cooking["options"]] == ["Rare", "Medium", "Well done"]

        extras = groups[2]
        assert [(o["name"], o["extraPrice"], o["isAvailable"]) for o in extras["options"]] == [
            ("Bacon", 500, True),
            ("Egg", 300, True),
        ]

    def test_dish_without_groups(self, client, seed_plain_dish):
        response = client.get(f"/api/public/dishes/{seed_plain_dish.id}/options")
        assert response.status_code == 404
        assert response.json()["code"] == "NO_OPTION_GROUPS"

    def test_unknown_dish(self, client):
        response = client.get("/api/public/dishes/9999/options")
        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    def test_category_label_key(self, client, seed_dish, seed_groups):
        response = client.get("/api/public/dishes/🍔 Burgers/options")
        assert response.status_code == 200
        assert len(response.json()["optionGroups"]) == 3

    def test_blank_key(self, client):
        response = client.get("/api/public/dishes/%20/options")
        assert response.status_code == 400
        assert response.json()["code"] == "MISSING_DISH_ID"

    def test_deleted_dish(self, client, db_session, seed_dish, seed_groups):
        dish = db_session.get(Dish, seed_dish.id)
        dish.soft_delete(None, None)
        db_session.commit()

        response = client.get(f"/api/public/dishes/{seed_dish.id}/options")
        assert response.status_code == 404
