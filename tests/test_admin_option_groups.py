"""
Tests for admin option group endpoints.
"""

import pytest

from tableside_api.models import Dish, Option, OptionGroup


URL = "/api/admin/option-groups"


def _payload(**overrides):
    data = {"name": "Cooking", "selectionType": "single"}
    data.update(overrides)
    return data


class TestCreate:

    def test_create_by_dish(self, client, auth_headers, seed_dish, seed_category):
        response = client.post(
            URL,
            headers=auth_headers,
            json=_payload(dishId=seed_dish.id, isRequired=True, displayOrder=2),
        )
        assert response.status_code == 201
        data = response.json()
        assert data["id"] > 0
        assert data["categoryId"] == seed_category.id
        assert data["name"] == "Cooking"
        assert data["selectionType"] == "single"
        assert data["isRequired"] is True
        assert data["displayOrder"] == 2
        assert data["enableNote"] is False

    def test_create_by_category(self, client, auth_headers, seed_category):
        response = client.post(
            URL,
            headers=auth_headers,
            json=_payload(categoryId=seed_category.id, selectionType="multiple", enableNote=True),
        )
        assert response.status_code == 201
        assert response.json()["enableNote"] is True

    def test_defaults(self, client, auth_headers, seed_dish):
        data = client.post(URL, headers=auth_headers, json=_payload(dishId=seed_dish.id)).json()
        assert data["isRequired"] is False
        assert data["displayOrder"] == 0

    def test_missing_fields(self, client, auth_headers, seed_dish):
        response = client.post(URL, headers=auth_headers, json={"dishId": seed_dish.id})
        assert response.status_code == 400
        assert response.json() == {
            "error": "Missing required fields: name, selectionType",
            "code": "MISSING_REQUIRED_FIELDS",
        }

    def test_missing_scope(self, client, auth_headers):
        response = client.post(URL, headers=auth_headers, json=_payload())
        assert response.status_code == 400
        assert response.json()["code"] == "MISSING_REQUIRED_FIELDS"

    @pytest.mark.parametrize("selection_type", ["Single", "both", "", 1])
    def test_invalid_selection_type(self, client, auth_headers, seed_dish, selection_type):
        response = client.post(
            URL,
            headers=auth_headers,
            json=_payload(dishId=seed_dish.id, selectionType=selection_type),
        )
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_SELECTION_TYPE"

    def test_unknown_dish(self, client, auth_headers, seed_category):
        response = client.post(URL, headers=auth_headers, json=_payload(dishId=9999))
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_DISH_ID"

    def test_dish_without_category(self, client, db_session, auth_headers):
        dish = Dish(name="Orphan", price_cents=100)
        db_session.add(dish)
        db_session.commit()

        response = client.post(URL, headers=auth_headers, json=_payload(dishId=dish.id))
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_DISH_ID"

    def test_non_numeric_dish_id(self, client, auth_headers):
        response = client.post(URL, headers=auth_headers, json=_payload(dishId="abc"))
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_DISH_ID"

    def test_conflicting_category(self, client, auth_headers, seed_dish, seed_plain_category):
        response = client.post(
            URL,
            headers=auth_headers,
            json=_payload(dishId=seed_dish.id, categoryId=seed_plain_category.id),
        )
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_CATEGORY_ID"

    def test_unknown_category(self, client, auth_headers):
        response = client.post(URL, headers=auth_headers, json=_payload(categoryId=9999))
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_CATEGORY_ID"

    def test_non_boolean_is_required(self, client, auth_headers, seed_dish):
        response = client.post(URL, headers=auth_headers, json=_payload(dishId=seed_dish.id, isRequired="yes"))
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_IS_REQUIRED"

    def test_non_integer_display_order(self, client, auth_headers, seed_dish):
        response = client.post(URL, headers=auth_headers, json=_payload(dishId=seed_dish.id, displayOrder="first"))
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_DISPLAY_ORDER"

    def test_blank_name(self, client, auth_headers, seed_dish):
        response = client.post(URL, headers=auth_headers, json=_payload(dishId=seed_dish.id, name="   "))
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_NAME"

    def test_waiter_forbidden(self, client, waiter_auth_headers, seed_dish):
        response = client.post(URL, headers=waiter_auth_headers, json=_payload(dishId=seed_dish.id))
        assert response.status_code == 403
        assert response.json()["code"] == "FORBIDDEN"

    def test_unauthenticated(self, client, seed_dish):
        response = client.post(URL, json=_payload(dishId=seed_dish.id))
        assert response.status_code == 401


class TestList:

    def test_list_by_dish(self, client, auth_headers, seed_dish, seed_groups, seed_plain_dish):
        response = client.get(f"{URL}?dishId={seed_dish.id}", headers=auth_headers)
        assert response.status_code == 200
        assert [g["name"] for g in response.json()] == ["Cooking", "Sauce", "Extras"]

        other = client.get(f"{URL}?dishId={seed_plain_dish.id}", headers=auth_headers)
        assert other.json() == []

    def test_unknown_dish_filter_is_empty(self, client, auth_headers, seed_groups):
        response = client.get(f"{URL}?dishId=9999", headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == []

    def test_pagination(self, client, auth_headers, seed_groups):
        response = client.get(f"{URL}?limit=1&offset=1", headers=auth_headers)
        assert [g["name"] for g in response.json()] == ["Sauce"]

    def test_limit_is_clamped(self, client, db_session, auth_headers, seed_category):
        db_session.add_all(
            OptionGroup(category_id=seed_category.id, name=f"G{i}", selection_type="single", display_order=i)
            for i in range(105)
        )
        db_session.commit()

        assert len(client.get(f"{URL}?limit=500", headers=auth_headers).json()) == 100
        assert len(client.get(URL, headers=auth_headers).json()) == 50
        assert len(client.get(f"{URL}?limit=0&offset=-3", headers=auth_headers).json()) == 1

    def test_non_numeric_limit(self, client, auth_headers):
        response = client.get(f"{URL}?limit=many", headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_PAGINATION"


class TestGetUpdateDelete:

    def test_get(self, client, auth_headers, seed_groups):
        group, _ = seed_groups["Sauce"]
        response = client.get(f"{URL}/{group.id}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["name"] == "Sauce"

    def test_get_unknown(self, client, auth_headers):
        response = client.get(f"{URL}/9999", headers=auth_headers)
        assert response.status_code == 404
        assert response.json() == {"error": "Option group not found", "code": "NOT_FOUND"}

    def test_non_numeric_id(self, client, auth_headers):
        response = client.put(f"{URL}/abc", headers=auth_headers, json={"name": "X"})
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_ID"

    def test_partial_update(self, client, auth_headers, seed_groups):
        group, _ = seed_groups["Sauce"]
        response = client.put(f"{URL}/{group.id}", headers=auth_headers, json={"isRequired": True})
        assert response.status_code == 200
        data = response.json()
        assert data["isRequired"] is True
        assert data["name"] == "Sauce"
        assert data["selectionType"] == "single"

    def test_update_selection_type(self, client, auth_headers, seed_groups):
        group, _ = seed_groups["Sauce"]
        response = client.put(f"{URL}/{group.id}", headers=auth_headers, json={"selectionType": "multiple"})
        assert response.json()["selectionType"] == "multiple"

        bad = client.put(f"{URL}/{group.id}", headers=auth_headers, json={"selectionType": "many"})
        assert bad.status_code == 400
        assert bad.json()["code"] == "INVALID_SELECTION_TYPE"

    def test_update_null_rejected(self, client, auth_headers, seed_groups):
        group, _ = seed_groups["Sauce"]
        response = client.put(f"{URL}/{group.id}", headers=auth_headers, json={"name": None})
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_NAME"

    def test_move_to_dish_category(self, client, auth_headers, seed_groups, seed_plain_dish, seed_plain_category):
        group, _ = seed_groups["Sauce"]
        response = client.put(f"{URL}/{group.id}", headers=auth_headers, json={"dishId": seed_plain_dish.id})
        assert response.json()["categoryId"] == seed_plain_category.id

    def test_update_unknown(self, client, auth_headers):
        response = client.put(f"{URL}/9999", headers=auth_headers, json={"name": "X"})
        assert response.status_code == 404
        assert response.json()["error"] == "Option group not found"

    def test_delete_cascades_to_options(self, client, db_session, auth_headers, seed_groups):
        group, options = seed_groups["Extras"]
        response = client.delete(f"{URL}/{group.id}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == {"message": "Option group deleted", "id": group.id}

        assert client.get(f"{URL}/{group.id}", headers=auth_headers).status_code == 404
        db_session.expire_all()
        assert all(not db_session.get(Option, o.id).is_active for o in options.values())

    def test_delete_unknown(self, client, auth_headers):
        response = client.delete(f"{URL}/9999", headers=auth_headers)
        assert response.status_code == 404
