"""
Tests for /items routes: public browsing, role-gated creation and
ownership-gated updates.
"""

import pytest

MISSING_ID = "65f1c2a9e4b0a1b2c3d4e5f6"

LAMP = {
    "name": "Desk Lamp",
    "price": 24.5,
    "description": "Brass desk lamp",
    "quantity": 3,
    "image": "lamp.png",
}


def post_raw(client, url, body, headers):
    """POST a hand-written JSON body, which may hold NaN/Infinity or be malformed."""
    return client.post(url, content=body, headers={**headers, "Content-Type": "application/json"})


@pytest.fixture
def lamp(client, owner):
    response = client.post("/api/v1/items", json=LAMP, headers=owner["headers"])
    assert response.status_code == 201, response.text
    return response.json()


# =============================================================================
# Listing
# =============================================================================


class TestListItems:
    def test_public_and_paginated(self, client, owner):
        for i in range(3):
            client.post("/api/v1/items", json={**LAMP, "name": f"Item {i}"}, headers=owner["headers"])

        response = client.get("/api/v1/items", params={"page": 2, "limit": 1})

        assert response.status_code == 200
        body = response.json()
        assert [item["name"] for item in body["items"]] == ["Item 1"]
        assert body["currentPage"] == 2
        assert body["totalPages"] == 3
        assert body["totalCount"] == 3

    def test_search_by_name(self, client, owner):
        for name in ("Desk Lamp", "Floor LAMP", "Chair"):
            client.post("/api/v1/items", json={**LAMP, "name": name}, headers=owner["headers"])

        body = client.get("/api/v1/items", params={"q": "lamp"}).json()

        assert {item["name"] for item in body["items"]} == {"Desk Lamp", "Floor LAMP"}
        assert body["totalCount"] == 2
        assert body["totalPages"] == 1

    def test_search_is_literal(self, client, owner):
        client.post("/api/v1/items", json={**LAMP, "name": "Lamp"}, headers=owner["headers"])
        assert client.get("/api/v1/items", params={"q": ".*"}).json()["totalCount"] == 0

    def test_non_numeric_paging_uses_defaults(self, client, lamp):
        response = client.get("/api/v1/items", params={"page": "abc", "limit": "xyz"})

        assert response.status_code == 200
        body = response.json()
        assert body["currentPage"] == 1
        assert body["totalCount"] == 1
        assert len(body["items"]) == 1


# =============================================================================
# Create / read
# =============================================================================


class TestCreateItem:
    def test_owner_is_creator(self, client, owner, other_owner):
        payload = {**LAMP, "owner": other_owner["user"]["id"]}
        response = client.post("/api/v1/items", json=payload, headers=owner["headers"])

        assert response.status_code == 201
        assert response.json()["owner"] == owner["user"]["id"]

    def test_admin_may_create(self, client, admin):
        response = client.post("/api/v1/items", json=LAMP, headers=admin["headers"])
        assert response.status_code == 201

    def test_client_is_forbidden(self, client, customer):
        response = client.post("/api/v1/items", json=LAMP, headers=customer["headers"])

        assert response.status_code == 403
        assert response.json() == {"error": "Forbidden"}

    def test_requires_token(self, client):
        assert client.post("/api/v1/items", json=LAMP).status_code == 401

    def test_invalid_payload(self, client, owner):
        response = client.post(
            "/api/v1/items",
            json={"name": "Lamp", "price": -1, "quantity": 1.5},
            headers=owner["headers"],
        )

        assert response.status_code == 400
        assert {e["path"] for e in response.json()["errors"]} == {"price", "quantity"}

    def test_infinite_price_rejected(self, client, owner):
        response = post_raw(client, "/api/v1/items", '{"name": "Lamp", "price": Infinity}', owner["headers"])

        assert response.status_code == 400
        assert [e["path"] for e in response.json()["errors"]] == ["price"]
        assert client.get("/api/v1/items").json()["totalCount"] == 0

    def test_nan_price_rejected(self, client, owner):
        response = post_raw(client, "/api/v1/items", '{"name": "Lamp", "price": NaN}', owner["headers"])

        assert response.status_code == 400
        [error] = response.json()["errors"]
        assert error["path"] == "price"
        assert error["value"] == "nan"

    def test_nan_inside_reported_body(self, client, owner):
        # Missing name reports the whole body as the offending value
        response = post_raw(client, "/api/v1/items", '{"price": NaN}', owner["headers"])

        assert response.status_code == 400
        assert {e["path"] for e in response.json()["errors"]} == {"name", "price"}

    def test_malformed_body_does_not_bypass_role_check(self, client, customer):
        response = post_raw(client, "/api/v1/items", "{not json", customer["headers"])
        assert response.status_code == 403

    def test_round_trip(self, client, owner, lamp):
        fetched = client.get(f"/api/v1/items/{lamp['id']}").json()

        assert fetched == lamp
        for key, value in LAMP.items():
            assert fetched[key] == value
        assert fetched["owner"] == owner["user"]["id"]


class TestGetItem:
    def test_not_found(self, client):
        response = client.get(f"/api/v1/items/{MISSING_ID}")

        assert response.status_code == 404
        assert response.json() == {"error": "Item not found"}

    def test_malformed_id(self, client):
        response = client.get("/api/v1/items/not-an-id")

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid id"}


# =============================================================================
# Update / delete
# =============================================================================


class TestUpdateItem:
    def test_owner_updates(self, client, owner, other_owner, lamp):
        response = client.put(
            f"/api/v1/items/{lamp['id']}",
            json={"price": 30, "owner": other_owner["user"]["id"]},
            headers=owner["headers"],
        )

        assert response.status_code == 203
        body = response.json()
        assert body["price"] == 30
        assert body["name"] == "Desk Lamp"
        assert body["owner"] == owner["user"]["id"]

    def test_non_owner_forbidden(self, client, other_owner, lamp):
        response = client.put(f"/api/v1/items/{lamp['id']}", json={"price": 1}, headers=other_owner["headers"])

        assert response.status_code == 403
        assert client.get(f"/api/v1/items/{lamp['id']}").json()["price"] == 24.5

    def test_client_forbidden(self, client, customer, lamp):
        response = client.put(f"/api/v1/items/{lamp['id']}", json={"price": 1}, headers=customer["headers"])
        assert response.status_code == 403

    def test_admin_keeps_owner(self, client, admin, owner, lamp):
        response = client.put(f"/api/v1/items/{lamp['id']}", json={"quantity": 0}, headers=admin["headers"])

        assert response.status_code == 203
        assert response.json()["quantity"] == 0
        assert response.json()["owner"] == owner["user"]["id"]

    def test_not_found(self, client, owner):
        response = client.put(f"/api/v1/items/{MISSING_ID}", json={"price": 1}, headers=owner["headers"])
        assert response.status_code == 404

    def test_invalid_payload(self, client, owner, lamp):
        response = client.put(f"/api/v1/items/{lamp['id']}", json={"price": -3}, headers=owner["headers"])
        assert response.status_code == 400

    def test_infinite_price_rejected(self, client, owner, lamp):
        response = client.put(
            f"/api/v1/items/{lamp['id']}",
            content='{"price": Infinity}',
            headers={**owner["headers"], "Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert client.get(f"/api/v1/items/{lamp['id']}").json()["price"] == 24.5

    def test_malformed_body_from_non_owner(self, client, other_owner, lamp):
        response = client.put(
            f"/api/v1/items/{lamp['id']}",
            content="{not json",
            headers={**other_owner["headers"], "Content-Type": "application/json"},
        )
        assert response.status_code == 403


class TestDeleteItem:
    def test_owner_deletes(self, client, owner, lamp):
        response = client.delete(f"/api/v1/items/{lamp['id']}", headers=owner["headers"])

        assert response.status_code == 204
        assert response.content == b""
        assert client.get(f"/api/v1/items/{lamp['id']}").status_code == 404

    def test_non_owner_forbidden(self, client, other_owner, lamp):
        response = client.delete(f"/api/v1/items/{lamp['id']}", headers=other_owner["headers"])
        assert response.status_code == 403

    def test_missing(self, client, owner):
        response = client.delete(f"/api/v1/items/{MISSING_ID}", headers=owner["headers"])
        assert response.status_code == 404

    def test_malformed_id(self, client, owner):
        response = client.delete("/api/v1/items/123", headers=owner["headers"])
        assert response.status_code == 400
