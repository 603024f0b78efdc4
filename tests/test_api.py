"""HTTP tests: routing, authentication, role policy and error mapping."""
from fastapi import status

from tests.conftest import PASSWORD


def _create_product(client, headers, sku="SKU-BOX", volume=5.0):
    response = client.post(
        "/api/products",
        json={"sku": sku, "name": "Cardboard box", "volume": volume, "weight": 1.5},
        headers=headers["editor"],
    )
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()


def _create_shelf(client, headers, max_volume=100.0, name="Shelf A1", row_index=0, col_index=0):
    response = client.post(
        "/api/shelves",
        json={"name": name, "row_index": row_index, "col_index": col_index, "max_volume": max_volume},
        headers=headers["editor"],
    )
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()


class TestAuth:
    def test_login_returns_token_and_user(self, client, accounts):
        response = client.post("/api/auth/login", json={"email": "editor@example.com", "password": PASSWORD})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["token"]
        assert data["user"]["email"] == "editor@example.com"
        assert data["user"]["role"] == "editor"

        profile = client.get("/api/auth/profile", headers={"Authorization": f"Bearer {data['token']}"})
        assert profile.status_code == status.HTTP_200_OK
        assert profile.json()["id"] == data["user"]["id"]

    def test_login_with_wrong_password(self, client, accounts):
        response = client.post("/api/auth/login", json={"email": "editor@example.com", "password": "nope-nope"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_missing_token(self, client):
        assert client.get("/api/products").status_code == status.HTTP_401_UNAUTHORIZED

    def test_garbage_token(self, client):
        response = client.get("/api/products", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_viewer_cannot_escalate_own_role(self, client, headers):
        response = client.put("/api/auth/profile", json={"role": "admin"}, headers=headers["viewer"])

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["kind"] == "forbidden"

    def test_health(self, client, headers):
        response = client.get("/api/health", headers=headers["viewer"])
        assert response.json() == {"status": "ok"}


class TestUsers:
    def test_admin_creates_and_lists_users(self, client, headers):
        response = client.post(
            "/api/users",
            json={"email": "picker@example.com", "password": "picker-pass", "role": "editor"},
            headers=headers["admin"],
        )
        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["user"]["role"] == "editor"

        listing = client.get("/api/users", headers=headers["admin"])
        emails = {user["email"] for user in listing.json()["users"]}
        assert "picker@example.com" in emails

    def test_duplicate_email(self, client, headers):
        response = client.post(
            "/api/users",
            json={"email": "viewer@example.com", "password": "another-pass", "role": "viewer"},
            headers=headers["admin"],
        )
        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["kind"] == "duplicate_key"

    def test_editor_cannot_manage_users(self, client, headers):
        assert client.get("/api/users", headers=headers["editor"]).status_code == status.HTTP_403_FORBIDDEN

    def test_admin_cannot_delete_self(self, client, headers, accounts):
        response = client.delete(f"/api/users/{accounts['admin'].id}", headers=headers["admin"])
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_delete_unknown_user(self, client, headers):
        response = client.delete("/api/users/missing", headers=headers["admin"])
        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestProducts:
    def test_crud(self, client, headers):
        _create_product(client, headers)

        fetched = client.get("/api/products/SKU-BOX", headers=headers["viewer"])
        assert fetched.json()["volume"] == 5.0

        updated = client.put("/api/products/SKU-BOX", json={"weight": 2.0}, headers=headers["editor"])
        assert updated.status_code == status.HTTP_200_OK
        assert updated.json()["name"] == "Cardboard box"
        assert updated.json()["weight"] == 2.0

        listing = client.get("/api/products", headers=headers["viewer"])
        assert [p["sku"] for p in listing.json()["products"]] == ["SKU-BOX"]

        deleted = client.delete("/api/products/SKU-BOX", headers=headers["admin"])
        assert deleted.status_code == status.HTTP_200_OK
        assert client.get("/api/products/SKU-BOX", headers=headers["viewer"]).status_code == status.HTTP_404_NOT_FOUND

    def test_duplicate_sku(self, client, headers):
        _create_product(client, headers)
        response = client.post(
            "/api/products",
            json={"sku": "SKU-BOX", "name": "Other box", "volume": 1.0, "weight": 1.0},
            headers=headers["editor"],
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json() == {"error": "product with this SKU already exists", "kind": "duplicate_key"}

    def test_volume_must_be_positive(self, client, headers):
        response = client.post(
            "/api/products",
            json={"sku": "SKU-BOX", "name": "Cardboard box", "volume": 0, "weight": 1.0},
            headers=headers["editor"],
        )
        assert response.status_code == 422

    def test_viewer_cannot_create(self, client, headers):
        response = client.post(
            "/api/products",
            json={"sku": "SKU-BOX", "name": "Cardboard box", "volume": 1.0, "weight": 1.0},
            headers=headers["viewer"],
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_editor_cannot_delete(self, client, headers):
        _create_product(client, headers)
        response = client.delete("/api/products/SKU-BOX", headers=headers["editor"])
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_volume_growth_that_overflows_a_shelf_is_rejected(self, client, headers):
        _create_product(client, headers)
        shelf = _create_shelf(client, headers)
        client.post(f"/api/shelves/{shelf['id']}/items", json={"sku": "SKU-BOX", "quantity": 20}, headers=headers["editor"])

        response = client.put("/api/products/SKU-BOX", json={"volume": 50.0}, headers=headers["editor"])

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["kind"] == "insufficient_volume"
        assert client.get("/api/products/SKU-BOX", headers=headers["viewer"]).json()["volume"] == 5.0

    def test_product_in_use_cannot_be_deleted(self, client, headers):
        _create_product(client, headers)
        shelf = _create_shelf(client, headers)
        client.post(f"/api/shelves/{shelf['id']}/items", json={"sku": "SKU-BOX", "quantity": 1}, headers=headers["editor"])

        response = client.delete("/api/products/SKU-BOX", headers=headers["admin"])

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["kind"] == "referential_conflict"
        assert client.get("/api/products/SKU-BOX", headers=headers["viewer"]).status_code == status.HTTP_200_OK


class TestShelves:
    def test_add_items_until_full(self, client, headers):
        _create_product(client, headers, volume=5.0)
        shelf = _create_shelf(client, headers, max_volume=100.0)
        url = f"/api/shelves/{shelf['id']}/items"

        first = client.post(url, json={"sku": "SKU-BOX", "quantity": 5}, headers=headers["editor"])
        assert first.status_code == status.HTTP_200_OK
        assert first.json()["volume"] == 25.0
        assert first.json()["product_name"] == "Cardboard box"

        too_much = client.post(url, json={"sku": "SKU-BOX", "quantity": 50}, headers=headers["editor"])
        assert too_much.status_code == status.HTTP_409_CONFLICT
        assert too_much.json()["kind"] == "insufficient_volume"

        view = client.get(f"/api/shelves/{shelf['id']}", headers=headers["viewer"]).json()
        assert view["used_volume"] == 25.0
        assert len(view["items"]) == 1
        assert view["items"][0]["quantity"] == 5

    def test_add_item_errors(self, client, headers):
        _create_product(client, headers)
        shelf = _create_shelf(client, headers)

        unknown_sku = client.post(
            f"/api/shelves/{shelf['id']}/items", json={"sku": "NOPE", "quantity": 1}, headers=headers["editor"]
        )
        unknown_shelf = client.post(
            "/api/shelves/missing/items", json={"sku": "SKU-BOX", "quantity": 1}, headers=headers["editor"]
        )
        zero = client.post(
            f"/api/shelves/{shelf['id']}/items", json={"sku": "SKU-BOX", "quantity": 0}, headers=headers["editor"]
        )

        assert unknown_sku.status_code == status.HTTP_404_NOT_FOUND
        assert unknown_sku.json()["error"] == "product not found"
        assert unknown_shelf.status_code == status.HTTP_404_NOT_FOUND
        assert unknown_shelf.json()["error"] == "shelf not found"
        assert zero.status_code == 422

    def test_viewer_cannot_add_items(self, client, headers):
        _create_product(client, headers)
        shelf = _create_shelf(client, headers)

        response = client.post(
            f"/api/shelves/{shelf['id']}/items", json={"sku": "SKU-BOX", "quantity": 1}, headers=headers["viewer"]
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_item_quantity_is_bounded(self, client, headers):
        _create_product(client, headers)
        shelf = _create_shelf(client, headers)
        item = client.post(
            f"/api/shelves/{shelf['id']}/items", json={"sku": "SKU-BOX", "quantity": 2}, headers=headers["editor"]
        ).json()

        response = client.put(
            f"/api/shelves/{shelf['id']}/items/{item['id']}", json={"quantity": 2**63}, headers=headers["editor"]
        )

        assert response.status_code == 422
        view = client.get(f"/api/shelves/{shelf['id']}", headers=headers["viewer"]).json()
        assert view["items"][0]["quantity"] == 2

    def test_update_and_remove_item(self, client, headers):
        _create_product(client, headers)
        shelf = _create_shelf(client, headers)
        item = client.post(
            f"/api/shelves/{shelf['id']}/items", json={"sku": "SKU-BOX", "quantity": 2}, headers=headers["editor"]
        ).json()
        item_url = f"/api/shelves/{shelf['id']}/items/{item['id']}"

        updated = client.put(item_url, json={"quantity": 4}, headers=headers["editor"])
        assert updated.json() == {"message": "item quantity updated successfully"}
        view = client.get(f"/api/shelves/{shelf['id']}", headers=headers["viewer"]).json()
        assert view["used_volume"] == 20.0

        removed = client.put(item_url, json={"quantity": 0}, headers=headers["editor"])
        assert removed.json() == {"message": "item removed successfully"}
        view = client.get(f"/api/shelves/{shelf['id']}", headers=headers["viewer"]).json()
        assert view["items"] == []

        gone = client.delete(item_url, headers=headers["editor"])
        assert gone.status_code == status.HTTP_404_NOT_FOUND
        assert gone.json()["kind"] == "not_found"

    def test_list_and_update(self, client, headers):
        second = _create_shelf(client, headers, name="Shelf B1", row_index=1)
        _create_shelf(client, headers, name="Shelf A1", row_index=0)

        listing = client.get("/api/shelves", headers=headers["viewer"]).json()["shelves"]
        assert [s["name"] for s in listing] == ["Shelf A1", "Shelf B1"]
        assert all(s["used_volume"] == 0.0 for s in listing)

        updated = client.put(f"/api/shelves/{second['id']}", json={"max_volume": 250.0}, headers=headers["editor"])
        assert updated.json()["name"] == "Shelf B1"
        assert updated.json()["max_volume"] == 250.0

    def test_invalid_shelf_payload(self, client, headers):
        response = client.post(
            "/api/shelves",
            json={"name": "Shelf A1", "row_index": -1, "col_index": 0, "max_volume": 10.0},
            headers=headers["editor"],
        )
        assert response.status_code == 422

    def test_only_admin_deletes_shelves(self, client, headers):
        _create_product(client, headers)
        shelf = _create_shelf(client, headers)
        client.post(f"/api/shelves/{shelf['id']}/items", json={"sku": "SKU-BOX", "quantity": 1}, headers=headers["editor"])

        forbidden = client.delete(f"/api/shelves/{shelf['id']}", headers=headers["editor"])
        assert forbidden.status_code == status.HTTP_403_FORBIDDEN

        deleted = client.delete(f"/api/shelves/{shelf['id']}", headers=headers["admin"])
        assert deleted.status_code == status.HTTP_200_OK
        assert client.get(f"/api/shelves/{shelf['id']}", headers=headers["viewer"]).status_code == status.HTTP_404_NOT_FOUND

        # The product is no longer referenced once its shelf is gone
        assert client.delete("/api/products/SKU-BOX", headers=headers["admin"]).status_code == status.HTTP_200_OK


class TestLogs:
    def test_mutations_are_audited(self, client, headers):
        _create_product(client, headers)

        page = client.get("/api/logs", params={"action": "PRODUCT_CREATE"}, headers=headers["admin"]).json()

        assert page["total"] == 1
        assert page["items"][0]["meta"] == {"sku": "SKU-BOX"}
        assert page["items"][0]["status"] == "SUCCESS"

    def test_failed_login_is_audited(self, client, headers):
        client.post("/api/auth/login", json={"email": "editor@example.com", "password": "wrong-pass"})

        page = client.get("/api/logs", params={"action": "LOGIN", "status": "fail"}, headers=headers["admin"]).json()
        assert page["total"] == 1

    def test_logs_are_admin_only(self, client, headers):
        assert client.get("/api/logs", headers=headers["editor"]).status_code == status.HTTP_403_FORBIDDEN
