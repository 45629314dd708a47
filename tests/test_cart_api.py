import pytest


@pytest.fixture
def headers(token) -> dict:
    return {"token": token["id"]}


def add(client, headers, item_id=2, quantity=2, email="ada@example.com"):
    return client.post(
        "/shoppingCart",
        json={"email": email, "itemId": item_id, "quantity": quantity},
        headers=headers,
    )


def test_add_item_links_it_to_user(client, headers, store):
    res = add(client, headers)
    assert res.status_code == 200, res.text
    item = res.json()
    assert len(item["id"]) == 20
    assert item == {"id": item["id"], "email": "ada@example.com", "itemId": 2, "quantity": 2}
    assert store.read("cart", item["id"]) == item
    assert store.read("users", "ada@example.com")["cartItemIds"] == [item["id"]]


def test_first_menu_item_can_be_added(client, headers):
    assert add(client, headers, item_id=0).status_code == 200


def test_zero_quantity_is_rejected(client, headers, store):
    res = add(client, headers, quantity=0)
    assert res.status_code == 400
    assert store.list_keys("cart") == []


@pytest.mark.parametrize(
    "payload",
    [
        {"itemId": 1, "quantity": 1},
        {"email": "ada@example.com", "quantity": 1},
        {"email": "ada@example.com", "itemId": "1", "quantity": 1},
        {"email": "ada@example.com", "itemId": 1, "quantity": -1},
        {"email": "ada@example.com", "itemId": -1, "quantity": 1},
    ],
)
def test_invalid_add_payloads(client, headers, payload):
    assert client.post("/shoppingCart", json=payload, headers=headers).status_code == 400


def test_unknown_menu_item(client, headers, store):
    res = add(client, headers, item_id=99)
    assert res.status_code == 400
    assert res.json() == {"Error": "The specified menu item does not exist."}
    assert store.list_keys("cart") == []


def test_add_requires_token_for_that_email(client, headers, other_token, store):
    assert add(client, {}).status_code == 403
    assert add(client, {"token": other_token["id"]}).status_code == 403
    assert store.list_keys("cart") == []


def test_max_cart_items(client, headers, store):
    for _ in range(3):
        assert add(client, headers).status_code == 200
    before = store.read("users", "ada@example.com")

    res = add(client, headers)
    assert res.status_code == 400
    assert res.json()["Error"].startswith("Maximum number of cart items reached (3)")
    assert len(store.list_keys("cart")) == 3
    assert store.read("users", "ada@example.com") == before


def test_read_line_view(client, headers):
    cart_id = add(client, headers, item_id=1, quantity=3).json()["id"]
    res = client.get("/shoppingCart", params={"id": cart_id}, headers=headers)
    assert res.status_code == 200, res.text
    assert res.json() == {
        "id": cart_id,
        "email": "ada@example.com",
        "itemId": 1,
        "name": "Marinara",
        "description": "Tomato sauce, garlic, oregano",
        "quantity": 3,
        "unitPrice": 7.0,
        "total": 21.0,
    }


def test_read_someone_elses_item_is_forbidden(client, headers, other_token):
    cart_id = add(client, headers).json()["id"]
    res = client.get("/shoppingCart", params={"id": cart_id}, headers={"token": other_token["id"]})
    assert res.status_code == 403


def test_read_errors(client, headers):
    assert client.get("/shoppingCart", params={"id": "x"}, headers=headers).status_code == 400
    assert client.get("/shoppingCart", params={"id": "M" * 20}, headers=headers).status_code == 404


@pytest.mark.parametrize("cart_id", ["AAAAAAAAAAAAAAAAAA/B", "..AAAAAAAAAAAAAAAA/."])
def test_cart_id_with_path_characters_is_not_found(client, headers, caplog, cart_id):
    assert client.get("/shoppingCart", params={"id": cart_id}, headers=headers).status_code == 404
    assert client.put("/shoppingCart", json={"id": cart_id, "quantity": 3}, headers=headers).status_code == 404
    assert client.delete("/shoppingCart", params={"id": cart_id}, headers=headers).status_code == 404
    assert not [r for r in caplog.records if r.levelname == "ERROR"]


def test_update_quantity(client, headers, store):
    cart_id = add(client, headers, quantity=2).json()["id"]

    res = client.put("/shoppingCart", json={"id": cart_id, "quantity": 2}, headers=headers)
    assert res.status_code == 202
    assert res.json() == {"Info": "No changes made."}

    res = client.put("/shoppingCart", json={"id": cart_id, "quantity": 5}, headers=headers)
    assert res.status_code == 200
    assert store.read("cart", cart_id)["quantity"] == 5


def test_update_errors(client, headers, other_token, store):
    cart_id = add(client, headers).json()["id"]
    assert client.put("/shoppingCart", json={"quantity": 1}, headers=headers).status_code == 400
    res = client.put("/shoppingCart", json={"id": cart_id, "quantity": 0}, headers=headers)
    assert res.status_code == 400
    assert res.json() == {"Error": "Missing fields to update."}
    res = client.put("/shoppingCart", json={"id": cart_id, "quantity": 9}, headers={"token": other_token["id"]})
    assert res.status_code == 403
    assert store.read("cart", cart_id)["quantity"] == 2


def test_delete_item_unlinks_it(client, headers, store):
    first = add(client, headers).json()["id"]
    second = add(client, headers).json()["id"]

    res = client.delete("/shoppingCart", params={"id": first}, headers=headers)
    assert res.status_code == 200, res.text
    assert not store.exists("cart", first)
    assert store.read("users", "ada@example.com")["cartItemIds"] == [second]


def test_delete_requires_owner(client, headers, other_token, store):
    cart_id = add(client, headers).json()["id"]
    res = client.delete("/shoppingCart", params={"id": cart_id}, headers={"token": other_token["id"]})
    assert res.status_code == 403
    assert store.exists("cart", cart_id)


def test_delete_detects_unlinked_item(client, headers, store):
    cart_id = add(client, headers).json()["id"]
    user = store.read("users", "ada@example.com")
    store.update("users", "ada@example.com", {**user, "cartItemIds": []})

    res = client.delete("/shoppingCart", params={"id": cart_id}, headers=headers)
    assert res.status_code == 500
    assert res.json() == {"Error": "Could not find the cart data on the user's object, so could not remove it."}
    # the cart record is already gone; nothing is rolled back
    assert not store.exists("cart", cart_id)


def test_delete_missing_item(client, headers):
    assert client.delete("/shoppingCart", params={"id": "M" * 20}, headers=headers).status_code == 404
    assert client.delete("/shoppingCart", headers=headers).status_code == 400


def test_add_reports_unsynced_user(client, headers, store, monkeypatch):
    def broken_update(user):
        from pizza_api.domain.errors import StoreError

        raise StoreError("disk full")

    users = client.app.state.dispatcher.routes["shoppingCart"].service.users
    monkeypatch.setattr(users, "update_user", broken_update)

    res = add(client, headers)
    assert res.status_code == 500
    assert res.json() == {"Error": "Could not update user with the new cart item."}
    assert len(store.list_keys("cart")) == 1
    assert store.read("users", "ada@example.com")["cartItemIds"] == []
