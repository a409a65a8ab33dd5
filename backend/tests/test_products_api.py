import re

API = "/api/v1/products"


def new_product(**overrides):
    body = {"name": "Mechanical Keyboard", "price": 79.5, "quantity": 12, "category": "Peripherals"}
    body.update(overrides)
    return body


def test_create_generates_sku_when_missing(client, auth_headers):
    resp = client.post(API, json=new_product(), headers=auth_headers)

    assert resp.status_code == 201
    body = resp.json()
    assert re.fullmatch(r"[0-9A-F]{8}", body["sku"])
    assert body["quantity"] == 12


def test_create_normalizes_given_sku(client, auth_headers):
    resp = client.post(API, json=new_product(sku=" kb-001 "), headers=auth_headers)

    assert resp.status_code == 201
    assert resp.json()["sku"] == "KB-001"


def test_duplicate_sku_conflicts(client, auth_headers):
    client.post(API, json=new_product(sku="KB-001"), headers=auth_headers)

    resp = client.post(API, json=new_product(sku="kb-001", name="Other"), headers=auth_headers)

    assert resp.status_code == 409
    assert resp.json()["code"] == "DUPLICATE_SKU"


def test_negative_initial_quantity_is_rejected(client, auth_headers):
    resp = client.post(API, json=new_product(quantity=-1), headers=auth_headers)
    assert resp.status_code == 422


def test_update_does_not_touch_quantity(client, auth_headers, make_product, stock_of):
    product = make_product(quantity=7)

    resp = client.put(
        f"{API}/{product.id}", json={"name": "Renamed", "price": 1.25, "quantity": 500}, headers=auth_headers
    )

    assert resp.status_code == 200
    assert resp.json()["name"] == "Renamed"
    assert resp.json()["price"] == 1.25
    assert resp.json()["quantity"] == 7
    assert stock_of(product.id) == 7


def test_update_to_taken_sku_conflicts(client, auth_headers, make_product):
    make_product(sku="TAKEN")
    product = make_product()

    resp = client.put(f"{API}/{product.id}", json={"sku": "taken"}, headers=auth_headers)

    assert resp.status_code == 409


def test_get_and_list(client, auth_headers, make_product):
    product = make_product(quantity=3, name="Alpha")
    make_product(name="Beta")

    assert client.get(f"{API}/{product.id}", headers=auth_headers).json()["name"] == "Alpha"
    assert [row["name"] for row in client.get(API, headers=auth_headers).json()] == ["Alpha", "Beta"]


def test_missing_product(client, auth_headers):
    resp = client.get(f"{API}/404", headers=auth_headers)

    assert resp.status_code == 404
    assert resp.json() == {"detail": "Product not found", "code": "PRODUCT_NOT_FOUND", "product_id": 404}


def test_delete_unreferenced_product(client, auth_headers, make_product):
    product = make_product()

    resp = client.delete(f"{API}/{product.id}", headers=auth_headers)

    assert resp.status_code == 200
    assert resp.json() == {"message": "Product deleted successfully"}
    assert client.get(f"{API}/{product.id}", headers=auth_headers).status_code == 404


def test_delete_blocked_while_transactions_reference_it(client, auth_headers, make_product):
    product = make_product(quantity=5)
    client.post(
        "/api/v1/transactions",
        json={"type": "output", "product": product.id, "quantity": 2},
        headers=auth_headers,
    )

    resp = client.delete(f"{API}/{product.id}", headers=auth_headers)

    assert resp.status_code == 409
    assert resp.json()["code"] == "PRODUCT_IN_USE"
    assert resp.json()["transaction_count"] == 1
    assert client.get(f"{API}/{product.id}", headers=auth_headers).status_code == 200
