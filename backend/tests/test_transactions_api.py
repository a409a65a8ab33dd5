API = "/api/v1/transactions"


def post_movement(client, headers, product_id, type_, quantity, **extra):
    body = {"type": type_, "product": product_id, "quantity": quantity, **extra}
    return client.post(API, json=body, headers=headers)


def test_requires_acting_user(client):
    resp = client.get(API)
    assert resp.status_code == 401


def test_unknown_acting_user_is_rejected(client, user):
    resp = client.get(API, headers={"X-User-Id": "9999"})
    assert resp.status_code == 401


def test_list_empty(client, auth_headers):
    resp = client.get(API, headers=auth_headers)

    assert resp.status_code == 200
    body = resp.json()
    assert body["items"] == []
    assert body["total_count"] == 0
    assert body["current_page"] == 1


def test_create_returns_movement_with_product_and_user(client, auth_headers, make_product, stock_of, user):
    product = make_product(quantity=200, name="Wireless Mouse")

    resp = post_movement(client, auth_headers, product.id, "input", 50, notes="Restocking from supplier XYZ")

    assert resp.status_code == 201
    body = resp.json()
    assert body["type"] == "input"
    assert body["quantity"] == 50
    assert body["product"]["name"] == "Wireless Mouse"
    assert body["product"]["quantity"] == 250
    assert body["user"]["id"] == user.id
    assert stock_of(product.id) == 250


def test_create_insufficient_stock(client, auth_headers, make_product, stock_of):
    product = make_product(quantity=10)

    resp = post_movement(client, auth_headers, product.id, "output", 25)

    assert resp.status_code == 400
    body = resp.json()
    assert body["code"] == "INSUFFICIENT_STOCK"
    assert body["available"] == 10
    assert body["requested"] == 25
    assert stock_of(product.id) == 10


def test_create_for_missing_product(client, auth_headers):
    resp = post_movement(client, auth_headers, 999, "input", 1)

    assert resp.status_code == 404
    assert resp.json()["code"] == "PRODUCT_NOT_FOUND"


def test_create_validates_payload(client, auth_headers, make_product):
    product = make_product(quantity=10)

    assert post_movement(client, auth_headers, product.id, "input", 0).status_code == 422
    assert post_movement(client, auth_headers, product.id, "transfer", 1).status_code == 422
    assert post_movement(client, auth_headers, product.id, "input", 1.5).status_code == 422
    assert post_movement(client, auth_headers, product.id, "input", 1, notes="x" * 501).status_code == 422


def test_update_and_delete_round_trip(client, auth_headers, make_product, stock_of):
    product = make_product(quantity=200)
    created = post_movement(client, auth_headers, product.id, "input", 50).json()

    resp = client.put(f"{API}/{created['id']}", json={"quantity": 75}, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["quantity"] == 75
    assert stock_of(product.id) == 275

    resp = client.delete(f"{API}/{created['id']}", headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json() == {"message": "Transaction deleted successfully"}
    assert stock_of(product.id) == 200

    assert client.get(f"{API}/{created['id']}", headers=auth_headers).status_code == 404


def test_update_insufficient_stock_after_update(client, auth_headers, make_product, stock_of):
    product = make_product(quantity=10)
    created = post_movement(client, auth_headers, product.id, "output", 5).json()

    resp = client.put(f"{API}/{created['id']}", json={"quantity": 20}, headers=auth_headers)

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Insufficient stock after update. Available: 10, Requested: 20"
    assert stock_of(product.id) == 5


def test_delete_negative_stock_violation(client, auth_headers, make_product, stock_of):
    product = make_product(quantity=0)
    restock = post_movement(client, auth_headers, product.id, "input", 10).json()
    post_movement(client, auth_headers, product.id, "output", 8)

    resp = client.delete(f"{API}/{restock['id']}", headers=auth_headers)

    assert resp.status_code == 400
    assert resp.json()["code"] == "NEGATIVE_STOCK_VIOLATION"
    assert stock_of(product.id) == 2


def test_update_missing_transaction(client, auth_headers):
    resp = client.put(f"{API}/555", json={"quantity": 1}, headers=auth_headers)

    assert resp.status_code == 404
    assert resp.json()["code"] == "TRANSACTION_NOT_FOUND"


def test_list_filters_and_paginates(client, auth_headers, make_product):
    product = make_product(quantity=0)
    other = make_product(quantity=0)
    for day in range(1, 26):
        post_movement(client, auth_headers, product.id, "input", 1, date=f"2024-02-{day:02d}T10:00:00Z")
    post_movement(client, auth_headers, other.id, "input", 1, date="2024-02-03T10:00:00Z")

    resp = client.get(API, params={"product": product.id, "limit": 10, "page": 1}, headers=auth_headers)
    body = resp.json()
    assert resp.status_code == 200
    assert body["count"] == 10
    assert body["total_count"] == 25
    assert body["total_pages"] == 3
    assert body["items"][0]["date"].startswith("2024-02-25")

    resp = client.get(
        API,
        params={"startDate": "2024-02-01", "endDate": "2024-02-03", "limit": 50},
        headers=auth_headers,
    )
    assert resp.json()["total_count"] == 4


def test_list_rejects_malformed_dates(client, auth_headers):
    resp = client.get(API, params={"startDate": "not-a-date"}, headers=auth_headers)
    assert resp.status_code == 422


def test_list_caps_page_size(client, auth_headers):
    resp = client.get(API, params={"limit": 1000}, headers=auth_headers)
    assert resp.status_code == 422


def test_history_returns_everything_newest_first(client, auth_headers, make_product):
    product = make_product(quantity=0)
    for day in (5, 1, 9):
        post_movement(client, auth_headers, product.id, "input", day, date=f"2024-03-{day:02d}T00:00:00Z")

    resp = client.get(f"{API}/history", headers=auth_headers)

    body = resp.json()
    assert resp.status_code == 200
    assert body["count"] == 3
    assert [item["quantity"] for item in body["items"]] == [9, 5, 1]


def test_response_carries_request_id(client, auth_headers):
    resp = client.get(API, headers={**auth_headers, "X-Request-ID": "req-123"})
    assert resp.headers["X-Request-ID"] == "req-123"
