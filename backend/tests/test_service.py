def test_root_describes_service(client):
    resp = client.get("/")

    assert resp.status_code == 200
    assert resp.json()["name"] == "Stock Ledger API"


def test_health_pings_database(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "pass", "checks": {"database": "pass"}}


def test_startup_seeds_system_user(client):
    emails = [row["email"] for row in client.get("/api/v1/users").json()]
    assert "system@stockledger.local" in emails


def test_create_user_normalizes_email(client):
    resp = client.post("/api/v1/users", json={"email": " New.Clerk@Example.com ", "full_name": "New Clerk"})

    assert resp.status_code == 201
    assert resp.json()["email"] == "new.clerk@example.com"


def test_duplicate_email_conflicts(client):
    body = {"email": "dup@example.com", "full_name": "Dup"}
    client.post("/api/v1/users", json=body)

    resp = client.post("/api/v1/users", json=body)

    assert resp.status_code == 409
