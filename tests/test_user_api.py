def test_health_check(client):
    assert client.get("/api/v1/health-check").json()["status"] == "ok"


def test_create_and_fetch_user(client, user):
    assert user["name"] == "Demo User"
    assert user["email"] == "demo@example.com"
    assert client.get(f"/api/v1/users/{user['id']}").json()["email"] == "demo@example.com"
    assert [u["id"] for u in client.get("/api/v1/users").json()] == [user["id"]]


def test_duplicate_email(client, user):
    r = client.post("/api/v1/users", json={"name": "Again", "email": "demo@example.com"})
    assert r.status_code == 409
    assert r.json()["detail"] == "Email already exists"


def test_blank_fields(client):
    r = client.post("/api/v1/users", json={"name": "  ", "email": "x@example.com"})
    assert r.status_code == 400


def test_update_user(client, user):
    r = client.put(f"/api/v1/users/{user['id']}", json={"name": "Renamed"})
    assert r.json()["name"] == "Renamed"
    assert r.json()["email"] == "demo@example.com"

    assert client.put(f"/api/v1/users/{user['id']}", json={}).status_code == 400
    assert client.put("/api/v1/users/999", json={"name": "x"}).status_code == 404


def test_update_to_taken_email(client, user):
    other = client.post("/api/v1/users", json={"name": "Other", "email": "other@example.com"}).json()
    r = client.put(f"/api/v1/users/{other['id']}", json={"email": "demo@example.com"})
    assert r.status_code == 409


def test_delete_user(client, user):
    assert client.delete(f"/api/v1/users/{user['id']}").json() == {"status": "success", "id": user["id"]}
    assert client.get(f"/api/v1/users/{user['id']}").status_code == 404
    assert client.delete(f"/api/v1/users/{user['id']}").status_code == 404
