from tests.utils import PASSWORD

ADMIN_HEADERS = {"x-admin-key": "test-admin-key"}

NEW_TENANT = {
    "name": "Initech",
    "slug": "initech",
    "email": "boss@initech.com",
    "password": "supersecret",
}


def test_provision_tenant(client):
    response = client.post("/api/admin/tenants", json=NEW_TENANT, headers=ADMIN_HEADERS)

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["tenant"]["slug"] == "initech"
    assert data["tenant"]["plan"] == "FREE"
    assert data["admin_email"] == "boss@initech.com"

    login = client.post("/api/auth/login", json={"email": "boss@initech.com", "password": "supersecret"})
    assert login.status_code == 200
    assert login.json()["data"]["user"]["role"] == "ADMIN"


def test_duplicate_slug_conflicts(client, acme):
    payload = {**NEW_TENANT, "slug": "acme", "password": PASSWORD * 2}
    response = client.post("/api/admin/tenants", json=payload, headers=ADMIN_HEADERS)
    assert response.status_code == 409


def test_requires_admin_key(client):
    assert client.post("/api/admin/tenants", json=NEW_TENANT).status_code == 403
    response = client.post("/api/admin/tenants", json=NEW_TENANT, headers={"x-admin-key": "wrong"})
    assert response.status_code == 403
    assert response.json()["error"] == "Invalid admin API key"


def test_invalid_slug_rejected(client):
    payload = {**NEW_TENANT, "slug": "Not A Slug"}
    response = client.post("/api/admin/tenants", json=payload, headers=ADMIN_HEADERS)
    assert response.status_code == 400
