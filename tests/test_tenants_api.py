from app.models import Plan, Tenant
from tests.utils import add_notes, auth_headers


def test_tenant_info(client, db, acme):
    _, admin, _ = acme
    add_notes(db, admin, 2)

    response = client.get("/api/tenant/info", headers=auth_headers(admin))

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["tenant"]["slug"] == "acme"
    assert data["user_role"] == "ADMIN"
    subscription = data["subscription"]
    assert subscription["plan"] == "FREE"
    assert subscription["usage"] == {"current_notes": 2, "current_users": 2}
    assert subscription["remaining"] == {"notes": 1, "users": 3}
    assert subscription["can_upgrade"] is True


def test_upgrade_eligibility(client, acme):
    _, _, member = acme
    response = client.get("/api/tenants/acme/upgrade", headers=auth_headers(member))

    assert response.status_code == 200
    upgrade = response.json()["data"]["upgrade"]
    assert upgrade["eligible"] is True
    assert upgrade["target_plan"] == "PRO"


def test_admin_upgrades_tenant_and_limit_is_lifted(client, db, acme):
    tenant, admin, _ = acme
    add_notes(db, admin, 3)
    assert client.post("/api/notes", json={"title": "t", "content": "c"}, headers=auth_headers(admin)).status_code == 403

    response = client.post("/api/tenants/acme/upgrade", headers=auth_headers(admin))

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["tenant"]["plan"] == "PRO"
    assert data["upgrade"]["from_plan"] == "FREE"
    assert data["upgrade"]["to_plan"] == "PRO"
    assert data["upgrade"]["upgraded_by"]["email"] == "admin@acme.com"
    assert data["current_usage"]["current_notes"] == 3

    db.expire_all()
    assert db.get(Tenant, tenant.id).plan == Plan.PRO

    created = client.post("/api/notes", json={"title": "t", "content": "c"}, headers=auth_headers(admin))
    assert created.status_code == 201


def test_member_cannot_upgrade(client, db, acme):
    tenant, _, member = acme
    response = client.post("/api/tenants/acme/upgrade", headers=auth_headers(member))

    assert response.status_code == 403
    db.expire_all()
    assert db.get(Tenant, tenant.id).plan == Plan.FREE


def test_cannot_upgrade_other_tenant(client, acme, globex):
    _, acme_admin, _ = acme
    response = client.post("/api/tenants/globex/upgrade", headers=auth_headers(acme_admin))
    assert response.status_code == 403


def test_unknown_slug(client, acme):
    _, admin, _ = acme
    response = client.post("/api/tenants/initech/upgrade", headers=auth_headers(admin))
    assert response.status_code == 404
    assert response.json()["error"] == "Tenant not found"


def test_already_pro(client, globex):
    _, admin, _ = globex
    response = client.post("/api/tenants/globex/upgrade", headers=auth_headers(admin))
    assert response.status_code == 400
    assert response.json()["error"] == "Tenant is already on PRO plan"


def test_list_users_admin_only(client, acme, globex):
    _, admin, member = acme

    response = client.get("/api/users", headers=auth_headers(admin))
    assert response.status_code == 200
    emails = {u["email"] for u in response.json()["data"]["users"]}
    assert emails == {"admin@acme.com", "user@acme.com"}

    assert client.get("/api/users", headers=auth_headers(member)).status_code == 403


def test_list_users_filtered_by_role(client, acme):
    _, admin, _ = acme

    response = client.get("/api/users", params={"role": "MEMBER"}, headers=auth_headers(admin))

    assert response.status_code == 200
    data = response.json()["data"]
    assert [u["email"] for u in data["users"]] == ["user@acme.com"]
    assert data["pagination"]["total"] == 1
    assert data["pagination"]["total_pages"] == 1
