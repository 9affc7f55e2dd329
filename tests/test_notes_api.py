from sqlalchemy import func, select

from app.models import Note
from tests.utils import add_notes, auth_headers


def create_note(client, user, title="Meeting notes", content="Discuss roadmap"):
    return client.post("/api/notes", json={"title": title, "content": content}, headers=auth_headers(user))


def note_count(db, tenant_id):
    db.expire_all()
    return db.execute(select(func.count()).select_from(Note).where(Note.tenant_id == tenant_id)).scalar_one()


def test_create_then_get_round_trip(client, acme):
    _, admin, _ = acme
    created = create_note(client, admin, "  Quarterly plan  ", "Ship it")

    assert created.status_code == 201
    note = created.json()["data"]["note"]
    assert note["title"] == "Quarterly plan"
    assert note["author"]["email"] == "admin@acme.com"

    fetched = client.get(f"/api/notes/{note['id']}", headers=auth_headers(admin))
    assert fetched.status_code == 200
    same = fetched.json()["data"]["note"]
    assert same["title"] == "Quarterly plan"
    assert same["content"] == "Ship it"
    assert same["author_id"] == admin.id


def test_create_reports_subscription_usage(client, acme):
    _, admin, _ = acme
    response = create_note(client, admin)

    assert response.json()["data"]["subscription"] == {
        "plan": "FREE",
        "notes_used": 1,
        "notes_limit": 3,
        "notes_remaining": 2,
    }
    assert response.headers["X-Subscription-Plan"] == "FREE"
    assert response.headers["X-Notes-Used"] == "1"
    assert response.headers["X-Notes-Limit"] == "3"
    assert response.headers["X-Notes-Remaining"] == "2"


def test_free_tenant_blocked_at_three_notes(client, db, acme):
    tenant, admin, _ = acme
    for i in range(3):
        assert create_note(client, admin, f"Note {i}").status_code == 201

    response = create_note(client, admin, "One too many")

    assert response.status_code == 403
    body = response.json()
    assert body["success"] is False
    assert "Note limit reached" in body["error"]
    assert body["details"]["limit"] == 3
    assert note_count(db, tenant.id) == 3


def test_limit_counts_notes_of_all_tenant_users(client, db, acme):
    _, admin, member = acme
    add_notes(db, admin, 3)

    response = create_note(client, member)
    assert response.status_code == 403


def test_pro_tenant_is_never_limited(client, db, globex):
    _, admin, _ = globex
    add_notes(db, admin, 3)

    response = create_note(client, admin, "Fourth note")

    assert response.status_code == 201
    assert response.headers["X-Notes-Limit"] == "unlimited"
    assert response.headers["X-Notes-Remaining"] == "unlimited"
    assert response.json()["data"]["subscription"]["notes_limit"] is None


def test_tenant_isolation(client, db, acme, globex):
    _, acme_admin, _ = acme
    _, globex_admin, _ = globex
    note_id = create_note(client, acme_admin, "Acme secret").json()["data"]["note"]["id"]
    add_notes(db, globex_admin, 2)

    listed = client.get("/api/notes", headers=auth_headers(globex_admin)).json()["data"]
    assert all(n["title"] != "Acme secret" for n in listed["notes"])
    assert listed["pagination"]["total"] == 2

    for method in ("get", "delete"):
        response = getattr(client, method)(f"/api/notes/{note_id}", headers=auth_headers(globex_admin))
        assert response.status_code == 404
        assert response.json()["error"] == "Note not found"

    response = client.put(
        f"/api/notes/{note_id}",
        json={"title": "Hijacked"},
        headers=auth_headers(globex_admin),
    )
    assert response.status_code == 404


def test_member_sees_all_tenant_notes(client, db, acme):
    _, admin, member = acme
    add_notes(db, admin, 2)

    response = client.get("/api/notes", headers=auth_headers(member))
    assert response.json()["data"]["pagination"]["total"] == 2


def test_member_cannot_change_others_notes(client, acme):
    _, admin, member = acme
    note_id = create_note(client, admin).json()["data"]["note"]["id"]

    update = client.put(f"/api/notes/{note_id}", json={"title": "Mine now"}, headers=auth_headers(member))
    assert update.status_code == 403
    assert update.json()["error"] == "You can only edit your own notes"

    delete = client.delete(f"/api/notes/{note_id}", headers=auth_headers(member))
    assert delete.status_code == 403


def test_member_manages_own_note(client, acme):
    _, _, member = acme
    note_id = create_note(client, member).json()["data"]["note"]["id"]

    update = client.put(f"/api/notes/{note_id}", json={"content": "Updated"}, headers=auth_headers(member))
    assert update.status_code == 200
    assert update.json()["data"]["note"]["content"] == "Updated"
    assert update.json()["data"]["note"]["title"] == "Meeting notes"

    delete = client.delete(f"/api/notes/{note_id}", headers=auth_headers(member))
    assert delete.status_code == 200
    assert delete.json()["data"]["deleted_note"]["id"] == note_id
    assert delete.json()["data"]["subscription"]["notes_used"] == 0


def test_admin_can_change_any_note(client, acme):
    _, admin, member = acme
    note_id = create_note(client, member).json()["data"]["note"]["id"]

    update = client.put(f"/api/notes/{note_id}", json={"title": "Reviewed"}, headers=auth_headers(admin))
    assert update.status_code == 200

    delete = client.delete(f"/api/notes/{note_id}", headers=auth_headers(admin))
    assert delete.status_code == 200


def test_note_validation(client, acme):
    _, admin, _ = acme
    assert create_note(client, admin, "   ", "content").status_code == 400
    assert create_note(client, admin, "x" * 201, "content").status_code == 400
    assert create_note(client, admin, "title", "y" * 10001).status_code == 400

    response = create_note(client, admin, "title", "   ")
    assert response.status_code == 400
    assert "Content cannot be empty" in response.json()["error"]


def test_update_requires_a_field(client, acme):
    _, admin, _ = acme
    note_id = create_note(client, admin).json()["data"]["note"]["id"]

    response = client.put(f"/api/notes/{note_id}", json={}, headers=auth_headers(admin))
    assert response.status_code == 400
    assert "At least one field" in response.json()["error"]


def test_search_matches_title_or_content(client, globex):
    _, admin, _ = globex
    create_note(client, admin, "Grocery list", "milk and eggs")
    create_note(client, admin, "Standup", "Talk about the GROCERY app")
    create_note(client, admin, "Unrelated", "nothing here")

    response = client.get("/api/notes", params={"search": "grocery"}, headers=auth_headers(admin))

    titles = {n["title"] for n in response.json()["data"]["notes"]}
    assert titles == {"Grocery list", "Standup"}


def test_sort_and_pagination(client, db, globex):
    _, admin, _ = globex
    for title in ("banana", "apple", "cherry"):
        create_note(client, admin, title, "fruit")

    response = client.get(
        "/api/notes",
        params={"sortBy": "title", "sortOrder": "asc", "limit": 2, "page": 1},
        headers=auth_headers(admin),
    )
    data = response.json()["data"]
    assert [n["title"] for n in data["notes"]] == ["apple", "banana"]
    assert data["pagination"] == {
        "page": 1,
        "limit": 2,
        "total": 3,
        "total_pages": 2,
        "has_next_page": True,
        "has_prev_page": False,
    }

    page_two = client.get(
        "/api/notes",
        params={"sortBy": "title", "sortOrder": "asc", "limit": 2, "page": 2},
        headers=auth_headers(admin),
    ).json()["data"]
    assert [n["title"] for n in page_two["notes"]] == ["cherry"]


def test_default_order_is_newest_first(client, globex):
    _, admin, _ = globex
    for title in ("first", "second", "third"):
        create_note(client, admin, title, "body")

    notes = client.get("/api/notes", headers=auth_headers(admin)).json()["data"]["notes"]
    assert [n["title"] for n in notes] == ["third", "second", "first"]


def test_invalid_list_parameters(client, acme):
    _, admin, _ = acme
    headers = auth_headers(admin)
    assert client.get("/api/notes", params={"page": 0}, headers=headers).status_code == 400
    assert client.get("/api/notes", params={"limit": 101}, headers=headers).status_code == 400
    assert client.get("/api/notes", params={"sortBy": "author"}, headers=headers).status_code == 400
    assert client.get("/api/notes", params={"sortOrder": "up"}, headers=headers).status_code == 400
    assert client.get("/api/notes", params={"search": "s" * 201}, headers=headers).status_code == 400


def test_search_treats_wildcards_literally(client, globex):
    _, admin, _ = globex
    create_note(client, admin, "Budget", "quarterly numbers")
    create_note(client, admin, "100% done", "wrapped up")
    create_note(client, admin, "snake_case", "naming")

    def titles(term):
        response = client.get("/api/notes", params={"search": term}, headers=auth_headers(admin))
        return [n["title"] for n in response.json()["data"]["notes"]]

    assert titles("%") == ["100% done"]
    assert titles("_") == ["snake_case"]
    assert titles("0% d") == ["100% done"]
