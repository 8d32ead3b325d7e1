from datetime import datetime, timedelta
from uuid import uuid4

from fastapi import status

from notes_api.models import Note, User
from conftest import ACME_ADMIN, ACME_MEMBER


def test_note_crud_flow(client, auth_headers):
    headers = auth_headers(ACME_MEMBER)

    create_resp = client.post(
        "/api/notes", json={"title": "Groceries", "content": "Milk, eggs"}, headers=headers
    )
    assert create_resp.status_code == status.HTTP_201_CREATED
    note = create_resp.json()
    note_id = note["_id"]

    get_resp = client.get(f"/api/notes/{note_id}", headers=headers)
    assert get_resp.status_code == status.HTTP_200_OK
    assert get_resp.json()["title"] == "Groceries"
    assert get_resp.json()["content"] == "Milk, eggs"

    update_resp = client.put(
        f"/api/notes/{note_id}",
        json={"title": "Shopping", "content": "Milk, eggs, bread"},
        headers=headers,
    )
    assert update_resp.status_code == status.HTTP_200_OK
    assert update_resp.json()["title"] == "Shopping"

    get_resp = client.get(f"/api/notes/{note_id}", headers=headers)
    assert get_resp.json()["title"] == "Shopping"
    assert get_resp.json()["content"] == "Milk, eggs, bread"

    delete_resp = client.delete(f"/api/notes/{note_id}", headers=headers)
    assert delete_resp.status_code == status.HTTP_204_NO_CONTENT
    assert delete_resp.content == b""

    missing_resp = client.get(f"/api/notes/{note_id}", headers=headers)
    assert missing_resp.status_code == status.HTTP_404_NOT_FOUND
    assert missing_resp.json() == {"message": "Note not found"}


def test_note_response_uses_client_field_names(client, auth_headers, db_session):
    resp = client.post(
        "/api/notes", json={"title": "T", "content": "C"}, headers=auth_headers(ACME_ADMIN)
    )
    body = resp.json()
    assert set(body) == {"_id", "title", "content", "userId", "tenantId", "createdAt", "updatedAt"}

    admin = db_session.query(User).filter(User.email == ACME_ADMIN).one()
    assert body["userId"] == admin.id
    assert body["tenantId"] == admin.tenant_id


def test_create_ignores_client_supplied_owner_and_tenant(client, auth_headers, tenants, db_session):
    globex = tenants["globex"]
    resp = client.post(
        "/api/notes",
        json={
            "title": "Sneaky",
            "content": "Trying to write into another tenant",
            "tenantId": globex.id,
            "userId": "someone-else",
        },
        headers=auth_headers(ACME_MEMBER),
    )
    assert resp.status_code == status.HTTP_201_CREATED

    note = db_session.query(Note).filter(Note.id == resp.json()["_id"]).one()
    member = db_session.query(User).filter(User.email == ACME_MEMBER).one()
    assert note.tenant_id == member.tenant_id == tenants["acme"].id
    assert note.user_id == member.id


def test_list_returns_every_note_in_tenant(client, auth_headers, add_notes):
    add_notes(ACME_ADMIN, 2)
    client.post("/api/notes", json={"title": "Mine", "content": "x"}, headers=auth_headers(ACME_MEMBER))

    resp = client.get("/api/notes", headers=auth_headers(ACME_MEMBER))
    assert resp.status_code == status.HTTP_200_OK
    titles = {n["title"] for n in resp.json()}
    assert titles == {"Seeded 0", "Seeded 1", "Mine"}


def test_update_keeps_fields_left_out_of_body(client, auth_headers):
    headers = auth_headers(ACME_MEMBER)
    note_id = client.post(
        "/api/notes", json={"title": "Keep", "content": "Original"}, headers=headers
    ).json()["_id"]

    resp = client.put(f"/api/notes/{note_id}", json={"content": "Changed"}, headers=headers)
    assert resp.status_code == status.HTTP_200_OK
    assert resp.json()["title"] == "Keep"
    assert resp.json()["content"] == "Changed"


def test_create_requires_title_and_content(client, auth_headers):
    headers = auth_headers(ACME_MEMBER)

    resp = client.post("/api/notes", json={"title": "No content"}, headers=headers)
    assert resp.status_code == 422

    resp = client.post("/api/notes", json={"title": "", "content": "Empty title"}, headers=headers)
    assert resp.status_code == 422


def test_unknown_note_id_returns_404(client, auth_headers):
    headers = auth_headers(ACME_MEMBER)
    missing = str(uuid4())

    assert client.get(f"/api/notes/{missing}", headers=headers).status_code == status.HTTP_404_NOT_FOUND
    assert client.put(
        f"/api/notes/{missing}", json={"title": "x", "content": "y"}, headers=headers
    ).status_code == status.HTTP_404_NOT_FOUND
    assert client.delete(f"/api/notes/{missing}", headers=headers).status_code == status.HTTP_404_NOT_FOUND


def test_note_endpoints_require_authentication(client, tenants):
    note_id = str(uuid4())
    assert client.post("/api/notes", json={"title": "x", "content": "y"}).status_code == 401
    assert client.get("/api/notes").status_code == 401
    assert client.get(f"/api/notes/{note_id}").status_code == 401
    assert client.put(f"/api/notes/{note_id}", json={"title": "x"}).status_code == 401
    assert client.delete(f"/api/notes/{note_id}").status_code == 401


def test_timestamps_are_sent_as_utc(client, auth_headers):
    body = client.post(
        "/api/notes", json={"title": "When", "content": "Now"}, headers=auth_headers(ACME_MEMBER)
    ).json()

    for field in ("createdAt", "updatedAt"):
        assert body[field].endswith("Z")
        parsed = datetime.fromisoformat(body[field].replace("Z", "+00:00"))
        assert parsed.utcoffset() == timedelta(0)


def test_listed_timestamps_are_sent_as_utc(client, auth_headers, add_notes):
    add_notes(ACME_MEMBER, 1)
    note = client.get("/api/notes", headers=auth_headers(ACME_MEMBER)).json()[0]
    assert note["createdAt"].endswith("Z")
    assert note["updatedAt"].endswith("Z")
