"""
Notebench Backend — Notes API Tests
=====================================

What:  End-to-end tests for /api/notes through the ASGI app.
How:   HTTPX AsyncClient against a per-test SQLite database; users are
       registered through /api/users so every request carries a real token.

What we test:
    ✅ Create / read / update / delete by the owner
    ✅ Another user gets 403 and the record is left untouched
    ✅ Ownership cannot be forged through the body
    ✅ Absent or malformed ids → 404, missing token → 401
    ✅ Invalid bodies → 400 with the error envelope
"""

from uuid import uuid4

import pytest


async def _create_note(client, user, title="A", content="B"):
    response = await client.post(
        "/api/notes", json={"title": title, "content": content}, headers=user["headers"]
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestOwnerLifecycle:

    @pytest.mark.asyncio
    async def test_create_read_delete_flow(self, test_client, alice, bob):
        """Owner creates, a stranger is refused, owner deletes, the note is gone."""
        note = await _create_note(test_client, alice)
        assert note["owner"] == alice["id"]
        assert note["title"] == "A"

        response = await test_client.get(f"/api/notes/{note['id']}", headers=bob["headers"])
        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"

        response = await test_client.get(f"/api/notes/{note['id']}", headers=alice["headers"])
        assert response.status_code == 200
        assert response.json()["content"] == "B"

        response = await test_client.delete(f"/api/notes/{note['id']}", headers=alice["headers"])
        assert response.status_code == 200
        assert response.json()["id"] == note["id"]

        response = await test_client.get(f"/api/notes/{note['id']}", headers=alice["headers"])
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_owner_in_body_is_ignored(self, test_client, alice, bob):
        response = await test_client.post(
            "/api/notes",
            json={"title": "A", "content": "B", "owner": bob["id"]},
            headers=alice["headers"],
        )
        assert response.status_code == 201
        assert response.json()["owner"] == alice["id"]

    @pytest.mark.asyncio
    async def test_title_is_trimmed(self, test_client, alice):
        note = await _create_note(test_client, alice, title="  spaced  ")
        assert note["title"] == "spaced"

    @pytest.mark.asyncio
    async def test_list_only_returns_own_notes(self, test_client, alice, bob):
        await _create_note(test_client, alice, title="first")
        await _create_note(test_client, alice, title="second")
        await _create_note(test_client, bob, title="bob's")

        response = await test_client.get("/api/notes", headers=alice["headers"])

        assert response.status_code == 200
        titles = [n["title"] for n in response.json()]
        assert titles == ["first", "second"]

    @pytest.mark.asyncio
    async def test_list_empty(self, test_client, alice):
        response = await test_client.get("/api/notes", headers=alice["headers"])
        assert response.status_code == 200
        assert response.json() == []


class TestUpdate:

    @pytest.mark.asyncio
    async def test_partial_update_keeps_other_fields(self, test_client, alice):
        note = await _create_note(test_client, alice)

        response = await test_client.put(
            f"/api/notes/{note['id']}", json={"title": "renamed"}, headers=alice["headers"]
        )

        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "renamed"
        assert body["content"] == "B"
        assert body["owner"] == alice["id"]

    @pytest.mark.asyncio
    async def test_update_cannot_transfer_ownership(self, test_client, alice, bob):
        note = await _create_note(test_client, alice)

        response = await test_client.put(
            f"/api/notes/{note['id']}",
            json={"content": "C", "owner": bob["id"]},
            headers=alice["headers"],
        )

        assert response.status_code == 200
        assert response.json()["owner"] == alice["id"]

    @pytest.mark.asyncio
    async def test_stranger_update_leaves_record_unchanged(self, test_client, alice, bob):
        note = await _create_note(test_client, alice)

        response = await test_client.put(
            f"/api/notes/{note['id']}", json={"title": "hijacked"}, headers=bob["headers"]
        )
        assert response.status_code == 403

        response = await test_client.get(f"/api/notes/{note['id']}", headers=alice["headers"])
        assert response.json()["title"] == "A"

    @pytest.mark.asyncio
    async def test_null_title_rejected(self, test_client, alice):
        note = await _create_note(test_client, alice)

        response = await test_client.put(
            f"/api/notes/{note['id']}", json={"title": None}, headers=alice["headers"]
        )

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_update_missing_note(self, test_client, alice):
        response = await test_client.put(
            f"/api/notes/{uuid4()}", json={"title": "x"}, headers=alice["headers"]
        )
        assert response.status_code == 404


class TestDelete:

    @pytest.mark.asyncio
    async def test_double_delete_is_not_found(self, test_client, alice):
        note = await _create_note(test_client, alice)

        first = await test_client.delete(f"/api/notes/{note['id']}", headers=alice["headers"])
        second = await test_client.delete(f"/api/notes/{note['id']}", headers=alice["headers"])

        assert first.status_code == 200
        assert second.status_code == 404

    @pytest.mark.asyncio
    async def test_stranger_delete_is_forbidden(self, test_client, alice, bob):
        note = await _create_note(test_client, alice)

        response = await test_client.delete(f"/api/notes/{note['id']}", headers=bob["headers"])
        assert response.status_code == 403

        response = await test_client.get(f"/api/notes/{note['id']}", headers=alice["headers"])
        assert response.status_code == 200


class TestRejections:

    @pytest.mark.asyncio
    async def test_missing_token(self, test_client):
        response = await test_client.get("/api/notes")

        assert response.status_code == 401
        assert response.json()["error"] == "unauthorized"
        assert response.headers["www-authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_invalid_token(self, test_client):
        response = await test_client.get(
            "/api/notes", headers={"Authorization": "Bearer not.a.token"}
        )
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_malformed_id_is_not_found(self, test_client, alice):
        response = await test_client.get("/api/notes/not-an-id", headers=alice["headers"])
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_missing_content(self, test_client, alice):
        response = await test_client.post(
            "/api/notes", json={"title": "A"}, headers=alice["headers"]
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert any(e["field"] == "content" for e in body["details"]["errors"])

    @pytest.mark.asyncio
    async def test_blank_title(self, test_client, alice):
        response = await test_client.post(
            "/api/notes", json={"title": "   ", "content": "B"}, headers=alice["headers"]
        )
        assert response.status_code == 400
