"""
Notebench Backend — Projects and Tasks API Tests
==================================================

What:  End-to-end tests for /api/project and the tasks nested under it.

What we test:
    ✅ Project CRUD restricted to the owner
    ✅ Task listing (empty → []), create, read, update, delete
    ✅ Task routes inherit the project's 404 / 403
    ✅ A task addressed through the wrong project → 404
    ✅ Deleting a project removes its tasks
"""

from uuid import UUID, uuid4

import pytest
from sqlalchemy import func, select

from notebench.models.task import Task


async def _create_project(client, user, name="Roadmap"):
    response = await client.post(
        "/api/project", json={"name": name, "description": "Q3"}, headers=user["headers"]
    )
    assert response.status_code == 201, response.text
    return response.json()


async def _create_task(client, user, project_id, title="Write docs", **extra):
    response = await client.post(
        f"/api/project/{project_id}/tasks",
        json={"title": title, **extra},
        headers=user["headers"],
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestProjects:

    @pytest.mark.asyncio
    async def test_create_and_get(self, test_client, alice):
        project = await _create_project(test_client, alice)
        assert project["owner"] == alice["id"]
        assert project["description"] == "Q3"

        response = await test_client.get(
            f"/api/project/{project['id']}", headers=alice["headers"]
        )
        assert response.status_code == 200
        assert response.json()["name"] == "Roadmap"

    @pytest.mark.asyncio
    async def test_description_defaults_to_empty(self, test_client, alice):
        response = await test_client.post(
            "/api/project", json={"name": "Bare"}, headers=alice["headers"]
        )
        assert response.status_code == 201
        assert response.json()["description"] == ""

    @pytest.mark.asyncio
    async def test_list_is_per_user(self, test_client, alice, bob):
        await _create_project(test_client, alice, "mine")
        await _create_project(test_client, bob, "theirs")

        response = await test_client.get("/api/project", headers=bob["headers"])

        assert [p["name"] for p in response.json()] == ["theirs"]

    @pytest.mark.asyncio
    async def test_stranger_cannot_read_update_or_delete(self, test_client, alice, bob):
        project = await _create_project(test_client, alice)
        url = f"/api/project/{project['id']}"

        assert (await test_client.get(url, headers=bob["headers"])).status_code == 403
        assert (
            await test_client.put(url, json={"name": "x"}, headers=bob["headers"])
        ).status_code == 403
        assert (await test_client.delete(url, headers=bob["headers"])).status_code == 403

        response = await test_client.get(url, headers=alice["headers"])
        assert response.json()["name"] == "Roadmap"

    @pytest.mark.asyncio
    async def test_update(self, test_client, alice):
        project = await _create_project(test_client, alice)

        response = await test_client.put(
            f"/api/project/{project['id']}",
            json={"description": "Q4"},
            headers=alice["headers"],
        )

        assert response.status_code == 200
        assert response.json()["description"] == "Q4"
        assert response.json()["name"] == "Roadmap"

    @pytest.mark.asyncio
    async def test_missing_project(self, test_client, alice):
        response = await test_client.get(f"/api/project/{uuid4()}", headers=alice["headers"])
        assert response.status_code == 404
        assert response.json()["message"].startswith("No project found for id")


class TestTasks:

    @pytest.mark.asyncio
    async def test_empty_project_lists_no_tasks(self, test_client, alice):
        project = await _create_project(test_client, alice)

        response = await test_client.get(
            f"/api/project/{project['id']}/tasks", headers=alice["headers"]
        )

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_task_lifecycle(self, test_client, alice):
        project = await _create_project(test_client, alice)
        task = await _create_task(test_client, alice, project["id"])
        assert task["project"] == project["id"]
        assert task["status"] == "todo"

        url = f"/api/project/{project['id']}/tasks/{task['id']}"

        response = await test_client.get(url, headers=alice["headers"])
        assert response.status_code == 200
        assert response.json()["title"] == "Write docs"

        response = await test_client.put(url, json={"status": "done"}, headers=alice["headers"])
        assert response.status_code == 200
        assert response.json()["status"] == "done"
        assert response.json()["title"] == "Write docs"

        response = await test_client.get(
            f"/api/project/{project['id']}/tasks", headers=alice["headers"]
        )
        assert [t["id"] for t in response.json()] == [task["id"]]

        response = await test_client.delete(url, headers=alice["headers"])
        assert response.status_code == 200
        assert (await test_client.get(url, headers=alice["headers"])).status_code == 404

    @pytest.mark.asyncio
    async def test_project_in_body_is_ignored(self, test_client, alice):
        first = await _create_project(test_client, alice, "first")
        second = await _create_project(test_client, alice, "second")

        task = await _create_task(test_client, alice, first["id"], project=second["id"])

        assert task["project"] == first["id"]

    @pytest.mark.asyncio
    async def test_stranger_project_is_forbidden(self, test_client, alice, bob):
        project = await _create_project(test_client, alice)
        task = await _create_task(test_client, alice, project["id"])
        base = f"/api/project/{project['id']}/tasks"

        assert (await test_client.get(base, headers=bob["headers"])).status_code == 403
        assert (
            await test_client.post(base, json={"title": "x"}, headers=bob["headers"])
        ).status_code == 403
        assert (
            await test_client.delete(f"{base}/{task['id']}", headers=bob["headers"])
        ).status_code == 403

    @pytest.mark.asyncio
    async def test_stranger_cannot_read_or_change_task(self, test_client, alice, bob):
        project = await _create_project(test_client, alice)
        task = await _create_task(test_client, alice, project["id"], title="T")
        url = f"/api/project/{project['id']}/tasks/{task['id']}"

        response = await test_client.get(url, headers=bob["headers"])
        assert response.status_code == 403

        response = await test_client.put(
            url, json={"title": "hijacked", "status": "done"}, headers=bob["headers"]
        )
        assert response.status_code == 403

        response = await test_client.get(url, headers=alice["headers"])
        assert response.status_code == 200
        assert response.json()["title"] == "T"
        assert response.json()["status"] == "todo"

    @pytest.mark.asyncio
    async def test_missing_project_tasks(self, test_client, alice):
        response = await test_client.get(
            f"/api/project/{uuid4()}/tasks", headers=alice["headers"]
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_task_through_wrong_project_is_not_found(self, test_client, alice):
        home = await _create_project(test_client, alice, "home")
        other = await _create_project(test_client, alice, "other")
        task = await _create_task(test_client, alice, home["id"])

        url = f"/api/project/{other['id']}/tasks/{task['id']}"
        assert (await test_client.get(url, headers=alice["headers"])).status_code == 404
        assert (
            await test_client.put(url, json={"title": "moved"}, headers=alice["headers"])
        ).status_code == 404
        assert (await test_client.delete(url, headers=alice["headers"])).status_code == 404

        response = await test_client.get(
            f"/api/project/{home['id']}/tasks/{task['id']}", headers=alice["headers"]
        )
        assert response.json()["title"] == "Write docs"

    @pytest.mark.asyncio
    async def test_invalid_status(self, test_client, alice):
        project = await _create_project(test_client, alice)

        response = await test_client.post(
            f"/api/project/{project['id']}/tasks",
            json={"title": "x", "status": "someday"},
            headers=alice["headers"],
        )

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"


class TestProjectDeletion:

    @pytest.mark.asyncio
    async def test_delete_removes_tasks(self, test_client, database, alice):
        project = await _create_project(test_client, alice)
        await _create_task(test_client, alice, project["id"], title="one")
        await _create_task(test_client, alice, project["id"], title="two")

        response = await test_client.delete(
            f"/api/project/{project['id']}", headers=alice["headers"]
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Project deleted"

        async with database.session_factory() as session:
            remaining = await session.scalar(
                select(func.count())
                .select_from(Task)
                .where(Task.project_id == UUID(project["id"]))
            )
        assert remaining == 0

        response = await test_client.get(
            f"/api/project/{project['id']}/tasks", headers=alice["headers"]
        )
        assert response.status_code == 404
