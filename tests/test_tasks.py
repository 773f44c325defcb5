"""
Integration tests for the task board.

Tests cover:
- Defaults and validation on create
- Membership checks through the owning project
- Filters and pagination envelope
- Any member updates, only the creator deletes
"""

from __future__ import annotations

import pytest

MISSING = "00000000-0000-0000-0000-000000000000"


async def _create(client, account, project_id, **fields):
    response = await client.post(
        "/api/v1/tasks", json={"projectId": project_id, **fields}, headers=account.headers
    )
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateTask:
    @pytest.mark.asyncio
    async def test_defaults(self, alice, project, task):
        assert task["status"] == "todo"
        assert task["priority"] == "medium"
        assert task["projectId"] == project["id"]
        assert task["createdBy"] == alice.id
        assert task["assignedTo"] is None

    @pytest.mark.asyncio
    async def test_all_fields(self, client, alice, bob, project, bob_in_org):
        task = await _create(
            client,
            alice,
            project["id"],
            title="Ship it",
            description="Everything",
            status="in_progress",
            priority="high",
            assignedTo=bob.id,
            dueDate="2030-01-15T12:00:00Z",
        )
        assert task["status"] == "in_progress"
        assert task["priority"] == "high"
        assert task["assignedTo"] == bob.id
        assert task["dueDate"].startswith("2030-01-15T12:00:00")

    @pytest.mark.asyncio
    async def test_non_member_cannot_create(self, client, carol, project):
        response = await client.post(
            "/api/v1/tasks",
            json={"title": "Sneaky", "projectId": project["id"]},
            headers=carol.headers,
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_missing_project(self, client, alice):
        response = await client.post(
            "/api/v1/tasks", json={"title": "Orphan", "projectId": MISSING}, headers=alice.headers
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_invalid_status(self, client, alice, project):
        response = await client.post(
            "/api/v1/tasks",
            json={"title": "Bad", "projectId": project["id"], "status": "blocked"},
            headers=alice.headers,
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_title_too_short(self, client, alice, project):
        response = await client.post(
            "/api/v1/tasks", json={"title": "ab", "projectId": project["id"]}, headers=alice.headers
        )
        assert response.status_code == 400


class TestListTasks:
    @pytest.mark.asyncio
    async def test_envelope(self, client, alice, project, task):
        response = await client.get(
            "/api/v1/tasks", params={"projectId": project["id"]}, headers=alice.headers
        )
        assert response.status_code == 200
        body = response.json()
        assert [t["id"] for t in body["data"]] == [task["id"]]
        assert body["meta"] == {"total": 1, "page": 1, "limit": 10, "totalPages": 1}

    @pytest.mark.asyncio
    async def test_pagination(self, client, alice, project):
        for i in range(5):
            await _create(client, alice, project["id"], title=f"Task number {i}")

        response = await client.get(
            "/api/v1/tasks",
            params={"projectId": project["id"], "page": 2, "limit": 2},
            headers=alice.headers,
        )
        body = response.json()
        assert len(body["data"]) == 2
        assert body["meta"] == {"total": 5, "page": 2, "limit": 2, "totalPages": 3}

        response = await client.get(
            "/api/v1/tasks",
            params={"projectId": project["id"], "page": 3, "limit": 2},
            headers=alice.headers,
        )
        assert len(response.json()["data"]) == 1

    @pytest.mark.asyncio
    async def test_empty_project(self, client, alice, project):
        response = await client.get(
            "/api/v1/tasks", params={"projectId": project["id"]}, headers=alice.headers
        )
        assert response.json()["meta"] == {"total": 0, "page": 1, "limit": 10, "totalPages": 0}

    @pytest.mark.asyncio
    async def test_filters(self, client, alice, bob, project, bob_in_org):
        await _create(client, alice, project["id"], title="Low todo", priority="low")
        await _create(client, alice, project["id"], title="High done", priority="high", status="done")
        assigned = await _create(client, alice, project["id"], title="Bob's job", assignedTo=bob.id)

        async def titles(**params):
            response = await client.get(
                "/api/v1/tasks", params={"projectId": project["id"], **params}, headers=alice.headers
            )
            return {t["title"] for t in response.json()["data"]}

        assert await titles(status="done") == {"High done"}
        assert await titles(priority="low") == {"Low todo"}
        assert await titles(status="todo") == {"Low todo", "Bob's job"}
        assert await titles(assignedTo=bob.id) == {assigned["title"]}

    @pytest.mark.asyncio
    async def test_limit_bounds(self, client, alice, project):
        response = await client.get(
            "/api/v1/tasks", params={"projectId": project["id"], "limit": 101}, headers=alice.headers
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_non_member_cannot_list(self, client, carol, project, task):
        response = await client.get(
            "/api/v1/tasks", params={"projectId": project["id"]}, headers=carol.headers
        )
        assert response.status_code == 403


class TestUpdateAndDelete:
    @pytest.mark.asyncio
    async def test_any_member_updates(self, client, bob, task, bob_in_org):
        response = await client.patch(
            f"/api/v1/tasks/{task['id']}", json={"status": "in_progress"}, headers=bob.headers
        )
        assert response.status_code == 200
        assert response.json()["status"] == "in_progress"
        assert response.json()["title"] == task["title"]

    @pytest.mark.asyncio
    async def test_non_member_cannot_update(self, client, carol, task):
        response = await client.patch(
            f"/api/v1/tasks/{task['id']}", json={"status": "done"}, headers=carol.headers
        )
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_cannot_move_to_another_project(self, client, alice, task):
        response = await client.patch(
            f"/api/v1/tasks/{task['id']}", json={"projectId": MISSING}, headers=alice.headers
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_cannot_null_status(self, client, alice, task):
        response = await client.patch(
            f"/api/v1/tasks/{task['id']}", json={"status": None}, headers=alice.headers
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_unassign(self, client, alice, bob, project, bob_in_org):
        task = await _create(client, alice, project["id"], title="Assigned", assignedTo=bob.id)
        response = await client.patch(
            f"/api/v1/tasks/{task['id']}", json={"assignedTo": None}, headers=alice.headers
        )
        assert response.status_code == 200
        assert response.json()["assignedTo"] is None

    @pytest.mark.asyncio
    async def test_only_creator_deletes(self, client, alice, bob, task, bob_in_org):
        response = await client.delete(f"/api/v1/tasks/{task['id']}", headers=bob.headers)
        assert response.status_code == 403
        assert response.json()["message"] == "Only the task creator can delete it"

        response = await client.delete(f"/api/v1/tasks/{task['id']}", headers=alice.headers)
        assert response.status_code == 204

        response = await client.get(f"/api/v1/tasks/{task['id']}", headers=alice.headers)
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_with_comments_conflicts(self, client, alice, task):
        response = await client.post(
            "/api/v1/comments",
            json={"content": "Blocked on review", "taskId": task["id"]},
            headers=alice.headers,
        )
        assert response.status_code == 201, response.text

        response = await client.delete(f"/api/v1/tasks/{task['id']}", headers=alice.headers)
        assert response.status_code == 409
        assert response.json()["message"] == "Conflict with existing data"

        response = await client.get(f"/api/v1/tasks/{task['id']}", headers=alice.headers)
        assert response.status_code == 200
