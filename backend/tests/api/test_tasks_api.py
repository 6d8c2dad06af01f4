"""API tests for the task endpoints."""
import pytest

from app.repositories.project import ProjectRepository
from app.repositories.task import TaskRepository


@pytest.fixture
def project(db_session, sample_tenant, tenant_admin):
    project = ProjectRepository(db_session).create(sample_tenant.id, "Website", tenant_admin.id)
    db_session.commit()
    return project


@pytest.fixture
def task(db_session, project):
    task = TaskRepository(db_session).create(project, "Write copy")
    db_session.commit()
    return task


@pytest.fixture
def headers(auth_headers, member):
    return auth_headers(member)


class TestTaskStatus:
    def test_update_status(self, client, headers, task):
        response = client.patch(f"/api/tasks/{task.id}/status", json={"status": "in_progress"}, headers=headers)
        assert response.status_code == 200
        assert response.json()["message"] == "Task status updated successfully"
        assert response.json()["data"]["status"] == "in_progress"

    def test_same_status_is_idempotent(self, client, headers, task):
        first = client.patch(f"/api/tasks/{task.id}/status", json={"status": "todo"}, headers=headers)
        second = client.patch(f"/api/tasks/{task.id}/status", json={"status": "todo"}, headers=headers)
        assert first.status_code == second.status_code == 200
        assert second.json()["data"]["status"] == "todo"

    def test_invalid_status(self, client, headers, task):
        response = client.patch(f"/api/tasks/{task.id}/status", json={"status": "done"}, headers=headers)
        assert response.status_code == 400

    def test_any_member_may_move_any_task(self, client, auth_headers, make_user, sample_tenant, task):
        other = make_user(sample_tenant, email="other@acme.com")
        response = client.patch(
            f"/api/tasks/{task.id}/status", json={"status": "completed"}, headers=auth_headers(other)
        )
        assert response.status_code == 200


class TestTaskUpdate:
    def test_update_fields(self, client, headers, member, task):
        response = client.put(
            f"/api/tasks/{task.id}",
            json={"title": "Rewrite copy", "assignedTo": str(member.id), "priority": "low"},
            headers=headers,
        )
        data = response.json()["data"]
        assert response.status_code == 200
        assert data["title"] == "Rewrite copy"
        assert data["assignedTo"] == str(member.id)
        assert data["priority"] == "low"

    def test_unassign(self, client, headers, member, db_session, task):
        task.assigned_to = member.id
        db_session.commit()
        response = client.put(f"/api/tasks/{task.id}", json={"assignedTo": None}, headers=headers)
        assert response.json()["data"]["assignedTo"] is None

    def test_empty_update(self, client, headers, task):
        response = client.put(f"/api/tasks/{task.id}", json={}, headers=headers)
        assert response.status_code == 400

    def test_required_fields_cannot_be_nulled(self, client, headers, task):
        for change in ({"title": None}, {"status": None}, {"priority": None}):
            response = client.put(f"/api/tasks/{task.id}", json=change, headers=headers)
            assert response.status_code == 400, change
            assert response.json()["message"] == "Title, status and priority cannot be empty"

        data = client.get(f"/api/tasks/{task.id}", headers=headers).json()["data"]
        assert (data["title"], data["status"], data["priority"]) == ("Write copy", "todo", "medium")


class TestTaskListing:
    def test_list_and_filter(self, client, headers, db_session, project, task):
        TaskRepository(db_session).create(project, "Pick fonts", priority="high")
        db_session.commit()

        body = client.get("/api/tasks", headers=headers).json()
        assert body["pagination"]["total"] == 2
        high = client.get("/api/tasks?priority=high", headers=headers).json()["data"]
        assert [t["title"] for t in high] == ["Pick fonts"]
        found = client.get("/api/tasks?search=COPY", headers=headers).json()["data"]
        assert [t["id"] for t in found] == [str(task.id)]

    def test_get(self, client, headers, task):
        response = client.get(f"/api/tasks/{task.id}", headers=headers)
        assert response.json()["data"]["title"] == "Write copy"

    def test_delete(self, client, headers, task):
        response = client.delete(f"/api/tasks/{task.id}", headers=headers)
        assert response.status_code == 200
        assert response.json()["message"] == "Task deleted successfully"
        assert client.get(f"/api/tasks/{task.id}", headers=headers).status_code == 404
