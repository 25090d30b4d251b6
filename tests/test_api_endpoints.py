"""Integration tests for API endpoints.

These tests verify API endpoints work correctly end-to-end.
"""

import pytest
from datetime import datetime, timedelta
from unittest.mock import patch


def _create_task(test_client, **fields):
    response = test_client.post("/api/tasks", json={"title": "Test Task", **fields})
    assert response.status_code == 201
    return response.json()["task"]


def _create_category(test_client, name="Work", **fields):
    response = test_client.post("/api/categories", json={"name": name, **fields})
    assert response.status_code == 201
    return response.json()["category"]


class TestHealth:
    def test_health(self, test_client):
        response = test_client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "version": "0.1.0"}


class TestTaskEndpoints:
    """Test task CRUD API endpoints."""

    def test_create_task(self, test_client, test_user_id):
        """Test POST /api/tasks endpoint."""
        response = test_client.post(
            "/api/tasks",
            json={
                "title": "Test Task",
                "description": "Test description",
                "priority": "high",
                "due_date": "2026-10-15T17:00:00",
            },
        )

        assert response.status_code == 201
        task = response.json()["task"]
        assert task["title"] == "Test Task"
        assert task["priority"] == "high"
        assert task["completed"] is False
        assert task["reminder_type"] == "default"
        assert task["user_id"] == test_user_id
        assert "id" in task

    def test_create_task_validation(self, test_client):
        """Test that empty titles and bad reminder times are rejected."""
        assert test_client.post("/api/tasks", json={"title": ""}).status_code == 422
        response = test_client.post("/api/tasks", json={"title": "Feed cat", "reminder_time": "7:30pm"})
        assert response.status_code == 422

    def test_create_task_with_unknown_category(self, test_client):
        """Test that a category the user does not own is rejected."""
        response = test_client.post("/api/tasks", json={"title": "Report", "category_id": "nope"})
        assert response.status_code == 400

    def test_list_tasks(self, test_client):
        """Test GET /api/tasks endpoint."""
        _create_task(test_client, title="Task 1")
        _create_task(test_client, title="Task 2")

        response = test_client.get("/api/tasks")
        assert response.status_code == 200
        titles = {task["title"] for task in response.json()["tasks"]}
        assert titles == {"Task 1", "Task 2"}

    def test_list_tasks_due_today(self, test_client):
        """Test GET /api/tasks/today only returns today's deadlines."""
        today = datetime.now().replace(hour=23, minute=0, second=0, microsecond=0)
        _create_task(test_client, title="Today", due_date=today.isoformat())
        _create_task(test_client, title="Later", due_date=(today + timedelta(days=2)).isoformat())
        _create_task(test_client, title="Undated")

        response = test_client.get("/api/tasks/today")
        assert response.status_code == 200
        assert [task["title"] for task in response.json()["tasks"]] == ["Today"]

    def test_get_task(self, test_client):
        """Test GET /api/tasks/{id} endpoint."""
        created = _create_task(test_client)

        response = test_client.get(f"/api/tasks/{created['id']}")
        assert response.status_code == 200
        assert response.json()["task"]["id"] == created["id"]

    def test_get_nonexistent_task(self, test_client):
        """Test GET /api/tasks/{id} with nonexistent ID."""
        assert test_client.get("/api/tasks/nonexistent-id").status_code == 404

    def test_update_task(self, test_client):
        """Test PATCH /api/tasks/{id} endpoint."""
        created = _create_task(test_client, description="keep me")

        response = test_client.patch(
            f"/api/tasks/{created['id']}",
            json={"title": "Updated Task", "completed": True},
        )
        assert response.status_code == 200
        task = response.json()["task"]
        assert task["title"] == "Updated Task"
        assert task["completed"] is True
        assert task["description"] == "keep me"

    def test_update_clears_nullable_field(self, test_client):
        """Test an explicit null clears the deadline."""
        created = _create_task(test_client, due_date="2026-10-15T17:00:00")

        response = test_client.patch(f"/api/tasks/{created['id']}", json={"due_date": None})
        assert response.status_code == 200
        assert response.json()["task"]["due_date"] is None

    def test_update_nonexistent_task(self, test_client):
        response = test_client.patch("/api/tasks/nonexistent-id", json={"title": "x"})
        assert response.status_code == 404

    def test_delete_task(self, test_client):
        """Test DELETE /api/tasks/{id} endpoint."""
        created = _create_task(test_client)

        assert test_client.delete(f"/api/tasks/{created['id']}").status_code == 204
        assert test_client.get(f"/api/tasks/{created['id']}").status_code == 404
        assert test_client.delete(f"/api/tasks/{created['id']}").status_code == 404


class TestCategoryEndpoints:
    """Test category API endpoints."""

    def test_create_and_list(self, test_client):
        _create_category(test_client, "Work", color="#3B82F6")
        _create_category(test_client, "Home")

        response = test_client.get("/api/categories")
        assert response.status_code == 200
        assert [c["name"] for c in response.json()["categories"]] == ["Home", "Work"]

    def test_invalid_color(self, test_client):
        response = test_client.post("/api/categories", json={"name": "Work", "color": "blue"})
        assert response.status_code == 422

    def test_update(self, test_client):
        category = _create_category(test_client, "Work")

        response = test_client.patch(f"/api/categories/{category['id']}", json={"name": "Office"})
        assert response.status_code == 200
        assert response.json()["category"]["name"] == "Office"
        assert response.json()["category"]["color"] == category["color"]

    def test_update_nonexistent(self, test_client):
        assert test_client.patch("/api/categories/nope", json={"name": "x"}).status_code == 404

    def test_delete_uncategorizes_tasks(self, test_client):
        category = _create_category(test_client, "Work")
        task = _create_task(test_client, title="Report", category_id=category["id"])

        assert test_client.delete(f"/api/categories/{category['id']}").status_code == 204
        assert test_client.get("/api/categories").json()["categories"] == []
        assert test_client.get(f"/api/tasks/{task['id']}").json()["task"]["category_id"] is None
        assert test_client.delete(f"/api/categories/{category['id']}").status_code == 404


class TestStatsEndpoint:
    def test_stats(self, test_client):
        _create_task(test_client, title="A", priority="high", completed=True)
        _create_task(test_client, title="B", priority="low")

        response = test_client.get("/api/stats")
        assert response.status_code == 200
        stats = response.json()
        assert stats["total"] == 2
        assert stats["completed"] == 1
        assert stats["completion_rate"] == 50
        assert stats["high_priority"] == 1
        assert stats["period"] == "week"
        assert len(stats["period_data"]) == 7

    def test_stats_quarter(self, test_client):
        response = test_client.get("/api/stats", params={"period": "quarter"})
        assert response.status_code == 200
        assert len(response.json()["period_data"]) == 12


class TestVoiceEndpoints:
    """Test voice parse and execute endpoints."""

    def test_parse(self, test_client):
        response = test_client.post("/api/voice/parse", json={"transcript": "Delete 'Old Project'"})
        assert response.status_code == 200
        command = response.json()
        assert command["type"] == "delete"
        assert command["task_identifier"] == "Old Project"
        assert command["confidence"] == "high"

    def test_add_then_list(self, test_client):
        response = test_client.post("/api/voice/command", json={"transcript": "Add task buy milk"})
        assert response.status_code == 200
        outcome = response.json()
        assert outcome["title"] == "Task Created"
        assert outcome["variant"] == "normal"

        tasks = test_client.get("/api/tasks").json()["tasks"]
        assert [task["title"] for task in tasks] == ["buy milk"]
        assert tasks[0]["id"] == outcome["task_id"]

        listing = test_client.post("/api/voice/command", json={"transcript": "Show my tasks"}).json()
        assert listing["description"] == "You have 1 pending and 0 completed tasks."

    def test_complete_and_clear(self, test_client):
        task = _create_task(test_client, title="Laundry")

        outcome = test_client.post("/api/voice/command", json={"transcript": "Mark laundry as done"}).json()
        assert outcome["title"] == "Task Completed"
        assert test_client.get(f"/api/tasks/{task['id']}").json()["task"]["completed"] is True

        outcome = test_client.post("/api/voice/command", json={"transcript": "Clear completed tasks"}).json()
        assert outcome["title"] == "Completed Tasks Cleared"
        assert test_client.get("/api/tasks").json()["tasks"] == []

    def test_not_found(self, test_client):
        outcome = test_client.post("/api/voice/command", json={"transcript": "Delete 'Old Project'"}).json()
        assert outcome["title"] == "Task Not Found"
        assert outcome["variant"] == "destructive"

    def test_options_apply_category(self, test_client):
        category = _create_category(test_client, "Errands")

        response = test_client.post(
            "/api/voice/command",
            json={"transcript": "Add pick up dry cleaning", "options": {"category_id": category["id"]}},
        )
        assert response.status_code == 200
        task = test_client.get("/api/tasks").json()["tasks"][0]
        assert task["category_id"] == category["id"]

    def test_options_with_unknown_category(self, test_client):
        response = test_client.post(
            "/api/voice/command",
            json={"transcript": "Add pick up dry cleaning", "options": {"category_id": "nope"}},
        )
        assert response.status_code == 400


class TestAuthEndpoints:
    """Test sign-in and profile endpoints."""

    @patch("voicetasks.api.app.verify_google_token")
    def test_google_sign_in(self, mock_verify, test_client):
        mock_verify.return_value = {
            "id": "google-42",
            "email": "ada@example.com",
            "name": "Ada",
            "picture": None,
        }

        response = test_client.post("/auth/google", json={"id_token": "token"})
        assert response.status_code == 200
        body = response.json()
        assert body["token_type"] == "bearer"
        assert body["access_token"]
        assert body["user"]["id"] == "google-42"
        assert body["user"]["email"] == "ada@example.com"

    @patch("voicetasks.api.app.verify_google_token")
    def test_google_sign_in_invalid_token(self, mock_verify, test_client):
        mock_verify.return_value = None
        assert test_client.post("/auth/google", json={"id_token": "bad"}).status_code == 401

    def test_get_auth_user(self, test_client, test_user_id):
        response = test_client.get("/api/auth/user")
        assert response.status_code == 200
        assert response.json()["id"] == test_user_id

    def test_update_profile(self, test_client):
        response = test_client.patch("/api/profile", json={"name": "New Name"})
        assert response.status_code == 200
        assert response.json()["name"] == "New Name"
        assert response.json()["email"] == "test@example.com"


class TestReminderEndpoint:
    """Test POST /api/reminders/due."""

    def test_delivers_each_reminder_once(self, test_client):
        due = datetime.now() + timedelta(hours=1)
        task = _create_task(test_client, title="Send invoice", due_date=due.isoformat())
        _create_task(test_client, title="Far off", due_date=(due + timedelta(days=5)).isoformat())

        response = test_client.post("/api/reminders/due")
        assert response.status_code == 200
        reminders = response.json()["reminders"]
        assert [r["task_id"] for r in reminders] == [task["id"]]
        assert reminders[0]["title"] == "Task Deadline Reminder"

        assert test_client.get(f"/api/tasks/{task['id']}").json()["task"]["last_notified"] is not None
        assert test_client.post("/api/reminders/due").json()["reminders"] == []
