"""Tests for TaskBoardClient: verifies correct URL paths and HTTP methods."""

import json

import httpx
import pytest


# ── Status and auth ─────────────────────────────────────────────────


def test_get_status(mock_api, client):
    mock_api.get("/v1/status").mock(
        return_value=httpx.Response(
            200, json={"status": "ok", "version": "0.1.0", "database": True}
        )
    )
    result = client.get_status()
    assert result["status"] == "ok"
    assert result["database"] is True


def test_token_sent_as_bearer(mock_api, client):
    route = mock_api.get("/v1/auth/me").mock(
        return_value=httpx.Response(200, json={"id": "usr_abc"})
    )
    client.me()
    assert route.calls.last.request.headers["Authorization"] == "Bearer tok_test"


def test_changing_token_rebuilds_headers(mock_api, client):
    route = mock_api.get("/v1/auth/me").mock(
        return_value=httpx.Response(200, json={"id": "usr_abc"})
    )
    client.me()
    client.token = "tok_other"
    client.me()
    assert route.calls.last.request.headers["Authorization"] == "Bearer tok_other"


def test_register_sends_display_name(mock_api, client, sample_tokens):
    route = mock_api.post("/v1/auth/register").mock(
        return_value=httpx.Response(201, json=sample_tokens)
    )
    result = client.register("test@example.com", "password123", "Tester")
    assert result["accessToken"] == "eyJ.access.tok"
    assert json.loads(route.calls.last.request.content) == {
        "email": "test@example.com",
        "password": "password123",
        "displayName": "Tester",
    }


def test_login_failure_raises(mock_api, client):
    mock_api.post("/v1/auth/login").mock(
        return_value=httpx.Response(401, json={"detail": "Invalid email or password"})
    )
    with pytest.raises(httpx.HTTPStatusError):
        client.login("test@example.com", "wrong")


# ── Projects ────────────────────────────────────────────────────────


def test_list_projects(mock_api, client, sample_board):
    mock_api.get("/v1/projects/").mock(
        return_value=httpx.Response(200, json=[sample_board])
    )
    result = client.list_projects()
    assert result[0]["id"] == "proj_1"


def test_create_project(mock_api, client, sample_board):
    route = mock_api.post("/v1/projects/").mock(
        return_value=httpx.Response(201, json=sample_board)
    )
    client.create_project("Launch", "Launch checklist")
    assert json.loads(route.calls.last.request.content) == {
        "name": "Launch",
        "description": "Launch checklist",
    }


def test_update_project_sends_only_given_fields(mock_api, client, sample_board):
    route = mock_api.patch("/v1/projects/proj_1").mock(
        return_value=httpx.Response(200, json=sample_board)
    )
    client.update_project("proj_1", description="New")
    assert json.loads(route.calls.last.request.content) == {"description": "New"}


def test_delete_project(mock_api, client):
    route = mock_api.delete("/v1/projects/proj_1").mock(
        return_value=httpx.Response(200, json={"status": "deleted", "project_id": "proj_1"})
    )
    assert client.delete_project("proj_1")["status"] == "deleted"
    assert route.called


# ── Columns ─────────────────────────────────────────────────────────


def test_rename_column_uses_put(mock_api, client, sample_columns):
    route = mock_api.put("/v1/projects/proj_1/columns/col_todo").mock(
        return_value=httpx.Response(200, json={**sample_columns[0], "name": "Backlog"})
    )
    result = client.rename_column("proj_1", "col_todo", "Backlog")
    assert result["name"] == "Backlog"
    assert json.loads(route.calls.last.request.content) == {"name": "Backlog"}


def test_delete_column(mock_api, client):
    route = mock_api.delete("/v1/projects/proj_1/columns/col_done").mock(
        return_value=httpx.Response(200, json={"status": "deleted", "column_id": "col_done"})
    )
    client.delete_column("proj_1", "col_done")
    assert route.called


# ── Tasks ───────────────────────────────────────────────────────────


def test_create_task(mock_api, client, sample_tasks):
    route = mock_api.post("/v1/projects/proj_1/tasks").mock(
        return_value=httpx.Response(201, json=sample_tasks[0])
    )
    client.create_task("proj_1", "col_todo", "Write tests")
    assert json.loads(route.calls.last.request.content) == {
        "columnId": "col_todo",
        "title": "Write tests",
    }


def test_update_task(mock_api, client, sample_tasks):
    route = mock_api.put("/v1/projects/proj_1/tasks/task_a").mock(
        return_value=httpx.Response(200, json=sample_tasks[0])
    )
    client.update_task("proj_1", "task_a", "Write more tests", "all of them")
    assert json.loads(route.calls.last.request.content) == {
        "title": "Write more tests",
        "description": "all of them",
    }


def test_move_task(mock_api, client, sample_tasks):
    route = mock_api.post("/v1/tasks/task_d/move").mock(
        return_value=httpx.Response(200, json=sample_tasks[3])
    )
    client.move_task("task_d", "col_todo", 1)
    assert json.loads(route.calls.last.request.content) == {
        "columnId": "col_todo",
        "order": 1,
    }


def test_move_task_not_found_raises(mock_api, client):
    mock_api.post("/v1/tasks/task_x/move").mock(
        return_value=httpx.Response(404, json={"detail": "Task task_x not found"})
    )
    with pytest.raises(httpx.HTTPStatusError) as exc:
        client.move_task("task_x", "col_todo", 0)
    assert exc.value.response.status_code == 404


# ── Assistant ───────────────────────────────────────────────────────


def test_summarize(mock_api, client):
    mock_api.post("/v1/projects/proj_1/assistant/summarize").mock(
        return_value=httpx.Response(200, json={"summary": "All good"})
    )
    assert client.summarize("proj_1") == "All good"


def test_ask_with_task_focus(mock_api, client):
    route = mock_api.post("/v1/projects/proj_1/assistant/ask").mock(
        return_value=httpx.Response(200, json={"answer": "Soon"})
    )
    assert client.ask("proj_1", "When?", task_id="task_a") == "Soon"
    assert json.loads(route.calls.last.request.content) == {
        "question": "When?",
        "taskId": "task_a",
    }
