"""Shared test fixtures for the taskboard CLI tests."""

import copy

import pytest
import respx
from typer.testing import CliRunner

from taskboard import auth
from taskboard.client import TaskBoardClient

SERVER = "http://localhost:8000"


@pytest.fixture(autouse=True)
def isolated_auth_file(tmp_path, monkeypatch):
    """Redirect credential storage to a temp directory for every test."""
    config_dir = tmp_path / ".config" / "taskboard"
    auth_file = config_dir / "auth.json"
    monkeypatch.setattr(auth, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(auth, "AUTH_FILE", auth_file)
    monkeypatch.delenv("TASKBOARD_URL", raising=False)
    monkeypatch.delenv("TASKBOARD_TOKEN", raising=False)
    return auth_file


@pytest.fixture
def runner():
    """Typer CLI runner."""
    return CliRunner()


@pytest.fixture
def mock_api():
    """respx mock router scoped to the default base URL."""
    with respx.mock(base_url=SERVER, assert_all_called=False) as router:
        yield router


@pytest.fixture
def client():
    """TaskBoardClient instance."""
    c = TaskBoardClient(base_url=SERVER, token="tok_test")
    yield c
    c.close()


# ── Sample API response data matching actual server shapes ──────────


_COLUMNS = [
    {"id": "col_todo", "project_id": "proj_1", "name": "To Do", "order": 0, "created_at": 1700000000000},
    {"id": "col_doing", "project_id": "proj_1", "name": "In Progress", "order": 1, "created_at": 1700000000001},
    {"id": "col_done", "project_id": "proj_1", "name": "Done", "order": 2, "created_at": 1700000000002},
]


def _task(task_id, title, column, order, created_at):
    return {
        "id": task_id,
        "project_id": "proj_1",
        "title": title,
        "description": None,
        "order": order,
        "column": {"id": column["id"], "name": column["name"], "order": column["order"]},
        "created_at": created_at,
        "updated_at": created_at,
    }


_TASKS = [
    _task("task_a", "Write tests", _COLUMNS[0], 0, 1700000001000),
    _task("task_b", "Fix login", _COLUMNS[0], 1, 1700000002000),
    _task("task_c", "Ship it", _COLUMNS[0], 2, 1700000003000),
    _task("task_d", "Review PR", _COLUMNS[1], 0, 1700000004000),
]

_PROJECT = {
    "id": "proj_1",
    "name": "Launch",
    "description": "Launch checklist",
    "created_at": 1700000000000,
    "updated_at": 1700000000000,
}


@pytest.fixture
def sample_columns():
    return copy.deepcopy(_COLUMNS)


@pytest.fixture
def sample_tasks():
    return copy.deepcopy(_TASKS)


@pytest.fixture
def sample_board():
    """Project payload as returned by GET /v1/projects/{id}."""
    return {**copy.deepcopy(_PROJECT), "columns": copy.deepcopy(_COLUMNS), "tasks": copy.deepcopy(_TASKS)}


@pytest.fixture
def sample_tokens():
    return {
        "accessToken": "eyJ.access.tok",
        "tokenType": "Bearer",
        "expiresIn": 86400,
        "user": {"id": "usr_abc", "email": "test@example.com", "displayName": "Tester"},
    }
