"""HTTP client for the taskboard API."""

import httpx
from typing import Optional


class TaskBoardClient:
    """Client for communicating with the taskboard API server.

    All endpoints use the /v1/ prefix matching the FastAPI server routes.
    Every method raises ``httpx.HTTPStatusError`` for non-2xx responses.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        token: Optional[str] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._token = token
        self._client: httpx.Client | None = None

    @property
    def token(self) -> Optional[str]:
        return self._token

    @token.setter
    def token(self, value: Optional[str]) -> None:
        self._token = value
        # Recreate client so headers are updated
        if self._client is not None:
            self._client.close()
            self._client = None

    def _build_headers(self) -> dict:
        """Build request headers including auth if token is set."""
        headers = {}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                base_url=self.base_url,
                timeout=30.0,
                follow_redirects=True,
                headers=self._build_headers(),
            )
        return self._client

    def close(self):
        if self._client is not None:
            self._client.close()
            self._client = None

    # ── Status ──────────────────────────────────────────────────────────

    def get_status(self) -> dict:
        """Get server health status."""
        response = self.client.get("/v1/status")
        response.raise_for_status()
        return response.json()

    # ── Auth ────────────────────────────────────────────────────────────

    def register(
        self, email: str, password: str, display_name: Optional[str] = None
    ) -> dict:
        payload = {"email": email, "password": password}
        if display_name:
            payload["displayName"] = display_name
        response = self.client.post("/v1/auth/register", json=payload)
        response.raise_for_status()
        return response.json()

    def login(self, email: str, password: str) -> dict:
        response = self.client.post(
            "/v1/auth/login", json={"email": email, "password": password}
        )
        response.raise_for_status()
        return response.json()

    def me(self) -> dict:
        response = self.client.get("/v1/auth/me")
        response.raise_for_status()
        return response.json()

    # ── Projects ────────────────────────────────────────────────────────

    def list_projects(self) -> list[dict]:
        response = self.client.get("/v1/projects/")
        response.raise_for_status()
        return response.json()

    def create_project(self, name: str, description: Optional[str] = None) -> dict:
        """Create a project. The server seeds its default columns."""
        response = self.client.post(
            "/v1/projects/", json={"name": name, "description": description}
        )
        response.raise_for_status()
        return response.json()

    def get_project(self, project_id: str) -> dict:
        """Get a project with its columns and tasks."""
        response = self.client.get(f"/v1/projects/{project_id}")
        response.raise_for_status()
        return response.json()

    def update_project(
        self,
        project_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> dict:
        payload = {}
        if name is not None:
            payload["name"] = name
        if description is not None:
            payload["description"] = description
        response = self.client.patch(f"/v1/projects/{project_id}", json=payload)
        response.raise_for_status()
        return response.json()

    def delete_project(self, project_id: str) -> dict:
        response = self.client.delete(f"/v1/projects/{project_id}")
        response.raise_for_status()
        return response.json()

    # ── Columns ─────────────────────────────────────────────────────────

    def list_columns(self, project_id: str) -> list[dict]:
        response = self.client.get(f"/v1/projects/{project_id}/columns")
        response.raise_for_status()
        return response.json()

    def create_column(self, project_id: str, name: str) -> dict:
        response = self.client.post(
            f"/v1/projects/{project_id}/columns", json={"name": name}
        )
        response.raise_for_status()
        return response.json()

    def rename_column(self, project_id: str, column_id: str, name: str) -> dict:
        response = self.client.put(
            f"/v1/projects/{project_id}/columns/{column_id}", json={"name": name}
        )
        response.raise_for_status()
        return response.json()

    def delete_column(self, project_id: str, column_id: str) -> dict:
        """Delete a column and every task in it."""
        response = self.client.delete(f"/v1/projects/{project_id}/columns/{column_id}")
        response.raise_for_status()
        return response.json()

    # ── Tasks ───────────────────────────────────────────────────────────

    def list_tasks(self, project_id: str) -> list[dict]:
        response = self.client.get(f"/v1/projects/{project_id}/tasks")
        response.raise_for_status()
        return response.json()

    def get_task(self, project_id: str, task_id: str) -> dict:
        response = self.client.get(f"/v1/projects/{project_id}/tasks/{task_id}")
        response.raise_for_status()
        return response.json()

    def create_task(
        self,
        project_id: str,
        column_id: str,
        title: str,
        description: Optional[str] = None,
    ) -> dict:
        payload = {"columnId": column_id, "title": title}
        if description is not None:
            payload["description"] = description
        response = self.client.post(f"/v1/projects/{project_id}/tasks", json=payload)
        response.raise_for_status()
        return response.json()

    def update_task(
        self,
        project_id: str,
        task_id: str,
        title: str,
        description: Optional[str] = None,
    ) -> dict:
        payload = {"title": title}
        if description is not None:
            payload["description"] = description
        response = self.client.put(
            f"/v1/projects/{project_id}/tasks/{task_id}", json=payload
        )
        response.raise_for_status()
        return response.json()

    def delete_task(self, project_id: str, task_id: str) -> dict:
        response = self.client.delete(f"/v1/projects/{project_id}/tasks/{task_id}")
        response.raise_for_status()
        return response.json()

    def move_task(self, task_id: str, column_id: str, order: int) -> dict:
        """Move a task to ``order`` inside ``column_id``. Returns the moved task."""
        response = self.client.post(
            f"/v1/tasks/{task_id}/move", json={"columnId": column_id, "order": order}
        )
        response.raise_for_status()
        return response.json()

    # ── Assistant ───────────────────────────────────────────────────────

    def summarize(self, project_id: str) -> str:
        response = self.client.post(
            f"/v1/projects/{project_id}/assistant/summarize", timeout=120.0
        )
        response.raise_for_status()
        return response.json().get("summary", "")

    def ask(
        self, project_id: str, question: str, task_id: Optional[str] = None
    ) -> str:
        payload = {"question": question}
        if task_id:
            payload["taskId"] = task_id
        response = self.client.post(
            f"/v1/projects/{project_id}/assistant/ask", json=payload, timeout=120.0
        )
        response.raise_for_status()
        return response.json().get("answer", "")
