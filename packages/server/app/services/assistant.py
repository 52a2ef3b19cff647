"""Completion-service client used by the project assistant endpoints.

Talks to any OpenAI-compatible ``/chat/completions`` endpoint. One
``AssistantService`` is built per request (see ``app.dependencies``) so no
client state is shared between requests.
"""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence

import httpx

from app.logging_config import get_logger

logger = get_logger(__name__)

SYSTEM_PROMPT = (
    "You are a helpful assistant for a kanban task board. "
    "Answer using only the project context you are given."
)


class AssistantError(Exception):
    """The completion service failed or returned an unusable payload."""


@dataclass
class AssistantSettings:
    """Completion-service configuration read from env vars at import time."""

    base_url: str = field(
        default_factory=lambda: os.getenv(
            "ASSISTANT_BASE_URL", "https://api.openai.com/v1"
        ).rstrip("/")
    )
    api_key: str = field(default_factory=lambda: os.getenv("ASSISTANT_API_KEY", ""))
    model: str = field(
        default_factory=lambda: os.getenv("ASSISTANT_MODEL", "gpt-4o-mini")
    )
    timeout: float = field(
        default_factory=lambda: float(os.getenv("ASSISTANT_TIMEOUT", "60"))
    )


assistant_settings = AssistantSettings()


def build_summary_prompt(
    project_name: str,
    description: str,
    tasks_by_column: Mapping[str, Sequence[Mapping[str, str]]],
) -> str:
    """Render a project's tasks grouped under their column names."""
    sections = []
    for column_name, tasks in tasks_by_column.items():
        lines = []
        for task in tasks:
            line = f"- {task['title']}"
            if task.get("description"):
                line += f": {task['description']}"
            lines.append(line)
        sections.append(f"{column_name}:\n" + "\n".join(lines))

    return (
        "Summarize the following project tasks organized by column.\n\n"
        f"Project: {project_name}\n"
        f"Description: {description or 'No description'}\n\n"
        "Tasks by Column:\n"
        + "\n\n".join(sections)
        + "\n\nHighlight key tasks, progress and notable patterns."
    )


def build_question_prompt(context: str, question: str) -> str:
    return f"{context}Question: {question}\n\nAnswer based on the project context above."


class AssistantService:
    """Thin async wrapper over a chat-completions endpoint."""

    def __init__(
        self,
        settings: AssistantSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings
        self._transport = transport

    async def _complete(self, prompt: str) -> str:
        headers = {"Content-Type": "application/json"}
        if self.settings.api_key:
            headers["Authorization"] = f"Bearer {self.settings.api_key}"
        payload = {
            "model": self.settings.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
        }

        try:
            async with httpx.AsyncClient(
                timeout=self.settings.timeout, transport=self._transport
            ) as client:
                resp = await client.post(
                    f"{self.settings.base_url}/chat/completions",
                    json=payload,
                    headers=headers,
                )
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Completion request returned {e.response.status_code}")
            raise AssistantError(f"completion service returned {e.response.status_code}") from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Completion request failed: {e}")
            raise AssistantError(str(e)) from e

        try:
            return data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            logger.error(f"Malformed completion payload: {data!r}")
            raise AssistantError("malformed completion payload") from e

    async def summarize(
        self,
        project_name: str,
        description: str,
        tasks_by_column: Mapping[str, Sequence[Mapping[str, str]]],
    ) -> str:
        """Summarize a project's tasks, grouped by column name."""
        logger.debug(f"Summarizing project {project_name!r}")
        return await self._complete(
            build_summary_prompt(project_name, description, tasks_by_column)
        )

    async def ask(self, context: str, question: str) -> str:
        """Answer a free-text question about the given project context."""
        logger.debug(f"Asking assistant: {question[:80]!r}")
        return await self._complete(build_question_prompt(context, question))
