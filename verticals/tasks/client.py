"""Async HTTP client for the task endpoints.

One call per operation, no retries and no caching. Responses are parsed
into TaskResponse models; failures are mapped back onto the shared error
taxonomy:

- 404 → NotFound
- 422, or an empty title caught before sending → ValidationError
- anything else, including transport errors and 2xx bodies that are not
  valid task JSON → TaskClientError
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

import httpx
import pydantic

from core.errors import NotFound, TaskError, ValidationError
from verticals.tasks.config import config
from verticals.tasks.models.schemas import TaskResponse, TaskStatus

logger = logging.getLogger(__name__)

# Sentinel for "leave the deadline alone" as opposed to None ("clear it")
UNSET: Any = object()


class TaskClientError(TaskError):
    """The service answered with an unexpected status or was unreachable."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.http_status = status_code


def _require_title(title: str) -> str:
    cleaned = (title or "").strip()
    if not cleaned:
        raise ValidationError("Please enter a task title")
    return cleaned


def _iso(value: datetime | str | None) -> str | None:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


class TaskClient:
    """Client for the task REST surface.

    Usage::

        async with TaskClient("http://localhost:5000") as client:
            task = await client.create_task("Buy milk")
            await client.update_status(task, TaskStatus.COMPLETED)
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or config.client.api_url).rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout if timeout is not None else config.client.timeout_seconds,
            transport=transport,
        )

    async def __aenter__(self) -> "TaskClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # -- Transport --

    async def _request(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
        failure: str = "Request failed",
    ) -> Any:
        try:
            response = await self._client.request(method, path, json=body)
        except httpx.HTTPError as exc:
            logger.error("%s %s failed: %s", method, path, exc)
            raise TaskClientError(f"{failure}: {exc}") from exc

        if response.is_success:
            try:
                return response.json()
            except ValueError as exc:
                logger.error("%s %s returned a non-JSON body", method, path)
                raise TaskClientError(
                    f"{failure}: invalid response body", status_code=response.status_code
                ) from exc

        message = _error_message(response) or failure
        if response.status_code == 404:
            raise NotFound(message)
        if response.status_code == 422:
            raise ValidationError(message, details=_error_details(response))
        raise TaskClientError(message, status_code=response.status_code)

    # -- Reads --

    async def list_tasks(self) -> list[TaskResponse]:
        data = await self._request("GET", "/tasks", failure="Failed to fetch tasks")
        if not isinstance(data, list):
            return []
        return [_parse_task(item, "Failed to fetch tasks") for item in data]

    async def get_task(self, task_id: int) -> TaskResponse:
        data = await self._request(
            "GET", f"/tasks/{task_id}", failure="Failed to fetch task"
        )
        return _parse_task(data, "Failed to fetch task")

    # -- Writes --

    async def create_task(
        self,
        title: str,
        description: str | None = None,
        deadline: datetime | str | None = None,
    ) -> TaskResponse:
        """Create a task; new tasks are always sent as todo."""
        body: dict[str, Any] = {
            "title": _require_title(title),
            "description": description.strip() if description else description,
            "status": TaskStatus.TODO.value,
        }
        if deadline is not None:
            body["deadline"] = _iso(deadline)
        data = await self._request("POST", "/tasks", body, failure="Failed to create task")
        return _parse_task(data, "Failed to create task")

    async def update_task(
        self,
        task_id: int,
        title: str,
        description: str | None = None,
        status: TaskStatus | str | None = None,
        deadline: Any = UNSET,
    ) -> TaskResponse:
        """Replace the given fields. Pass ``deadline=None`` to clear it."""
        body: dict[str, Any] = {
            "title": _require_title(title),
            "description": description.strip() if description else description,
        }
        if status is not None:
            body["status"] = TaskStatus.normalize(status).value
        if deadline is not UNSET:
            body["deadline"] = _iso(deadline)
        data = await self._request(
            "PUT", f"/tasks/{task_id}", body, failure="Failed to update task"
        )
        return _parse_task(data, "Failed to update task")

    async def update_status(
        self, task: TaskResponse, status: TaskStatus | str
    ) -> TaskResponse:
        """Quick status change that resends the current title and description."""
        return await self.update_task(
            task.id, task.title, task.description, status=status
        )

    async def delete_task(self, task_id: int) -> str:
        data = await self._request(
            "DELETE", f"/tasks/{task_id}", failure="Failed to delete task"
        )
        return (data or {}).get("message", "")


def _parse_task(data: Any, failure: str) -> TaskResponse:
    try:
        return TaskResponse.model_validate(data)
    except pydantic.ValidationError as exc:
        logger.error("%s: unexpected task payload %r", failure, data)
        raise TaskClientError(f"{failure}: invalid task in response") from exc


def _error_message(response: httpx.Response) -> Optional[str]:
    try:
        payload = response.json()
    except ValueError:
        return None
    if isinstance(payload, dict):
        message = payload.get("error") or payload.get("detail")
        return message if isinstance(message, str) else None
    return None


def _error_details(response: httpx.Response) -> Any:
    try:
        payload = response.json()
    except ValueError:
        return None
    return payload.get("details") if isinstance(payload, dict) else None
