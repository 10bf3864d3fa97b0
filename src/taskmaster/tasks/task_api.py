# src/taskmaster/tasks/task_api.py

"""
HTTP transport for the task backend.

One intent -> one HTTP call. No retries at this layer: every call either
succeeds once or fails once with a classified TaskApiError.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .errors import ConnectivityError, ServerError, TaskApiError, UnknownError
from .task_models import InvalidTaskRecord, Task

logger = logging.getLogger(__name__)


def classify_error(exc: Exception) -> TaskApiError:
    """Map an httpx failure to the error taxonomy."""
    if isinstance(exc, TaskApiError):
        return exc

    if isinstance(exc, (httpx.TimeoutException, httpx.NetworkError)):
        return ConnectivityError()

    if isinstance(exc, httpx.HTTPStatusError):
        code = exc.response.status_code
        if code >= 500:
            return ServerError(status_code=code)
        return UnknownError(f"Request failed with status code {code}", status_code=code)

    if isinstance(exc, InvalidTaskRecord):
        return UnknownError(f"Invalid response from server: {exc}")

    msg = str(exc).strip() or exc.__class__.__name__
    return UnknownError(msg)


def _make_timeout(seconds: float) -> httpx.Timeout:
    return httpx.Timeout(seconds, connect=seconds)


class TaskApiClient:
    """
    Thin async wrapper over the backend REST surface.

    The client owns an httpx.AsyncClient; close it with `aclose()` or use the
    client as an async context manager.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = float(timeout_seconds)
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=_make_timeout(self.timeout_seconds),
            transport=transport,
            headers={"Accept": "application/json"},
        )

    async def __aenter__(self) -> TaskApiClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ---- low-level ----

    async def _request(self, method: str, path: str, *, json: Any = None) -> httpx.Response:
        try:
            response = await self._client.request(method, path, json=json)
            response.raise_for_status()
        except httpx.HTTPError as e:
            err = classify_error(e)
            logger.info("%s %s failed: %s (%s)", method, path, err.kind.value, e.__class__.__name__)
            raise err from e
        logger.debug("%s %s -> %s", method, path, response.status_code)
        return response

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise UnknownError("Invalid response from server: body is not JSON") from e

    def _task(self, response: httpx.Response) -> Task:
        try:
            return Task.from_wire(self._json(response))
        except InvalidTaskRecord as e:
            raise classify_error(e) from e

    # ---- public API ----

    async def check_health(self) -> bool:
        """GET /health; 200 means healthy, anything else (including errors) means not."""
        try:
            response = await self._client.get("/health")
        except httpx.HTTPError as e:
            logger.info("Health check failed: %s", e.__class__.__name__)
            return False
        healthy = response.status_code == 200
        if not healthy:
            logger.info("Health check returned status %s", response.status_code)
        return healthy

    async def list_tasks(self) -> list[Task]:
        response = await self._request("GET", "/tasks")
        data = self._json(response)
        if not isinstance(data, list):
            raise UnknownError("Invalid response from server: expected a list of tasks")
        try:
            return [Task.from_wire(item) for item in data]
        except InvalidTaskRecord as e:
            raise classify_error(e) from e

    async def get_task(self, task_id: str) -> Task:
        return self._task(await self._request("GET", f"/tasks/{task_id}"))

    async def create_task(self, payload: dict[str, Any]) -> Task:
        return self._task(await self._request("POST", "/tasks", json=payload))

    async def update_task(self, task_id: str, payload: dict[str, Any]) -> Task:
        return self._task(await self._request("PUT", f"/tasks/{task_id}", json=payload))

    async def delete_task(self, task_id: str) -> None:
        await self._request("DELETE", f"/tasks/{task_id}")
