"""Remote todos API client.

Defines a Protocol for testability and a concrete implementation backed by
httpx. Every failure is reported as a :class:`RemoteImportError` subclass;
a non-2xx status or a malformed body is never treated as an empty success.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import httpx
from pydantic import ValidationError

from todolist.exceptions import TodoListError
from todolist.utils.logger import get_logger

from .models import RemoteTask, RemoteTasksResponse

_BASE_URL = "https://dummyjson.com"
_DEFAULT_TIMEOUT = 30.0

logger = get_logger("remote")


class RemoteImportError(TodoListError):
    """Base exception for remote API failures."""


class InvalidRequestError(RemoteImportError):
    """The request could not be built (malformed endpoint URL)."""


class NetworkError(RemoteImportError):
    """The request failed at the transport level."""

    def __init__(self, cause: BaseException):
        super().__init__(f"Network error: {cause}")
        self.cause = cause


class ServerError(RemoteImportError):
    """The server answered with a non-2xx status."""

    def __init__(self, status_code: int):
        super().__init__(f"Server error: HTTP {status_code}")
        self.status_code = status_code


class NoDataError(RemoteImportError):
    """The server answered with an empty body."""

    def __init__(self):
        super().__init__("No data in response")


class DecodingError(RemoteImportError):
    """The body was not valid JSON or did not match the expected shape."""

    def __init__(self, cause: BaseException):
        super().__init__(f"Decoding error: {cause}")
        self.cause = cause


@runtime_checkable
class RemoteTaskClientProtocol(Protocol):
    """Abstract interface for fetching the initial task set."""

    async def fetch_tasks(self) -> list[RemoteTask]:
        """Return remote task records or raise a RemoteImportError."""
        ...


class RemoteTaskClient:
    """Concrete remote API client using httpx.

    Args:
        base_url: API base URL.
        timeout: HTTP request timeout in seconds.
        transport: Optional httpx transport (tests pass ``httpx.MockTransport``).
    """

    def __init__(
        self,
        base_url: str = _BASE_URL,
        *,
        timeout: float = _DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def fetch_tasks(self) -> list[RemoteTask]:
        """GET ``/todos`` and decode the task records."""
        response = await self._get("/todos")

        if not response.content.strip():
            raise NoDataError()

        try:
            payload = RemoteTasksResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:  # includes UnicodeDecodeError
            raise DecodingError(e) from e

        logger.info("fetched %d remote tasks", len(payload.todos))
        return payload.todos

    async def _get(self, path: str) -> httpx.Response:
        url = f"{self._base_url}{path}"
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
                headers={"Accept": "application/json"},
            ) as client:
                response = await client.get(url)
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
            raise InvalidRequestError(f"Invalid URL {url!r}: {e}") from e
        except httpx.RequestError as e:
            raise NetworkError(e) from e

        if not response.is_success:
            raise ServerError(response.status_code)
        return response
