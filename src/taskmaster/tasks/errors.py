# src/taskmaster/tasks/errors.py

"""
Error taxonomy shared by the transport, the store and the UI.

Every error carries an explicit `kind` tag. Callers branch on `err.kind`
instead of inspecting httpx exception types or response shapes.
"""

from __future__ import annotations

from enum import StrEnum

CONNECTIVITY_MESSAGE = "Cannot connect to the server. Please make sure the backend server is running."
SERVER_UNAVAILABLE_MESSAGE = "Server is not available. Please make sure the backend server is running."
PROBE_FAILED_MESSAGE = "Failed to check server status. Please make sure the backend server is running."
SERVER_ERROR_MESSAGE = "Server error. Please try again later."
TITLE_REQUIRED_MESSAGE = "Title is required."


class ErrorKind(StrEnum):
    CONNECTIVITY = "connectivity"
    SERVER = "server"
    VALIDATION = "validation"
    UNKNOWN = "unknown"


class TaskApiError(Exception):
    """Base class; `str(err)` is the user-facing message."""

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ConnectivityError(TaskApiError):
    """Server unreachable, timed out, or the client is offline."""

    kind = ErrorKind.CONNECTIVITY

    def __init__(self, message: str = CONNECTIVITY_MESSAGE, *, status_code: int | None = None) -> None:
        super().__init__(message, status_code=status_code)


class ServerError(TaskApiError):
    kind = ErrorKind.SERVER

    def __init__(self, message: str = SERVER_ERROR_MESSAGE, *, status_code: int | None = 500) -> None:
        super().__init__(message, status_code=status_code)


class ValidationError(TaskApiError):
    kind = ErrorKind.VALIDATION


class UnknownError(TaskApiError):
    """Anything else: non-5xx HTTP errors, malformed responses, odd transport failures."""

    kind = ErrorKind.UNKNOWN
