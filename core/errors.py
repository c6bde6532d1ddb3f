"""Error taxonomy shared by the service and the client.

Each error carries the HTTP status it maps to, so the API layer can render
any of them as ``{"error": message}`` without a lookup table.
"""

from typing import Any


class TaskError(Exception):
    """Base class for task tracker errors."""

    status_code: int = 500

    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details


class NotFound(TaskError):
    """The requested task id does not exist."""

    status_code = 404


class ValidationError(TaskError):
    """The payload was rejected before reaching the store."""

    status_code = 422


class StoreError(TaskError):
    """The datastore raised while executing an operation."""

    status_code = 500
