# File: /taskgrid/core/errors.py | Version: 1.0 | Title: Engine error taxonomy
from __future__ import annotations

from typing import Any, Optional


class TaskGridError(Exception):
    """Base class for every error raised inside the record engine."""


class MutationRejected(TaskGridError):
    """A local edit failed validation; nothing was changed."""

    def __init__(self, message: str, *, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field


class RemoteError(TaskGridError):
    """Base for failures talking to the remote state store."""


class RemoteUnavailable(RemoteError):
    """Network failure, non-2xx status, or an `ok: false` body."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MalformedResponse(RemoteError):
    """The remote answered, but the body could not be understood."""

    def __init__(self, message: str, *, payload: Any = None) -> None:
        super().__init__(message)
        self.payload = payload
