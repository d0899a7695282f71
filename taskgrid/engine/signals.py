# File: /taskgrid/engine/signals.py | Version: 1.0 | Title: Minimal observer for UI-facing state
from __future__ import annotations

import logging
from typing import Any, Callable, Generic, List, NamedTuple, TypeVar

log = logging.getLogger(__name__)

T = TypeVar("T")


class Signal(Generic[T]):
    """Synchronous fan-out. A failing subscriber is logged and skipped."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._subscribers: List[Callable[[T], Any]] = []

    def subscribe(self, callback: Callable[[T], Any]) -> Callable[[], None]:
        self._subscribers.append(callback)

        def _unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return _unsubscribe

    def emit(self, value: T) -> None:
        for cb in list(self._subscribers):
            try:
                cb(value)
            except Exception:
                log.exception("Subscriber of %s failed", self.name)


class Notice(NamedTuple):
    """Transient, UI-visible message ("toast")."""

    level: str
    message: str

    @classmethod
    def success(cls, message: str) -> "Notice":
        return cls("success", message)

    @classmethod
    def error(cls, message: str) -> "Notice":
        return cls("error", message)
