"""Protocols describing runtime-facing config and UI server capabilities."""

from __future__ import annotations

from typing import Any, Optional, Protocol

from pomodoro import SessionConfig


class WatchableConfigSource(Protocol):
    """Config source that can report when its backing file last changed."""
    def read(self) -> SessionConfig:
        ...

    def modified_at(self) -> Optional[float]:
        ...


class UIServerLike(Protocol):
    """Subset of the UI server used by runtime display adapters."""
    def publish(self, event_type: str, **payload: Any) -> None:
        ...
