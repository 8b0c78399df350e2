"""Protocols for the collaborators driven by the session clock."""

from __future__ import annotations

from typing import Callable, Protocol

from .types import SessionConfig


class Display(Protocol):
    def render(self, text: str, emphasis: str) -> None:
        ...


class Notifier(Protocol):
    def notify(self, message: str, duration_ms: int) -> None:
        ...


class Confirmer(Protocol):
    def confirm(self, prompt: str) -> bool:
        ...


class SoundPlayer(Protocol):
    def play(self, which: str) -> None:
        ...


class ConfigSource(Protocol):
    def read(self) -> SessionConfig:
        ...


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    """Single-threaded timer primitives; cancellation takes effect immediately."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        ...

    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        ...


class IdleTracker(Protocol):
    def arm_idle(self) -> None:
        ...

    def disarm_idle(self) -> None:
        ...
