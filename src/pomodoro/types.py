"""Immutable value types shared by the session clock and its collaborators."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from .constants import (
    DEFAULT_IDLE_TIMEOUT_SECONDS,
    DEFAULT_LONG_REST_SECONDS,
    DEFAULT_SHORT_REST_SECONDS,
    DEFAULT_WORK_SECONDS,
)


class Phase(enum.Enum):
    WORK = "work"
    SHORT_REST = "short_rest"
    LONG_REST = "long_rest"

    @property
    def is_rest(self) -> bool:
        return self is not Phase.WORK


@dataclass(frozen=True)
class IdlePauseConfig:
    """Automatic pause after a period without user activity."""
    enabled: bool = False
    timeout_seconds: int = DEFAULT_IDLE_TIMEOUT_SECONDS


@dataclass(frozen=True)
class SessionConfig:
    """Configuration snapshot applied wholesale by the session clock."""
    work_duration: int = DEFAULT_WORK_SECONDS
    short_rest_duration: int = DEFAULT_SHORT_REST_SECONDS
    long_rest_duration: int = DEFAULT_LONG_REST_SECONDS
    show_clock: bool = True
    confirm_on_restart: bool = False
    idle_pause: IdlePauseConfig = field(default_factory=IdlePauseConfig)

    def duration_for(self, phase: Phase) -> int:
        if phase is Phase.SHORT_REST:
            return self.short_rest_duration
        if phase is Phase.LONG_REST:
            return self.long_rest_duration
        return self.work_duration


@dataclass(frozen=True)
class SessionSnapshot:
    """Immutable view of the clock state exposed to displays and publishers."""
    phase: Phase
    cycle_count: int
    remaining_seconds: int
    running: bool
    paused_by_idle: bool
    started: bool

    @property
    def is_paused(self) -> bool:
        return self.started and not self.running
