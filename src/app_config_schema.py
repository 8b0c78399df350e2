"""Dataclass schema objects used by runtime configuration loading."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pomodoro import IdlePauseConfig, SessionConfig

DEFAULT_CONFIG_FILE = "config.toml"


class AppConfigurationError(Exception):
    """Raised when application configuration fails."""


@dataclass(frozen=True)
class TimerSettings:
    """Phase durations (minutes) and status-line options from `[timer]`."""
    work_duration: float = 25.0
    short_rest_duration: float = 5.0
    long_rest_duration: float = 20.0
    show_clock: bool = True
    confirm_on_restart: bool = True
    auto_start: bool = True


@dataclass(frozen=True)
class IdlePauseSettings:
    """Inactivity auto-pause settings from `[idle_pause]`."""
    enabled: bool = False
    timeout_minutes: float = 5.0


@dataclass(frozen=True)
class SoundSettings:
    """Start/end chime playback settings from `[sound]`."""
    enabled: bool = True
    output_device: Optional[int] = None
    volume: float = 0.3
    bell_fallback: bool = True


@dataclass(frozen=True)
class UIServerSettings:
    """Built-in status UI server settings from `[ui_server]`."""
    enabled: bool = True
    host: str = "127.0.0.1"
    port: int = 8765
    index_file: str = ""


@dataclass(frozen=True)
class RuntimeSettings:
    """Host loop settings from `[runtime]`."""
    config_poll_seconds: float = 2.0


@dataclass(frozen=True)
class AppConfig:
    """Complete typed runtime configuration loaded from `config.toml`."""
    timer: TimerSettings
    idle_pause: IdlePauseSettings
    sound: SoundSettings
    ui_server: UIServerSettings
    runtime: RuntimeSettings
    source_file: str

    def session_config(self) -> SessionConfig:
        """Convert minute-based settings into the clock's second-based snapshot."""
        return SessionConfig(
            work_duration=_minutes_to_seconds(self.timer.work_duration),
            short_rest_duration=_minutes_to_seconds(self.timer.short_rest_duration),
            long_rest_duration=_minutes_to_seconds(self.timer.long_rest_duration),
            show_clock=self.timer.show_clock,
            confirm_on_restart=self.timer.confirm_on_restart,
            idle_pause=IdlePauseConfig(
                enabled=self.idle_pause.enabled,
                timeout_seconds=_minutes_to_seconds(self.idle_pause.timeout_minutes),
            ),
        )


def _minutes_to_seconds(minutes: float) -> int:
    return int(round(minutes * 60))
