"""Typed parser for config.toml sections into immutable app settings."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from app_config_schema import (
    AppConfig,
    AppConfigurationError,
    IdlePauseSettings,
    RuntimeSettings,
    SoundSettings,
    TimerSettings,
    UIServerSettings,
)


def parse_app_config(
    raw: Mapping[str, Any],
    *,
    base_dir: Path,
    source_file: str,
) -> AppConfig:
    """Parse raw TOML mappings into strongly typed application settings."""
    return AppConfig(
        timer=_parse_timer_settings(_section(raw, "timer")),
        idle_pause=_parse_idle_pause_settings(_section(raw, "idle_pause")),
        sound=_parse_sound_settings(_section(raw, "sound")),
        ui_server=_parse_ui_server_settings(_section(raw, "ui_server"), base_dir=base_dir),
        runtime=_parse_runtime_settings(_section(raw, "runtime")),
        source_file=source_file,
    )


def _parse_timer_settings(section: Mapping[str, Any]) -> TimerSettings:
    return TimerSettings(
        work_duration=_as_float(
            section.get("work_duration", 25.0),
            "timer.work_duration",
        ),
        short_rest_duration=_as_float(
            section.get("short_rest_duration", 5.0),
            "timer.short_rest_duration",
        ),
        long_rest_duration=_as_float(
            section.get("long_rest_duration", 20.0),
            "timer.long_rest_duration",
        ),
        show_clock=_as_bool(section.get("show_clock", True), "timer.show_clock"),
        confirm_on_restart=_as_bool(
            section.get("confirm_on_restart", True),
            "timer.confirm_on_restart",
        ),
        auto_start=_as_bool(section.get("auto_start", True), "timer.auto_start"),
    )


def _parse_idle_pause_settings(section: Mapping[str, Any]) -> IdlePauseSettings:
    return IdlePauseSettings(
        enabled=_as_bool(section.get("enabled", False), "idle_pause.enabled"),
        timeout_minutes=_as_float(
            section.get("timeout_minutes", 5.0),
            "idle_pause.timeout_minutes",
        ),
    )


def _parse_sound_settings(section: Mapping[str, Any]) -> SoundSettings:
    return SoundSettings(
        enabled=_as_bool(section.get("enabled", True), "sound.enabled"),
        output_device=(
            _as_int(section.get("output_device"), "sound.output_device")
            if "output_device" in section
            else None
        ),
        volume=_as_float(section.get("volume", 0.3), "sound.volume"),
        bell_fallback=_as_bool(
            section.get("bell_fallback", True),
            "sound.bell_fallback",
        ),
    )


def _parse_ui_server_settings(
    section: Mapping[str, Any],
    *,
    base_dir: Path,
) -> UIServerSettings:
    index_file = _as_str(section.get("index_file", ""), "ui_server.index_file")
    return UIServerSettings(
        enabled=_as_bool(section.get("enabled", True), "ui_server.enabled"),
        host=_as_str(section.get("host", "127.0.0.1"), "ui_server.host"),
        port=_as_int(section.get("port", 8765), "ui_server.port"),
        index_file=_resolve_path(base_dir, index_file) if index_file else "",
    )


def _parse_runtime_settings(section: Mapping[str, Any]) -> RuntimeSettings:
    return RuntimeSettings(
        config_poll_seconds=_as_positive_float(
            section.get("config_poll_seconds", 2.0),
            "runtime.config_poll_seconds",
        ),
    )


def _section(root: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    raw = root.get(name, {})
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise AppConfigurationError(f"[{name}] must be a table.")
    return raw


def _as_str(value: Any, field: str) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    raise AppConfigurationError(f"{field} must be a string.")


def _as_bool(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
    raise AppConfigurationError(f"{field} must be a boolean.")


def _as_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be an integer.")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be an integer.") from error
    raise AppConfigurationError(f"{field} must be an integer.")


def _as_float(value: Any, field: str) -> float:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be a number.")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be a number.") from error
    raise AppConfigurationError(f"{field} must be a number.")


def _as_positive_float(value: Any, field: str) -> float:
    number = _as_float(value, field)
    if number <= 0:
        raise AppConfigurationError(f"{field} must be greater than zero.")
    return number


def _resolve_path(base_dir: Path, raw: str) -> str:
    if not raw:
        return ""
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (base_dir / path).resolve()
    return str(path)
