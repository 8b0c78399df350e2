"""Status-line and notification text builders for the session clock."""

from __future__ import annotations

from .constants import CYCLE_LENGTH, EMPHASIS_REST, EMPHASIS_WORK
from .types import Phase, SessionConfig, SessionSnapshot

STOPPED_TEXT = "Pomodoro stopped"
IDLE_PAUSED_MESSAGE = "Pomodoro paused due to inactivity."
IDLE_RESUMED_MESSAGE = "Pomodoro timer resumed."
RESTARTED_MESSAGE = "Pomodoro timer restarted."
SETTINGS_UPDATED_MESSAGE = (
    "Pomodoro settings updated. Changes will apply to the next session."
)
REST_OVER_MESSAGE = "🟢 Break is over! Time to get back to work."

_ORDINAL_SUFFIXES = ("st", "nd", "rd")


def format_duration(seconds: int) -> str:
    """Format a duration in seconds as `MM:SS`."""
    minutes, remainder = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{remainder:02d}"


def break_ordinal(cycle_count: int, *, for_notification: bool = False) -> str:
    """Return `1st`/`2nd`/`3rd` for a short rest, `Long` (or `4th`) otherwise."""
    count = cycle_count % CYCLE_LENGTH
    if count == 0:
        return "4th" if for_notification else "Long"
    suffix = _ORDINAL_SUFFIXES[count - 1] if count <= len(_ORDINAL_SUFFIXES) else "th"
    return f"{count}{suffix}"


def emphasis_for(phase: Phase) -> str:
    return EMPHASIS_REST if phase.is_rest else EMPHASIS_WORK


def status_text(snapshot: SessionSnapshot, config: SessionConfig) -> str:
    """Build the status-line text for the current clock snapshot."""
    clock = format_duration(snapshot.remaining_seconds)
    if snapshot.is_paused:
        return f"⏸️ Paused {clock}"

    if snapshot.phase.is_rest:
        text = f"🔴 {break_ordinal(snapshot.cycle_count)} Break"
    else:
        text = "🟢 Work"
    if config.show_clock:
        text += f" {clock}"
    return text


def work_completed_message(cycle_count: int, config: SessionConfig) -> str:
    """Announce a completed work phase and the kind of rest that follows."""
    if cycle_count % CYCLE_LENGTH == 0:
        rest_kind = f"{config.long_rest_duration / 60:g} minute long"
    else:
        rest_kind = "short"
    ordinal = break_ordinal(cycle_count, for_notification=True)
    return f"🔴 {ordinal} Pomodoro completed! Time for a {rest_kind} break."
