"""Phase, emphasis, sound, and timing constants used by the session clock."""

from __future__ import annotations

DEFAULT_WORK_SECONDS = 25 * 60
DEFAULT_SHORT_REST_SECONDS = 5 * 60
DEFAULT_LONG_REST_SECONDS = 20 * 60
DEFAULT_IDLE_TIMEOUT_SECONDS = 5 * 60

# Completed work phases per cycle; the last one is followed by a long rest.
CYCLE_LENGTH = 4

TICK_INTERVAL_SECONDS = 1.0
ACTIVATION_WINDOW_SECONDS = 0.25
NOTIFICATION_DURATION_MS = 3000

EMPHASIS_WORK = "work"
EMPHASIS_REST = "rest"

SOUND_START = "start"
SOUND_END = "end"

RESTART_PROMPT = "Are you sure you want to restart the current session?"
