from .clock import SessionClock
from .constants import (
    ACTIVATION_WINDOW_SECONDS,
    CYCLE_LENGTH,
    EMPHASIS_REST,
    EMPHASIS_WORK,
    SOUND_END,
    SOUND_START,
)
from .contracts import (
    ConfigSource,
    Confirmer,
    Display,
    Notifier,
    Scheduler,
    SoundPlayer,
    TimerHandle,
)
from .gate import InteractionGate
from .types import IdlePauseConfig, Phase, SessionConfig, SessionSnapshot

__all__ = [
    "ACTIVATION_WINDOW_SECONDS",
    "CYCLE_LENGTH",
    "EMPHASIS_REST",
    "EMPHASIS_WORK",
    "SOUND_END",
    "SOUND_START",
    "ConfigSource",
    "Confirmer",
    "Display",
    "IdlePauseConfig",
    "InteractionGate",
    "Notifier",
    "Phase",
    "Scheduler",
    "SessionClock",
    "SessionConfig",
    "SessionSnapshot",
    "SoundPlayer",
    "TimerHandle",
]
