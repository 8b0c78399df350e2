"""Runtime engine exports."""

from .commands import CommandSurface
from .config_watch import ConfigWatcher
from .loop import RuntimeBootstrap, RuntimeEngine
from .scheduler import CallbackScheduler, ScheduledCall

__all__ = [
    "CallbackScheduler",
    "CommandSurface",
    "ConfigWatcher",
    "RuntimeBootstrap",
    "RuntimeEngine",
    "ScheduledCall",
]
