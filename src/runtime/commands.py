"""Host command surface mapping zero-argument triggers to clock operations."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from contracts.ui_protocol import (
    COMMAND_RESTART,
    COMMAND_START,
    COMMAND_STOP,
    COMMAND_TOGGLE_PAUSE,
)
from pomodoro import Confirmer, SessionClock
from pomodoro.constants import RESTART_PROMPT


class CommandSurface:
    """Routes host commands to the single session clock of the process."""

    def __init__(
        self,
        clock: SessionClock,
        *,
        confirmer: Optional[Confirmer] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._clock = clock
        self._confirmer = confirmer
        self._logger = logger or logging.getLogger("commands")
        self._handlers: dict[str, Callable[[], bool]] = {
            COMMAND_TOGGLE_PAUSE: self.toggle_pause,
            COMMAND_RESTART: self.restart,
            COMMAND_START: self.start,
            COMMAND_STOP: self.stop,
        }

    @property
    def command_names(self) -> tuple[str, ...]:
        return tuple(self._handlers)

    def dispatch(self, name: str) -> bool:
        handler = self._handlers.get(name)
        if handler is None:
            self._logger.warning("Unsupported command: %s", name)
            return False
        return handler()

    def toggle_pause(self) -> bool:
        return self._clock.toggle_pause()

    def start(self) -> bool:
        return self._clock.start()

    def stop(self) -> bool:
        return self._clock.stop()

    def restart(self, confirmed: bool = False) -> bool:
        if not self._clock.started:
            return False
        if self._clock.config.confirm_on_restart and not confirmed:
            confirmed = self._ask_confirmation()
        return self._clock.restart(confirmed=confirmed)

    def _ask_confirmation(self) -> bool:
        if self._confirmer is None:
            return False
        try:
            return bool(self._confirmer.confirm(RESTART_PROMPT))
        except Exception as error:
            self._logger.warning("Restart confirmation failed: %s", error)
            return False
