"""Re-applies configuration to the session clock when its file changes."""

from __future__ import annotations

import logging
from typing import Optional

from app_config_schema import AppConfigurationError
from pomodoro import Notifier, Scheduler, SessionClock, TimerHandle
from pomodoro.constants import NOTIFICATION_DURATION_MS
from pomodoro.messages import SETTINGS_UPDATED_MESSAGE

from .contracts import WatchableConfigSource


class ConfigWatcher:
    """Polls a config source on the scheduler thread and applies changes."""

    def __init__(
        self,
        source: WatchableConfigSource,
        clock: SessionClock,
        *,
        scheduler: Scheduler,
        poll_seconds: float = 2.0,
        notifier: Optional[Notifier] = None,
        logger: Optional[logging.Logger] = None,
    ):
        if poll_seconds <= 0:
            raise ValueError("poll_seconds must be greater than zero")
        self._source = source
        self._clock = clock
        self._scheduler = scheduler
        self._poll_seconds = poll_seconds
        self._notifier = notifier
        self._logger = logger or logging.getLogger("config")
        self._last_modified: Optional[float] = None
        self._handle: Optional[TimerHandle] = None

    @property
    def watching(self) -> bool:
        return self._handle is not None

    def start(self) -> None:
        if self._handle is not None:
            return
        self._last_modified = self._source.modified_at()
        self._handle = self._scheduler.call_every(self._poll_seconds, self.check)

    def stop(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def check(self) -> bool:
        """Reload when the source reports a new modification time."""
        modified = self._source.modified_at()
        if modified is None or modified == self._last_modified:
            return False
        self._last_modified = modified
        return self.reload()

    def reload(self) -> bool:
        try:
            config = self._source.read()
        except AppConfigurationError as error:
            self._logger.error("Ignoring invalid configuration change: %s", error)
            return False

        if config == self._clock.config:
            self._logger.debug("Configuration file touched without session changes")
            return False

        self._clock.apply_config(config)
        if self._notifier is not None:
            try:
                self._notifier.notify(SETTINGS_UPDATED_MESSAGE, NOTIFICATION_DURATION_MS)
            except Exception as error:
                self._logger.warning("Notification failed: %s", error)
        return True
