"""Runtime orchestration: builds the session objects and runs the scheduler loop."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Optional

from app_config_schema import AppConfig
from contracts.ui_protocol import (
    MESSAGE_ACTIVATION,
    MESSAGE_ACTIVITY,
    MESSAGE_COMMAND,
    MESSAGE_CONFIRM_RESTART,
)
from pomodoro import Confirmer, InteractionGate, SessionClock, SoundPlayer

from .commands import CommandSurface
from .config_watch import ConfigWatcher
from .contracts import UIServerLike, WatchableConfigSource
from .scheduler import CallbackScheduler
from .ui import (
    AutoConfirmer,
    ConsoleDisplay,
    LoggingNotifier,
    RuntimeUIPublisher,
    UIConfirmer,
    UINotifier,
    UIStatusDisplay,
)


@dataclass(frozen=True)
class RuntimeBootstrap:
    """Dependency bundle required to construct the runtime engine."""
    logger: logging.Logger
    app_config: AppConfig
    config_source: Optional[WatchableConfigSource] = None
    ui_server: Optional[UIServerLike] = None
    sound_player: Optional[SoundPlayer] = None
    scheduler: Optional[CallbackScheduler] = None


class RuntimeEngine:
    """Owns the process's session clock, interaction gate, and command surface."""
    def __init__(self, bootstrap: RuntimeBootstrap):
        self._bootstrap = bootstrap
        self._logger = bootstrap.logger
        self._scheduler = bootstrap.scheduler or CallbackScheduler()
        self._stop_event = threading.Event()
        self._shut_down = False

        self._ui = RuntimeUIPublisher(bootstrap.ui_server)
        if self._ui.attached:
            display = UIStatusDisplay(self._ui)
            notifier = UINotifier(self._ui)
        else:
            display = ConsoleDisplay()
            notifier = LoggingNotifier()

        self.clock = SessionClock(
            bootstrap.app_config.session_config(),
            scheduler=self._scheduler,
            display=display,
            notifier=notifier,
            sound_player=bootstrap.sound_player,
            logger=logging.getLogger("pomodoro"),
        )
        self._ui_confirmer: Optional[UIConfirmer] = None
        if self._ui.attached:
            self._ui_confirmer = UIConfirmer(self._ui, self.clock)
            confirmer: Confirmer = self._ui_confirmer
        else:
            confirmer = AutoConfirmer()
        self.commands = CommandSurface(self.clock, confirmer=confirmer)
        self.gate = InteractionGate(
            self.clock,
            scheduler=self._scheduler,
            on_single=self.commands.toggle_pause,
            on_double=self.commands.restart,
            notifier=notifier,
            logger=logging.getLogger("interaction"),
        )
        self._watcher: Optional[ConfigWatcher] = None
        if bootstrap.config_source is not None:
            self._watcher = ConfigWatcher(
                bootstrap.config_source,
                self.clock,
                scheduler=self._scheduler,
                poll_seconds=bootstrap.app_config.runtime.config_poll_seconds,
                notifier=notifier,
            )

    @property
    def scheduler(self) -> CallbackScheduler:
        return self._scheduler

    def handle_client_message(self, message: dict[str, Any]) -> None:
        """Thread-safe entry point for UI messages; routing happens on the loop thread."""
        self._scheduler.post(lambda: self.route_message(message))

    def route_message(self, message: dict[str, Any]) -> None:
        message_type = message.get("type")
        if message_type == MESSAGE_ACTIVATION:
            self.gate.on_activation()
        elif message_type == MESSAGE_ACTIVITY:
            self.gate.on_activity()
        elif message_type == MESSAGE_COMMAND:
            self.commands.dispatch(str(message.get("name", "")))
        elif message_type == MESSAGE_CONFIRM_RESTART:
            self.confirm_restart(message.get("request_id"))
        else:
            self._logger.debug("Unhandled UI message type: %s", message_type)

    def confirm_restart(self, request_id: Any) -> bool:
        """Restart the current phase if `request_id` answers the outstanding prompt."""
        if self._ui_confirmer is None or not self._ui_confirmer.accept(request_id):
            return False
        return self.commands.restart(confirmed=True)

    def run(self) -> int:
        if self._bootstrap.app_config.timer.auto_start:
            self.commands.start()
        if self._watcher is not None:
            self._watcher.start()

        self._logger.info("Pomodoro runtime ready")
        try:
            self._scheduler.run_until(self._stop_event)
        finally:
            self.shutdown()
        return 0

    def request_stop(self) -> None:
        self._stop_event.set()

    def shutdown(self) -> None:
        if self._shut_down:
            return
        self._shut_down = True
        if self._watcher is not None:
            self._watcher.stop()
        self.gate.dispose()
        self.clock.dispose()
        if self._ui_confirmer is not None:
            self._ui_confirmer.cancel()
        self._scheduler.clear()
        self._logger.info("Pomodoro runtime stopped")
