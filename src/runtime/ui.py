from __future__ import annotations

import logging
import sys
import uuid
from dataclasses import dataclass
from typing import Any, Optional, TextIO

from contracts.ui_protocol import (
    EVENT_CONFIRM_REQUEST,
    EVENT_NOTIFICATION,
    EVENT_STATUS,
)
from pomodoro import SessionClock

from .contracts import UIServerLike


class RuntimeUIPublisher:
    def __init__(self, ui_server: Optional[UIServerLike]):
        self._ui_server = ui_server

    @property
    def attached(self) -> bool:
        return self._ui_server is not None

    def publish(self, event_type: str, **payload: Any) -> None:
        if self._ui_server:
            self._ui_server.publish(event_type, **payload)

    def publish_status(self, text: str, emphasis: str) -> None:
        self.publish(EVENT_STATUS, text=text, emphasis=emphasis)

    def publish_notification(self, message: str, duration_ms: int) -> None:
        self.publish(EVENT_NOTIFICATION, message=message, duration_ms=duration_ms)

    def publish_confirm_request(self, prompt: str, request_id: str) -> None:
        self.publish(EVENT_CONFIRM_REQUEST, prompt=prompt, request_id=request_id)


class UIStatusDisplay:
    """Status display rendered by connected web UI clients."""
    def __init__(self, publisher: RuntimeUIPublisher):
        self._publisher = publisher
        self.last_text: Optional[str] = None

    def render(self, text: str, emphasis: str) -> None:
        self.last_text = text
        self._publisher.publish_status(text, emphasis)


class ConsoleDisplay:
    """Single-line status display rewritten in place on a terminal."""
    def __init__(self, stream: Optional[TextIO] = None, width: int = 32):
        self._stream = stream or sys.stdout
        self._width = width

    def render(self, text: str, emphasis: str) -> None:
        del emphasis  # Terminal output is not colored.
        self._stream.write(f"\r{text:<{self._width}}")
        self._stream.flush()


class UINotifier:
    def __init__(self, publisher: RuntimeUIPublisher):
        self._publisher = publisher

    def notify(self, message: str, duration_ms: int) -> None:
        self._publisher.publish_notification(message, duration_ms)


class LoggingNotifier:
    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger("notifications")

    def notify(self, message: str, duration_ms: int) -> None:
        self._logger.info("%s (%dms)", message, duration_ms)


@dataclass(frozen=True)
class PendingConfirmation:
    request_id: str
    phase_serial: int


class UIConfirmer:
    """Asks connected clients to confirm; the answer arrives as a separate message.

    `confirm` never blocks the scheduler thread. It publishes a request with a
    fresh id and defers the decision by returning False. A client that accepts
    replies with `confirm_restart` carrying that id, and `accept` honors it
    only while the phase it was asked about is still current.
    """
    def __init__(
        self,
        publisher: RuntimeUIPublisher,
        clock: SessionClock,
        logger: Optional[logging.Logger] = None,
    ):
        self._publisher = publisher
        self._clock = clock
        self._logger = logger or logging.getLogger("commands")
        self._pending: Optional[PendingConfirmation] = None

    @property
    def pending_request_id(self) -> Optional[str]:
        pending = self._pending
        if pending is None or pending.phase_serial != self._clock.phase_serial:
            return None
        return pending.request_id

    def confirm(self, prompt: str) -> bool:
        request_id = uuid.uuid4().hex
        self._pending = PendingConfirmation(request_id, self._clock.phase_serial)
        self._publisher.publish_confirm_request(prompt, request_id)
        self._logger.info("Restart awaiting confirmation: request=%s", request_id)
        return False

    def accept(self, request_id: Any) -> bool:
        """Consume the pending request if `request_id` matches and is still current."""
        pending = self._pending
        if pending is not None and pending.phase_serial != self._clock.phase_serial:
            # The phase the prompt was about has ended.
            self._pending = None
            if request_id == pending.request_id:
                self._logger.info("Ignoring stale restart confirmation: request=%s", request_id)
                return False
            pending = None

        if pending is None or request_id != pending.request_id:
            self._logger.warning("Ignoring unsolicited restart confirmation")
            return False
        self._pending = None
        return True

    def cancel(self) -> None:
        self._pending = None


class AutoConfirmer:
    def confirm(self, prompt: str) -> bool:
        del prompt
        return True
