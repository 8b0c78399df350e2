"""Utilities for serializing UI events, parsing client messages, and sticky state."""

from __future__ import annotations

import json
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from contracts.ui_protocol import (
    COMMAND_NAMES,
    INBOUND_MESSAGE_TYPES,
    MESSAGE_COMMAND,
    MESSAGE_CONFIRM_RESTART,
    STICKY_EVENT_ORDER,
    STICKY_EVENT_TYPES,
)


def make_event(
    event_type: str,
    *,
    now_fn: Callable[[], datetime] | None = None,
    **payload: Any,
) -> str:
    """Serialize an event payload with type and timestamp for websocket delivery."""
    now = now_fn() if now_fn is not None else datetime.now(timezone.utc)
    return json.dumps(
        {
            "type": event_type,
            "timestamp": now.isoformat(),
            **payload,
        }
    )


def parse_client_message(raw: str | bytes) -> Optional[dict[str, Any]]:
    """Decode an inbound client message, returning None for anything unsupported."""
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError:
            return None
    try:
        message = json.loads(raw)
    except ValueError:
        return None

    if not isinstance(message, dict):
        return None
    message_type = message.get("type")
    if message_type not in INBOUND_MESSAGE_TYPES:
        return None
    if message_type == MESSAGE_COMMAND and message.get("name") not in COMMAND_NAMES:
        return None
    if message_type == MESSAGE_CONFIRM_RESTART and not isinstance(
        message.get("request_id"), str
    ):
        return None
    return message


class StickyEventStore:
    """Thread-safe cache of sticky events replayed to new websocket clients."""
    def __init__(self):
        self._events: dict[str, str] = {}
        self._lock = threading.Lock()

    def remember(self, event_type: str, message: str) -> None:
        if event_type not in STICKY_EVENT_TYPES:
            return
        with self._lock:
            self._events[event_type] = message

    def snapshot(self) -> list[str]:
        with self._lock:
            return [self._events[key] for key in STICKY_EVENT_ORDER if key in self._events]
