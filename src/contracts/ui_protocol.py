"""Web UI websocket event and inbound message constants."""

from __future__ import annotations

# Outbound websocket event types
EVENT_HELLO = "hello"
EVENT_STATUS = "status"
EVENT_NOTIFICATION = "notification"
EVENT_CONFIRM_REQUEST = "confirm_request"

# Inbound websocket message types
MESSAGE_ACTIVATION = "activation"
MESSAGE_ACTIVITY = "activity"
MESSAGE_COMMAND = "command"
MESSAGE_CONFIRM_RESTART = "confirm_restart"  # must echo the `request_id` of a confirm_request

INBOUND_MESSAGE_TYPES: frozenset[str] = frozenset(
    {
        MESSAGE_ACTIVATION,
        MESSAGE_ACTIVITY,
        MESSAGE_COMMAND,
        MESSAGE_CONFIRM_RESTART,
    }
)

# Host commands accepted in `{"type": "command", "name": ...}` messages
COMMAND_TOGGLE_PAUSE = "toggle_pause"
COMMAND_RESTART = "restart"
COMMAND_START = "start"
COMMAND_STOP = "stop"

COMMAND_NAMES: frozenset[str] = frozenset(
    {COMMAND_TOGGLE_PAUSE, COMMAND_RESTART, COMMAND_START, COMMAND_STOP}
)

STICKY_EVENT_TYPES: frozenset[str] = frozenset({EVENT_STATUS})

STICKY_EVENT_ORDER: tuple[str, ...] = (EVENT_STATUS,)
