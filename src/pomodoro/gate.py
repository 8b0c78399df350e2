"""Single/double activation disambiguation and inactivity tracking."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from .clock import SessionClock
from .constants import ACTIVATION_WINDOW_SECONDS, NOTIFICATION_DURATION_MS
from .contracts import Notifier, Scheduler, TimerHandle
from .messages import IDLE_PAUSED_MESSAGE, IDLE_RESUMED_MESSAGE


class InteractionGate:
    """Turns raw activation and activity signals into clock commands.

    A first activation opens a short window. If it closes untouched the
    single-activation callback runs; a second activation inside the window
    cancels it and runs the double-activation callback immediately.

    Activity signals keep a single idle deadline alive while the clock runs a
    work phase. When the deadline passes the clock is paused with
    ``by_idle=True``; the next activity resumes it.
    """

    def __init__(
        self,
        clock: SessionClock,
        *,
        scheduler: Scheduler,
        on_single: Callable[[], None],
        on_double: Callable[[], None],
        notifier: Optional[Notifier] = None,
        window_seconds: float = ACTIVATION_WINDOW_SECONDS,
        logger: Optional[logging.Logger] = None,
    ):
        self._clock = clock
        self._scheduler = scheduler
        self._on_single = on_single
        self._on_double = on_double
        self._notifier = notifier
        self._window_seconds = window_seconds
        self._logger = logger or logging.getLogger("interaction")

        self._pending_activation: Optional[TimerHandle] = None
        self._idle_timer: Optional[TimerHandle] = None

        clock.attach_idle_tracker(self)

    @property
    def activation_pending(self) -> bool:
        return self._pending_activation is not None

    @property
    def idle_armed(self) -> bool:
        return self._idle_timer is not None

    def on_activation(self) -> None:
        if self._pending_activation is not None:
            self._pending_activation.cancel()
            self._pending_activation = None
            self._logger.debug("Double activation")
            self._on_double()
            return

        self._pending_activation = self._scheduler.call_later(
            self._window_seconds,
            self._fire_single,
        )

    def on_activity(self) -> None:
        clock = self._clock
        if clock.paused_by_idle:
            if clock.resume():
                self._logger.info("Activity detected, resuming idle-paused session")
                self._notify(IDLE_RESUMED_MESSAGE)
            return

        if (
            clock.config.idle_pause.enabled
            and clock.running
            and not clock.phase.is_rest
        ):
            self.arm_idle()

    def arm_idle(self) -> None:
        idle_pause = self._clock.config.idle_pause
        if not idle_pause.enabled:
            return
        self.disarm_idle()
        self._idle_timer = self._scheduler.call_later(
            idle_pause.timeout_seconds,
            self._on_idle_timeout,
        )

    def disarm_idle(self) -> None:
        if self._idle_timer is not None:
            self._idle_timer.cancel()
            self._idle_timer = None

    def dispose(self) -> None:
        if self._pending_activation is not None:
            self._pending_activation.cancel()
            self._pending_activation = None
        self.disarm_idle()

    def _fire_single(self) -> None:
        self._pending_activation = None
        self._logger.debug("Single activation")
        self._on_single()

    def _on_idle_timeout(self) -> None:
        self._idle_timer = None
        if self._clock.pause(by_idle=True):
            self._logger.info(
                "No activity for %ss, session paused",
                self._clock.config.idle_pause.timeout_seconds,
            )
            self._notify(IDLE_PAUSED_MESSAGE)

    def _notify(self, message: str) -> None:
        if self._notifier is None:
            return
        try:
            self._notifier.notify(message, NOTIFICATION_DURATION_MS)
        except Exception as error:
            self._logger.warning("Notification failed: %s", error)
