"""Work/rest session state machine driven by scheduler callbacks."""

from __future__ import annotations

import logging
from typing import Optional

from .constants import (
    CYCLE_LENGTH,
    NOTIFICATION_DURATION_MS,
    SOUND_END,
    SOUND_START,
    TICK_INTERVAL_SECONDS,
)
from .contracts import Display, IdleTracker, Notifier, Scheduler, SoundPlayer, TimerHandle
from .messages import (
    RESTARTED_MESSAGE,
    REST_OVER_MESSAGE,
    STOPPED_TEXT,
    emphasis_for,
    status_text,
    work_completed_message,
)
from .types import Phase, SessionConfig, SessionSnapshot


class SessionClock:
    """Owns the countdown, the current phase, and the long-rest cadence.

    Every public operation is total: calling it in a state where it does not
    apply (``resume`` while running, ``pause`` while paused, ...) is a logged
    no-op that returns ``False``. All mutation happens on the scheduler's
    thread; the clock itself holds no locks.
    """

    def __init__(
        self,
        config: SessionConfig,
        *,
        scheduler: Scheduler,
        display: Display,
        notifier: Optional[Notifier] = None,
        sound_player: Optional[SoundPlayer] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._config = config
        self._scheduler = scheduler
        self._display = display
        self._notifier = notifier
        self._sound_player = sound_player
        self._logger = logger or logging.getLogger("pomodoro")
        self._idle_tracker: Optional[IdleTracker] = None

        self._phase = Phase.WORK
        self._cycle_count = 0
        self._remaining_seconds = config.work_duration
        self._running = False
        self._paused_by_idle = False
        self._started = False
        self._stopped = False
        self._disposed = False
        self._phase_serial = 0
        self._countdown: Optional[TimerHandle] = None

        self._render()

    @property
    def config(self) -> SessionConfig:
        return self._config

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def cycle_count(self) -> int:
        return self._cycle_count

    @property
    def remaining_seconds(self) -> int:
        return self._remaining_seconds

    @property
    def running(self) -> bool:
        return self._running

    @property
    def paused_by_idle(self) -> bool:
        return self._paused_by_idle

    @property
    def started(self) -> bool:
        return self._started

    @property
    def phase_serial(self) -> int:
        """Changes whenever a phase begins and when the session stops or is disposed."""
        return self._phase_serial

    def attach_idle_tracker(self, tracker: IdleTracker) -> None:
        self._idle_tracker = tracker

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            phase=self._phase,
            cycle_count=self._cycle_count,
            remaining_seconds=self._remaining_seconds,
            running=self._running,
            paused_by_idle=self._paused_by_idle,
            started=self._started,
        )

    def start(self) -> bool:
        if self._disposed or self._running:
            self._logger.debug("Start ignored: already running")
            return False
        if self._started:
            return self.resume()

        self._started = True
        self._stopped = False
        self._logger.info("Session started: work=%ss", self._config.work_duration)
        self._begin_phase(Phase.WORK, play_sound=True)
        return True

    def tick(self) -> None:
        if not self._running:
            return

        self._remaining_seconds = max(0, self._remaining_seconds - 1)
        if self._remaining_seconds == 0:
            self.complete_phase()
            return
        self._render()

    def complete_phase(self) -> None:
        """Finish the current phase and begin the next one in the cadence."""
        if self._disposed or not self._started:
            return

        finished = self._phase
        self._stop_countdown()
        self._play(SOUND_END)

        if finished is Phase.WORK:
            self._cycle_count = (self._cycle_count + 1) % CYCLE_LENGTH
            is_long = self._cycle_count == 0
            self._notify(work_completed_message(self._cycle_count, self._config))
            next_phase = Phase.LONG_REST if is_long else Phase.SHORT_REST
        else:
            self._notify(REST_OVER_MESSAGE)
            next_phase = Phase.WORK

        self._logger.info(
            "Phase completed: %s -> %s (cycle=%d)",
            finished.value,
            next_phase.value,
            self._cycle_count,
        )
        self._begin_phase(next_phase, play_sound=True)

    def pause(self, by_idle: bool = False) -> bool:
        if not self._running:
            self._logger.debug("Pause ignored: not running")
            return False
        if by_idle and self._phase.is_rest:
            # Inactivity during a rest is expected and never pauses it.
            return False

        self._stop_countdown()
        self._paused_by_idle = by_idle
        self._logger.info(
            "Session paused: phase=%s remaining=%ss by_idle=%s",
            self._phase.value,
            self._remaining_seconds,
            by_idle,
        )
        self._render()
        return True

    def resume(self) -> bool:
        if self._disposed or self._running or not self._started:
            self._logger.debug("Resume ignored: not paused")
            return False

        self._paused_by_idle = False
        self._start_countdown()
        if not self._phase.is_rest:
            self._arm_idle()
        self._logger.info(
            "Session resumed: phase=%s remaining=%ss",
            self._phase.value,
            self._remaining_seconds,
        )
        return True

    def toggle_pause(self) -> bool:
        if self._running:
            return self.pause(by_idle=False)
        if self._started:
            return self.resume()
        return self.start()

    def restart(self, confirmed: bool = False) -> bool:
        """Restart the current phase from its full configured duration."""
        if self._config.confirm_on_restart and not confirmed:
            self._logger.info("Restart skipped: confirmation required")
            return False
        if self._disposed or not self._started:
            self._logger.debug("Restart ignored: session not started")
            return False

        self._logger.info("Phase restarted: %s", self._phase.value)
        self._begin_phase(self._phase, play_sound=False)
        self._notify(RESTARTED_MESSAGE)
        return True

    def stop(self) -> bool:
        """Cancel the session and return to the initial, never-started state."""
        if not self._started:
            return False

        self._stop_countdown()
        self._phase = Phase.WORK
        self._cycle_count = 0
        self._remaining_seconds = self._config.work_duration
        self._paused_by_idle = False
        self._started = False
        self._stopped = True
        self._phase_serial += 1
        self._logger.info("Session stopped")
        self._render()
        return True

    def apply_config(self, config: SessionConfig) -> None:
        """Swap the configuration; an in-flight countdown keeps its remaining time."""
        previous = self._config
        self._config = config

        if not self._started:
            self._remaining_seconds = config.work_duration

        if config.idle_pause.enabled:
            if previous.idle_pause != config.idle_pause and self._running:
                if not self._phase.is_rest:
                    self._arm_idle()
        elif previous.idle_pause.enabled:
            self._disarm_idle()

        self._logger.info(
            "Configuration applied: work=%ss short=%ss long=%ss idle_pause=%s",
            config.work_duration,
            config.short_rest_duration,
            config.long_rest_duration,
            config.idle_pause.enabled,
        )
        self._render()

    def dispose(self) -> None:
        if self._disposed:
            return
        self._stop_countdown()
        self._disposed = True
        self._phase_serial += 1
        self._logger.debug("Session clock disposed")

    def _begin_phase(self, phase: Phase, *, play_sound: bool) -> None:
        self._stop_countdown()
        self._phase = phase
        self._phase_serial += 1
        self._paused_by_idle = False
        self._remaining_seconds = self._config.duration_for(phase)
        if play_sound:
            self._play(SOUND_START)
        self._start_countdown()
        if not phase.is_rest:
            self._arm_idle()

    def _start_countdown(self) -> None:
        self._cancel_countdown()
        self._running = True
        self._countdown = self._scheduler.call_every(TICK_INTERVAL_SECONDS, self.tick)
        self._render()

    def _stop_countdown(self) -> None:
        self._cancel_countdown()
        self._running = False
        self._disarm_idle()

    def _cancel_countdown(self) -> None:
        if self._countdown is not None:
            self._countdown.cancel()
            self._countdown = None

    def _arm_idle(self) -> None:
        if self._idle_tracker is not None and self._config.idle_pause.enabled:
            self._idle_tracker.arm_idle()

    def _disarm_idle(self) -> None:
        if self._idle_tracker is not None:
            self._idle_tracker.disarm_idle()

    def _render(self) -> None:
        if self._stopped:
            text = STOPPED_TEXT
        else:
            text = status_text(self.snapshot(), self._config)
        try:
            self._display.render(text, emphasis_for(self._phase))
        except Exception as error:
            self._logger.warning("Status display failed: %s", error)

    def _notify(self, message: str) -> None:
        if self._notifier is None:
            return
        try:
            self._notifier.notify(message, NOTIFICATION_DURATION_MS)
        except Exception as error:
            self._logger.warning("Notification failed: %s", error)

    def _play(self, which: str) -> None:
        if self._sound_player is None:
            return
        try:
            self._sound_player.play(which)
        except Exception as error:
            self._logger.warning("Sound playback failed (%s): %s", which, error)
