"""Single-threaded callback scheduler with synchronous cancellation."""

from __future__ import annotations

import heapq
import itertools
import logging
import threading
import time
from queue import Empty, Queue
from typing import Callable, Optional

_POLL_INTERVAL_SECONDS = 0.25


class ScheduledCall:
    """Handle for a one-shot or repeating callback owned by a `CallbackScheduler`."""

    def __init__(
        self,
        due: float,
        callback: Callable[[], None],
        interval: Optional[float] = None,
    ):
        self.due = due
        self.callback = callback
        self.interval = interval
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def repeating(self) -> bool:
        return self.interval is not None

    def cancel(self) -> None:
        self._cancelled = True


class CallbackScheduler:
    """Runs timer callbacks and posted work on one loop thread.

    `call_later`, `call_every` and `ScheduledCall.cancel` must be called from
    the loop thread; a cancelled call is never invoked afterwards. Other
    threads hand work over with `post`, which is the only thread-safe entry
    point.
    """

    def __init__(
        self,
        *,
        clock: Callable[[], float] = time.monotonic,
        logger: Optional[logging.Logger] = None,
    ):
        self._clock = clock
        self._logger = logger or logging.getLogger("scheduler")
        self._heap: list[tuple[float, int, ScheduledCall]] = []
        self._sequence = itertools.count()
        self._inbox: Queue[Callable[[], None]] = Queue()

    def now(self) -> float:
        return self._clock()

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        call = ScheduledCall(self._clock() + max(0.0, float(delay)), callback)
        self._push(call)
        return call

    def call_every(self, interval: float, callback: Callable[[], None]) -> ScheduledCall:
        if interval <= 0:
            raise ValueError("interval must be greater than zero")
        call = ScheduledCall(self._clock() + float(interval), callback, float(interval))
        self._push(call)
        return call

    def post(self, callback: Callable[[], None]) -> None:
        self._inbox.put(callback)

    @property
    def pending_count(self) -> int:
        return sum(1 for _, _, call in self._heap if not call.cancelled)

    def seconds_until_next(self) -> Optional[float]:
        self._drop_cancelled_head()
        if not self._heap:
            return None
        return max(0.0, self._heap[0][0] - self._clock())

    def run_pending(self) -> int:
        """Run posted work, then every call due at the current time, in order."""
        executed = self._drain_inbox()
        now = self._clock()
        while self._heap and self._heap[0][0] <= now:
            _, _, call = heapq.heappop(self._heap)
            if call.cancelled:
                continue
            if call.interval is not None:
                # Rescheduled before running so the callback may cancel itself.
                call.due += call.interval
                self._push(call)
            self._invoke(call.callback)
            executed += 1
        return executed

    def run_until(self, stop_event: threading.Event) -> None:
        """Block the calling thread, servicing callbacks until `stop_event` is set."""
        while not stop_event.is_set():
            self.run_pending()
            wait = self.seconds_until_next()
            timeout = _POLL_INTERVAL_SECONDS if wait is None else min(wait, _POLL_INTERVAL_SECONDS)
            try:
                callback = self._inbox.get(timeout=timeout)
            except Empty:
                continue
            self._invoke(callback)

    def clear(self) -> None:
        for _, _, call in self._heap:
            call.cancel()
        self._heap.clear()

    def _push(self, call: ScheduledCall) -> None:
        heapq.heappush(self._heap, (call.due, next(self._sequence), call))

    def _drop_cancelled_head(self) -> None:
        while self._heap and self._heap[0][2].cancelled:
            heapq.heappop(self._heap)

    def _drain_inbox(self) -> int:
        executed = 0
        while True:
            try:
                callback = self._inbox.get_nowait()
            except Empty:
                return executed
            self._invoke(callback)
            executed += 1

    def _invoke(self, callback: Callable[[], None]) -> None:
        try:
            callback()
        except Exception:
            self._logger.exception("Scheduled callback failed")
