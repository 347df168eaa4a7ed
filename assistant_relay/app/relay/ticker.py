from __future__ import annotations

import threading
import time
from typing import Callable

Clock = Callable[[], float]
Waiter = Callable[[float], bool]


class CancellationToken:
    """Cooperative cancellation flag shared between a caller and a poll loop.

    Cancelling is sticky: the token stays cancelled after the poll loop has
    reacted to it, so the caller's own context can still observe it.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, seconds: float) -> bool:
        return self._event.wait(seconds)


class PollTicker:
    def __init__(
        self,
        interval_seconds: float,
        *,
        token: CancellationToken | None = None,
        clock: Clock = time.monotonic,
        waiter: Waiter | None = None,
    ) -> None:
        self._interval = interval_seconds
        self._token = token or CancellationToken()
        self._clock = clock
        self._waiter = waiter or self._token.wait
        self._started_at = clock()

    @property
    def cancelled(self) -> bool:
        return self._token.cancelled

    def elapsed(self) -> float:
        return max(self._clock() - self._started_at, 0.0)

    def tick(self, deadline_seconds: float | None = None) -> bool:
        """Block for one interval; return False when cancelled instead.

        With a deadline the wait is shortened so it never runs past it.
        """
        if self._token.cancelled:
            return False
        wait_for = self._interval
        if deadline_seconds is not None:
            wait_for = min(wait_for, max(deadline_seconds - self.elapsed(), 0.0))
        interrupted = self._waiter(wait_for)
        return not (interrupted or self._token.cancelled)
