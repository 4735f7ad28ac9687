"""
Redemption Core Time — Deferred Callbacks
===========================================
Fixed-delay timers used to reset an aborted gesture after the
retract animation.

Scheduler is a protocol so the gesture machine never touches a real
timer in tests. Every call_later() returns a handle whose cancel() is
safe to call more than once, and after the callback already ran.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, List, Protocol

logger = logging.getLogger("redemption.scheduler")


# ══════════════════════════════════════════════════════════════
# PROTOCOLS
# ══════════════════════════════════════════════════════════════

class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...  # pragma: no cover


class Scheduler(Protocol):
    """Injectable source of fixed-delay callbacks."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        ...  # pragma: no cover


# ══════════════════════════════════════════════════════════════
# THREADING SCHEDULER (production)
# ══════════════════════════════════════════════════════════════

class _ThreadTimerHandle:
    def __init__(self, timer: threading.Timer) -> None:
        self._timer = timer

    def cancel(self) -> None:
        self._timer.cancel()


class ThreadingScheduler:
    """Runs each callback on a daemon threading.Timer."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}.")
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return _ThreadTimerHandle(timer)


# ══════════════════════════════════════════════════════════════
# MANUAL SCHEDULER (tests, single-threaded hosts)
# ══════════════════════════════════════════════════════════════

@dataclass
class _ManualTimer:
    due: float
    sequence: int
    callback: Callable[[], None]
    cancelled: bool = False
    fired: bool = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass
class ManualScheduler:
    """
    Virtual-time scheduler. Nothing fires until advance() is called.

    Usage:
        scheduler = ManualScheduler()
        scheduler.call_later(0.2, reset)
        scheduler.advance(0.2)   # reset() runs here
    """

    now: float = 0.0
    _timers: List[_ManualTimer] = field(default_factory=list)
    _sequence: int = 0

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}.")
        self._sequence += 1
        timer = _ManualTimer(
            due=self.now + delay, sequence=self._sequence, callback=callback
        )
        self._timers.append(timer)
        return timer

    def advance(self, seconds: float) -> int:
        """Move virtual time forward and fire every due timer in order.

        Returns the number of callbacks that ran.
        """
        if seconds < 0:
            raise ValueError(f"seconds must be >= 0, got {seconds}.")
        self.now += seconds
        fired = 0
        due = sorted(
            (t for t in self._timers if not t.cancelled and not t.fired and t.due <= self.now),
            key=lambda t: (t.due, t.sequence),
        )
        for timer in due:
            if timer.cancelled:
                continue
            timer.fired = True
            timer.callback()
            fired += 1
        self._timers = [t for t in self._timers if not t.cancelled and not t.fired]
        if fired:
            logger.debug(f"ManualScheduler fired {fired} timer(s) at t={self.now}")
        return fired

    @property
    def pending(self) -> int:
        return sum(1 for t in self._timers if not t.cancelled and not t.fired)
