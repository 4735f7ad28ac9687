"""
Redemption Core Time — Public API
===================================
Explicit clock protocol, expiry helpers and deferred callbacks.
NO datetime.now() in engine logic.
"""

from core.time.clock import (
    Clock,
    FixedClock,
    SystemClock,
    get_default_clock,
    set_default_clock,
)
from core.time.scheduler import (
    ManualScheduler,
    Scheduler,
    ThreadingScheduler,
    TimerHandle,
)
from core.time.temporal import (
    is_expired,
    is_past,
    seconds_until_expiry,
)

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
    "get_default_clock",
    "set_default_clock",
    "Scheduler",
    "TimerHandle",
    "ThreadingScheduler",
    "ManualScheduler",
    "is_expired",
    "is_past",
    "seconds_until_expiry",
]
