"""
Redemption Gesture Primitive — Swipe-to-Confirm State Machine
===============================================================
Turns a continuous drag along one axis into a single discrete
"confirmed" event. Irreversible ledger operations are wired to that
event and to nothing else.

States:
    IDLE ──begin──▶ DRAGGING ──update(progress ≥ threshold)──▶ COMPLETED
                       │
                       └──end(progress < threshold)──▶ IDLE (after reset delay)

RULES (NON-NEGOTIABLE):
- Exactly one completion per successful interaction. None on abort.
- Once COMPLETED, update/end are no-ops until a new begin.
- While disabled, begin/update/end are silently ignored.
- Progress is an integer percentage in [0, 100]; backward motion
  lowers it, motion behind the origin counts as 0.
- An aborted drag keeps its progress for the retract animation and
  snaps back to 0 after a fixed delay. A new begin cancels that reset.
- One machine per confirmation control. Never shared.
"""

from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from core.time.scheduler import Scheduler, ThreadingScheduler, TimerHandle

logger = logging.getLogger("redemption.gesture")

DEFAULT_THRESHOLD = 75
DEFAULT_RESET_DELAY = 0.2


class GestureState(Enum):
    IDLE = "IDLE"
    DRAGGING = "DRAGGING"
    COMPLETED = "COMPLETED"


@dataclass(frozen=True)
class GestureSnapshot:
    """Read-only view handed to the rendering layer."""
    state: GestureState
    origin: float
    current: float
    progress: int
    reset_pending: bool = False

    @property
    def is_dragging(self) -> bool:
        return self.state == GestureState.DRAGGING

    @property
    def is_completed(self) -> bool:
        return self.state == GestureState.COMPLETED

    def to_dict(self) -> dict:
        return {
            "progress": self.progress,
            "is_dragging": self.is_dragging,
            "is_completed": self.is_completed,
        }


def calculate_progress(origin: float, current: float, extent: float) -> int:
    """
    Percentage of `extent` travelled forward from `origin`.

    Rounded half-up, clamped to [0, 100].
    """
    if extent <= 0:
        raise ValueError(f"extent must be > 0, got {extent}.")
    delta = max(0.0, current - origin)
    raw = min(100.0, (delta / extent) * 100)
    return int(math.floor(raw + 0.5))


class GestureConfirmation:
    """
    Swipe-to-confirm gate for one action.

    Usage:
        gate = GestureConfirmation(on_complete=do_redeem, extent=320)
        gate.begin(10)
        gate.update(260)     # progress 78 → do_redeem() runs once
        gate.end()           # no-op, already completed
    """

    def __init__(
        self,
        on_complete: Callable[[], None],
        *,
        extent: float,
        threshold: int = DEFAULT_THRESHOLD,
        reset_delay: float = DEFAULT_RESET_DELAY,
        disabled: bool = False,
        scheduler: Optional[Scheduler] = None,
    ):
        if not callable(on_complete):
            raise TypeError("on_complete must be callable.")
        if not 0 < threshold <= 100:
            raise ValueError(f"threshold must be in (0, 100], got {threshold}.")
        if reset_delay < 0:
            raise ValueError(f"reset_delay must be >= 0, got {reset_delay}.")
        if extent <= 0:
            raise ValueError(f"extent must be > 0, got {extent}.")

        self._on_complete = on_complete
        self._extent = float(extent)
        self._threshold = threshold
        self._reset_delay = reset_delay
        self._disabled = disabled
        self._scheduler = scheduler or ThreadingScheduler()

        self._state = GestureState.IDLE
        self._origin = 0.0
        self._current = 0.0
        self._progress = 0
        self._completions = 0
        self._generation = 0
        self._reset_handle: Optional[TimerHandle] = None
        self._lock = threading.RLock()

    # ── Configuration ─────────────────────────────────────────

    @property
    def threshold(self) -> int:
        return self._threshold

    @property
    def extent(self) -> float:
        return self._extent

    def set_extent(self, extent: float) -> None:
        """Track a resized container. Applies from the next update."""
        if extent <= 0:
            raise ValueError(f"extent must be > 0, got {extent}.")
        with self._lock:
            self._extent = float(extent)

    @property
    def disabled(self) -> bool:
        return self._disabled

    @disabled.setter
    def disabled(self, value: bool) -> None:
        with self._lock:
            if value != self._disabled:
                logger.debug(f"Gesture {'disabled' if value else 'enabled'}")
            self._disabled = bool(value)

    def disable(self) -> None:
        self.disabled = True

    def enable(self) -> None:
        self.disabled = False

    # ── Queries ───────────────────────────────────────────────

    @property
    def state(self) -> GestureState:
        return self._state

    @property
    def completions(self) -> int:
        """Completion events fired over this machine's lifetime."""
        return self._completions

    def snapshot(self) -> GestureSnapshot:
        with self._lock:
            return GestureSnapshot(
                state=self._state,
                origin=self._origin,
                current=self._current,
                progress=self._progress,
                reset_pending=self._reset_handle is not None,
            )

    # ── Events ────────────────────────────────────────────────

    def begin(self, origin: float) -> bool:
        """Start a new interaction. Returns False when ignored."""
        with self._lock:
            if self._disabled:
                return False
            self._cancel_pending_reset()
            self._generation += 1
            self._state = GestureState.DRAGGING
            self._origin = float(origin)
            self._current = float(origin)
            self._progress = 0
        logger.debug(f"Gesture begin at {origin}")
        return True

    def update(self, position: float) -> bool:
        """
        Move the pointer. Returns True only for the update that
        crossed the threshold and fired the completion event.
        """
        with self._lock:
            if self._disabled or self._state != GestureState.DRAGGING:
                return False
            self._current = float(position)
            self._progress = calculate_progress(self._origin, self._current, self._extent)
            if self._progress < self._threshold:
                return False
            self._state = GestureState.COMPLETED
            self._completions += 1
            progress = self._progress

        logger.info(f"Gesture completed at {progress}% (threshold {self._threshold}%)")
        self._on_complete()
        return True

    def end(self) -> None:
        """Release the pointer. Below threshold the drag is aborted."""
        with self._lock:
            if self._disabled or self._state != GestureState.DRAGGING:
                return
            self._state = GestureState.IDLE
            generation = self._generation
            self._reset_handle = self._scheduler.call_later(
                self._reset_delay, lambda: self._scheduled_reset(generation)
            )
            progress = self._progress
        logger.debug(
            f"Gesture aborted at {progress}%; reset in {self._reset_delay}s"
        )

    def reset(self) -> None:
        """Return to IDLE with zero progress immediately."""
        with self._lock:
            self._cancel_pending_reset()
            self._state = GestureState.IDLE
            self._origin = 0.0
            self._current = 0.0
            self._progress = 0

    # ── Internals ─────────────────────────────────────────────

    def _scheduled_reset(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._state != GestureState.IDLE:
                return
            self._reset_handle = None
            self._origin = 0.0
            self._current = 0.0
            self._progress = 0

    def _cancel_pending_reset(self) -> None:
        if self._reset_handle is not None:
            self._reset_handle.cancel()
            self._reset_handle = None
