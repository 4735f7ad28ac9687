"""
Redemption Coupon Engine — Session Context
============================================
One user's redemption session: a credit ledger, the coupon catalog,
the transaction history and the swipe controls wired to them.

RULES (NON-NEGOTIABLE):
- The session owns its ledger, coupons and history. Nothing is global.
- Ledger-mutating actions run from a confirmation's completion event
  or from an explicit redeem()/use() call. Never from a raw drag.
- A confirmation control is disabled whenever its action would be
  rejected (coupon in the wrong state, balance too low).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Callable, Iterable, List, Optional, Union

from core.codes.barcode import BarcodeLayout, render_barcode, render_svg
from core.codes.derivation import derive_code
from core.commands.outcomes import CommandOutcome
from core.config.settings import DEFAULT_SETTINGS, RedemptionSettings
from core.primitives.gesture import GestureConfirmation, GestureSnapshot
from core.primitives.ledger import CreditLedger
from core.time.clock import Clock, get_default_clock
from core.time.scheduler import Scheduler, ThreadingScheduler
from core.time.temporal import is_expired, seconds_until_expiry
from engines.coupon.catalog import default_catalog
from engines.coupon.formatting import credits_to_yen, ton_to_kg
from engines.coupon.models import Coupon, CouponStatus
from engines.coupon.services import CouponProjectionStore, CouponService, EventSink
from engines.transactions import TransactionKind, TransactionRecord, TransactionRecorder

logger = logging.getLogger("redemption.coupon")

OutcomeCallback = Callable[[CommandOutcome], None]


# ══════════════════════════════════════════════════════════════
# BARCODE DISPLAY
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class BarcodeDisplay:
    """A barcode as shown at the till, valid for a fixed lifetime."""
    coupon_id: str
    seed: str
    code: str
    layout: BarcodeLayout
    shown_at: datetime
    lifetime_seconds: int

    def is_valid(self, now: datetime) -> bool:
        return not is_expired(self.shown_at, self.lifetime_seconds, now)

    def seconds_remaining(self, now: datetime) -> float:
        remaining = seconds_until_expiry(self.shown_at, self.lifetime_seconds, now)
        return remaining if remaining is not None else 0.0

    def svg(self) -> str:
        return render_svg(self.layout)


# ══════════════════════════════════════════════════════════════
# CONFIRMATION CONTROL
# ══════════════════════════════════════════════════════════════

class ConfirmationControl:
    """
    Swipe control bound to one coupon action.

    The gesture's completion event runs the action exactly once; the
    resulting CommandOutcome is kept in `outcome` and handed to
    `on_outcome` when set.
    """

    def __init__(
        self,
        action: Callable[[], CommandOutcome],
        *,
        enabled_when: Callable[[], bool],
        extent: float,
        settings: RedemptionSettings,
        scheduler: Scheduler,
        on_outcome: Optional[OutcomeCallback] = None,
    ):
        self._action = action
        self._enabled_when = enabled_when
        self.on_outcome = on_outcome
        self._outcome: Optional[CommandOutcome] = None
        self._gesture = GestureConfirmation(
            self._complete,
            extent=extent,
            threshold=settings.swipe_threshold,
            reset_delay=settings.gesture_reset_delay,
            disabled=not enabled_when(),
            scheduler=scheduler,
        )

    @property
    def outcome(self) -> Optional[CommandOutcome]:
        """Outcome of the last completed swipe, None before the first."""
        return self._outcome

    @property
    def gesture(self) -> GestureConfirmation:
        return self._gesture

    @property
    def disabled(self) -> bool:
        return self._gesture.disabled

    def refresh(self) -> bool:
        """Re-evaluate whether the action is currently allowed."""
        self._gesture.disabled = not self._enabled_when()
        return not self._gesture.disabled

    def set_extent(self, extent: float) -> None:
        self._gesture.set_extent(extent)

    def begin_gesture(self, origin: float) -> bool:
        self.refresh()
        return self._gesture.begin(origin)

    def update_gesture(self, position: float) -> bool:
        return self._gesture.update(position)

    def end_gesture(self) -> None:
        self._gesture.end()

    def snapshot(self) -> GestureSnapshot:
        return self._gesture.snapshot()

    def _complete(self) -> None:
        outcome = self._action()
        self._outcome = outcome
        self.refresh()
        if self.on_outcome is not None:
            self.on_outcome(outcome)


# ══════════════════════════════════════════════════════════════
# SESSION
# ══════════════════════════════════════════════════════════════

class RedemptionSession:
    """
    Entry point for one user's coupon redemption.

    Usage:
        session = RedemptionSession(clock=clock, scheduler=ManualScheduler())
        control = session.redeem_confirmation("ecomart-1200", extent=300)
        control.begin_gesture(0)
        control.update_gesture(240)   # redeems, control.outcome is ACCEPTED
    """

    def __init__(
        self,
        *,
        settings: Optional[RedemptionSettings] = None,
        catalog: Optional[Iterable[Coupon]] = None,
        clock: Optional[Clock] = None,
        scheduler: Optional[Scheduler] = None,
        event_sink: Optional[EventSink] = None,
    ):
        self._settings = settings or DEFAULT_SETTINGS
        self._clock = clock or get_default_clock()
        self._scheduler = scheduler or ThreadingScheduler()

        self._ledger = CreditLedger(
            self._settings.opening_balance,
            quantum=self._settings.balance_quantum,
            clock=self._clock,
        )
        self._store = CouponProjectionStore()
        self._store.load(
            default_catalog(self._clock.now_utc()) if catalog is None else catalog
        )
        self._recorder = TransactionRecorder()
        self._service = CouponService(
            ledger=self._ledger,
            projection_store=self._store,
            recorder=self._recorder,
            settings=self._settings,
            clock=self._clock,
            event_sink=event_sink,
        )
        logger.info(
            f"Session opened: balance {self._ledger.balance}t, "
            f"{len(self._store.all())} coupon(s)"
        )

    @property
    def settings(self) -> RedemptionSettings:
        return self._settings

    @property
    def ledger(self) -> CreditLedger:
        return self._ledger

    @property
    def recorder(self) -> TransactionRecorder:
        return self._recorder

    # ── Balance ───────────────────────────────────────────────

    def balance(self) -> Decimal:
        return self._ledger.balance

    def balance_kg(self) -> int:
        return ton_to_kg(self._ledger.balance)

    def balance_yen(self) -> int:
        return credits_to_yen(self._ledger.balance, self._settings.credit_rate_yen)

    # ── History ───────────────────────────────────────────────

    def transactions(self) -> List[TransactionRecord]:
        """Newest first."""
        return self._recorder.history()

    def recent_transactions(self, limit: int = 3) -> List[TransactionRecord]:
        return self._recorder.recent(limit)

    def summary_total(self, kind: TransactionKind) -> int:
        return self._recorder.summary_total(kind)

    # ── Coupons ───────────────────────────────────────────────

    def coupons(self, status: Union[CouponStatus, str, None] = None) -> List[Coupon]:
        if status is None:
            return self._store.all()
        return self._store.list_by_status(CouponStatus(status))

    def get_coupon(self, coupon_id: str) -> Optional[Coupon]:
        return self._store.get(coupon_id)

    def can_redeem(self, coupon_id: str) -> bool:
        return self._service.can_redeem(coupon_id)

    def can_use(self, coupon_id: str) -> bool:
        coupon = self._store.get(coupon_id)
        return coupon is not None and coupon.status == CouponStatus.USABLE

    def redeem(self, coupon_id: str, *, actor_id: Optional[str] = None) -> CommandOutcome:
        return self._service.redeem(coupon_id, actor_id=actor_id)

    def use(self, coupon_id: str, *, actor_id: Optional[str] = None) -> CommandOutcome:
        return self._service.use(coupon_id, actor_id=actor_id)

    # ── Confirmation controls ─────────────────────────────────

    def redeem_confirmation(
        self,
        coupon_id: str,
        extent: float,
        on_outcome: Optional[OutcomeCallback] = None,
    ) -> ConfirmationControl:
        """Swipe control whose completion redeems `coupon_id`."""
        return ConfirmationControl(
            lambda: self.redeem(coupon_id),
            enabled_when=lambda: self.can_redeem(coupon_id),
            extent=extent,
            settings=self._settings,
            scheduler=self._scheduler,
            on_outcome=on_outcome,
        )

    def use_confirmation(
        self,
        coupon_id: str,
        extent: float,
        on_outcome: Optional[OutcomeCallback] = None,
    ) -> ConfirmationControl:
        """Swipe control whose completion uses `coupon_id`."""
        return ConfirmationControl(
            lambda: self.use(coupon_id),
            enabled_when=lambda: self.can_use(coupon_id),
            extent=extent,
            settings=self._settings,
            scheduler=self._scheduler,
            on_outcome=on_outcome,
        )

    # ── Codes ─────────────────────────────────────────────────

    @staticmethod
    def derive_code(seed: str) -> str:
        return derive_code(seed)

    def barcode(
        self,
        coupon_id: str,
        *,
        width: int = 280,
        height: int = 120,
        show_text: bool = True,
    ) -> BarcodeDisplay:
        """
        Display barcode for a redeemed coupon.

        Raises ValueError for unknown coupons and for coupons that have
        not been redeemed yet (no code/PIN to derive from).
        """
        coupon = self._store.get(coupon_id)
        if coupon is None:
            raise ValueError(f"Coupon '{coupon_id}' does not exist.")
        seed = coupon.barcode_seed
        if seed is None:
            raise ValueError(f"Coupon '{coupon_id}' has no code yet.")
        code = derive_code(seed)
        return BarcodeDisplay(
            coupon_id=coupon_id,
            seed=seed,
            code=code,
            layout=render_barcode(code, width=width, height=height, show_text=show_text),
            shown_at=self._clock.now_utc(),
            lifetime_seconds=self._settings.barcode_lifetime_seconds,
        )
