"""
Redemption Coupon Engine — Service Layer
==========================================
Coupon lifecycle over a credit ledger.

Redeem:  policies → mint code/PIN → debit ledger → coupon.redeemed.v1
         → projection → one 'redeem' transaction.
Use:     policies → coupon.used.v1 → projection → one 'use' transaction.

A rejected command changes nothing: not the ledger, not the coupon,
not the history.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional

from core.codes.minting import mint_code, mint_pin
from core.commands.outcomes import CommandOutcome
from core.commands.rejection import ReasonCode, RejectionReason
from core.config.settings import DEFAULT_SETTINGS, RedemptionSettings
from core.primitives.ledger import CreditLedger
from core.primitives.workflow import COUPON_WORKFLOW
from core.time.clock import Clock, get_default_clock
from engines.coupon.commands import (
    CouponCommand,
    RedeemCouponRequest,
    UseCouponRequest,
)
from engines.coupon.events import (
    ALL_EVENT_TYPES,
    COMMAND_TO_EVENT_TYPE,
    COUPON_REDEEMED_V1,
    COUPON_USED_V1,
    PAYLOAD_BUILDERS,
)
from engines.coupon.models import Coupon, CouponStatus
from engines.coupon.policies import (
    coupon_must_be_redeemable_policy,
    coupon_must_be_usable_policy,
    coupon_must_exist_policy,
    sufficient_credits_policy,
)
from engines.transactions import TransactionKind, TransactionRecorder

logger = logging.getLogger("redemption.coupon")

EventSink = Callable[[Dict[str, Any]], None]


# ── Projection Store ──────────────────────────────────────────

class CouponProjectionStore:
    """In-memory coupon set for one session, in catalog order."""

    def __init__(self):
        self._events: List[dict] = []
        self._coupons: Dict[str, Coupon] = {}
        self._issued_codes: set = set()

    def load(self, coupons: Iterable[Coupon]) -> None:
        """Add catalog coupons. Each must start in the workflow's initial state."""
        for coupon in coupons:
            if coupon.coupon_id in self._coupons:
                raise ValueError(f"Duplicate coupon_id: {coupon.coupon_id}")
            if coupon.status.value != COUPON_WORKFLOW.initial_state:
                raise ValueError(
                    f"Coupon '{coupon.coupon_id}' must be loaded as "
                    f"{COUPON_WORKFLOW.initial_state}, got {coupon.status.value}."
                )
            self._coupons[coupon.coupon_id] = coupon

    def apply(self, event_type: str, payload: Dict[str, Any]) -> None:
        if event_type not in ALL_EVENT_TYPES:
            raise ValueError(f"Unknown coupon event type: {event_type}")
        self._events.append({"event_type": event_type, "payload": payload})

        if event_type == COUPON_REDEEMED_V1:
            coupon = self._coupons[payload["coupon_id"]]
            at = datetime.fromisoformat(payload["redeemed_at"])
            record = COUPON_WORKFLOW.transition(
                coupon.status.value, CouponStatus.USABLE.value, at, reason="redeem",
            )
            self._coupons[coupon.coupon_id] = replace(
                coupon,
                status=CouponStatus.USABLE,
                code=payload["code"],
                pin=payload["pin"],
                redeemed_at=at,
                transitions=coupon.transitions + (record,),
            )
            self._issued_codes.add(payload["code"])

        elif event_type == COUPON_USED_V1:
            coupon = self._coupons[payload["coupon_id"]]
            at = datetime.fromisoformat(payload["used_at"])
            record = COUPON_WORKFLOW.transition(
                coupon.status.value, CouponStatus.USED.value, at, reason="use",
            )
            self._coupons[coupon.coupon_id] = replace(
                coupon,
                status=CouponStatus.USED,
                used_at=at,
                transitions=coupon.transitions + (record,),
            )

    # ── Queries ───────────────────────────────────────────────

    def get(self, coupon_id: str) -> Optional[Coupon]:
        return self._coupons.get(coupon_id)

    def all(self) -> List[Coupon]:
        return list(self._coupons.values())

    def list_by_status(self, status: CouponStatus) -> List[Coupon]:
        return [c for c in self._coupons.values() if c.status == status]

    @property
    def issued_codes(self) -> frozenset:
        return frozenset(self._issued_codes)

    @property
    def event_count(self) -> int:
        return len(self._events)


# ── Service ───────────────────────────────────────────────────

def _first_rejection(*results: Optional[RejectionReason]) -> Optional[RejectionReason]:
    for result in results:
        if result is not None:
            return result
    return None


class CouponService:
    """Coupon engine service. Every accepted command produces one event."""

    def __init__(
        self,
        *,
        ledger: CreditLedger,
        projection_store: CouponProjectionStore,
        recorder: TransactionRecorder,
        settings: RedemptionSettings = DEFAULT_SETTINGS,
        clock: Optional[Clock] = None,
        event_sink: Optional[EventSink] = None,
    ):
        self._ledger = ledger
        self._projection = projection_store
        self._recorder = recorder
        self._settings = settings
        self._clock = clock or get_default_clock()
        self._event_sink = event_sink

    # ── Commands ──────────────────────────────────────────────

    def redeem(self, coupon_id: str, *, actor_id: Optional[str] = None) -> CommandOutcome:
        """Spend the coupon's credits and make it usable. One-way."""
        with self._ledger.lock:
            command = RedeemCouponRequest(
                coupon_id=coupon_id,
                issued_at=self._clock.now_utc(),
                actor_id=actor_id,
            ).to_command()

            lookup = self._projection.get
            rejection = _first_rejection(
                coupon_must_exist_policy(command, coupon_lookup=lookup),
                coupon_must_be_redeemable_policy(command, coupon_lookup=lookup),
                sufficient_credits_policy(
                    command,
                    coupon_lookup=lookup,
                    balance_lookup=lambda: self._ledger.balance,
                ),
            )
            if rejection is not None:
                return self._reject(command, rejection)

            coupon = self._projection.get(coupon_id)
            code = mint_code(
                self._settings.redeemed_code_prefix,
                issued=self._projection.issued_codes,
            )
            pin = mint_pin(self._settings.pin_digits)

            debit = self._ledger.debit(coupon.need_credits, reference=coupon_id)
            if debit.is_rejected:
                return self._reject(command, RejectionReason(
                    code=ReasonCode.INSUFFICIENT_CREDITS,
                    message=debit.reason.message,
                    policy_name=debit.reason.policy_name,
                ))

            payload = self._execute_command(command, coupon, {
                "code": code,
                "pin": pin,
                "balance_after": self._ledger.balance,
            })
            self._recorder.append(
                TransactionKind.REDEEM,
                coupon.label,
                coupon.need_credits,
                coupon.face,
                command.issued_at,
                coupon_id=coupon_id,
            )

        logger.info(
            f"Coupon {coupon_id} redeemed for {coupon.need_credits}t "
            f"(balance {payload['balance_after']}t)"
        )
        return CommandOutcome.accepted(command.command_id, command.issued_at, payload)

    def use(self, coupon_id: str, *, actor_id: Optional[str] = None) -> CommandOutcome:
        """Consume a usable coupon. Terminal; no credits move."""
        with self._ledger.lock:
            command = UseCouponRequest(
                coupon_id=coupon_id,
                issued_at=self._clock.now_utc(),
                actor_id=actor_id,
            ).to_command()

            lookup = self._projection.get
            rejection = _first_rejection(
                coupon_must_exist_policy(command, coupon_lookup=lookup),
                coupon_must_be_usable_policy(command, coupon_lookup=lookup),
            )
            if rejection is not None:
                return self._reject(command, rejection)

            coupon = self._projection.get(coupon_id)
            payload = self._execute_command(command, coupon, {})
            self._recorder.append(
                TransactionKind.USE,
                coupon.label,
                None,
                coupon.face,
                command.issued_at,
                coupon_id=coupon_id,
            )

        logger.info(f"Coupon {coupon_id} used")
        return CommandOutcome.accepted(command.command_id, command.issued_at, payload)

    # ── Queries ───────────────────────────────────────────────

    def can_redeem(self, coupon_id: str) -> bool:
        coupon = self._projection.get(coupon_id)
        return (
            coupon is not None
            and coupon.status == CouponStatus.REDEEMABLE
            and self._ledger.can_afford(coupon.need_credits)
        )

    # ── Internals ─────────────────────────────────────────────

    def _reject(self, command: CouponCommand, reason: RejectionReason) -> CommandOutcome:
        logger.info(
            f"Command {command.command_type} for coupon {command.coupon_id} "
            f"REJECTED: {reason.code} ({reason.policy_name})"
        )
        return CommandOutcome.rejected(command.command_id, command.issued_at, reason)

    def _execute_command(
        self, command: CouponCommand, coupon: Coupon, facts: Dict[str, Any]
    ) -> Dict[str, Any]:
        event_type = COMMAND_TO_EVENT_TYPE[command.command_type]
        payload = PAYLOAD_BUILDERS[event_type](command, coupon, facts)
        self._projection.apply(event_type, payload)
        self._publish(event_type, payload)
        return payload

    def _publish(self, event_type: str, payload: Dict[str, Any]) -> None:
        if self._event_sink is None:
            return
        try:
            self._event_sink({"event_type": event_type, "payload": dict(payload)})
        except Exception as exc:
            # Sink failure must not undo an applied state change.
            logger.error(
                f"Event sink failed for {event_type} "
                f"(coupon {payload.get('coupon_id')}): {type(exc).__name__}: {exc}"
            )
