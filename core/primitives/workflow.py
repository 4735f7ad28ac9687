"""
Redemption Workflow Primitive — Generic State Machine
=======================================================
Deterministic lifecycle definitions used by engines that track state.

Used by:
    Coupon Engine — REDEEMABLE → USABLE → USED

RULES (NON-NEGOTIABLE):
- State transitions are deterministic (same input → same output)
- Invalid transitions REJECTED — no silent state skips
- Terminal states admit no further transitions
- Every transition is recorded with a timestamp
- State machine definition is immutable (frozen)

This file contains NO persistence logic.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, FrozenSet


# ══════════════════════════════════════════════════════════════
# TRANSITION RECORD
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class StateTransition:
    """An immutable record of a single state transition."""
    transition_id: uuid.UUID
    from_state: str
    to_state: str
    transitioned_at: datetime
    reason: str = ""

    def __post_init__(self):
        if not isinstance(self.transition_id, uuid.UUID):
            raise ValueError("transition_id must be UUID.")
        if not self.from_state or not isinstance(self.from_state, str):
            raise ValueError("from_state must be non-empty string.")
        if not self.to_state or not isinstance(self.to_state, str):
            raise ValueError("to_state must be non-empty string.")
        if not isinstance(self.transitioned_at, datetime):
            raise ValueError("transitioned_at must be a datetime.")

    def to_dict(self) -> dict:
        return {
            "transition_id": str(self.transition_id),
            "from_state": self.from_state,
            "to_state": self.to_state,
            "transitioned_at": self.transitioned_at.isoformat(),
            "reason": self.reason,
        }


# ══════════════════════════════════════════════════════════════
# WORKFLOW DEFINITION (state machine schema)
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class WorkflowDefinition:
    """
    Defines the valid states and transitions for a workflow type.

    Fields:
        name:            Identifier for this workflow type (e.g. "Coupon")
        initial_state:   Starting state for all new instances
        terminal_states: States from which no further transitions are allowed
        transitions:     Dict of {from_state → frozenset(allowed_to_states)}
    """
    name: str
    initial_state: str
    terminal_states: FrozenSet[str]
    transitions: Dict[str, FrozenSet[str]]

    def __post_init__(self):
        if not self.name:
            raise ValueError("Workflow name must be non-empty.")
        if not self.initial_state:
            raise ValueError("initial_state must be non-empty.")
        if self.initial_state not in self.transitions:
            raise ValueError(
                f"initial_state '{self.initial_state}' not in transitions."
            )
        for state in self.terminal_states:
            if self.transitions.get(state):
                raise ValueError(
                    f"terminal state '{state}' must not have outgoing transitions."
                )

    def is_valid_transition(self, from_state: str, to_state: str) -> bool:
        allowed = self.transitions.get(from_state, frozenset())
        return to_state in allowed

    def is_terminal(self, state: str) -> bool:
        return state in self.terminal_states

    def allowed_next_states(self, from_state: str) -> FrozenSet[str]:
        return self.transitions.get(from_state, frozenset())

    def transition(
        self,
        from_state: str,
        to_state: str,
        at: datetime,
        reason: str = "",
    ) -> StateTransition:
        """
        Build the record for from_state → to_state.
        Raises ValueError for invalid transitions.
        """
        if self.is_terminal(from_state):
            raise ValueError(
                f"Cannot transition from terminal state '{from_state}'."
            )
        if not self.is_valid_transition(from_state, to_state):
            allowed = sorted(self.allowed_next_states(from_state))
            raise ValueError(
                f"Invalid {self.name} transition: {from_state} → {to_state}. "
                f"Allowed: {allowed}."
            )
        return StateTransition(
            transition_id=uuid.uuid4(),
            from_state=from_state,
            to_state=to_state,
            transitioned_at=at,
            reason=reason,
        )


# ══════════════════════════════════════════════════════════════
# CANONICAL WORKFLOW DEFINITIONS
# ══════════════════════════════════════════════════════════════

COUPON_WORKFLOW = WorkflowDefinition(
    name="Coupon",
    initial_state="redeemable",
    terminal_states=frozenset({"used"}),
    transitions={
        "redeemable": frozenset({"usable"}),
        "usable": frozenset({"used"}),
        "used": frozenset(),
    },
)
