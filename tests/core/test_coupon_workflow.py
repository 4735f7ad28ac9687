"""
Tests for core.primitives.workflow — coupon lifecycle state machine.
"""

import uuid
from datetime import datetime, timezone

import pytest

from core.primitives.workflow import COUPON_WORKFLOW, StateTransition, WorkflowDefinition

NOW = datetime(2026, 2, 25, 9, 0, 0, tzinfo=timezone.utc)


class TestCouponWorkflow:
    def test_initial_and_terminal(self):
        assert COUPON_WORKFLOW.initial_state == "redeemable"
        assert COUPON_WORKFLOW.is_terminal("used")
        assert not COUPON_WORKFLOW.is_terminal("usable")

    def test_forward_transitions(self):
        first = COUPON_WORKFLOW.transition("redeemable", "usable", NOW, reason="redeem")
        second = COUPON_WORKFLOW.transition("usable", "used", NOW)
        assert (first.from_state, first.to_state) == ("redeemable", "usable")
        assert first.reason == "redeem"
        assert (second.from_state, second.to_state) == ("usable", "used")

    @pytest.mark.parametrize("from_state,to_state", [
        ("redeemable", "used"),
        ("usable", "redeemable"),
        ("redeemable", "redeemable"),
    ])
    def test_invalid_transitions(self, from_state, to_state):
        with pytest.raises(ValueError, match="Invalid Coupon transition"):
            COUPON_WORKFLOW.transition(from_state, to_state, NOW)

    def test_terminal_state_admits_nothing(self):
        with pytest.raises(ValueError, match="terminal"):
            COUPON_WORKFLOW.transition("used", "usable", NOW)
        assert COUPON_WORKFLOW.allowed_next_states("used") == frozenset()


class TestWorkflowDefinition:
    def test_initial_state_must_be_known(self):
        with pytest.raises(ValueError):
            WorkflowDefinition(
                name="X",
                initial_state="start",
                terminal_states=frozenset(),
                transitions={"other": frozenset()},
            )

    def test_terminal_state_without_exits(self):
        with pytest.raises(ValueError, match="terminal"):
            WorkflowDefinition(
                name="X",
                initial_state="a",
                terminal_states=frozenset({"b"}),
                transitions={"a": frozenset({"b"}), "b": frozenset({"a"})},
            )


class TestStateTransition:
    def test_to_dict(self):
        record = StateTransition(
            transition_id=uuid.uuid4(),
            from_state="usable",
            to_state="used",
            transitioned_at=NOW,
        )
        data = record.to_dict()
        assert data["from_state"] == "usable"
        assert data["transitioned_at"] == NOW.isoformat()

    def test_requires_uuid(self):
        with pytest.raises(ValueError):
            StateTransition("x", "a", "b", NOW)
