"""
Tests for core.commands — outcomes and rejection reasons.
"""

import uuid
from datetime import datetime, timezone

import pytest

from core.commands import CommandOutcome, CommandStatus, ReasonCode, RejectionReason

NOW = datetime(2026, 2, 25, 9, 0, 0, tzinfo=timezone.utc)


def _reason(code=ReasonCode.INVALID_STATE):
    return RejectionReason(
        code=code,
        message="Coupon 'x' is used, must be usable.",
        policy_name="coupon_must_be_usable_policy",
    )


class TestRejectionReason:
    def test_valid_reason(self):
        reason = _reason()
        assert reason.code == "INVALID_STATE"
        assert reason.to_dict()["policy_name"] == "coupon_must_be_usable_policy"

    @pytest.mark.parametrize("field", ["code", "message", "policy_name"])
    def test_empty_fields_rejected(self, field):
        kwargs = dict(code="X", message="m", policy_name="p")
        kwargs[field] = ""
        with pytest.raises(ValueError, match=field):
            RejectionReason(**kwargs)

    def test_frozen(self):
        reason = _reason()
        with pytest.raises(AttributeError):
            reason.code = "OTHER"


class TestCommandOutcome:
    def test_accepted(self):
        outcome = CommandOutcome.accepted(uuid.uuid4(), NOW, {"balance_after": "12.2"})
        assert outcome.is_accepted
        assert not outcome.is_rejected
        assert outcome.status == CommandStatus.ACCEPTED
        assert outcome.reason is None
        assert outcome.reason_code is None
        assert outcome.payload == {"balance_after": "12.2"}

    def test_rejected(self):
        outcome = CommandOutcome.rejected(uuid.uuid4(), NOW, _reason())
        assert outcome.is_rejected
        assert outcome.reason_code == ReasonCode.INVALID_STATE
        assert outcome.payload == {}

    def test_rejected_without_reason_raises(self):
        with pytest.raises(ValueError, match="No silent rejections"):
            CommandOutcome(
                command_id=uuid.uuid4(),
                status=CommandStatus.REJECTED,
                reason=None,
                occurred_at=NOW,
            )

    def test_accepted_with_reason_raises(self):
        with pytest.raises(ValueError, match="must NOT include"):
            CommandOutcome(
                command_id=uuid.uuid4(),
                status=CommandStatus.ACCEPTED,
                reason=_reason(),
                occurred_at=NOW,
            )

    def test_command_id_must_be_uuid(self):
        with pytest.raises(ValueError, match="UUID"):
            CommandOutcome.accepted("not-a-uuid", NOW)

    def test_accepted_payload_is_copied(self):
        payload = {"code": "DC-ABC123"}
        outcome = CommandOutcome.accepted(uuid.uuid4(), NOW, payload)
        payload["code"] = "changed"
        assert outcome.payload["code"] == "DC-ABC123"

    def test_to_dict(self):
        command_id = uuid.uuid4()
        data = CommandOutcome.rejected(command_id, NOW, _reason()).to_dict()
        assert data["command_id"] == str(command_id)
        assert data["status"] == "REJECTED"
        assert data["reason"]["code"] == "INVALID_STATE"
        assert data["occurred_at"] == NOW.isoformat()
