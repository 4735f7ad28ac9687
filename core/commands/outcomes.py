"""
Redemption Command Layer — Command Outcome Contract
=====================================================
Every ledger or coupon operation produces exactly one Outcome.

ACCEPTED → the operation was applied; payload describes the effect.
REJECTED → nothing was applied; reason is mandatory.

Rules:
- Exactly one outcome per operation
- Outcome is immutable (frozen dataclass)
- REJECTED must contain reason (RejectionReason)
- ACCEPTED must NOT contain reason
- occurred_at is mandatory
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from core.commands.rejection import RejectionReason


# ══════════════════════════════════════════════════════════════
# COMMAND STATUS
# ══════════════════════════════════════════════════════════════

class CommandStatus(Enum):
    """Binary command decision. No middle ground."""
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


# ══════════════════════════════════════════════════════════════
# COMMAND OUTCOME
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class CommandOutcome:
    """
    Result of a ledger or coupon operation.

    Fields:
        command_id:  The command this outcome belongs to.
        status:      ACCEPTED or REJECTED.
        reason:      RejectionReason (mandatory if REJECTED, None if ACCEPTED).
        occurred_at: When the decision was made.
        payload:     Effect description for ACCEPTED outcomes.

    Invariants:
        - REJECTED + reason is None → ValueError
        - ACCEPTED + reason is not None → ValueError
    """

    command_id: uuid.UUID
    status: CommandStatus
    reason: Optional[RejectionReason]
    occurred_at: datetime
    payload: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.command_id, uuid.UUID):
            raise ValueError("command_id must be UUID.")

        if not isinstance(self.status, CommandStatus):
            raise ValueError(
                f"status must be CommandStatus, got {type(self.status).__name__}."
            )

        if self.status == CommandStatus.REJECTED and self.reason is None:
            raise ValueError(
                "REJECTED outcome must include a RejectionReason. "
                "No silent rejections allowed."
            )

        if self.status == CommandStatus.ACCEPTED and self.reason is not None:
            raise ValueError(
                "ACCEPTED outcome must NOT include a RejectionReason."
            )

        if not isinstance(self.occurred_at, datetime):
            raise ValueError("occurred_at must be a datetime.")

    @classmethod
    def accepted(
        cls,
        command_id: uuid.UUID,
        occurred_at: datetime,
        payload: Optional[Dict[str, Any]] = None,
    ) -> CommandOutcome:
        return cls(
            command_id=command_id,
            status=CommandStatus.ACCEPTED,
            reason=None,
            occurred_at=occurred_at,
            payload=dict(payload or {}),
        )

    @classmethod
    def rejected(
        cls,
        command_id: uuid.UUID,
        occurred_at: datetime,
        reason: RejectionReason,
    ) -> CommandOutcome:
        return cls(
            command_id=command_id,
            status=CommandStatus.REJECTED,
            reason=reason,
            occurred_at=occurred_at,
        )

    @property
    def is_accepted(self) -> bool:
        return self.status == CommandStatus.ACCEPTED

    @property
    def is_rejected(self) -> bool:
        return self.status == CommandStatus.REJECTED

    @property
    def reason_code(self) -> Optional[str]:
        return self.reason.code if self.reason else None

    def to_dict(self) -> dict:
        return {
            "command_id": str(self.command_id),
            "status": self.status.value,
            "reason": self.reason.to_dict() if self.reason else None,
            "occurred_at": self.occurred_at.isoformat(),
            "payload": dict(self.payload),
        }
