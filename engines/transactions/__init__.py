"""
Redemption Transaction History — Public API
=============================================
Append-only record of redeem and use events.
"""

from engines.transactions.models import TransactionKind, TransactionRecord
from engines.transactions.store import TransactionRecorder

__all__ = [
    "TransactionKind",
    "TransactionRecord",
    "TransactionRecorder",
]
