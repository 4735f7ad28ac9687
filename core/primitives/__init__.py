"""
Redemption Core Primitives — Reusable Building Blocks
=======================================================
Primitives are the engine-agnostic building blocks the coupon engine
and session consume. They are:

- Pure Python (no framework dependency)
- Deterministic (same input → same output)
- In-memory (no persistence logic)

Primitives:
    ledger    — Non-negative, decrease-only credit balance
    workflow  — Lifecycle state machine definitions
    gesture   — Swipe-to-confirm gate for irreversible actions
"""
