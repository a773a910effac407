"""
Identity tokens for tensors and recorded operations.

Tapes key everything by identifier, never by object reference. Identifiers
are random 128-bit integers drawn from `uuid.uuid4()`, so no shared counter
exists and identifiers from concurrent sessions can never collide in
practice. They are only compared for equality; their numeric value carries
no ordering.
"""

import uuid


def new_tensor_id() -> int:
    """Return a fresh tensor identity token."""
    return uuid.uuid4().int


def new_op_id() -> int:
    """Return a fresh operation id for a tape entry."""
    return uuid.uuid4().int


def short_id(token: int | None) -> str:
    """Render an identity token compactly for log records."""
    if token is None:
        return "-"
    return format(token & 0xFFFFFF, "06x")
