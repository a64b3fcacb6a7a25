from __future__ import annotations

DEFAULT_PREFIX = "INV"


def next_invoice_number(current_count: int, prefix: str = DEFAULT_PREFIX) -> str:
    """Format ``current_count + 1`` as a display sequence such as ``INV-0004``.

    Nothing is reserved: computing from a stale count reissues a number.
    """

    return f"{prefix}-{current_count + 1:04d}"
