# utils/validators.py
from __future__ import annotations

from decimal import Decimal, InvalidOperation


def non_empty(text) -> bool:
    """
    True if `text` is not None/empty after stripping whitespace.
    """
    return bool(text and str(text).strip())


# ---- Numeric parsing & validators ----

def try_parse_decimal(x):
    """
    Best-effort parse to Decimal.

    Returns:
        (ok: bool, value: Decimal|None)

    Floats go through str() so 0.1 becomes Decimal("0.1"), not its binary
    expansion. Booleans, NaN and infinities are rejected.
    """
    if x is None or isinstance(x, bool):
        return False, None
    if isinstance(x, Decimal):
        val = x
    elif isinstance(x, int):
        val = Decimal(x)
    else:
        text = str(x).strip()
        if not text:
            return False, None
        try:
            val = Decimal(text)
        except InvalidOperation:
            return False, None
    if not val.is_finite():
        return False, None
    return True, val

