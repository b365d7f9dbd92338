# utils/helpers.py
from contextlib import contextmanager
from datetime import datetime, timezone
import decimal
from decimal import Decimal
import logging
import uuid
from typing import Callable, Iterable, Iterator, Union

NumberLike = Union[Decimal, float, int, str]

_log = logging.getLogger(__name__)


@contextmanager
def exact_arithmetic():
    """
    Decimal context for money sums and products that never rounds.

    The default context keeps 28 significant digits; inside this block
    precision and exponent range are at their maximum and Inexact traps, so
    a result that cannot be represented raises instead of rounding.
    """
    with decimal.localcontext() as ctx:
        ctx.prec = decimal.MAX_PREC
        ctx.Emax = decimal.MAX_EMAX
        ctx.Emin = decimal.MIN_EMIN
        ctx.traps[decimal.Inexact] = True
        yield ctx


def exact_sum(values: Iterable[Decimal]) -> Decimal:
    with exact_arithmetic():
        return sum(values, Decimal(0))


def new_id() -> str:
    """Fresh opaque identifier (32 hex chars)."""
    return uuid.uuid4().hex


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(ts: datetime) -> str:
    """ISO-8601 text for persistence; naive timestamps are taken as UTC."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.isoformat()


def from_iso(text: str) -> datetime:
    """Inverse of to_iso(). Accepts a trailing 'Z' as written by browsers."""
    raw = text.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    ts = datetime.fromisoformat(raw)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def fmt_money(v: NumberLike, places: int = 2) -> str:
    """
    Format a number as money with thousands separators and a fixed number of decimals.

    Stored amounts are exact; this is the only place they get rounded.
    Values that do not parse as a finite number are returned as str(v).
    """
    try:
        x = v if isinstance(v, Decimal) else Decimal(str(v))
        if not x.is_finite():
            raise ValueError("not finite")
    except (ArithmeticError, ValueError) as e:
        _log.debug("fmt_money: failed to parse %r as a number: %s", v, e)
        return str(v)
    return f"{x:,.{places}f}"


class QueryView:
    """
    Lazy, restartable filtered view.

    `source` is called at the start of every iteration, so each pass sees the
    collection as it is at that moment; nothing is evaluated until iterated.
    """

    def __init__(self, source: Callable[[], Iterable], predicate: Callable[[object], bool]):
        self._source = source
        self._predicate = predicate

    def __iter__(self) -> Iterator:
        return (x for x in self._source() if self._predicate(x))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self)!r})"
