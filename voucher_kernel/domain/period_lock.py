"""
Period lock guard.

A lock date closes every fiscal day up to and including it. Dates are
fixed-width ``YYYY-MM-DD`` strings, so lexical order is calendar order.
The check is advisory: malformed input yields "not locked" instead of an
error, and the persistence layer re-checks at save time.
"""

from __future__ import annotations

import re
from datetime import date

_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _as_iso(value: str | date | None) -> str | None:
    if isinstance(value, date):
        return value.isoformat()[:10]
    if isinstance(value, str):
        value = value.strip()
        if _ISO_DATE_RE.match(value):
            return value
    return None


def is_date_locked(candidate: str | date | None, locked_until: str | date | None = None) -> bool:
    """
    True if ``candidate`` falls on or before ``locked_until``.

    No lock date, or a malformed candidate or lock date, means not locked.
    """
    if not locked_until:
        return False
    lock = _as_iso(locked_until)
    day = _as_iso(candidate)
    if lock is None or day is None:
        return False
    return day <= lock
