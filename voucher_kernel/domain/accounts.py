"""
Account code classification.

Off-balance-sheet accounts (custodial and contingent items, class 0 in
the Vietnamese chart of accounts: 001, 002, 007, 008 ...) are tracked
outside the double-entry equality. The rule is a plain predicate so
callers can swap it when the regulation changes without touching the
balance arithmetic.
"""

from __future__ import annotations

import re
from typing import Callable, Iterable

# Predicate type injected into check_balance / validate_voucher
OffBalancePredicate = Callable[[str | None], bool]

DEFAULT_OFF_BALANCE_PREFIXES: tuple[str, ...] = ("0",)

_ACCOUNT_CODE_RE = re.compile(r"^[0-9]{3,4}[A-Z0-9]?$")


def is_off_balance_account(code: str | None) -> bool:
    """True if the account code is in the reserved class-0 range.

    Empty or missing codes are on-balance.
    """
    if not code:
        return False
    return str(code).strip().startswith(DEFAULT_OFF_BALANCE_PREFIXES)


def off_balance_predicate(prefixes: Iterable[str]) -> OffBalancePredicate:
    """Build an off-balance predicate for a custom set of code prefixes."""
    frozen = tuple(p for p in prefixes if p)
    if not frozen:
        return lambda code: False

    def predicate(code: str | None) -> bool:
        if not code:
            return False
        return str(code).strip().startswith(frozen)

    return predicate


def is_valid_account_code(code: str | None) -> bool:
    """Chart-of-accounts shape check: 3-4 digits plus an optional suffix."""
    if not code or not isinstance(code, str):
        return False
    return bool(_ACCOUNT_CODE_RE.match(code))
