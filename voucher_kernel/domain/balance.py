"""
Balance -- debit/credit totals for a set of voucher lines.

Responsibility:
    Computes on-balance debit and credit totals, their signed difference,
    the balance verdict, and the separately tracked off-balance sums.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - Double-entry balance: ``is_balanced`` iff
      ``abs(total_debit - total_credit) <= BALANCE_TOLERANCE``.
    - Off-balance amounts never enter ``total_debit`` / ``total_credit``.
    - Decimal-only arithmetic: no float drift at any magnitude.

Rules:
    A line whose debit OR credit account is off-balance is an off-balance
    line as a whole: its amount goes to ``off_balance_debit`` (if it has a
    debit account) and ``off_balance_credit`` (if it has a credit account).
    Every other line adds its amount to ``total_debit`` when a debit
    account is set and to ``total_credit`` when a credit account is set,
    so a line carrying both accounts is balanced on its own.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from voucher_kernel.domain.accounts import OffBalancePredicate, is_off_balance_account
from voucher_kernel.domain.voucher import VoucherLine, amount_or_none

# Fixed; not a per-call or per-deployment setting.
BALANCE_TOLERANCE = Decimal("0.01")

_ZERO = Decimal("0")


@dataclass(frozen=True, slots=True)
class BalanceResult:
    """Outcome of a balance check. All amounts are exact Decimals."""

    total_debit: Decimal
    total_credit: Decimal
    difference: Decimal
    is_balanced: bool
    off_balance_debit: Decimal
    off_balance_credit: Decimal

    @property
    def has_off_balance(self) -> bool:
        return bool(self.off_balance_debit or self.off_balance_credit)


def check_balance(
    lines: Iterable[VoucherLine],
    *,
    is_off_balance: OffBalancePredicate = is_off_balance_account,
) -> BalanceResult:
    """
    Compute debit/credit totals and the balance verdict for ``lines``.

    Preconditions:
        - Each element is a VoucherLine (amount may be None, treated as 0).

    Postconditions:
        - ``difference == total_debit - total_credit`` (signed).
        - Empty input yields all zeros and ``is_balanced=True``.

    Args:
        lines: Lines in voucher order.
        is_off_balance: Predicate classifying an account code as
            off-balance. Defaults to the class-0 rule.

    Returns:
        BalanceResult.
    """
    total_debit = _ZERO
    total_credit = _ZERO
    off_debit = _ZERO
    off_credit = _ZERO

    for line in lines:
        amount = amount_or_none(line.amount) or _ZERO
        if is_off_balance(line.debit_acc) or is_off_balance(line.credit_acc):
            if line.debit_acc:
                off_debit += amount
            if line.credit_acc:
                off_credit += amount
            continue
        if line.debit_acc:
            total_debit += amount
        if line.credit_acc:
            total_credit += amount

    difference = total_debit - total_credit
    return BalanceResult(
        total_debit=total_debit,
        total_credit=total_credit,
        difference=difference,
        is_balanced=abs(difference) <= BALANCE_TOLERANCE,
        off_balance_debit=off_debit,
        off_balance_credit=off_credit,
    )
