"""
Validation -- collect-all voucher checks.

Responsibility:
    Runs every field, lock, line and balance check against a voucher and
    returns the full list of violation messages. An empty list means the
    voucher may be saved or posted.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O. Depends on
    balance.check_balance and period_lock.is_date_locked. The lock date is
    supplied by the caller (read from settings by the persistence layer).

Invariants enforced:
    - Double-entry balance (via check_balance and BALANCE_TOLERANCE).
    - Every line names an account and carries a positive amount.
    - No posting on or before the period lock date.

Failure modes:
    None. Violations are data: every check runs on every call, in a fixed
    order, so one call surfaces every problem at once. Nothing is raised
    for an invalid voucher.

Check order:
    1. doc_no, doc_date, description present (one message each)
    2. post_date not locked
    3. at least one line
    4. per line (1-based): account present, amount > 0
    5. on-balance debits == credits
"""

from __future__ import annotations

from decimal import Decimal

from voucher_kernel.domain.accounts import OffBalancePredicate, is_off_balance_account
from voucher_kernel.domain.balance import check_balance
from voucher_kernel.domain.messages import DEFAULT_CATALOG, MessageCatalog, format_amount
from voucher_kernel.domain.period_lock import is_date_locked
from voucher_kernel.domain.voucher import Voucher, amount_or_none
from voucher_kernel.logging_config import get_logger

logger = get_logger("domain.validation")

_ZERO = Decimal("0")


def _blank(value: object) -> bool:
    return value is None or not str(value).strip()


def validate_voucher(
    voucher: Voucher,
    locked_until: str | None = None,
    *,
    messages: MessageCatalog | None = None,
    is_off_balance: OffBalancePredicate = is_off_balance_account,
) -> list[str]:
    """
    Validate ``voucher`` and return every violation message.

    Args:
        voucher: Voucher to check. Not modified.
        locked_until: Active period lock date (ISO), or None for no lock.
        messages: Message catalog; defaults to Vietnamese.
        is_off_balance: Off-balance account predicate for the balance check.

    Returns:
        Messages in check order; empty when the voucher is valid.
    """
    msg = messages or DEFAULT_CATALOG
    errors: list[str] = []

    if _blank(voucher.doc_no):
        errors.append(msg.missing_doc_no)
    if _blank(voucher.doc_date):
        errors.append(msg.missing_doc_date)
    if _blank(voucher.description):
        errors.append(msg.missing_description)

    if locked_until and voucher.post_date and is_date_locked(voucher.post_date, locked_until):
        errors.append(msg.post_date_locked.format(lock_date=msg.format_date(str(locked_until))))

    lines = list(voucher.lines or [])
    if not lines:
        errors.append(msg.no_lines)

    for index, line in enumerate(lines, start=1):
        if not (line.debit_acc or line.credit_acc):
            errors.append(msg.line_missing_account.format(index=index))
        amount = amount_or_none(line.amount)
        if amount is None or amount <= _ZERO:
            errors.append(msg.line_invalid_amount.format(index=index))

    balance = check_balance(lines, is_off_balance=is_off_balance)
    if not balance.is_balanced:
        errors.append(msg.unbalanced.format(difference=format_amount(balance.difference)))

    if errors:
        logger.debug(
            "voucher_validation_failed",
            extra={"doc_no": voucher.doc_no, "error_count": len(errors)},
        )
    return errors
