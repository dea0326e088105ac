"""
Duplication -- independent draft copies of existing vouchers.

Responsibility:
    Turns any voucher (draft, posted or voided) into a brand-new draft
    with the same financial content: identifiers cleared, dates reset to
    today, a freshly proposed doc_no, status DRAFT.

Architecture position:
    Kernel > Domain -- pure functional core. Depends on numbering for the
    doc_no and on an injected Clock for "today".

Guarantees:
    - The result shares no mutable state with the input (deep copy).
    - Amounts, account codes and dimensions are equal by value.
    - The result's doc_no differs from the source doc_no.

Non-goals:
    - Does NOT persist anything or check doc_no uniqueness against
      storage; VoucherService.duplicate does that.
"""

from __future__ import annotations

import copy
import random

from voucher_kernel.domain.clock import Clock, default_clock
from voucher_kernel.domain.numbering import generate_doc_no
from voucher_kernel.domain.voucher import Voucher, VoucherStatus

# Bound on redraws when a candidate equals the source doc_no
_MAX_REDRAWS = 16


def clone_voucher(voucher: Voucher) -> Voucher:
    """Deep copy, identifiers and status included."""
    return copy.deepcopy(voucher)


def prepare_voucher_for_duplicate(
    voucher: Voucher,
    *,
    clock: Clock | None = None,
    rng: random.Random | None = None,
) -> Voucher:
    """
    Build a new draft from ``voucher``.

    Args:
        voucher: Source voucher, any status. Not modified.
        clock: Source of today's date.
        rng: Random source for the doc_no suffix.

    Returns:
        A new, unsaved draft voucher.
    """
    today = (clock or default_clock()).today()
    duplicate = clone_voucher(voucher)

    duplicate.id = None
    for line in duplicate.lines:
        line.id = None

    iso_today = today.isoformat()
    duplicate.doc_date = iso_today
    duplicate.post_date = iso_today

    doc_no = generate_doc_no(voucher.type, today, rng=rng)
    for _ in range(_MAX_REDRAWS):
        if doc_no != voucher.doc_no:
            break
        doc_no = generate_doc_no(voucher.type, today, rng=rng)
    duplicate.doc_no = doc_no

    duplicate.status = VoucherStatus.DRAFT
    return duplicate
