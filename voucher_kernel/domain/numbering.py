"""
Numbering -- advisory document numbers.

Responsibility:
    Proposes a human-readable ``PREFIX-YYYYMM-RRRR`` code for a voucher
    type and date, and exposes the read-only type -> prefix and
    type -> display-name tables.

Architecture position:
    Kernel > Domain -- pure functional core. Time comes from an injected
    Clock; randomness from an injectable ``random.Random``.

Non-goals:
    - Does NOT guarantee uniqueness. The persistence layer owns that with
      a unique constraint plus retry-on-conflict (see VoucherService).
    - Does NOT keep counters or caches; every call is independent.
"""

from __future__ import annotations

import random
import re
from datetime import date
from types import MappingProxyType
from typing import Mapping

from voucher_kernel.domain.clock import Clock, default_clock
from voucher_kernel.domain.voucher import VoucherType

FALLBACK_PREFIX = "CT"
FALLBACK_TYPE_NAME = "Chứng từ"

VOUCHER_TYPE_PREFIXES: Mapping[str, str] = MappingProxyType({
    VoucherType.GENERAL.value: "PC",
    VoucherType.CASH_IN.value: "PT",
    VoucherType.CASH_OUT.value: "PC",
    VoucherType.BANK_IN.value: "BC",
    VoucherType.BANK_OUT.value: "BN",
    VoucherType.PURCHASE.value: "PN",
    VoucherType.SALE.value: "PX",
    VoucherType.CLOSING.value: "KC",
    VoucherType.ALLOCATION.value: "PB",
    VoucherType.DEPRECIATION.value: "KH",
    VoucherType.REVALUATION.value: "DG",
    VoucherType.ADJUSTMENT.value: "DC",
})

VOUCHER_TYPE_NAMES: Mapping[str, str] = MappingProxyType({
    VoucherType.GENERAL.value: "Phiếu kế toán chung",
    VoucherType.CASH_IN.value: "Phiếu thu tiền mặt",
    VoucherType.CASH_OUT.value: "Phiếu chi tiền mặt",
    VoucherType.BANK_IN.value: "Báo có ngân hàng",
    VoucherType.BANK_OUT.value: "Báo nợ ngân hàng",
    VoucherType.PURCHASE.value: "Phiếu nhập kho",
    VoucherType.SALE.value: "Phiếu xuất kho",
    VoucherType.CLOSING.value: "Bút toán kết chuyển",
    VoucherType.ALLOCATION.value: "Phân bổ chi phí",
    VoucherType.DEPRECIATION.value: "Trích khấu hao",
    VoucherType.REVALUATION.value: "Đánh giá lại tỷ giá",
    VoucherType.ADJUSTMENT.value: "Bút toán điều chỉnh",
})

DOC_NO_PATTERN = re.compile(r"^(?P<prefix>[A-Z]{2})-(?P<period>\d{6})-(?P<seq>\d{4})$")

_SUFFIX_SPACE = 10_000

_system_rng = random.SystemRandom()


def _type_key(voucher_type: VoucherType | str | None) -> str:
    if isinstance(voucher_type, VoucherType):
        return voucher_type.value
    return str(voucher_type or "")


def get_voucher_type_prefix(voucher_type: VoucherType | str | None) -> str:
    """Prefix for a voucher type; unknown types get ``CT``."""
    return VOUCHER_TYPE_PREFIXES.get(_type_key(voucher_type), FALLBACK_PREFIX)


def get_voucher_type_name(voucher_type: VoucherType | str | None) -> str:
    """Display name for a voucher type; unknown types get the generic name."""
    return VOUCHER_TYPE_NAMES.get(_type_key(voucher_type), FALLBACK_TYPE_NAME)


def generate_doc_no(
    voucher_type: VoucherType | str | None,
    target_date: date | None = None,
    *,
    clock: Clock | None = None,
    rng: random.Random | None = None,
) -> str:
    """
    Propose a document number ``PREFIX-YYYYMM-RRRR``.

    Args:
        voucher_type: Voucher type (enum or raw string).
        target_date: Date whose year/month goes in the code. Defaults to
            the clock's current date.
        clock: Time source used when ``target_date`` is omitted.
        rng: Random source for the 4-digit suffix.

    Returns:
        Candidate doc_no. Callers must still enforce uniqueness.
    """
    if target_date is None:
        target_date = (clock or default_clock()).today()
    suffix = (rng or _system_rng).randrange(_SUFFIX_SPACE)
    prefix = get_voucher_type_prefix(voucher_type)
    return f"{prefix}-{target_date.year:04d}{target_date.month:02d}-{suffix:04d}"


def doc_no_matches_type(doc_no: str | None, voucher_type: VoucherType | str | None) -> bool:
    """True if ``doc_no`` starts with the prefix of ``voucher_type``."""
    if not doc_no:
        return False
    return doc_no.strip().startswith(f"{get_voucher_type_prefix(voucher_type)}-")
