"""
Pure domain layer.

Voucher shapes and the rules applied to them, with NO dependencies on:
- ORM (SQLAlchemy)
- Database
- Configuration files

Every function here is synchronous, stateless and safe to call from any
number of threads at once.
"""

from voucher_kernel.domain.accounts import (
    OffBalancePredicate,
    is_off_balance_account,
    is_valid_account_code,
    off_balance_predicate,
)
from voucher_kernel.domain.balance import BALANCE_TOLERANCE, BalanceResult, check_balance
from voucher_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from voucher_kernel.domain.duplication import clone_voucher, prepare_voucher_for_duplicate
from voucher_kernel.domain.messages import EN, VI, MessageCatalog, get_catalog
from voucher_kernel.domain.numbering import (
    VOUCHER_TYPE_NAMES,
    VOUCHER_TYPE_PREFIXES,
    doc_no_matches_type,
    generate_doc_no,
    get_voucher_type_name,
    get_voucher_type_prefix,
)
from voucher_kernel.domain.period_lock import is_date_locked
from voucher_kernel.domain.validation import validate_voucher
from voucher_kernel.domain.voucher import (
    STATUS_TRANSITIONS,
    Voucher,
    VoucherLine,
    VoucherStatus,
    VoucherType,
)

__all__ = [
    # Model
    "Voucher",
    "VoucherLine",
    "VoucherStatus",
    "VoucherType",
    "STATUS_TRANSITIONS",
    # Accounts
    "OffBalancePredicate",
    "is_off_balance_account",
    "is_valid_account_code",
    "off_balance_predicate",
    # Balance
    "BALANCE_TOLERANCE",
    "BalanceResult",
    "check_balance",
    # Period lock
    "is_date_locked",
    # Numbering
    "VOUCHER_TYPE_NAMES",
    "VOUCHER_TYPE_PREFIXES",
    "doc_no_matches_type",
    "generate_doc_no",
    "get_voucher_type_name",
    "get_voucher_type_prefix",
    # Validation
    "validate_voucher",
    "MessageCatalog",
    "VI",
    "EN",
    "get_catalog",
    # Duplication
    "clone_voucher",
    "prepare_voucher_for_duplicate",
    # Clock
    "Clock",
    "SystemClock",
    "DeterministicClock",
]
