"""
Kernel Invariants Contract.

These invariants are structural law. No configuration value may switch
them off; configuration can only change *how* a rule is parameterised
(for example which code prefixes are off-balance), never *whether* it
applies.

This module exists solely to declare them. Enforcement is spread across
the domain layer (balance, period_lock, validation) and
VoucherService plus the database constraints for the persistence half.
"""

from enum import Enum, unique


@unique
class KernelInvariant(str, Enum):
    """Non-configurable invariants enforced by the kernel."""

    DOUBLE_ENTRY_BALANCE = "double_entry_balance"
    """On-balance debits equal on-balance credits within BALANCE_TOLERANCE.
    Off-balance amounts never enter the comparison. Enforced by
    validate_voucher and re-checked by VoucherService.post."""

    LINE_HAS_ACCOUNT = "line_has_account"
    """Every line names a debit account, a credit account, or both."""

    PERIOD_LOCK = "period_lock"
    """No save or post with a post_date on or before the lock date.
    Enforced by validate_voucher using the lock read from SystemSetting."""

    DOC_NO_UNIQUENESS = "doc_no_uniqueness"
    """doc_no is unique. Enforced by the uq_voucher_doc_no constraint;
    generate_doc_no only proposes candidates."""

    STATUS_MONOTONICITY = "status_monotonicity"
    """Status only moves forward: draft -> posted -> voided. Enforced by
    VoucherService with a conditional UPDATE (check-and-set)."""

    POSTED_IMMUTABILITY = "posted_immutability"
    """Posted and voided vouchers are not content-edited."""


ALL_KERNEL_INVARIANTS: frozenset[KernelInvariant] = frozenset(KernelInvariant)

# The pure domain package may not import from these modules.
FORBIDDEN_DOMAIN_IMPORTS: tuple[str, ...] = (
    "sqlalchemy",
    "voucher_kernel.db",
    "voucher_kernel.models",
    "voucher_kernel.services",
    "voucher_config",
)
