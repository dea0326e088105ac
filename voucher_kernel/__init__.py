"""
Voucher Kernel

Validation-and-posting engine for double-entry accounting vouchers:
- Debit/credit balance with off-balance-sheet (TK 0xx) separation
- Fiscal period locking
- Advisory document numbering
- Collect-all voucher validation
- Safe duplication of existing vouchers
"""

__version__ = "0.1.0"
