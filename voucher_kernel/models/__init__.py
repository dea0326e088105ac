"""ORM models for the voucher kernel."""

from voucher_kernel.models.settings import LOCKED_UNTIL_DATE_KEY, SystemSetting
from voucher_kernel.models.voucher import VoucherLineRecord, VoucherRecord

__all__ = [
    "LOCKED_UNTIL_DATE_KEY",
    "SystemSetting",
    "VoucherLineRecord",
    "VoucherRecord",
]
