"""Imperative shell: services that persist vouchers and settings."""

from voucher_kernel.services.base import BaseService
from voucher_kernel.services.settings_service import SettingsService
from voucher_kernel.services.voucher_service import VoucherService

__all__ = ["BaseService", "SettingsService", "VoucherService"]
