"""
Message catalogs for voucher validation.

Validation reports violations as plain, human-readable strings that the
presentation layer shows verbatim. Each catalog is an immutable set of
templates; ``VI`` (Vietnamese) is the default.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True, slots=True)
class MessageCatalog:
    """Templates for every validation message.

    ``{index}`` is the 1-based line number, ``{lock_date}`` the rendered
    lock date, ``{difference}`` the signed debit-minus-credit amount.
    """

    locale: str
    missing_doc_no: str
    missing_doc_date: str
    missing_description: str
    post_date_locked: str
    no_lines: str
    line_missing_account: str
    line_invalid_amount: str
    unbalanced: str
    void_reason_too_short: str
    doc_no_prefix_mismatch: str
    void_description_prefix: str
    dmy_dates: bool = False

    def format_date(self, iso_date: str) -> str:
        """Render an ISO date for this locale (dd/mm/yyyy when ``dmy_dates``)."""
        if self.dmy_dates and len(iso_date) == 10 and iso_date[4] == "-" and iso_date[7] == "-":
            return f"{iso_date[8:10]}/{iso_date[5:7]}/{iso_date[0:4]}"
        return iso_date


def format_amount(value: Decimal) -> str:
    """Plain decimal rendering: no exponent, no grouping, no trailing zeros."""
    if value == 0:
        return "0"
    return format(value.normalize(), "f")


VI = MessageCatalog(
    locale="vi",
    missing_doc_no="Số chứng từ không được để trống",
    missing_doc_date="Ngày chứng từ không được để trống",
    missing_description="Diễn giải không được để trống",
    post_date_locked="Ngày hạch toán phải sau ngày khóa kỳ: {lock_date}",
    no_lines="Cần ít nhất một dòng chi tiết",
    line_missing_account="Dòng {index}: Chưa chọn tài khoản Nợ hoặc Có",
    line_invalid_amount="Dòng {index}: Số tiền phải lớn hơn 0",
    unbalanced="Chênh lệch Nợ/Có: {difference} đ",
    void_reason_too_short="Lý do hủy phải có ít nhất {min_length} ký tự",
    doc_no_prefix_mismatch="Số chứng từ phải bắt đầu bằng {prefix}-",
    void_description_prefix="[HỦY: {reason}]",
    dmy_dates=True,
)

EN = MessageCatalog(
    locale="en",
    missing_doc_no="Document number is required",
    missing_doc_date="Document date is required",
    missing_description="Description is required",
    post_date_locked="Posting date must be after the period lock date: {lock_date}",
    no_lines="At least one line is required",
    line_missing_account="Line {index}: a debit or credit account is required",
    line_invalid_amount="Line {index}: amount must be greater than 0",
    unbalanced="Debit/credit difference: {difference}",
    void_reason_too_short="Void reason must be at least {min_length} characters",
    doc_no_prefix_mismatch="Document number must start with {prefix}-",
    void_description_prefix="[VOID: {reason}]",
)

CATALOGS: Mapping[str, MessageCatalog] = MappingProxyType({"vi": VI, "en": EN})

DEFAULT_CATALOG = VI


def get_catalog(locale: str | None) -> MessageCatalog:
    """Catalog for ``locale``.

    Raises:
        KeyError: If no catalog exists for the locale.
    """
    if not locale:
        return DEFAULT_CATALOG
    return CATALOGS[locale.lower()]
