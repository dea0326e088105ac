"""
Tests for the collect-all validation pipeline.

Every check runs on every call; tests assert that simultaneous violations
all appear in one result, in check order.
"""

from decimal import Decimal

import pytest

from tests.voucher_builders import make_line, make_voucher
from voucher_kernel.domain.accounts import off_balance_predicate
from voucher_kernel.domain.messages import EN, VI, format_amount, get_catalog
from voucher_kernel.domain.validation import validate_voucher


class TestValidVoucher:
    def test_valid_voucher_has_no_messages(self):
        assert validate_voucher(make_voucher()) == []

    def test_valid_voucher_after_open_lock(self):
        assert validate_voucher(make_voucher(post_date="2024-03-10"), "2024-02-29") == []

    def test_off_balance_line_does_not_unbalance(self):
        voucher = make_voucher(lines=[
            make_line("1111", None, 100),
            make_line(None, "131", 100),
            make_line("002", None, 999),
        ])

        assert validate_voucher(voucher) == []

    def test_input_not_modified(self):
        voucher = make_voucher(doc_no="")
        before = voucher.to_dict()

        validate_voucher(voucher, "2099-01-01")

        assert voucher.to_dict() == before


class TestCollectAll:
    def test_missing_doc_no_and_unbalanced_by_500(self):
        voucher = make_voucher(
            doc_no="",
            lines=[make_line("1111", None, 1500), make_line(None, "131", 1000)],
        )

        errors = validate_voucher(voucher)

        assert len(errors) >= 2
        assert errors[0] == VI.missing_doc_no
        assert "500" in errors[-1]
        assert errors.index(VI.missing_doc_no) < len(errors) - 1

    def test_every_field_reported(self):
        voucher = make_voucher(doc_no=" ", doc_date="", description="")

        assert validate_voucher(voucher) == [
            VI.missing_doc_no,
            VI.missing_doc_date,
            VI.missing_description,
        ]

    def test_all_checks_in_order(self):
        voucher = make_voucher(
            doc_no="",
            description="",
            post_date="2024-01-10",
            lines=[make_line(None, None, 100), make_line("1111", None, 0)],
        )

        errors = validate_voucher(voucher, "2024-01-31")

        assert errors == [
            VI.missing_doc_no,
            VI.missing_description,
            VI.post_date_locked.format(lock_date="31/01/2024"),
            VI.line_missing_account.format(index=1),
            VI.line_invalid_amount.format(index=2),
        ]

    def test_no_lines_single_message(self):
        errors = validate_voucher(make_voucher(lines=[]))

        assert errors == [VI.no_lines]

    def test_line_with_both_problems_reports_both(self):
        errors = validate_voucher(make_voucher(lines=[make_line(None, None, -5)]))

        assert VI.line_missing_account.format(index=1) in errors
        assert VI.line_invalid_amount.format(index=1) in errors

    def test_missing_amount_is_invalid(self):
        voucher = make_voucher(lines=[make_line("1111", "131", 0)])
        voucher.lines[0].amount = None

        assert validate_voucher(voucher) == [VI.line_invalid_amount.format(index=1)]

    def test_unparseable_amount_is_invalid(self):
        voucher = make_voucher(lines=[make_line("1111", "131", 1)])
        voucher.lines[0].amount = "abc"

        assert VI.line_invalid_amount.format(index=1) in validate_voucher(voucher)


class TestPeriodLock:
    def test_locked_post_date_names_lock_date(self):
        errors = validate_voucher(make_voucher(post_date="2024-01-15"), "2024-01-31")

        assert errors == ["Ngày hạch toán phải sau ngày khóa kỳ: 31/01/2024"]

    def test_missing_post_date_skips_lock_check(self):
        assert validate_voucher(make_voucher(post_date=""), "2024-01-31") == []

    def test_malformed_lock_does_not_block(self):
        assert validate_voucher(make_voucher(post_date="2024-01-15"), "bad") == []


class TestBalanceMessage:
    def test_negative_difference_keeps_sign(self):
        voucher = make_voucher(lines=[make_line("1111", None, 100), make_line(None, "131", 600)])

        assert validate_voucher(voucher)[-1] == VI.unbalanced.format(difference="-500")

    def test_fractional_difference_exact(self):
        voucher = make_voucher(lines=[make_line("1111", None, "100.25"), make_line(None, "131", "100")])

        assert "0.25" in validate_voucher(voucher)[-1]

    def test_injected_predicate(self):
        voucher = make_voucher(lines=[
            make_line("1111", None, 100),
            make_line(None, "131", 100),
            make_line("002", None, 50),
        ])

        errors = validate_voucher(voucher, is_off_balance=off_balance_predicate([]))

        assert errors == [VI.unbalanced.format(difference="50")]


class TestCatalogs:
    def test_english_catalog(self):
        voucher = make_voucher(doc_no="", post_date="2024-01-15")

        errors = validate_voucher(voucher, "2024-01-31", messages=EN)

        assert errors == [
            "Document number is required",
            "Posting date must be after the period lock date: 2024-01-31",
        ]

    def test_get_catalog(self):
        assert get_catalog("EN") is EN
        assert get_catalog(None) is VI
        with pytest.raises(KeyError):
            get_catalog("fr")

    def test_format_amount(self):
        assert format_amount(Decimal("500.00")) == "500"
        assert format_amount(Decimal("1E+3")) == "1000"
        assert format_amount(Decimal("0.000")) == "0"
        assert format_amount(Decimal("-0.50")) == "-0.5"
