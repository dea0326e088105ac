"""Tests for advisory document numbering and the type tables."""

import random
import re
from datetime import date, datetime, timezone

import pytest

from voucher_kernel.domain.clock import DeterministicClock
from voucher_kernel.domain.numbering import (
    DOC_NO_PATTERN,
    FALLBACK_PREFIX,
    FALLBACK_TYPE_NAME,
    VOUCHER_TYPE_NAMES,
    VOUCHER_TYPE_PREFIXES,
    doc_no_matches_type,
    generate_doc_no,
    get_voucher_type_name,
    get_voucher_type_prefix,
)
from voucher_kernel.domain.voucher import VoucherType


class TestGenerateDocNo:
    def test_cash_in_format(self):
        doc_no = generate_doc_no("CASH_IN", date(2024, 3, 5))

        assert re.match(r"^PT-\d{6}-\d{4}$", doc_no)
        assert doc_no.startswith("PT-202403-")

    def test_enum_and_string_agree(self):
        rng_a, rng_b = random.Random(7), random.Random(7)

        assert generate_doc_no(VoucherType.BANK_OUT, date(2024, 1, 1), rng=rng_a) == generate_doc_no(
            "BANK_OUT", date(2024, 1, 1), rng=rng_b
        )

    def test_suffix_zero_padded(self):
        class _Zero(random.Random):
            def randrange(self, *args, **kwargs):
                return 7

        assert generate_doc_no("SALE", date(2024, 11, 30), rng=_Zero()) == "PX-202411-0007"

    def test_defaults_to_clock_date(self):
        clock = DeterministicClock(datetime(2025, 12, 31, 10, 0, tzinfo=timezone.utc))

        assert generate_doc_no("PURCHASE", clock=clock).startswith("PN-202512-")

    def test_unknown_type_uses_fallback(self):
        doc_no = generate_doc_no("SOMETHING_ELSE", date(2024, 3, 1))

        assert doc_no.startswith(f"{FALLBACK_PREFIX}-202403-")

    def test_every_type_matches_pattern(self):
        for voucher_type in VoucherType:
            match = DOC_NO_PATTERN.match(generate_doc_no(voucher_type, date(2024, 6, 1)))
            assert match is not None
            assert match["prefix"] == VOUCHER_TYPE_PREFIXES[voucher_type.value]
            assert match["period"] == "202406"


class TestTypeTables:
    def test_every_type_has_prefix_and_name(self):
        for voucher_type in VoucherType:
            assert voucher_type.value in VOUCHER_TYPE_PREFIXES
            assert voucher_type.value in VOUCHER_TYPE_NAMES

    def test_lookups(self):
        assert get_voucher_type_prefix(VoucherType.CASH_IN) == "PT"
        assert get_voucher_type_prefix("BANK_IN") == "BC"
        assert get_voucher_type_name("CASH_OUT") == "Phiếu chi tiền mặt"

    def test_fallbacks(self):
        assert get_voucher_type_prefix(None) == "CT"
        assert get_voucher_type_name("UNKNOWN") == FALLBACK_TYPE_NAME

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            VOUCHER_TYPE_PREFIXES["CASH_IN"] = "XX"
        with pytest.raises(TypeError):
            VOUCHER_TYPE_NAMES["NEW"] = "x"


class TestDocNoMatchesType:
    def test_matching_prefix(self):
        assert doc_no_matches_type("PT-202403-0001", VoucherType.CASH_IN) is True

    def test_wrong_prefix(self):
        assert doc_no_matches_type("PC-202403-0001", VoucherType.CASH_IN) is False

    def test_blank(self):
        assert doc_no_matches_type("", VoucherType.CASH_IN) is False
        assert doc_no_matches_type(None, VoucherType.CASH_IN) is False
