"""
Voucher -- the shared data shapes of the kernel.

Responsibility:
    Defines Voucher and VoucherLine plus the VoucherType and VoucherStatus
    enumerations. Every other domain module consumes these shapes.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - Amount-like fields are always ``Decimal`` (coerced via ``str`` so
      floats never carry binary error into sums).
    - ``status`` is always a VoucherStatus.

Non-goals:
    - Does NOT validate business rules (see validation.validate_voucher).
    - Does NOT freeze instances: a draft is edited in place by callers;
      duplication produces fully independent copies instead.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from voucher_kernel.domain.accounts import OffBalancePredicate, is_off_balance_account


class VoucherType(str, Enum):
    """Document type of a voucher. Drives the doc_no prefix."""

    GENERAL = "GENERAL"
    CASH_IN = "CASH_IN"
    CASH_OUT = "CASH_OUT"
    BANK_IN = "BANK_IN"
    BANK_OUT = "BANK_OUT"
    PURCHASE = "PURCHASE"
    SALE = "SALE"
    CLOSING = "CLOSING"
    ALLOCATION = "ALLOCATION"
    DEPRECIATION = "DEPRECIATION"
    REVALUATION = "REVALUATION"
    ADJUSTMENT = "ADJUSTMENT"


class VoucherStatus(str, Enum):
    """Lifecycle status of a voucher.

    Contract: Transitions are one-way: DRAFT -> POSTED -> VOIDED
    (DRAFT -> VOIDED cancels an unposted draft).
    """

    DRAFT = "draft"
    POSTED = "posted"
    VOIDED = "voided"


# Legal status transitions. Anything else is rejected by VoucherService.
STATUS_TRANSITIONS: dict[VoucherStatus, frozenset[VoucherStatus]] = {
    VoucherStatus.DRAFT: frozenset({VoucherStatus.POSTED, VoucherStatus.VOIDED}),
    VoucherStatus.POSTED: frozenset({VoucherStatus.VOIDED}),
    VoucherStatus.VOIDED: frozenset(),
}


def to_decimal(value: Any) -> Decimal | None:
    """Coerce an amount-like value to Decimal; None and "" stay None.

    Raises:
        ValueError: If the value is not a number.
    """
    if value is None or value == "":
        return None
    if isinstance(value, Decimal) and value.is_finite():
        return value
    if isinstance(value, bool):
        raise ValueError(f"Invalid amount: {value!r}")
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as e:
        raise ValueError(f"Invalid amount: {value!r}") from e
    if not result.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    return result


def amount_or_none(value: Any) -> Decimal | None:
    """Like to_decimal, but an unparseable value reads as missing."""
    try:
        return to_decimal(value)
    except ValueError:
        return None


# camelCase keys sent by the presentation layer -> field names
_LINE_ALIASES = {
    "debitAcc": "debit_acc",
    "creditAcc": "credit_acc",
    "partnerCode": "partner_code",
    "projectCode": "project_code",
    "contractCode": "contract_code",
    "productCode": "product_code",
    "unitPrice": "unit_price",
    "fxRate": "fx_rate",
    "fxAmount": "fx_amount",
}

_LINE_DECIMAL_FIELDS = ("amount", "quantity", "unit_price", "fx_rate", "fx_amount")


@dataclass(slots=True)
class VoucherLine:
    """One debit/credit line of a voucher.

    A line names a debit account, a credit account, or both (a compound
    line that balances on its own).
    """

    description: str = ""
    debit_acc: str | None = None
    credit_acc: str | None = None
    amount: Decimal | None = Decimal("0")
    id: str | None = None

    # Analysis dimensions
    partner_code: str | None = None
    project_code: str | None = None
    contract_code: str | None = None
    dim1: str | None = None
    dim2: str | None = None
    dim3: str | None = None
    dim4: str | None = None
    dim5: str | None = None

    # Inventory / foreign currency entries
    product_code: str | None = None
    quantity: Decimal | None = None
    unit_price: Decimal | None = None
    currency: str | None = None
    fx_rate: Decimal | None = None
    fx_amount: Decimal | None = None

    def __post_init__(self) -> None:
        for name in _LINE_DECIMAL_FIELDS:
            setattr(self, name, to_decimal(getattr(self, name)))
        # Blank account codes mean "not set"
        if self.debit_acc is not None:
            self.debit_acc = str(self.debit_acc).strip() or None
        if self.credit_acc is not None:
            self.credit_acc = str(self.credit_acc).strip() or None

    @property
    def has_account(self) -> bool:
        return bool(self.debit_acc or self.credit_acc)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VoucherLine:
        """Build a line from snake_case or camelCase keys; unknown keys ignored."""
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            name = _LINE_ALIASES.get(key, key)
            if name in known:
                kwargs[name] = value
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(slots=True)
class Voucher:
    """A financial transaction record made of one or more lines.

    ``id`` is None until the persistence layer stores the voucher.
    Dates are ISO ``YYYY-MM-DD`` strings, compared lexically.
    """

    doc_no: str = ""
    doc_date: str = ""
    post_date: str = ""
    description: str = ""
    type: VoucherType | str = VoucherType.GENERAL
    total_amount: Decimal = Decimal("0")
    lines: list[VoucherLine] = field(default_factory=list)
    status: VoucherStatus = VoucherStatus.DRAFT
    id: str | None = None
    org_doc_no: str | None = None
    org_doc_date: str | None = None

    def __post_init__(self) -> None:
        self.total_amount = to_decimal(self.total_amount) or Decimal("0")
        self.status = VoucherStatus(self.status)
        if isinstance(self.type, str) and self.type in VoucherType.__members__:
            self.type = VoucherType(self.type)
        self.lines = [
            line if isinstance(line, VoucherLine) else VoucherLine.from_dict(line)
            for line in self.lines
        ]

    @property
    def type_code(self) -> str:
        """The type as its plain string value."""
        return self.type.value if isinstance(self.type, VoucherType) else str(self.type)

    @property
    def is_draft(self) -> bool:
        return self.status == VoucherStatus.DRAFT

    def compute_total_amount(
        self,
        is_off_balance: OffBalancePredicate = is_off_balance_account,
    ) -> Decimal:
        """On-balance debit total (the voucher's face value).

        Lines touching an off-balance account on either side are excluded,
        matching the totals of ``check_balance``.
        """
        return sum(
            (
                line.amount or Decimal("0")
                for line in self.lines
                if line.debit_acc
                and not (is_off_balance(line.debit_acc) or is_off_balance(line.credit_acc))
            ),
            Decimal("0"),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Voucher:
        """Build a voucher from a plain mapping (e.g. a decoded request body).

        ``lines`` may also arrive as ``items``. Unknown keys are ignored.
        """
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in known and k != "lines"}
        raw_lines = data.get("lines", data.get("items")) or []
        kwargs["lines"] = [
            line if isinstance(line, VoucherLine) else VoucherLine.from_dict(line)
            for line in raw_lines
        ]
        if kwargs.get("status") is None:
            kwargs.pop("status", None)
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        data = {f.name: getattr(self, f.name) for f in fields(self) if f.name != "lines"}
        data["type"] = self.type_code
        data["status"] = self.status.value
        data["lines"] = [line.to_dict() for line in self.lines]
        return data
