"""
Module: voucher_kernel.models.voucher
Responsibility: ORM persistence for vouchers and their lines.
Architecture position: Kernel > Models.  May import from db/base.py and the
    pure domain shapes (for boundary conversion) only.

Invariants enforced:
    - doc_no uniqueness (UNIQUE constraint uq_voucher_doc_no).  The domain
      only proposes numbers; this constraint is the authority.
    - Lines are owned by their voucher (delete-orphan cascade, ordered by
      line_no).

Failure modes:
    - IntegrityError on duplicate doc_no.  VoucherService translates it
      into a retry (generated numbers) or DuplicateDocNoError.

Non-goals:
    - Status transitions are NOT guarded here; VoucherService performs them
      with a conditional UPDATE so concurrent posts cannot both succeed.
"""

from decimal import Decimal

from sqlalchemy import ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from voucher_kernel.db.base import TrackedBase
from voucher_kernel.domain.voucher import Voucher, VoucherLine, VoucherStatus

# Line columns copied 1:1 between the ORM row and the domain VoucherLine
_LINE_FIELDS = (
    "description",
    "debit_acc",
    "credit_acc",
    "amount",
    "partner_code",
    "project_code",
    "contract_code",
    "dim1",
    "dim2",
    "dim3",
    "dim4",
    "dim5",
    "product_code",
    "quantity",
    "unit_price",
    "currency",
    "fx_rate",
    "fx_amount",
)


class VoucherRecord(TrackedBase):
    """
    Voucher header row.

    Guarantees:
        - doc_no is unique (uq_voucher_doc_no).
        - doc_date / post_date are ISO ``YYYY-MM-DD`` strings, so range
          filters and lock comparisons work lexically.
    """

    __tablename__ = "vouchers"

    __table_args__ = (
        UniqueConstraint("doc_no", name="uq_voucher_doc_no"),
        Index("idx_voucher_post_date", "post_date"),
        Index("idx_voucher_type", "type"),
        Index("idx_voucher_status", "status"),
    )

    doc_no: Mapped[str] = mapped_column(String(50), nullable=False)
    doc_date: Mapped[str] = mapped_column(String(10), nullable=False)
    post_date: Mapped[str] = mapped_column(String(10), nullable=False)
    description: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    type: Mapped[str] = mapped_column(String(30), nullable=False)
    total_amount: Mapped[Decimal] = mapped_column(nullable=False, default=Decimal("0"))
    status: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        default=VoucherStatus.DRAFT.value,
    )

    # Cross-reference to the corrected / original document
    org_doc_no: Mapped[str | None] = mapped_column(String(50), nullable=True)
    org_doc_date: Mapped[str | None] = mapped_column(String(10), nullable=True)

    lines: Mapped[list["VoucherLineRecord"]] = relationship(
        back_populates="voucher",
        cascade="all, delete-orphan",
        order_by="VoucherLineRecord.line_no",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<VoucherRecord {self.doc_no} status={self.status}>"

    @property
    def status_enum(self) -> VoucherStatus:
        return VoucherStatus(self.status)

    def apply(self, voucher: Voucher) -> None:
        """Copy header fields and lines from a domain voucher (replaces lines)."""
        self.doc_no = voucher.doc_no.strip()
        self.doc_date = voucher.doc_date
        self.post_date = voucher.post_date
        self.description = voucher.description or ""
        self.type = voucher.type_code
        self.total_amount = voucher.total_amount or voucher.compute_total_amount()
        self.org_doc_no = voucher.org_doc_no
        self.org_doc_date = voucher.org_doc_date
        self.lines = [
            VoucherLineRecord.from_domain(line, line_no)
            for line_no, line in enumerate(voucher.lines, start=1)
        ]

    def to_domain(self) -> Voucher:
        return Voucher(
            id=self.id,
            doc_no=self.doc_no,
            doc_date=self.doc_date,
            post_date=self.post_date,
            description=self.description,
            type=self.type,
            total_amount=self.total_amount,
            status=self.status_enum,
            org_doc_no=self.org_doc_no,
            org_doc_date=self.org_doc_date,
            lines=[line.to_domain() for line in self.lines],
        )


class VoucherLineRecord(TrackedBase):
    """One debit/credit line of a stored voucher."""

    __tablename__ = "voucher_lines"

    __table_args__ = (
        Index("idx_voucher_line_voucher", "voucher_id"),
        Index("idx_voucher_line_debit", "debit_acc"),
        Index("idx_voucher_line_credit", "credit_acc"),
    )

    voucher_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("vouchers.id", ondelete="CASCADE"),
        nullable=False,
    )
    line_no: Mapped[int] = mapped_column(Integer, nullable=False)

    description: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    debit_acc: Mapped[str | None] = mapped_column(String(20), nullable=True)
    credit_acc: Mapped[str | None] = mapped_column(String(20), nullable=True)
    amount: Mapped[Decimal | None] = mapped_column(nullable=True)

    partner_code: Mapped[str | None] = mapped_column(String(50), nullable=True)
    project_code: Mapped[str | None] = mapped_column(String(50), nullable=True)
    contract_code: Mapped[str | None] = mapped_column(String(50), nullable=True)
    dim1: Mapped[str | None] = mapped_column(String(50), nullable=True)
    dim2: Mapped[str | None] = mapped_column(String(50), nullable=True)
    dim3: Mapped[str | None] = mapped_column(String(50), nullable=True)
    dim4: Mapped[str | None] = mapped_column(String(50), nullable=True)
    dim5: Mapped[str | None] = mapped_column(String(50), nullable=True)

    product_code: Mapped[str | None] = mapped_column(String(50), nullable=True)
    quantity: Mapped[Decimal | None] = mapped_column(nullable=True)
    unit_price: Mapped[Decimal | None] = mapped_column(nullable=True)
    currency: Mapped[str | None] = mapped_column(String(3), nullable=True)
    fx_rate: Mapped[Decimal | None] = mapped_column(nullable=True)
    fx_amount: Mapped[Decimal | None] = mapped_column(nullable=True)

    voucher: Mapped["VoucherRecord"] = relationship(back_populates="lines")

    def __repr__(self) -> str:
        return (
            f"<VoucherLineRecord #{self.line_no} "
            f"{self.debit_acc or '-'}/{self.credit_acc or '-'} {self.amount}>"
        )

    @classmethod
    def from_domain(cls, line: VoucherLine, line_no: int) -> "VoucherLineRecord":
        record = cls(line_no=line_no)
        for name in _LINE_FIELDS:
            setattr(record, name, getattr(line, name))
        record.description = line.description or ""
        return record

    def to_domain(self) -> VoucherLine:
        return VoucherLine(id=self.id, **{name: getattr(self, name) for name in _LINE_FIELDS})
