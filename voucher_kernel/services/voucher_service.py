"""
VoucherService -- persistence boundary for vouchers.

Responsibility:
    Saves, posts, voids and duplicates vouchers.  Runs the pure
    validation pipeline against the lock date read from settings before
    accepting any save or post, and surfaces its messages as
    VoucherValidationError.

Architecture position:
    Kernel > Services -- imperative shell.  Flush-only: the caller owns
    commit/rollback (see db.engine.session_scope).

Invariants enforced:
    DOC_NO_UNIQUENESS   -- uq_voucher_doc_no plus retry: a generated doc_no
                           that collides is redrawn inside a SAVEPOINT, up
                           to ``max_doc_no_attempts`` times.
    STATUS_MONOTONICITY -- status changes use ``UPDATE ... WHERE status =
                           :expected``; a concurrent transition makes the
                           row count 0 and the loser fails, so a voucher is
                           posted exactly once.
    POSTED_IMMUTABILITY -- update_draft refuses posted and voided vouchers.
    PERIOD_LOCK         -- validate_voucher with the current lock date on
                           every save and post; void refuses a posted
                           voucher inside a locked period.

Failure modes:
    - VoucherValidationError: validation messages (full list).
    - PeriodLockedError: void of a posted voucher in a locked period.
    - InvalidVoidReasonError: void reason shorter than 10 characters.
    - DuplicateDocNoError: caller-supplied doc_no already exists.
    - DocNoExhaustedError: every generated candidate collided.
    - IntegrityError: any other constraint failure propagates unchanged.
    - VoucherNotFoundError, InvalidStatusTransitionError,
      VoucherImmutableError.

Usage:
    with session_scope() as session:
        service = VoucherService(session)
        saved = service.create_draft(voucher, actor="accountant")
        service.post(saved.id, actor="chief_accountant")
"""

from __future__ import annotations

import random
from datetime import date

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from voucher_kernel.domain.accounts import OffBalancePredicate, is_off_balance_account
from voucher_kernel.domain.clock import Clock, SystemClock
from voucher_kernel.domain.duplication import clone_voucher, prepare_voucher_for_duplicate
from voucher_kernel.domain.messages import DEFAULT_CATALOG, MessageCatalog
from voucher_kernel.domain.numbering import (
    doc_no_matches_type,
    generate_doc_no,
    get_voucher_type_prefix,
)
from voucher_kernel.domain.period_lock import is_date_locked
from voucher_kernel.domain.validation import validate_voucher
from voucher_kernel.domain.voucher import STATUS_TRANSITIONS, Voucher, VoucherStatus
from voucher_kernel.exceptions import (
    DocNoExhaustedError,
    DuplicateDocNoError,
    InvalidStatusTransitionError,
    InvalidVoidReasonError,
    PeriodLockedError,
    VoucherImmutableError,
    VoucherNotFoundError,
    VoucherValidationError,
)
from voucher_kernel.logging_config import LogContext, get_logger
from voucher_kernel.models.voucher import VoucherRecord
from voucher_kernel.services.base import BaseService
from voucher_kernel.services.settings_service import SettingsService

logger = get_logger("services.voucher")

_DESCRIPTION_MAX = 500


class VoucherService(BaseService[VoucherRecord]):
    """
    Save / post / void / duplicate vouchers.

    Contract:
        Accepts and returns domain ``Voucher`` objects, never ORM rows.

    Guarantees:
        - Nothing invalid is stored: every save re-runs validate_voucher.
        - Generated doc_nos are retried on conflict; caller-supplied ones
          are not (the caller chose them, so the conflict is reported).

    Non-goals:
        - Does NOT call ``session.commit()``.
        - Does NOT write general-ledger rows; reporting reads posted
          vouchers directly.
    """

    VOID_REASON_MIN_LENGTH = 10
    DEFAULT_MAX_DOC_NO_ATTEMPTS = 5

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        *,
        settings: SettingsService | None = None,
        messages: MessageCatalog | None = None,
        is_off_balance: OffBalancePredicate = is_off_balance_account,
        max_doc_no_attempts: int = DEFAULT_MAX_DOC_NO_ATTEMPTS,
        rng: random.Random | None = None,
    ):
        super().__init__(session)
        self._clock = clock or SystemClock()
        self._settings = settings or SettingsService(session)
        self._messages = messages or DEFAULT_CATALOG
        self._is_off_balance = is_off_balance
        self._max_attempts = max(1, max_doc_no_attempts)
        self._rng = rng

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, voucher_id: str) -> Voucher:
        """Load a voucher.

        Raises:
            VoucherNotFoundError: If no voucher has this ID.
        """
        return self._load(voucher_id).to_domain()

    def find_by_doc_no(self, doc_no: str) -> Voucher | None:
        record = self.session.execute(
            select(VoucherRecord).where(VoucherRecord.doc_no == doc_no.strip())
        ).scalar_one_or_none()
        return record.to_domain() if record is not None else None

    def validate(self, voucher: Voucher) -> list[str]:
        """Run the validation pipeline against the current lock date."""
        errors = validate_voucher(
            voucher,
            self._settings.get_locked_until(),
            messages=self._messages,
            is_off_balance=self._is_off_balance,
        )
        if voucher.doc_no and voucher.doc_no.strip() and not doc_no_matches_type(
            voucher.doc_no, voucher.type
        ):
            errors.append(
                self._messages.doc_no_prefix_mismatch.format(
                    prefix=get_voucher_type_prefix(voucher.type)
                )
            )
        return errors

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_draft(self, voucher: Voucher, actor: str | None = None) -> Voucher:
        """
        Store ``voucher`` as a new draft.

        A blank doc_no is generated from the voucher type and doc_date
        (today when doc_date is not an ISO date) and retried on conflict.

        Raises:
            VoucherValidationError: If validation reports any message.
            DuplicateDocNoError: If a caller-supplied doc_no exists.
            DocNoExhaustedError: If every generated doc_no collided.
        """
        draft = clone_voucher(voucher)
        draft.id = None
        draft.status = VoucherStatus.DRAFT
        for line in draft.lines:
            line.id = None

        generated = not (draft.doc_no or "").strip()
        if generated:
            draft.doc_no = self._propose_doc_no(draft)

        draft.total_amount = draft.compute_total_amount(self._is_off_balance)
        self._raise_if_invalid(draft)
        record = self._insert(draft, generated=generated, actor=actor)

        logger.info(
            "voucher_created",
            extra={
                "voucher_id": record.id,
                "doc_no": record.doc_no,
                "voucher_type": record.type,
                "line_count": len(record.lines),
                "doc_no_generated": generated,
            },
        )
        return record.to_domain()

    def update_draft(
        self,
        voucher_id: str,
        voucher: Voucher,
        actor: str | None = None,
    ) -> Voucher:
        """
        Replace the content of a draft (header fields and all lines).

        A blank doc_no keeps the stored one.

        Raises:
            VoucherImmutableError: If the voucher is posted or voided.
            VoucherValidationError: If validation reports any message.
            DuplicateDocNoError: If the new doc_no belongs to another voucher.
        """
        record = self._load(voucher_id)
        if record.status_enum != VoucherStatus.DRAFT:
            raise VoucherImmutableError(voucher_id, record.status)

        draft = clone_voucher(voucher)
        draft.id = voucher_id
        draft.status = VoucherStatus.DRAFT
        if not (draft.doc_no or "").strip():
            draft.doc_no = record.doc_no

        draft.total_amount = draft.compute_total_amount(self._is_off_balance)
        self._raise_if_invalid(draft)

        try:
            with self.session.begin_nested():
                record.apply(draft)
                record.updated_by = actor
                self.session.flush()
        except IntegrityError as e:
            if self._doc_no_taken(draft.doc_no, exclude_id=voucher_id):
                raise DuplicateDocNoError(draft.doc_no) from e
            raise

        logger.info(
            "voucher_updated",
            extra={"voucher_id": voucher_id, "doc_no": record.doc_no},
        )
        return record.to_domain()

    def post(self, voucher_id: str, actor: str | None = None) -> Voucher:
        """
        Post a draft: validate against the current lock, then DRAFT -> POSTED.

        Raises:
            InvalidStatusTransitionError: If the voucher is not a draft,
                including when a concurrent post won the race.
            VoucherValidationError: If validation reports any message.
        """
        record = self._load(voucher_id)
        with LogContext.bind(voucher_id=voucher_id, doc_no=record.doc_no):
            self._check_transition(record, VoucherStatus.POSTED)
            self._raise_if_invalid(record.to_domain())
            self._transition(record, VoucherStatus.POSTED, actor)

            logger.info(
                "voucher_posted",
                extra={"post_date": record.post_date, "total_amount": record.total_amount},
            )
        return record.to_domain()

    def void(self, voucher_id: str, reason: str, actor: str | None = None) -> Voucher:
        """
        Void a draft or posted voucher.  The reason is prepended to the
        description.

        Raises:
            InvalidVoidReasonError: If ``reason`` is shorter than 10 characters.
            InvalidStatusTransitionError: If the voucher is already voided.
            PeriodLockedError: If a posted voucher's post_date is locked.
        """
        reason = (reason or "").strip()
        if len(reason) < self.VOID_REASON_MIN_LENGTH:
            raise InvalidVoidReasonError(
                self._messages.void_reason_too_short.format(
                    min_length=self.VOID_REASON_MIN_LENGTH
                ),
                self.VOID_REASON_MIN_LENGTH,
            )

        record = self._load(voucher_id)
        with LogContext.bind(voucher_id=voucher_id, doc_no=record.doc_no):
            self._check_transition(record, VoucherStatus.VOIDED)

            locked_until = self._settings.get_locked_until()
            if record.status_enum == VoucherStatus.POSTED and is_date_locked(
                record.post_date, locked_until
            ):
                raise PeriodLockedError(
                    self._messages.post_date_locked.format(
                        lock_date=self._messages.format_date(locked_until)
                    ),
                    record.post_date,
                    locked_until,
                )

            prefix = self._messages.void_description_prefix.format(reason=reason)
            description = f"{prefix} {record.description or ''}".strip()
            self._transition(
                record,
                VoucherStatus.VOIDED,
                actor,
                description=description[:_DESCRIPTION_MAX],
            )

            logger.info("voucher_voided", extra={"reason": reason})
        return record.to_domain()

    def duplicate(self, voucher_id: str, actor: str | None = None) -> Voucher:
        """
        Store a new draft copied from an existing voucher of any status.

        Raises:
            VoucherNotFoundError: If the source does not exist.
            VoucherValidationError: If the copy fails validation (e.g.
                today is inside a locked period).
            DocNoExhaustedError: If every generated doc_no collided.
        """
        source = self.get(voucher_id)
        copy = prepare_voucher_for_duplicate(source, clock=self._clock, rng=self._rng)
        copy.total_amount = copy.compute_total_amount(self._is_off_balance)

        self._raise_if_invalid(copy)
        record = self._insert(copy, generated=True, actor=actor)

        logger.info(
            "voucher_duplicated",
            extra={
                "source_voucher_id": voucher_id,
                "voucher_id": record.id,
                "doc_no": record.doc_no,
            },
        )
        return record.to_domain()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _load(self, voucher_id: str) -> VoucherRecord:
        record = self.session.get(VoucherRecord, voucher_id)
        if record is None:
            raise VoucherNotFoundError(voucher_id)
        return record

    def _raise_if_invalid(self, voucher: Voucher) -> None:
        errors = self.validate(voucher)
        if errors:
            logger.warning(
                "voucher_rejected",
                extra={"doc_no": voucher.doc_no, "errors": errors},
            )
            raise VoucherValidationError(errors, doc_no=voucher.doc_no)

    def _propose_doc_no(self, voucher: Voucher) -> str:
        try:
            target = date.fromisoformat(voucher.doc_date)
        except (TypeError, ValueError):
            target = self._clock.today()
        return generate_doc_no(voucher.type, target, rng=self._rng)

    def _insert(self, voucher: Voucher, *, generated: bool, actor: str | None) -> VoucherRecord:
        """INSERT inside a SAVEPOINT; redraw a generated doc_no on conflict."""
        for attempt in range(1, self._max_attempts + 1):
            record = VoucherRecord(status=VoucherStatus.DRAFT.value, created_by=actor)
            record.apply(voucher)
            try:
                with self.session.begin_nested():
                    self.session.add(record)
                    self.session.flush()
                return record
            except IntegrityError as e:
                if not self._doc_no_taken(voucher.doc_no):
                    raise
                if not generated:
                    raise DuplicateDocNoError(voucher.doc_no) from e
                logger.warning(
                    "doc_no_conflict_retry",
                    extra={
                        "doc_no": voucher.doc_no,
                        "attempt": attempt,
                        "max_attempts": self._max_attempts,
                    },
                )
                voucher.doc_no = self._propose_doc_no(voucher)

        raise DocNoExhaustedError(voucher.type_code, self._max_attempts)

    def _doc_no_taken(self, doc_no: str, exclude_id: str | None = None) -> bool:
        """True if another stored voucher already carries ``doc_no``."""
        query = select(VoucherRecord.id).where(VoucherRecord.doc_no == doc_no.strip())
        if exclude_id is not None:
            query = query.where(VoucherRecord.id != exclude_id)
        return self.session.execute(query.limit(1)).first() is not None

    def _check_transition(self, record: VoucherRecord, target: VoucherStatus) -> None:
        if target not in STATUS_TRANSITIONS[record.status_enum]:
            raise InvalidStatusTransitionError(record.id, record.status, target.value)

    def _transition(
        self,
        record: VoucherRecord,
        target: VoucherStatus,
        actor: str | None,
        **values: str,
    ) -> None:
        """Check-and-set: only succeeds if the stored status is unchanged."""
        expected = record.status
        result = self.session.execute(
            update(VoucherRecord)
            .where(VoucherRecord.id == record.id, VoucherRecord.status == expected)
            .values(status=target.value, updated_by=actor, **values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            self.session.refresh(record)
            raise InvalidStatusTransitionError(record.id, record.status, target.value)
        self.session.refresh(record)
        logger.debug(
            "voucher_status_changed",
            extra={"from_status": expected, "to_status": target.value},
        )
