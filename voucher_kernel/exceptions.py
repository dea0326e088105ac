"""
Typed exception hierarchy for the voucher kernel.

Only the imperative shell (services) raises these. The pure domain layer
reports business-rule violations as data: ``validate_voucher`` returns a
list of messages and never raises for an invalid voucher.

Every exception carries a class-level ``code`` (machine-readable) and its
context as attributes, so it survives logging and serialization:

    VoucherKernelError (base)
    |
    +-- VoucherValidationError      VOUCHER_INVALID
    |   +-- PeriodLockedError       PERIOD_LOCKED
    |   +-- InvalidVoidReasonError  INVALID_VOID_REASON
    |
    +-- VoucherNotFoundError        VOUCHER_NOT_FOUND
    |
    +-- DocNoError
    |   +-- DuplicateDocNoError     DUPLICATE_DOC_NO
    |   +-- DocNoExhaustedError     DOC_NO_EXHAUSTED
    |
    +-- VoucherStateError
    |   +-- InvalidStatusTransitionError  INVALID_STATUS_TRANSITION
    |   +-- VoucherImmutableError         VOUCHER_IMMUTABLE
    |
    +-- InvalidSettingError         INVALID_SETTING

Handling pattern::

    try:
        service.post(voucher_id)
    except VoucherValidationError as e:
        return {"error": e.code, "messages": e.messages}
    except InvalidStatusTransitionError as e:
        return {"error": e.code, "status": e.current_status}
"""


class VoucherKernelError(Exception):
    """Base exception for all voucher kernel errors."""

    code: str = "VOUCHER_KERNEL_ERROR"


# Validation


class VoucherValidationError(VoucherKernelError):
    """Voucher failed validation; ``messages`` holds every violation."""

    code: str = "VOUCHER_INVALID"

    def __init__(self, messages: list[str], doc_no: str | None = None):
        self.messages = list(messages)
        self.doc_no = doc_no
        super().__init__("; ".join(self.messages))


class PeriodLockedError(VoucherValidationError):
    """Posting date falls on or before the active period lock."""

    code: str = "PERIOD_LOCKED"

    def __init__(self, message: str, post_date: str, locked_until: str):
        self.post_date = post_date
        self.locked_until = locked_until
        super().__init__([message])


class InvalidVoidReasonError(VoucherValidationError):
    """Void reason is missing or too short."""

    code: str = "INVALID_VOID_REASON"

    def __init__(self, message: str, min_length: int):
        self.min_length = min_length
        super().__init__([message])


# Lookup


class VoucherNotFoundError(VoucherKernelError):
    """Voucher with the given ID does not exist."""

    code: str = "VOUCHER_NOT_FOUND"

    def __init__(self, voucher_id: str):
        self.voucher_id = voucher_id
        super().__init__(f"Voucher not found: {voucher_id}")


# Document numbers


class DocNoError(VoucherKernelError):
    """Base exception for document-number errors."""

    code: str = "DOC_NO_ERROR"


class DuplicateDocNoError(DocNoError):
    """A caller-supplied doc_no already exists."""

    code: str = "DUPLICATE_DOC_NO"

    def __init__(self, doc_no: str):
        self.doc_no = doc_no
        super().__init__(f"Document number already exists: {doc_no}")


class DocNoExhaustedError(DocNoError):
    """Every generated doc_no candidate collided with an existing one."""

    code: str = "DOC_NO_EXHAUSTED"

    def __init__(self, voucher_type: str, attempts: int):
        self.voucher_type = voucher_type
        self.attempts = attempts
        super().__init__(
            f"Could not allocate a unique document number for {voucher_type} "
            f"after {attempts} attempts"
        )


# Lifecycle


class VoucherStateError(VoucherKernelError):
    """Base exception for lifecycle errors."""

    code: str = "VOUCHER_STATE_ERROR"


class InvalidStatusTransitionError(VoucherStateError):
    """Requested status change is not allowed from the current status."""

    code: str = "INVALID_STATUS_TRANSITION"

    def __init__(self, voucher_id: str, current_status: str, target_status: str):
        self.voucher_id = voucher_id
        self.current_status = current_status
        self.target_status = target_status
        super().__init__(
            f"Voucher {voucher_id} cannot move from {current_status} to {target_status}"
        )


class VoucherImmutableError(VoucherStateError):
    """Content edit attempted on a posted or voided voucher."""

    code: str = "VOUCHER_IMMUTABLE"

    def __init__(self, voucher_id: str, status: str):
        self.voucher_id = voucher_id
        self.status = status
        super().__init__(f"Voucher {voucher_id} is {status} and cannot be edited")


# Settings


class InvalidSettingError(VoucherKernelError):
    """A system setting value has the wrong shape."""

    code: str = "INVALID_SETTING"

    def __init__(self, key: str, value: str, reason: str):
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid value {value!r} for setting {key}: {reason}")
