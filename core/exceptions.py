# PATH: core/exceptions.py
"""
Typed exceptions for ENS records.

Validation errors (bad name, bad address, missing account) are raised
where they are detected. Public operations wrap every failure with
operation_errors() so callers see exactly one EnsOperationError.
"""

from contextlib import contextmanager
from typing import Any, Iterator, Optional

from core.constants import ErrorCode, Operation, PRESERVED_ERROR_CODES
from core.logging import get_logger

logger = get_logger(__name__)


class EnsError(Exception):
    """Base exception for ENS records."""

    default_code = ErrorCode.UNKNOWN

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}

    def __str__(self):
        return f"[{self.code.value}] {self.message}"


class InvalidNameError(EnsError):
    """Name cannot be normalized."""
    default_code = ErrorCode.INVALID_NAME


class InvalidAddressError(EnsError):
    """Address is not a syntactically valid address."""
    default_code = ErrorCode.INVALID_ADDRESS


class InvalidInputError(EnsError):
    """Argument outside the accepted range."""
    default_code = ErrorCode.INVALID_INPUT


class ResolverNotFoundError(EnsError):
    """Name has no usable resolver."""
    default_code = ErrorCode.RESOLVER_NOT_FOUND


class NoAccountError(EnsError):
    """Write client holds no signing account."""
    default_code = ErrorCode.NO_ACCOUNT


class InfraError(EnsError):
    """Infrastructure-related errors (RPC, timeouts)."""
    default_code = ErrorCode.RPC_ERROR


class RPCError(InfraError):
    """RPC call failed."""
    pass


class DecodeError(EnsError):
    """Return data or log could not be decoded."""
    default_code = ErrorCode.DECODE_ERROR


class EnsOperationError(EnsError):
    """
    Single error surfaced by a public operation.

    Attributes:
        operation: Failure site
        code: Preserved validation code, or GENERAL
        reason: Message of the original failure
        tag: Stable machine-readable "{operation}_{code}"
    """

    def __init__(
        self,
        operation: Operation,
        attempt: str,
        reason: str,
        code: ErrorCode = ErrorCode.GENERAL,
        details: Optional[dict] = None,
    ):
        self.operation = operation
        self.attempt = attempt
        self.reason = reason
        super().__init__(
            f"Failed to {attempt}. Reason: {reason}",
            code=code,
            details=details,
        )

    @property
    def tag(self) -> str:
        return f"{self.operation.value}_{self.code.value}"

    def __str__(self):
        return f"{self.message} [Error Code: {self.tag}]"


def _reason(exc: BaseException) -> str:
    if isinstance(exc, EnsError):
        return exc.message
    return str(exc) or type(exc).__name__


@contextmanager
def operation_errors(operation: Operation, attempt: str, **details: Any) -> Iterator[None]:
    """
    Re-raise any failure inside the block as an EnsOperationError.

    Usage:
        with operation_errors(Operation.GET_TEXT_RECORD, f'get text record "{key}" for "{name}"'):
            ...
    """
    try:
        yield
    except EnsOperationError:
        raise
    except Exception as e:
        code = ErrorCode.GENERAL
        if isinstance(e, EnsError):
            details = {**e.details, **details, "cause_code": e.code.value}
            if e.code in PRESERVED_ERROR_CODES:
                code = e.code
        error = EnsOperationError(
            operation=operation,
            attempt=attempt,
            reason=_reason(e),
            code=code,
            details=details,
        )
        logger.warning(
            f"Failed to {attempt}",
            extra={"context": {"tag": error.tag, "reason": error.reason}},
        )
        raise error from e
