"""
core - Core utilities and models for ENS records.

This package contains:
- models.py: Data models (Network, Registration, LogEntry, TransactionReceipt)
- constants.py: Enums, contract addresses and defaults
- exceptions.py: Typed exceptions with error codes and operation tags
- validators.py: Name normalization, namehash and address checks
- logging.py: Structured JSON logging
"""

from core.constants import (
    ENS_REGISTRAR_CONTROLLER_ADDRESS,
    ENS_REGISTRY_ADDRESS,
    ZERO_ADDRESS,
    ErrorCode,
    Operation,
    ReceiptStatus,
)
from core.exceptions import (
    EnsError,
    EnsOperationError,
    InfraError,
    InvalidAddressError,
    InvalidInputError,
    InvalidNameError,
    NoAccountError,
    ResolverNotFoundError,
    RPCError,
)
from core.logging import get_logger, setup_logging
from core.models import (
    LogEntry,
    Network,
    Registration,
    TransactionReceipt,
)

__all__ = [
    # Constants
    "ENS_REGISTRAR_CONTROLLER_ADDRESS",
    "ENS_REGISTRY_ADDRESS",
    "ZERO_ADDRESS",
    "ErrorCode",
    "Operation",
    "ReceiptStatus",
    # Exceptions
    "EnsError",
    "EnsOperationError",
    "InfraError",
    "InvalidAddressError",
    "InvalidInputError",
    "InvalidNameError",
    "NoAccountError",
    "ResolverNotFoundError",
    "RPCError",
    # Models
    "LogEntry",
    "Network",
    "Registration",
    "TransactionReceipt",
    # Logging
    "get_logger",
    "setup_logging",
]
