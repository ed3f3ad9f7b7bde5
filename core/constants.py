# PATH: core/constants.py
"""
Constants for ENS records.

Contains enums, well-known contract addresses and defaults.

ERROR TAG CONTRACT:
- Every failure surfaced by a public operation carries an Operation and an ErrorCode
- The machine-readable tag is "{Operation.value}_{ErrorCode.value}"
  Example: "SetTextRecord_NoAccount"
"""

from enum import Enum
from typing import Final

# =============================================================================
# WELL-KNOWN CONTRACTS (mainnet)
# =============================================================================

# ENS registry (with fallback)
ENS_REGISTRY_ADDRESS: Final[str] = "0x00000000000C2E074eC69A0dFb2997BA6C7d2e1e"

# .eth registrar controller, emits NameRegistered
ENS_REGISTRAR_CONTROLLER_ADDRESS: Final[str] = "0x283Af0B28c62C092C9727F1Ee09c02CA627EB7F5"

ZERO_ADDRESS: Final[str] = "0x0000000000000000000000000000000000000000"

# Root node for namehash
EMPTY_NODE: Final[bytes] = b"\x00" * 32

# Suffix appended to NameRegistered labels
ETH_TLD: Final[str] = "eth"

# Reverse records live under <hex address>.addr.reverse
REVERSE_SUFFIX: Final[str] = "addr.reverse"

# =============================================================================
# DEFAULTS
# =============================================================================

DEFAULT_NETWORK: Final[str] = "mainnet"

# Window scanned by get_recent_registrations
REGISTRATION_SCAN_WINDOW_BLOCKS: Final[int] = 10_000
DEFAULT_REGISTRATION_COUNT: Final[int] = 10

# Genesis block, lower bound for log queries
GENESIS_BLOCK: Final[int] = 0

DEFAULT_RPC_TIMEOUT_SECONDS: Final[int] = 10
DEFAULT_RECEIPT_POLL_INTERVAL_SECONDS: Final[float] = 2.0

# Multiplier applied to eth_estimateGas
GAS_LIMIT_BUFFER_PCT: Final[int] = 120


class ErrorCode(str, Enum):
    """
    Failure kinds.

    Validation kinds survive wrapping; everything else is reported
    as GENERAL by the public operations.
    """
    INVALID_NAME = "InvalidName"
    INVALID_ADDRESS = "InvalidAddress"
    INVALID_INPUT = "InvalidInput"
    RESOLVER_NOT_FOUND = "ResolverNotFound"
    NO_ACCOUNT = "NoAccount"

    # Infrastructure errors
    RPC_ERROR = "RpcError"
    DECODE_ERROR = "DecodeError"

    # Other
    GENERAL = "General"
    UNKNOWN = "Unknown"


# Codes reported as-is by operation_errors()
PRESERVED_ERROR_CODES: Final[frozenset[ErrorCode]] = frozenset([
    ErrorCode.INVALID_NAME,
    ErrorCode.INVALID_ADDRESS,
    ErrorCode.INVALID_INPUT,
    ErrorCode.RESOLVER_NOT_FOUND,
    ErrorCode.NO_ACCOUNT,
])


class Operation(str, Enum):
    """Public operations, used as the failure site in error tags."""
    GET_TEXT_RECORD = "GetTextRecord"
    SET_TEXT_RECORD = "SetTextRecord"
    SET_ADDRESS_RECORD = "SetAddressRecord"
    GET_RECENT_REGISTRATIONS = "GetRecentRegistrations"


class ReceiptStatus(str, Enum):
    """Transaction receipt status."""
    SUCCESS = "SUCCESS"
    REVERTED = "REVERTED"
    UNKNOWN = "UNKNOWN"
