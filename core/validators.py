# PATH: core/validators.py
"""
Input validators for ENS records.

CONTRACTS:
- normalize_name(): ENSIP-15 canonical form or InvalidNameError, never a partial result
- namehash(): EIP-137 namehash of an already-normalized name
- validate_address(): checksummed address or InvalidAddressError

USAGE:
    from core.validators import normalize_name, namehash

    node = namehash(normalize_name("Nick.ETH"))
"""

import logging
from typing import Any

from ens.exceptions import InvalidName
from ens.utils import normalize_name as ensip15_normalize
from eth_utils import is_address, keccak, to_checksum_address

from core.constants import EMPTY_NODE, REVERSE_SUFFIX
from core.exceptions import InvalidAddressError, InvalidNameError

logger = logging.getLogger("core.validators")


# =============================================================================
# NAMES
# =============================================================================

def normalize_name(name: Any) -> str:
    """
    Normalize a name per ENSIP-15 (case folding, Unicode normalization).

    Args:
        name: Human-supplied name, e.g. "Nick.ETH"

    Returns:
        Canonical name, e.g. "nick.eth"

    Raises:
        InvalidNameError: Empty input, empty label, or disallowed characters
    """
    if not isinstance(name, str):
        raise InvalidNameError(
            f"Name must be a string, got {type(name).__name__}",
            details={"name": repr(name)},
        )
    if not name.strip():
        raise InvalidNameError("Name is empty", details={"name": name})
    if any(label == "" for label in name.split(".")):
        raise InvalidNameError(f'Name "{name}" has an empty label', details={"name": name})

    try:
        normalized = ensip15_normalize(name)
    except (InvalidName, ValueError) as e:
        raise InvalidNameError(
            f'Name "{name}" cannot be normalized: {e}',
            details={"name": name},
        ) from e

    if normalized != name:
        logger.debug(
            "Name normalized",
            extra={"context": {"input": name, "normalized": normalized}},
        )
    return normalized


def labelhash(label: str) -> bytes:
    """keccak256 of a single label."""
    return keccak(text=label)


def namehash(normalized_name: str) -> bytes:
    """
    Compute the EIP-137 namehash.

    namehash("") is the zero node; each label is folded in from the right.
    Callers must normalize first.
    """
    node = EMPTY_NODE
    if normalized_name:
        for label in reversed(normalized_name.split(".")):
            node = keccak(node + labelhash(label))
    return node


def reverse_name(address: str) -> str:
    """Reverse-record name for an address: <lowercase hex>.addr.reverse"""
    checksummed = validate_address(address)
    return f"{checksummed[2:].lower()}.{REVERSE_SUFFIX}"


# =============================================================================
# ADDRESSES
# =============================================================================

def is_valid_address(address: Any) -> bool:
    """True for 0x-prefixed 20-byte hex; mixed case must carry a valid checksum."""
    return isinstance(address, str) and is_address(address)


def validate_address(address: Any) -> str:
    """
    Validate an address and return its checksummed form.

    Raises:
        InvalidAddressError: Not a syntactically valid address
    """
    if not is_valid_address(address):
        raise InvalidAddressError(
            f'Invalid Ethereum address: "{address}"',
            details={"address": str(address)},
        )
    return to_checksum_address(address)
