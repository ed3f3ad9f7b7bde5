"""
naming/records.py - Text and address record operations.

Every operation normalizes the name before touching the network and
surfaces failures as a single EnsOperationError.

CONFIRMATION CONTRACT:
- set_text_record():          returns tx hash on submission
- set_text_record_and_wait(): returns TransactionReceipt
- set_address_record():       returns TransactionReceipt
- submit_address_record():    returns tx hash on submission
"""

from typing import Optional, Union

from core.constants import ZERO_ADDRESS, Operation
from core.exceptions import NoAccountError, ResolverNotFoundError, operation_errors
from core.logging import get_logger
from core.models import Network, TransactionReceipt
from core.validators import namehash, normalize_name, validate_address
from naming.abi import RESOLVER_SET_TEXT, SET_ADDR
from naming.clients import ReadClient, WriteClient, get_read_client, get_write_client

logger = get_logger(__name__)

NetworkSelector = Union[str, Network, None]


def _require_account(wallet: WriteClient) -> str:
    if not wallet.account:
        raise NoAccountError("No wallet account available")
    return wallet.account


# =============================================================================
# TEXT RECORDS
# =============================================================================

async def get_text_record(
    name: str,
    key: str,
    network: NetworkSelector = None,
    *,
    client: Optional[ReadClient] = None,
) -> Optional[str]:
    """
    Read a text record.

    Args:
        name: ENS name, normalized before lookup
        key: Record key, e.g. "url" or "com.twitter"
        network: Network key or descriptor (default mainnet)
        client: Read client override

    Returns:
        Record value, or None if not set
    """
    with operation_errors(
        Operation.GET_TEXT_RECORD,
        f'get ENS text record "{key}" for "{name}"',
        name=name,
        key=key,
    ):
        normalized = normalize_name(name)
        client = client or get_read_client(network)
        value = await client.get_text(normalized, key)
        logger.debug(
            "Text record read",
            extra={"context": {"name": normalized, "key": key, "is_set": value is not None}},
        )
        return value


async def _submit_text_record(
    name: str,
    key: str,
    value: Optional[str],
    network: NetworkSelector,
    client: Optional[ReadClient],
    wallet: Optional[WriteClient],
) -> tuple[WriteClient, str]:
    normalized = normalize_name(name)

    wallet = wallet or get_write_client(network)
    _require_account(wallet)

    client = client or get_read_client(network if network is not None else wallet.network)
    resolver = await client.get_resolver(normalized)
    if not resolver or not isinstance(resolver, str) or not resolver.startswith("0x"):
        raise ResolverNotFoundError(
            f"Could not resolve ENS resolver address for {normalized}",
            details={"name": normalized, "resolver": resolver},
        )

    tx_hash = await wallet.submit_contract_call(
        resolver,
        RESOLVER_SET_TEXT,
        [namehash(normalized), key, value or ""],
    )
    logger.info(
        "Text record submitted",
        extra={"context": {
            "name": normalized,
            "key": key,
            "cleared": not value,
            "resolver": resolver,
            "tx_hash": tx_hash,
        }},
    )
    return wallet, tx_hash


async def set_text_record(
    name: str,
    key: str,
    value: Optional[str],
    network: NetworkSelector = None,
    *,
    client: Optional[ReadClient] = None,
    wallet: Optional[WriteClient] = None,
) -> str:
    """
    Write a text record on the name's resolver.

    A value of None clears the record (writes "").
    Returns as soon as the transaction is submitted.

    Returns:
        Transaction hash
    """
    with operation_errors(
        Operation.SET_TEXT_RECORD,
        f'set ENS text record "{key}" for "{name}"',
        name=name,
        key=key,
    ):
        _, tx_hash = await _submit_text_record(name, key, value, network, client, wallet)
        return tx_hash


async def set_text_record_and_wait(
    name: str,
    key: str,
    value: Optional[str],
    network: NetworkSelector = None,
    *,
    client: Optional[ReadClient] = None,
    wallet: Optional[WriteClient] = None,
) -> TransactionReceipt:
    """Same as set_text_record(), but waits for the transaction to be mined."""
    with operation_errors(
        Operation.SET_TEXT_RECORD,
        f'set ENS text record "{key}" for "{name}"',
        name=name,
        key=key,
    ):
        wallet, tx_hash = await _submit_text_record(name, key, value, network, client, wallet)
        return await wallet.wait_for_receipt(tx_hash)


# =============================================================================
# ADDRESS RECORDS
# =============================================================================

async def _submit_address_record(
    name: str,
    address: Optional[str],
    network: NetworkSelector,
    wallet: Optional[WriteClient],
) -> tuple[WriteClient, str]:
    normalized = normalize_name(name)
    target = validate_address(address) if address is not None else ZERO_ADDRESS

    wallet = wallet or get_write_client(network)
    _require_account(wallet)

    registry = wallet.network.registry_address
    tx_hash = await wallet.submit_contract_call(
        registry,
        SET_ADDR,
        [namehash(normalized), target],
    )
    logger.info(
        "Address record submitted",
        extra={"context": {
            "name": normalized,
            "address": target,
            "registry": registry,
            "tx_hash": tx_hash,
        }},
    )
    return wallet, tx_hash


async def set_address_record(
    name: str,
    address: Optional[str],
    network: NetworkSelector = None,
    *,
    wallet: Optional[WriteClient] = None,
) -> TransactionReceipt:
    """
    Write the address record through the ENS registry and wait for it to be mined.

    A None address clears the record (writes the zero address). An
    invalid address fails before any network call.

    Returns:
        TransactionReceipt of the mined transaction
    """
    with operation_errors(
        Operation.SET_ADDRESS_RECORD,
        f'set ENS address record for "{name}"',
        name=name,
    ):
        wallet, tx_hash = await _submit_address_record(name, address, network, wallet)
        return await wallet.wait_for_receipt(tx_hash)


async def submit_address_record(
    name: str,
    address: Optional[str],
    network: NetworkSelector = None,
    *,
    wallet: Optional[WriteClient] = None,
) -> str:
    """Same as set_address_record(), but returns the hash without waiting."""
    with operation_errors(
        Operation.SET_ADDRESS_RECORD,
        f'set ENS address record for "{name}"',
        name=name,
    ):
        _, tx_hash = await _submit_address_record(name, address, network, wallet)
        return tx_hash
