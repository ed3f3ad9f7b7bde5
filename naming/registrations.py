"""
naming/registrations.py - Recent .eth registrations from NameRegistered logs.

Scans the last REGISTRATION_SCAN_WINDOW_BLOCKS blocks of the registrar
controller and rebuilds Registration records straight from event data.
"""

import asyncio
from typing import List, Optional, Union

from core.constants import (
    DEFAULT_REGISTRATION_COUNT,
    ETH_TLD,
    GENESIS_BLOCK,
    REGISTRATION_SCAN_WINDOW_BLOCKS,
    Operation,
)
from core.exceptions import InvalidInputError, operation_errors
from core.logging import get_logger
from core.models import LogEntry, Network, Registration
from naming.abi import NAME_REGISTERED
from naming.clients import ReadClient, get_read_client

logger = get_logger(__name__)


def scan_range(head: int) -> tuple[int, int]:
    """(from_block, to_block) for a chain head, clamped at genesis."""
    return max(GENESIS_BLOCK, head - REGISTRATION_SCAN_WINDOW_BLOCKS), head


def is_complete(entry: LogEntry) -> bool:
    """Entry has block number, tx hash, owner and name."""
    if entry.block_number is None or not entry.transaction_hash or not entry.args:
        return False
    return bool(entry.args.get("owner")) and bool(entry.args.get("name"))


def to_registration(entry: LogEntry) -> Registration:
    args = entry.args or {}
    return Registration(
        name=f"{args['name']}.{ETH_TLD}",
        owner=args["owner"],
        block_number=entry.block_number,
        transaction_hash=entry.transaction_hash,
        cost=int(args.get("cost", 0)),
        expires=int(args.get("expires", 0)),
    )


async def _attach_primary_names(client: ReadClient, registrations: List[Registration]) -> None:
    results = await asyncio.gather(
        *(client.get_primary_name(r.owner, r.block_number) for r in registrations),
        return_exceptions=True,
    )
    for registration, result in zip(registrations, results):
        if isinstance(result, BaseException):
            logger.debug(
                "Primary name lookup failed",
                extra={"context": {"owner": registration.owner, "error": str(result)}},
            )
            continue
        registration.owner_primary_name = result


async def get_recent_registrations(
    count: int = DEFAULT_REGISTRATION_COUNT,
    network: Union[str, Network, None] = None,
    *,
    client: Optional[ReadClient] = None,
    resolve_primary_names: bool = False,
) -> List[Registration]:
    """
    Most recent .eth registrations, newest first.

    Args:
        count: Maximum number of registrations to return
        network: Network key or descriptor (default mainnet)
        client: Read client override
        resolve_primary_names: Also look up each owner's primary name
            (concurrently; failed lookups leave it None)

    Returns:
        Up to count registrations found in the scan window
    """
    with operation_errors(
        Operation.GET_RECENT_REGISTRATIONS,
        "get recent registrations",
        count=count,
    ):
        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            raise InvalidInputError(
                f"count must be a non-negative integer, got {count!r}",
                details={"count": repr(count)},
            )

        client = client or get_read_client(network)
        head = await client.get_block_number()
        from_block, to_block = scan_range(head)

        entries = await client.get_logs(
            client.network.registrar_controller_address,
            NAME_REGISTERED,
            from_block,
            to_block,
            strict=True,
        )
        complete = [e for e in entries if is_complete(e)]
        selected = complete[-count:] if count else []
        registrations = [to_registration(e) for e in selected]

        if resolve_primary_names and registrations:
            await _attach_primary_names(client, registrations)

        registrations.reverse()

        logger.debug(
            "Recent registrations fetched",
            extra={"context": {
                "from_block": from_block,
                "to_block": to_block,
                "matched": len(entries),
                "complete": len(complete),
                "returned": len(registrations),
            }},
        )
        return registrations
