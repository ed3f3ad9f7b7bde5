"""
naming/clients.py - Read and write clients for ENS.

The record and registration operations only talk to the narrow
ReadClient / WriteClient protocols below, so tests can swap in stubs.
RpcReadClient and RpcWriteClient implement them over an RPCProvider.

Usage:
    client = get_read_client("mainnet")
    resolver = await client.get_resolver("nick.eth")
"""

import asyncio
from typing import Any, List, Optional, Protocol, Sequence, Union, runtime_checkable

from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_utils import encode_hex, to_checksum_address

from chains.providers import RPCProvider, get_provider, register_provider
from config import get_private_key, get_rpc_override, resolve_network
from core.constants import (
    DEFAULT_RECEIPT_POLL_INTERVAL_SECONDS,
    GAS_LIMIT_BUFFER_PCT,
    ZERO_ADDRESS,
)
from core.exceptions import DecodeError, InvalidNameError, NoAccountError
from core.logging import get_logger
from core.models import LogEntry, Network, TransactionReceipt
from core.validators import namehash, normalize_name, reverse_name
from naming.abi import (
    REGISTRY_RESOLVER,
    RESOLVER_ADDR,
    RESOLVER_NAME,
    RESOLVER_TEXT,
    ContractEvent,
    ContractFunction,
)

logger = get_logger(__name__)


# =============================================================================
# PROTOCOLS
# =============================================================================

@runtime_checkable
class ReadClient(Protocol):
    """Read-only chain access."""

    network: Network

    async def get_text(self, name: str, key: str) -> Optional[str]: ...

    async def get_resolver(self, name: str) -> Optional[str]: ...

    async def get_block_number(self) -> int: ...

    async def get_logs(
        self,
        address: str,
        event: ContractEvent,
        from_block: int,
        to_block: int,
        strict: bool = True,
    ) -> List[LogEntry]: ...

    async def get_primary_name(
        self, address: str, block_number: Optional[int] = None
    ) -> Optional[str]: ...


@runtime_checkable
class WriteClient(Protocol):
    """State-changing chain access through one signing account."""

    network: Network

    @property
    def account(self) -> Optional[str]: ...

    async def submit_contract_call(
        self, address: str, function: ContractFunction, args: Sequence[Any]
    ) -> str: ...

    async def wait_for_receipt(self, tx_hash: str) -> TransactionReceipt: ...


# =============================================================================
# RPC IMPLEMENTATIONS
# =============================================================================

class RpcReadClient:
    """
    ReadClient backed by JSON-RPC.

    Names passed in must already be normalized.
    """

    def __init__(self, provider: RPCProvider, network: Network):
        self.provider = provider
        self.network = network

    async def _call(
        self,
        to: str,
        function: ContractFunction,
        args: Sequence[Any],
        block: Union[str, int] = "latest",
    ) -> tuple:
        response = await self.provider.eth_call(to, function.encode_call(args), block)
        return function.decode_output(response.result)

    async def _resolver_for_node(self, node: bytes, block: Union[str, int] = "latest") -> Optional[str]:
        (resolver,) = await self._call(
            self.network.registry_address, REGISTRY_RESOLVER, [node], block
        )
        if resolver == ZERO_ADDRESS:
            return None
        return resolver

    async def get_resolver(self, name: str) -> Optional[str]:
        """Resolver configured in the registry, or None."""
        return await self._resolver_for_node(namehash(name))

    async def get_text(self, name: str, key: str) -> Optional[str]:
        """Text record value; None when no resolver or the record is empty."""
        node = namehash(name)
        resolver = await self._resolver_for_node(node)
        if resolver is None:
            logger.debug("No resolver for name", extra={"context": {"name": name}})
            return None
        (value,) = await self._call(resolver, RESOLVER_TEXT, [node, key])
        return value or None

    async def get_block_number(self) -> int:
        block_number, latency_ms = await self.provider.get_block_number()
        logger.debug(
            "Fetched block number",
            extra={"context": {"block_number": block_number, "latency_ms": latency_ms}},
        )
        return block_number

    async def get_logs(
        self,
        address: str,
        event: ContractEvent,
        from_block: int,
        to_block: int,
        strict: bool = True,
    ) -> List[LogEntry]:
        """
        Fetch and decode logs for one event.

        With strict=True, logs that do not decode into the full event
        arguments are dropped; otherwise they are kept with args=None.
        """
        raw_logs = await self.provider.get_logs(address, [event.topic], from_block, to_block)

        entries: List[LogEntry] = []
        dropped = 0
        for raw in raw_logs:
            topics = raw.get("topics") or []
            data = raw.get("data") or "0x"
            try:
                args = event.decode_log(topics, data)
            except DecodeError:
                if strict:
                    dropped += 1
                    continue
                args = None

            block_hex = raw.get("blockNumber")
            index_hex = raw.get("logIndex")
            entries.append(LogEntry(
                address=raw.get("address", address),
                block_number=int(block_hex, 16) if block_hex else None,
                transaction_hash=raw.get("transactionHash"),
                log_index=int(index_hex, 16) if index_hex else None,
                topics=list(topics),
                data=data,
                args=args,
            ))

        logger.debug(
            "Fetched logs",
            extra={"context": {
                "event": event.name,
                "from_block": from_block,
                "to_block": to_block,
                "returned": len(entries),
                "dropped": dropped,
            }},
        )
        return entries

    async def get_primary_name(
        self, address: str, block_number: Optional[int] = None
    ) -> Optional[str]:
        """
        Verified primary name for an address, or None.

        The reverse record is only trusted when the name's forward addr()
        at the same block points back at the address.
        """
        block: Union[str, int] = block_number if block_number is not None else "latest"
        node = namehash(reverse_name(address))
        resolver = await self._resolver_for_node(node, block)
        if resolver is None:
            return None
        (name,) = await self._call(resolver, RESOLVER_NAME, [node], block)
        if not name:
            return None

        try:
            normalized = normalize_name(name)
        except InvalidNameError:
            logger.debug(
                "Reverse record is not a valid name",
                extra={"context": {"address": address, "name": name}},
            )
            return None

        forward_node = namehash(normalized)
        forward_resolver = await self._resolver_for_node(forward_node, block)
        if forward_resolver is None:
            return None
        (forward,) = await self._call(forward_resolver, RESOLVER_ADDR, [forward_node], block)
        if forward != to_checksum_address(address):
            logger.debug(
                "Reverse record does not resolve back",
                extra={"context": {"address": address, "name": normalized, "forward": forward}},
            )
            return None
        return normalized


class RpcWriteClient:
    """
    WriteClient that signs locally and broadcasts raw transactions.

    Submits legacy (gasPrice) transactions with a buffered gas estimate.
    """

    def __init__(
        self,
        provider: RPCProvider,
        network: Network,
        signer: Optional[LocalAccount] = None,
        receipt_poll_interval: float = DEFAULT_RECEIPT_POLL_INTERVAL_SECONDS,
    ):
        self.provider = provider
        self.network = network
        self.signer = signer
        self.receipt_poll_interval = receipt_poll_interval

    @property
    def account(self) -> Optional[str]:
        return self.signer.address if self.signer else None

    async def submit_contract_call(
        self, address: str, function: ContractFunction, args: Sequence[Any]
    ) -> str:
        """
        Sign and broadcast a call; returns the transaction hash without waiting.

        Raises:
            NoAccountError: No signer configured
        """
        if self.signer is None:
            raise NoAccountError("No wallet account available")

        to = to_checksum_address(address)
        data = function.encode_call(args)

        nonce = await self.provider.get_transaction_count(self.signer.address)
        gas_estimate = await self.provider.estimate_gas({
            "from": self.signer.address,
            "to": to,
            "data": data,
            "value": "0x0",
        })
        gas_price, _ = await self.provider.get_gas_price()

        tx = {
            "chainId": self.network.chain_id,
            "nonce": nonce,
            "to": to,
            "value": 0,
            "data": data,
            "gas": gas_estimate * GAS_LIMIT_BUFFER_PCT // 100,
            "gasPrice": gas_price,
        }
        signed = self.signer.sign_transaction(tx)
        tx_hash = await self.provider.send_raw_transaction(encode_hex(signed.raw_transaction))

        logger.info(
            "Transaction submitted",
            extra={"context": {
                "function": function.signature,
                "to": to,
                "tx_hash": tx_hash,
                "nonce": nonce,
                "chain_id": self.network.chain_id,
            }},
        )
        return tx_hash

    async def wait_for_receipt(self, tx_hash: str) -> TransactionReceipt:
        """Poll until the transaction is mined."""
        while True:
            raw = await self.provider.get_transaction_receipt(tx_hash)
            if raw is not None:
                receipt = TransactionReceipt.from_rpc(raw)
                logger.info(
                    "Transaction mined",
                    extra={"context": {
                        "tx_hash": tx_hash,
                        "block_number": receipt.block_number,
                        "status": receipt.status.value,
                    }},
                )
                return receipt
            await asyncio.sleep(self.receipt_poll_interval)


# =============================================================================
# FACTORIES
# =============================================================================

def get_network_provider(network: Network) -> RPCProvider:
    """
    Provider for a network from the global registry, registering on first use.

    Providers are shared by chain id and endpoint list, so a custom
    descriptor on an existing chain id keeps its own endpoints.
    """
    urls = list(network.rpc_urls)
    override = get_rpc_override(network.key)
    if override and override not in urls:
        urls.insert(0, override)
    provider = get_provider(network.chain_id, urls)
    if provider is None:
        provider = register_provider(network.chain_id, urls)
    return provider


def get_read_client(network: Union[str, Network, None] = None) -> RpcReadClient:
    """Read client for a network selector (defaults to mainnet)."""
    resolved = resolve_network(network)
    return RpcReadClient(get_network_provider(resolved), resolved)


def get_write_client(
    network: Union[str, Network, None] = None,
    private_key: Optional[str] = None,
) -> RpcWriteClient:
    """
    Write client for a network selector.

    The signer comes from private_key, falling back to ENS_PRIVATE_KEY;
    without either the client has no account.
    """
    resolved = resolve_network(network)
    key = private_key or get_private_key()
    signer = Account.from_key(key) if key else None
    return RpcWriteClient(get_network_provider(resolved), resolved, signer)
