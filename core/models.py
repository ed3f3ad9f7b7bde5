"""
Core data models for ENS records.

All models are transient values rebuilt on every call; nothing here is
persisted.

REGISTRATION CONTRACT:
  name:             "{label}.eth" from the NameRegistered event
  owner:            checksummed address
  block_number:     int
  transaction_hash: 0x-prefixed hex
  cost:             wei paid (int)
  expires:          unix timestamp (int)
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from core.constants import (
    ENS_REGISTRAR_CONTROLLER_ADDRESS,
    ENS_REGISTRY_ADDRESS,
    ReceiptStatus,
)


@dataclass(frozen=True)
class Network:
    """Chain parameters needed to talk to ENS on one network."""
    key: str
    chain_id: int
    rpc_urls: List[str] = field(default_factory=list)
    registry_address: str = ENS_REGISTRY_ADDRESS
    registrar_controller_address: str = ENS_REGISTRAR_CONTROLLER_ADDRESS
    explorer_url: str = ""

    @classmethod
    def from_config(cls, key: str, config: Dict[str, Any]) -> "Network":
        """Build from one entry of config/networks.yaml."""
        return cls(
            key=key,
            chain_id=int(config["chain_id"]),
            rpc_urls=list(config.get("rpc_endpoints", [])),
            registry_address=config.get("registry_address", ENS_REGISTRY_ADDRESS),
            registrar_controller_address=config.get(
                "registrar_controller_address", ENS_REGISTRAR_CONTROLLER_ADDRESS
            ),
            explorer_url=config.get("explorer_url", ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "chain_id": self.chain_id,
            "rpc_urls": list(self.rpc_urls),
            "registry_address": self.registry_address,
            "registrar_controller_address": self.registrar_controller_address,
            "explorer_url": self.explorer_url,
        }


@dataclass
class Registration:
    """Name registration rebuilt from a NameRegistered event."""
    name: str
    owner: str
    block_number: int
    transaction_hash: str
    cost: int
    expires: int
    owner_primary_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "owner": self.owner,
            "block_number": self.block_number,
            "transaction_hash": self.transaction_hash,
            "cost": self.cost,
            "expires": self.expires,
            "owner_primary_name": self.owner_primary_name,
        }


@dataclass
class LogEntry:
    """
    Log returned by eth_getLogs.

    args is None when the log could not be decoded against the
    requested event.
    """
    address: str
    block_number: Optional[int]
    transaction_hash: Optional[str]
    log_index: Optional[int] = None
    topics: List[str] = field(default_factory=list)
    data: str = "0x"
    args: Optional[Dict[str, Any]] = None


@dataclass
class TransactionReceipt:
    """Mined transaction receipt."""
    transaction_hash: str
    block_number: Optional[int]
    status: ReceiptStatus
    gas_used: Optional[int] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return self.status == ReceiptStatus.SUCCESS

    @classmethod
    def from_rpc(cls, raw: Dict[str, Any]) -> "TransactionReceipt":
        """Build from an eth_getTransactionReceipt result."""
        status_hex = raw.get("status")
        if status_hex is None:
            status = ReceiptStatus.UNKNOWN
        elif int(status_hex, 16) == 1:
            status = ReceiptStatus.SUCCESS
        else:
            status = ReceiptStatus.REVERTED

        block_hex = raw.get("blockNumber")
        gas_hex = raw.get("gasUsed")
        return cls(
            transaction_hash=raw["transactionHash"],
            block_number=int(block_hex, 16) if block_hex else None,
            status=status,
            gas_used=int(gas_hex, 16) if gas_hex else None,
            raw=raw,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "transaction_hash": self.transaction_hash,
            "block_number": self.block_number,
            "status": self.status.value,
            "gas_used": self.gas_used,
        }
