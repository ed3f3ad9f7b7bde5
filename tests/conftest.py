"""
Pytest configuration and fixtures for ENS records tests.

The stub clients implement ReadClient / WriteClient over an in-memory
chain so no test touches the network. Every call is recorded on
StubChain.calls.
"""

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from core.constants import ReceiptStatus  # noqa: E402
from core.models import LogEntry, Network, TransactionReceipt  # noqa: E402
from core.validators import namehash  # noqa: E402
from naming.abi import RESOLVER_SET_TEXT, SET_ADDR  # noqa: E402

OWNER = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
RESOLVER = "0xdbF03B407c01E7cD3CBea99509d93f8DDDC8C6FB"
SIGNER = "0xfB6916095ca1df60bB79Ce92cE3Ea74c37c5d359"

TEST_NETWORK = Network(
    key="testnet",
    chain_id=1337,
    rpc_urls=["http://localhost:8545"],
)


def pytest_configure(config):
    """Configure pytest."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )


@dataclass
class StubChain:
    """In-memory ENS state shared by the stub clients."""
    head: int = 20_000_000
    resolvers: Dict[str, str] = field(default_factory=dict)
    texts: Dict[Tuple[bytes, str], str] = field(default_factory=dict)
    addresses: Dict[bytes, str] = field(default_factory=dict)
    logs: List[LogEntry] = field(default_factory=list)
    primary_names: Dict[str, Any] = field(default_factory=dict)
    calls: List[Tuple[str, tuple]] = field(default_factory=list)
    fail_with: Optional[Exception] = None

    def record(self, method: str, *args: Any) -> None:
        self.calls.append((method, args))
        if self.fail_with is not None:
            raise self.fail_with

    def methods_called(self) -> List[str]:
        return [method for method, _ in self.calls]


class StubReadClient:
    def __init__(self, chain: StubChain, network: Network = TEST_NETWORK):
        self.chain = chain
        self.network = network

    async def get_text(self, name: str, key: str) -> Optional[str]:
        self.chain.record("get_text", name, key)
        return self.chain.texts.get((namehash(name), key)) or None

    async def get_resolver(self, name: str) -> Optional[str]:
        self.chain.record("get_resolver", name)
        return self.chain.resolvers.get(name)

    async def get_block_number(self) -> int:
        self.chain.record("get_block_number")
        return self.chain.head

    async def get_logs(self, address, event, from_block, to_block, strict=True) -> List[LogEntry]:
        self.chain.record("get_logs", address, event.name, from_block, to_block, strict)
        return list(self.chain.logs)

    async def get_primary_name(self, address: str, block_number: Optional[int] = None) -> Optional[str]:
        self.chain.record("get_primary_name", address, block_number)
        result = self.chain.primary_names.get(address)
        if isinstance(result, Exception):
            raise result
        return result


class StubWriteClient:
    def __init__(
        self,
        chain: StubChain,
        account: Optional[str] = SIGNER,
        network: Network = TEST_NETWORK,
    ):
        self.chain = chain
        self._account = account
        self.network = network
        self.submitted: List[Tuple[str, str, list]] = []

    @property
    def account(self) -> Optional[str]:
        return self._account

    async def submit_contract_call(self, address: str, function, args: Sequence[Any]) -> str:
        self.chain.record("submit_contract_call", address, function.signature, tuple(args))
        self.submitted.append((address, function.signature, list(args)))
        if function == RESOLVER_SET_TEXT:
            node, key, value = args
            self.chain.texts[(node, key)] = value
        elif function == SET_ADDR:
            node, addr = args
            self.chain.addresses[node] = addr
        return "0x" + f"{len(self.submitted):064x}"

    async def wait_for_receipt(self, tx_hash: str) -> TransactionReceipt:
        self.chain.record("wait_for_receipt", tx_hash)
        return TransactionReceipt(
            transaction_hash=tx_hash,
            block_number=self.chain.head + 1,
            status=ReceiptStatus.SUCCESS,
            gas_used=50_000,
        )


def make_registration_log(
    index: int,
    name: Optional[str] = None,
    owner: Optional[str] = OWNER,
    block_number: Optional[int] = None,
    transaction_hash: Optional[str] = "default",
) -> LogEntry:
    """Decoded NameRegistered log; index orders logs chronologically."""
    args = {
        "name": name if name is not None else f"name{index}",
        "label": b"\x00" * 32,
        "owner": owner,
        "cost": 10**15 * (index + 1),
        "expires": 1_800_000_000 + index,
    }
    return LogEntry(
        address=TEST_NETWORK.registrar_controller_address,
        block_number=block_number if block_number is not None else 19_995_000 + index,
        transaction_hash=(
            "0x" + f"{index + 1:064x}" if transaction_hash == "default" else transaction_hash
        ),
        log_index=0,
        args=args,
    )


@pytest.fixture
def chain() -> StubChain:
    return StubChain()


@pytest.fixture
def read_client(chain) -> StubReadClient:
    return StubReadClient(chain)


@pytest.fixture
def wallet(chain) -> StubWriteClient:
    return StubWriteClient(chain)


@pytest.fixture
def wallet_without_account(chain) -> StubWriteClient:
    return StubWriteClient(chain, account=None)


@pytest.fixture
def registration_log():
    return make_registration_log
