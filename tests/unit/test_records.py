"""
tests/unit/test_records.py - Text and address record operation tests.
"""

import pytest

from conftest import OWNER, RESOLVER, SIGNER, TEST_NETWORK, StubWriteClient
from core.constants import ZERO_ADDRESS, ErrorCode, Operation
from core.exceptions import EnsOperationError, RPCError
from core.models import Network, TransactionReceipt
from core.validators import namehash
from naming.records import (
    get_text_record,
    set_address_record,
    set_text_record,
    set_text_record_and_wait,
    submit_address_record,
)


class TestGetTextRecord:
    """Test get_text_record."""

    @pytest.mark.asyncio
    async def test_returns_value(self, chain, read_client):
        """Returns the stored value for a normalized name."""
        chain.texts[(namehash("nick.eth"), "url")] = "https://ens.domains"

        value = await get_text_record("Nick.ETH", "url", client=read_client)

        assert value == "https://ens.domains"
        assert chain.calls == [("get_text", ("nick.eth", "url"))]

    @pytest.mark.asyncio
    async def test_unset_returns_none(self, read_client):
        """Unset record is None, not empty string."""
        value = await get_text_record("nick.eth", "avatar", client=read_client)
        assert value is None

    @pytest.mark.asyncio
    async def test_invalid_name_short_circuits(self, chain, read_client):
        """Invalid name fails before any client call."""
        with pytest.raises(EnsOperationError) as exc_info:
            await get_text_record("", "url", client=read_client)

        assert exc_info.value.code == ErrorCode.INVALID_NAME
        assert exc_info.value.operation == Operation.GET_TEXT_RECORD
        assert chain.calls == []

    @pytest.mark.asyncio
    async def test_transport_error_wrapped_as_general(self, chain, read_client):
        """Transport failures carry the General tag and original message."""
        chain.fail_with = RPCError("All RPC endpoints failed for chain 1337: boom")

        with pytest.raises(EnsOperationError) as exc_info:
            await get_text_record("nick.eth", "url", client=read_client)

        error = exc_info.value
        assert error.code == ErrorCode.GENERAL
        assert error.tag == "GetTextRecord_General"
        assert "boom" in error.reason
        assert 'get ENS text record "url" for "nick.eth"' in str(error)
        assert isinstance(error.__cause__, RPCError)


class TestSetTextRecord:
    """Test set_text_record and set_text_record_and_wait."""

    @pytest.mark.asyncio
    async def test_submits_set_text_on_resolver(self, chain, read_client, wallet):
        """Encodes (namehash, key, value) against the name's resolver."""
        chain.resolvers["nick.eth"] = RESOLVER

        tx_hash = await set_text_record(
            "nick.eth", "url", "https://ens.domains", client=read_client, wallet=wallet
        )

        assert tx_hash.startswith("0x")
        assert wallet.submitted == [(
            RESOLVER,
            "setText(bytes32,string,string)",
            [namehash("nick.eth"), "url", "https://ens.domains"],
        )]
        # Hash only; no receipt wait
        assert "wait_for_receipt" not in chain.methods_called()

    @pytest.mark.asyncio
    async def test_none_value_writes_empty_string(self, chain, read_client, wallet):
        """Clearing sends "" rather than None."""
        chain.resolvers["nick.eth"] = RESOLVER

        await set_text_record("nick.eth", "url", None, client=read_client, wallet=wallet)

        _, _, args = wallet.submitted[0]
        assert args[2] == ""
        assert None not in args

    @pytest.mark.asyncio
    async def test_no_account(self, chain, read_client, wallet_without_account):
        """Missing account fails with NoAccount before any contract call."""
        chain.resolvers["nick.eth"] = RESOLVER

        with pytest.raises(EnsOperationError) as exc_info:
            await set_text_record(
                "nick.eth", "url", "x", client=read_client, wallet=wallet_without_account
            )

        assert exc_info.value.code == ErrorCode.NO_ACCOUNT
        assert exc_info.value.tag == "SetTextRecord_NoAccount"
        assert "submit_contract_call" not in chain.methods_called()

    @pytest.mark.asyncio
    async def test_resolver_not_found(self, chain, read_client, wallet):
        """Name without a resolver fails with ResolverNotFound."""
        with pytest.raises(EnsOperationError) as exc_info:
            await set_text_record("nick.eth", "url", "x", client=read_client, wallet=wallet)

        assert exc_info.value.code == ErrorCode.RESOLVER_NOT_FOUND
        assert wallet.submitted == []

    @pytest.mark.asyncio
    async def test_malformed_resolver(self, chain, read_client, wallet):
        """Resolver that is not a 0x address is rejected."""
        chain.resolvers["nick.eth"] = "not-an-address"

        with pytest.raises(EnsOperationError) as exc_info:
            await set_text_record("nick.eth", "url", "x", client=read_client, wallet=wallet)

        assert exc_info.value.code == ErrorCode.RESOLVER_NOT_FOUND

    @pytest.mark.asyncio
    async def test_invalid_name_short_circuits(self, chain, read_client, wallet):
        """Invalid name fails before any client call."""
        with pytest.raises(EnsOperationError) as exc_info:
            await set_text_record("foo..eth", "url", "x", client=read_client, wallet=wallet)

        assert exc_info.value.code == ErrorCode.INVALID_NAME
        assert chain.calls == []

    @pytest.mark.asyncio
    async def test_written_value_reads_back(self, chain, read_client, wallet):
        """get_text_record returns what set_text_record wrote."""
        chain.resolvers["nick.eth"] = RESOLVER

        await set_text_record("Nick.eth", "com.twitter", "nicksdjohnson", client=read_client, wallet=wallet)
        value = await get_text_record("nick.eth", "com.twitter", client=read_client)

        assert value == "nicksdjohnson"

    @pytest.mark.asyncio
    async def test_cleared_value_reads_back_as_none(self, chain, read_client, wallet):
        """Clearing a record makes it read as not set."""
        chain.resolvers["nick.eth"] = RESOLVER
        chain.texts[(namehash("nick.eth"), "url")] = "https://old.example"

        await set_text_record("nick.eth", "url", None, client=read_client, wallet=wallet)

        assert await get_text_record("nick.eth", "url", client=read_client) is None

    @pytest.mark.asyncio
    async def test_and_wait_returns_receipt(self, chain, read_client, wallet):
        """Confirming variant waits for and returns the receipt."""
        chain.resolvers["nick.eth"] = RESOLVER

        receipt = await set_text_record_and_wait(
            "nick.eth", "url", "x", client=read_client, wallet=wallet
        )

        assert isinstance(receipt, TransactionReceipt)
        assert receipt.succeeded
        assert chain.methods_called()[-1] == "wait_for_receipt"


class TestSetAddressRecord:
    """Test set_address_record and submit_address_record."""

    @pytest.mark.asyncio
    async def test_submits_to_registry_and_waits(self, chain, wallet):
        """Calls setAddr on the registry and returns the mined receipt."""
        receipt = await set_address_record("nick.eth", OWNER, wallet=wallet)

        assert isinstance(receipt, TransactionReceipt)
        assert wallet.submitted == [(
            TEST_NETWORK.registry_address,
            "setAddr(bytes32,address)",
            [namehash("nick.eth"), OWNER],
        )]
        assert chain.methods_called() == ["submit_contract_call", "wait_for_receipt"]

    @pytest.mark.asyncio
    async def test_lowercase_address_is_checksummed(self, wallet):
        """Lowercase input is submitted in checksummed form."""
        await set_address_record("nick.eth", OWNER.lower(), wallet=wallet)

        _, _, args = wallet.submitted[0]
        assert args[1] == OWNER

    @pytest.mark.asyncio
    async def test_none_writes_zero_address(self, wallet):
        """Clearing sends the zero address, never None."""
        await set_address_record("nick.eth", None, wallet=wallet)

        _, _, args = wallet.submitted[0]
        assert args[1] == ZERO_ADDRESS

    @pytest.mark.asyncio
    @pytest.mark.parametrize("address", [
        "0x123",
        "not-an-address",
        "",
        # Bad checksum (case flipped)
        "0x5AAeb6053F3E94C9b9A09f33669435E7Ef1BeAed",
    ])
    async def test_invalid_address_before_network(self, chain, wallet, address):
        """Invalid address fails with InvalidAddress and no calls."""
        with pytest.raises(EnsOperationError) as exc_info:
            await set_address_record("nick.eth", address, wallet=wallet)

        assert exc_info.value.code == ErrorCode.INVALID_ADDRESS
        assert exc_info.value.tag == "SetAddressRecord_InvalidAddress"
        assert chain.calls == []

    @pytest.mark.asyncio
    async def test_no_account(self, chain, wallet_without_account):
        """Missing account fails with NoAccount and no calls."""
        with pytest.raises(EnsOperationError) as exc_info:
            await set_address_record("nick.eth", OWNER, wallet=wallet_without_account)

        assert exc_info.value.code == ErrorCode.NO_ACCOUNT
        assert chain.calls == []

    @pytest.mark.asyncio
    async def test_invalid_name_short_circuits(self, chain, wallet):
        """Invalid name fails before any client call."""
        with pytest.raises(EnsOperationError) as exc_info:
            await set_address_record("   ", OWNER, wallet=wallet)

        assert exc_info.value.code == ErrorCode.INVALID_NAME
        assert chain.calls == []

    @pytest.mark.asyncio
    async def test_registry_override(self, chain):
        """Network descriptor overrides the registry address."""
        staging = Network(
            key="staging",
            chain_id=31337,
            registry_address=SIGNER,
        )
        wallet = StubWriteClient(chain, network=staging)

        await set_address_record("nick.eth", OWNER, wallet=wallet)

        assert wallet.submitted[0][0] == SIGNER

    @pytest.mark.asyncio
    async def test_submit_returns_hash_only(self, chain, wallet):
        """Submit variant returns the hash without waiting."""
        tx_hash = await submit_address_record("nick.eth", OWNER, wallet=wallet)

        assert tx_hash.startswith("0x")
        assert "wait_for_receipt" not in chain.methods_called()

    @pytest.mark.asyncio
    async def test_submit_failure_wrapped(self, chain, wallet):
        """Chain failures are wrapped with the SetAddressRecord site."""
        chain.fail_with = RuntimeError("execution reverted")

        with pytest.raises(EnsOperationError) as exc_info:
            await set_address_record("nick.eth", OWNER, wallet=wallet)

        assert exc_info.value.tag == "SetAddressRecord_General"
        assert exc_info.value.reason == "execution reverted"
