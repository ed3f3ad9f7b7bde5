"""
tests/unit/test_abi.py - ENS ABI encoding and log decoding tests.
"""

import pytest
from eth_abi import encode
from eth_utils import encode_hex, keccak

from core.exceptions import DecodeError
from core.validators import namehash
from naming.abi import (
    NAME_REGISTERED,
    REGISTRY_RESOLVER,
    RESOLVER_ADDR,
    RESOLVER_NAME,
    RESOLVER_SET_TEXT,
    RESOLVER_TEXT,
    SET_ADDR,
)

OWNER = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"


class TestSelectors:
    """Known 4-byte selectors."""

    @pytest.mark.parametrize("function,selector", [
        (REGISTRY_RESOLVER, "0178b8bf"),
        (RESOLVER_TEXT, "59d1d43c"),
        (RESOLVER_SET_TEXT, "10f13a8c"),
        (RESOLVER_NAME, "691f3431"),
        (RESOLVER_ADDR, "3b3b57de"),
        (SET_ADDR, "d5fa2b00"),
    ])
    def test_selector(self, function, selector):
        assert function.selector.hex() == selector


class TestEncoding:
    """Test calldata encoding and output decoding."""

    def test_encode_resolver_call(self):
        """selector + one bytes32 word."""
        node = namehash("foo.eth")
        data = REGISTRY_RESOLVER.encode_call([node])

        assert data == "0x0178b8bf" + node.hex()

    def test_encode_set_text_length(self):
        """Dynamic strings are head/tail encoded."""
        data = RESOLVER_SET_TEXT.encode_call([namehash("foo.eth"), "url", ""])

        assert data.startswith("0x10f13a8c")
        # 3 head words + (len + data) for "url" + len word for ""
        assert len(data) == 2 + 8 + 64 * 6

    def test_wrong_arg_count(self):
        with pytest.raises(ValueError):
            SET_ADDR.encode_call([namehash("foo.eth")])

    def test_decode_address_checksummed(self):
        raw = encode_hex(encode(["address"], [OWNER]))
        assert REGISTRY_RESOLVER.decode_output(raw) == (OWNER,)

    def test_decode_string(self):
        raw = encode_hex(encode(["string"], ["https://ens.domains"]))
        assert RESOLVER_TEXT.decode_output(raw) == ("https://ens.domains",)

    @pytest.mark.parametrize("raw", [None, "", "0x"])
    def test_decode_empty_raises(self, raw):
        with pytest.raises(DecodeError):
            RESOLVER_TEXT.decode_output(raw)

    def test_decode_short_raises(self):
        with pytest.raises(DecodeError):
            RESOLVER_TEXT.decode_output("0x" + "00" * 16)


def _registered_log(name="vitalik", cost=5 * 10**15, expires=1_900_000_000):
    label = keccak(text=name)
    return {
        "topics": [
            NAME_REGISTERED.topic,
            encode_hex(label),
            encode_hex(encode(["address"], [OWNER])),
        ],
        "data": encode_hex(encode(["string", "uint256", "uint256"], [name, cost, expires])),
    }


class TestNameRegistered:
    """Test NameRegistered log decoding."""

    def test_signature(self):
        assert NAME_REGISTERED.signature == "NameRegistered(string,bytes32,address,uint256,uint256)"
        assert NAME_REGISTERED.topic == encode_hex(keccak(text=NAME_REGISTERED.signature))

    def test_decode(self):
        log = _registered_log()
        args = NAME_REGISTERED.decode_log(log["topics"], log["data"])

        assert args["name"] == "vitalik"
        assert args["label"] == keccak(text="vitalik")
        assert args["owner"] == OWNER
        assert args["cost"] == 5 * 10**15
        assert args["expires"] == 1_900_000_000

    def test_wrong_topic(self):
        log = _registered_log()
        log["topics"][0] = "0x" + "ab" * 32
        with pytest.raises(DecodeError):
            NAME_REGISTERED.decode_log(log["topics"], log["data"])

    def test_missing_indexed_topic(self):
        log = _registered_log()
        with pytest.raises(DecodeError):
            NAME_REGISTERED.decode_log(log["topics"][:2], log["data"])

    def test_truncated_data(self):
        log = _registered_log()
        with pytest.raises(DecodeError):
            NAME_REGISTERED.decode_log(log["topics"], log["data"][:66])

    def test_no_topics(self):
        with pytest.raises(DecodeError):
            NAME_REGISTERED.decode_log([], "0x")
