"""
naming/abi.py - Contract function and event descriptors for ENS.

Only the handful of ENS entry points used by this package are described.
Calldata and return values go through eth_abi; selectors and topics are
keccak256 of the canonical signature.
"""

from dataclasses import dataclass
from typing import Any, Dict, Sequence

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError
from eth_utils import decode_hex, encode_hex, keccak, to_checksum_address

from core.exceptions import DecodeError


def _checksum_addresses(types: Sequence[str], values: Sequence[Any]) -> list:
    return [
        to_checksum_address(v) if t == "address" else v
        for t, v in zip(types, values)
    ]


@dataclass(frozen=True)
class ContractFunction:
    """Function entry point described by name and argument types."""
    name: str
    input_types: tuple[str, ...]
    output_types: tuple[str, ...] = ()

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(self.input_types)})"

    @property
    def selector(self) -> bytes:
        return keccak(text=self.signature)[:4]

    def encode_call(self, args: Sequence[Any]) -> str:
        """
        Encode calldata.

        Returns:
            0x-prefixed hex: selector + ABI-encoded arguments
        """
        if len(args) != len(self.input_types):
            raise ValueError(
                f"{self.signature} takes {len(self.input_types)} arguments, got {len(args)}"
            )
        return encode_hex(self.selector + encode(list(self.input_types), list(args)))

    def decode_output(self, hex_result: str | None) -> tuple:
        """
        Decode eth_call return data.

        Raises:
            DecodeError: Empty or malformed return data
        """
        if not hex_result or hex_result == "0x":
            raise DecodeError(
                f"Empty response from {self.signature}",
                details={"function": self.signature},
            )
        try:
            values = decode(list(self.output_types), decode_hex(hex_result))
        except DecodingError as e:
            raise DecodeError(
                f"Cannot decode {self.signature} response: {e}",
                details={"function": self.signature, "raw": hex_result[:130]},
            ) from e
        return tuple(_checksum_addresses(self.output_types, values))


@dataclass(frozen=True)
class EventInput:
    """Single event parameter."""
    name: str
    type: str
    indexed: bool = False


@dataclass(frozen=True)
class ContractEvent:
    """
    Event described by its parameters.

    Indexed parameters are read from topics[1:], the rest from data.
    Only static types may be indexed.
    """
    name: str
    inputs: tuple[EventInput, ...]

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(i.type for i in self.inputs)})"

    @property
    def topic(self) -> str:
        return encode_hex(keccak(text=self.signature))

    def decode_log(self, topics: Sequence[str], data: str) -> Dict[str, Any]:
        """
        Decode a raw log into named arguments.

        Raises:
            DecodeError: Wrong topic, topic count or data layout
        """
        indexed = [i for i in self.inputs if i.indexed]
        plain = [i for i in self.inputs if not i.indexed]

        if not topics or topics[0].lower() != self.topic:
            raise DecodeError(
                f"Log is not a {self.name} event",
                details={"topic0": topics[0] if topics else None},
            )
        if len(topics) != len(indexed) + 1:
            raise DecodeError(
                f"{self.name} expects {len(indexed)} indexed topics, got {len(topics) - 1}",
                details={"topics": list(topics)},
            )

        try:
            args: Dict[str, Any] = {}
            for param, topic in zip(indexed, topics[1:]):
                (value,) = decode([param.type], decode_hex(topic))
                args[param.name] = value
            values = decode([p.type for p in plain], decode_hex(data or "0x"))
            args.update({p.name: v for p, v in zip(plain, values)})
        except DecodingError as e:
            raise DecodeError(
                f"Cannot decode {self.name} log: {e}",
                details={"event": self.signature},
            ) from e

        for param in self.inputs:
            if param.type == "address":
                args[param.name] = to_checksum_address(args[param.name])
        return args


# =============================================================================
# ENS ENTRY POINTS
# =============================================================================

# Registry
REGISTRY_RESOLVER = ContractFunction("resolver", ("bytes32",), ("address",))

# Registry address record write (registry-level setAddr)
SET_ADDR = ContractFunction("setAddr", ("bytes32", "address"))

# Public resolver
RESOLVER_TEXT = ContractFunction("text", ("bytes32", "string"), ("string",))
RESOLVER_SET_TEXT = ContractFunction("setText", ("bytes32", "string", "string"))
RESOLVER_NAME = ContractFunction("name", ("bytes32",), ("string",))
RESOLVER_ADDR = ContractFunction("addr", ("bytes32",), ("address",))

# .eth registrar controller
NAME_REGISTERED = ContractEvent(
    "NameRegistered",
    (
        EventInput("name", "string"),
        EventInput("label", "bytes32", indexed=True),
        EventInput("owner", "address", indexed=True),
        EventInput("cost", "uint256"),
        EventInput("expires", "uint256"),
    ),
)
