"""Utility functions for the MODL relayer."""

from collections.abc import Mapping, Sequence
from typing import Any

from eth_abi import encode as abi_encode
from hexbytes import HexBytes
from web3 import Web3

from .constants import FORWARDER_EXECUTE_SIGNATURE


def compose_calldata(encoded_data: str, user: str) -> str:
    """Append the ABI-encoded ``user`` word to ``encoded_data``.

    Targets behind a trusted forwarder read the original caller from the
    last 32 bytes of calldata (ERC-2771), so the user does not need to be an
    explicit argument of the target function.
    """

    user_word = abi_encode(["address"], [Web3.to_checksum_address(user)])
    return encoded_data + user_word.hex()


def effective_gas_limit(gas_limit: int, buffer: int) -> int:
    """Gas limit for the outer hub transaction."""
    return gas_limit + max(buffer, 0)


def encode_forwarder_execute(target: str, data: str | bytes, user: str) -> str:
    """Encode ``execute(target, data, user)`` calldata for the trusted forwarder."""

    payload = HexBytes(data)
    selector = Web3.keccak(text=FORWARDER_EXECUTE_SIGNATURE)[:4]
    args = abi_encode(
        ["address", "bytes", "address"],
        [Web3.to_checksum_address(target), bytes(payload), Web3.to_checksum_address(user)],
    )
    return HexBytes(selector + args).to_0x_hex()


def to_jsonable(value: Any) -> Any:
    """Convert web3 structures (AttributeDict, HexBytes, tuples) into JSON-friendly ones."""
    if value is None:
        return None
    if isinstance(value, Mapping):
        return {key: to_jsonable(item) for key, item in value.items()}
    if isinstance(value, Sequence) and not isinstance(value, str | bytes | bytearray | HexBytes):
        return [to_jsonable(item) for item in value]
    if isinstance(value, bytes | bytearray | HexBytes):
        return HexBytes(value).to_0x_hex()
    return value
