"""Revert payload decoding shared by simulation and dispatch."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from eth_abi import decode as abi_decode
from eth_abi.exceptions import DecodingError, ParseError
from eth_abi.grammar import parse as parse_abi_type
from hexbytes import HexBytes
from web3 import Web3
from web3.exceptions import ContractLogicError

from ..abi import input_types, selector
from ..constants import ERROR_STRING_SELECTOR, FALLBACK_REVERT_MESSAGE, PANIC_SELECTOR
from ..types import RevertInfo

logger = logging.getLogger(__name__)

_REVERT_PREFIX = "execution reverted: "


def revert_info_from_exception(exc: ContractLogicError) -> RevertInfo:
    """Extract revert data and reason from a web3 contract-logic failure."""

    data: bytes | None = None
    raw = exc.data
    if isinstance(raw, bytes | bytearray):
        data = bytes(raw)
    elif isinstance(raw, str) and raw.startswith("0x"):
        try:
            data = bytes(HexBytes(raw))
        except ValueError:
            data = None

    message = exc.message if isinstance(exc.message, str) else str(exc)
    reason: str | None = None
    if message.startswith(_REVERT_PREFIX):
        reason = message[len(_REVERT_PREFIX) :] or None
    elif message and message != raw and message != "execution reverted":
        reason = message

    return RevertInfo(data=data or None, reason=reason, message=message or None)


def _format_value(abi_type: str, value: Any) -> str:
    if abi_type == "address":
        return Web3.to_checksum_address(value)
    if isinstance(value, bytes | bytearray):
        return HexBytes(value).to_0x_hex()
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, list | tuple):
        parsed = parse_abi_type(abi_type)
        if parsed.is_array:
            item_type = parsed.item_type.to_type_str()
            return "[" + ", ".join(_format_value(item_type, item) for item in value) + "]"
        components = [component.to_type_str() for component in parsed.components]
        return "(" + ", ".join(
            _format_value(t, v) for t, v in zip(components, value, strict=True)
        ) + ")"
    return str(value)


class ErrorDecoder:
    """Turn raw revert data into ``ErrorName(arg1, arg2)`` using the hub's ABI."""

    def __init__(self, abi: Iterable[Mapping[str, Any]]):
        self._errors: dict[bytes, tuple[str, list[str]]] = {}
        for entry in abi:
            if entry.get("type") != "error":
                continue
            self._errors[selector(dict(entry))[:4]] = (entry["name"], input_types(dict(entry)))

    def decode_data(self, data: bytes | None) -> str | None:
        """Decode a custom error or Solidity builtin; ``None`` when unrecognised."""

        if not data or len(data) < 4:
            return None

        head, payload = bytes(data[:4]), bytes(data[4:])
        try:
            if head == ERROR_STRING_SELECTOR:
                (text,) = abi_decode(["string"], payload)
                return text or None
            if head == PANIC_SELECTOR:
                (code,) = abi_decode(["uint256"], payload)
                return f"Panic({hex(code)})"

            known = self._errors.get(head)
            if known is None:
                return None
            name, types = known
            values = abi_decode(types, payload)
            args = ", ".join(_format_value(t, v) for t, v in zip(types, values, strict=True))
        except (DecodingError, ParseError, ValueError, TypeError, OverflowError) as exc:
            logger.debug("Revert payload %s did not decode: %s", head.hex(), exc)
            return None

        return f"{name}({args})"

    def describe(self, info: RevertInfo) -> str:
        """Best-effort, always non-empty description of a failure.

        Structured decode first, then the node's revert reason, then the
        generic message, then a fixed fallback.
        """

        decoded = self.decode_data(info.data)
        if decoded:
            return decoded
        if info.reason:
            return info.reason
        if info.message:
            return info.message
        return FALLBACK_REVERT_MESSAGE
