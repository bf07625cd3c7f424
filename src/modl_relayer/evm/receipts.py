"""Decoding of mined receipt logs against the relayer's known interfaces."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from eth_abi import decode as abi_decode
from eth_abi.exceptions import DecodingError
from hexbytes import HexBytes
from web3 import Web3

from ..abi import selector
from ..constants import DEBUG_SENDER_EVENT
from ..types import DecodedLog

logger = logging.getLogger(__name__)


def _is_dynamic(abi_type: str) -> bool:
    # Indexed dynamic values are stored as their keccak hash in the topic.
    return abi_type in ("string", "bytes") or abi_type.endswith("]") or abi_type.startswith("(")


def _normalise(abi_type: str, value: Any) -> Any:
    if abi_type == "address":
        return Web3.to_checksum_address(value)
    return value


class EventDecoder:
    """Decode logs emitted by a single contract interface."""

    def __init__(self, interface: str, abi: Iterable[Mapping[str, Any]]):
        self.interface = interface
        self._events: dict[bytes, Mapping[str, Any]] = {}
        for entry in abi:
            if entry.get("type") != "event" or entry.get("anonymous"):
                continue
            self._events[selector(dict(entry))] = entry

    def decode(self, log: Mapping[str, Any]) -> DecodedLog | None:
        """Decoded entry for ``log``, or ``None`` when it is not one of this interface's events."""

        topics = [HexBytes(topic) for topic in log.get("topics") or []]
        if not topics:
            return None
        entry = self._events.get(bytes(topics[0]))
        if entry is None:
            return None

        inputs = entry.get("inputs", [])
        indexed = [item for item in inputs if item.get("indexed")]
        if len(indexed) != len(topics) - 1:
            return None
        plain = [item for item in inputs if not item.get("indexed")]

        try:
            args: dict[str, Any] = {}
            for item, topic in zip(indexed, topics[1:], strict=True):
                if _is_dynamic(item["type"]):
                    args[item["name"]] = bytes(topic)
                else:
                    (value,) = abi_decode([item["type"]], bytes(topic))
                    args[item["name"]] = _normalise(item["type"], value)

            values = abi_decode([item["type"] for item in plain], bytes(HexBytes(log.get("data") or b"")))
            for item, value in zip(plain, values, strict=True):
                args[item["name"]] = _normalise(item["type"], value)
        except (DecodingError, ValueError, TypeError, OverflowError) as exc:
            logger.debug("Log matched %s.%s but failed to decode: %s", self.interface, entry["name"], exc)
            return None

        address = log.get("address")
        return DecodedLog(
            event=entry["name"],
            interface=self.interface,
            args=args,
            address=Web3.to_checksum_address(address) if address else None,
            log_index=log.get("logIndex"),
        )


class ReceiptInterpreter:
    """Try each decoder in order per log and keep the first match."""

    def __init__(self, decoders: Sequence[EventDecoder]):
        self._decoders = tuple(decoders)

    def interpret(self, receipt: Mapping[str, Any]) -> list[DecodedLog]:
        decoded: list[DecodedLog] = []
        for log in receipt.get("logs") or []:
            entry = self._first_match(log)
            if entry is None:
                logger.debug("No known interface for log %s", log.get("logIndex"))
                continue
            if entry.event == DEBUG_SENDER_EVENT:
                logger.info("%s: %s", DEBUG_SENDER_EVENT, entry.args)
            decoded.append(entry)
        return decoded

    def _first_match(self, log: Mapping[str, Any]) -> DecodedLog | None:
        for decoder in self._decoders:
            entry = decoder.decode(log)
            if entry is not None:
                return entry
        return None
