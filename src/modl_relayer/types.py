"""Type definitions and data models for the MODL relayer."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from web3 import Web3

from .constants import MAX_GAS_LIMIT
from .exceptions import InvalidRequestError
from .utils import to_jsonable

RELAY_REQUEST_FIELDS = ("paymaster", "target", "encodedData", "gasLimit", "user")


def _require_address(body: Mapping[str, Any], name: str) -> str:
    value = body[name]
    if not isinstance(value, str) or not Web3.is_address(value):
        raise InvalidRequestError(f"Field '{name}' must be an address", field=name)
    return Web3.to_checksum_address(value)


def _require_hex(body: Mapping[str, Any], name: str) -> str:
    value = body[name]
    if not isinstance(value, str) or not value.startswith("0x"):
        raise InvalidRequestError(f"Field '{name}' must be a 0x-prefixed hex string", field=name)
    try:
        bytes.fromhex(value[2:])
    except ValueError as exc:
        raise InvalidRequestError(
            f"Field '{name}' is not valid hex", field=name, details={"error": str(exc)}
        ) from exc
    return value.lower()


def _require_positive_int(body: Mapping[str, Any], name: str) -> int:
    value = body[name]
    # bool is an int subclass; JSON true/false must not pass as a gas limit.
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidRequestError(f"Field '{name}' must be an integer", field=name)
    if value <= 0:
        raise InvalidRequestError(f"Field '{name}' must be positive", field=name)
    if value > MAX_GAS_LIMIT:
        raise InvalidRequestError(f"Field '{name}' is out of range", field=name)
    return value


@dataclass(frozen=True)
class RelayRequest:
    """A user-authorized call the relayer is asked to sponsor."""

    paymaster: str
    target: str
    encoded_data: str
    gas_limit: int
    user: str

    @classmethod
    def from_dict(cls, body: Any) -> "RelayRequest":
        """Validate an inbound JSON body and build a request from it.

        Raises:
            InvalidRequestError: if the body is not an object, a field is
                absent, or any field has the wrong shape.
        """

        if not isinstance(body, Mapping):
            raise InvalidRequestError("Request body must be a JSON object")

        missing = [name for name in RELAY_REQUEST_FIELDS if body.get(name) in (None, "")]
        if missing:
            raise InvalidRequestError(
                f"Missing required fields: {', '.join(missing)}",
                details={"missing": missing},
            )

        return cls(
            paymaster=_require_address(body, "paymaster"),
            target=_require_address(body, "target"),
            encoded_data=_require_hex(body, "encodedData"),
            gas_limit=_require_positive_int(body, "gasLimit"),
            user=_require_address(body, "user"),
        )

    def summary(self) -> dict[str, Any]:
        """Loggable view of the request with calldata cut to its selector."""

        return {
            "paymaster": self.paymaster,
            "target": self.target,
            "user": self.user,
            "gasLimit": self.gas_limit,
            "data": self.encoded_data[:10] + "...",
        }


@dataclass(frozen=True)
class TrustConfig:
    """On-chain trust wiring read for a single relay request."""

    paymaster_relay_hub: str
    paymaster_trusted_forwarder: str
    is_trusted_forwarder_on_manager: bool
    resolved_relay_hub_address: str

    @property
    def hub_matches(self) -> bool:
        return self.paymaster_relay_hub.lower() == self.resolved_relay_hub_address.lower()

    def as_dict(self) -> dict[str, Any]:
        return {
            "paymasterRelayHub": self.paymaster_relay_hub,
            "paymasterTrustedForwarder": self.paymaster_trusted_forwarder,
            "isTrustedForwarderOnManager": self.is_trusted_forwarder_on_manager,
            "resolvedRelayHubAddress": self.resolved_relay_hub_address,
        }


@dataclass(frozen=True)
class RevertInfo:
    """Raw material describing a failed execution, fed to the error decoder."""

    data: bytes | None = None
    reason: str | None = None
    message: str | None = None


@dataclass(frozen=True)
class ProbeResult:
    """Outcome of an auxiliary diagnostic call made after a failed simulation."""

    name: str
    success: bool
    detail: str


@dataclass(frozen=True)
class SimulationOutcome:
    """Result of the pre-flight static call."""

    success: bool
    reason: str | None = None
    probes: tuple[ProbeResult, ...] = ()

    @classmethod
    def passed(cls) -> "SimulationOutcome":
        return cls(success=True)

    @classmethod
    def failed(cls, reason: str, probes: tuple[ProbeResult, ...] = ()) -> "SimulationOutcome":
        return cls(success=False, reason=reason, probes=probes)


@dataclass(frozen=True)
class DecodedLog:
    """A receipt log matched against one of the known contract interfaces."""

    event: str
    interface: str
    args: dict[str, Any]
    address: str | None = None
    log_index: int | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "event": self.event,
            "interface": self.interface,
            "address": self.address,
            "logIndex": self.log_index,
            "args": to_jsonable(self.args),
        }


@dataclass(frozen=True)
class RelayReceipt:
    """Terminal artifact of a successfully relayed request."""

    tx_hash: str
    success: bool
    gas_used: int
    block_number: int | None = None
    logs: list[DecodedLog] = field(default_factory=list)

    def to_response(self) -> dict[str, Any]:
        return {
            "txHash": self.tx_hash,
            "gasUsed": self.gas_used,
            "logs": [log.as_dict() for log in self.logs],
        }
