"""Pre-flight static execution of relay calls."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from hexbytes import HexBytes
from web3.exceptions import ContractLogicError

from ..exceptions import TransportError
from ..types import ProbeResult, RelayRequest, SimulationOutcome, TrustConfig
from ..utils import to_jsonable
from .connections import TRANSPORT_ERRORS, Web3Connections
from .errors import ErrorDecoder, revert_info_from_exception

logger = logging.getLogger(__name__)


class Simulator:
    """Run ``relayCall`` as an ``eth_call`` from the relayer before paying for it."""

    def __init__(self, connections: Web3Connections, decoder: ErrorDecoder, *, gas_cap: int):
        self._connections = connections
        self._decoder = decoder
        self._gas_cap = gas_cap

    async def run(
        self,
        request: RelayRequest,
        calldata: str,
        *,
        trust: TrustConfig | None = None,
    ) -> SimulationOutcome:
        hub = self._connections.relay_hub
        call = hub.functions.relayCall(
            request.paymaster,
            request.target,
            HexBytes(calldata),
            request.gas_limit,
            request.user,
        )

        try:
            await call.call({"from": self._connections.relayer_address, "gas": self._gas_cap})
        except ContractLogicError as exc:
            reason = self._decoder.describe(revert_info_from_exception(exc))
            logger.warning("Simulation of relayCall reverted: %s", reason)
            probes = await self.probe(request, calldata, trust=trust)
            return SimulationOutcome.failed(reason, probes)
        except TRANSPORT_ERRORS as exc:
            raise TransportError(
                "Simulation call failed",
                endpoint=hub.address,
                details={"error": str(exc)},
            ) from exc

        logger.info("Simulation passed for target=%s user=%s", request.target, request.user)
        return SimulationOutcome.passed()

    async def probe(
        self,
        request: RelayRequest,
        calldata: str,
        *,
        trust: TrustConfig | None = None,
    ) -> tuple[ProbeResult, ...]:
        """Auxiliary read-only calls that help an operator locate a revert.

        Runs only after the primary failure is known; nothing here can change
        the request's outcome, so every failure is logged and recorded.
        """

        hub_address = self._connections.relay_hub.address
        paymaster = self._connections.paymaster(request.paymaster)
        forwarder = trust.paymaster_trusted_forwarder if trust else hub_address

        checks: list[tuple[str, Callable[[], Awaitable[Any]]]] = [
            (
                "paymaster.preRelayedCall",
                lambda: paymaster.functions.preRelayedCall(request.user, request.gas_limit).call(
                    {"from": hub_address}
                ),
            ),
            (
                "target",
                lambda: self._connections.call_raw(
                    {"to": request.target, "from": forwarder, "data": calldata}
                ),
            ),
        ]

        results: list[ProbeResult] = []
        for name, check in checks:
            try:
                value = await check()
            except ContractLogicError as exc:
                detail = self._decoder.describe(revert_info_from_exception(exc))
                logger.warning("Diagnostic probe %s reverted: %s", name, detail)
                results.append(ProbeResult(name=name, success=False, detail=detail))
                continue
            except (*TRANSPORT_ERRORS, ValueError, TypeError) as exc:
                logger.warning("Diagnostic probe %s could not run: %s", name, exc)
                results.append(ProbeResult(name=name, success=False, detail=str(exc)))
                continue

            detail = str(to_jsonable(value))
            logger.info("Diagnostic probe %s succeeded: %s", name, detail)
            results.append(ProbeResult(name=name, success=True, detail=detail))
        return tuple(results)
