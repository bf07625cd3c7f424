"""On-chain trust wiring checks run before any relay is simulated."""

from __future__ import annotations

import asyncio
import logging

from web3 import Web3
from web3.exceptions import BadFunctionCallOutput, ContractLogicError

from ..exceptions import ConfigMismatchError, TransportError
from ..types import TrustConfig
from .connections import TRANSPORT_ERRORS, Web3Connections

logger = logging.getLogger(__name__)


class TrustVerifier:
    """Confirm paymaster, hub and deployment manager agree on the forwarder chain.

    Configuration is read fresh on every call; contract owners can rewire
    hub or forwarder addresses between requests.
    """

    def __init__(self, connections: Web3Connections):
        self._connections = connections

    async def read(self, paymaster: str) -> TrustConfig:
        """Read the current trust wiring for ``paymaster`` without judging it."""

        contract = self._connections.paymaster(paymaster)
        hub = self._connections.relay_hub
        manager = self._connections.deployment_manager

        try:
            paymaster_hub, forwarder = await asyncio.gather(
                contract.functions.relayHub().call(),
                contract.functions.trustedForwarder().call(),
            )
            forwarder_trusted = await manager.functions.isTrustedForwarder(forwarder).call()
        except (ContractLogicError, BadFunctionCallOutput) as exc:
            # Contracts that revert or return nothing for these getters are miswired.
            logger.warning("Trust getters failed for paymaster %s: %s", paymaster, exc)
            raise ConfigMismatchError(
                "Trusted contract configuration error",
                details={"error": str(exc), "paymaster": paymaster},
            ) from exc
        except TRANSPORT_ERRORS as exc:
            raise TransportError(
                "Failed to read trusted contract configuration",
                endpoint=paymaster,
                details={"error": str(exc)},
            ) from exc

        return TrustConfig(
            paymaster_relay_hub=Web3.to_checksum_address(paymaster_hub),
            paymaster_trusted_forwarder=Web3.to_checksum_address(forwarder),
            is_trusted_forwarder_on_manager=bool(forwarder_trusted),
            resolved_relay_hub_address=Web3.to_checksum_address(hub.address),
        )

    def problems(self, trust: TrustConfig) -> list[str]:
        """Human-readable list of mismatches; empty when the wiring is sound."""

        issues: list[str] = []
        if not trust.hub_matches:
            issues.append(
                f"paymaster relay hub {trust.paymaster_relay_hub} != "
                f"configured hub {trust.resolved_relay_hub_address}"
            )
        if not trust.is_trusted_forwarder_on_manager:
            issues.append(
                f"forwarder {trust.paymaster_trusted_forwarder} is not trusted by the deployment manager"
            )
        expected = self._connections.config.trusted_forwarder_address
        if expected and expected.lower() != trust.paymaster_trusted_forwarder.lower():
            issues.append(
                f"paymaster forwarder {trust.paymaster_trusted_forwarder} != "
                f"configured forwarder {expected}"
            )
        return issues

    async def verify(self, paymaster: str) -> TrustConfig:
        """Read and check the trust wiring, raising ``ConfigMismatchError`` on any mismatch."""

        trust = await self.read(paymaster)
        logger.debug("Trust config for paymaster %s: %s", paymaster, trust.as_dict())

        issues = self.problems(trust)
        if issues:
            logger.warning("Trusted contract configuration mismatch: %s", "; ".join(issues))
            raise ConfigMismatchError(
                "Trusted contract configuration error",
                details={"issues": issues, "trust": trust.as_dict()},
            )
        return trust
