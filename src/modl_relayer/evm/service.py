"""Relay pipeline: compose, verify trust, simulate, dispatch, interpret."""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any

from web3 import Web3
from web3.exceptions import ContractLogicError

from ..constants import ContractInterface
from ..exceptions import ConfigMismatchError, SimulationRevertedError, TransportError
from ..types import RelayReceipt, RelayRequest, TrustConfig
from ..utils import compose_calldata
from .config import RelayerConfig
from .connections import TRANSPORT_ERRORS, Web3Connections
from .errors import ErrorDecoder
from .receipts import EventDecoder, ReceiptInterpreter
from .simulation import Simulator
from .trust import TrustVerifier
from .transactions import TransactionDispatcher

logger = logging.getLogger(__name__)


class RelayService:
    """Sponsor user-authorized calls through the relay hub.

    One instance serves every HTTP request; it holds the shared connections
    and no per-request state.
    """

    def __init__(self, config: RelayerConfig, connections: Web3Connections | None = None) -> None:
        self.config = config
        self._connections = connections or Web3Connections(config)

        # Reverts can originate in any of the three contracts along the relay path.
        self.decoder = ErrorDecoder(
            [*config.relay_hub_abi, *config.paymaster_abi, *config.deployment_manager_abi]
        )
        self.trust = TrustVerifier(self._connections)
        self.simulator = Simulator(
            self._connections, self.decoder, gas_cap=config.simulation_gas_cap
        )
        self.dispatcher = TransactionDispatcher(
            self._connections,
            self.decoder,
            gas_buffer=config.gas_buffer,
            receipt_timeout=config.receipt_timeout,
        )
        self.interpreter = ReceiptInterpreter(
            [
                EventDecoder(ContractInterface.RELAY_HUB.value, config.relay_hub_abi),
                EventDecoder(ContractInterface.PAYMASTER.value, config.paymaster_abi),
                EventDecoder(
                    ContractInterface.DEPLOYMENT_MANAGER.value, config.deployment_manager_abi
                ),
            ]
        )

    # ------------------------------------------------------------------
    # Connection management
    # ------------------------------------------------------------------
    async def connect(self) -> None:
        if not self._connections.is_connected():
            await self._connections.connect()

    async def disconnect(self) -> None:
        await self._connections.disconnect()

    @property
    def connections(self) -> Web3Connections:
        return self._connections

    # ------------------------------------------------------------------
    # Relay
    # ------------------------------------------------------------------
    async def relay(self, request: RelayRequest) -> RelayReceipt:
        """Run the full pipeline for one request.

        Nothing is broadcast unless both the trust check and the simulation
        pass; every failure surfaces as a ``RelayerError`` subclass.
        """

        logger.info("Incoming relay request: %s", request.summary())
        calldata = compose_calldata(request.encoded_data, request.user)

        trust = await self.trust.verify(request.paymaster)

        outcome = await self.simulator.run(request, calldata, trust=trust)
        if not outcome.success:
            raise SimulationRevertedError(
                outcome.reason or "Simulation failed",
                details={"probes": [asdict(probe) for probe in outcome.probes]},
            )

        tx_hash, receipt = await self.dispatcher.relay(request, calldata)
        logs = self.interpreter.interpret(receipt)

        return RelayReceipt(
            tx_hash=tx_hash,
            success=True,
            gas_used=int(receipt["gasUsed"]),
            block_number=receipt.get("blockNumber"),
            logs=logs,
        )

    # ------------------------------------------------------------------
    # Hub funding and diagnostics
    # ------------------------------------------------------------------
    async def paymaster_deposit(self, paymaster: str) -> int:
        """Balance the hub holds on behalf of ``paymaster``, in wei."""

        hub = self._connections.relay_hub
        try:
            return int(await hub.functions.deposits(Web3.to_checksum_address(paymaster)).call())
        except (ContractLogicError, *TRANSPORT_ERRORS) as exc:
            raise TransportError(
                "Failed to read paymaster deposit",
                endpoint=hub.address,
                details={"error": str(exc), "paymaster": paymaster},
            ) from exc

    async def deposit(self, value_wei: int) -> str:
        """Fund the hub from the relayer account and wait for inclusion."""

        function = self._connections.relay_hub.functions.deposit()
        tx_hash, _receipt = await self.dispatcher.send(function, action="deposit", value=value_wei)
        return tx_hash

    async def status(self, paymaster: str) -> dict[str, Any]:
        """Read-only snapshot of trust wiring and deposit for ``paymaster``."""

        trust: TrustConfig | None = None
        issues: list[str]
        try:
            trust = await self.trust.read(paymaster)
            issues = self.trust.problems(trust)
        except ConfigMismatchError as exc:
            issues = [str(exc.details.get("error", exc.message))]

        return {
            "relayer": self._connections.relayer_address,
            "relayHub": self._connections.relay_hub.address,
            "chainId": self._connections.chain_id,
            "paymaster": Web3.to_checksum_address(paymaster),
            "trust": trust.as_dict() if trust else None,
            "trusted": not issues,
            "issues": issues,
            "paymasterDeposit": str(await self.paymaster_deposit(paymaster)),
        }
