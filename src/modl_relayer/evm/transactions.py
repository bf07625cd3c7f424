"""Transaction dispatch helpers for the relayer."""

from __future__ import annotations

import logging
from typing import Any

from hexbytes import HexBytes
from web3.contract.async_contract import AsyncContractFunction
from web3.exceptions import ContractLogicError, TimeExhausted
from web3.types import TxReceipt

from ..exceptions import (
    ExecutionRevertedError,
    FeeDataUnavailableError,
    InclusionTimeoutError,
    InsufficientFundsError,
    TransportError,
)
from ..types import RelayRequest
from ..utils import effective_gas_limit
from .connections import TRANSPORT_ERRORS, Web3Connections
from .errors import ErrorDecoder, revert_info_from_exception

logger = logging.getLogger(__name__)


class TransactionDispatcher:
    """Encapsulate gas budgeting, submission and receipt handling.

    Nonce assignment is left to the signing middleware installed by
    ``Web3Connections``; nothing here retries.
    """

    def __init__(
        self,
        connections: Web3Connections,
        decoder: ErrorDecoder,
        *,
        gas_buffer: int,
        receipt_timeout: float,
    ) -> None:
        self._connections = connections
        self._decoder = decoder
        self._gas_buffer = gas_buffer
        self._receipt_timeout = receipt_timeout

    def gas_budget(self, gas_limit: int) -> int:
        return effective_gas_limit(gas_limit, self._gas_buffer)

    async def fee_data(self) -> int:
        """Current gas price; fails fast instead of guessing."""

        try:
            gas_price = await self._connections.web3.eth.gas_price
        except TRANSPORT_ERRORS as exc:
            raise FeeDataUnavailableError(
                "Unable to fetch network fee data", details={"error": str(exc)}
            ) from exc
        if not gas_price:
            raise FeeDataUnavailableError("Network returned no gas price")
        return int(gas_price)

    async def ensure_balance(self, gas: int, gas_price: int) -> None:
        relayer = self._connections.relayer_address
        try:
            balance = await self._connections.web3.eth.get_balance(relayer)
        except TRANSPORT_ERRORS as exc:
            raise TransportError(
                "Failed to read relayer balance", endpoint=relayer, details={"error": str(exc)}
            ) from exc

        required = gas * gas_price
        if balance < required:
            logger.error(
                "Relayer %s balance %s wei below required %s wei", relayer, balance, required
            )
            raise InsufficientFundsError(balance=int(balance), required=required)

    async def relay(self, request: RelayRequest, calldata: str) -> tuple[str, TxReceipt]:
        """Build, sign and broadcast ``relayCall``, then wait for inclusion."""

        gas = self.gas_budget(request.gas_limit)
        gas_price = await self.fee_data()
        await self.ensure_balance(gas, gas_price)

        function = self._connections.relay_hub.functions.relayCall(
            request.paymaster,
            request.target,
            HexBytes(calldata),
            request.gas_limit,
            request.user,
        )
        return await self.send(function, action="relayCall", gas=gas, gas_price=gas_price)

    async def send(
        self,
        function: AsyncContractFunction,
        *,
        action: str,
        gas: int | None = None,
        gas_price: int | None = None,
        value: int = 0,
    ) -> tuple[str, TxReceipt]:
        tx: dict[str, Any] = {"from": self._connections.relayer_address}
        if value:
            tx["value"] = value
        if gas is not None:
            tx["gas"] = gas
        if gas_price is not None:
            tx["gasPrice"] = gas_price

        logger.info("Dispatching %s (gas=%s gasPrice=%s)", action, gas, gas_price)
        try:
            tx_hash = await function.transact(tx)  # type: ignore[arg-type]
        except ContractLogicError as exc:
            reason = self._decoder.describe(revert_info_from_exception(exc))
            logger.error("Node rejected %s: %s", action, reason)
            raise ExecutionRevertedError(reason, details={"action": action}) from exc
        except TRANSPORT_ERRORS as exc:
            raise TransportError(
                f"Failed to submit transaction for {action}",
                endpoint=action,
                details={"error": str(exc)},
            ) from exc

        tx_hex = tx_hash.to_0x_hex()
        logger.info("Transaction sent for action=%s hash=%s", action, tx_hex)

        try:
            receipt = await self._connections.web3.eth.wait_for_transaction_receipt(
                tx_hash, timeout=self._receipt_timeout
            )
        except TimeExhausted as exc:
            logger.error("Timed out waiting for %s (%s)", action, tx_hex)
            raise InclusionTimeoutError(tx_hex, self._receipt_timeout) from exc
        except TRANSPORT_ERRORS as exc:
            raise TransportError(
                f"Failed to fetch receipt for {action}",
                endpoint=tx_hex,
                details={"error": str(exc)},
            ) from exc

        if receipt["status"] != 1:
            logger.error("Transaction %s reverted on-chain (action=%s)", tx_hex, action)
            raise ExecutionRevertedError(
                "Transaction reverted on-chain",
                tx_hash=tx_hex,
                details={"gas_used": receipt.get("gasUsed"), "block": receipt.get("blockNumber")},
            )

        logger.info(
            "Transaction confirmed for action=%s hash=%s block=%s gasUsed=%s",
            action,
            tx_hex,
            receipt.get("blockNumber"),
            receipt.get("gasUsed"),
        )
        return tx_hex, receipt
