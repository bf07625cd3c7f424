"""Connection helpers for the relayer's chain client."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, cast

import aiohttp
from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import AsyncHTTPProvider, AsyncWeb3, Web3
from web3.contract import AsyncContract
from web3.exceptions import Web3Exception
from web3.middleware import SignAndSendRawMiddlewareBuilder
from web3.types import ChecksumAddress

from ..exceptions import ConfigurationError, TransportError
from .config import RelayerConfig

logger = logging.getLogger(__name__)

# Failures of the RPC transport itself, as opposed to an execution revert.
# ContractLogicError is a Web3Exception too, so callers must catch it first.
TRANSPORT_ERRORS: tuple[type[BaseException], ...] = (
    Web3Exception,
    aiohttp.ClientError,
    asyncio.TimeoutError,
    OSError,
)


class Web3Connections:
    """Own the RPC provider, the relayer signer and the contract handles.

    Built once at startup and shared by every request; nothing here is
    mutated after ``connect()`` returns.
    """

    def __init__(self, config: RelayerConfig):
        self.config = config
        self._provider: AsyncHTTPProvider | None = None
        self._web3: AsyncWeb3 | None = None
        self._account: LocalAccount | None = None
        self._relay_hub: AsyncContract | None = None
        self._deployment_manager: AsyncContract | None = None
        self._chain_id: int | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    async def connect(self) -> None:
        """Initialise the provider, signing middleware and contract handles."""

        try:
            signer = cast(LocalAccount, Account.from_key(self.config.private_key))
        except Exception as exc:  # eth_account raises several types for malformed keys
            raise ConfigurationError(
                "Failed to derive relayer account from PRIVATE_KEY",
                field="PRIVATE_KEY",
                details={"error": str(exc)},
            ) from exc

        provider = AsyncHTTPProvider(
            self.config.rpc_url,
            request_kwargs={"timeout": aiohttp.ClientTimeout(total=self.config.request_timeout)},
        )
        web3 = AsyncWeb3(provider)

        try:
            connected = await web3.is_connected()
            chain_id = await web3.eth.chain_id if connected else None
        except TRANSPORT_ERRORS as exc:
            raise TransportError(
                "Unable to reach RPC endpoint", endpoint=self.config.rpc_url, details={"error": str(exc)}
            ) from exc
        if not connected:
            raise TransportError("Unable to reach RPC endpoint", endpoint=self.config.rpc_url)

        web3.middleware_onion.add(SignAndSendRawMiddlewareBuilder.build(signer))  # type: ignore[arg-type]
        web3.eth.default_account = signer.address

        self._provider = provider
        self._web3 = web3
        self._account = signer
        self._chain_id = chain_id
        self._relay_hub = web3.eth.contract(
            address=self.config.relay_hub_address,
            abi=self.config.relay_hub_abi,
        )
        self._deployment_manager = web3.eth.contract(
            address=self.config.deployment_manager_address,
            abi=self.config.deployment_manager_abi,
        )

        logger.info(
            "Connected to chain %s as relayer %s (hub=%s)",
            chain_id,
            signer.address,
            self.config.relay_hub_address,
        )

    async def disconnect(self) -> None:
        provider = self._provider
        self._provider = None
        self._web3 = None
        self._account = None
        self._relay_hub = None
        self._deployment_manager = None
        self._chain_id = None
        if provider is not None:
            await provider.disconnect()

    def is_connected(self) -> bool:
        return self._web3 is not None and self._account is not None

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def web3(self) -> AsyncWeb3:
        if self._web3 is None:
            raise TransportError("RPC provider not connected", endpoint=self.config.rpc_url)
        return self._web3

    @property
    def account(self) -> LocalAccount:
        if self._account is None:
            raise TransportError(
                "Relayer account is not initialised; call connect() first",
                endpoint=self.config.rpc_url,
            )
        return self._account

    @property
    def relayer_address(self) -> ChecksumAddress:
        return self.account.address

    @property
    def relay_hub(self) -> AsyncContract:
        if self._relay_hub is None:
            raise TransportError("Relay hub contract not available; call connect() first")
        return self._relay_hub

    @property
    def deployment_manager(self) -> AsyncContract:
        if self._deployment_manager is None:
            raise TransportError("Deployment manager contract not available; call connect() first")
        return self._deployment_manager

    @property
    def chain_id(self) -> int | None:
        return self._chain_id

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def paymaster(self, address: str) -> AsyncContract:
        """Contract handle for the paymaster named in a request."""
        return self.web3.eth.contract(
            address=Web3.to_checksum_address(address),
            abi=self.config.paymaster_abi,
        )

    async def call_raw(self, tx: dict[str, Any]) -> bytes:
        """Read-only ``eth_call`` against latest state."""
        return bytes(await self.web3.eth.call(cast(Any, tx)))
