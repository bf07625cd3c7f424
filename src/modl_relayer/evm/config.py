"""Configuration container for the relayer."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from web3 import Web3
from web3.types import ChecksumAddress

from ..abi import DeploymentManager_abi, Paymaster_abi, RelayHub_abi, load_abi_file
from ..constants import (
    DEFAULT_CORS_ORIGINS,
    DEFAULT_GAS_BUFFER,
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_RECEIPT_TIMEOUT,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_SIMULATION_GAS_CAP,
)
from ..exceptions import ConfigurationError


def _checksum(value: str | None, *, field_name: str, required: bool = True) -> ChecksumAddress | None:
    if not value:
        if required:
            raise ConfigurationError(f"{field_name} is required", field=field_name)
        return None
    if not Web3.is_address(value.strip()):
        raise ConfigurationError(f"Invalid address for {field_name}", field=field_name, value=value)
    return Web3.to_checksum_address(value.strip())


def _number(env: Mapping[str, str], name: str, default: float, cast: type = int) -> Any:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = cast(raw.strip())
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be numeric", field=name, value=raw) from exc
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive", field=name, value=raw)
    return value


def _abi(env: Mapping[str, str], name: str, default: list[dict[str, Any]]) -> list[dict[str, Any]]:
    path = (env.get(name) or "").strip()
    return load_abi_file(path) if path else default


@dataclass(frozen=True)
class RelayerConfig:
    """Aggregated configuration used to construct the relay service."""

    rpc_url: str
    private_key: str = field(repr=False)
    relay_hub_address: ChecksumAddress
    deployment_manager_address: ChecksumAddress
    paymaster_address: ChecksumAddress | None = None
    trusted_forwarder_address: ChecksumAddress | None = None
    gas_buffer: int = DEFAULT_GAS_BUFFER
    simulation_gas_cap: int = DEFAULT_SIMULATION_GAS_CAP
    receipt_timeout: float = DEFAULT_RECEIPT_TIMEOUT
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    cors_origins: tuple[str, ...] = DEFAULT_CORS_ORIGINS
    relay_hub_abi: list[dict[str, Any]] = field(default_factory=lambda: RelayHub_abi, repr=False)
    paymaster_abi: list[dict[str, Any]] = field(default_factory=lambda: Paymaster_abi, repr=False)
    deployment_manager_abi: list[dict[str, Any]] = field(
        default_factory=lambda: DeploymentManager_abi, repr=False
    )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> RelayerConfig:
        """Build the configuration from environment variables.

        ``THIRDWEB_API_KEY``, when present, is appended to ``RPC_URL`` as a
        path segment, which is how hosted thirdweb endpoints expect it.
        """

        env = os.environ if environ is None else environ

        rpc_url = (env.get("RPC_URL") or "").strip()
        if not rpc_url:
            raise ConfigurationError("RPC_URL is required", field="RPC_URL")
        api_key = (env.get("THIRDWEB_API_KEY") or "").strip()
        if api_key:
            rpc_url = f"{rpc_url.rstrip('/')}/{api_key}"

        private_key = (env.get("PRIVATE_KEY") or "").strip()
        if not private_key:
            raise ConfigurationError("PRIVATE_KEY is required", field="PRIVATE_KEY")

        origins = tuple(
            origin.strip()
            for origin in (env.get("CORS_ORIGINS") or "").split(",")
            if origin.strip()
        )

        return cls(
            rpc_url=rpc_url,
            private_key=private_key,
            relay_hub_address=_checksum(env.get("RELAY_HUB_ADDRESS"), field_name="RELAY_HUB_ADDRESS"),
            deployment_manager_address=_checksum(
                env.get("DEPLOYMENT_MANAGER_ADDRESS"), field_name="DEPLOYMENT_MANAGER_ADDRESS"
            ),
            paymaster_address=_checksum(
                env.get("PAYMASTER_ADDRESS"), field_name="PAYMASTER_ADDRESS", required=False
            ),
            trusted_forwarder_address=_checksum(
                env.get("TRUSTED_FORWARDER_ADDRESS"),
                field_name="TRUSTED_FORWARDER_ADDRESS",
                required=False,
            ),
            gas_buffer=_number(env, "GAS_BUFFER", DEFAULT_GAS_BUFFER),
            simulation_gas_cap=_number(env, "SIMULATION_GAS_CAP", DEFAULT_SIMULATION_GAS_CAP),
            receipt_timeout=_number(env, "RECEIPT_TIMEOUT", DEFAULT_RECEIPT_TIMEOUT, float),
            request_timeout=_number(env, "REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT, float),
            host=(env.get("HOST") or DEFAULT_HOST).strip(),
            port=_number(env, "PORT", DEFAULT_PORT),
            cors_origins=origins or DEFAULT_CORS_ORIGINS,
            relay_hub_abi=_abi(env, "RELAY_HUB_ABI_PATH", RelayHub_abi),
            paymaster_abi=_abi(env, "PAYMASTER_ABI_PATH", Paymaster_abi),
            deployment_manager_abi=_abi(env, "DEPLOYMENT_MANAGER_ABI_PATH", DeploymentManager_abi),
        )
