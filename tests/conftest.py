from __future__ import annotations

from types import SimpleNamespace
from typing import Any, cast

import pytest
from eth_abi import encode as abi_encode
from hexbytes import HexBytes
from web3 import Web3
from web3.exceptions import ContractLogicError

from modl_relayer.abi import RelayHub_abi, selector
from modl_relayer.evm import RelayerConfig, RelayService, Web3Connections

RELAYER = Web3.to_checksum_address("0x00000000000000000000000000000000000000f1")
HUB = Web3.to_checksum_address("0x00000000000000000000000000000000000000a1")
MANAGER = Web3.to_checksum_address("0x00000000000000000000000000000000000000b2")
PAYMASTER = Web3.to_checksum_address("0x00000000000000000000000000000000000000c3")
FORWARDER = Web3.to_checksum_address("0x00000000000000000000000000000000000000d4")
TARGET = Web3.to_checksum_address("0x00000000000000000000000000000000000000e5")
USER = Web3.to_checksum_address("0x1111111111111111111111111111111111111111")
TX_HASH = HexBytes("0x" + "ab" * 32)


def revert(data: bytes | None = None, message: str = "execution reverted") -> ContractLogicError:
    return ContractLogicError(message, data=HexBytes(data).to_0x_hex() if data else None)


def custom_error(abi: list[dict[str, Any]], name: str, types: list[str], values: list[Any]) -> bytes:
    entry = next(item for item in abi if item.get("type") == "error" and item["name"] == name)
    return selector(entry)[:4] + abi_encode(types, values)


class _BoundCall:
    def __init__(self, contract: FakeContract, name: str, args: tuple[Any, ...]):
        self._contract = contract
        self._name = name
        self._args = args

    async def call(self, tx: dict[str, Any] | None = None) -> Any:
        return self._contract.resolve(self._name, self._args, "call", tx)

    async def transact(self, tx: dict[str, Any]) -> Any:
        return self._contract.resolve(self._name, self._args, "transact", tx)


class _Functions:
    def __init__(self, contract: FakeContract):
        self._contract = contract

    def __getattr__(self, name: str):
        return lambda *args: _BoundCall(self._contract, name, args)


class FakeContract:
    """Contract double; outcomes keyed by ``name`` or ``name.call``/``name.transact``."""

    def __init__(self, address: str, **outcomes: Any):
        self.address = address
        self.outcomes = outcomes
        self.calls: list[tuple[str, tuple[Any, ...], str, dict[str, Any] | None]] = []
        self.functions = _Functions(self)

    def resolve(self, name: str, args: tuple[Any, ...], kind: str, tx: dict[str, Any] | None) -> Any:
        self.calls.append((name, args, kind, tx))
        key = f"{name}.{kind}"
        outcome = self.outcomes[key] if key in self.outcomes else self.outcomes.get(name)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    def called(self, name: str, kind: str | None = None) -> list[tuple[Any, ...]]:
        return [
            entry for entry in self.calls if entry[0] == name and (kind is None or entry[2] == kind)
        ]


class FakeEth:
    def __init__(
        self,
        *,
        gas_price: Any = 2,
        balance: int = 10**20,
        receipt: dict[str, Any] | None = None,
        receipt_error: BaseException | None = None,
        call_result: Any = b"",
    ):
        self._gas_price = gas_price
        self.balance = balance
        self.receipt = receipt if receipt is not None else success_receipt()
        self.receipt_error = receipt_error
        self.call_result = call_result
        self.waits: list[tuple[Any, float]] = []
        self.raw_calls: list[dict[str, Any]] = []

    @property
    def gas_price(self):
        return self._read_gas_price()

    async def _read_gas_price(self) -> int:
        if isinstance(self._gas_price, BaseException):
            raise self._gas_price
        return self._gas_price

    async def get_balance(self, address: str) -> int:
        return self.balance

    async def wait_for_transaction_receipt(self, tx_hash: Any, timeout: float) -> dict[str, Any]:
        self.waits.append((tx_hash, timeout))
        if self.receipt_error is not None:
            raise self.receipt_error
        return self.receipt

    async def call(self, tx: dict[str, Any]) -> bytes:
        self.raw_calls.append(tx)
        if isinstance(self.call_result, BaseException):
            raise self.call_result
        return self.call_result


class FakeConnections:
    def __init__(
        self,
        config: RelayerConfig,
        *,
        hub: FakeContract,
        manager: FakeContract,
        paymasters: dict[str, FakeContract],
        eth: FakeEth,
    ):
        self.config = config
        self.relay_hub = hub
        self.deployment_manager = manager
        self._paymasters = paymasters
        self.web3 = SimpleNamespace(eth=eth)
        self.relayer_address = RELAYER
        self.chain_id = 31337
        self.connects = 0
        self.disconnects = 0

    def paymaster(self, address: str) -> FakeContract:
        return self._paymasters[Web3.to_checksum_address(address)]

    async def call_raw(self, tx: dict[str, Any]) -> bytes:
        return bytes(await self.web3.eth.call(tx))

    def is_connected(self) -> bool:
        return self.connects > self.disconnects

    async def connect(self) -> None:
        self.connects += 1

    async def disconnect(self) -> None:
        self.disconnects += 1


def success_receipt(logs: list[dict[str, Any]] | None = None, status: int = 1) -> dict[str, Any]:
    return {
        "transactionHash": TX_HASH,
        "status": status,
        "gasUsed": 187_000,
        "blockNumber": 42,
        "logs": logs or [],
    }


def transaction_relayed_log(success: bool = True, charge: int = 1234, log_index: int = 0) -> dict[str, Any]:
    entry = next(item for item in RelayHub_abi if item.get("name") == "TransactionRelayed")
    return {
        "address": HUB,
        "logIndex": log_index,
        "topics": [
            HexBytes(selector(entry)),
            HexBytes(abi_encode(["address"], [PAYMASTER])),
            HexBytes(abi_encode(["address"], [TARGET])),
            HexBytes(abi_encode(["address"], [USER])),
        ],
        "data": HexBytes(abi_encode(["bool", "uint256"], [success, charge])),
    }


def make_config(**overrides: Any) -> RelayerConfig:
    values: dict[str, Any] = {
        "rpc_url": "http://rpc.local",
        "private_key": "0x" + "11" * 32,
        "relay_hub_address": HUB,
        "deployment_manager_address": MANAGER,
        "paymaster_address": PAYMASTER,
        "receipt_timeout": 5.0,
    }
    values.update(overrides)
    return RelayerConfig(**values)


def make_connections(
    *,
    config: RelayerConfig | None = None,
    hub: dict[str, Any] | None = None,
    manager: dict[str, Any] | None = None,
    paymaster: dict[str, Any] | None = None,
    eth: FakeEth | None = None,
) -> FakeConnections:
    hub_outcomes = {"relayCall.call": [], "relayCall.transact": TX_HASH, "deposits": 5 * 10**17}
    hub_outcomes.update(hub or {})
    manager_outcomes = {"isTrustedForwarder": True}
    manager_outcomes.update(manager or {})
    paymaster_outcomes = {"relayHub": HUB, "trustedForwarder": FORWARDER, "preRelayedCall": b"\x01"}
    paymaster_outcomes.update(paymaster or {})

    return FakeConnections(
        config or make_config(),
        hub=FakeContract(HUB, **hub_outcomes),
        manager=FakeContract(MANAGER, **manager_outcomes),
        paymasters={PAYMASTER: FakeContract(PAYMASTER, **paymaster_outcomes)},
        eth=eth or FakeEth(),
    )


def make_service(connections: FakeConnections) -> RelayService:
    return RelayService(connections.config, connections=cast(Web3Connections, connections))


def relay_body(**overrides: Any) -> dict[str, Any]:
    body: dict[str, Any] = {
        "paymaster": PAYMASTER,
        "target": TARGET,
        "encodedData": "0xa9059cbb",
        "gasLimit": 200_000,
        "user": USER,
    }
    body.update(overrides)
    return body


@pytest.fixture
def connections() -> FakeConnections:
    return make_connections()


@pytest.fixture
def service(connections: FakeConnections) -> RelayService:
    return make_service(connections)


