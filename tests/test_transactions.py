"""Tests for transaction dispatch."""

from typing import cast

import pytest
from web3.exceptions import TimeExhausted

from conftest import (
    PAYMASTER,
    RELAYER,
    TX_HASH,
    USER,
    FakeEth,
    make_connections,
    revert,
    success_receipt,
)
from modl_relayer.abi import RelayHub_abi
from modl_relayer.evm import ErrorDecoder, TransactionDispatcher, Web3Connections
from modl_relayer.exceptions import (
    ExecutionRevertedError,
    FeeDataUnavailableError,
    InclusionTimeoutError,
    InsufficientFundsError,
    TransportError,
)
from modl_relayer.types import RelayRequest

REQUEST = RelayRequest(
    paymaster=PAYMASTER,
    target="0x00000000000000000000000000000000000000E5",
    encoded_data="0xa9059cbb",
    gas_limit=200_000,
    user=USER,
)
CALLDATA = "0xa9059cbb" + "00" * 12 + "11" * 20


def _dispatcher(connections) -> TransactionDispatcher:
    return TransactionDispatcher(
        cast(Web3Connections, connections),
        ErrorDecoder(RelayHub_abi),
        gas_buffer=100_000,
        receipt_timeout=5.0,
    )


@pytest.mark.asyncio
async def test_relay_sends_with_flat_buffer_and_gas_price() -> None:
    connections = make_connections(eth=FakeEth(gas_price=7))

    tx_hash, receipt = await _dispatcher(connections).relay(REQUEST, CALLDATA)

    assert tx_hash == TX_HASH.to_0x_hex()
    assert receipt["status"] == 1
    ((_, args, _, tx),) = connections.relay_hub.called("relayCall", "transact")
    assert tx == {"from": RELAYER, "gas": 300_000, "gasPrice": 7}
    assert args[3] == 200_000
    assert connections.web3.eth.waits == [(TX_HASH, 5.0)]


@pytest.mark.asyncio
@pytest.mark.parametrize("gas_price", [0, None, OSError("no fee data")])
async def test_fee_data_unavailable(gas_price) -> None:
    connections = make_connections(eth=FakeEth(gas_price=gas_price))

    with pytest.raises(FeeDataUnavailableError):
        await _dispatcher(connections).relay(REQUEST, CALLDATA)
    assert not connections.relay_hub.called("relayCall", "transact")


@pytest.mark.asyncio
async def test_insufficient_relayer_balance() -> None:
    connections = make_connections(eth=FakeEth(gas_price=10, balance=2_999_999))

    with pytest.raises(InsufficientFundsError) as excinfo:
        await _dispatcher(connections).relay(REQUEST, CALLDATA)

    assert excinfo.value.required == 3_000_000
    assert excinfo.value.public_message == "Insufficient relayer balance"
    assert not connections.relay_hub.called("relayCall", "transact")


@pytest.mark.asyncio
async def test_reverted_receipt_raises_with_hash() -> None:
    connections = make_connections(eth=FakeEth(receipt=success_receipt(status=0)))

    with pytest.raises(ExecutionRevertedError) as excinfo:
        await _dispatcher(connections).relay(REQUEST, CALLDATA)
    assert excinfo.value.tx_hash == TX_HASH.to_0x_hex()


@pytest.mark.asyncio
async def test_node_rejection_is_decoded() -> None:
    connections = make_connections(
        hub={"relayCall.transact": revert(message="execution reverted: nonce too low")}
    )

    with pytest.raises(ExecutionRevertedError, match="nonce too low"):
        await _dispatcher(connections).relay(REQUEST, CALLDATA)


@pytest.mark.asyncio
async def test_inclusion_timeout() -> None:
    connections = make_connections(eth=FakeEth(receipt_error=TimeExhausted("slow")))

    with pytest.raises(InclusionTimeoutError) as excinfo:
        await _dispatcher(connections).relay(REQUEST, CALLDATA)
    assert excinfo.value.status_code == 504
    assert excinfo.value.tx_hash == TX_HASH.to_0x_hex()


@pytest.mark.asyncio
async def test_submission_transport_failure() -> None:
    connections = make_connections(hub={"relayCall.transact": ConnectionError("reset")})

    with pytest.raises(TransportError):
        await _dispatcher(connections).relay(REQUEST, CALLDATA)


@pytest.mark.asyncio
async def test_send_includes_value_only_when_set() -> None:
    connections = make_connections(hub={"deposit.transact": TX_HASH})
    dispatcher = _dispatcher(connections)

    await dispatcher.send(connections.relay_hub.functions.deposit(), action="deposit", value=10)

    ((_, _, _, tx),) = connections.relay_hub.called("deposit", "transact")
    assert tx == {"from": RELAYER, "value": 10}
