"""HTTP surface tests."""

import pytest
from fastapi.testclient import TestClient

from conftest import (
    PAYMASTER,
    TX_HASH,
    USER,
    FakeEth,
    custom_error,
    make_connections,
    make_service,
    relay_body,
    revert,
    success_receipt,
    transaction_relayed_log,
)
from modl_relayer.abi import Paymaster_abi
from modl_relayer.api import create_app


def _client(connections=None, **kwargs) -> TestClient:
    service = make_service(connections or make_connections())
    return TestClient(create_app(service, manage_connection=False), **kwargs)


def test_health() -> None:
    resp = _client().get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_relay_success() -> None:
    connections = make_connections(eth=FakeEth(receipt=success_receipt([transaction_relayed_log()])))

    resp = _client(connections).post("/relay", json=relay_body())

    assert resp.status_code == 200, resp.json()
    body = resp.json()
    assert body["txHash"] == TX_HASH.to_0x_hex()
    assert body["gasUsed"] == 187_000
    assert body["logs"][0]["event"] == "TransactionRelayed"
    assert body["logs"][0]["args"]["user"] == USER


@pytest.mark.parametrize(
    "payload",
    [
        {k: v for k, v in relay_body().items() if k != "gasLimit"},
        relay_body(gasLimit="lots"),
        relay_body(encodedData="nothex"),
        relay_body(gasLimit=2**256),
        ["not", "an", "object"],
    ],
)
def test_relay_rejects_invalid_requests(payload) -> None:
    resp = _client().post("/relay", json=payload)
    assert resp.status_code == 400
    assert "error" in resp.json()


def test_out_of_range_gas_limit_makes_no_chain_calls() -> None:
    connections = make_connections()

    resp = _client(connections).post("/relay", json=relay_body(gasLimit=2**256 - 1))

    assert resp.status_code == 400
    assert connections.relay_hub.calls == []
    assert connections.deployment_manager.calls == []
    assert connections.paymaster(PAYMASTER).calls == []


def test_relay_rejects_non_json_body() -> None:
    resp = _client().post("/relay", content=b"{nope", headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Request body must be valid JSON"}


def test_trust_mismatch_is_generic_500() -> None:
    connections = make_connections(manager={"isTrustedForwarder": False})

    resp = _client(connections).post("/relay", json=relay_body())

    assert resp.status_code == 500
    assert resp.json() == {"error": "Trusted contract configuration error"}
    assert not connections.relay_hub.called("relayCall")


def test_simulation_revert_surfaces_reason() -> None:
    data = custom_error(Paymaster_abi, "GasLimitExceeded", ["uint256", "uint256"], [200_000, 100_000])
    connections = make_connections(hub={"relayCall.call": revert(data)})

    resp = _client(connections).post("/relay", json=relay_body())

    assert resp.status_code == 500
    assert resp.json() == {"error": "GasLimitExceeded(200000, 100000)"}


def test_reverted_receipt_is_distinct_from_simulation_revert() -> None:
    connections = make_connections(eth=FakeEth(receipt=success_receipt(status=0)))

    resp = _client(connections).post("/relay", json=relay_body())

    assert resp.status_code == 500
    assert resp.json() == {"error": "Transaction reverted on-chain"}
    kinds = [kind for name, _, kind, _ in connections.relay_hub.calls if name == "relayCall"]
    assert kinds == ["call", "transact"]


def test_insufficient_funds() -> None:
    connections = make_connections(eth=FakeEth(balance=0))

    resp = _client(connections).post("/relay", json=relay_body())

    assert resp.status_code == 500
    assert resp.json() == {"error": "Insufficient relayer balance"}


def test_unexpected_errors_are_masked() -> None:
    connections = make_connections(hub={"relayCall.call": RuntimeError("boom")})

    resp = _client(connections, raise_server_exceptions=False).post("/relay", json=relay_body())

    assert resp.status_code == 500
    assert resp.json() == {"error": "Relay error"}


def test_status_defaults_to_configured_paymaster() -> None:
    resp = _client().get("/status")

    assert resp.status_code == 200
    body = resp.json()
    assert body["trusted"] is True
    assert body["issues"] == []


def test_status_rejects_bad_paymaster() -> None:
    resp = _client().get("/status", params={"paymaster": "0x123"})
    assert resp.status_code == 400


def test_cors_preflight_allows_configured_origin() -> None:
    resp = _client().options(
        "/relay",
        headers={
            "Origin": "http://localhost:3000",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        },
    )
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "http://localhost:3000"
