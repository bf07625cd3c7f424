"""Command line entry point for the MODL relayer."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from collections.abc import Awaitable, Callable
from decimal import Decimal, InvalidOperation
from typing import Any

import uvicorn
from dotenv import load_dotenv
from web3 import Web3

from .evm import RelayerConfig, RelayService
from .exceptions import ConfigurationError, RelayerError
from .utils import encode_forwarder_execute

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    logging.basicConfig(
        level=os.getenv("LOGLEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _ether_to_wei(amount: str) -> int:
    try:
        value = Decimal(amount)
    except InvalidOperation as exc:
        raise ConfigurationError("Amount must be a decimal number", field="amount", value=amount) from exc
    if value <= 0:
        raise ConfigurationError("Amount must be positive", field="amount", value=amount)
    return int(Web3.to_wei(value, "ether"))


async def _with_service(action: Callable[[RelayService], Awaitable[Any]]) -> Any:
    service = RelayService(RelayerConfig.from_env())
    await service.connect()
    try:
        return await action(service)
    finally:
        await service.disconnect()


def _serve(args: argparse.Namespace) -> int:
    from .api import create_app

    config = RelayerConfig.from_env()
    app = create_app(RelayService(config))
    logger.info("Relayer listening on %s:%s", args.host or config.host, args.port or config.port)
    uvicorn.run(app, host=args.host or config.host, port=args.port or config.port, log_config=None)
    return 0


def _deposit(args: argparse.Namespace) -> int:
    value = _ether_to_wei(args.amount_eth)
    tx_hash = asyncio.run(_with_service(lambda service: service.deposit(value)))
    print(f"Deposited {args.amount_eth} ETH into the relay hub: {tx_hash}")
    return 0


def _deposit_balance(args: argparse.Namespace) -> int:
    paymaster = args.paymaster or os.getenv("PAYMASTER_ADDRESS")
    if not paymaster or not Web3.is_address(paymaster):
        raise ConfigurationError("A valid paymaster address is required", field="paymaster", value=paymaster)

    balance = asyncio.run(_with_service(lambda service: service.paymaster_deposit(paymaster)))
    print(
        json.dumps(
            {
                "paymaster": Web3.to_checksum_address(paymaster),
                "depositWei": str(balance),
                "depositEth": str(Web3.from_wei(balance, "ether")),
            },
            indent=2,
        )
    )
    return 0


def _encode_forwarder_call(args: argparse.Namespace) -> int:
    for name in ("target", "user"):
        if not Web3.is_address(getattr(args, name)):
            raise ConfigurationError(f"--{name} must be an address", field=name, value=getattr(args, name))
    print(encode_forwarder_execute(args.target, args.data, args.user))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="modl-relayer", description="MODL meta-transaction relayer")
    commands = parser.add_subparsers(dest="command", required=True)

    serve = commands.add_parser("serve", help="Run the HTTP relay server")
    serve.add_argument("--host", default=None, help="Bind address (defaults to HOST)")
    serve.add_argument("--port", type=int, default=None, help="Bind port (defaults to PORT)")
    serve.set_defaults(handler=_serve)

    deposit = commands.add_parser("deposit", help="Fund the relay hub from the relayer account")
    deposit.add_argument("--amount-eth", required=True, help="Amount of native currency, in ether")
    deposit.set_defaults(handler=_deposit)

    balance = commands.add_parser("deposit-balance", help="Show a paymaster's hub deposit")
    balance.add_argument("--paymaster", default=None, help="Paymaster address (defaults to PAYMASTER_ADDRESS)")
    balance.set_defaults(handler=_deposit_balance)

    encode = commands.add_parser(
        "encode-forwarder-call", help="Print calldata for the trusted forwarder's execute()"
    )
    encode.add_argument("--target", required=True)
    encode.add_argument("--data", required=True, help="0x-prefixed calldata for the target")
    encode.add_argument("--user", required=True)
    encode.set_defaults(handler=_encode_forwarder_call)

    return parser


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    _configure_logging()

    args = build_parser().parse_args(argv)
    try:
        return args.handler(args)
    except RelayerError as exc:
        logger.error("%s failed: %s", args.command, exc.message)
        return 1


if __name__ == "__main__":
    sys.exit(main())
