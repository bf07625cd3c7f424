"""Contract ABIs bundled with the relayer, plus loading of operator-supplied overrides."""

import json
from pathlib import Path
from typing import Any

from eth_utils.abi import collapse_if_tuple
from web3 import Web3

from ..exceptions import ConfigurationError
from .deployment_manager import DeploymentManager_abi
from .paymaster import Paymaster_abi
from .relay_hub import RelayHub_abi


def load_abi_file(path: str | Path) -> list[dict[str, Any]]:
    """Load an ABI from a JSON file.

    Accepts either a bare ABI list or a compiler artifact carrying it under ``abi``.
    """

    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except FileNotFoundError as exc:
        raise ConfigurationError(f"ABI file not found: {path}", field="abi", value=str(path)) from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(
            f"ABI file contains invalid JSON: {path}", field="abi", value=str(path)
        ) from exc

    if isinstance(data, dict):
        data = data.get("abi")
    if not isinstance(data, list):
        raise ConfigurationError(
            f"ABI file does not contain an ABI list: {path}", field="abi", value=str(path)
        )
    return data


def input_types(entry: dict[str, Any]) -> list[str]:
    """Canonical ABI type strings for an entry's inputs (tuples collapsed)."""
    return [collapse_if_tuple(dict(item)) for item in entry.get("inputs", [])]


def signature(entry: dict[str, Any]) -> str:
    """Canonical ``Name(type,...)`` signature of an ABI error, event or function."""
    return f"{entry['name']}({','.join(input_types(entry))})"


def selector(entry: dict[str, Any]) -> bytes:
    """Full keccak of the signature; error and function selectors use its first four bytes."""
    return bytes(Web3.keccak(text=signature(entry)))


__all__ = [
    "DeploymentManager_abi",
    "Paymaster_abi",
    "RelayHub_abi",
    "input_types",
    "load_abi_file",
    "selector",
    "signature",
]
