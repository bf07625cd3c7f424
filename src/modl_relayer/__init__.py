"""MODL relayer - sponsored meta-transaction relay over HTTP.

Accepts user-authorized call payloads, checks the on-chain trust wiring,
simulates the relay, and submits it through the relay hub signed by the
relayer key.
"""

from .evm import RelayerConfig, RelayService
from .exceptions import (
    ConfigMismatchError,
    ConfigurationError,
    ErrorKind,
    ExecutionRevertedError,
    FeeDataUnavailableError,
    InclusionTimeoutError,
    InsufficientFundsError,
    InvalidRequestError,
    RelayerError,
    SimulationRevertedError,
    TransportError,
)
from .types import DecodedLog, RelayReceipt, RelayRequest, SimulationOutcome, TrustConfig
from .utils import compose_calldata, effective_gas_limit, encode_forwarder_execute

__version__ = "0.1.0"

__all__ = [
    # Service
    "RelayService",
    "RelayerConfig",
    # Types
    "DecodedLog",
    "RelayReceipt",
    "RelayRequest",
    "SimulationOutcome",
    "TrustConfig",
    # Exceptions
    "ErrorKind",
    "RelayerError",
    "InvalidRequestError",
    "ConfigMismatchError",
    "SimulationRevertedError",
    "FeeDataUnavailableError",
    "InsufficientFundsError",
    "ExecutionRevertedError",
    "InclusionTimeoutError",
    "TransportError",
    "ConfigurationError",
    # Utility functions
    "compose_calldata",
    "effective_gas_limit",
    "encode_forwarder_execute",
]
