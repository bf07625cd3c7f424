"""Exception hierarchy for the MODL relayer."""

from enum import Enum


class ErrorKind(str, Enum):
    """Closed set of failure classes a relay request can end in."""

    INVALID_REQUEST = "invalid_request"
    CONFIG_MISMATCH = "config_mismatch"
    SIMULATION_REVERTED = "simulation_reverted"
    FEE_DATA_UNAVAILABLE = "fee_data_unavailable"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    EXECUTION_REVERTED = "execution_reverted"
    INCLUSION_TIMEOUT = "inclusion_timeout"
    TRANSPORT = "transport"
    CONFIGURATION = "configuration"


class RelayerError(Exception):
    """Base exception for all relayer errors."""

    kind: ErrorKind = ErrorKind.TRANSPORT
    status_code: int = 500

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    @property
    def public_message(self) -> str:
        """Message safe to return to HTTP callers."""
        return self.message


class InvalidRequestError(RelayerError):
    """Raised when a relay request body is missing fields or malformed."""

    kind = ErrorKind.INVALID_REQUEST
    status_code = 400

    def __init__(self, message: str, field: str | None = None, details: dict | None = None):
        super().__init__(message, details)
        self.field = field


class ConfigMismatchError(RelayerError):
    """Raised when on-chain trust wiring differs from the local configuration."""

    kind = ErrorKind.CONFIG_MISMATCH

    @property
    def public_message(self) -> str:
        return "Trusted contract configuration error"


class SimulationRevertedError(RelayerError):
    """Raised when the pre-flight static call of ``relayCall`` reverts."""

    kind = ErrorKind.SIMULATION_REVERTED

    def __init__(self, reason: str, details: dict | None = None):
        super().__init__(reason, details)
        self.reason = reason


class FeeDataUnavailableError(RelayerError):
    """Raised when the network cannot quote a gas price."""

    kind = ErrorKind.FEE_DATA_UNAVAILABLE


class InsufficientFundsError(RelayerError):
    """Raised when the relayer account cannot cover the gas budget."""

    kind = ErrorKind.INSUFFICIENT_FUNDS

    def __init__(self, balance: int, required: int):
        super().__init__(
            "Insufficient relayer balance",
            details={"balance": balance, "required": required},
        )
        self.balance = balance
        self.required = required


class ExecutionRevertedError(RelayerError):
    """Raised when a broadcast transaction fails on-chain."""

    kind = ErrorKind.EXECUTION_REVERTED

    def __init__(self, message: str, tx_hash: str | None = None, details: dict | None = None):
        super().__init__(message, details)
        self.tx_hash = tx_hash


class InclusionTimeoutError(RelayerError):
    """Raised when a broadcast transaction is not mined within the deadline."""

    kind = ErrorKind.INCLUSION_TIMEOUT
    status_code = 504

    def __init__(self, tx_hash: str, timeout: float):
        super().__init__(
            f"Transaction {tx_hash} not mined within {timeout:g}s",
            details={"tx_hash": tx_hash, "timeout": timeout},
        )
        self.tx_hash = tx_hash
        self.timeout = timeout


class TransportError(RelayerError):
    """Raised when an RPC or network call fails."""

    kind = ErrorKind.TRANSPORT
    status_code = 502

    def __init__(self, message: str, endpoint: str | None = None, details: dict | None = None):
        super().__init__(message, details)
        self.endpoint = endpoint


class ConfigurationError(RelayerError):
    """Raised when startup configuration is invalid or missing."""

    kind = ErrorKind.CONFIGURATION

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: object | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.field = field
        self.value = value
