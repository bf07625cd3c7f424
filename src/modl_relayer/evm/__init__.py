"""Chain-facing relay pipeline components."""

from .config import RelayerConfig
from .connections import Web3Connections
from .errors import ErrorDecoder, revert_info_from_exception
from .receipts import EventDecoder, ReceiptInterpreter
from .service import RelayService
from .simulation import Simulator
from .transactions import TransactionDispatcher
from .trust import TrustVerifier

__all__ = [
    "ErrorDecoder",
    "EventDecoder",
    "ReceiptInterpreter",
    "RelayService",
    "RelayerConfig",
    "Simulator",
    "TransactionDispatcher",
    "TrustVerifier",
    "Web3Connections",
    "revert_info_from_exception",
]
