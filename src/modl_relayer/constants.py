"""Constants shared across the relayer."""

from enum import Enum

# Flat gas added on top of the caller's declared gasLimit. The relay hub
# spends gas of its own around the forwarded call (paymaster hooks, event
# emission), so the outer transaction needs headroom beyond the inner budget.
DEFAULT_GAS_BUFFER = 100_000

# Largest gasLimit accepted from callers; leaves room for the buffer within uint256.
MAX_GAS_LIMIT = 2**256 - 1 - DEFAULT_GAS_BUFFER

# Gas cap used for the pre-flight static call; independent of the caller's
# gasLimit so the simulation cannot fail purely on a tight cap.
DEFAULT_SIMULATION_GAS_CAP = 10_000_000

DEFAULT_RECEIPT_TIMEOUT = 120.0
DEFAULT_REQUEST_TIMEOUT = 10.0
DEFAULT_PORT = 8080
DEFAULT_HOST = "0.0.0.0"
DEFAULT_CORS_ORIGINS = ("http://localhost:3000",)

# Solidity builtin revert payloads: Error(string) and Panic(uint256).
ERROR_STRING_SELECTOR = bytes.fromhex("08c379a0")
PANIC_SELECTOR = bytes.fromhex("4e487b71")

FALLBACK_REVERT_MESSAGE = "Relay failed"

# Emitted by the deployment manager with the sender it recovered from the
# forwarded calldata.
DEBUG_SENDER_EVENT = "DebugMsgSender"

FORWARDER_EXECUTE_SIGNATURE = "execute(address,bytes,address)"


class ContractInterface(str, Enum):
    """Contract interfaces known to the relayer, in log-decoding priority order."""

    RELAY_HUB = "RelayHub"
    PAYMASTER = "Paymaster"
    DEPLOYMENT_MANAGER = "DeploymentManager"
