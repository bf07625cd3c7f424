"""Send a sponsored call to a running relayer."""

import os

import requests
from dotenv import load_dotenv
from eth_abi import encode as abi_encode
from web3 import Web3

# Load environment variables from .env file
load_dotenv()

RELAYER_URL = os.getenv("RELAYER_URL", "http://localhost:8080")


def build_delete_project_call(project_id: int) -> str:
    """Calldata for DeploymentManager.deleteProject(projectId)."""
    selector = Web3.keccak(text="deleteProject(uint256)")[:4]
    return "0x" + (selector + abi_encode(["uint256"], [project_id])).hex()


def main():
    paymaster = os.getenv("PAYMASTER_ADDRESS")
    target = os.getenv("DEPLOYMENT_MANAGER_ADDRESS")
    user = os.getenv("USER_ADDRESS")
    if not (paymaster and target and user):
        raise ValueError("PAYMASTER_ADDRESS, DEPLOYMENT_MANAGER_ADDRESS and USER_ADDRESS must be set")

    payload = {
        "paymaster": paymaster,
        "target": target,
        "encodedData": build_delete_project_call(1),
        "gasLimit": 200_000,
        "user": user,
    }

    response = requests.post(f"{RELAYER_URL}/relay", json=payload, timeout=180)
    body = response.json()

    if response.ok:
        print(f"Relayed: {body['txHash']} (gas used {body['gasUsed']})")
        for log in body["logs"]:
            print(f"  {log['interface']}.{log['event']} {log['args']}")
    else:
        print(f"Relay failed ({response.status_code}): {body['error']}")


if __name__ == "__main__":
    main()
