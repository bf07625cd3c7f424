"""Inspect relayer health and a paymaster's trust wiring."""

import json
import os

import requests
from dotenv import load_dotenv

load_dotenv()

RELAYER_URL = os.getenv("RELAYER_URL", "http://localhost:8080")


def main():
    health = requests.get(f"{RELAYER_URL}/health", timeout=10)
    print(f"Health: {health.json()['status']}")

    params = {}
    if os.getenv("PAYMASTER_ADDRESS"):
        params["paymaster"] = os.getenv("PAYMASTER_ADDRESS")

    status = requests.get(f"{RELAYER_URL}/status", params=params, timeout=30)
    body = status.json()
    if not status.ok:
        print(f"Status failed ({status.status_code}): {body['error']}")
        return

    print(json.dumps(body, indent=2))
    if not body["trusted"]:
        print("Trust wiring problems:")
        for issue in body["issues"]:
            print(f"  - {issue}")


if __name__ == "__main__":
    main()
