Paymaster_abi = [
    {
        "type": "function",
        "name": "relayHub",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "address"}],
    },
    {
        "type": "function",
        "name": "trustedForwarder",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "address"}],
    },
    {
        "type": "function",
        "name": "preRelayedCall",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "user", "type": "address"},
            {"name": "gasLimit", "type": "uint256"},
        ],
        "outputs": [{"name": "context", "type": "bytes"}],
    },
    {
        "type": "function",
        "name": "postRelayedCall",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "user", "type": "address"},
            {"name": "context", "type": "bytes"},
            {"name": "gasUsed", "type": "uint256"},
        ],
        "outputs": [],
    },
    {
        "type": "event",
        "name": "PreRelayedCallApproved",
        "anonymous": False,
        "inputs": [
            {"name": "user", "type": "address", "indexed": True},
            {"name": "gasLimit", "type": "uint256", "indexed": False},
        ],
    },
    {
        "type": "event",
        "name": "PostRelayedCall",
        "anonymous": False,
        "inputs": [
            {"name": "user", "type": "address", "indexed": True},
            {"name": "gasUsed", "type": "uint256", "indexed": False},
        ],
    },
    {
        "type": "error",
        "name": "UserNotSponsored",
        "inputs": [{"name": "user", "type": "address"}],
    },
    {
        "type": "error",
        "name": "GasLimitExceeded",
        "inputs": [
            {"name": "requested", "type": "uint256"},
            {"name": "allowed", "type": "uint256"},
        ],
    },
]
