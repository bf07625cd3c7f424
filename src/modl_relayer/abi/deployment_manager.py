DeploymentManager_abi = [
    {
        "type": "function",
        "name": "isTrustedForwarder",
        "stateMutability": "view",
        "inputs": [{"name": "forwarder", "type": "address"}],
        "outputs": [{"name": "", "type": "bool"}],
    },
    {
        "type": "function",
        "name": "deleteProject",
        "stateMutability": "nonpayable",
        "inputs": [{"name": "projectId", "type": "uint256"}],
        "outputs": [],
    },
    {
        "type": "event",
        "name": "DebugMsgSender",
        "anonymous": False,
        "inputs": [
            {"name": "msgSender", "type": "address", "indexed": False},
            {"name": "resolvedSender", "type": "address", "indexed": False},
        ],
    },
    {
        "type": "event",
        "name": "ProjectDeleted",
        "anonymous": False,
        "inputs": [
            {"name": "projectId", "type": "uint256", "indexed": True},
            {"name": "owner", "type": "address", "indexed": True},
        ],
    },
    {
        "type": "error",
        "name": "NotProjectOwner",
        "inputs": [
            {"name": "projectId", "type": "uint256"},
            {"name": "caller", "type": "address"},
        ],
    },
]
