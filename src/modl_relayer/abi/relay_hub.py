RelayHub_abi = [
    {
        "type": "function",
        "name": "relayCall",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "paymaster", "type": "address"},
            {"name": "target", "type": "address"},
            {"name": "data", "type": "bytes"},
            {"name": "gasLimit", "type": "uint256"},
            {"name": "user", "type": "address"},
        ],
        "outputs": [],
    },
    {
        "type": "function",
        "name": "deposits",
        "stateMutability": "view",
        "inputs": [{"name": "paymaster", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "name": "deposit",
        "stateMutability": "payable",
        "inputs": [],
        "outputs": [],
    },
    {
        "type": "event",
        "name": "Deposited",
        "anonymous": False,
        "inputs": [
            {"name": "paymaster", "type": "address", "indexed": True},
            {"name": "from", "type": "address", "indexed": True},
            {"name": "amount", "type": "uint256", "indexed": False},
        ],
    },
    {
        "type": "event",
        "name": "TransactionRelayed",
        "anonymous": False,
        "inputs": [
            {"name": "paymaster", "type": "address", "indexed": True},
            {"name": "target", "type": "address", "indexed": True},
            {"name": "user", "type": "address", "indexed": True},
            {"name": "success", "type": "bool", "indexed": False},
            {"name": "charge", "type": "uint256", "indexed": False},
        ],
    },
    {
        "type": "error",
        "name": "PaymasterNotApproved",
        "inputs": [{"name": "paymaster", "type": "address"}],
    },
    {
        "type": "error",
        "name": "InsufficientPaymasterDeposit",
        "inputs": [
            {"name": "paymaster", "type": "address"},
            {"name": "required", "type": "uint256"},
            {"name": "available", "type": "uint256"},
        ],
    },
    {
        "type": "error",
        "name": "TargetCallFailed",
        "inputs": [
            {"name": "target", "type": "address"},
            {"name": "returnData", "type": "bytes"},
        ],
    },
    {
        "type": "error",
        "name": "GasLimitTooLow",
        "inputs": [
            {"name": "provided", "type": "uint256"},
            {"name": "minimum", "type": "uint256"},
        ],
    },
    {
        "type": "error",
        "name": "UnauthorizedRelayer",
        "inputs": [{"name": "relayer", "type": "address"}],
    },
]
