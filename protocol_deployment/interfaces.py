from protocol_deployment.abi import get_abi_entry, human_readable_abi

#
# Multisig wallet
#

MULTISIG_WALLET_ABI = human_readable_abi(
    [
        "function submitTransaction(address destination, uint256 value, bytes data) returns (uint256 transactionId)",  # noqa: E501
        "function confirmTransaction(uint256 transactionId)",
        "function revokeConfirmation(uint256 transactionId)",
        "function executeTransaction(uint256 transactionId)",
        "function transactions(uint256) view returns (address destination, uint256 value, bytes data, bool executed)",  # noqa: E501
        "function getConfirmationCount(uint256 transactionId) view returns (uint256 count)",
        "function getConfirmations(uint256 transactionId) view returns (address[] _confirmations)",
        "function isConfirmed(uint256 transactionId) view returns (bool)",
        "function isOwner(address) view returns (bool)",
        "function getOwners() view returns (address[])",
        "function required() view returns (uint256)",
        "function addOwner(address owner)",
        "function removeOwner(address owner)",
        "event Confirmation(address indexed sender, uint256 indexed transactionId)",
        "event Revocation(address indexed sender, uint256 indexed transactionId)",
        "event Submission(uint256 indexed transactionId)",
        "event Execution(uint256 indexed transactionId)",
        "event ExecutionFailure(uint256 indexed transactionId)",
        "event OwnerAddition(address indexed owner)",
        "event OwnerRemoval(address indexed owner)",
    ]
)

SUBMISSION_EVENT = get_abi_entry(MULTISIG_WALLET_ABI, "Submission", entry_type="event")
EXECUTION_EVENT = get_abi_entry(MULTISIG_WALLET_ABI, "Execution", entry_type="event")
EXECUTION_FAILURE_EVENT = get_abi_entry(
    MULTISIG_WALLET_ABI, "ExecutionFailure", entry_type="event"
)

#
# Upgradable proxy with a replaceable implementation
#

UPGRADABLE_PROXY_ABI = human_readable_abi(
    [
        "function getImplementation() view returns (address _implementation)",
        "function setImplementation(address _implementation)",
        "function getProxyOwner() view returns (address _owner)",
    ]
)

#
# Modules proxy registry
#

MODULES_PROXY_ABI = human_readable_abi(
    [
        "function checkClashingFuncSelectors(address _newModule) view returns (address[] clashingModules, bytes4[] clashingModulesFuncSelectors, bytes4[] clashingProxyRegistryFuncSelectors)",  # noqa: E501
        "function addModule(address _impl)",
        "function replaceModule(address _oldModuleImpl, address _newModuleImpl)",
        "function removeModule(address _impl)",
        "function getFuncImplementation(bytes4 _sig) view returns (address)",
    ]
)

#
# Governance
#

GOVERNOR_ABI = human_readable_abi(
    [
        "function propose(address[] targets, uint256[] values, string[] signatures, bytes[] calldatas, string description) returns (uint256)",  # noqa: E501
        "function proposalCount() view returns (uint256)",
        "event ProposalCreated(uint256 id, address proposer, address[] targets, uint256[] values, string[] signatures, bytes[] calldatas, uint256 startBlock, uint256 endBlock, string description)",  # noqa: E501
    ]
)

PROPOSAL_CREATED_EVENT = get_abi_entry(GOVERNOR_ABI, "ProposalCreated", entry_type="event")
