from pathlib import Path

#
# Filesystem
#

DEPLOYMENT_DIR = Path(__file__).parent
CONFIG_DIR = DEPLOYMENT_DIR / "config"
ARTIFACTS_DIR = DEPLOYMENT_DIR / "artifacts"
NETWORK_TIERS_FILEPATH = CONFIG_DIR / "networks.yml"

#
# Environment
#

NETWORK_TIERS_ENVVAR = "PROTOCOL_NETWORK_TIERS"
REGISTER_WITH_MULTISIG_ENVVAR = "STAKING_REG_WITH_MULTISIG"

#
# Contracts
#

MULTISIG_CONTRACT_NAME = "MultiSigWallet"
GOVERNOR_CONTRACT_NAME = "GovernorAlpha"
IMPLEMENTATION_SUFFIX = "_Implementation"

# Submitted multisig transactions get this margin on top of the gas estimate
GAS_ESTIMATE_MARGIN = 1.3

EMPTY_SELECTOR = "0x00000000"

STAKING_MODULES = [
    "StakingAdminModule",
    "StakingGovernanceModule",
    "StakingStakeModule",
    "StakingStorageModule",
    "StakingVestingModule",
    "StakingWithdrawModule",
    "WeightedStakingModule",
]
