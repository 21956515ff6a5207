import os
from enum import Enum
from pathlib import Path
from typing import Dict, Optional

import yaml
from ape import networks

from protocol_deployment.constants import (
    NETWORK_TIERS_ENVVAR,
    NETWORK_TIERS_FILEPATH,
    REGISTER_WITH_MULTISIG_ENVVAR,
)
from protocol_deployment.errors import DeploymentConfigError

LOCAL_NETWORK_NAMES = ["local"]
FORK_SUFFIX = "-fork"


class NetworkTier(Enum):
    LOCAL = "local"
    TESTNET = "testnet"
    MAINNET = "mainnet"


def _tiers_filepath() -> Path:
    override = os.environ.get(NETWORK_TIERS_ENVVAR)
    return Path(override) if override else NETWORK_TIERS_FILEPATH


def load_network_tiers(filepath: Optional[Path] = None) -> Dict[str, NetworkTier]:
    """Loads the network name -> trust tier mapping from a YAML file."""
    filepath = filepath or _tiers_filepath()
    if not filepath.exists():
        raise DeploymentConfigError(f"Network tiers file not found at {filepath}")

    with open(filepath, "r") as file:
        config = yaml.safe_load(file) or dict()

    raw_tiers = config.get("tiers")
    if not isinstance(raw_tiers, dict):
        raise DeploymentConfigError(f"'tiers' mapping is missing in {filepath}")

    tiers = dict()
    for network_name, tier in raw_tiers.items():
        try:
            tiers[str(network_name)] = NetworkTier(str(tier).lower())
        except ValueError as e:
            valid = ", ".join(t.value for t in NetworkTier)
            raise DeploymentConfigError(
                f"Invalid tier '{tier}' for network '{network_name}'; expected one of {valid}"
            ) from e
    return tiers


def classify_network(
    network_name: str,
    ecosystem_name: Optional[str] = None,
    tiers: Optional[Dict[str, NetworkTier]] = None,
) -> NetworkTier:
    """
    Returns the trust tier of a network. Fork networks are always local;
    '<ecosystem>:<network>' entries take precedence over bare network names.
    """
    if network_name in LOCAL_NETWORK_NAMES or network_name.endswith(FORK_SUFFIX):
        return NetworkTier.LOCAL

    tiers = load_network_tiers() if tiers is None else tiers
    if ecosystem_name:
        qualified = f"{ecosystem_name}:{network_name}"
        if qualified in tiers:
            return tiers[qualified]
    return tiers.get(network_name, NetworkTier.LOCAL)


def current_network_tier(tiers: Optional[Dict[str, NetworkTier]] = None) -> NetworkTier:
    network = networks.provider.network
    return classify_network(
        network_name=network.name, ecosystem_name=network.ecosystem.name, tiers=tiers
    )


def is_local_network() -> bool:
    network_name = networks.provider.network.name
    return network_name in LOCAL_NETWORK_NAMES or network_name.endswith(FORK_SUFFIX)


def multisig_override_from_env() -> bool:
    """Returns True when registrations are forced through the multisig on any network."""
    return os.environ.get(REGISTER_WITH_MULTISIG_ENVVAR, "").strip().lower() == "true"
