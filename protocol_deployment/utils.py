import json
import os
from pathlib import Path
from typing import Any

from ape import project
from ape.contracts import ContractContainer

from protocol_deployment.networks import is_local_network

ETHERSCAN_API_KEY_ENVVAR = "ETHERSCAN_API_KEY"


def _load_json(filepath: Path) -> Any:
    """Loads a JSON file."""
    with open(filepath, "r") as file:
        return json.load(file)


def check_etherscan_plugin() -> None:
    """
    Checks that the ape-etherscan plugin is installed and that
    the explorer API key environment variable is set.
    """
    if is_local_network():
        # unnecessary for local deployment
        return
    try:
        import ape_etherscan  # noqa: F401
    except ImportError as e:
        raise ImportError("Please install the ape-etherscan plugin to use this script.") from e
    if not os.environ.get(ETHERSCAN_API_KEY_ENVVAR):
        raise ValueError(f"{ETHERSCAN_API_KEY_ENVVAR} is not set.")


def check_plugins(verify: bool = False) -> None:
    print("Checking plugins...")
    if verify:
        check_etherscan_plugin()


def get_contract_container(contract: str) -> ContractContainer:
    """Returns the compiled contract container from the project or one of its dependencies."""
    try:
        return getattr(project, contract)
    except AttributeError:
        pass  # not in root project; check dependencies

    for dependency_name, dependency_versions in project.dependencies.items():
        if len(dependency_versions) > 1:
            raise ValueError(f"Ambiguous {dependency_name} dependency for {contract}")
        dependency_api = list(dependency_versions.values())[0]
        container = getattr(dependency_api, contract, None)
        if container is not None:
            return container
    raise ValueError(f"No contract found with name '{contract}'.")

