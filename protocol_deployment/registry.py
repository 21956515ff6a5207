import json
from collections import defaultdict
from pathlib import Path
from typing import Dict, List, NamedTuple, Optional

from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address
from eth_typing import ABI

from protocol_deployment.utils import _load_json

ChainId = int
ContractName = str


STANDARD_REGISTRY_JSON_FORMAT = {"indent": 4, "separators": (",", ": ")}


class RegistryEntry(NamedTuple):
    """Represents a single named deployment in a contract registry."""

    chain_id: ChainId
    name: ContractName
    address: ChecksumAddress
    abi: ABI
    tx_hash: Optional[str] = None
    block_number: Optional[int] = None
    deployer: Optional[str] = None
    implementation: Optional[ChecksumAddress] = None


def read_registry(filepath: Path) -> List[RegistryEntry]:
    if not filepath.exists():
        return list()
    registry_entries = list()
    for chain_id, entries in _load_json(filepath).items():
        for contract_name, artifacts in entries.items():
            implementation = artifacts.get("implementation")
            registry_entry = RegistryEntry(
                chain_id=int(chain_id),
                name=contract_name,
                address=to_checksum_address(artifacts["address"]),
                abi=artifacts.get("abi", []),
                tx_hash=artifacts.get("tx_hash"),
                block_number=artifacts.get("block_number"),
                deployer=artifacts.get("deployer"),
                implementation=to_checksum_address(implementation) if implementation else None,
            )
            registry_entries.append(registry_entry)
    return registry_entries


def write_registry(entries: List[RegistryEntry], filepath: Path) -> Path:
    """Writes a contract registry to a file, replacing its previous contents."""
    # Sort registry entries to enforce common order
    entries = sorted(entries, key=lambda entry: (str(entry.chain_id), entry.name))

    data = defaultdict(dict)
    for entry in entries:
        artifacts = {
            "address": entry.address,
            "abi": sorted(entry.abi, key=lambda d: (d["type"], d.get("name", ""))),
            "tx_hash": entry.tx_hash,
            "block_number": entry.block_number,
            "deployer": entry.deployer,
        }
        if entry.implementation:
            artifacts["implementation"] = entry.implementation
        data[str(entry.chain_id)][entry.name] = artifacts

    # Create the parent directory if it does not exist
    filepath.parent.mkdir(parents=True, exist_ok=True)
    with open(filepath, "w") as file:
        json.dump(data, file, **STANDARD_REGISTRY_JSON_FORMAT)
    return filepath


def update_registry(filepath: Path, entries: List[RegistryEntry]) -> Path:
    """Adds entries to a registry; entries with the same chain id and name are replaced."""
    merged: Dict[tuple, RegistryEntry] = {
        (entry.chain_id, entry.name): entry for entry in read_registry(filepath)
    }
    for entry in entries:
        merged[(entry.chain_id, entry.name)] = entry
    write_registry(entries=list(merged.values()), filepath=filepath)
    print(f"(i) Registry updated at {filepath}")
    return filepath


def get_entry(filepath: Path, chain_id: ChainId, name: ContractName) -> Optional[RegistryEntry]:
    for entry in read_registry(filepath):
        if entry.chain_id == chain_id and entry.name == name:
            return entry
    return None


def get_address(filepath: Path, chain_id: ChainId, name: ContractName) -> ChecksumAddress:
    entry = get_entry(filepath=filepath, chain_id=chain_id, name=name)
    if entry is None:
        raise ValueError(f"No '{name}' deployment for chain id {chain_id} in {filepath}")
    return entry.address
