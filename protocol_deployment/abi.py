import re
from typing import Any, Dict, List, Sequence

from eth_abi import encode
from eth_utils import function_signature_to_4byte_selector, keccak
from hexbytes import HexBytes
from eth_typing import ABI

#
# Human-readable ABI fragments, e.g.
#   "function setImplementation(address _implementation)"
#   "function transactions(uint256) view returns (address destination, bool executed)"
#   "event Submission(uint256 indexed transactionId)"
#

_FRAGMENT = re.compile(r"^\s*(function|event)\s+(\w+)\s*\(([^)]*)\)\s*(.*?)\s*$")
_RETURNS = re.compile(r"returns\s*\(([^)]*)\)")
_MUTABILITIES = ("view", "pure", "payable", "nonpayable")
_DATA_LOCATIONS = ("memory", "calldata", "storage")


def _parse_params(raw: str, allow_indexed: bool = False) -> List[Dict[str, Any]]:
    params = list()
    raw = raw.strip()
    if not raw:
        return params
    for position, param in enumerate(raw.split(",")):
        tokens = [t for t in param.split() if t not in _DATA_LOCATIONS]
        if not tokens:
            raise ValueError(f"Empty parameter at position {position} in '{raw}'")
        entry = {"type": tokens[0], "name": ""}
        rest = tokens[1:]
        if allow_indexed:
            entry["indexed"] = "indexed" in rest
            rest = [t for t in rest if t != "indexed"]
        elif "indexed" in rest:
            raise ValueError("Only event parameters can be indexed")
        if len(rest) > 1:
            raise ValueError(f"Malformed parameter '{param.strip()}'")
        if rest:
            entry["name"] = rest[0]
        params.append(entry)
    return params


def parse_fragment(fragment: str) -> Dict[str, Any]:
    """Parses a single human-readable function or event declaration into an ABI entry."""
    match = _FRAGMENT.match(fragment)
    if not match:
        raise ValueError(f"Malformed ABI fragment '{fragment}'")
    kind, name, raw_inputs, tail = match.groups()

    if kind == "event":
        return {
            "type": "event",
            "name": name,
            "inputs": _parse_params(raw_inputs, allow_indexed=True),
            "anonymous": tail.strip() == "anonymous",
        }

    returns = _RETURNS.search(tail)
    outputs = _parse_params(returns.group(1)) if returns else list()
    modifiers = _RETURNS.sub("", tail).split()
    mutability = next((m for m in modifiers if m in _MUTABILITIES), "nonpayable")
    return {
        "type": "function",
        "name": name,
        "inputs": _parse_params(raw_inputs),
        "outputs": outputs,
        "stateMutability": mutability,
    }


def human_readable_abi(fragments: Sequence[str]) -> ABI:
    return [parse_fragment(fragment) for fragment in fragments]


def get_abi_entry(abi: ABI, name: str, entry_type: str = "function") -> Dict[str, Any]:
    for entry in abi:
        if entry.get("type") == entry_type and entry.get("name") == name:
            return entry
    raise ValueError(f"No {entry_type} named '{name}' in ABI.")


def abi_signature(entry: Dict[str, Any]) -> str:
    """Returns the canonical signature, e.g. 'setImplementation(address)'."""
    types = ",".join(abi_input["type"] for abi_input in entry.get("inputs", []))
    return f"{entry['name']}({types})"


def function_selector(entry: Dict[str, Any]) -> HexBytes:
    return HexBytes(function_signature_to_4byte_selector(abi_signature(entry)))


def event_topic(entry: Dict[str, Any]) -> HexBytes:
    return HexBytes(keccak(text=abi_signature(entry)))


def encode_arguments(entry: Dict[str, Any], args: Sequence[Any]) -> HexBytes:
    types = [abi_input["type"] for abi_input in entry.get("inputs", [])]
    if len(types) != len(args):
        raise ValueError(
            f"'{abi_signature(entry)}' expects {len(types)} argument(s), got {len(args)}"
        )
    return HexBytes(encode(types, list(args)))


def encode_function_call(entry: Dict[str, Any], args: Sequence[Any]) -> HexBytes:
    """Builds call data: the 4-byte selector followed by the ABI-encoded arguments."""
    return HexBytes(function_selector(entry) + encode_arguments(entry, args))
