from collections.abc import Mapping
from typing import Any, Dict, Iterator, List, NamedTuple, Optional

from eth_abi import decode
from eth_abi.exceptions import DecodingError
from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address, to_hex
from hexbytes import HexBytes

from protocol_deployment.abi import abi_signature, event_topic
from protocol_deployment.chain import ChainClient
from protocol_deployment.errors import DecodeError, EventNotFound


class EventField(NamedTuple):
    """A single decoded event parameter."""

    type: str
    indexed: bool
    value: Any


ParsedEvent = Dict[str, EventField]


def _is_dynamic(abi_type: str) -> bool:
    # indexed dynamic values are stored in topics as their keccak hash
    return abi_type in ("string", "bytes") or abi_type.endswith("]") or abi_type.startswith("(")


def _normalize(abi_type: str, value: Any) -> Any:
    if abi_type == "address":
        return to_checksum_address(value)
    if abi_type.startswith("address[") and isinstance(value, (list, tuple)):
        return [to_checksum_address(item) for item in value]
    return value


def _receipt_logs(receipt: Any) -> List[Any]:
    if isinstance(receipt, Mapping):
        return list(receipt["logs"])
    return list(receipt.logs)


def _log_topics(log: Any) -> List[HexBytes]:
    topics = log["topics"] if isinstance(log, Mapping) else log.topics
    return [HexBytes(topic) for topic in topics]


def _log_address(log: Any) -> ChecksumAddress:
    address = log["address"] if isinstance(log, Mapping) else log.address
    return to_checksum_address(address)


def _log_data(log: Any) -> HexBytes:
    data = log["data"] if isinstance(log, Mapping) else log.data
    return HexBytes(data or b"")


def decode_log(log: Any, event_abi: Dict[str, Any]) -> ParsedEvent:
    """Decodes a raw log entry into a mapping of parameter name to EventField."""
    event_name = event_abi["name"]
    inputs = event_abi.get("inputs", [])
    try:
        topics = _log_topics(log)
    except (ValueError, TypeError) as e:
        raise DecodeError(event_name, f"malformed topics: {e}") from e
    if not event_abi.get("anonymous", False):
        topics = topics[1:]  # drop the signature topic

    indexed_inputs = [abi_input for abi_input in inputs if abi_input.get("indexed")]
    if len(topics) != len(indexed_inputs):
        raise DecodeError(
            event_name,
            f"expected {len(indexed_inputs)} indexed topic(s), found {len(topics)}",
        )

    data_types = [abi_input["type"] for abi_input in inputs if not abi_input.get("indexed")]
    try:
        data_values = iter(decode(data_types, _log_data(log)))
    except (DecodingError, ValueError, TypeError) as e:
        raise DecodeError(event_name, str(e)) from e

    parsed = dict()
    topic_values = iter(topics)
    for position, abi_input in enumerate(inputs):
        abi_type = abi_input["type"]
        indexed = bool(abi_input.get("indexed"))
        if not indexed:
            value = next(data_values)
        elif _is_dynamic(abi_type):
            value = next(topic_values)
        else:
            try:
                (value,) = decode([abi_type], next(topic_values))
            except (DecodingError, ValueError, TypeError) as e:
                raise DecodeError(event_name, f"topic for '{abi_input['name']}': {e}") from e

        name = abi_input.get("name") or f"arg{position}"
        parsed[name] = EventField(type=abi_type, indexed=indexed, value=_normalize(abi_type, value))
    return parsed


def _matching_logs(
    receipt: Any, topic: HexBytes, address: Optional[str] = None
) -> Iterator[Any]:
    address = to_checksum_address(address) if address else None
    for log in _receipt_logs(receipt):
        try:
            if address and _log_address(log) != address:
                continue
            topics = _log_topics(log)
        except (ValueError, TypeError, KeyError, AttributeError):
            continue  # a malformed log cannot carry the topic
        if topic in topics:
            yield log


def parse_event_from_receipt(
    receipt: Any, event_abi: Dict[str, Any], address: Optional[str] = None
) -> ParsedEvent:
    """
    Finds the first log of the receipt carrying the event's topic and decodes it.
    When an address is given, only logs emitted by that contract are considered.
    Raises EventNotFound if no log matches.
    """
    topic = event_topic(event_abi)
    for log in _matching_logs(receipt, topic, address):
        return decode_log(log, event_abi)
    raise EventNotFound(event_name=abi_signature(event_abi), topic=to_hex(topic))


def parse_events_from_receipt(
    receipt: Any, event_abi: Dict[str, Any], address: Optional[str] = None
) -> List[ParsedEvent]:
    """Decodes every log of the receipt carrying the event's topic, in log order."""
    topic = event_topic(event_abi)
    return [decode_log(log, event_abi) for log in _matching_logs(receipt, topic, address)]


def event_values(parsed: ParsedEvent) -> Dict[str, Any]:
    return {name: field.value for name, field in parsed.items()}


def query_events(
    client: ChainClient,
    address: str,
    event_abi: Dict[str, Any],
    start_block: int = 0,
    stop_block: Optional[int] = None,
) -> List[ParsedEvent]:
    """Fetches and decodes the historical occurrences of an event emitted by a contract."""
    logs = client.get_logs(
        address=address,
        topics=[event_topic(event_abi)],
        start_block=start_block,
        stop_block=stop_block,
    )
    return [decode_log(log, event_abi) for log in logs]
