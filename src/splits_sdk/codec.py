"""ABI encode/decode helpers built on eth-abi.

Used to produce call data for the Encode strategy and the multicall batcher,
and to decode receipt logs without a live connection.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from eth_abi import decode, encode
from eth_utils import (
    collapse_if_tuple,
    encode_hex,
    event_abi_to_log_topic,
    function_abi_to_4byte_selector,
    to_bytes,
    to_checksum_address,
)
from hexbytes import HexBytes

from .types import CallDescriptor


def _input_types(abi_item: Mapping[str, Any]) -> list[str]:
    return [collapse_if_tuple(dict(item)) for item in abi_item.get("inputs", [])]


def _to_hex(value: Any) -> str:
    if isinstance(value, str):
        return value if value.startswith("0x") else f"0x{value}"
    return encode_hex(bytes(value))


def _to_bytes(value: Any) -> bytes:
    if isinstance(value, str):
        return to_bytes(hexstr=value)
    return bytes(value)


def encode_function_call(function_abi: Mapping[str, Any], args: Sequence[Any]) -> str:
    """Encode selector + arguments as a 0x-prefixed hex string."""
    selector = function_abi_to_4byte_selector(dict(function_abi))
    encoded_args = encode(_input_types(function_abi), list(args))
    return encode_hex(selector + encoded_args)


def encode_call_descriptor(descriptor: CallDescriptor) -> str:
    return encode_function_call(descriptor.function_abi, descriptor.args)


def event_topic(event_abi: Mapping[str, Any]) -> str:
    """topic0 of a non-anonymous event, 0x-prefixed lowercase hex."""
    return encode_hex(event_abi_to_log_topic(dict(event_abi)))


def events_by_topic(*abis: Sequence[Mapping[str, Any]]) -> dict[str, Mapping[str, Any]]:
    """Map topic0 -> event ABI across one or more contract ABIs."""
    topics: dict[str, Mapping[str, Any]] = {}
    for abi in abis:
        for item in abi:
            if item.get("type") == "event" and not item.get("anonymous", False):
                topics[event_topic(item)] = item
    return topics


def get_event_abi(abi: Sequence[Mapping[str, Any]], name: str) -> Mapping[str, Any]:
    for item in abi:
        if item.get("type") == "event" and item.get("name") == name:
            return item
    raise LookupError(f"Event {name} not found in ABI")


def _normalize(item: Mapping[str, Any], value: Any) -> Any:
    """Checksum every address in ``value``, descending into arrays and tuple components."""
    abi_type = item["type"]
    if abi_type.endswith("]"):
        element = {**item, "type": abi_type[: abi_type.rindex("[")]}
        return [_normalize(element, v) for v in value]
    if abi_type == "tuple":
        return tuple(_normalize(component, v) for component, v in zip(item["components"], value))
    if abi_type == "address":
        return to_checksum_address(value)
    return value


def decode_event_log(event_abi: Mapping[str, Any], log: Mapping[str, Any]) -> dict[str, Any]:
    """
    Decode a log's indexed topics and data into named arguments.

    Indexed dynamic values (strings, bytes, arrays, tuples) are only present
    as their keccak hash and are returned as hex.
    """
    topics = [HexBytes(t) for t in log["topics"]]
    inputs = event_abi.get("inputs", [])

    indexed = [item for item in inputs if item.get("indexed")]
    non_indexed = [item for item in inputs if not item.get("indexed")]

    if len(topics) - 1 < len(indexed):
        raise ValueError(
            f"Log has {len(topics) - 1} indexed topics, {event_abi.get('name')} expects {len(indexed)}"
        )

    data = _to_bytes(log.get("data") or b"")
    non_indexed_types = [collapse_if_tuple(dict(item)) for item in non_indexed]
    non_indexed_values = decode(non_indexed_types, data) if non_indexed_types else ()

    args: dict[str, Any] = {}
    topic_cursor = 1
    value_cursor = 0
    for item in inputs:
        abi_type = collapse_if_tuple(dict(item))
        if item.get("indexed"):
            topic = bytes(topics[topic_cursor])
            topic_cursor += 1
            is_dynamic = abi_type in ("string", "bytes") or abi_type.endswith("]") or abi_type.startswith("(")
            args[item["name"]] = _to_hex(topic) if is_dynamic else _normalize(item, decode([abi_type], topic)[0])
        else:
            args[item["name"]] = _normalize(item, non_indexed_values[value_cursor])
            value_cursor += 1
    return args
