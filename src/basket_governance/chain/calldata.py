"""ABI call-data helpers for proposal payloads.

Payloads follow the Solidity convention: a 4-byte selector derived from the
canonical function signature, followed by the ABI-encoded arguments.
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from eth_abi import decode, encode
from eth_utils import function_signature_to_4byte_selector

SELECTOR_SIZE = 4


def argument_types(signature: str) -> list[str]:
    try:
        inner = signature[signature.index("(") + 1 : signature.rindex(")")]
    except ValueError as exc:
        raise ValueError(f"malformed function signature: {signature}") from exc
    return [part.strip() for part in inner.split(",") if part.strip()]


def selector_for(signature: str) -> bytes:
    return bytes(function_signature_to_4byte_selector(signature))


def encode_call(signature: str, args: Sequence[Any] = ()) -> bytes:
    types = argument_types(signature)
    if len(types) != len(args):
        raise ValueError(f"{signature} expects {len(types)} arguments, got {len(args)}")
    return selector_for(signature) + encode(types, list(args))


def decode_arguments(signature: str, call_data: bytes) -> tuple[Any, ...]:
    if call_data[:SELECTOR_SIZE] != selector_for(signature):
        raise ValueError(f"call data does not match {signature}")
    return tuple(decode(argument_types(signature), call_data[SELECTOR_SIZE:]))


def parse_hex_payload(raw_value: str) -> bytes:
    candidate = raw_value.strip()
    if candidate.startswith(("0x", "0X")):
        candidate = candidate[2:]
    try:
        return bytes.fromhex(candidate)
    except ValueError as exc:
        raise ValueError("call_data must be a hex string") from exc


def coerce_argument(abi_type: str, raw_value: str) -> Any:
    """Turn a command-line string into the Python value eth-abi expects."""
    value = raw_value.strip()
    if abi_type.startswith(("uint", "int")):
        return int(value, 0)
    if abi_type == "bool":
        normalized = value.lower()
        if normalized in {"true", "1", "yes"}:
            return True
        if normalized in {"false", "0", "no"}:
            return False
        raise ValueError(f"invalid bool argument: {raw_value}")
    if abi_type.startswith("bytes"):
        return parse_hex_payload(value)
    return value


def encode_call_from_strings(signature: str, raw_args: Sequence[str]) -> bytes:
    types = argument_types(signature)
    if len(types) != len(raw_args):
        raise ValueError(f"{signature} expects {len(types)} arguments, got {len(raw_args)}")
    return encode_call(
        signature, [coerce_argument(abi_type, raw) for abi_type, raw in zip(types, raw_args)]
    )
