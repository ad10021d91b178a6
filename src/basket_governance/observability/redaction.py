from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

REDACTED = "***REDACTED***"

SENSITIVE_KEYS: frozenset[str] = frozenset(
    {
        "secret",
        "token",
        "private_key",
        "api_key",
        "password",
        "mnemonic",
    }
)

# Token amounts and addresses are logged freely; only key-shaped hex is masked.
PRIVATE_KEY_PATTERN = re.compile(r"^(0x)?[0-9a-fA-F]{64}$")

ALLOWED_KEYS: frozenset[str] = frozenset({"voting_token", "voting_token_address"})


def _is_sensitive_key(key: str) -> bool:
    normalized = key.lower()
    if normalized in ALLOWED_KEYS:
        return False
    return any(sensitive in normalized for sensitive in SENSITIVE_KEYS)


def _looks_like_private_key(value: Any) -> bool:
    return isinstance(value, str) and bool(PRIVATE_KEY_PATTERN.match(value.strip()))


def redact_sensitive(data: Any) -> Any:
    if isinstance(data, Mapping):
        return {
            key: REDACTED if _is_sensitive_key(str(key)) else redact_sensitive(value)
            for key, value in data.items()
        }
    if isinstance(data, list | tuple):
        return [redact_sensitive(item) for item in data]
    if _looks_like_private_key(data):
        return REDACTED
    return data
