from __future__ import annotations

from eth_utils import is_address, keccak, to_checksum_address

from basket_governance.errors import GovernanceValidationError

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def normalize_address(raw_value: str, *, field_name: str) -> str:
    candidate = str(raw_value).strip()
    if not candidate:
        raise GovernanceValidationError(f"{field_name} is required")

    if not is_address(candidate):
        raise GovernanceValidationError(f"{field_name} must be a valid EVM address")
    return str(to_checksum_address(candidate))


def is_zero_address(address: str) -> bool:
    return int(address, 16) == 0


def derive_contract_address(seed: str) -> str:
    """Deterministic stand-in for a deployed contract address."""
    digest = keccak(text=seed)
    return str(to_checksum_address("0x" + digest[-20:].hex()))
