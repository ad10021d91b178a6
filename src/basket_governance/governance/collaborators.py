"""Services the governor consumes but does not own.

The governor only sees the protocols below. The in-memory implementations
back the local deployment driven by the CLI and the test-suite; on-chain
readers live in ``basket_governance.chain``.
"""
from __future__ import annotations

import time
from bisect import bisect_left
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from basket_governance.chain.addresses import is_zero_address, normalize_address
from basket_governance.chain.calldata import SELECTOR_SIZE, decode_arguments, selector_for
from basket_governance.domain.proposal import TargetCall
from basket_governance.errors import GovernanceError, GovernanceValidationError


class VotingToken(Protocol):
    def balance_of(self, account: str) -> int:
        ...

    def total_supply(self) -> int:
        ...

    def balance_of_at(self, account: str, timepoint: int) -> int:
        """Balance held before ``timepoint``; changes made at ``timepoint`` are excluded."""
        ...

    def total_supply_at(self, timepoint: int) -> int:
        ...


class StakingMultiplier(Protocol):
    def voting_multiplier(self, account: str) -> int:
        ...


class CallExecutor(Protocol):
    def call(self, call: TargetCall, *, caller: str) -> bytes:
        ...


class Clock(Protocol):
    def now(self) -> int:
        ...


class SystemClock:
    def now(self) -> int:
        return int(time.time())


@dataclass(slots=True)
class ManualClock:
    current: int = 0

    def now(self) -> int:
        return self.current

    def advance(self, seconds: int) -> int:
        if seconds < 0:
            raise GovernanceValidationError("time cannot move backwards")
        self.current += seconds
        return self.current


Checkpoint = tuple[int, int]


class LedgerToken:
    """Balance ledger standing in for the BASKET ERC-20.

    Constructor balances are the genesis allocation and count at every
    timepoint. Mints and transfers after that are checkpointed against the
    clock, so past balances and supply can be read back the way ERC20Votes
    exposes ``getPastVotes`` and ``getPastTotalSupply``.
    """

    def __init__(
        self,
        address: str,
        balances: Mapping[str, int] | None = None,
        *,
        clock: Clock,
    ) -> None:
        self.address = address
        self.clock = clock
        self._genesis: dict[str, int] = {
            _account(account): int(amount) for account, amount in (balances or {}).items()
        }
        self._checkpoints: dict[str, list[Checkpoint]] = {}
        self._supply_checkpoints: list[Checkpoint] = []

    def balance_of(self, account: str) -> int:
        holder = _account(account)
        checkpoints = self._checkpoints.get(holder)
        if checkpoints:
            return checkpoints[-1][1]
        return self._genesis.get(holder, 0)

    def total_supply(self) -> int:
        if self._supply_checkpoints:
            return self._supply_checkpoints[-1][1]
        return sum(self._genesis.values())

    def balance_of_at(self, account: str, timepoint: int) -> int:
        holder = _account(account)
        return _value_before(
            self._genesis.get(holder, 0), self._checkpoints.get(holder, []), timepoint
        )

    def total_supply_at(self, timepoint: int) -> int:
        return _value_before(sum(self._genesis.values()), self._supply_checkpoints, timepoint)

    def mint(self, account: str, amount: int) -> int:
        if amount <= 0:
            raise GovernanceValidationError("invalid amount")
        holder = _account(account)
        now = self.clock.now()
        balance = self.balance_of(holder) + amount
        _write_checkpoint(self._supply_checkpoints, now, self.total_supply() + amount)
        _write_checkpoint(self._checkpoints.setdefault(holder, []), now, balance)
        return balance

    def transfer(self, sender: str, recipient: str, amount: int) -> None:
        if amount <= 0:
            raise GovernanceValidationError("invalid amount")
        source = _account(sender)
        destination = _account(recipient)
        source_balance = self.balance_of(source)
        if source_balance < amount:
            raise GovernanceError("transfer amount exceeds balance")
        if source == destination:
            return
        now = self.clock.now()
        destination_balance = self.balance_of(destination)
        _write_checkpoint(self._checkpoints.setdefault(source, []), now, source_balance - amount)
        _write_checkpoint(
            self._checkpoints.setdefault(destination, []), now, destination_balance + amount
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "genesis": dict(self._genesis),
            "checkpoints": {
                holder: [list(entry) for entry in entries]
                for holder, entries in self._checkpoints.items()
            },
            "supply_checkpoints": [list(entry) for entry in self._supply_checkpoints],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, clock: Clock) -> LedgerToken:
        token = cls(str(data["address"]), data.get("genesis", {}), clock=clock)
        token._checkpoints = {
            _account(holder): [(int(timestamp), int(value)) for timestamp, value in entries]
            for holder, entries in data.get("checkpoints", {}).items()
        }
        token._supply_checkpoints = [
            (int(timestamp), int(value)) for timestamp, value in data.get("supply_checkpoints", [])
        ]
        return token


def _value_before(genesis: int, checkpoints: list[Checkpoint], timepoint: int) -> int:
    index = bisect_left(checkpoints, (timepoint,))
    return genesis if index == 0 else checkpoints[index - 1][1]


def _write_checkpoint(checkpoints: list[Checkpoint], timestamp: int, value: int) -> None:
    # Same-second writes collapse into one entry.
    if checkpoints and checkpoints[-1][0] == timestamp:
        checkpoints[-1] = (timestamp, value)
    else:
        checkpoints.append((timestamp, value))


@dataclass(slots=True, frozen=True)
class CallContext:
    caller: str
    value: int


ContractFunction = Callable[..., Any]


class ContractHandler:
    """Routes ABI call data to Python callables by 4-byte selector.

    Each function is registered under its canonical signature, e.g.
    ``setQuorumPercentage(uint256)``, and is invoked as
    ``fn(context, *decoded_args)``.
    """

    def __init__(self, functions: Mapping[str, ContractFunction]) -> None:
        self._functions: dict[bytes, tuple[str, ContractFunction]] = {
            selector_for(signature): (signature, fn) for signature, fn in functions.items()
        }

    @property
    def signatures(self) -> list[str]:
        return sorted(signature for signature, _ in self._functions.values())

    def __call__(self, context: CallContext, call_data: bytes) -> bytes:
        entry = self._functions.get(call_data[:SELECTOR_SIZE])
        if entry is None:
            raise GovernanceError("function selector not recognized")
        signature, fn = entry
        try:
            args = decode_arguments(signature, call_data)
        except Exception as exc:
            raise GovernanceValidationError(f"malformed call data for {signature}") from exc
        result = fn(context, *args)
        return result if isinstance(result, bytes) else b""


Handler = Callable[[CallContext, bytes], bytes]


@dataclass(slots=True)
class DispatchExecutor:
    """In-process executor: target address -> registered handler.

    Native value moves between ``native_balances`` only after the handler
    returns, so a failing call leaves balances untouched.
    """

    handlers: dict[str, Handler] = field(default_factory=dict)
    native_balances: dict[str, int] = field(default_factory=dict)

    def register(self, address: str, handler: Handler) -> None:
        self.handlers[_account(address)] = handler

    def fund(self, address: str, amount: int) -> int:
        if amount <= 0:
            raise GovernanceValidationError("invalid amount")
        holder = _account(address)
        self.native_balances[holder] = self.native_balances.get(holder, 0) + amount
        return self.native_balances[holder]

    def call(self, call: TargetCall, *, caller: str) -> bytes:
        sender = _account(caller)
        if call.value > self.native_balances.get(sender, 0):
            raise GovernanceError("insufficient native balance")

        if is_zero_address(call.target):
            return b""

        target = _account(call.target)
        handler = self.handlers.get(target)
        if handler is None:
            raise GovernanceError(f"call to unregistered target {target}")

        result = handler(CallContext(caller=sender, value=call.value), call.call_data)
        if call.value:
            self.native_balances[sender] -= call.value
            self.native_balances[target] = self.native_balances.get(target, 0) + call.value
        return result


def _account(raw_value: str) -> str:
    return normalize_address(raw_value, field_name="account")
