from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from basket_governance.chain.addresses import normalize_address
from basket_governance.domain.tiers import (
    DEFAULT_TIER_THRESHOLDS,
    VOTING_MULTIPLIERS,
    StakingTier,
    tier_for_amount,
)
from basket_governance.errors import (
    AuthorizationError,
    GovernanceError,
    GovernanceValidationError,
)
from basket_governance.governance.collaborators import VotingToken
from basket_governance.observability.logging import get_logger


class StakingLedger:
    """Tier bookkeeping for BASKET stakers.

    Stakes are recorded against the holder's token balance rather than held in
    custody, so a holder can never stake more than they own.
    """

    def __init__(
        self,
        *,
        owner: str,
        token: VotingToken,
        thresholds: Sequence[int] = DEFAULT_TIER_THRESHOLDS,
        stakes: Mapping[str, int] | None = None,
    ) -> None:
        self.owner = _account(owner)
        self.token = token
        self.thresholds = _validated_thresholds(thresholds)
        self._stakes: dict[str, int] = {
            _account(holder): int(amount) for holder, amount in (stakes or {}).items()
        }
        self._logger = get_logger("staking_ledger")

    def staked_amount(self, account: str) -> int:
        return self._stakes.get(_account(account), 0)

    def stake(self, account: str, amount: int) -> StakingTier:
        holder = _account(account)
        if amount <= 0:
            raise GovernanceValidationError("invalid amount")
        total = self._stakes.get(holder, 0) + amount
        if total > self.token.balance_of(holder):
            raise GovernanceError("insufficient balance to stake")

        self._stakes[holder] = total
        tier = self.tier_of(holder)
        self._logger.info("staked", account=holder, amount=amount, tier=tier.name.lower())
        return tier

    def unstake(self, account: str, amount: int) -> StakingTier:
        holder = _account(account)
        if amount <= 0:
            raise GovernanceValidationError("invalid amount")
        current = self._stakes.get(holder, 0)
        if amount > current:
            raise GovernanceError("insufficient staked amount")

        remaining = current - amount
        if remaining:
            self._stakes[holder] = remaining
        else:
            del self._stakes[holder]
        tier = self.tier_of(holder)
        self._logger.info("unstaked", account=holder, amount=amount, tier=tier.name.lower())
        return tier

    def tier_of(self, account: str) -> StakingTier:
        # Stake only counts while the tokens backing it are still held.
        holder = _account(account)
        backed = min(self.staked_amount(holder), self.token.balance_of(holder))
        return tier_for_amount(backed, self.thresholds)

    def voting_multiplier(self, account: str) -> int:
        return VOTING_MULTIPLIERS[self.tier_of(account)]

    def set_tier_thresholds(self, thresholds: Sequence[int], *, caller: str) -> None:
        if _account(caller) != self.owner:
            raise AuthorizationError("caller is not the owner")
        self.thresholds = _validated_thresholds(thresholds)
        self._logger.info("tier_thresholds_updated", thresholds=list(self.thresholds))

    def to_dict(self) -> dict[str, Any]:
        return {
            "owner": self.owner,
            "thresholds": list(self.thresholds),
            "stakes": dict(self._stakes),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, token: VotingToken) -> StakingLedger:
        return cls(
            owner=str(data["owner"]),
            token=token,
            thresholds=[int(value) for value in data["thresholds"]],
            stakes=data.get("stakes", {}),
        )


def _validated_thresholds(thresholds: Sequence[int]) -> tuple[int, int, int, int]:
    values = tuple(int(value) for value in thresholds)
    if len(values) != 4:
        raise GovernanceValidationError("expected bronze, silver, gold and platinum thresholds")
    if values[0] <= 0 or any(lower >= upper for lower, upper in zip(values, values[1:])):
        raise GovernanceValidationError("tier thresholds must be increasing")
    return values[0], values[1], values[2], values[3]


def _account(raw_value: str) -> str:
    return normalize_address(raw_value, field_name="account")
