from __future__ import annotations

from enum import IntEnum

from basket_governance.config import TOKEN_UNIT

BASIS_POINTS = 10_000


class StakingTier(IntEnum):
    NONE = 0
    BRONZE = 1
    SILVER = 2
    GOLD = 3
    PLATINUM = 4


DEFAULT_TIER_THRESHOLDS: tuple[int, int, int, int] = (
    100 * TOKEN_UNIT,
    1_000 * TOKEN_UNIT,
    10_000 * TOKEN_UNIT,
    100_000 * TOKEN_UNIT,
)

VOTING_MULTIPLIERS: dict[StakingTier, int] = {
    StakingTier.NONE: BASIS_POINTS,
    StakingTier.BRONZE: BASIS_POINTS,
    StakingTier.SILVER: 11_000,
    StakingTier.GOLD: 12_500,
    StakingTier.PLATINUM: 15_000,
}


def tier_for_amount(amount: int, thresholds: tuple[int, int, int, int]) -> StakingTier:
    tier = StakingTier.NONE
    for candidate, minimum in zip(
        (StakingTier.BRONZE, StakingTier.SILVER, StakingTier.GOLD, StakingTier.PLATINUM),
        thresholds,
        strict=True,
    ):
        if amount >= minimum:
            tier = candidate
    return tier
