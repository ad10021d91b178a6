from __future__ import annotations

import pytest

from basket_governance.config import TOKEN_UNIT
from basket_governance.domain.tiers import (
    DEFAULT_TIER_THRESHOLDS,
    VOTING_MULTIPLIERS,
    StakingTier,
    tier_for_amount,
)
from basket_governance.errors import AuthorizationError, GovernanceError, GovernanceValidationError
from basket_governance.governance import (
    DispatchExecutor,
    LedgerToken,
    ManualClock,
    ProposalGovernor,
    StakingLedger,
)
from conftest import ALICE, BOB, GOVERNOR, OWNER, TOKEN, default_parameters


@pytest.mark.parametrize(
    ("whole_tokens", "expected"),
    [
        (0, StakingTier.NONE),
        (99, StakingTier.NONE),
        (100, StakingTier.BRONZE),
        (999, StakingTier.BRONZE),
        (1_000, StakingTier.SILVER),
        (10_000, StakingTier.GOLD),
        (250_000, StakingTier.PLATINUM),
    ],
)
def test_tier_for_amount_uses_inclusive_minimums(whole_tokens: int, expected: StakingTier) -> None:
    assert tier_for_amount(whole_tokens * TOKEN_UNIT, DEFAULT_TIER_THRESHOLDS) is expected


def test_multipliers_are_expressed_in_basis_points() -> None:
    assert VOTING_MULTIPLIERS[StakingTier.NONE] == 10_000
    assert VOTING_MULTIPLIERS[StakingTier.BRONZE] == 10_000
    assert VOTING_MULTIPLIERS[StakingTier.SILVER] == 11_000
    assert VOTING_MULTIPLIERS[StakingTier.GOLD] == 12_500
    assert VOTING_MULTIPLIERS[StakingTier.PLATINUM] == 15_000


def _ledger() -> StakingLedger:
    token = LedgerToken(
        TOKEN, {ALICE: 20_000 * TOKEN_UNIT, BOB: 50 * TOKEN_UNIT}, clock=ManualClock(0)
    )
    return StakingLedger(owner=OWNER, token=token)


def test_stake_and_unstake_move_between_tiers() -> None:
    ledger = _ledger()

    assert ledger.stake(ALICE, 1_000 * TOKEN_UNIT) is StakingTier.SILVER
    assert ledger.stake(ALICE, 9_000 * TOKEN_UNIT) is StakingTier.GOLD
    assert ledger.voting_multiplier(ALICE) == 12_500

    assert ledger.unstake(ALICE, 9_950 * TOKEN_UNIT) is StakingTier.NONE
    assert ledger.staked_amount(ALICE) == 50 * TOKEN_UNIT

    ledger.unstake(ALICE, 50 * TOKEN_UNIT)
    assert ledger.staked_amount(ALICE) == 0
    assert ledger.to_dict()["stakes"] == {}


def test_stake_cannot_exceed_balance() -> None:
    ledger = _ledger()

    with pytest.raises(GovernanceError, match="insufficient balance to stake"):
        ledger.stake(BOB, 51 * TOKEN_UNIT)
    with pytest.raises(GovernanceValidationError, match="invalid amount"):
        ledger.stake(BOB, 0)
    with pytest.raises(GovernanceError, match="insufficient staked amount"):
        ledger.unstake(BOB, 1)


def test_tier_is_capped_by_tokens_still_held() -> None:
    ledger = _ledger()
    ledger.stake(ALICE, 10_000 * TOKEN_UNIT)
    assert ledger.tier_of(ALICE) is StakingTier.GOLD

    ledger.token.transfer(ALICE, BOB, 19_500 * TOKEN_UNIT)  # type: ignore[attr-defined]

    assert ledger.staked_amount(ALICE) == 10_000 * TOKEN_UNIT
    assert ledger.tier_of(ALICE) is StakingTier.BRONZE
    assert ledger.voting_multiplier(ALICE) == VOTING_MULTIPLIERS[StakingTier.BRONZE]


def test_tier_thresholds_are_owner_managed_and_increasing() -> None:
    ledger = _ledger()
    ledger.stake(BOB, 50 * TOKEN_UNIT)

    with pytest.raises(AuthorizationError, match="caller is not the owner"):
        ledger.set_tier_thresholds([1, 2, 3, 4], caller=BOB)
    with pytest.raises(GovernanceValidationError, match="must be increasing"):
        ledger.set_tier_thresholds([10, 10, 30, 40], caller=OWNER)
    with pytest.raises(GovernanceValidationError, match="expected bronze"):
        ledger.set_tier_thresholds([10, 20], caller=OWNER)

    ledger.set_tier_thresholds(
        [10 * TOKEN_UNIT, 40 * TOKEN_UNIT, 500 * TOKEN_UNIT, 5_000 * TOKEN_UNIT], caller=OWNER
    )
    assert ledger.tier_of(BOB) is StakingTier.SILVER


def test_governor_weighs_votes_by_staking_multiplier() -> None:
    clock = ManualClock(0)
    token = LedgerToken(TOKEN, {ALICE: 2_000 * TOKEN_UNIT, BOB: 2_000 * TOKEN_UNIT}, clock=clock)
    staking = StakingLedger(owner=OWNER, token=token)
    governor = ProposalGovernor(
        address=GOVERNOR,
        owner=OWNER,
        token=token,
        clock=clock,
        executor=DispatchExecutor(),
        parameters=default_parameters(),
        staking=staking,
    )

    staking.stake(ALICE, 1_000 * TOKEN_UNIT)

    assert governor.get_voting_power(ALICE) == 2_200 * TOKEN_UNIT
    assert governor.get_voting_power(BOB) == 2_000 * TOKEN_UNIT

    governor.set_staking_multiplier(None, caller=OWNER)
    assert governor.get_voting_power(ALICE) == 2_000 * TOKEN_UNIT


def test_ledger_round_trips_through_dict() -> None:
    ledger = _ledger()
    ledger.stake(ALICE, 100 * TOKEN_UNIT)

    restored = StakingLedger.from_dict(ledger.to_dict(), token=ledger.token)

    assert restored.staked_amount(ALICE) == 100 * TOKEN_UNIT
    assert restored.thresholds == DEFAULT_TIER_THRESHOLDS
