from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from basket_governance.chain.addresses import normalize_address
from basket_governance.config import ONE_DAY_SECONDS
from basket_governance.governance import (
    DispatchExecutor,
    GovernanceParameters,
    LedgerToken,
    ManualClock,
    ProposalGovernor,
)

START_TIME = 1_700_000_000

OWNER = normalize_address("0x" + "a1" * 20, field_name="owner")
ALICE = normalize_address("0x" + "b2" * 20, field_name="alice")
BOB = normalize_address("0x" + "c3" * 20, field_name="bob")
CAROL = normalize_address("0x" + "d4" * 20, field_name="carol")
DAVE = normalize_address("0x" + "e5" * 20, field_name="dave")
GOVERNOR = normalize_address("0x" + "f6" * 20, field_name="governor")
TOKEN = normalize_address("0x" + "07" * 20, field_name="token")


def default_parameters(**overrides: Any) -> GovernanceParameters:
    values: dict[str, Any] = {
        "proposal_threshold": 100,
        "quorum_percentage": 10,
        "voting_period": 3 * ONE_DAY_SECONDS,
        "voting_delay": 0,
        "execution_delay": ONE_DAY_SECONDS,
        "execution_grace_period": None,
    }
    values.update(overrides)
    return GovernanceParameters(**values)


@pytest.fixture
def make_governor() -> Callable[..., ProposalGovernor]:
    """Governor over a ledger where alice=1000, bob=500, carol=50 (supply 1550).

    Pass ``balances=`` to start from a different genesis allocation.
    """

    def _build(balances: dict[str, int] | None = None, **overrides: Any) -> ProposalGovernor:
        clock = ManualClock(START_TIME)
        allocation = {ALICE: 1000, BOB: 500, CAROL: 50} if balances is None else balances
        token = LedgerToken(TOKEN, allocation, clock=clock)
        executor = DispatchExecutor()
        governor = ProposalGovernor(
            address=GOVERNOR,
            owner=OWNER,
            token=token,
            clock=clock,
            executor=executor,
            parameters=default_parameters(**overrides),
        )
        executor.register(governor.address, governor.as_contract_handler())
        return governor

    return _build
