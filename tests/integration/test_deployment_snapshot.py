from __future__ import annotations

import json
from pathlib import Path

import pytest

from basket_governance.config import TOKEN_UNIT, AppSettings
from basket_governance.domain.proposal import ProposalState, VoteType
from basket_governance.errors import GovernanceError
from basket_governance.governance.deployment import (
    DeploymentNotFoundError,
    create_deployment,
    load_deployment,
    save_deployment,
)
from conftest import ALICE, BOB, OWNER, START_TIME


def test_deployment_survives_save_and_load(tmp_path: Path) -> None:
    settings = AppSettings(state_path=str(tmp_path / "deployment.json"))
    deployment = create_deployment(OWNER, settings, start_time=START_TIME)
    deployment.token.mint(ALICE, 1_000 * TOKEN_UNIT)
    deployment.token.mint(BOB, 100 * TOKEN_UNIT)
    deployment.staking.stake(ALICE, 1_000 * TOKEN_UNIT)
    deployment.clock.advance(60)
    proposal_id = deployment.governor.propose(
        "Fee cut", "Lower the exit fee", 3, OWNER, b"", 0, caller=ALICE
    )
    deployment.governor.cast_vote(proposal_id, VoteType.FOR, caller=ALICE)
    path = Path(settings.state_path)

    save_deployment(deployment, path)
    restored = load_deployment(path, settings)

    assert restored.addresses() == deployment.addresses()
    assert restored.clock.now() == START_TIME + 60
    assert restored.token.balance_of_at(ALICE, START_TIME) == 0
    assert restored.token.balance_of_at(ALICE, START_TIME + 1) == 1_000 * TOKEN_UNIT
    assert restored.token.total_supply_at(START_TIME + 1) == 1_100 * TOKEN_UNIT
    assert restored.governor.is_threshold_exempt(restored.proxy.address)
    assert restored.staking.staked_amount(ALICE) == 1_000 * TOKEN_UNIT
    assert restored.governor.get_voting_power(ALICE) == 1_100 * TOKEN_UNIT
    assert restored.governor.state(proposal_id) is ProposalState.ACTIVE
    assert restored.governor.get_vote(proposal_id, ALICE) == deployment.governor.get_vote(
        proposal_id, ALICE
    )
    assert restored.governor.get_proposal_details(proposal_id).as_dict() == (
        deployment.governor.get_proposal_details(proposal_id).as_dict()
    )
    assert not path.with_suffix(".json.tmp").exists()


def test_load_rejects_missing_and_unknown_snapshots(tmp_path: Path) -> None:
    settings = AppSettings(state_path=str(tmp_path / "deployment.json"))
    path = Path(settings.state_path)

    with pytest.raises(DeploymentNotFoundError, match="run init-deployment first"):
        load_deployment(path, settings)

    path.write_text(json.dumps({"version": 99}))
    with pytest.raises(GovernanceError, match="unsupported snapshot version"):
        load_deployment(path, settings)


def test_contract_addresses_depend_on_owner_and_name() -> None:
    settings = AppSettings()

    first = create_deployment(OWNER, settings, start_time=0)
    renamed = create_deployment(OWNER, settings, start_time=0, dao_name="other-basket")

    assert first.addresses()["basket_governance"] == create_deployment(
        OWNER, settings, start_time=0
    ).addresses()["basket_governance"]
    assert first.addresses()["basket_governance"] != renamed.addresses()["basket_governance"]
    assert len(set(first.addresses().values())) == 4
