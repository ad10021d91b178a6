from __future__ import annotations

from collections.abc import Callable

from basket_governance.config import ONE_DAY_SECONDS
from basket_governance.domain.proposal import ProposalState, VoteType
from basket_governance.governance import ProposalGovernor
from basket_governance.runtime.keeper import (
    DEFAULT_POLL_INTERVAL_SECONDS,
    GovernanceKeeper,
    _poll_interval_from_env,
)
from conftest import ALICE, BOB, CAROL

GovernorFactory = Callable[..., ProposalGovernor]


def _propose(governor: ProposalGovernor, target: str) -> int:
    return governor.propose("Rebalance", "", 0, target, b"", 0, caller=ALICE)


def test_keeper_queues_then_executes_passed_proposals(make_governor: GovernorFactory) -> None:
    governor = make_governor()
    passed = _propose(governor, "0x" + "00" * 20)
    rejected = _propose(governor, "0x" + "00" * 20)
    governor.cast_vote(passed, VoteType.FOR, caller=ALICE)
    governor.cast_vote(rejected, VoteType.AGAINST, caller=ALICE)
    governor.cast_vote(rejected, VoteType.FOR, caller=BOB)
    keeper = GovernanceKeeper(governor)

    assert keeper.run_once().changed is False

    governor.clock.advance(3 * ONE_DAY_SECONDS)  # type: ignore[attr-defined]
    first = keeper.run_once()
    assert first.queued == [passed]
    assert first.executed == []

    assert keeper.run_once().changed is False

    governor.clock.advance(ONE_DAY_SECONDS)  # type: ignore[attr-defined]
    second = keeper.run_once()
    assert second.executed == [passed]
    assert governor.state(passed) is ProposalState.EXECUTED
    assert governor.state(rejected) is ProposalState.DEFEATED


def test_keeper_reports_failed_execution_and_continues(make_governor: GovernorFactory) -> None:
    governor = make_governor()
    broken = _propose(governor, "0x" + "77" * 20)
    healthy = _propose(governor, "0x" + "00" * 20)
    for proposal_id in (broken, healthy):
        governor.cast_vote(proposal_id, VoteType.FOR, caller=ALICE)
        governor.cast_vote(proposal_id, VoteType.FOR, caller=CAROL)
    governor.clock.advance(3 * ONE_DAY_SECONDS)  # type: ignore[attr-defined]
    keeper = GovernanceKeeper(governor)
    keeper.run_once()
    governor.clock.advance(ONE_DAY_SECONDS)  # type: ignore[attr-defined]

    report = keeper.run_once()

    assert report.executed == [healthy]
    assert list(report.failed) == [broken]
    assert "unregistered target" in report.failed[broken]
    assert governor.state(broken) is ProposalState.QUEUED
    assert report.as_dict()["failed"] == {str(broken): report.failed[broken]}


def test_poll_interval_from_env_rejects_invalid_or_non_positive_values(monkeypatch: object) -> None:
    monkeypatch.setenv("KEEPER_POLL_INTERVAL_SECONDS", "invalid")  # type: ignore[attr-defined]
    assert _poll_interval_from_env() == DEFAULT_POLL_INTERVAL_SECONDS

    monkeypatch.setenv("KEEPER_POLL_INTERVAL_SECONDS", "0")  # type: ignore[attr-defined]
    assert _poll_interval_from_env() == DEFAULT_POLL_INTERVAL_SECONDS

    monkeypatch.setenv("KEEPER_POLL_INTERVAL_SECONDS", "-5")  # type: ignore[attr-defined]
    assert _poll_interval_from_env() == DEFAULT_POLL_INTERVAL_SECONDS


def test_poll_interval_from_env_accepts_valid_float(monkeypatch: object) -> None:
    monkeypatch.setenv("KEEPER_POLL_INTERVAL_SECONDS", "12.5")  # type: ignore[attr-defined]

    assert _poll_interval_from_env() == 12.5
