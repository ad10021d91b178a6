from __future__ import annotations

import json
from collections.abc import Iterator
from pathlib import Path

import pytest

from basket_governance.cli import entrypoint
from basket_governance.config import ONE_DAY_SECONDS, get_settings
from conftest import ALICE, BOB, CAROL, OWNER, START_TIME


@pytest.fixture(autouse=True)
def isolated_state(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.setenv("STATE_PATH", str(tmp_path / "deployment.json"))
    monkeypatch.setenv("EXECUTION_GRACE_PERIOD_SECONDS", str(2 * ONE_DAY_SECONDS))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def _cli(capsys: pytest.CaptureFixture[str], *argv: str) -> dict[str, object]:
    exit_code = entrypoint(["--json", *argv])
    payload = json.loads(capsys.readouterr().out)
    assert exit_code == (1 if payload["status"] == "failed" else 0)
    return payload


def test_staked_holders_pass_and_keeper_executes(capsys: pytest.CaptureFixture[str]) -> None:
    init = _cli(capsys, "init-deployment", "--owner", OWNER, "--start-time", str(START_TIME))
    governor = init["details"]["addresses"]["basket_governance"]  # type: ignore[index]

    _cli(capsys, "mint", "--account", ALICE, "--amount", "2000")
    _cli(capsys, "mint", "--account", BOB, "--amount", "1500")
    _cli(capsys, "mint", "--account", CAROL, "--amount", "40")
    staked = _cli(capsys, "stake", "--account", ALICE, "--amount", "1000")
    assert staked["details"]["voting_power"] == "2200"  # type: ignore[index]
    _cli(capsys, "advance-time", "--seconds", "60")

    proposed = _cli(
        capsys,
        "propose",
        "--caller",
        ALICE,
        "--title",
        "Lengthen voting",
        "--proposal-type",
        "0",
        "--target",
        governor,
        "--call-signature",
        "setVotingPeriod(uint256)",
        "--call-arg",
        str(5 * ONE_DAY_SECONDS),
    )
    proposal_id = str(proposed["details"]["proposal_id"])  # type: ignore[index]

    denied = _cli(
        capsys, "propose", "--caller", CAROL, "--title", "Spam", "--proposal-type", "0"
    )
    assert denied["details"]["error"] == "insufficient tokens to propose"  # type: ignore[index]

    _cli(capsys, "cast-vote", "--proposal-id", proposal_id, "--voter", ALICE, "--support", "for")
    _cli(capsys, "cast-vote", "--proposal-id", proposal_id, "--voter", BOB, "--support", "against")
    _cli(capsys, "advance-time", "--seconds", str(3 * ONE_DAY_SECONDS))

    state = _cli(capsys, "proposal-state", "--proposal-id", proposal_id)
    assert state["details"]["state"] == "succeeded"  # type: ignore[index]

    first_cycle = _cli(capsys, "run-keeper")
    _cli(capsys, "advance-time", "--seconds", str(ONE_DAY_SECONDS))
    second_cycle = _cli(capsys, "run-keeper")
    details = _cli(capsys, "proposal-details", "--proposal-id", proposal_id, "--voter", BOB)

    assert first_cycle["details"]["queued"] == [1]  # type: ignore[index]
    assert second_cycle["details"]["executed"] == [1]  # type: ignore[index]
    assert details["details"]["state_name"] == "executed"  # type: ignore[index]
    assert details["details"]["for_votes"] == 2_200 * 10**18  # type: ignore[index]
    assert details["details"]["receipt"]["vote"] == 0  # type: ignore[index]

    follow_up = _cli(
        capsys, "propose", "--caller", BOB, "--title", "Next", "--proposal-type", "fee_adjustment"
    )
    assert follow_up["details"]["end_time"] == (  # type: ignore[index]
        START_TIME + 60 + 4 * ONE_DAY_SECONDS + 5 * ONE_DAY_SECONDS
    )


def test_queued_proposal_expires_when_left_unexecuted(capsys: pytest.CaptureFixture[str]) -> None:
    _cli(capsys, "init-deployment", "--owner", OWNER, "--start-time", str(START_TIME))
    _cli(capsys, "mint", "--account", ALICE, "--amount", "500")
    _cli(capsys, "advance-time", "--seconds", "60")
    _cli(capsys, "propose", "--caller", ALICE, "--title", "Idle", "--proposal-type", "4")
    _cli(capsys, "cast-vote", "--proposal-id", "1", "--voter", ALICE, "--support", "for")
    _cli(capsys, "advance-time", "--seconds", str(3 * ONE_DAY_SECONDS))
    queued = _cli(capsys, "queue", "--proposal-id", "1")

    _cli(capsys, "advance-time", "--seconds", str(3 * ONE_DAY_SECONDS + 1))
    state = _cli(capsys, "proposal-state", "--proposal-id", "1")
    late = _cli(capsys, "execute", "--proposal-id", "1")

    assert queued["status"] == "pending"
    assert state["details"]["state"] == "expired"  # type: ignore[index]
    assert state["details"]["state_code"] == 6  # type: ignore[index]
    assert late["details"]["error"] == "proposal not queued"  # type: ignore[index]
