from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass, field
from pathlib import Path

from basket_governance.config import AppSettings, get_settings
from basket_governance.domain.proposal import ProposalState
from basket_governance.domain.status import is_terminal_state
from basket_governance.errors import ExecutionFailedError
from basket_governance.governance.deployment import load_deployment, save_deployment
from basket_governance.governance.governor import ProposalGovernor
from basket_governance.observability.logging import get_logger

DEFAULT_POLL_INTERVAL_SECONDS = 60.0


@dataclass(slots=True)
class KeeperReport:
    queued: list[int] = field(default_factory=list)
    executed: list[int] = field(default_factory=list)
    failed: dict[int, str] = field(default_factory=dict)

    @property
    def changed(self) -> bool:
        return bool(self.queued or self.executed)

    def as_dict(self) -> dict[str, object]:
        return {
            "queued": self.queued,
            "executed": self.executed,
            "failed": {str(pid): reason for pid, reason in self.failed.items()},
        }


@dataclass(slots=True)
class GovernanceKeeper:
    """Moves passed proposals through queue and execution without a human."""

    governor: ProposalGovernor

    def run_once(self) -> KeeperReport:
        logger = get_logger("governance_keeper")
        report = KeeperReport()
        for proposal_id in self.governor.proposal_ids():
            state = self.governor.state(proposal_id)
            if is_terminal_state(state):
                continue

            if state is ProposalState.SUCCEEDED:
                eta = self.governor.queue(proposal_id)
                report.queued.append(proposal_id)
                logger.info("keeper_queued", proposal_id=proposal_id, eta=eta)
                continue

            if state is not ProposalState.QUEUED:
                continue
            eta = self.governor.proposal_eta(proposal_id)
            if eta is None or self.governor.clock.now() < eta:
                continue
            try:
                self.governor.execute(proposal_id)
            except ExecutionFailedError as exc:
                report.failed[proposal_id] = exc.reason
                logger.warning("keeper_execution_failed", proposal_id=proposal_id, error=exc.reason)
                continue
            report.executed.append(proposal_id)
            logger.info("keeper_executed", proposal_id=proposal_id)

        logger.info("keeper_cycle", **report.as_dict())
        return report


@dataclass(slots=True)
class DeploymentKeeper:
    """Keeper cycle against the persisted local deployment."""

    settings: AppSettings
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS

    def run_once(self) -> KeeperReport:
        path = Path(self.settings.state_path)
        deployment = load_deployment(path, self.settings)
        report = GovernanceKeeper(deployment.governor).run_once()
        if report.changed:
            save_deployment(deployment, path)
        return report

    async def run_forever(self) -> None:
        while True:
            self.run_once()
            await asyncio.sleep(self.poll_interval_seconds)


def _poll_interval_from_env() -> float:
    raw_interval = os.environ.get("KEEPER_POLL_INTERVAL_SECONDS", "").strip()
    if not raw_interval:
        return DEFAULT_POLL_INTERVAL_SECONDS
    try:
        interval = float(raw_interval)
    except ValueError:
        return DEFAULT_POLL_INTERVAL_SECONDS

    if interval <= 0:
        return DEFAULT_POLL_INTERVAL_SECONDS
    return interval


def _default_keeper() -> DeploymentKeeper:
    return DeploymentKeeper(settings=get_settings(), poll_interval_seconds=_poll_interval_from_env())


async def run_keeper() -> None:
    await _default_keeper().run_forever()


if __name__ == "__main__":
    asyncio.run(run_keeper())
