from __future__ import annotations

from argparse import Namespace
from pathlib import Path

from basket_governance.commands.common import failed, proposal_summary
from basket_governance.config import AppSettings
from basket_governance.errors import GovernanceError
from basket_governance.governance.deployment import load_deployment
from basket_governance.types import CommandResult, CommandStatus


def run_proposal_state(args: Namespace, settings: AppSettings) -> CommandResult:
    proposal_id = int(getattr(args, "proposal_id", 0))
    try:
        deployment = load_deployment(Path(settings.state_path), settings)
        summary = proposal_summary(deployment, proposal_id)
        state = deployment.governor.state(proposal_id)
    except GovernanceError as exc:
        return failed("proposal-state", exc.reason, proposal_id=proposal_id)

    return CommandResult(
        command="proposal-state",
        status=CommandStatus.OK,
        details={**summary, "state_code": int(state)},
    )


def run_proposal_details(args: Namespace, settings: AppSettings) -> CommandResult:
    proposal_id = int(getattr(args, "proposal_id", 0))
    voter = str(getattr(args, "voter", "") or "").strip()
    try:
        deployment = load_deployment(Path(settings.state_path), settings)
        details = deployment.governor.get_proposal_details(proposal_id).as_dict()
        if voter:
            details["receipt"] = deployment.governor.get_vote(proposal_id, voter).as_dict()
        details["quorum_votes"] = deployment.governor.proposal_quorum(proposal_id)
    except GovernanceError as exc:
        return failed("proposal-details", exc.reason, proposal_id=proposal_id)

    return CommandResult(command="proposal-details", status=CommandStatus.OK, details=details)
