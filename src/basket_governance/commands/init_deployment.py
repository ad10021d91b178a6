from __future__ import annotations

from argparse import Namespace

from basket_governance.commands.common import failed, state_path
from basket_governance.config import AppSettings
from basket_governance.errors import GovernanceError
from basket_governance.governance.collaborators import SystemClock
from basket_governance.governance.deployment import create_deployment, save_deployment
from basket_governance.types import CommandResult, CommandStatus

COMMAND = "init-deployment"


def run_init_deployment(args: Namespace, settings: AppSettings) -> CommandResult:
    path = state_path(settings)
    if path.exists() and not bool(getattr(args, "force", False)):
        return failed(COMMAND, f"deployment already exists at {path}; pass --force to replace it")

    raw_start = getattr(args, "start_time", None)
    start_time = SystemClock().now() if raw_start is None else int(raw_start)

    try:
        deployment = create_deployment(
            str(getattr(args, "owner", "")),
            settings,
            start_time=start_time,
            dao_name=str(getattr(args, "dao_name", "") or "").strip() or None,
        )
        deployment.proxy.set_operator_authorization(
            deployment.owner, True, caller=deployment.owner
        )
    except GovernanceError as exc:
        return failed(COMMAND, exc.reason)

    save_deployment(deployment, path)
    return CommandResult(
        command=COMMAND,
        status=CommandStatus.EXECUTED,
        details={
            "state_path": str(path),
            "addresses": deployment.addresses(),
            "start_time": start_time,
            "proposal_threshold": deployment.governor.parameters.proposal_threshold,
            "quorum_percentage": deployment.governor.parameters.quorum_percentage,
        },
    )
