from __future__ import annotations

from argparse import Namespace

from basket_governance.commands.common import deployment_transaction, failed, parse_token_amount
from basket_governance.config import AppSettings
from basket_governance.errors import GovernanceError
from basket_governance.types import CommandResult, CommandStatus


def run_set_proposal_threshold(args: Namespace, settings: AppSettings) -> CommandResult:
    try:
        amount = parse_token_amount(getattr(args, "amount", ""), field_name="proposal_threshold")
        with deployment_transaction(settings) as deployment:
            deployment.governor.set_proposal_threshold(
                amount, caller=str(getattr(args, "caller", ""))
            )
    except GovernanceError as exc:
        return failed("set-proposal-threshold", exc.reason)

    return CommandResult(
        command="set-proposal-threshold",
        status=CommandStatus.EXECUTED,
        details={"proposal_threshold": amount},
    )


def run_set_quorum_percentage(args: Namespace, settings: AppSettings) -> CommandResult:
    raw_percentage = getattr(args, "percentage", None)
    if isinstance(raw_percentage, bool) or raw_percentage is None:
        return failed("set-quorum-percentage", "percentage must be an integer")

    try:
        with deployment_transaction(settings) as deployment:
            deployment.governor.set_quorum_percentage(
                int(raw_percentage), caller=str(getattr(args, "caller", ""))
            )
            quorum_votes = deployment.governor.quorum_votes()
    except GovernanceError as exc:
        return failed("set-quorum-percentage", exc.reason)

    return CommandResult(
        command="set-quorum-percentage",
        status=CommandStatus.EXECUTED,
        details={"quorum_percentage": int(raw_percentage), "quorum_votes": quorum_votes},
    )
