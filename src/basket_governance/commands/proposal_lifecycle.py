from __future__ import annotations

from argparse import Namespace

from basket_governance.commands.common import deployment_transaction, failed, proposal_summary
from basket_governance.config import AppSettings
from basket_governance.errors import GovernanceError
from basket_governance.types import CommandResult, CommandStatus


def run_queue_proposal(args: Namespace, settings: AppSettings) -> CommandResult:
    proposal_id = int(getattr(args, "proposal_id", 0))
    try:
        with deployment_transaction(settings) as deployment:
            eta = deployment.governor.queue(proposal_id)
            summary = proposal_summary(deployment, proposal_id)
    except GovernanceError as exc:
        return failed("queue", exc.reason, proposal_id=proposal_id)

    return CommandResult(
        command="queue",
        status=CommandStatus.PENDING,
        details={**summary, "eta": eta},
    )


def run_execute_proposal(args: Namespace, settings: AppSettings) -> CommandResult:
    proposal_id = int(getattr(args, "proposal_id", 0))
    try:
        with deployment_transaction(settings) as deployment:
            result = deployment.governor.execute(proposal_id)
            summary = proposal_summary(deployment, proposal_id)
    except GovernanceError as exc:
        return failed("execute", exc.reason, proposal_id=proposal_id)

    return CommandResult(
        command="execute",
        status=CommandStatus.EXECUTED,
        details={**summary, "return_data": "0x" + result.hex()},
    )


def run_cancel_proposal(args: Namespace, settings: AppSettings) -> CommandResult:
    proposal_id = int(getattr(args, "proposal_id", 0))
    try:
        with deployment_transaction(settings) as deployment:
            deployment.governor.cancel(proposal_id, caller=str(getattr(args, "caller", "")))
            summary = proposal_summary(deployment, proposal_id)
    except GovernanceError as exc:
        return failed("cancel", exc.reason, proposal_id=proposal_id)

    return CommandResult(command="cancel", status=CommandStatus.EXECUTED, details=summary)
