from __future__ import annotations

from argparse import Namespace

from basket_governance.commands.common import failed
from basket_governance.config import AppSettings
from basket_governance.errors import GovernanceError
from basket_governance.runtime.keeper import DeploymentKeeper
from basket_governance.types import CommandResult, CommandStatus


def run_keeper_cycle(_: Namespace, settings: AppSettings) -> CommandResult:
    try:
        report = DeploymentKeeper(settings=settings).run_once()
    except GovernanceError as exc:
        return failed("run-keeper", exc.reason)

    status = CommandStatus.EXECUTED if report.changed else CommandStatus.OK
    return CommandResult(command="run-keeper", status=status, details=report.as_dict())
