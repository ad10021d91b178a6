from __future__ import annotations

from argparse import Namespace

from basket_governance.commands.common import deployment_transaction, failed
from basket_governance.config import AppSettings
from basket_governance.errors import GovernanceError
from basket_governance.types import CommandResult, CommandStatus


def run_advance_time(args: Namespace, settings: AppSettings) -> CommandResult:
    raw_seconds = getattr(args, "seconds", None)
    if isinstance(raw_seconds, bool) or raw_seconds is None:
        return failed("advance-time", "seconds must be an integer")

    try:
        with deployment_transaction(settings) as deployment:
            now = deployment.clock.advance(int(raw_seconds))
    except GovernanceError as exc:
        return failed("advance-time", exc.reason)

    return CommandResult(
        command="advance-time",
        status=CommandStatus.EXECUTED,
        details={"advanced_by": int(raw_seconds), "now": now},
    )
