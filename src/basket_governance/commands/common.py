from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from decimal import Decimal, InvalidOperation
from pathlib import Path

from basket_governance.config import TOKEN_UNIT, AppSettings
from basket_governance.errors import GovernanceValidationError
from basket_governance.governance.deployment import Deployment, load_deployment, save_deployment
from basket_governance.types import CommandResult, CommandStatus, JsonDict


def failed(command: str, error: str, **details: object) -> CommandResult:
    return CommandResult(
        command=command,
        status=CommandStatus.FAILED,
        details={"error": error, **details},
    )


def state_path(settings: AppSettings) -> Path:
    return Path(settings.state_path)


@contextmanager
def deployment_transaction(settings: AppSettings) -> Iterator[Deployment]:
    """Load the deployment and persist it only if the block exits cleanly."""
    path = state_path(settings)
    deployment = load_deployment(path, settings)
    yield deployment
    save_deployment(deployment, path)


def parse_token_amount(raw_value: object, *, field_name: str = "amount") -> int:
    """Whole-token decimal string -> base units (18 decimals)."""
    if isinstance(raw_value, bool):
        raise GovernanceValidationError(f"{field_name} must be a number")
    try:
        amount = Decimal(str(raw_value).strip()) * TOKEN_UNIT
    except InvalidOperation as exc:
        raise GovernanceValidationError(f"{field_name} must be a number") from exc
    if not amount.is_finite():
        raise GovernanceValidationError(f"{field_name} must be a number")
    if amount != amount.to_integral_value():
        raise GovernanceValidationError(f"{field_name} has more than 18 decimals")
    if amount < 0:
        raise GovernanceValidationError(f"{field_name} must be non-negative")
    return int(amount)


def format_token_amount(amount: int) -> str:
    whole = Decimal(amount) / TOKEN_UNIT
    return format(whole.normalize(), "f")


def proposal_summary(deployment: Deployment, proposal_id: int) -> JsonDict:
    governor = deployment.governor
    voting = governor.get_proposal_voting(proposal_id)
    return {
        "proposal_id": proposal_id,
        "state": governor.state(proposal_id).name.lower(),
        "voting": voting.as_dict(),
        "now": deployment.clock.now(),
    }
