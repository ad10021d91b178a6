from __future__ import annotations

from argparse import Namespace

from basket_governance.commands.common import deployment_transaction, failed, parse_token_amount
from basket_governance.config import AppSettings
from basket_governance.errors import GovernanceError
from basket_governance.types import CommandResult, CommandStatus


def run_authorize_operator(args: Namespace, settings: AppSettings) -> CommandResult:
    authorized = not bool(getattr(args, "revoke", False))
    try:
        with deployment_transaction(settings) as deployment:
            deployment.proxy.set_operator_authorization(
                str(getattr(args, "operator", "")),
                authorized,
                caller=str(getattr(args, "caller", "")),
            )
    except GovernanceError as exc:
        return failed("authorize-operator", exc.reason)

    return CommandResult(
        command="authorize-operator",
        status=CommandStatus.EXECUTED,
        details={"operator": str(getattr(args, "operator", "")), "authorized": authorized},
    )


def run_create_coredao_proposal(args: Namespace, settings: AppSettings) -> CommandResult:
    try:
        with deployment_transaction(settings) as deployment:
            record_id = deployment.proxy.create_core_dao_proposal(
                str(getattr(args, "title", "")),
                str(getattr(args, "description", "")),
                int(getattr(args, "snapshot_id", 0)),
                caller=str(getattr(args, "caller", "")),
            )
            record = deployment.proxy.get_core_dao_proposal(record_id)
    except GovernanceError as exc:
        return failed("create-coredao-proposal", exc.reason)

    return CommandResult(
        command="create-coredao-proposal",
        status=CommandStatus.PENDING,
        details={"coredao_proposal_id": record_id, "proposal_id": record.basket_proposal_id},
    )


def run_create_delegation(args: Namespace, settings: AppSettings) -> CommandResult:
    kind = str(getattr(args, "kind", "validator"))
    command = f"create-{kind}-delegation"
    try:
        amount = parse_token_amount(getattr(args, "amount", ""))
        with deployment_transaction(settings) as deployment:
            proxy = deployment.proxy
            validator = str(getattr(args, "validator", ""))
            caller = str(getattr(args, "caller", ""))
            if kind == "hash-power":
                record_id = proxy.create_hash_power_delegation(validator, amount, caller=caller)
                basket_id = proxy.get_hash_power_delegation(record_id).basket_proposal_id
            else:
                record_id = proxy.create_validator_delegation(validator, amount, caller=caller)
                basket_id = proxy.get_validator_delegation(record_id).basket_proposal_id
    except GovernanceError as exc:
        return failed(command, exc.reason)

    return CommandResult(
        command=command,
        status=CommandStatus.PENDING,
        details={"delegation_id": record_id, "proposal_id": basket_id},
    )
