from __future__ import annotations

from argparse import Namespace

from basket_governance.chain.addresses import normalize_address
from basket_governance.commands.common import (
    deployment_transaction,
    failed,
    format_token_amount,
    parse_token_amount,
)
from basket_governance.config import AppSettings
from basket_governance.errors import GovernanceError
from basket_governance.types import CommandResult, CommandStatus


def run_mint(args: Namespace, settings: AppSettings) -> CommandResult:
    try:
        account = normalize_address(str(getattr(args, "account", "")), field_name="account")
        amount = parse_token_amount(getattr(args, "amount", ""))
        with deployment_transaction(settings) as deployment:
            balance = deployment.token.mint(account, amount)
            total_supply = deployment.token.total_supply()
    except GovernanceError as exc:
        return failed("mint", exc.reason)

    return CommandResult(
        command="mint",
        status=CommandStatus.EXECUTED,
        details={
            "account": account,
            "balance": format_token_amount(balance),
            "total_supply": format_token_amount(total_supply),
        },
    )


def run_stake(args: Namespace, settings: AppSettings) -> CommandResult:
    unstake = bool(getattr(args, "unstake", False))
    command = "unstake" if unstake else "stake"
    try:
        account = normalize_address(str(getattr(args, "account", "")), field_name="account")
        amount = parse_token_amount(getattr(args, "amount", ""))
        with deployment_transaction(settings) as deployment:
            staking = deployment.staking
            tier = staking.unstake(account, amount) if unstake else staking.stake(account, amount)
            staked = staking.staked_amount(account)
            multiplier = staking.voting_multiplier(account)
            voting_power = deployment.governor.get_voting_power(account)
    except GovernanceError as exc:
        return failed(command, exc.reason)

    return CommandResult(
        command=command,
        status=CommandStatus.EXECUTED,
        details={
            "account": account,
            "staked": format_token_amount(staked),
            "tier": tier.name.lower(),
            "voting_multiplier_bps": multiplier,
            "voting_power": format_token_amount(voting_power),
        },
    )
