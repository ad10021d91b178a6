from __future__ import annotations

from argparse import Namespace

from web3.exceptions import Web3Exception

from basket_governance.chain.rpc_client import RpcClientFactory
from basket_governance.chain.voting_token import Web3VotingToken
from basket_governance.commands.common import failed
from basket_governance.config import AppSettings
from basket_governance.errors import GovernanceError
from basket_governance.types import CommandResult, CommandStatus


def run_read_voting_token(args: Namespace, settings: AppSettings) -> CommandResult:
    token_address = str(getattr(args, "token", "") or settings.voting_token_address)
    account = str(getattr(args, "account", "") or "").strip()
    try:
        token = Web3VotingToken.from_web3(RpcClientFactory(settings).create(), token_address)
        details: dict[str, object] = {
            "token": token.address,
            "total_supply": token.total_supply(),
        }
        if account:
            details["account"] = account
            details["balance"] = token.balance_of(account)
    except GovernanceError as exc:
        return failed("read-voting-token", exc.reason)
    except (Web3Exception, OSError) as exc:
        return failed("read-voting-token", f"rpc error: {exc}", rpc_url=settings.core_rpc_url)

    return CommandResult(command="read-voting-token", status=CommandStatus.OK, details=details)
