from __future__ import annotations

from argparse import ArgumentParser, Namespace
from collections.abc import Callable, Sequence

from basket_governance.commands import (
    run_advance_time,
    run_authorize_operator,
    run_cancel_proposal,
    run_cast_vote,
    run_create_coredao_proposal,
    run_create_delegation,
    run_execute_proposal,
    run_init_deployment,
    run_keeper_cycle,
    run_mint,
    run_proposal_details,
    run_proposal_state,
    run_propose,
    run_queue_proposal,
    run_read_voting_token,
    run_set_proposal_threshold,
    run_set_quorum_percentage,
    run_stake,
)
from basket_governance.config import AppSettings, get_settings
from basket_governance.domain.proposal import ProposalType
from basket_governance.observability.logging import command_context, configure_logging
from basket_governance.types import CommandResult

CommandHandler = Callable[[Namespace, AppSettings], CommandResult]

COMMAND_HANDLERS: dict[str, CommandHandler] = {
    "init-deployment": run_init_deployment,
    "mint": run_mint,
    "stake": run_stake,
    "advance-time": run_advance_time,
    "propose": run_propose,
    "cast-vote": run_cast_vote,
    "queue": run_queue_proposal,
    "execute": run_execute_proposal,
    "cancel": run_cancel_proposal,
    "proposal-state": run_proposal_state,
    "proposal-details": run_proposal_details,
    "set-proposal-threshold": run_set_proposal_threshold,
    "set-quorum-percentage": run_set_quorum_percentage,
    "authorize-operator": run_authorize_operator,
    "create-coredao-proposal": run_create_coredao_proposal,
    "create-delegation": run_create_delegation,
    "run-keeper": run_keeper_cycle,
    "read-voting-token": run_read_voting_token,
}


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(prog="basket-governance", description="BASKET governance CLI")
    parser.add_argument("--json", action="store_true", help="emit machine-readable JSON output")

    subparsers = parser.add_subparsers(dest="command", required=True)

    init = subparsers.add_parser("init-deployment")
    init.add_argument("--owner", required=True)
    init.add_argument("--dao-name", default="")
    init.add_argument("--start-time", type=int, default=None)
    init.add_argument("--force", action="store_true")

    mint = subparsers.add_parser("mint")
    mint.add_argument("--account", required=True)
    mint.add_argument("--amount", required=True, help="whole BASKET tokens, e.g. 250.5")

    stake = subparsers.add_parser("stake")
    stake.add_argument("--account", required=True)
    stake.add_argument("--amount", required=True)
    stake.add_argument("--unstake", action="store_true")

    advance = subparsers.add_parser("advance-time")
    advance.add_argument("--seconds", required=True, type=int)

    propose = subparsers.add_parser("propose")
    propose.add_argument("--caller", required=True)
    propose.add_argument("--title", required=True)
    propose.add_argument("--description", default="")
    propose.add_argument(
        "--proposal-type",
        required=True,
        help="numeric tag or name: " + ", ".join(kind.name.lower() for kind in ProposalType),
    )
    propose.add_argument("--target", default="")
    propose.add_argument("--value", type=int, default=0)
    payload = propose.add_mutually_exclusive_group(required=False)
    payload.add_argument("--call-data", default="0x")
    payload.add_argument("--call-signature", default="")
    propose.add_argument("--call-arg", action="append", default=[])

    vote = subparsers.add_parser("cast-vote")
    vote.add_argument("--proposal-id", required=True, type=int)
    vote.add_argument("--voter", required=True)
    vote.add_argument("--support", required=True, help="for, against, abstain or 1, 0, 2")

    queue = subparsers.add_parser("queue")
    queue.add_argument("--proposal-id", required=True, type=int)

    execute = subparsers.add_parser("execute")
    execute.add_argument("--proposal-id", required=True, type=int)

    cancel = subparsers.add_parser("cancel")
    cancel.add_argument("--proposal-id", required=True, type=int)
    cancel.add_argument("--caller", required=True)

    state = subparsers.add_parser("proposal-state")
    state.add_argument("--proposal-id", required=True, type=int)

    details = subparsers.add_parser("proposal-details")
    details.add_argument("--proposal-id", required=True, type=int)
    details.add_argument("--voter", default="")

    threshold = subparsers.add_parser("set-proposal-threshold")
    threshold.add_argument("--amount", required=True)
    threshold.add_argument("--caller", required=True)

    quorum = subparsers.add_parser("set-quorum-percentage")
    quorum.add_argument("--percentage", required=True, type=int)
    quorum.add_argument("--caller", required=True)

    operator = subparsers.add_parser("authorize-operator")
    operator.add_argument("--operator", required=True)
    operator.add_argument("--caller", required=True)
    operator.add_argument("--revoke", action="store_true")

    coredao = subparsers.add_parser("create-coredao-proposal")
    coredao.add_argument("--caller", required=True)
    coredao.add_argument("--title", required=True)
    coredao.add_argument("--description", default="")
    coredao.add_argument("--snapshot-id", required=True, type=int)

    delegation = subparsers.add_parser("create-delegation")
    delegation.add_argument("--caller", required=True)
    delegation.add_argument("--kind", choices=["validator", "hash-power"], default="validator")
    delegation.add_argument("--validator", required=True)
    delegation.add_argument("--amount", required=True)

    subparsers.add_parser("run-keeper")

    token = subparsers.add_parser("read-voting-token")
    token.add_argument("--token", default="")
    token.add_argument("--account", default="")

    return parser


def _emit_result(result: CommandResult, *, as_json: bool) -> None:
    print(result.to_json() if as_json else result.to_text())


def entrypoint(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    settings = get_settings()
    configure_logging(settings.log_level)

    command = str(args.command)
    with command_context(command):
        result = COMMAND_HANDLERS[command](args, settings)
    _emit_result(result, as_json=bool(args.json))
    return 1 if result.failed else 0


if __name__ == "__main__":
    raise SystemExit(entrypoint())
