from __future__ import annotations

from argparse import Namespace

from basket_governance.commands.common import deployment_transaction, failed
from basket_governance.config import AppSettings
from basket_governance.domain.proposal import VoteType
from basket_governance.errors import GovernanceError
from basket_governance.types import CommandResult, CommandStatus


def _coerce_support(raw_value: object) -> VoteType | None:
    if isinstance(raw_value, bool):
        return None

    if isinstance(raw_value, int):
        try:
            return VoteType(raw_value)
        except ValueError:
            return None

    if isinstance(raw_value, str):
        normalized = raw_value.strip().lower()
        if normalized in {"1", "for", "yes", "approve"}:
            return VoteType.FOR
        if normalized in {"0", "against", "no", "deny"}:
            return VoteType.AGAINST
        if normalized in {"2", "abstain"}:
            return VoteType.ABSTAIN

    return None


def run_cast_vote(args: Namespace, settings: AppSettings) -> CommandResult:
    support = _coerce_support(getattr(args, "support", None))
    if support is None:
        return failed("cast-vote", "invalid vote type")

    proposal_id = int(getattr(args, "proposal_id", 0))
    try:
        with deployment_transaction(settings) as deployment:
            weight = deployment.governor.cast_vote(
                proposal_id, support, caller=str(getattr(args, "voter", ""))
            )
            voting = deployment.governor.get_proposal_voting(proposal_id)
    except GovernanceError as exc:
        return failed("cast-vote", exc.reason, proposal_id=proposal_id)

    return CommandResult(
        command="cast-vote",
        status=CommandStatus.PENDING,
        details={
            "proposal_id": proposal_id,
            "support": support.name.lower(),
            "weight": weight,
            "voting": voting.as_dict(),
        },
    )
