from __future__ import annotations

from argparse import Namespace

from eth_abi.exceptions import EncodingError

from basket_governance.chain.addresses import ZERO_ADDRESS
from basket_governance.chain.calldata import encode_call_from_strings, parse_hex_payload
from basket_governance.commands.common import deployment_transaction, failed
from basket_governance.config import AppSettings
from basket_governance.domain.proposal import ProposalType
from basket_governance.errors import GovernanceError
from basket_governance.types import CommandResult, CommandStatus

COMMAND = "propose"


def _coerce_proposal_type(raw_value: object) -> int | None:
    if isinstance(raw_value, bool):
        return None
    if isinstance(raw_value, int):
        return raw_value

    normalized = str(raw_value).strip()
    if normalized.lstrip("-").isdigit():
        return int(normalized)
    try:
        return int(ProposalType[normalized.upper().replace("-", "_")])
    except KeyError:
        return None


def _call_data(args: Namespace) -> bytes:
    signature = str(getattr(args, "call_signature", "") or "").strip()
    if signature:
        return encode_call_from_strings(signature, list(getattr(args, "call_arg", None) or []))
    return parse_hex_payload(str(getattr(args, "call_data", "0x") or "0x"))


def run_propose(args: Namespace, settings: AppSettings) -> CommandResult:
    proposal_type = _coerce_proposal_type(getattr(args, "proposal_type", ""))
    if proposal_type is None:
        return failed(COMMAND, "invalid proposal type")

    try:
        call_data = _call_data(args)
    except (ValueError, EncodingError) as exc:
        return failed(COMMAND, str(exc))

    raw_value = getattr(args, "value", 0)
    if isinstance(raw_value, bool):
        return failed(COMMAND, "value must be an integer")

    try:
        with deployment_transaction(settings) as deployment:
            proposal_id = deployment.governor.propose(
                str(getattr(args, "title", "")),
                str(getattr(args, "description", "")),
                proposal_type,
                str(getattr(args, "target", "") or ZERO_ADDRESS),
                call_data,
                int(raw_value),
                caller=str(getattr(args, "caller", "")),
            )
            details = deployment.governor.get_proposal_details(proposal_id)
    except GovernanceError as exc:
        return failed(COMMAND, exc.reason)

    return CommandResult(
        command=COMMAND,
        status=CommandStatus.PENDING,
        details={
            "proposal_id": proposal_id,
            "state": details.state.name.lower(),
            "start_time": details.proposal.start_time,
            "end_time": details.proposal.end_time,
            "call_data": "0x" + call_data.hex(),
        },
    )
