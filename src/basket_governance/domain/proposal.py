from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any


class ProposalType(IntEnum):
    PARAMETER_CHANGE = 0
    STRATEGY_ADDITION = 1
    STRATEGY_REMOVAL = 2
    FEE_ADJUSTMENT = 3
    TREASURY_ALLOCATION = 4
    CONTRACT_UPGRADE = 5
    COREDAO_VALIDATOR_DELEGATION = 6
    COREDAO_HASHPOWER_DELEGATION = 7
    COREDAO_GOVERNANCE_VOTE = 8


class ProposalState(IntEnum):
    PENDING = 0
    ACTIVE = 1
    CANCELED = 2
    DEFEATED = 3
    SUCCEEDED = 4
    QUEUED = 5
    EXPIRED = 6
    EXECUTED = 7


class VoteType(IntEnum):
    AGAINST = 0
    FOR = 1
    ABSTAIN = 2


@dataclass(slots=True, frozen=True)
class TargetCall:
    target: str
    call_data: bytes = b""
    value: int = 0

    def as_dict(self) -> dict[str, Any]:
        return {
            "target": self.target,
            "call_data": "0x" + self.call_data.hex(),
            "value": self.value,
        }


@dataclass(slots=True)
class Proposal:
    id: int
    proposer: str
    title: str
    description: str
    proposal_type: ProposalType
    action: TargetCall
    start_time: int
    end_time: int
    for_votes: int = 0
    against_votes: int = 0
    abstain_votes: int = 0
    canceled: bool = False
    executed: bool = False
    queue_time: int | None = None

    @property
    def total_votes(self) -> int:
        return self.for_votes + self.against_votes + self.abstain_votes

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "proposer": self.proposer,
            "title": self.title,
            "description": self.description,
            "proposal_type": int(self.proposal_type),
            **self.action.as_dict(),
            "start_time": self.start_time,
            "end_time": self.end_time,
            "for_votes": self.for_votes,
            "against_votes": self.against_votes,
            "abstain_votes": self.abstain_votes,
            "canceled": self.canceled,
            "executed": self.executed,
            "queue_time": self.queue_time,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Proposal:
        call_data = str(data.get("call_data", "0x"))
        return cls(
            id=int(data["id"]),
            proposer=str(data["proposer"]),
            title=str(data["title"]),
            description=str(data["description"]),
            proposal_type=ProposalType(int(data["proposal_type"])),
            action=TargetCall(
                target=str(data["target"]),
                call_data=bytes.fromhex(call_data.removeprefix("0x")),
                value=int(data.get("value", 0)),
            ),
            start_time=int(data["start_time"]),
            end_time=int(data["end_time"]),
            for_votes=int(data.get("for_votes", 0)),
            against_votes=int(data.get("against_votes", 0)),
            abstain_votes=int(data.get("abstain_votes", 0)),
            canceled=bool(data.get("canceled", False)),
            executed=bool(data.get("executed", False)),
            queue_time=None if data.get("queue_time") is None else int(data["queue_time"]),
        )


@dataclass(slots=True, frozen=True)
class VoteReceipt:
    has_voted: bool
    support: VoteType | None = None
    weight: int = 0

    def as_dict(self) -> dict[str, Any]:
        return {
            "has_voted": self.has_voted,
            "vote": None if self.support is None else int(self.support),
            "weight": self.weight,
        }


@dataclass(slots=True, frozen=True)
class ProposalVoting:
    for_votes: int
    against_votes: int
    abstain_votes: int

    def as_dict(self) -> dict[str, int]:
        return {
            "for_votes": self.for_votes,
            "against_votes": self.against_votes,
            "abstain_votes": self.abstain_votes,
        }


@dataclass(slots=True, frozen=True)
class ProposalDetails:
    proposal: Proposal
    state: ProposalState
    eta: int | None

    def as_dict(self) -> dict[str, Any]:
        return {
            **self.proposal.as_dict(),
            "state": int(self.state),
            "state_name": self.state.name.lower(),
            "eta": self.eta,
        }


@dataclass(slots=True, frozen=True)
class GovernanceEvent:
    name: str
    proposal_id: int | None
    args: dict[str, Any]
