from __future__ import annotations

import copy
from dataclasses import asdict, dataclass
from typing import Any

from basket_governance.chain.addresses import normalize_address
from basket_governance.config import AppSettings
from basket_governance.domain.proposal import (
    GovernanceEvent,
    Proposal,
    ProposalDetails,
    ProposalState,
    ProposalType,
    ProposalVoting,
    TargetCall,
    VoteReceipt,
    VoteType,
)
from basket_governance.domain.tiers import BASIS_POINTS
from basket_governance.errors import (
    AuthorizationError,
    ExecutionFailedError,
    GovernanceValidationError,
    ProposalStateError,
)
from basket_governance.governance.collaborators import (
    CallExecutor,
    Clock,
    ContractHandler,
    StakingMultiplier,
    VotingToken,
)
from basket_governance.observability.logging import get_logger


@dataclass(slots=True)
class GovernanceParameters:
    proposal_threshold: int
    quorum_percentage: int
    voting_period: int
    voting_delay: int
    execution_delay: int
    execution_grace_period: int | None = None

    @classmethod
    def from_settings(cls, settings: AppSettings) -> GovernanceParameters:
        return cls(
            proposal_threshold=settings.proposal_threshold,
            quorum_percentage=settings.quorum_percentage,
            voting_period=settings.voting_period_seconds,
            voting_delay=settings.voting_delay_seconds,
            execution_delay=settings.execution_delay_seconds,
            execution_grace_period=settings.execution_grace_period_seconds,
        )


class ProposalGovernor:
    """Lifecycle owner for basket governance proposals.

    State is never stored: ``state()`` derives it from the proposal record and
    the injected clock on every call, so windows open and close lazily.
    Mutating calls either complete or raise before touching any record.
    """

    def __init__(
        self,
        *,
        address: str,
        owner: str,
        token: VotingToken,
        clock: Clock,
        executor: CallExecutor,
        parameters: GovernanceParameters,
        staking: StakingMultiplier | None = None,
    ) -> None:
        self.address = _address(address, "governor")
        self.owner = _address(owner, "owner")
        self.token = token
        self.clock = clock
        self.executor = executor
        self.staking = staking
        self.parameters = parameters
        self.events: list[GovernanceEvent] = []
        self._proposals: dict[int, Proposal] = {}
        self._receipts: dict[int, dict[str, VoteReceipt]] = {}
        self._proposal_count = 0
        self._threshold_exempt: set[str] = set()
        self._executing = False
        self._logger = get_logger("proposal_governor")

    @property
    def proposal_count(self) -> int:
        return self._proposal_count

    def proposal_ids(self) -> list[int]:
        return sorted(self._proposals)

    def propose(
        self,
        title: str,
        description: str,
        proposal_type: int,
        target: str,
        call_data: bytes,
        value: int,
        *,
        caller: str,
    ) -> int:
        proposer = _address(caller, "caller")
        kind = _proposal_type(proposal_type)
        action = TargetCall(
            target=_address(target, "target"),
            call_data=bytes(call_data),
            value=_non_negative(value, "value"),
        )
        if (
            proposer not in self._threshold_exempt
            and self.token.balance_of(proposer) < self.parameters.proposal_threshold
        ):
            raise ProposalStateError("insufficient tokens to propose")

        now = self.clock.now()
        start_time = now + self.parameters.voting_delay
        self._proposal_count += 1
        proposal = Proposal(
            id=self._proposal_count,
            proposer=proposer,
            title=title,
            description=description,
            proposal_type=kind,
            action=action,
            start_time=start_time,
            end_time=start_time + self.parameters.voting_period,
        )
        self._proposals[proposal.id] = proposal
        self._receipts[proposal.id] = {}
        self._emit(
            "ProposalCreated",
            proposal.id,
            proposer=proposer,
            title=title,
            description=description,
            proposal_type=int(kind),
            start_time=proposal.start_time,
            end_time=proposal.end_time,
        )
        return proposal.id

    def get_voting_power(self, account: str) -> int:
        voter = _address(account, "account")
        return self._weighted(voter, self.token.balance_of(voter))

    def get_voting_power_at(self, account: str, timepoint: int) -> int:
        """Voting power from the balance held before ``timepoint``."""
        voter = _address(account, "account")
        return self._weighted(voter, self.token.balance_of_at(voter, int(timepoint)))

    def _weighted(self, voter: str, balance: int) -> int:
        if self.staking is None:
            return balance
        return balance * self.staking.voting_multiplier(voter) // BASIS_POINTS

    def cast_vote(self, proposal_id: int, support: int, *, caller: str) -> int:
        voter = _address(caller, "caller")
        proposal = self._get(proposal_id)
        try:
            choice = VoteType(int(support))
        except (TypeError, ValueError) as exc:
            raise GovernanceValidationError("invalid vote type") from exc

        if self.state(proposal_id) is not ProposalState.ACTIVE:
            raise ProposalStateError("voting is closed")
        receipts = self._receipts[proposal.id]
        if voter in receipts:
            raise ProposalStateError("voter already voted")

        weight = self.get_voting_power_at(voter, proposal.start_time)
        if weight <= 0:
            raise ProposalStateError("no voting power")

        if choice is VoteType.FOR:
            proposal.for_votes += weight
        elif choice is VoteType.AGAINST:
            proposal.against_votes += weight
        else:
            proposal.abstain_votes += weight
        receipts[voter] = VoteReceipt(has_voted=True, support=choice, weight=weight)
        self._emit("VoteCast", proposal.id, voter=voter, support=int(choice), weight=weight)
        return weight

    def get_proposal_voting(self, proposal_id: int) -> ProposalVoting:
        proposal = self._get(proposal_id)
        return ProposalVoting(
            for_votes=proposal.for_votes,
            against_votes=proposal.against_votes,
            abstain_votes=proposal.abstain_votes,
        )

    def get_vote(self, proposal_id: int, voter: str) -> VoteReceipt:
        proposal = self._get(proposal_id)
        receipt = self._receipts[proposal.id].get(_address(voter, "voter"))
        return receipt if receipt is not None else VoteReceipt(has_voted=False)

    def get_proposal_details(self, proposal_id: int) -> ProposalDetails:
        proposal = self._get(proposal_id)
        return ProposalDetails(
            proposal=copy.copy(proposal),
            state=self.state(proposal_id),
            eta=self.proposal_eta(proposal_id),
        )

    def proposal_eta(self, proposal_id: int) -> int | None:
        proposal = self._get(proposal_id)
        if proposal.queue_time is None:
            return None
        return proposal.queue_time + self.parameters.execution_delay

    def quorum_votes(self) -> int:
        return self.token.total_supply() * self.parameters.quorum_percentage // 100

    def proposal_quorum(self, proposal_id: int) -> int:
        """Quorum against the supply as it stood when voting closed."""
        proposal = self._get(proposal_id)
        supply = self.token.total_supply_at(proposal.end_time)
        return supply * self.parameters.quorum_percentage // 100

    def state(self, proposal_id: int) -> ProposalState:
        proposal = self._get(proposal_id)
        if proposal.executed:
            return ProposalState.EXECUTED
        if proposal.canceled:
            return ProposalState.CANCELED

        now = self.clock.now()
        if proposal.queue_time is not None:
            grace = self.parameters.execution_grace_period
            eta = proposal.queue_time + self.parameters.execution_delay
            if grace is not None and now > eta + grace:
                return ProposalState.EXPIRED
            return ProposalState.QUEUED

        if now < proposal.start_time:
            return ProposalState.PENDING
        if now < proposal.end_time:
            return ProposalState.ACTIVE
        quorum = self.proposal_quorum(proposal.id)
        if proposal.total_votes >= quorum and proposal.for_votes > proposal.against_votes:
            return ProposalState.SUCCEEDED
        return ProposalState.DEFEATED

    def queue(self, proposal_id: int) -> int:
        proposal = self._get(proposal_id)
        if self.state(proposal_id) is not ProposalState.SUCCEEDED:
            raise ProposalStateError("proposal not successful")

        proposal.queue_time = self.clock.now()
        eta = proposal.queue_time + self.parameters.execution_delay
        self._emit("ProposalQueued", proposal.id, eta=eta)
        return eta

    def execute(self, proposal_id: int) -> bytes:
        if self._executing:
            raise ProposalStateError("reentrant call")
        proposal = self._get(proposal_id)
        if self.state(proposal_id) is not ProposalState.QUEUED:
            raise ProposalStateError("proposal not queued")
        eta = self.proposal_eta(proposal_id)
        if eta is None or self.clock.now() < eta:
            raise ProposalStateError("execution delay not met")

        checkpoint = self._checkpoint()
        self._executing = True
        try:
            result = self.executor.call(proposal.action, caller=self.address)
        except Exception as exc:
            self._restore(checkpoint)
            self._logger.warning(
                "proposal_execution_failed",
                proposal_id=proposal.id,
                target=proposal.action.target,
                error=str(exc),
            )
            raise ExecutionFailedError(proposal.id, str(exc)) from exc
        finally:
            self._executing = False

        proposal.executed = True
        self._emit("ProposalExecuted", proposal.id, target=proposal.action.target)
        return result

    def cancel(self, proposal_id: int, *, caller: str) -> None:
        sender = _address(caller, "caller")
        proposal = self._get(proposal_id)
        if sender not in {proposal.proposer, self.owner}:
            raise AuthorizationError("not authorized to cancel")
        if proposal.executed:
            raise ProposalStateError("cannot cancel executed proposal")
        if proposal.canceled:
            raise ProposalStateError("proposal already canceled")

        proposal.canceled = True
        self._emit("ProposalCanceled", proposal.id, canceled_by=sender)

    def set_proposal_threshold(self, amount: int, *, caller: str) -> None:
        self._only_owner(caller)
        self._update("proposal_threshold", _non_negative(amount, "proposal_threshold"))

    def set_quorum_percentage(self, percentage: int, *, caller: str) -> None:
        self._only_owner(caller)
        if not 1 <= int(percentage) <= 100:
            raise GovernanceValidationError("quorum percentage must be between 1 and 100")
        self._update("quorum_percentage", int(percentage))

    def set_voting_period(self, seconds: int, *, caller: str) -> None:
        self._only_owner(caller)
        if int(seconds) <= 0:
            raise GovernanceValidationError("voting period must be positive")
        self._update("voting_period", int(seconds))

    def set_voting_delay(self, seconds: int, *, caller: str) -> None:
        self._only_owner(caller)
        self._update("voting_delay", _non_negative(seconds, "voting_delay"))

    def set_staking_multiplier(self, staking: StakingMultiplier | None, *, caller: str) -> None:
        self._only_owner(caller)
        self.staking = staking
        self._emit("ParameterUpdated", None, parameter="staking", value=staking is not None)

    def set_threshold_exemption(self, account: str, exempt: bool, *, caller: str) -> None:
        self._only_owner(caller)
        holder = _address(account, "account")
        if exempt:
            self._threshold_exempt.add(holder)
        else:
            self._threshold_exempt.discard(holder)
        self._emit("ThresholdExemptionUpdated", None, account=holder, exempt=bool(exempt))

    def is_threshold_exempt(self, account: str) -> bool:
        return _address(account, "account") in self._threshold_exempt

    def transfer_ownership(self, new_owner: str, *, caller: str) -> None:
        self._only_owner(caller)
        previous = self.owner
        self.owner = _address(new_owner, "new_owner")
        self._emit("OwnershipTransferred", None, previous_owner=previous, new_owner=self.owner)

    def as_contract_handler(self) -> ContractHandler:
        """Expose the admin setters to proposals that target the governor."""
        return ContractHandler(
            {
                "setProposalThreshold(uint256)": lambda ctx, amount: self.set_proposal_threshold(
                    amount, caller=ctx.caller
                ),
                "setQuorumPercentage(uint256)": lambda ctx, pct: self.set_quorum_percentage(
                    pct, caller=ctx.caller
                ),
                "setVotingPeriod(uint256)": lambda ctx, seconds: self.set_voting_period(
                    seconds, caller=ctx.caller
                ),
                "setVotingDelay(uint256)": lambda ctx, seconds: self.set_voting_delay(
                    seconds, caller=ctx.caller
                ),
            }
        )

    def export_state(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "owner": self.owner,
            "parameters": asdict(self.parameters),
            "proposal_count": self._proposal_count,
            "staking_enabled": self.staking is not None,
            "threshold_exempt": sorted(self._threshold_exempt),
            "proposals": [self._proposals[pid].as_dict() for pid in self.proposal_ids()],
            "receipts": {
                str(pid): {voter: receipt.as_dict() for voter, receipt in receipts.items()}
                for pid, receipts in self._receipts.items()
            },
        }

    def load_state(self, data: dict[str, Any]) -> None:
        self.owner = _address(str(data["owner"]), "owner")
        self.parameters = GovernanceParameters(**data["parameters"])
        self._proposal_count = int(data["proposal_count"])
        self._threshold_exempt = {
            _address(str(account), "account") for account in data.get("threshold_exempt", [])
        }
        self._proposals = {}
        self._receipts = {}
        for raw in data.get("proposals", []):
            proposal = Proposal.from_dict(raw)
            self._proposals[proposal.id] = proposal
            self._receipts[proposal.id] = {}
        for raw_id, receipts in data.get("receipts", {}).items():
            self._receipts[int(raw_id)] = {
                voter: VoteReceipt(
                    has_voted=bool(entry["has_voted"]),
                    support=None if entry["vote"] is None else VoteType(int(entry["vote"])),
                    weight=int(entry.get("weight", 0)),
                )
                for voter, entry in receipts.items()
            }

    def _get(self, proposal_id: int) -> Proposal:
        proposal = self._proposals.get(int(proposal_id))
        if proposal is None:
            raise GovernanceValidationError("invalid proposal id")
        return proposal

    def _only_owner(self, caller: str) -> None:
        # Executed proposals that target the governor act with its own authority.
        if _address(caller, "caller") not in {self.owner, self.address}:
            raise AuthorizationError("caller is not the owner")

    def _update(self, name: str, value: int) -> None:
        setattr(self.parameters, name, value)
        self._emit("ParameterUpdated", None, parameter=name, value=value)

    def _checkpoint(self) -> tuple[Any, ...]:
        return (
            copy.deepcopy(self._proposals),
            copy.deepcopy(self._receipts),
            copy.copy(self.parameters),
            self.owner,
            self.staking,
            set(self._threshold_exempt),
            len(self.events),
        )

    def _restore(self, checkpoint: tuple[Any, ...]) -> None:
        proposals, receipts, parameters, owner, staking, exempt, event_count = checkpoint
        self._proposals = proposals
        self._receipts = receipts
        self.parameters = parameters
        self.owner = owner
        self.staking = staking
        self._threshold_exempt = exempt
        del self.events[event_count:]

    def _emit(self, name: str, proposal_id: int | None, **args: Any) -> None:
        self.events.append(GovernanceEvent(name=name, proposal_id=proposal_id, args=args))
        self._logger.info(name, proposal_id=proposal_id, **args)


def _address(raw_value: str, field_name: str) -> str:
    return normalize_address(raw_value, field_name=field_name)


def _proposal_type(raw_value: int) -> ProposalType:
    if isinstance(raw_value, bool):
        raise GovernanceValidationError("invalid proposal type")
    try:
        return ProposalType(int(raw_value))
    except (TypeError, ValueError) as exc:
        raise GovernanceValidationError("invalid proposal type") from exc


def _non_negative(raw_value: int, field_name: str) -> int:
    if isinstance(raw_value, bool) or int(raw_value) < 0:
        raise GovernanceValidationError(f"{field_name} must be non-negative")
    return int(raw_value)
