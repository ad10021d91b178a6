"""Bridge between BASKET holders and CoreDAO-level decisions.

Authorized operators open CoreDAO votes, validator delegations and hash-power
delegations here. Each one becomes a linked governor proposal whose call data
points back at this proxy, so the record is only acted on once BASKET
governance has passed and executed it.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from basket_governance.chain.addresses import ZERO_ADDRESS, is_zero_address, normalize_address
from basket_governance.chain.calldata import encode_call
from basket_governance.domain.proposal import ProposalType
from basket_governance.errors import (
    AuthorizationError,
    GovernanceValidationError,
    ProposalStateError,
)
from basket_governance.governance.collaborators import ContractHandler
from basket_governance.governance.governor import ProposalGovernor
from basket_governance.observability.logging import get_logger

EXECUTE_CORE_DAO_VOTE = "executeCoreDAOVote(uint256)"
EXECUTE_VALIDATOR_DELEGATION = "executeValidatorDelegation(uint256)"
EXECUTE_HASH_POWER_DELEGATION = "executeHashPowerDelegation(uint256)"


@dataclass(slots=True)
class CoreDAOProposal:
    id: int
    title: str
    description: str
    snapshot_id: int
    basket_proposal_id: int
    executed: bool = False
    for_votes: int = 0
    against_votes: int = 0
    abstain_votes: int = 0


@dataclass(slots=True)
class ValidatorDelegation:
    id: int
    validator: str
    amount: int
    basket_proposal_id: int
    executed: bool = False


@dataclass(slots=True)
class HashPowerDelegation:
    id: int
    validator: str
    hash_power: int
    basket_proposal_id: int
    executed: bool = False


class CoreDAOGovernanceProxy:
    def __init__(self, *, address: str, owner: str, governor: ProposalGovernor) -> None:
        self.address = _address(address, "proxy")
        self.owner = _address(owner, "owner")
        self.governor = governor
        self.authorized_operators: set[str] = set()
        self.current_validator = ZERO_ADDRESS
        self.total_delegated_amount = 0
        self.total_hash_power = 0
        self._core_dao_proposals: dict[int, CoreDAOProposal] = {}
        self._validator_delegations: dict[int, ValidatorDelegation] = {}
        self._hash_power_delegations: dict[int, HashPowerDelegation] = {}
        self._logger = get_logger("coredao_proxy")

    @property
    def core_dao_proposal_count(self) -> int:
        return len(self._core_dao_proposals)

    @property
    def validator_delegation_count(self) -> int:
        return len(self._validator_delegations)

    @property
    def hash_power_delegation_count(self) -> int:
        return len(self._hash_power_delegations)

    def set_operator_authorization(self, operator: str, authorized: bool, *, caller: str) -> None:
        if _address(caller, "caller") != self.owner:
            raise AuthorizationError("caller is not the owner")
        account = _address(operator, "operator")
        if authorized:
            self.authorized_operators.add(account)
        else:
            self.authorized_operators.discard(account)
        self._logger.info("OperatorAuthorized", operator=account, authorized=authorized)

    def is_authorized_operator(self, operator: str) -> bool:
        return _address(operator, "operator") in self.authorized_operators

    def create_core_dao_proposal(
        self, title: str, description: str, snapshot_id: int, *, caller: str
    ) -> int:
        self._only_operator(caller)
        record_id = len(self._core_dao_proposals) + 1
        basket_id = self.governor.propose(
            f"CoreDAO Governance: {title}",
            description,
            ProposalType.COREDAO_GOVERNANCE_VOTE,
            self.address,
            encode_call(EXECUTE_CORE_DAO_VOTE, [record_id]),
            0,
            caller=self.address,
        )
        self._core_dao_proposals[record_id] = CoreDAOProposal(
            id=record_id,
            title=title,
            description=description,
            snapshot_id=int(snapshot_id),
            basket_proposal_id=basket_id,
        )
        self._logger.info(
            "CoreDAOProposalCreated",
            core_dao_proposal_id=record_id,
            proposal_id=basket_id,
            snapshot_id=int(snapshot_id),
        )
        return record_id

    def create_validator_delegation(self, validator: str, amount: int, *, caller: str) -> int:
        self._only_operator(caller)
        target = self._validator(validator)
        if int(amount) <= 0:
            raise GovernanceValidationError("invalid amount")

        record_id = len(self._validator_delegations) + 1
        basket_id = self.governor.propose(
            "Validator Delegation",
            f"Delegate {amount} CORE to validator {target}",
            ProposalType.COREDAO_VALIDATOR_DELEGATION,
            self.address,
            encode_call(EXECUTE_VALIDATOR_DELEGATION, [record_id]),
            0,
            caller=self.address,
        )
        self._validator_delegations[record_id] = ValidatorDelegation(
            id=record_id, validator=target, amount=int(amount), basket_proposal_id=basket_id
        )
        self._logger.info(
            "ValidatorDelegationCreated",
            delegation_id=record_id,
            proposal_id=basket_id,
            validator=target,
            amount=int(amount),
        )
        return record_id

    def create_hash_power_delegation(self, validator: str, hash_power: int, *, caller: str) -> int:
        self._only_operator(caller)
        target = self._validator(validator)
        if int(hash_power) <= 0:
            raise GovernanceValidationError("invalid amount")

        record_id = len(self._hash_power_delegations) + 1
        basket_id = self.governor.propose(
            "Hash Power Delegation",
            f"Delegate {hash_power} hash power to validator {target}",
            ProposalType.COREDAO_HASHPOWER_DELEGATION,
            self.address,
            encode_call(EXECUTE_HASH_POWER_DELEGATION, [record_id]),
            0,
            caller=self.address,
        )
        self._hash_power_delegations[record_id] = HashPowerDelegation(
            id=record_id, validator=target, hash_power=int(hash_power), basket_proposal_id=basket_id
        )
        self._logger.info(
            "HashPowerDelegationCreated",
            delegation_id=record_id,
            proposal_id=basket_id,
            validator=target,
            hash_power=int(hash_power),
        )
        return record_id

    def get_core_dao_proposal(self, record_id: int) -> CoreDAOProposal:
        record = self._core_dao_proposals.get(int(record_id))
        if record is None:
            raise GovernanceValidationError("invalid proposal id")
        return record

    def get_validator_delegation(self, record_id: int) -> ValidatorDelegation:
        record = self._validator_delegations.get(int(record_id))
        if record is None:
            raise GovernanceValidationError("invalid delegation id")
        return record

    def get_hash_power_delegation(self, record_id: int) -> HashPowerDelegation:
        record = self._hash_power_delegations.get(int(record_id))
        if record is None:
            raise GovernanceValidationError("invalid delegation id")
        return record

    def execute_core_dao_vote(self, record_id: int, *, caller: str) -> None:
        self._only_governance(caller)
        record = self.get_core_dao_proposal(record_id)
        _ensure_pending(record.executed)
        voting = self.governor.get_proposal_voting(record.basket_proposal_id)
        record.for_votes = voting.for_votes
        record.against_votes = voting.against_votes
        record.abstain_votes = voting.abstain_votes
        record.executed = True
        self._logger.info(
            "CoreDAOVoteExecuted",
            core_dao_proposal_id=record.id,
            proposal_id=record.basket_proposal_id,
            **voting.as_dict(),
        )

    def execute_validator_delegation(self, record_id: int, *, caller: str) -> None:
        self._only_governance(caller)
        record = self.get_validator_delegation(record_id)
        _ensure_pending(record.executed)
        record.executed = True
        self.current_validator = record.validator
        self.total_delegated_amount += record.amount
        self._logger.info(
            "ValidatorDelegationExecuted",
            delegation_id=record.id,
            proposal_id=record.basket_proposal_id,
            validator=record.validator,
            total_delegated=self.total_delegated_amount,
        )

    def execute_hash_power_delegation(self, record_id: int, *, caller: str) -> None:
        self._only_governance(caller)
        record = self.get_hash_power_delegation(record_id)
        _ensure_pending(record.executed)
        record.executed = True
        self.total_hash_power += record.hash_power
        self._logger.info(
            "HashPowerDelegationExecuted",
            delegation_id=record.id,
            proposal_id=record.basket_proposal_id,
            validator=record.validator,
            total_hash_power=self.total_hash_power,
        )

    def as_contract_handler(self) -> ContractHandler:
        return ContractHandler(
            {
                EXECUTE_CORE_DAO_VOTE: lambda ctx, record_id: self.execute_core_dao_vote(
                    record_id, caller=ctx.caller
                ),
                EXECUTE_VALIDATOR_DELEGATION: lambda ctx, record_id: (
                    self.execute_validator_delegation(record_id, caller=ctx.caller)
                ),
                EXECUTE_HASH_POWER_DELEGATION: lambda ctx, record_id: (
                    self.execute_hash_power_delegation(record_id, caller=ctx.caller)
                ),
            }
        )

    def export_state(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "owner": self.owner,
            "authorized_operators": sorted(self.authorized_operators),
            "current_validator": self.current_validator,
            "total_delegated_amount": self.total_delegated_amount,
            "total_hash_power": self.total_hash_power,
            "core_dao_proposals": [asdict(r) for r in self._core_dao_proposals.values()],
            "validator_delegations": [asdict(r) for r in self._validator_delegations.values()],
            "hash_power_delegations": [asdict(r) for r in self._hash_power_delegations.values()],
        }

    def load_state(self, data: dict[str, Any]) -> None:
        self.owner = _address(str(data["owner"]), "owner")
        self.authorized_operators = set(data.get("authorized_operators", []))
        self.current_validator = str(data["current_validator"])
        self.total_delegated_amount = int(data.get("total_delegated_amount", 0))
        self.total_hash_power = int(data.get("total_hash_power", 0))
        self._core_dao_proposals = {
            int(raw["id"]): CoreDAOProposal(**raw) for raw in data.get("core_dao_proposals", [])
        }
        self._validator_delegations = {
            int(raw["id"]): ValidatorDelegation(**raw)
            for raw in data.get("validator_delegations", [])
        }
        self._hash_power_delegations = {
            int(raw["id"]): HashPowerDelegation(**raw)
            for raw in data.get("hash_power_delegations", [])
        }

    def _only_operator(self, caller: str) -> None:
        if _address(caller, "caller") not in self.authorized_operators:
            raise AuthorizationError("not authorized")

    def _only_governance(self, caller: str) -> None:
        if _address(caller, "caller") != self.governor.address:
            raise AuthorizationError("only basket governance")

    def _validator(self, raw_value: str) -> str:
        validator = _address(raw_value, "validator")
        if is_zero_address(validator):
            raise GovernanceValidationError("invalid validator")
        return validator


def _ensure_pending(executed: bool) -> None:
    if executed:
        raise ProposalStateError("already executed")


def _address(raw_value: str, field_name: str) -> str:
    return normalize_address(raw_value, field_name=field_name)
