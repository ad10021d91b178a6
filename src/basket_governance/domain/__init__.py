"""Domain models for basket governance proposals."""

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
from basket_governance.domain.status import is_terminal_state
from basket_governance.domain.tiers import BASIS_POINTS, StakingTier, tier_for_amount

__all__ = [
    "BASIS_POINTS",
    "GovernanceEvent",
    "Proposal",
    "ProposalDetails",
    "ProposalState",
    "ProposalType",
    "ProposalVoting",
    "StakingTier",
    "TargetCall",
    "VoteReceipt",
    "VoteType",
    "is_terminal_state",
    "tier_for_amount",
]
