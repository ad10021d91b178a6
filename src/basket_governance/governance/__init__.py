"""Proposal governance core and its in-process collaborators."""

from basket_governance.governance.collaborators import (
    CallContext,
    ContractHandler,
    DispatchExecutor,
    LedgerToken,
    ManualClock,
    SystemClock,
)
from basket_governance.governance.coredao_proxy import CoreDAOGovernanceProxy
from basket_governance.governance.governor import GovernanceParameters, ProposalGovernor
from basket_governance.governance.staking import StakingLedger

__all__ = [
    "CallContext",
    "ContractHandler",
    "CoreDAOGovernanceProxy",
    "DispatchExecutor",
    "GovernanceParameters",
    "LedgerToken",
    "ManualClock",
    "ProposalGovernor",
    "StakingLedger",
    "SystemClock",
]
