"""Error hierarchy for rejected governance calls.

Every error carries a human-readable ``reason``, mirroring the revert strings
of the on-chain contracts. Errors are synchronous and never retried here.
"""
from __future__ import annotations


class GovernanceError(Exception):
    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class AuthorizationError(GovernanceError):
    """Caller lacks the role required for the operation."""


class ProposalStateError(GovernanceError):
    """Operation is not allowed in the proposal's current state."""


class GovernanceValidationError(GovernanceError, ValueError):
    """Argument failed validation at the API boundary."""


class ExecutionFailedError(GovernanceError):
    def __init__(self, proposal_id: int, reason: str) -> None:
        self.proposal_id = proposal_id
        super().__init__(f"execution failed: {reason}")
