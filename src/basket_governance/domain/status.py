from __future__ import annotations

from basket_governance.domain.proposal import ProposalState

TERMINAL_STATES: frozenset[ProposalState] = frozenset(
    {
        ProposalState.CANCELED,
        ProposalState.DEFEATED,
        ProposalState.EXPIRED,
        ProposalState.EXECUTED,
    }
)


def is_terminal_state(state: ProposalState) -> bool:
    return state in TERMINAL_STATES
