"""Command handlers for the basket governance CLI."""

from basket_governance.commands.advance_time import run_advance_time
from basket_governance.commands.cast_vote import run_cast_vote
from basket_governance.commands.coredao import (
    run_authorize_operator,
    run_create_coredao_proposal,
    run_create_delegation,
)
from basket_governance.commands.fund_accounts import run_mint, run_stake
from basket_governance.commands.governance_parameters import (
    run_set_proposal_threshold,
    run_set_quorum_percentage,
)
from basket_governance.commands.init_deployment import run_init_deployment
from basket_governance.commands.inspect_proposal import run_proposal_details, run_proposal_state
from basket_governance.commands.proposal_lifecycle import (
    run_cancel_proposal,
    run_execute_proposal,
    run_queue_proposal,
)
from basket_governance.commands.propose import run_propose
from basket_governance.commands.read_voting_token import run_read_voting_token
from basket_governance.commands.run_keeper import run_keeper_cycle

__all__ = [
    "run_advance_time",
    "run_authorize_operator",
    "run_cancel_proposal",
    "run_cast_vote",
    "run_create_coredao_proposal",
    "run_create_delegation",
    "run_execute_proposal",
    "run_init_deployment",
    "run_keeper_cycle",
    "run_mint",
    "run_proposal_details",
    "run_proposal_state",
    "run_propose",
    "run_queue_proposal",
    "run_read_voting_token",
    "run_set_proposal_threshold",
    "run_set_quorum_percentage",
    "run_stake",
]
