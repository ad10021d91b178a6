from __future__ import annotations

from typing import Any

from web3 import Web3

from basket_governance.chain.addresses import normalize_address

ERC20_VOTING_ABI: list[dict[str, Any]] = [
    {
        "inputs": [{"internalType": "address", "name": "account", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [],
        "name": "totalSupply",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [
            {"internalType": "address", "name": "account", "type": "address"},
            {"internalType": "uint256", "name": "timepoint", "type": "uint256"},
        ],
        "name": "getPastVotes",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "inputs": [{"internalType": "uint256", "name": "timepoint", "type": "uint256"}],
        "name": "getPastTotalSupply",
        "outputs": [{"internalType": "uint256", "name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
]


class Web3VotingToken:
    """Read-only view of a deployed BASKET token.

    Satisfies the ``VotingToken`` protocol so a governor can weigh votes
    against on-chain ERC20Votes checkpoints.
    """

    def __init__(self, contract: Any) -> None:
        self._contract = contract

    @classmethod
    def from_web3(cls, web3: Web3, address: str) -> Web3VotingToken:
        checksum = normalize_address(address, field_name="voting_token_address")
        return cls(web3.eth.contract(address=checksum, abi=ERC20_VOTING_ABI))

    @property
    def address(self) -> str:
        return str(self._contract.address)

    def balance_of(self, account: str) -> int:
        holder = normalize_address(account, field_name="account")
        return int(self._contract.functions.balanceOf(holder).call())

    def total_supply(self) -> int:
        return int(self._contract.functions.totalSupply().call())

    # ERC20Votes lookups include the queried timepoint, so ask for the second before it.
    def balance_of_at(self, account: str, timepoint: int) -> int:
        holder = normalize_address(account, field_name="account")
        return int(self._contract.functions.getPastVotes(holder, int(timepoint) - 1).call())

    def total_supply_at(self, timepoint: int) -> int:
        return int(self._contract.functions.getPastTotalSupply(int(timepoint) - 1).call())
