from __future__ import annotations

from types import SimpleNamespace
from typing import Any

from web3 import HTTPProvider, Web3

from basket_governance.chain.rpc_client import RpcClientFactory
from basket_governance.chain.voting_token import ERC20_VOTING_ABI, Web3VotingToken
from basket_governance.config import AppSettings
from conftest import ALICE, BOB, TOKEN


def _fake_contract(balances: dict[str, int], queried: list[int] | None = None) -> Any:
    def past_votes(holder: str, timepoint: int) -> SimpleNamespace:
        if queried is not None:
            queried.append(timepoint)
        return SimpleNamespace(call=lambda: balances.get(holder, 0))

    def past_supply(timepoint: int) -> SimpleNamespace:
        if queried is not None:
            queried.append(timepoint)
        return SimpleNamespace(call=lambda: sum(balances.values()))

    functions = SimpleNamespace(
        balanceOf=lambda holder: SimpleNamespace(call=lambda: balances.get(holder, 0)),
        totalSupply=lambda: SimpleNamespace(call=lambda: sum(balances.values())),
        getPastVotes=past_votes,
        getPastTotalSupply=past_supply,
    )
    return SimpleNamespace(address=TOKEN, functions=functions)


def test_reader_proxies_erc20_views() -> None:
    token = Web3VotingToken(_fake_contract({ALICE: 7, BOB: 3}))

    assert token.address == TOKEN
    assert token.balance_of(ALICE.lower()) == 7
    assert token.total_supply() == 10


def test_reader_historical_lookups_exclude_the_queried_second() -> None:
    queried: list[int] = []
    token = Web3VotingToken(_fake_contract({ALICE: 7, BOB: 3}, queried))

    assert token.balance_of_at(ALICE, 1_700_000_100) == 7
    assert token.total_supply_at(1_700_000_200) == 10
    assert queried == [1_700_000_099, 1_700_000_199]


def test_reader_binds_checksum_contract_without_network() -> None:
    web3 = Web3(HTTPProvider("http://127.0.0.1:8545"))

    token = Web3VotingToken.from_web3(web3, TOKEN.lower())

    assert token.address == TOKEN
    assert {entry["name"] for entry in ERC20_VOTING_ABI} == {
        "balanceOf",
        "totalSupply",
        "getPastVotes",
        "getPastTotalSupply",
    }


def test_rpc_client_factory_uses_configured_endpoint() -> None:
    settings = AppSettings(core_rpc_url="http://core.example:8579")

    client = RpcClientFactory(settings).create()

    assert client.provider.endpoint_uri == "http://core.example:8579"  # type: ignore[union-attr]
