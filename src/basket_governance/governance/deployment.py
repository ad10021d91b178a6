"""Local deployment of the governance contracts.

A deployment wires the BASKET token ledger, staking tiers, governor and
CoreDAO proxy around a single manual clock, and persists as one JSON snapshot
so successive CLI invocations behave like transactions against one chain.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from basket_governance.chain.addresses import derive_contract_address, normalize_address
from basket_governance.config import AppSettings
from basket_governance.errors import GovernanceError
from basket_governance.governance.collaborators import DispatchExecutor, LedgerToken, ManualClock
from basket_governance.governance.coredao_proxy import CoreDAOGovernanceProxy
from basket_governance.governance.governor import GovernanceParameters, ProposalGovernor
from basket_governance.governance.staking import StakingLedger

SNAPSHOT_VERSION = 2


class DeploymentNotFoundError(GovernanceError):
    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"no deployment at {path}; run init-deployment first")


@dataclass(slots=True)
class Deployment:
    owner: str
    token: LedgerToken
    clock: ManualClock
    executor: DispatchExecutor
    staking: StakingLedger
    governor: ProposalGovernor
    proxy: CoreDAOGovernanceProxy

    def addresses(self) -> dict[str, str]:
        return {
            "owner": self.owner,
            "basket_token": self.token.address,
            "basket_governance": self.governor.address,
            "coredao_proxy": self.proxy.address,
        }


def create_deployment(
    owner: str,
    settings: AppSettings,
    *,
    start_time: int,
    dao_name: str | None = None,
) -> Deployment:
    deployer = normalize_address(owner, field_name="owner")
    name = dao_name or settings.dao_name
    clock = ManualClock(start_time)
    token = LedgerToken(derive_contract_address(f"{deployer}:{name}:basket-token"), clock=clock)
    executor = DispatchExecutor()
    staking = StakingLedger(owner=deployer, token=token)
    governor = ProposalGovernor(
        address=derive_contract_address(f"{deployer}:{name}:governance"),
        owner=deployer,
        token=token,
        clock=clock,
        executor=executor,
        parameters=GovernanceParameters.from_settings(settings),
        staking=staking,
    )
    proxy = CoreDAOGovernanceProxy(
        address=derive_contract_address(f"{deployer}:{name}:coredao-proxy"),
        owner=deployer,
        governor=governor,
    )
    governor.set_threshold_exemption(proxy.address, True, caller=deployer)
    _wire(executor, governor, proxy)
    return Deployment(deployer, token, clock, executor, staking, governor, proxy)


def _wire(
    executor: DispatchExecutor, governor: ProposalGovernor, proxy: CoreDAOGovernanceProxy
) -> None:
    executor.register(governor.address, governor.as_contract_handler())
    executor.register(proxy.address, proxy.as_contract_handler())


def export_deployment(deployment: Deployment) -> dict[str, Any]:
    return {
        "version": SNAPSHOT_VERSION,
        "owner": deployment.owner,
        "clock": deployment.clock.now(),
        "token": deployment.token.to_dict(),
        "native_balances": dict(deployment.executor.native_balances),
        "staking": deployment.staking.to_dict(),
        "governor": deployment.governor.export_state(),
        "proxy": deployment.proxy.export_state(),
    }


def restore_deployment(data: dict[str, Any], settings: AppSettings) -> Deployment:
    if int(data.get("version", 0)) != SNAPSHOT_VERSION:
        raise GovernanceError(f"unsupported snapshot version: {data.get('version')}")

    clock = ManualClock(int(data["clock"]))
    token = LedgerToken.from_dict(data["token"], clock=clock)
    executor = DispatchExecutor(native_balances=dict(data.get("native_balances", {})))
    staking = StakingLedger.from_dict(data["staking"], token=token)
    governor_state = data["governor"]
    governor = ProposalGovernor(
        address=governor_state["address"],
        owner=governor_state["owner"],
        token=token,
        clock=clock,
        executor=executor,
        parameters=GovernanceParameters.from_settings(settings),
        staking=staking,
    )
    governor.load_state(governor_state)
    if not governor_state.get("staking_enabled", True):
        governor.staking = None
    proxy = CoreDAOGovernanceProxy(
        address=data["proxy"]["address"],
        owner=data["proxy"]["owner"],
        governor=governor,
    )
    proxy.load_state(data["proxy"])
    _wire(executor, governor, proxy)
    return Deployment(str(data["owner"]), token, clock, executor, staking, governor, proxy)


def save_deployment(deployment: Deployment, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    tmp_path.write_text(json.dumps(export_deployment(deployment), indent=2, sort_keys=True))
    tmp_path.replace(path)


def load_deployment(path: Path, settings: AppSettings) -> Deployment:
    if not path.exists():
        raise DeploymentNotFoundError(path)
    return restore_deployment(json.loads(path.read_text()), settings)
