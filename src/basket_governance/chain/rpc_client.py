from __future__ import annotations

from web3 import HTTPProvider, Web3

from basket_governance.config import AppSettings


class RpcClientFactory:
    """Builds CORE chain clients from settings; construction never touches the network."""

    def __init__(self, settings: AppSettings) -> None:
        self._settings = settings

    def create(self) -> Web3:
        return Web3(
            HTTPProvider(self._settings.core_rpc_url, request_kwargs={"timeout": 10})
        )
