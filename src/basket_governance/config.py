from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

ONE_DAY_SECONDS = 24 * 60 * 60
TOKEN_UNIT = 10**18


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_env: str = "dev"
    log_level: str = "INFO"
    dao_name: str = "basket-governance"

    core_rpc_url: str = "https://rpc.test2.btcs.network"
    chain_id: int = 1114
    voting_token_address: str = "0x0000000000000000000000000000000000000000"
    state_path: str = ".basket-governance/deployment.json"

    voting_period_seconds: int = 3 * ONE_DAY_SECONDS
    voting_delay_seconds: int = 0
    execution_delay_seconds: int = ONE_DAY_SECONDS
    execution_grace_period_seconds: int | None = None
    proposal_threshold: int = 100 * TOKEN_UNIT
    quorum_percentage: int = 10


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    return AppSettings()
