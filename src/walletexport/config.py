from collections.abc import Mapping

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="WALLETEXPORT_", env_file=".env", extra="ignore")

    # Built-in provider credentials; user-supplied keys override these per call
    etherscan_api_key: str = ""
    covalent_api_key: str = ""
    pikespeak_api_key: str = ""

    # Minimum seconds between consecutive requests to one provider
    osmosis_request_interval: float = 0.1
    celestia_request_interval: float = 0.2
    celo_request_interval: float = 0.35  # Etherscan free tier: 3 req/s
    ronin_request_interval: float = 0.2
    tezos_request_interval: float = 0.2
    near_request_interval: float = 0.1
    fantom_request_interval: float = 0.2

    cosmos_page_size: int = 100
    etherscan_page_size: int = 100
    covalent_page_size: int = 100
    tzkt_page_size: int = 1000
    pikespeak_page_size: int = 50

    max_pages: int = 100  # per branch safety limit
    max_attempts: int = 3
    retry_backoff_seconds: float = 0.5
    http_timeout: float = 30.0
    concurrent_branches: bool = True


def resolve_api_key(credentials: Mapping[str, str] | None, provider: str, default: str) -> str:
    """User-supplied key for ``provider`` if present and non-blank, else the built-in default."""
    if credentials:
        override = (credentials.get(provider) or "").strip()
        if override:
            return override
    return default


settings = Settings()
