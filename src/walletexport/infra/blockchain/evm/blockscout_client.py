"""Fantom history via a Blockscout explorer speaking the Etherscan-style API."""

from walletexport.domain.enums import Chain
from walletexport.domain.models import CHAIN_PROFILES
from walletexport.infra.blockchain.evm.etherscan_client import EtherscanStyleAdapter
from walletexport.infra.http.rate_limited_client import RateLimitedClient

FANTOM_EXPLORER_URL = "https://explorer.fantom.network/api"


class FantomAdapter(EtherscanStyleAdapter):
    CHAIN = Chain.FANTOM
    PROFILE = CHAIN_PROFILES[Chain.FANTOM]
    DATA_SOURCE = "Fantom Explorer"
    PROVIDER_NAME = "blockscout"

    def __init__(self, http: RateLimitedClient, page_size: int = 100, base_url: str = FANTOM_EXPLORER_URL) -> None:
        super().__init__(http, base_url, page_size)
