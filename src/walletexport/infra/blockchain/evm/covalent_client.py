"""Ronin history via Covalent GoldRush ``transactions_v3``."""

import logging
from functools import partial

from walletexport.domain.enums import Chain
from walletexport.domain.models import CHAIN_PROFILES, CanonicalTransaction, ProviderRecord, TokenMetadataCache
from walletexport.exceptions import ProviderResponseError, TransientProviderError
from walletexport.infra.blockchain.base import ChainAdapter, Page, PageRequest, QueryBranch
from walletexport.infra.blockchain.evm.etherscan_client import EVM_ADDRESS
from walletexport.infra.http.rate_limited_client import RateLimitedClient
from walletexport.infra.http.responses import json_body, raise_for_provider_status
from walletexport.parser.mappers.covalent import map_covalent_tx

logger = logging.getLogger(__name__)

BASE_URL = "https://api.covalenthq.com/v1"
RONIN_CHAIN_ID = 2020
PAGE_SIZE = 100  # fixed by the API


class RoninAdapter(ChainAdapter):
    CHAIN = Chain.RONIN
    PROFILE = CHAIN_PROFILES[Chain.RONIN]
    DATA_SOURCE = "Covalent GoldRush API"

    def __init__(self, http: RateLimitedClient, api_key: str = "", page_size: int = PAGE_SIZE) -> None:
        self._http = http
        self._api_key = api_key
        self._page_size = page_size

    def is_valid_address(self, address: str) -> bool:
        return bool(EVM_ADDRESS.match(address or ""))

    def endpoints(self) -> list[str]:
        return [BASE_URL]

    def branches(self, address: str, endpoint: str) -> list[QueryBranch]:
        url = f"{endpoint}/{RONIN_CHAIN_ID}/address/{address}/transactions_v3/page"
        return [QueryBranch(name="transactions", fetch_page=partial(self._fetch_page, url), page_size=self._page_size)]

    async def _fetch_page(self, url: str, request: PageRequest) -> Page:
        resp = await self._http.get(
            f"{url}/{request.index}/",
            params={"quote-currency": "USD"},
            headers={"Authorization": f"Bearer {self._api_key}"},
        )
        raise_for_provider_status(resp, "covalent")
        body = json_body(resp, "covalent")
        if not isinstance(body, dict):
            raise ProviderResponseError(f"covalent returned {type(body).__name__}, expected an object")

        if body.get("error"):
            message = body.get("error_message") or "unknown error"
            if body.get("error_code") == 429:
                raise TransientProviderError(f"covalent rate limited: {message}")
            raise ProviderResponseError(f"covalent API error: {message}")

        data = body.get("data") or {}
        if not isinstance(data, dict):
            raise ProviderResponseError("covalent data is not an object")
        items = data.get("items") or []
        if not isinstance(items, list):
            raise ProviderResponseError("covalent data.items is not a list")
        links = data.get("links")
        return Page(items=items, has_more=isinstance(links, dict) and bool(links.get("next")))

    def to_canonical(self, record: ProviderRecord, cache: TokenMetadataCache) -> CanonicalTransaction | None:
        return map_covalent_tx(record.payload, self.CHAIN, self.PROFILE, cache)
