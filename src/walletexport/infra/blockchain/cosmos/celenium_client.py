"""Celestia history via the Celenium indexer."""

import re
from functools import partial

from walletexport.domain.enums import Chain
from walletexport.domain.models import CHAIN_PROFILES, CanonicalTransaction, ProviderRecord, TokenMetadataCache
from walletexport.exceptions import ProviderResponseError
from walletexport.infra.blockchain.base import ChainAdapter, Page, PageRequest, QueryBranch
from walletexport.infra.http.rate_limited_client import RateLimitedClient
from walletexport.infra.http.responses import json_body, raise_for_provider_status
from walletexport.parser.mappers.celestia import map_celenium_message

BASE_URL = "https://api-mainnet.celenium.io/v1"

_ADDRESS = re.compile(r"^celestia[a-z0-9]{39}$")


class CelestiaAdapter(ChainAdapter):
    CHAIN = Chain.CELESTIA
    PROFILE = CHAIN_PROFILES[Chain.CELESTIA]
    DATA_SOURCE = "Celenium API"

    def __init__(self, http: RateLimitedClient, page_size: int = 100) -> None:
        self._http = http
        self._page_size = page_size

    def is_valid_address(self, address: str) -> bool:
        return bool(_ADDRESS.match(address or ""))

    def endpoints(self) -> list[str]:
        return [BASE_URL]

    def branches(self, address: str, endpoint: str) -> list[QueryBranch]:
        url = f"{endpoint}/address/{address}/messages"
        return [QueryBranch(name="messages", fetch_page=partial(self._fetch_page, url), page_size=self._page_size)]

    async def _fetch_page(self, url: str, request: PageRequest) -> Page:
        params = {"limit": request.limit, "offset": request.offset, "sort": "desc"}
        resp = await self._http.get(url, params=params, headers={"Accept": "application/json"})
        raise_for_provider_status(resp, "celenium")
        data = json_body(resp, "celenium")
        if not isinstance(data, list):
            raise ProviderResponseError(f"celenium returned {type(data).__name__}, expected a list")
        return Page(items=data)

    def to_canonical(self, record: ProviderRecord, cache: TokenMetadataCache) -> CanonicalTransaction | None:
        return map_celenium_message(record.payload)
