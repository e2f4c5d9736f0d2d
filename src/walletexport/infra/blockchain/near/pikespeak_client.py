"""NEAR history via the Pikespeak indexer."""

import re
from functools import partial

from walletexport.domain.enums import Chain
from walletexport.domain.models import CHAIN_PROFILES, CanonicalTransaction, ProviderRecord, TokenMetadataCache
from walletexport.exceptions import ProviderResponseError
from walletexport.infra.blockchain.base import ChainAdapter, Page, PageRequest, QueryBranch
from walletexport.infra.http.rate_limited_client import RateLimitedClient
from walletexport.infra.http.responses import json_body, raise_for_provider_status
from walletexport.parser.mappers.near import map_pikespeak_tx

BASE_URL = "https://api.pikespeak.ai"

# Named accounts (alice.near, app.sweat) or 64-hex implicit accounts
_NAMED = re.compile(r"^[a-z0-9_-]+(\.[a-z0-9_-]+)*$")
_IMPLICIT = re.compile(r"^[a-f0-9]{64}$")


class NearAdapter(ChainAdapter):
    CHAIN = Chain.NEAR
    PROFILE = CHAIN_PROFILES[Chain.NEAR]
    DATA_SOURCE = "Pikespeak API"

    def __init__(self, http: RateLimitedClient, api_key: str = "", page_size: int = 50) -> None:
        self._http = http
        self._api_key = api_key
        self._page_size = page_size

    def is_valid_address(self, address: str) -> bool:
        if not address or not 2 <= len(address) <= 64:
            return False
        return bool(_IMPLICIT.match(address) or _NAMED.match(address))

    def endpoints(self) -> list[str]:
        return [BASE_URL]

    def branches(self, address: str, endpoint: str) -> list[QueryBranch]:
        url = f"{endpoint}/account/transactions/{address}"
        return [QueryBranch(name="transactions", fetch_page=partial(self._fetch_page, url), page_size=self._page_size)]

    async def _fetch_page(self, url: str, request: PageRequest) -> Page:
        # Pikespeak pages are 1-based
        params = {"page": request.index + 1, "per_page": request.limit}
        resp = await self._http.get(url, params=params, headers={"x-api-key": self._api_key})
        raise_for_provider_status(resp, "pikespeak")
        data = json_body(resp, "pikespeak")
        if isinstance(data, dict):
            data = data.get("transactions")
        if not isinstance(data, list):
            raise ProviderResponseError("pikespeak returned no transaction list")
        return Page(items=data)

    def to_canonical(self, record: ProviderRecord, cache: TokenMetadataCache) -> CanonicalTransaction | None:
        return map_pikespeak_tx(record.payload, cache)
