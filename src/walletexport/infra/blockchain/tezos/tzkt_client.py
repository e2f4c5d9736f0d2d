"""Tezos history via the TzKT indexer: outgoing, incoming and token transfers."""

import re
from functools import partial
from typing import Any

from walletexport.domain.enums import Chain
from walletexport.domain.models import (
    CHAIN_PROFILES,
    CanonicalTransaction,
    ProviderRecord,
    TokenMetadata,
    TokenMetadataCache,
)
from walletexport.exceptions import ProviderResponseError
from walletexport.infra.blockchain.base import ChainAdapter, Page, PageRequest, QueryBranch
from walletexport.infra.http.rate_limited_client import RateLimitedClient
from walletexport.infra.http.responses import json_body, raise_for_provider_status
from walletexport.parser.mappers.tezos import map_tzkt_operation, map_tzkt_token_transfer

BASE_URL = "https://api.tzkt.io/v1"

TOKENS = "tokens"

TEZOS_KNOWN_TOKENS: dict[str, TokenMetadata] = {
    "KT1VQuYs6vH2t1p9TRB3A2EPLFAeQ2iWYu1C": TokenMetadata(symbol="UT1", decimals=0, name="UT1"),
    "KT1PWx2mnDueood7fEmfbBDKx1D9BAnnXitn": TokenMetadata(symbol="tzBTC", decimals=8, name="tzBTC"),
    "KT1LN4LPSqTMS7Sd2CJw4bbDGRkMv2t68Fy9": TokenMetadata(symbol="USDtz", decimals=6, name="USDtz"),
    "KT1EctCuorV2NfVb1XTQgvzJ88MQtWP8cMMv": TokenMetadata(symbol="STKR", decimals=0, name="StakerDAO"),
}

_ADDRESS = re.compile(r"^(tz1|tz2|tz3)[1-9A-Za-z]{33}$")


class TezosAdapter(ChainAdapter):
    CHAIN = Chain.TEZOS
    PROFILE = CHAIN_PROFILES[Chain.TEZOS]
    DATA_SOURCE = "TzKT API"
    KNOWN_TOKENS = TEZOS_KNOWN_TOKENS

    def __init__(self, http: RateLimitedClient, page_size: int = 1000) -> None:
        self._http = http
        self._page_size = page_size

    def is_valid_address(self, address: str) -> bool:
        return bool(_ADDRESS.match(address or ""))

    def endpoints(self) -> list[str]:
        return [BASE_URL]

    def branches(self, address: str, endpoint: str) -> list[QueryBranch]:
        operations = f"{endpoint}/operations/transactions"
        return [
            QueryBranch(
                name="outgoing",
                fetch_page=partial(self._fetch_page, operations, {"sender": address, "quote": "usd"}),
                page_size=self._page_size,
            ),
            QueryBranch(
                name="incoming",
                fetch_page=partial(self._fetch_page, operations, {"target": address, "quote": "usd"}),
                page_size=self._page_size,
            ),
            QueryBranch(
                name=TOKENS,
                fetch_page=partial(
                    self._fetch_page, f"{endpoint}/tokens/transfers", {"anyof.from.to": address, "quote": "usd"},
                ),
                page_size=self._page_size,
            ),
        ]

    async def _fetch_page(self, url: str, filters: dict[str, Any], request: PageRequest) -> Page:
        params = {**filters, "limit": request.limit, "offset": request.offset, "sort.desc": "id"}
        resp = await self._http.get(url, params=params)
        raise_for_provider_status(resp, "tzkt")
        data = json_body(resp, "tzkt")
        if not isinstance(data, list):
            raise ProviderResponseError(f"tzkt returned {type(data).__name__}, expected a list")
        return Page(items=data)

    def to_canonical(self, record: ProviderRecord, cache: TokenMetadataCache) -> CanonicalTransaction | None:
        if record.branch == TOKENS:
            return map_tzkt_token_transfer(record.payload, cache)
        return map_tzkt_operation(record.payload)
