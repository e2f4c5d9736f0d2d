"""Etherscan v2 unified API (Celo) and the Etherscan-style body contract shared with Blockscout."""

import logging
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
from walletexport.exceptions import ProviderResponseError, TransientProviderError
from walletexport.infra.blockchain.base import ChainAdapter, Page, PageRequest, QueryBranch
from walletexport.infra.http.rate_limited_client import RateLimitedClient
from walletexport.infra.http.responses import json_body, raise_for_provider_status
from walletexport.parser.mappers.evm import map_etherscan_tx, map_token_only_tx

logger = logging.getLogger(__name__)

# Etherscan v2 uses a single base URL + chainid param
BASE_URL = "https://api.etherscan.io/v2/api"
CELO_CHAIN_ID = 42220

TXLIST = "txlist"
TOKENTX = "tokentx"

CELO_KNOWN_TOKENS: dict[str, TokenMetadata] = {
    "0x765de816845861e75a25fca122bb6898b8b1282a": TokenMetadata(symbol="cUSD", decimals=18, name="Celo Dollar"),
    "0xd8763cba276a3738e6de85b4b3bf5fded6d6ca73": TokenMetadata(symbol="cEUR", decimals=18, name="Celo Euro"),
    "0xe8537a3d056ba44681e743195c4bc1a6a8f4b93c": TokenMetadata(symbol="cREAL", decimals=18, name="Celo Brazilian Real"),
    "0x471ece3750da237f93b8e339c536989b8978a438": TokenMetadata(symbol="CELO", decimals=18, name="Celo native asset"),
}

EVM_ADDRESS = re.compile(r"^0x[a-fA-F0-9]{40}$")


def explorer_result(data: Any, provider: str) -> list[dict[str, Any]]:
    """Unwrap an Etherscan-style ``{status, message, result}`` body."""
    if not isinstance(data, dict):
        raise ProviderResponseError(f"{provider} returned {type(data).__name__}, expected an object")

    status = data.get("status")
    message = str(data.get("message") or "")
    result = data.get("result")

    # "No transactions found" is valid empty result
    if message.startswith("No transactions found") or (status == "0" and result == []):
        return []

    # Rate limit or server error → retriable
    if message == "NOTOK" or status is None:
        raise TransientProviderError(f"{provider} error: {result if isinstance(result, str) else message}")

    if status == "0":
        error_msg = result if isinstance(result, str) else message
        raise ProviderResponseError(f"{provider} API error: {error_msg}")

    if not isinstance(result, list):
        return []
    return result


def attach_token_transfers(
    native: list[ProviderRecord], tokens: list[ProviderRecord],
) -> tuple[list[ProviderRecord], list[ProviderRecord]]:
    """Group token transfers by hash onto the native record with the same hash.

    Returns the enriched native records and one orphan record per hash that has
    token transfers but no native transaction, in first-seen order.
    """
    by_hash: dict[str, list[dict[str, Any]]] = {}
    for record in tokens:
        tx_hash = (record.payload.get("hash") or "").lower()
        if tx_hash:
            by_hash.setdefault(tx_hash, []).append(record.payload)

    enriched = []
    for record in native:
        tx_hash = (record.payload.get("hash") or "").lower()
        transfers = by_hash.pop(tx_hash, None)
        if transfers:
            payload = {**record.payload, "token_transfers": transfers}
            record = record.model_copy(update={"payload": payload})
        enriched.append(record)

    orphans = [
        ProviderRecord(
            provider=tokens[0].provider,
            branch=TOKENTX,
            payload={"hash": transfers[0].get("hash") or tx_hash, "token_transfers": transfers},
        )
        for tx_hash, transfers in by_hash.items()
    ]
    return enriched, orphans


class EtherscanStyleAdapter(ChainAdapter):
    """Shared paging for ``module=account&action=...`` explorer APIs."""

    PROVIDER_NAME = "etherscan"
    ACTIONS: tuple[str, ...] = (TXLIST,)

    def __init__(self, http: RateLimitedClient, base_url: str, page_size: int = 100) -> None:
        self._http = http
        self._base_url = base_url
        self._page_size = page_size

    def is_valid_address(self, address: str) -> bool:
        return bool(EVM_ADDRESS.match(address or ""))

    def endpoints(self) -> list[str]:
        return [self._base_url]

    def branches(self, address: str, endpoint: str) -> list[QueryBranch]:
        return [
            QueryBranch(
                name=action,
                fetch_page=partial(self._fetch_page, endpoint, address, action),
                page_size=self._page_size,
            )
            for action in self.ACTIONS
        ]

    def extra_params(self) -> dict[str, Any]:
        return {}

    async def _fetch_page(self, endpoint: str, address: str, action: str, request: PageRequest) -> Page:
        params = {
            "module": "account",
            "action": action,
            "address": address,
            "page": request.index + 1,
            "offset": request.limit,
            "sort": "desc",
            **self.extra_params(),
        }
        resp = await self._http.get(endpoint, params=params)
        raise_for_provider_status(resp, self.PROVIDER_NAME)
        return Page(items=explorer_result(json_body(resp, self.PROVIDER_NAME), self.PROVIDER_NAME))

    def prepare_batches(self, batches: dict[str, list[ProviderRecord]]) -> list[list[ProviderRecord]]:
        native = batches.get(TXLIST, [])
        tokens = batches.get(TOKENTX, [])
        if not tokens:
            return [native]
        enriched, orphans = attach_token_transfers(native, tokens)
        logger.info(
            "%s: attached token transfers to %d transactions, %d token-only",
            self.CHAIN.value, sum(1 for r in enriched if "token_transfers" in r.payload), len(orphans),
        )
        return [enriched, orphans]

    def to_canonical(self, record: ProviderRecord, cache: TokenMetadataCache) -> CanonicalTransaction | None:
        if record.branch == TOKENTX:
            return map_token_only_tx(record.payload, self.CHAIN, self.PROFILE, cache)
        return map_etherscan_tx(record.payload, self.CHAIN, self.PROFILE, cache)


class CeloAdapter(EtherscanStyleAdapter):
    CHAIN = Chain.CELO
    PROFILE = CHAIN_PROFILES[Chain.CELO]
    DATA_SOURCE = "Etherscan v2 API"
    KNOWN_TOKENS = CELO_KNOWN_TOKENS
    ACTIONS = (TXLIST, TOKENTX)

    def __init__(self, http: RateLimitedClient, api_key: str = "", page_size: int = 100) -> None:
        super().__init__(http, BASE_URL, page_size)
        self._api_key = api_key

    def extra_params(self) -> dict[str, Any]:
        return {"chainid": CELO_CHAIN_ID, "apikey": self._api_key}
