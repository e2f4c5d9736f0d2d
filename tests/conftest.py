from collections.abc import Mapping
from functools import partial

import pytest

from walletexport.domain.enums import Chain
from walletexport.domain.models import (
    CHAIN_PROFILES,
    CanonicalTransaction,
    ProviderRecord,
    TokenMetadata,
    TokenMetadataCache,
)
from walletexport.infra.blockchain.base import ChainAdapter, Page, PageRequest, QueryBranch
from walletexport.infra.blockchain.pagination import Paginator
from walletexport.parser.utils.timestamps import parse_iso


class ScriptedAdapter(ChainAdapter):
    """In-memory provider: ``script[endpoint][branch]`` is consumed one response per call.

    A response is a list of payload dicts (one page) or an exception to raise.
    Payloads without "hash" map to None.
    """

    CHAIN = Chain.OSMOSIS
    PROFILE = CHAIN_PROFILES[Chain.OSMOSIS]
    DATA_SOURCE = "Scripted"

    def __init__(
        self,
        script: Mapping[str, Mapping[str, list]],
        page_size: int = 2,
        known_tokens: Mapping[str, TokenMetadata] | None = None,
    ) -> None:
        self._script = {
            endpoint: {name: list(responses) for name, responses in branches.items()}
            for endpoint, branches in script.items()
        }
        self._page_size = page_size
        self.KNOWN_TOKENS = dict(known_tokens or {})
        self.calls: list[tuple[str, str, int]] = []

    def is_valid_address(self, address: str) -> bool:
        return address.startswith("osmo1")

    def endpoints(self) -> list[str]:
        return list(self._script)

    def branches(self, address: str, endpoint: str) -> list[QueryBranch]:
        return [
            QueryBranch(name=name, fetch_page=partial(self._fetch, endpoint, name), page_size=self._page_size)
            for name in self._script[endpoint]
        ]

    async def _fetch(self, endpoint: str, name: str, request: PageRequest) -> Page:
        self.calls.append((endpoint, name, request.index))
        response = self._script[endpoint][name].pop(0)
        if isinstance(response, Exception):
            raise response
        return Page(items=response)

    def to_canonical(self, record: ProviderRecord, cache: TokenMetadataCache) -> CanonicalTransaction | None:
        payload = record.payload
        if not payload.get("hash"):
            return None
        return CanonicalTransaction(
            hash=payload["hash"],
            chain=self.CHAIN,
            timestamp=parse_iso(payload.get("time")),
            memo=payload.get("memo", ""),
        )


@pytest.fixture()
def scripted_adapter():
    return ScriptedAdapter


@pytest.fixture()
def paginator():
    return Paginator(max_pages=10, max_attempts=3, backoff_seconds=0)


@pytest.fixture()
def cache():
    return TokenMetadataCache()
