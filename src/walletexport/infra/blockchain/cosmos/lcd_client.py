"""Osmosis history via Cosmos SDK LCD ``/cosmos/tx/v1beta1/txs`` event queries."""

import logging
import re
from functools import partial

from walletexport.domain.enums import Chain
from walletexport.domain.models import CHAIN_PROFILES, CanonicalTransaction, ProviderRecord, TokenMetadataCache
from walletexport.exceptions import ProviderResponseError
from walletexport.infra.blockchain.base import ChainAdapter, Page, PageRequest, QueryBranch
from walletexport.infra.http.rate_limited_client import RateLimitedClient
from walletexport.infra.http.responses import json_body, raise_for_provider_status
from walletexport.parser.mappers.cosmos import map_cosmos_tx
from walletexport.parser.utils.units import parse_raw_amount

logger = logging.getLogger(__name__)

LCD_ENDPOINTS = [
    "https://lcd.osmosis.zone",
    "https://osmosis-api.polkachu.com",
    "https://rest-osmosis.blockapsis.com",
]

TXS_PATH = "/cosmos/tx/v1beta1/txs"

# Every event an address can appear in. Each is queried as its own branch;
# overlapping results are deduplicated by hash afterwards.
EVENT_QUERIES: list[tuple[str, str]] = [
    ("message.sender", "message.sender"),
    ("transfer.recipient", "transfer.recipient"),
    ("transfer.sender", "transfer.sender"),
    ("ibc_transfer.sender", "ibc_transfer.sender"),
    ("ibc_transfer.receiver", "ibc_transfer.receiver"),
    ("delegate", "delegate.delegator_address"),
    ("redelegate", "begin_redelegate.delegator_address"),
    ("unbond", "begin_unbonding.delegator_address"),
    ("withdraw_rewards", "withdraw_rewards.delegator_address"),
    ("set_withdraw_address", "set_withdraw_address.delegator_address"),
    ("swap_exact_amount_in", "swap_exact_amount_in.sender"),
    ("swap_exact_amount_out", "swap_exact_amount_out.sender"),
    ("join_pool", "join_pool.sender"),
    ("exit_pool", "exit_pool.sender"),
    ("lock_tokens", "lock_tokens.owner"),
    ("begin_unlocking", "begin_unlocking.owner"),
    ("vote", "vote.voter"),
    ("submit_proposal", "submit_proposal.proposer"),
    ("deposit", "deposit.depositor"),
    ("send", "send.from_address"),
    ("create_denom", "create_denom.sender"),
    ("mint", "mint.sender"),
    ("burn", "burn.sender"),
]

_ADDRESS = re.compile(r"^osmo[a-z0-9]{39}$", re.IGNORECASE)


class OsmosisAdapter(ChainAdapter):
    CHAIN = Chain.OSMOSIS
    PROFILE = CHAIN_PROFILES[Chain.OSMOSIS]
    DATA_SOURCE = "Osmosis LCD"

    def __init__(self, http: RateLimitedClient, page_size: int = 100, endpoints: list[str] | None = None) -> None:
        self._http = http
        self._page_size = page_size
        self._endpoints = endpoints or list(LCD_ENDPOINTS)

    def is_valid_address(self, address: str) -> bool:
        return bool(_ADDRESS.match(address or ""))

    def endpoints(self) -> list[str]:
        return list(self._endpoints)

    def branches(self, address: str, endpoint: str) -> list[QueryBranch]:
        return [
            QueryBranch(
                name=name,
                fetch_page=partial(self._fetch_page, endpoint, f"{attribute}='{address}'"),
                page_size=self._page_size,
            )
            for name, attribute in EVENT_QUERIES
        ]

    async def _fetch_page(self, endpoint: str, query: str, request: PageRequest) -> Page:
        params = {
            "query": query,
            "pagination.offset": request.offset,
            "pagination.limit": request.limit,
            "order_by": "ORDER_BY_DESC",
        }
        resp = await self._http.get(endpoint + TXS_PATH, params=params)
        raise_for_provider_status(resp, "osmosis")
        data = json_body(resp, "osmosis")
        if not isinstance(data, dict):
            raise ProviderResponseError(f"osmosis returned {type(data).__name__}, expected an object")

        items = data.get("tx_responses") or []
        if not isinstance(items, list):
            raise ProviderResponseError("osmosis tx_responses is not a list")
        pagination = data.get("pagination")
        # Some nodes report total 0 when counting is disabled
        total = parse_raw_amount(pagination.get("total") if isinstance(pagination, dict) else None) or None
        return Page(items=items, total=total)

    def to_canonical(self, record: ProviderRecord, cache: TokenMetadataCache) -> CanonicalTransaction | None:
        return map_cosmos_tx(record.payload, self.CHAIN, self.PROFILE, cache)
