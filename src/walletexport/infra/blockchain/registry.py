"""AdapterRegistry: chain -> ChainAdapter lookup, and the default wiring of every provider."""

import logging
from collections.abc import Mapping

from walletexport.config import Settings, resolve_api_key
from walletexport.domain.enums import Chain
from walletexport.exceptions import UnsupportedChainError
from walletexport.infra.blockchain.base import ChainAdapter
from walletexport.infra.http.rate_limited_client import RateLimitedClient

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """Registry mapping chain → adapter. Owns the HTTP clients it was handed."""

    def __init__(self) -> None:
        self._adapters: dict[Chain, ChainAdapter] = {}
        self._clients: list[RateLimitedClient] = []

    def register(self, adapter: ChainAdapter, http: RateLimitedClient | None = None) -> None:
        self._adapters[adapter.CHAIN] = adapter
        if http is not None:
            self._clients.append(http)

    def get(self, chain: Chain | str) -> ChainAdapter:
        try:
            return self._adapters[Chain(chain)]
        except (KeyError, ValueError):
            raise UnsupportedChainError(str(getattr(chain, "value", chain))) from None

    def chains(self) -> list[Chain]:
        return list(self._adapters)

    async def aclose(self) -> None:
        for client in self._clients:
            await client.close()
        self._clients.clear()


def build_default_registry(settings: Settings, credentials: Mapping[str, str] | None = None) -> AdapterRegistry:
    """Create an AdapterRegistry with every supported chain, one throttled client per provider.

    ``credentials`` maps provider name (etherscan, covalent, pikespeak) to a user key
    that replaces the configured one for this registry.
    """
    from walletexport.infra.blockchain.cosmos.celenium_client import CelestiaAdapter
    from walletexport.infra.blockchain.cosmos.lcd_client import OsmosisAdapter
    from walletexport.infra.blockchain.evm.blockscout_client import FantomAdapter
    from walletexport.infra.blockchain.evm.covalent_client import RoninAdapter
    from walletexport.infra.blockchain.evm.etherscan_client import CeloAdapter
    from walletexport.infra.blockchain.near.pikespeak_client import NearAdapter
    from walletexport.infra.blockchain.tezos.tzkt_client import TezosAdapter

    def client(interval: float) -> RateLimitedClient:
        return RateLimitedClient(min_interval=interval, timeout=settings.http_timeout)

    registry = AdapterRegistry()

    http = client(settings.osmosis_request_interval)
    registry.register(OsmosisAdapter(http, page_size=settings.cosmos_page_size), http)

    http = client(settings.celestia_request_interval)
    registry.register(CelestiaAdapter(http, page_size=settings.cosmos_page_size), http)

    http = client(settings.celo_request_interval)
    api_key = resolve_api_key(credentials, "etherscan", settings.etherscan_api_key)
    registry.register(CeloAdapter(http, api_key=api_key, page_size=settings.etherscan_page_size), http)

    http = client(settings.ronin_request_interval)
    api_key = resolve_api_key(credentials, "covalent", settings.covalent_api_key)
    registry.register(RoninAdapter(http, api_key=api_key, page_size=settings.covalent_page_size), http)

    http = client(settings.tezos_request_interval)
    registry.register(TezosAdapter(http, page_size=settings.tzkt_page_size), http)

    http = client(settings.near_request_interval)
    api_key = resolve_api_key(credentials, "pikespeak", settings.pikespeak_api_key)
    registry.register(NearAdapter(http, api_key=api_key, page_size=settings.pikespeak_page_size), http)

    http = client(settings.fantom_request_interval)
    registry.register(FantomAdapter(http, page_size=settings.etherscan_page_size), http)

    logger.debug("Registered adapters: %s", ", ".join(c.value for c in registry.chains()))
    return registry
