"""WalletExporter: fetch, classify and render one wallet's history as tax CSV."""

import logging
from collections.abc import Mapping

from pydantic import BaseModel

from walletexport.config import Settings
from walletexport.domain.enums import Chain
from walletexport.domain.models import FetchMetadata, FetchResult, ParsedTransaction, TokenMetadataCache
from walletexport.infra.blockchain.pagination import Paginator
from walletexport.infra.blockchain.registry import AdapterRegistry, build_default_registry
from walletexport.parser.classifier import classify
from walletexport.pipeline.fetch import ProgressCallback, fetch_all
from walletexport.report.csv_export import TaxRow, convert_to_rows, generate_filename, serialize

logger = logging.getLogger(__name__)


class ExportResult(BaseModel):
    csv: str
    filename: str
    rows: list[TaxRow]
    parsed: list[ParsedTransaction]
    metadata: FetchMetadata


class WalletExporter:
    """Orchestrates fetch → classify → CSV rows for one chain/address at a time."""

    def __init__(self, registry: AdapterRegistry, paginator: Paginator | None = None, concurrent: bool = True) -> None:
        self._registry = registry
        self._paginator = paginator or Paginator()
        self._concurrent = concurrent

    @classmethod
    def from_settings(cls, settings: Settings, credentials: Mapping[str, str] | None = None) -> "WalletExporter":
        paginator = Paginator(
            max_pages=settings.max_pages,
            max_attempts=settings.max_attempts,
            backoff_seconds=settings.retry_backoff_seconds,
        )
        return cls(build_default_registry(settings, credentials), paginator, settings.concurrent_branches)

    async def fetch(
        self, chain: Chain | str, address: str, on_progress: ProgressCallback | None = None,
    ) -> FetchResult:
        adapter = self._registry.get(chain)
        # Fresh cache per session so symbols are stable within one export only
        return await fetch_all(
            adapter,
            address,
            on_progress=on_progress,
            cache=TokenMetadataCache(),
            paginator=self._paginator,
            concurrent=self._concurrent,
        )

    async def export(
        self, chain: Chain | str, address: str, on_progress: ProgressCallback | None = None,
    ) -> ExportResult:
        adapter = self._registry.get(chain)
        result = await self.fetch(chain, address, on_progress)
        wallet = result.metadata.address
        parsed = [classify(tx, wallet, adapter.PROFILE) for tx in result.transactions]
        rows = convert_to_rows(parsed, wallet)
        logger.info("Exported %d rows for %s on %s", len(rows), wallet, adapter.CHAIN.value)
        return ExportResult(
            csv=serialize(rows),
            filename=generate_filename(wallet, adapter.CHAIN),
            rows=rows,
            parsed=parsed,
            metadata=result.metadata,
        )

    async def close(self) -> None:
        await self._registry.aclose()

    async def __aenter__(self) -> "WalletExporter":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()
