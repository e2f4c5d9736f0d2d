"""One fetch session: validate, paginate every branch, map, drop, merge."""

import asyncio
import logging
from collections.abc import Callable

from walletexport.domain.enums import BranchStatus
from walletexport.domain.models import (
    BranchReport,
    CanonicalTransaction,
    FetchMetadata,
    FetchResult,
    ProviderRecord,
    TokenMetadataCache,
)
from walletexport.exceptions import ExhaustedFetchError, MalformedRecordError, ValidationError
from walletexport.infra.blockchain.base import ChainAdapter
from walletexport.infra.blockchain.pagination import Paginator
from walletexport.pipeline.aggregator import merge

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]  # (records so far, pages so far)

# Shape errors a single provider record can raise while mapping
_RECORD_ERRORS = (MalformedRecordError, ValueError, TypeError, KeyError, AttributeError)


async def fetch_all(
    adapter: ChainAdapter,
    address: str,
    on_progress: ProgressCallback | None = None,
    cache: TokenMetadataCache | None = None,
    paginator: Paginator | None = None,
    concurrent: bool = True,
) -> FetchResult:
    """Fetch, map and merge the full history of ``address`` from ``adapter``'s provider.

    Raises ValidationError before any request for a malformed address, and
    ExhaustedFetchError only when nothing was fetched and no branch finished.
    Partial failures are reported in ``metadata.branches`` / ``metadata.complete``.
    """
    address = address.strip()
    if not adapter.is_valid_address(address):
        raise ValidationError(adapter.CHAIN.value, address)

    cache = cache if cache is not None else TokenMetadataCache()
    cache.seed(adapter.KNOWN_TOKENS)
    paginator = paginator or Paginator()

    progress = {"records": 0, "pages": 0}

    def on_page(items: int, _branch_pages: int) -> None:
        progress["records"] += items
        progress["pages"] += 1
        if on_progress is not None:
            on_progress(progress["records"], progress["pages"])

    reports: list[BranchReport] = []
    batches: dict[str, list[ProviderRecord]] = {}
    used_endpoint = ""
    for endpoint in adapter.endpoints():
        used_endpoint = endpoint
        batches, endpoint_reports = await _run_branches(adapter, address, endpoint, paginator, on_page, concurrent)
        reports.extend(endpoint_reports)
        if any(batches.values()):
            break
        logger.info("%s: no records from %s", adapter.CHAIN.value, endpoint)

    fetched = sum(len(records) for records in batches.values())
    if fetched == 0 and all(r.status == BranchStatus.INCOMPLETE for r in reports):
        raise ExhaustedFetchError(adapter.CHAIN.value, address, reports)

    mapped, dropped = _map_batches(adapter, adapter.prepare_batches(batches), cache)
    transactions = merge(mapped)
    if dropped:
        logger.warning("%s: dropped %d unmappable records for %s", adapter.CHAIN.value, dropped, address)

    final_reports = [r for r in reports if r.endpoint == used_endpoint]
    data_source = adapter.DATA_SOURCE
    if len(adapter.endpoints()) > 1:
        data_source = f"{data_source} ({used_endpoint})"

    metadata = FetchMetadata(
        address=address,
        chain=adapter.CHAIN,
        total_fetched=len(transactions),
        first_transaction_date=transactions[-1].timestamp if transactions else None,
        last_transaction_date=transactions[0].timestamp if transactions else None,
        data_source=data_source,
        dropped_count=dropped,
        complete=all(r.status == BranchStatus.COMPLETE for r in final_reports),
        branches=reports,
    )
    logger.info(
        "%s: %d transactions for %s from %s (%d dropped, complete=%s)",
        adapter.CHAIN.value, len(transactions), address, data_source, dropped, metadata.complete,
    )
    return FetchResult(transactions=transactions, metadata=metadata)


async def _run_branches(
    adapter: ChainAdapter,
    address: str,
    endpoint: str,
    paginator: Paginator,
    on_page: Callable[[int, int], None],
    concurrent: bool,
) -> tuple[dict[str, list[ProviderRecord]], list[BranchReport]]:
    branches = adapter.branches(address, endpoint)
    if concurrent:
        outcomes = await asyncio.gather(
            *(paginator.run(adapter.CHAIN, branch, endpoint, on_page) for branch in branches)
        )
    else:
        outcomes = [await paginator.run(adapter.CHAIN, branch, endpoint, on_page) for branch in branches]

    # Declaration order, independent of completion order
    batches = {branch.name: outcome.records for branch, outcome in zip(branches, outcomes)}
    reports = [outcome.report for outcome in outcomes]
    for report in reports:
        logger.info(
            "%s/%s: %d records in %d pages (%s)",
            adapter.CHAIN.value, report.name, report.records, report.pages, report.status.value,
        )
    return batches, reports


def _map_batches(
    adapter: ChainAdapter,
    batches: list[list[ProviderRecord]],
    cache: TokenMetadataCache,
) -> tuple[list[list[CanonicalTransaction]], int]:
    mapped: list[list[CanonicalTransaction]] = []
    dropped = 0
    for batch in batches:
        canonical = []
        for record in batch:
            try:
                tx = adapter.to_canonical(record, cache)
            except _RECORD_ERRORS as exc:
                logger.debug("Dropping %s/%s record: %s", record.provider.value, record.branch, exc)
                tx = None
            if tx is None:
                dropped += 1
                continue
            canonical.append(tx)
        mapped.append(canonical)
    return mapped, dropped
