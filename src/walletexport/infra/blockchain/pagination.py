"""Sequential, retrying pagination over one query branch."""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from tenacity import AsyncRetrying, before_sleep_log, retry_if_exception_type, stop_after_attempt, wait_fixed

from walletexport.domain.enums import BranchStatus, Chain
from walletexport.domain.models import BranchReport, ProviderRecord
from walletexport.exceptions import ProviderResponseError, TransientProviderError
from walletexport.infra.blockchain.base import Page, PageRequest, QueryBranch

logger = logging.getLogger(__name__)

PageCallback = Callable[[int, int], None]  # (items on this page, pages fetched so far)


@dataclass
class BranchOutcome:
    records: list[ProviderRecord]
    report: BranchReport


class Paginator:
    """Walks a branch page by page until a short page, a declared end, or the safety limit.

    Transient errors are retried with a fixed backoff. When retries run out the
    branch stops and keeps what it already has.
    """

    def __init__(self, max_pages: int = 100, max_attempts: int = 3, backoff_seconds: float = 0.5) -> None:
        self._max_pages = max_pages
        self._max_attempts = max_attempts
        self._backoff_seconds = backoff_seconds

    async def run(
        self,
        provider: Chain,
        branch: QueryBranch,
        endpoint: str = "",
        on_page: PageCallback | None = None,
    ) -> BranchOutcome:
        records: list[ProviderRecord] = []
        pages = 0
        offset = 0
        status = BranchStatus.TRUNCATED
        error: str | None = None

        while pages < self._max_pages:
            request = PageRequest(index=pages, offset=offset, limit=branch.page_size)
            try:
                page = await self._fetch_with_retry(branch, request)
            except (TransientProviderError, ProviderResponseError) as exc:
                logger.warning(
                    "%s/%s stopped at page %d after %d records: %s",
                    provider.value, branch.name, pages, len(records), exc,
                )
                status = BranchStatus.INCOMPLETE
                error = str(exc)
                break

            pages += 1
            records.extend(ProviderRecord(provider=provider, branch=branch.name, payload=item) for item in page.items)
            offset += len(page.items)
            logger.debug("%s/%s page %d: +%d (total %d)", provider.value, branch.name, pages, len(page.items), offset)
            if on_page is not None:
                on_page(len(page.items), pages)

            if self._is_last_page(page, offset, branch.page_size):
                status = BranchStatus.COMPLETE
                break
        else:
            logger.warning(
                "%s/%s hit the %d page safety limit, history may be truncated",
                provider.value, branch.name, self._max_pages,
            )

        report = BranchReport(
            name=branch.name,
            status=status,
            endpoint=endpoint,
            records=len(records),
            pages=pages,
            error=error,
        )
        return BranchOutcome(records=records, report=report)

    async def _fetch_with_retry(self, branch: QueryBranch, request: PageRequest) -> Page:
        retrying = AsyncRetrying(
            retry=retry_if_exception_type(TransientProviderError),
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_fixed(self._backoff_seconds),
            before_sleep=before_sleep_log(logger, logging.INFO),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                page = await branch.fetch_page(request)
        if not all(isinstance(item, dict) for item in page.items):
            raise ProviderResponseError(f"{branch.name} page {request.index} contains non-object items")
        return page

    @staticmethod
    def _is_last_page(page: Page, offset: int, page_size: int) -> bool:
        if len(page.items) < page_size:
            return True
        if page.has_more is False:
            return True
        return page.total is not None and offset >= page.total
