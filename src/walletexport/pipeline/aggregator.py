"""Merge canonical batches into one hash-unique, newest-first list."""

import logging
from collections.abc import Iterable
from datetime import UTC, datetime

from walletexport.domain.models import CanonicalTransaction

logger = logging.getLogger(__name__)


def merge(
    batches: Iterable[Iterable[CanonicalTransaction]],
    fetched_at: datetime | None = None,
) -> list[CanonicalTransaction]:
    """Deduplicate by hash and sort by timestamp, newest first.

    Batches are consumed in the given order and a later instance of a hash
    replaces an earlier one. Transactions without a timestamp get ``fetched_at``
    (default: now) and are kept. Ties keep first-seen order.
    """
    fetched_at = fetched_at or datetime.now(UTC)
    by_hash: dict[str, CanonicalTransaction] = {}
    seen = 0
    for batch in batches:
        for tx in batch:
            seen += 1
            if tx.timestamp is None:
                tx = tx.model_copy(update={"timestamp": fetched_at})
            by_hash[tx.hash] = tx

    merged = sorted(by_hash.values(), key=lambda t: t.timestamp, reverse=True)
    if seen != len(merged):
        logger.debug("Merged %d transactions into %d unique", seen, len(merged))
    return merged
