"""Fetch-session results handed to the caller."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict

from walletexport.domain.enums import BranchStatus, Chain
from walletexport.domain.models.transaction import CanonicalTransaction


class ProviderRecord(BaseModel):
    """Provider-native item tagged with where it came from. ``branch`` selects the mapper variant."""

    model_config = ConfigDict(frozen=True)

    provider: Chain
    branch: str
    payload: dict[str, Any]


class BranchReport(BaseModel):
    name: str
    status: BranchStatus
    endpoint: str = ""
    records: int = 0
    pages: int = 0
    error: str | None = None


class FetchMetadata(BaseModel):
    address: str
    chain: Chain
    total_fetched: int
    first_transaction_date: datetime | None = None
    last_transaction_date: datetime | None = None
    data_source: str
    dropped_count: int = 0
    complete: bool = True
    branches: list[BranchReport] = []


class FetchResult(BaseModel):
    transactions: list[CanonicalTransaction]
    metadata: FetchMetadata
