"""Provider adapter interface and the pagination vocabulary adapters speak."""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from walletexport.domain.enums import Chain
from walletexport.domain.models import (
    CanonicalTransaction,
    ChainProfile,
    ProviderRecord,
    TokenMetadata,
    TokenMetadataCache,
)


@dataclass(frozen=True)
class PageRequest:
    index: int  # 0-based page number
    offset: int  # items already consumed on this branch
    limit: int


@dataclass
class Page:
    items: list[dict[str, Any]] = field(default_factory=list)
    total: int | None = None  # provider-declared total for the branch, if any
    has_more: bool | None = None  # provider-declared continuation flag, if any


FetchPage = Callable[[PageRequest], Awaitable[Page]]


@dataclass(frozen=True)
class QueryBranch:
    """One independent query shape for an address (e.g. "as sender")."""

    name: str
    fetch_page: FetchPage
    page_size: int


class ChainAdapter(ABC):
    """Strategy interface for one chain's data provider.

    Implementations own their HTTP shape and their record mapping; they only
    emit CanonicalTransaction.
    """

    CHAIN: Chain
    PROFILE: ChainProfile
    DATA_SOURCE: str
    KNOWN_TOKENS: Mapping[str, TokenMetadata] = {}

    @abstractmethod
    def is_valid_address(self, address: str) -> bool:
        """Pure address grammar check."""

    @abstractmethod
    def endpoints(self) -> list[str]:
        """Base URLs to try in order; the first that yields records wins."""

    @abstractmethod
    def branches(self, address: str, endpoint: str) -> list[QueryBranch]:
        """Query branches for ``address`` against ``endpoint``, in declaration order."""

    @abstractmethod
    def to_canonical(self, record: ProviderRecord, cache: TokenMetadataCache) -> CanonicalTransaction | None:
        """Map one record. None when it has no usable identity."""

    def prepare_batches(self, batches: dict[str, list[ProviderRecord]]) -> list[list[ProviderRecord]]:
        """Hook to join records across branches before mapping. Default: one batch per branch."""
        return list(batches.values())
