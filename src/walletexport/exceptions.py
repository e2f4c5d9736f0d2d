"""Exception taxonomy for the export pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from walletexport.domain.models.fetch import BranchReport


class WalletExportError(Exception):
    """Base class for all pipeline errors."""


class ValidationError(WalletExportError):
    """Malformed wallet address. Raised before any network call."""

    def __init__(self, chain: str, address: str) -> None:
        super().__init__(f"Invalid {chain} address: {address!r}")
        self.chain = chain
        self.address = address


class UnsupportedChainError(WalletExportError):
    def __init__(self, chain: str) -> None:
        super().__init__(f"Unsupported chain: {chain}")
        self.chain = chain


class TransientProviderError(WalletExportError):
    """Network failure, 5xx, 429 or a provider rate-limit body. Retried."""


class ProviderResponseError(WalletExportError):
    """Non-retryable provider answer (4xx, unexpected body). Ends the branch."""


class MalformedRecordError(WalletExportError):
    """A single provider record cannot be mapped. The record is dropped."""


class ExhaustedFetchError(WalletExportError):
    """Every branch failed and nothing was fetched."""

    def __init__(self, chain: str, address: str, branches: list[BranchReport]) -> None:
        errors = "; ".join(f"{b.name}: {b.error}" for b in branches if b.error)
        super().__init__(f"Could not fetch {chain} history for {address} ({errors or 'no data'})")
        self.chain = chain
        self.address = address
        self.branches = branches
