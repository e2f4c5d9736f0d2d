"""Token metadata and the per-session symbol cache."""

import logging
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

_UNUSABLE_SYMBOLS = {"", "null", "undefined", "none"}


class TokenMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    symbol: str
    decimals: int
    name: str = ""


class TokenMetadataCache:
    """Contract-keyed metadata, populated on first observation and never overwritten.

    One instance lives for one fetch session so that a contract resolves to the same
    symbol across every transaction of that session. Keys are lower-cased.
    """

    def __init__(self, known: Mapping[str, TokenMetadata] | None = None) -> None:
        self._entries: dict[str, TokenMetadata] = {}
        if known:
            self.seed(known)

    def seed(self, known: Mapping[str, TokenMetadata]) -> None:
        """Pre-populate from a known-token table. Existing entries are kept."""
        for contract, meta in known.items():
            self._entries.setdefault(contract.lower(), meta)

    def get(self, contract: str) -> TokenMetadata | None:
        return self._entries.get(contract.lower())

    def resolve(
        self,
        contract: str,
        symbol: str | None = None,
        name: str | None = None,
        decimals: int | str | None = None,
        default_decimals: int = 18,
    ) -> TokenMetadata:
        """Return cached metadata for ``contract``, caching the provider's values on first sight."""
        key = (contract or "").lower()
        cached = self._entries.get(key)
        if cached is not None:
            return cached

        clean_symbol = (symbol or "").strip()
        if clean_symbol.lower() in _UNUSABLE_SYMBOLS:
            clean_symbol = key[:10]  # short contract prefix keeps the token traceable
        meta = TokenMetadata(
            symbol=clean_symbol,
            decimals=_parse_decimals(decimals, default_decimals),
            name=(name or "").strip() or clean_symbol,
        )
        self._entries[key] = meta
        logger.debug("Cached token %s -> %s (%d decimals)", key, meta.symbol, meta.decimals)
        return meta

    def contracts(self) -> list[str]:
        """Cached contract keys in population order."""
        return list(self._entries)

    def __contains__(self, contract: object) -> bool:
        return isinstance(contract, str) and contract.lower() in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def _parse_decimals(value: int | str | None, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed >= 0 else default
