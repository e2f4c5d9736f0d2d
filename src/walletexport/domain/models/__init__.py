from walletexport.domain.models.chain import CHAIN_PROFILES, ChainProfile
from walletexport.domain.models.fetch import BranchReport, FetchMetadata, FetchResult, ProviderRecord
from walletexport.domain.models.token import TokenMetadata, TokenMetadataCache
from walletexport.domain.models.transaction import (
    CanonicalTransaction,
    Coin,
    Event,
    EventAttribute,
    Message,
    ParsedTransaction,
)

__all__ = [
    "CHAIN_PROFILES",
    "BranchReport",
    "CanonicalTransaction",
    "ChainProfile",
    "Coin",
    "Event",
    "EventAttribute",
    "FetchMetadata",
    "FetchResult",
    "Message",
    "ParsedTransaction",
    "ProviderRecord",
    "TokenMetadata",
    "TokenMetadataCache",
]
