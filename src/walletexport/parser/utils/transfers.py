"""Token transfers carried as ``token_transfer`` events on canonical transactions."""

from pydantic import BaseModel

from walletexport.domain.models import CanonicalTransaction, Event, TokenMetadata
from walletexport.parser.utils.units import format_units, parse_raw_amount

TOKEN_TRANSFER = "token_transfer"
QUOTE = "quote"


class RawTransfer(BaseModel):
    """A single token transfer decoded from a transaction (before display scaling)."""

    contract: str
    from_address: str
    to_address: str
    value: int  # smallest unit
    decimals: int = 18
    symbol: str = "UNKNOWN"

    @property
    def display_amount(self) -> str:
        return format_units(self.value, self.decimals)

    def is_from(self, wallet: str) -> bool:
        return self.from_address.lower() == wallet.lower()

    def is_to(self, wallet: str) -> bool:
        return self.to_address.lower() == wallet.lower()


def token_transfer_event(
    contract: str,
    from_address: str,
    to_address: str,
    value: int | str,
    meta: TokenMetadata,
    token_type: str | None = None,
) -> Event:
    """Synthesize the uniform ``token_transfer`` event the classifier reads."""
    return Event.build(TOKEN_TRANSFER, {
        "contract": contract,
        "symbol": meta.symbol,
        "name": meta.name,
        "decimals": meta.decimals,
        "value": value,
        "from": from_address,
        "to": to_address,
        "token_type": token_type,
    })


def extract_token_transfers(tx: CanonicalTransaction, default_decimals: int = 18) -> list[RawTransfer]:
    """Decode every ``token_transfer`` event. Events with a non-integer value are skipped."""
    transfers: list[RawTransfer] = []
    for event in tx.events_of_type(TOKEN_TRANSFER):
        value = parse_raw_amount(event.get("value"))
        if value is None:
            continue
        decimals = parse_raw_amount(event.get("decimals"))
        if decimals is None or decimals < 0:
            decimals = default_decimals
        contract = event.get("contract")
        transfers.append(RawTransfer(
            contract=contract,
            from_address=event.get("from"),
            to_address=event.get("to"),
            value=value,
            decimals=decimals,
            symbol=event.get("symbol") or contract[:10] or "UNKNOWN",
        ))
    return transfers
