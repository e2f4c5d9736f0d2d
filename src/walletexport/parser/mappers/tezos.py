"""TzKT operations and token transfers -> CanonicalTransaction."""

from typing import Any

from walletexport.domain.enums import Chain, MessageKind
from walletexport.domain.models import CanonicalTransaction, Coin, Event, Message, TokenMetadataCache
from walletexport.parser.utils.timestamps import parse_iso
from walletexport.parser.utils.transfers import QUOTE, token_transfer_event
from walletexport.parser.utils.units import parse_raw_amount

NATIVE_DENOM = "microtez"


def _address(value: Any) -> str:
    if isinstance(value, dict):
        return value.get("address") or ""
    return value or ""


def _fee_microtez(op: dict[str, Any]) -> int:
    # Baker fee plus the storage and allocation burns the sender also pays
    return sum(parse_raw_amount(op.get(k)) or 0 for k in ("bakerFee", "storageFee", "allocationFee"))


def map_tzkt_operation(op: dict[str, Any]) -> CanonicalTransaction | None:
    """``/operations/transactions`` item. Amounts are in microtez."""
    op_hash = op.get("hash")
    if not op_hash:
        return None

    amount = parse_raw_amount(op.get("amount")) or 0
    entrypoint = (op.get("parameter") or {}).get("entrypoint") or ""
    events: list[Event] = []
    usd_price = (op.get("quote") or {}).get("usd")
    if usd_price is not None:
        events.append(Event.build(QUOTE, {"usd_price": usd_price}))

    fee = _fee_microtez(op)
    return CanonicalTransaction(
        hash=op_hash,
        chain=Chain.TEZOS,
        height=parse_raw_amount(op.get("level")) or 0,
        timestamp=parse_iso(op.get("timestamp")),
        status_code=0 if op.get("status", "applied") == "applied" else 1,
        messages=(Message(
            kind=MessageKind.CONTRACT_CALL if entrypoint and not amount else MessageKind.SEND,
            type_url=entrypoint or "transaction",
            from_address=_address(op.get("sender")),
            to_address=_address(op.get("target")),
            amount=Coin(denom=NATIVE_DENOM, amount=amount),
        ),),
        events=tuple(events),
        fee=Coin(denom=NATIVE_DENOM, amount=fee) if fee else None,
        memo=f"Entrypoint: {entrypoint}" if entrypoint else "",
    )


def map_tzkt_token_transfer(item: dict[str, Any], cache: TokenMetadataCache) -> CanonicalTransaction | None:
    """``/tokens/transfers`` item. TzKT ids are unique per transfer, not per operation."""
    transfer_id = item.get("id")
    token = item.get("token") or {}
    contract = _address(token.get("contract"))
    if transfer_id is None or not contract:
        return None

    metadata = token.get("metadata") or {}
    meta = cache.resolve(
        contract,
        symbol=metadata.get("symbol"),
        name=metadata.get("name"),
        decimals=metadata.get("decimals"),
        default_decimals=0,
    )
    from_address = _address(item.get("from"))
    to_address = _address(item.get("to"))
    return CanonicalTransaction(
        hash=str(transfer_id),
        chain=Chain.TEZOS,
        height=parse_raw_amount(item.get("level")) or 0,
        timestamp=parse_iso(item.get("timestamp")),
        messages=(Message(
            kind=MessageKind.SEND,
            type_url="token_transfer",
            from_address=from_address,
            to_address=to_address,
        ),),
        events=(token_transfer_event(
            contract, from_address, to_address, item.get("amount") or "0", meta, token.get("standard"),
        ),),
        memo=f"Token transfer: {meta.symbol}",
    )
