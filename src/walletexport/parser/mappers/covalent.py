"""Covalent GoldRush ``transactions_v3`` item -> CanonicalTransaction."""

from typing import Any

from walletexport.domain.enums import Chain, MessageKind
from walletexport.domain.models import CanonicalTransaction, ChainProfile, Coin, Event, Message, TokenMetadataCache
from walletexport.exceptions import MalformedRecordError
from walletexport.parser.utils.gas import covalent_fee_wei
from walletexport.parser.utils.timestamps import parse_iso
from walletexport.parser.utils.transfers import QUOTE, token_transfer_event
from walletexport.parser.utils.units import parse_raw_amount


def _decoded_params(decoded: dict[str, Any]) -> dict[str, str]:
    return {
        str(p.get("name")): str(p.get("value") or "")
        for p in decoded.get("params") or []
        if isinstance(p, dict)
    }


def log_transfer_events(
    log_events: list[dict[str, Any]], profile: ChainProfile, cache: TokenMetadataCache,
) -> list[Event]:
    """Decoded ``Transfer(from, to, value)`` logs as ``token_transfer`` events, in log order."""
    events = []
    for log in log_events:
        if not isinstance(log, dict):
            raise MalformedRecordError(f"log event is {type(log).__name__}, expected an object")
        decoded = log.get("decoded") or {}
        if decoded.get("name") != "Transfer":
            continue
        params = _decoded_params(decoded)
        if parse_raw_amount(params.get("value")) is None:
            continue  # ERC-721 Transfer carries tokenId, not value
        contract = (log.get("sender_address") or "").lower()
        meta = cache.resolve(
            contract,
            symbol=log.get("sender_contract_ticker_symbol"),
            name=log.get("sender_name") or log.get("sender_contract_label"),
            decimals=log.get("sender_contract_decimals"),
            default_decimals=profile.native_decimals,
        )
        events.append(token_transfer_event(
            contract,
            params.get("from", "").lower(),
            params.get("to", "").lower(),
            params["value"],
            meta,
        ))
    return events


def map_covalent_tx(
    item: dict[str, Any], chain: Chain, profile: ChainProfile, cache: TokenMetadataCache,
) -> CanonicalTransaction | None:
    tx_hash = item.get("tx_hash")
    if not tx_hash:
        return None

    value = parse_raw_amount(item.get("value")) or 0
    log_events = item.get("log_events") or []
    if not isinstance(log_events, list):
        raise MalformedRecordError(f"{tx_hash}: log_events is not a list")
    events = log_transfer_events(log_events, profile, cache)
    if item.get("value_quote") is not None:
        events.append(Event.build(QUOTE, {"usd_value": item["value_quote"]}))

    fee = covalent_fee_wei(item)
    data = item.get("input") or ""
    return CanonicalTransaction(
        hash=tx_hash,
        chain=chain,
        height=parse_raw_amount(item.get("block_height")) or 0,
        timestamp=parse_iso(item.get("block_signed_at")),
        status_code=1 if item.get("successful") is False else 0,
        messages=(Message(
            kind=MessageKind.SEND,
            type_url="transfer",
            from_address=(item.get("from_address") or "").lower(),
            to_address=(item.get("to_address") or "").lower(),
            amount=Coin(denom="wei", amount=value),
        ),),
        events=tuple(events),
        fee=Coin(denom="wei", amount=fee) if fee else None,
        memo=f"Input: {data[:20]}..." if data and data != "0x" else "",
    )
