"""Cosmos SDK ``tx_response`` -> CanonicalTransaction (Osmosis LCD)."""

import logging
import re
from typing import Any

from walletexport.domain.enums import Chain, MessageKind
from walletexport.domain.models import (
    CanonicalTransaction,
    ChainProfile,
    Coin,
    Event,
    EventAttribute,
    Message,
    TokenMetadataCache,
)
from walletexport.exceptions import MalformedRecordError
from walletexport.parser.utils.timestamps import parse_iso
from walletexport.parser.utils.transfers import token_transfer_event
from walletexport.parser.utils.units import denom_decimals, denom_to_symbol, parse_raw_amount

logger = logging.getLogger(__name__)

# Exact message names (last segment of @type)
_KIND_BY_NAME: dict[str, MessageKind] = {
    "MsgSend": MessageKind.SEND,
    "MsgMultiSend": MessageKind.SEND,
    "MsgTransfer": MessageKind.IBC_TRANSFER,
    "MsgDelegate": MessageKind.DELEGATE,
    "MsgBeginRedelegate": MessageKind.DELEGATE,
    "MsgUndelegate": MessageKind.UNDELEGATE,
    "MsgBeginUnbonding": MessageKind.UNDELEGATE,
    "MsgWithdrawDelegatorReward": MessageKind.CLAIM_REWARDS,
    "MsgVote": MessageKind.VOTE,
    "MsgVoteWeighted": MessageKind.VOTE,
    "MsgExecuteContract": MessageKind.CONTRACT_CALL,
}

# Osmosis pool/swap message families, matched by substring
_KIND_BY_FRAGMENT: tuple[tuple[str, MessageKind], ...] = (
    ("SwapExactAmount", MessageKind.SWAP),
    ("MsgSwap", MessageKind.SWAP),
    ("JoinSwap", MessageKind.POOL_JOIN),
    ("JoinPool", MessageKind.POOL_JOIN),
    ("ExitSwap", MessageKind.POOL_EXIT),
    ("ExitPool", MessageKind.POOL_EXIT),
)

_COIN = re.compile(r"^(\d+)([a-zA-Z][a-zA-Z0-9/:._-]*)$")


def message_kind(type_url: str) -> MessageKind:
    """Canonical kind for a Cosmos message type URL (``/pkg.v1.MsgName``) or bare name."""
    name = type_url.rsplit(".", 1)[-1]
    if name in _KIND_BY_NAME:
        return _KIND_BY_NAME[name]
    for fragment, kind in _KIND_BY_FRAGMENT:
        if fragment in name:
            return kind
    return MessageKind.UNKNOWN


def parse_coin(raw: Any) -> Coin | None:
    """A ``{denom, amount}`` dict, a list of them (first wins) or a ``"123uosmo"`` string."""
    if isinstance(raw, list):
        raw = raw[0] if raw else None
    if isinstance(raw, str):
        match = _COIN.match(raw.split(",")[0].strip())
        if match is None:
            return None
        return Coin(amount=int(match.group(1)), denom=match.group(2))
    if isinstance(raw, dict):
        amount = parse_raw_amount(raw.get("amount"))
        denom = raw.get("denom") or ""
        if amount is None or not denom:
            return None
        return Coin(denom=denom, amount=amount)
    return None


def map_cosmos_message(raw: dict[str, Any]) -> Message:
    type_url = raw.get("@type", "")
    amount = None
    for field in ("amount", "token", "token_in", "tokens"):
        if raw.get(field):
            amount = parse_coin(raw[field])
            if amount is not None:
                break
    return Message(
        kind=message_kind(type_url),
        type_url=type_url,
        from_address=raw.get("from_address") or raw.get("delegator_address") or raw.get("voter") or "",
        to_address=raw.get("to_address") or raw.get("validator_address") or raw.get("validator_dst_address") or "",
        sender=raw.get("sender") or raw.get("owner") or "",
        receiver=raw.get("receiver") or "",
        amount=amount,
    )


def map_cosmos_events(raw_events: list[dict[str, Any]]) -> list[Event]:
    events = []
    for raw in raw_events:
        attrs = tuple(
            EventAttribute(key=str(a.get("key", "")), value=str(a.get("value") or ""))
            for a in raw.get("attributes") or []
        )
        events.append(Event(type=raw.get("type", ""), attributes=attrs))
    return events


def swap_transfer_events(
    events: list[Event], profile: ChainProfile, cache: TokenMetadataCache,
) -> list[Event]:
    """Net ``token_swapped`` hops into one outgoing and one incoming token transfer.

    A multi-hop route emits one event per hop; the intermediate assets cancel out,
    so only the first hop's input and the last hop's output are kept.
    """
    swaps = [e for e in events if e.type == "token_swapped"]
    if not swaps:
        return []
    first, last = swaps[0], swaps[-1]
    sender = first.get("sender")
    pool = f"pool:{first.get('pool_id')}" if first.get("pool_id") else "pool"
    synthesized = []
    for coin_text, from_address, to_address in (
        (first.get("tokens_in"), sender, pool),
        (last.get("tokens_out"), pool, last.get("sender") or sender),
    ):
        coin = parse_coin(coin_text)
        if coin is None:
            continue
        meta = cache.resolve(
            coin.denom,
            symbol=denom_to_symbol(coin.denom, profile),
            decimals=denom_decimals(coin.denom, profile.native_decimals),
        )
        synthesized.append(token_transfer_event(coin.denom, from_address, to_address, coin.amount, meta, "denom"))
    return synthesized


def map_cosmos_tx(
    payload: dict[str, Any], chain: Chain, profile: ChainProfile, cache: TokenMetadataCache,
) -> CanonicalTransaction | None:
    tx_hash = payload.get("txhash")
    if not tx_hash:
        return None

    tx = payload.get("tx") or {}
    if not isinstance(tx, dict):
        raise MalformedRecordError(f"{tx_hash}: tx is {type(tx).__name__}, expected an object")
    body = tx.get("body") or {}
    auth_info = tx.get("auth_info") or {}
    messages = [map_cosmos_message(m) for m in body.get("messages") or [] if isinstance(m, dict)]

    # Pre-0.46 nodes nest events under logs; newer ones flatten them on the response
    raw_events: list[dict[str, Any]] = []
    for log in payload.get("logs") or []:
        raw_events.extend(log.get("events") or [])
    if not raw_events:
        raw_events = payload.get("events") or []
    events = map_cosmos_events(raw_events)
    events.extend(swap_transfer_events(events, profile, cache))

    return CanonicalTransaction(
        hash=tx_hash,
        chain=chain,
        height=parse_raw_amount(payload.get("height")) or 0,
        timestamp=parse_iso(payload.get("timestamp")),
        status_code=parse_raw_amount(payload.get("code")) or 0,
        messages=tuple(messages) or (Message(),),
        events=tuple(events),
        fee=parse_coin((auth_info.get("fee") or {}).get("amount")),
        memo=body.get("memo") or "",
    )
