"""Pikespeak account transaction -> CanonicalTransaction."""

from typing import Any

from walletexport.domain.enums import Chain, MessageKind
from walletexport.domain.models import CanonicalTransaction, Coin, Event, Message, TokenMetadataCache
from walletexport.parser.utils.timestamps import from_unix, parse_iso
from walletexport.parser.utils.transfers import token_transfer_event
from walletexport.parser.utils.units import parse_raw_amount

NATIVE_DENOM = "yoctonear"
NEP141_DECIMALS = 24

# Checked in order: "unstake" must win over "stake", "ft_transfer" over "transfer"
_KIND_BY_METHOD: tuple[tuple[str, MessageKind], ...] = (
    ("ft_transfer", MessageKind.SEND),
    ("storage_deposit", MessageKind.CONTRACT_CALL),
    ("swap", MessageKind.SWAP),
    ("unstake", MessageKind.UNDELEGATE),
    ("stake", MessageKind.DELEGATE),
    ("claim", MessageKind.CLAIM_REWARDS),
    ("harvest", MessageKind.CLAIM_REWARDS),
    ("remove_liquidity", MessageKind.POOL_EXIT),
    ("withdraw", MessageKind.POOL_EXIT),
    ("add_liquidity", MessageKind.POOL_JOIN),
    ("deposit", MessageKind.POOL_JOIN),
    ("transfer", MessageKind.SEND),
)


def method_kind(method_name: str) -> MessageKind:
    if not method_name:
        return MessageKind.SEND
    lowered = method_name.lower()
    for fragment, kind in _KIND_BY_METHOD:
        if fragment in lowered:
            return kind
    return MessageKind.CONTRACT_CALL


def _first_action(tx: dict[str, Any]) -> dict[str, Any]:
    actions = tx.get("actions") or []
    return actions[0] if actions and isinstance(actions[0], dict) else {}


def _succeeded(status: Any) -> bool:
    if isinstance(status, bool):
        return status
    if isinstance(status, dict):
        return "SuccessValue" in status or "SuccessReceiptId" in status
    return status in (None, "success", "SUCCESS")


def _timestamp(value: Any):
    # Block timestamps are nanoseconds since epoch; some views return ISO strings
    if isinstance(value, str) and not value.strip().isdigit():
        return parse_iso(value)
    return from_unix(value, unit="ns")


def map_pikespeak_tx(tx: dict[str, Any], cache: TokenMetadataCache) -> CanonicalTransaction | None:
    tx_id = tx.get("receipt_id") or tx.get("transaction_hash") or tx.get("id")
    if not tx_id:
        return None

    action = _first_action(tx)
    method_name = tx.get("method_name") or action.get("method_name") or ""
    args = tx.get("args_json") or action.get("args_json") or {}
    if not isinstance(args, dict):
        args = {}
    from_address = tx.get("predecessor_account_id") or tx.get("signer_account_id") or ""
    receiver = tx.get("receiver_account_id") or ""

    events: list[Event] = []
    amount = 0
    if "ft_transfer" in method_name.lower():
        # NEP-141: the receipt receiver is the token contract, the beneficiary is in args
        meta = cache.resolve(receiver, symbol=tx.get("token_symbol"), default_decimals=NEP141_DECIMALS)
        events.append(token_transfer_event(
            receiver, from_address, args.get("receiver_id") or "", args.get("amount") or "0", meta, "nep141",
        ))
    else:
        amount = parse_raw_amount(args.get("amount")) or parse_raw_amount((action.get("args") or {}).get("deposit")) or 0
    events.extend(Event.build("log", {"message": line}) for line in tx.get("logs") or [] if line)

    fee = parse_raw_amount(tx.get("tokens_burnt")) or 0
    return CanonicalTransaction(
        hash=str(tx_id),
        chain=Chain.NEAR,
        height=parse_raw_amount(tx.get("block_height")) or 0,
        timestamp=_timestamp(tx.get("block_timestamp")),
        status_code=0 if _succeeded(tx.get("status")) else 1,
        messages=(Message(
            kind=method_kind(method_name),
            type_url=method_name or "transfer",
            from_address=from_address,
            to_address=receiver,
            amount=Coin(denom=NATIVE_DENOM, amount=amount),
        ),),
        events=tuple(events),
        fee=Coin(denom=NATIVE_DENOM, amount=fee) if fee else None,
        memo=f"Method: {method_name}" if method_name else "",
    )
