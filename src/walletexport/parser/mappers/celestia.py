"""Celenium ``/address/{a}/messages`` item -> CanonicalTransaction."""

import json
from typing import Any

from walletexport.domain.enums import Chain
from walletexport.domain.models import CanonicalTransaction, Coin, Event, Message
from walletexport.parser.mappers.cosmos import message_kind, parse_coin
from walletexport.parser.utils.timestamps import parse_iso
from walletexport.parser.utils.units import parse_raw_amount

NATIVE_DENOM = "utia"


def _field(data: dict[str, Any], *names: str) -> str:
    # Celenium mixes Go-style and snake_case keys
    for name in names:
        value = data.get(name)
        if value:
            return str(value)
    return ""


def map_celenium_message(payload: dict[str, Any]) -> CanonicalTransaction | None:
    tx = payload.get("tx") or {}
    tx_hash = tx.get("hash")
    if not tx_hash:
        return None

    data = payload.get("data") or {}
    message_type = payload.get("type") or "MsgSend"
    amounts = data.get("Amount") or data.get("amount") or []
    from_address = _field(data, "FromAddress", "from_address", "DelegatorAddress", "delegator_address")
    to_address = _field(data, "ToAddress", "to_address", "ValidatorAddress", "validator_address")
    sender = _field(data, "Sender", "sender")
    receiver = _field(data, "Receiver", "receiver")

    message = Message(
        kind=message_kind(message_type),
        type_url=message_type,
        from_address=from_address,
        to_address=to_address,
        sender=sender,
        receiver=receiver,
        amount=parse_coin(amounts),
    )
    event = Event.build(message_type, {
        "invocation_type": payload.get("invocation_type") or "",
        "from_address": from_address,
        "to_address": to_address,
        "sender": sender,
        "receiver": receiver,
        "message_type": message_type,
        "amount_data": json.dumps(amounts, sort_keys=True),
    })

    fee_amount = parse_raw_amount(tx.get("fee"))
    return CanonicalTransaction(
        hash=tx_hash,
        chain=Chain.CELESTIA,
        height=parse_raw_amount(payload.get("height")) or 0,
        timestamp=parse_iso(payload.get("time")),
        status_code=0 if tx.get("status") == "success" else 1,
        messages=(message,),
        events=(event,),
        fee=Coin(denom=NATIVE_DENOM, amount=fee_amount) if fee_amount else None,
        memo=tx.get("memo") or payload.get("memo") or "",
    )
