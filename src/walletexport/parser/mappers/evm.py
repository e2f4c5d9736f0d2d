"""Etherscan-style explorer rows (``txlist`` + ``tokentx``) -> CanonicalTransaction."""

from typing import Any

from walletexport.domain.enums import Chain, MessageKind
from walletexport.domain.models import CanonicalTransaction, ChainProfile, Coin, Event, Message, TokenMetadataCache
from walletexport.exceptions import MalformedRecordError
from walletexport.parser.utils.gas import etherscan_fee_wei
from walletexport.parser.utils.timestamps import from_unix
from walletexport.parser.utils.transfers import token_transfer_event
from walletexport.parser.utils.units import parse_raw_amount

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


def erc20_events(token_txs: list[dict[str, Any]], profile: ChainProfile, cache: TokenMetadataCache) -> list[Event]:
    """One ``token_transfer`` event per ``tokentx`` row, symbols resolved through the session cache."""
    events = []
    for ttx in token_txs:
        if not isinstance(ttx, dict):
            raise MalformedRecordError(f"token transfer row is {type(ttx).__name__}, expected an object")
        contract = (ttx.get("contractAddress") or "").lower()
        meta = cache.resolve(
            contract,
            symbol=ttx.get("tokenSymbol"),
            name=ttx.get("tokenName"),
            decimals=ttx.get("tokenDecimal"),
            default_decimals=profile.native_decimals,
        )
        events.append(token_transfer_event(
            contract,
            (ttx.get("from") or "").lower(),
            (ttx.get("to") or "").lower(),
            ttx.get("value") or "0",
            meta,
        ))
    return events


def _memo(tx_data: dict[str, Any]) -> str:
    data = tx_data.get("input") or ""
    if not data or data == "0x":
        return ""
    function_name = (tx_data.get("functionName") or "").split("(", 1)[0]
    return f"Method: {function_name or tx_data.get('methodId') or data[:10]}"


def _status_code(tx_data: dict[str, Any]) -> int:
    if tx_data.get("isError") == "1" or tx_data.get("txreceipt_status") == "0":
        return 1
    return 0


def map_etherscan_tx(
    tx_data: dict[str, Any], chain: Chain, profile: ChainProfile, cache: TokenMetadataCache,
) -> CanonicalTransaction | None:
    """Normal transaction, enriched with its ``token_transfers`` when the adapter joined them."""
    tx_hash = tx_data.get("hash")
    if not tx_hash:
        return None

    value = parse_raw_amount(tx_data.get("value")) or 0
    fee = etherscan_fee_wei(tx_data)
    memo = _memo(tx_data)
    message = Message(
        kind=MessageKind.CONTRACT_CALL if memo and not value else MessageKind.SEND,
        type_url=tx_data.get("functionName") or "transfer",
        from_address=(tx_data.get("from") or "").lower(),
        to_address=(tx_data.get("to") or tx_data.get("contractAddress") or ZERO_ADDRESS).lower(),
        amount=Coin(denom="wei", amount=value),
    )
    return CanonicalTransaction(
        hash=tx_hash,
        chain=chain,
        height=parse_raw_amount(tx_data.get("blockNumber")) or 0,
        timestamp=from_unix(tx_data.get("timeStamp")),
        status_code=_status_code(tx_data),
        messages=(message,),
        events=tuple(erc20_events(tx_data.get("token_transfers") or [], profile, cache)),
        fee=Coin(denom="wei", amount=fee) if fee else None,
        memo=memo,
    )


def map_token_only_tx(
    payload: dict[str, Any], chain: Chain, profile: ChainProfile, cache: TokenMetadataCache,
) -> CanonicalTransaction | None:
    """Token transfers whose parent transaction was not in ``txlist`` (sent by someone else)."""
    transfers = payload.get("token_transfers") or []
    tx_hash = payload.get("hash")
    if not tx_hash or not transfers:
        return None
    events = erc20_events(transfers, profile, cache)
    first = transfers[0]
    message = Message(
        kind=MessageKind.SEND,
        type_url="tokentx",
        from_address=(first.get("from") or "").lower(),
        to_address=(first.get("to") or "").lower(),
    )
    return CanonicalTransaction(
        hash=tx_hash,
        chain=chain,
        height=parse_raw_amount(first.get("blockNumber")) or 0,
        timestamp=from_unix(first.get("timeStamp")),
        status_code=0,
        messages=(message,),
        events=tuple(events),
        memo="Token transfer",
    )
