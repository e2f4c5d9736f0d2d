"""Wallet-relative classification of canonical transactions.

Rules, in order:
1. Direction from the first message (case-insensitive): wallet on the source side
   is ``send`` (including self-transfers), on the destination side ``receive``.
   With the wallet on neither side, an ``invocation_type`` event attribute decides;
   without one the default is ``receive``.
2. The first message's coin is the native primary amount.
3. Token transfers: one out plus one in of a different contract is a ``swap``
   (sent = primary, received = secondary). A lone transfer is primary only when no
   native amount was assigned, otherwise secondary.
4. Message kinds with unambiguous intent (staking, rewards, votes, pools, swaps,
   IBC) override the type last.
"""

import logging
from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation

from walletexport.domain.enums import MessageKind, TransactionType, TxStatus
from walletexport.domain.models import CanonicalTransaction, ChainProfile, Coin, Message, ParsedTransaction
from walletexport.parser.utils.transfers import QUOTE, RawTransfer, extract_token_transfers
from walletexport.parser.utils.units import denom_decimals, denom_to_symbol, format_units

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=UTC)
CENTS = Decimal("0.01")

INVOCATION_TYPES: dict[str, TransactionType] = {
    "fromAddress": TransactionType.SEND,
    "sender": TransactionType.SEND,
    "toAddress": TransactionType.RECEIVE,
    "receiver": TransactionType.RECEIVE,
    "validatorDst": TransactionType.RECEIVE,
    "delegator": TransactionType.DELEGATE,
    "validatorSrc": TransactionType.UNDELEGATE,
}

KIND_OVERRIDES: dict[MessageKind, TransactionType] = {
    MessageKind.DELEGATE: TransactionType.DELEGATE,
    MessageKind.UNDELEGATE: TransactionType.UNDELEGATE,
    MessageKind.CLAIM_REWARDS: TransactionType.CLAIM_REWARDS,
    MessageKind.VOTE: TransactionType.GOVERNANCE_VOTE,
    MessageKind.POOL_JOIN: TransactionType.POOL_DEPOSIT,
    MessageKind.POOL_EXIT: TransactionType.POOL_WITHDRAW,
    MessageKind.SWAP: TransactionType.SWAP,
    MessageKind.IBC_TRANSFER: TransactionType.IBC_TRANSFER,
}


def classify(tx: CanonicalTransaction, wallet: str, profile: ChainProfile) -> ParsedTransaction:
    message = tx.messages[0] if tx.messages else Message()
    from_address = message.source()
    to_address = message.destination()
    tx_type = _direction(tx, wallet, from_address, to_address)

    amount = currency = amount2 = currency2 = ""
    native = _coin_display(message.amount, profile)
    if native is not None:
        amount, currency = native

    transfers = extract_token_transfers(tx, profile.native_decimals)
    relevant = [t for t in transfers if t.is_from(wallet) or t.is_to(wallet)] or transfers
    outgoing = next((t for t in relevant if t.is_from(wallet)), None)
    incoming = next((t for t in relevant if t.is_to(wallet) and not _same_asset(t, outgoing)), None)
    swapped = outgoing is not None and incoming is not None
    if swapped:
        tx_type = TransactionType.SWAP
        amount, currency = outgoing.display_amount, outgoing.symbol
        amount2, currency2 = incoming.display_amount, incoming.symbol
    elif relevant:
        transfer = relevant[0]
        if native is None:
            amount, currency = transfer.display_amount, transfer.symbol
            from_address, to_address = transfer.from_address, transfer.to_address
            tx_type = _transfer_direction(transfer, wallet, tx_type)
        else:
            amount2, currency2 = transfer.display_amount, transfer.symbol

    for msg in tx.messages:
        if msg.kind in KIND_OVERRIDES:
            tx_type = KIND_OVERRIDES[msg.kind]
            break

    fee, fee_currency = _coin_display(tx.fee, profile) or ("", "")
    fiat = _fiat_amount(tx, native[0]) if native is not None and not swapped else ""

    return ParsedTransaction(
        hash=tx.hash,
        chain=tx.chain,
        timestamp=tx.timestamp or EPOCH,
        height=tx.height,
        type=tx_type,
        from_address=from_address,
        to_address=to_address,
        amount=amount,
        currency=currency,
        amount2=amount2,
        currency2=currency2,
        fee=fee,
        fee_currency=fee_currency,
        fiat_amount=fiat,
        memo=tx.memo,
        notes=build_notes(
            tx.hash, tx_type, from_address, to_address, tx.memo, [(amount, currency), (amount2, currency2)],
        ),
        status=TxStatus.SUCCESS if tx.succeeded else TxStatus.FAILED,
    )


def _direction(tx: CanonicalTransaction, wallet: str, from_address: str, to_address: str) -> TransactionType:
    wallet = wallet.lower()
    if from_address and from_address.lower() == wallet:
        return TransactionType.SEND  # self-transfers resolve to send
    if to_address and to_address.lower() == wallet:
        return TransactionType.RECEIVE
    for event in tx.events:
        invocation = event.get("invocation_type")
        if invocation in INVOCATION_TYPES:
            return INVOCATION_TYPES[invocation]
    return TransactionType.RECEIVE


def _same_asset(transfer: RawTransfer, other: RawTransfer | None) -> bool:
    return other is not None and transfer.contract.lower() == other.contract.lower()


def _transfer_direction(transfer: RawTransfer, wallet: str, current: TransactionType) -> TransactionType:
    if transfer.is_from(wallet):
        return TransactionType.SEND
    if transfer.is_to(wallet):
        return TransactionType.RECEIVE
    return current


def _coin_display(coin: Coin | None, profile: ChainProfile) -> tuple[str, str] | None:
    """(display amount, symbol) for a non-zero coin, else None."""
    if coin is None or coin.amount == 0:
        return None
    if profile.is_native(coin.denom):
        decimals = profile.native_decimals
    else:
        decimals = denom_decimals(coin.denom, profile.native_decimals)
    return format_units(coin.amount, decimals), denom_to_symbol(coin.denom, profile)


def _fiat_amount(tx: CanonicalTransaction, native_amount: str) -> str:
    """USD value from a provider quote: an explicit value, or a unit price times the native amount."""
    for event in tx.events_of_type(QUOTE):
        try:
            if event.get("usd_value"):
                value = Decimal(event.get("usd_value"))
            elif event.get("usd_price") and native_amount:
                value = Decimal(event.get("usd_price")) * Decimal(native_amount)
            else:
                continue
            if not value.is_finite():
                continue
            return str(value.quantize(CENTS))
        except InvalidOperation:
            # Unparsable, or too large to carry cents at context precision
            logger.debug("Ignoring unusable quote on %s", tx.hash)
    return ""


def _short(address: str) -> str:
    if not address:
        return "?"
    return f"{address[:8]}..." if len(address) > 8 else address


def build_notes(
    tx_hash: str,
    tx_type: TransactionType,
    from_address: str,
    to_address: str,
    memo: str,
    amounts: list[tuple[str, str]],
) -> str:
    """``Swap - 1.5 OSMO, 3.2 ATOM [TX: <full hash>] (osmo1abc... -> osmo1def...) Memo: ...``"""
    label = tx_type.value.replace("_", " ").title()
    shown = [f"{amt} {sym}".strip() for amt, sym in amounts if amt]
    parts = [f"{label} - {', '.join(shown)}" if shown else label, f"[TX: {tx_hash}]"]
    if from_address or to_address:
        parts.append(f"({_short(from_address)} -> {_short(to_address)})")
    if memo:
        parts.append(f"Memo: {memo}")
    return " ".join(parts)
