"""Tests for token_transfer events and their extraction."""

from walletexport.domain.enums import Chain
from walletexport.domain.models import CanonicalTransaction, Event, TokenMetadata
from walletexport.parser.utils.transfers import (
    TOKEN_TRANSFER,
    RawTransfer,
    extract_token_transfers,
    token_transfer_event,
)

USDC = TokenMetadata(symbol="USDC", decimals=6, name="USD Coin")


def _tx(*events: Event) -> CanonicalTransaction:
    return CanonicalTransaction(hash="0xabc", chain=Chain.CELO, events=events)


class TestTokenTransferEvent:
    def test_attributes(self):
        event = token_transfer_event("0xusdc", "0xa", "0xb", 1000, USDC)
        assert event.type == TOKEN_TRANSFER
        assert event.get("symbol") == "USDC"
        assert event.get("decimals") == "6"
        assert event.get("value") == "1000"
        assert event.get("from") == "0xa"
        assert event.get("to") == "0xb"
        assert event.get("token_type") == ""

    def test_token_type_kept(self):
        event = token_transfer_event("KT1", "tz1a", "tz1b", "5", USDC, "fa2")
        assert event.get("token_type") == "fa2"


class TestExtractTokenTransfers:
    def test_basic(self):
        tx = _tx(token_transfer_event("0xusdc", "0xWallet", "0xpool", "1000000000", USDC))
        result = extract_token_transfers(tx)
        assert len(result) == 1
        t = result[0]
        assert t.symbol == "USDC"
        assert t.decimals == 6
        assert t.value == 1_000_000_000
        assert t.display_amount == "1000.000000"

    def test_other_events_ignored(self):
        tx = _tx(Event.build("transfer", {"value": "5"}), token_transfer_event("0xusdc", "0xa", "0xb", 1, USDC))
        assert len(extract_token_transfers(tx)) == 1

    def test_non_integer_value_skipped(self):
        tx = _tx(Event.build(TOKEN_TRANSFER, {"contract": "0xnft", "value": "tokenId:7"}))
        assert extract_token_transfers(tx) == []

    def test_missing_metadata_uses_defaults(self):
        tx = _tx(Event.build(TOKEN_TRANSFER, {"contract": "0xabcdef0123456789", "value": "500"}))
        result = extract_token_transfers(tx, default_decimals=9)
        assert result[0].decimals == 9
        assert result[0].symbol == "0xabcdef01"

    def test_order_preserved(self):
        dai = TokenMetadata(symbol="DAI", decimals=18)
        tx = _tx(
            token_transfer_event("0xusdc", "0xa", "0xb", 1000, USDC),
            token_transfer_event("0xdai", "0xb", "0xa", 2000, dai),
        )
        assert [t.symbol for t in extract_token_transfers(tx)] == ["USDC", "DAI"]


class TestRawTransfer:
    def test_direction_is_case_insensitive(self):
        t = RawTransfer(contract="0xc", from_address="0xABC", to_address="0xdef", value=1)
        assert t.is_from("0xabc")
        assert t.is_to("0xDEF")
        assert not t.is_to("0xabc")
