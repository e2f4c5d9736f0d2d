import pytest

from walletexport.domain.enums import Chain, TransactionType
from walletexport.domain.models import CHAIN_PROFILES, Coin
from walletexport.exceptions import MalformedRecordError
from walletexport.parser.classifier import classify
from walletexport.parser.mappers.covalent import map_covalent_tx
from walletexport.parser.utils.transfers import QUOTE, TOKEN_TRANSFER

RON = CHAIN_PROFILES[Chain.RONIN]
WALLET = "0xabc0000000000000000000000000000000000001"
OTHER = "0xdef0000000000000000000000000000000000002"


def _item(**overrides):
    item = {
        "tx_hash": "0xr1",
        "block_height": 5,
        "block_signed_at": "2024-01-01T00:00:00Z",
        "successful": True,
        "from_address": WALLET,
        "to_address": OTHER,
        "value": "2000000000000000000",
        "fees_paid": "1000",
        "value_quote": 3.5,
        "log_events": [
            {
                "sender_address": "0xAXS0000000000000000000000000000000000000",
                "sender_contract_ticker_symbol": "AXS",
                "sender_contract_decimals": 18,
                "decoded": {
                    "name": "Transfer",
                    "params": [
                        {"name": "from", "value": OTHER},
                        {"name": "to", "value": WALLET},
                        {"name": "value", "value": "100"},
                    ],
                },
            },
            {"decoded": {"name": "Approval", "params": []}},
            {"decoded": None},
        ],
    }
    item.update(overrides)
    return item


class TestMapCovalentTx:
    def test_fields(self, cache):
        tx = map_covalent_tx(_item(), Chain.RONIN, RON, cache)
        assert tx.hash == "0xr1"
        assert tx.height == 5
        assert tx.status_code == 0
        assert tx.fee == Coin(denom="wei", amount=1000)
        assert tx.messages[0].amount == Coin(denom="wei", amount=2 * 10**18)

    def test_only_decoded_transfers_become_events(self, cache):
        tx = map_covalent_tx(_item(), Chain.RONIN, RON, cache)
        transfers = tx.events_of_type(TOKEN_TRANSFER)
        assert len(transfers) == 1
        assert transfers[0].get("symbol") == "AXS"
        assert transfers[0].get("value") == "100"

    def test_value_quote_passed_through(self, cache):
        tx = map_covalent_tx(_item(), Chain.RONIN, RON, cache)
        assert tx.events_of_type(QUOTE)[0].get("usd_value") == "3.5"

    def test_unsuccessful(self, cache):
        assert map_covalent_tx(_item(successful=False), Chain.RONIN, RON, cache).status_code == 1

    def test_nft_transfer_skipped(self, cache):
        nft = {"sender_address": "0xnft", "decoded": {"name": "Transfer", "params": [
            {"name": "from", "value": OTHER}, {"name": "to", "value": WALLET}, {"name": "tokenId", "value": "7"},
        ]}}
        tx = map_covalent_tx(_item(log_events=[nft]), Chain.RONIN, RON, cache)
        assert tx.events_of_type(TOKEN_TRANSFER) == []

    def test_classified_send_with_token_secondary(self, cache):
        parsed = classify(map_covalent_tx(_item(), Chain.RONIN, RON, cache), WALLET, RON)
        assert parsed.type == TransactionType.SEND
        assert (parsed.amount, parsed.currency) == ("2.000000000000000000", "RON")
        assert parsed.currency2 == "AXS"
        assert parsed.fiat_amount == "3.50"

    def test_missing_hash(self, cache):
        assert map_covalent_tx(_item(tx_hash=None), Chain.RONIN, RON, cache) is None


class TestMalformedItems:
    def test_log_events_not_a_list(self, cache):
        with pytest.raises(MalformedRecordError):
            map_covalent_tx(_item(log_events={"decoded": None}), Chain.RONIN, RON, cache)

    def test_log_event_not_an_object(self, cache):
        with pytest.raises(MalformedRecordError):
            map_covalent_tx(_item(log_events=["0xdeadbeef"]), Chain.RONIN, RON, cache)
