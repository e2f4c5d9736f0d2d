import pytest

from walletexport.domain.enums import Chain, MessageKind, TransactionType
from walletexport.domain.models import CHAIN_PROFILES, Coin
from walletexport.exceptions import MalformedRecordError
from walletexport.parser.classifier import classify
from walletexport.parser.mappers.cosmos import map_cosmos_tx, message_kind, parse_coin
from walletexport.parser.utils.transfers import TOKEN_TRANSFER

OSMO = CHAIN_PROFILES[Chain.OSMOSIS]
WALLET = "osmo1qqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqq"
OTHER = "osmo1zzzzzzzzzzzzzzzzzzzzzzzzzzzzzzzzzzzzzz"


def _attrs(**kwargs):
    return [{"key": k, "value": v} for k, v in kwargs.items()]


def _tx_response(messages, events=None, **overrides):
    payload = {
        "txhash": "A1B2C3",
        "height": "12345",
        "timestamp": "2024-03-01T12:00:00Z",
        "code": 0,
        "tx": {
            "body": {"messages": messages, "memo": "hello"},
            "auth_info": {"fee": {"amount": [{"denom": "uosmo", "amount": "2500"}]}},
        },
        "logs": [],
        "events": events or [],
    }
    payload.update(overrides)
    return payload


class TestMessageKind:
    def test_bank_send(self):
        assert message_kind("/cosmos.bank.v1beta1.MsgSend") == MessageKind.SEND

    def test_ibc(self):
        assert message_kind("/ibc.applications.transfer.v1.MsgTransfer") == MessageKind.IBC_TRANSFER

    def test_staking(self):
        assert message_kind("/cosmos.staking.v1beta1.MsgDelegate") == MessageKind.DELEGATE
        assert message_kind("/cosmos.staking.v1beta1.MsgUndelegate") == MessageKind.UNDELEGATE
        assert message_kind("/cosmos.distribution.v1beta1.MsgWithdrawDelegatorReward") == MessageKind.CLAIM_REWARDS

    def test_osmosis_pool_families(self):
        assert message_kind("/osmosis.poolmanager.v1beta1.MsgSwapExactAmountIn") == MessageKind.SWAP
        assert message_kind("/osmosis.gamm.v1beta1.MsgJoinPool") == MessageKind.POOL_JOIN
        assert message_kind("/osmosis.gamm.v1beta1.MsgJoinSwapExternAmountIn") == MessageKind.POOL_JOIN
        assert message_kind("/osmosis.gamm.v1beta1.MsgExitSwapShareAmountIn") == MessageKind.POOL_EXIT

    def test_bare_name(self):
        assert message_kind("MsgVote") == MessageKind.VOTE

    def test_unknown(self):
        assert message_kind("/foo.bar.MsgSomethingElse") == MessageKind.UNKNOWN


class TestParseCoin:
    def test_dict(self):
        assert parse_coin({"denom": "uosmo", "amount": "10"}) == Coin(denom="uosmo", amount=10)

    def test_list_first_wins(self):
        coins = [{"denom": "uatom", "amount": "1"}, {"denom": "uosmo", "amount": "2"}]
        assert parse_coin(coins) == Coin(denom="uatom", amount=1)

    def test_string(self):
        assert parse_coin("1500uosmo") == Coin(denom="uosmo", amount=1500)
        assert parse_coin("7ibc/ABC123") == Coin(denom="ibc/ABC123", amount=7)

    def test_invalid(self):
        assert parse_coin([]) is None
        assert parse_coin("uosmo") is None
        assert parse_coin({"denom": "uosmo", "amount": "x"}) is None
        assert parse_coin(None) is None


class TestMapCosmosTx:
    def test_bank_send(self, cache):
        msg = {
            "@type": "/cosmos.bank.v1beta1.MsgSend",
            "from_address": WALLET,
            "to_address": OTHER,
            "amount": [{"denom": "uosmo", "amount": "1000000"}],
        }
        payload = _tx_response([msg], events=[{"type": "transfer", "attributes": _attrs(sender=WALLET)}])
        tx = map_cosmos_tx(payload, Chain.OSMOSIS, OSMO, cache)
        assert tx.hash == "A1B2C3"
        assert tx.height == 12345
        assert tx.timestamp.year == 2024
        assert tx.status_code == 0
        assert tx.memo == "hello"
        assert tx.fee == Coin(denom="uosmo", amount=2500)
        assert tx.messages[0].kind == MessageKind.SEND
        assert tx.messages[0].amount == Coin(denom="uosmo", amount=1000000)
        assert tx.events[0].get("sender") == WALLET

    def test_nonzero_code_kept(self, cache):
        tx = map_cosmos_tx(_tx_response([], code=5), Chain.OSMOSIS, OSMO, cache)
        assert tx.status_code == 5
        assert not tx.succeeded

    def test_no_messages_yields_placeholder(self, cache):
        tx = map_cosmos_tx(_tx_response([]), Chain.OSMOSIS, OSMO, cache)
        assert len(tx.messages) == 1
        assert tx.messages[0].kind == MessageKind.UNKNOWN

    def test_missing_hash_dropped(self, cache):
        payload = _tx_response([])
        del payload["txhash"]
        assert map_cosmos_tx(payload, Chain.OSMOSIS, OSMO, cache) is None

    def test_legacy_logs_events(self, cache):
        payload = _tx_response([], logs=[{"events": [{"type": "message", "attributes": _attrs(action="send")}]}])
        tx = map_cosmos_tx(payload, Chain.OSMOSIS, OSMO, cache)
        assert tx.events[0].type == "message"

    def test_delegate_fields(self, cache):
        msg = {
            "@type": "/cosmos.staking.v1beta1.MsgDelegate",
            "delegator_address": WALLET,
            "validator_address": "osmovaloper1abc",
            "amount": {"denom": "uosmo", "amount": "5000000"},
        }
        tx = map_cosmos_tx(_tx_response([msg]), Chain.OSMOSIS, OSMO, cache)
        assert tx.messages[0].from_address == WALLET
        assert tx.messages[0].to_address == "osmovaloper1abc"
        assert classify(tx, WALLET, OSMO).type == TransactionType.DELEGATE


class TestSwapEvents:
    def test_multi_hop_netted_into_two_transfers(self, cache):
        msg = {
            "@type": "/osmosis.poolmanager.v1beta1.MsgSwapExactAmountIn",
            "sender": WALLET,
            "token_in": {"denom": "uosmo", "amount": "1000000"},
        }
        events = [
            {"type": "token_swapped", "attributes": _attrs(
                sender=WALLET, pool_id="1", tokens_in="1000000uosmo", tokens_out="500uatom")},
            {"type": "token_swapped", "attributes": _attrs(
                sender=WALLET, pool_id="2", tokens_in="500uatom", tokens_out="2000000uusdc")},
        ]
        tx = map_cosmos_tx(_tx_response([msg], events=events), Chain.OSMOSIS, OSMO, cache)

        transfers = tx.events_of_type(TOKEN_TRANSFER)
        assert [(t.get("contract"), t.get("from"), t.get("to")) for t in transfers] == [
            ("uosmo", WALLET, "pool:1"),
            ("uusdc", "pool:1", WALLET),
        ]
        assert cache.contracts() == ["uosmo", "uusdc"]

        parsed = classify(tx, WALLET, OSMO)
        assert parsed.type == TransactionType.SWAP
        assert (parsed.amount, parsed.currency) == ("1.000000", "OSMO")
        assert (parsed.amount2, parsed.currency2) == ("2.000000", "USDC")

    def test_no_swap_events(self, cache):
        tx = map_cosmos_tx(_tx_response([]), Chain.OSMOSIS, OSMO, cache)
        assert tx.events_of_type(TOKEN_TRANSFER) == []


class TestMalformedRecords:
    def test_encoded_tx_body_rejected(self, cache):
        payload = _tx_response([], tx="CpIBCo8BChwvY29zbW9zLmJhbmsudjFiZXRh")
        with pytest.raises(MalformedRecordError, match="A1B2C3"):
            map_cosmos_tx(payload, Chain.OSMOSIS, OSMO, cache)

    def test_missing_tx_is_tolerated(self, cache):
        tx = map_cosmos_tx(_tx_response([], tx=None), Chain.OSMOSIS, OSMO, cache)
        assert tx.hash == "A1B2C3"
        assert tx.memo == ""
