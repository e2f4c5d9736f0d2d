from walletexport.domain.enums import Chain, MessageKind, TransactionType
from walletexport.domain.models import CHAIN_PROFILES, Coin
from walletexport.parser.classifier import classify
from walletexport.parser.mappers.celestia import map_celenium_message

TIA = CHAIN_PROFILES[Chain.CELESTIA]
WALLET = "celestia1qqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqqq"
OTHER = "celestia1zzzzzzzzzzzzzzzzzzzzzzzzzzzzzzzzzzzzzz"


def _message(**overrides):
    payload = {
        "height": 100,
        "time": "2024-02-01T00:00:00Z",
        "type": "MsgSend",
        "invocation_type": "fromAddress",
        "tx": {"hash": "CEL1", "status": "success", "fee": "2000", "memo": ""},
        "data": {"FromAddress": WALLET, "ToAddress": OTHER, "Amount": [{"denom": "utia", "amount": "5000000"}]},
    }
    payload.update(overrides)
    return payload


class TestMapCeleniumMessage:
    def test_send(self):
        tx = map_celenium_message(_message())
        assert tx.hash == "CEL1"
        assert tx.chain == Chain.CELESTIA
        assert tx.height == 100
        assert tx.status_code == 0
        assert tx.fee == Coin(denom="utia", amount=2000)
        msg = tx.messages[0]
        assert msg.kind == MessageKind.SEND
        assert msg.from_address == WALLET
        assert msg.amount == Coin(denom="utia", amount=5000000)
        assert tx.events[0].get("invocation_type") == "fromAddress"

    def test_classified_as_send(self):
        parsed = classify(map_celenium_message(_message()), WALLET, TIA)
        assert parsed.type == TransactionType.SEND
        assert (parsed.amount, parsed.currency) == ("5.000000", "TIA")
        assert (parsed.fee, parsed.fee_currency) == ("0.002000", "TIA")

    def test_failed_status(self):
        tx = map_celenium_message(_message(tx={"hash": "CEL2", "status": "failed", "fee": "0"}))
        assert tx.status_code == 1
        assert tx.fee is None

    def test_delegate(self):
        payload = _message(
            type="MsgDelegate",
            invocation_type="delegator",
            data={"DelegatorAddress": WALLET, "ValidatorAddress": "celestiavaloper1x",
                  "Amount": {"denom": "utia", "amount": "1000000"}},
        )
        tx = map_celenium_message(payload)
        assert tx.messages[0].kind == MessageKind.DELEGATE
        assert tx.messages[0].from_address == WALLET
        assert classify(tx, WALLET, TIA).type == TransactionType.DELEGATE

    def test_invocation_type_when_wallet_absent(self):
        payload = _message(invocation_type="toAddress", data={"Amount": [{"denom": "utia", "amount": "1"}]})
        assert classify(map_celenium_message(payload), WALLET, TIA).type == TransactionType.RECEIVE

    def test_missing_hash(self):
        assert map_celenium_message(_message(tx={})) is None
