"""Canonical transaction model shared by every provider."""

from collections.abc import Mapping
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from walletexport.domain.enums import Chain, MessageKind, TransactionType, TxStatus


class Coin(BaseModel):
    """Amount in minor units with its on-chain denomination."""

    model_config = ConfigDict(frozen=True)

    denom: str
    amount: int


class Message(BaseModel):
    """One semantic action inside a transaction."""

    model_config = ConfigDict(frozen=True)

    kind: MessageKind = MessageKind.UNKNOWN
    type_url: str = ""  # provider's own type tag, e.g. /cosmos.bank.v1beta1.MsgSend
    from_address: str = ""
    to_address: str = ""
    sender: str = ""
    receiver: str = ""
    amount: Coin | None = None  # native or chain-denominated; token amounts live in events

    def source(self) -> str:
        return self.from_address or self.sender

    def destination(self) -> str:
        return self.to_address or self.receiver


class EventAttribute(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    value: str


class Event(BaseModel):
    """Typed bag of ordered key/value attributes."""

    model_config = ConfigDict(frozen=True)

    type: str
    attributes: tuple[EventAttribute, ...] = ()

    def get(self, key: str, default: str = "") -> str:
        """First value for ``key``."""
        for attr in self.attributes:
            if attr.key == key:
                return attr.value
        return default

    @classmethod
    def build(cls, type_: str, attrs: Mapping[str, object]) -> "Event":
        """Build an event from a mapping, keeping key order. None values are skipped."""
        return cls(
            type=type_,
            attributes=tuple(EventAttribute(key=k, value=str(v)) for k, v in attrs.items() if v is not None),
        )


class CanonicalTransaction(BaseModel):
    """One on-chain transaction as seen by one provider. Immutable once mapped."""

    model_config = ConfigDict(frozen=True)

    hash: str = Field(min_length=1)
    chain: Chain
    height: int = Field(default=0, ge=0)
    timestamp: datetime | None = None  # None = provider gave nothing parseable
    status_code: int = 0  # 0 = success, anything else = failure
    messages: tuple[Message, ...] = ()
    events: tuple[Event, ...] = ()
    fee: Coin | None = None
    memo: str = ""

    @property
    def succeeded(self) -> bool:
        return self.status_code == 0

    def events_of_type(self, type_: str) -> list[Event]:
        return [e for e in self.events if e.type == type_]


class ParsedTransaction(BaseModel):
    """Wallet-relative classified view of a CanonicalTransaction."""

    model_config = ConfigDict(frozen=True)

    hash: str
    chain: Chain
    timestamp: datetime
    height: int = 0
    type: TransactionType = TransactionType.UNKNOWN
    from_address: str = ""
    to_address: str = ""
    amount: str = ""
    currency: str = ""
    amount2: str = ""
    currency2: str = ""
    fee: str = ""
    fee_currency: str = ""
    fiat_amount: str = ""  # USD, only when the provider supplied a quote
    memo: str = ""
    notes: str = ""
    status: TxStatus = TxStatus.SUCCESS
