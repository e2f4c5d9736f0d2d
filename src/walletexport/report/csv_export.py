"""Tax CSV export: ParsedTransaction -> TaxRow -> CSV text."""

import csv
import io
import logging
from datetime import UTC, date, datetime

from pydantic import BaseModel, ConfigDict

from walletexport.domain.enums import Chain, CsvTag, TransactionType
from walletexport.domain.models import ParsedTransaction

logger = logging.getLogger(__name__)

CSV_COLUMNS: list[str] = [
    "Date",
    "Received Quantity",
    "Received Currency",
    "Received Fiat Amount",
    "Sent Quantity",
    "Sent Currency",
    "Sent Fiat Amount",
    "Fee Amount",
    "Fee Currency",
    "Transaction Hash",
    "Notes",
    "Tag",
]

TAG_BY_TYPE: dict[TransactionType, CsvTag] = {
    TransactionType.SEND: CsvTag.TRANSFER,
    TransactionType.RECEIVE: CsvTag.TRANSFER,
    TransactionType.IBC_TRANSFER: CsvTag.TRANSFER,
    TransactionType.SWAP: CsvTag.TRADE,
    TransactionType.DELEGATE: CsvTag.STAKING,
    TransactionType.UNDELEGATE: CsvTag.STAKING,
    TransactionType.CLAIM_REWARDS: CsvTag.INCOME,
    TransactionType.POOL_DEPOSIT: CsvTag.DEPOSIT,
    TransactionType.POOL_WITHDRAW: CsvTag.WITHDRAWAL,
    TransactionType.GOVERNANCE_VOTE: CsvTag.OTHER,
    TransactionType.UNKNOWN: CsvTag.OTHER,
}


class TaxRow(BaseModel):
    """One CSV line. Field order matches CSV_COLUMNS."""

    model_config = ConfigDict(frozen=True)

    date: str
    received_quantity: str = ""
    received_currency: str = ""
    received_fiat_amount: str = ""
    sent_quantity: str = ""
    sent_currency: str = ""
    sent_fiat_amount: str = ""
    fee_amount: str = ""
    fee_currency: str = ""
    transaction_hash: str = ""
    notes: str = ""
    tag: CsvTag = CsvTag.OTHER

    def values(self) -> list[str]:
        return [
            self.date,
            self.received_quantity,
            self.received_currency,
            self.received_fiat_amount,
            self.sent_quantity,
            self.sent_currency,
            self.sent_fiat_amount,
            self.fee_amount,
            self.fee_currency,
            self.transaction_hash,
            self.notes,
            self.tag.value,
        ]


def tag_for(tx_type: TransactionType) -> CsvTag:
    return TAG_BY_TYPE.get(tx_type, CsvTag.OTHER)


def format_date(ts: datetime) -> str:
    """MM/DD/YYYY HH:MM:SS in UTC. Naive datetimes are taken as UTC."""
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)
    return ts.astimezone(UTC).strftime("%m/%d/%Y %H:%M:%S")


def to_row(tx: ParsedTransaction) -> TaxRow:
    received = sent = ("", "", "")
    if tx.type == TransactionType.RECEIVE:
        received = (tx.amount, tx.currency, tx.fiat_amount)
    elif tx.type == TransactionType.SEND:
        sent = (tx.amount, tx.currency, tx.fiat_amount)
    elif tx.type == TransactionType.SWAP:
        sent = (tx.amount, tx.currency, "")
        received = (tx.amount2, tx.currency2, "")

    return TaxRow(
        date=format_date(tx.timestamp),
        received_quantity=received[0],
        received_currency=received[1],
        received_fiat_amount=received[2],
        sent_quantity=sent[0],
        sent_currency=sent[1],
        sent_fiat_amount=sent[2],
        fee_amount=tx.fee,
        fee_currency=tx.fee_currency,
        transaction_hash=tx.hash,
        notes=tx.notes,
        tag=tag_for(tx.type),
    )


def convert_to_rows(transactions: list[ParsedTransaction], wallet_address: str) -> list[TaxRow]:
    rows = [to_row(tx) for tx in transactions]
    logger.debug("Built %d CSV rows for %s", len(rows), wallet_address)
    return rows


def serialize(rows: list[TaxRow]) -> str:
    """Header plus one line per row, ``\\n``-terminated. Fields with a comma, quote or newline are quoted."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for row in rows:
        writer.writerow(row.values())
    return buf.getvalue()


def generate_filename(address: str, chain: Chain | str, day: date | None = None) -> str:
    day = day or datetime.now(UTC).date()
    chain_name = chain.value if isinstance(chain, Chain) else chain
    return f"{chain_name}-awaken-{address[:8]}-{day.isoformat()}.csv"
