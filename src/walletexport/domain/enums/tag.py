from enum import Enum


class CsvTag(str, Enum):
    """Tag column vocabulary of the tax CSV."""

    TRANSFER = "transfer"
    TRADE = "trade"
    STAKING = "staking"
    INCOME = "income"
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    OTHER = "other"
