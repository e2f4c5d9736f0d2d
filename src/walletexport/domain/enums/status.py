from enum import Enum


class TxStatus(str, Enum):
    """On-chain outcome, derived from the canonical status code."""

    SUCCESS = "success"
    FAILED = "failed"


class BranchStatus(str, Enum):
    """How a query branch ended."""

    COMPLETE = "complete"
    TRUNCATED = "truncated"  # page safety limit reached
    INCOMPLETE = "incomplete"  # provider errors cut the branch short
