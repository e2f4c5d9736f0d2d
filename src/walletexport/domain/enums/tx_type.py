from enum import Enum


class TransactionType(str, Enum):
    """Wallet-relative meaning of a transaction."""

    SEND = "send"
    RECEIVE = "receive"
    SWAP = "swap"
    IBC_TRANSFER = "ibc_transfer"
    DELEGATE = "delegate"
    UNDELEGATE = "undelegate"
    CLAIM_REWARDS = "claim_rewards"
    POOL_DEPOSIT = "pool_deposit"
    POOL_WITHDRAW = "pool_withdraw"
    GOVERNANCE_VOTE = "governance_vote"
    UNKNOWN = "unknown"


class MessageKind(str, Enum):
    """Chain-declared action carried by one message, normalized at mapping time."""

    SEND = "send"
    IBC_TRANSFER = "ibc_transfer"
    DELEGATE = "delegate"
    UNDELEGATE = "undelegate"
    CLAIM_REWARDS = "claim_rewards"
    VOTE = "vote"
    POOL_JOIN = "pool_join"
    POOL_EXIT = "pool_exit"
    SWAP = "swap"
    CONTRACT_CALL = "contract_call"
    UNKNOWN = "unknown"
