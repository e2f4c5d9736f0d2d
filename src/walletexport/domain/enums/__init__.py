from walletexport.domain.enums.chain import Chain
from walletexport.domain.enums.status import BranchStatus, TxStatus
from walletexport.domain.enums.tag import CsvTag
from walletexport.domain.enums.tx_type import MessageKind, TransactionType

__all__ = [
    "BranchStatus",
    "Chain",
    "CsvTag",
    "MessageKind",
    "TransactionType",
    "TxStatus",
]
