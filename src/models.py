from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from amount import Amount
from errors import NoAmountError, TransactionError, TransactionIndisputableError

MAX_CLIENT_ID = 2 ** 16 - 1
MAX_TRANSACTION_ID = 2 ** 32 - 1


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def carries_amount(self) -> bool:
        return self in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


class DisputableTransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"


class ProcessingResult(Enum):
    SUCCESS = "success"
    REJECTED = "rejected"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class Transaction:
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Amount] = None

    def __post_init__(self):
        if not 0 <= self.client_id <= MAX_CLIENT_ID:
            raise ValueError(f"Client id out of range: {self.client_id}")
        if not 0 <= self.transaction_id <= MAX_TRANSACTION_ID:
            raise ValueError(f"Transaction id out of range: {self.transaction_id}")
        if self.amount is not None and not self.transaction_type.carries_amount:
            raise ValueError(f"{self.transaction_type.value} cannot carry an amount")

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass(frozen=True)
class DisputableTransaction:
    """The part of a deposit or withdrawal kept in history for later disputes."""

    transaction_type: DisputableTransactionType
    amount: Amount

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> "DisputableTransaction":
        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                transaction_type = DisputableTransactionType.DEPOSIT
            case TransactionType.WITHDRAWAL:
                transaction_type = DisputableTransactionType.WITHDRAWAL
            case _:
                raise TransactionIndisputableError(transaction.transaction_type)

        if transaction.amount is None:
            raise NoAmountError()
        return cls(transaction_type=transaction_type, amount=transaction.amount)


@dataclass(frozen=True)
class AccountSnapshot:
    client_id: int
    available: Amount
    held: Amount
    total: Amount
    locked: bool

    def as_row(self) -> List[str]:
        return [
            str(self.client_id),
            str(self.available),
            str(self.held),
            str(self.total),
            str(self.locked).lower(),
        ]


class ProcessingStats:
    """Counters for tracking processing outcomes."""

    def __init__(self):
        self.processed = 0
        self.rejected = 0
        self.malformed = 0
        self.rejections: Counter = Counter()

    def record_success(self):
        self.processed += 1

    def record_rejection(self, error: TransactionError):
        self.rejected += 1
        self.rejections[type(error).__name__] += 1

    def record_malformed(self):
        self.malformed += 1

    def summary(self) -> str:
        line = f"Processed: {self.processed}, Rejected: {self.rejected}, Malformed: {self.malformed}"
        if self.rejections:
            breakdown = ", ".join(f"{name}={count}" for name, count in sorted(self.rejections.items()))
            line += f" ({breakdown})"
        return line
