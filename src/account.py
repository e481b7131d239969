from typing import Dict, Set

from amount import ZERO, Amount, AmountOverflowError, AmountUnderflowError
from errors import (
    AccountFrozenError,
    AlreadyChargedBackError,
    DuplicateTransactionError,
    InsufficientBalanceError,
    LedgerInvariantError,
    TransactionDoesNotExistError,
    TransactionNotUnderDisputeError,
)
from models import (
    AccountSnapshot,
    DisputableTransaction,
    DisputableTransactionType,
    Transaction,
    TransactionType,
)


def _credit(balance: Amount, amount: Amount, balance_name: str) -> Amount:
    try:
        return balance + amount
    except AmountOverflowError as e:
        raise LedgerInvariantError(f"{balance_name} overflow: {balance} + {amount}") from e


def _release(balance: Amount, amount: Amount, balance_name: str) -> Amount:
    try:
        return balance - amount
    except AmountUnderflowError as e:
        raise LedgerInvariantError(f"{balance_name} underflow: {balance} - {amount}") from e


class Account:
    """
    Balances and dispute history for a single client.

    State only changes through apply(). Every handler validates all of its
    preconditions before assigning anything, so a raised TransactionError
    leaves the account untouched.
    """

    def __init__(self, client_id: int):
        self.client_id = client_id
        self._available = ZERO
        self._held = ZERO
        self._frozen = False
        self._transactions: Dict[int, DisputableTransaction] = {}
        self._disputed_transaction_ids: Set[int] = set()
        self._charged_back_transaction_ids: Set[int] = set()

    @property
    def available(self) -> Amount:
        return self._available

    @property
    def held(self) -> Amount:
        return self._held

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def total(self) -> Amount:
        return _credit(self._available, self._held, "total")

    def has_transaction(self, transaction_id: int) -> bool:
        return transaction_id in self._transactions

    def is_disputed(self, transaction_id: int) -> bool:
        return transaction_id in self._disputed_transaction_ids

    def is_charged_back(self, transaction_id: int) -> bool:
        return transaction_id in self._charged_back_transaction_ids

    def snapshot(self) -> AccountSnapshot:
        return AccountSnapshot(
            client_id=self.client_id,
            available=self._available,
            held=self._held,
            total=self.total,
            locked=self._frozen,
        )

    def apply(self, transaction: Transaction) -> None:
        """
        Apply a single record to this account.

        Raises:
            TransactionError: the record was refused, nothing changed
            LedgerInvariantError: balances can no longer be trusted
        """
        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                self._handle_deposit(transaction)
            case TransactionType.WITHDRAWAL:
                self._handle_withdrawal(transaction)
            case TransactionType.DISPUTE:
                self._handle_dispute(transaction)
            case TransactionType.RESOLVE:
                self._handle_resolve(transaction)
            case TransactionType.CHARGEBACK:
                self._handle_chargeback(transaction)

    def _handle_deposit(self, transaction: Transaction) -> None:
        deposit = DisputableTransaction.from_transaction(transaction)
        self._ensure_new_transaction(transaction.transaction_id)

        new_available = _credit(self._available, deposit.amount, "available")
        self._transactions[transaction.transaction_id] = deposit
        self._available = new_available

    def _handle_withdrawal(self, transaction: Transaction) -> None:
        if self._frozen:
            raise AccountFrozenError(self.client_id)

        withdrawal = DisputableTransaction.from_transaction(transaction)
        new_available = self._available_after_debit(withdrawal.amount)
        self._ensure_new_transaction(transaction.transaction_id)

        self._transactions[transaction.transaction_id] = withdrawal
        self._available = new_available

    def _handle_dispute(self, transaction: Transaction) -> None:
        transaction_id = transaction.transaction_id
        disputed = self._get_disputable_transaction(transaction_id)

        if transaction_id in self._disputed_transaction_ids:
            raise DuplicateTransactionError(transaction_id)
        if transaction_id in self._charged_back_transaction_ids:
            raise AlreadyChargedBackError(transaction_id)

        match disputed.transaction_type:
            case DisputableTransactionType.DEPOSIT:
                # Funds leave available and are held in place
                new_available = self._available_after_debit(disputed.amount)
                new_held = _credit(self._held, disputed.amount, "held")
                self._available = new_available
                self._held = new_held
            case DisputableTransactionType.WITHDRAWAL:
                # Funds already left available; the hold is a claim-back
                self._held = _credit(self._held, disputed.amount, "held")

        self._disputed_transaction_ids.add(transaction_id)

    def _handle_resolve(self, transaction: Transaction) -> None:
        transaction_id = transaction.transaction_id
        disputed = self._get_disputed_transaction(transaction_id)

        match disputed.transaction_type:
            case DisputableTransactionType.DEPOSIT:
                new_held = _release(self._held, disputed.amount, "held")
                new_available = _credit(self._available, disputed.amount, "available")
                self._held = new_held
                self._available = new_available
            case DisputableTransactionType.WITHDRAWAL:
                self._held = _release(self._held, disputed.amount, "held")

        self._disputed_transaction_ids.discard(transaction_id)

    def _handle_chargeback(self, transaction: Transaction) -> None:
        transaction_id = transaction.transaction_id
        disputed = self._get_disputed_transaction(transaction_id)

        match disputed.transaction_type:
            case DisputableTransactionType.DEPOSIT:
                # A frozen account cannot drain held through further deposit chargebacks
                if not self._frozen:
                    self._held = _release(self._held, disputed.amount, "held")
            case DisputableTransactionType.WITHDRAWAL:
                new_available = _credit(self._available, disputed.amount, "available")
                new_held = _release(self._held, disputed.amount, "held")
                self._available = new_available
                self._held = new_held

        self._disputed_transaction_ids.discard(transaction_id)
        self._charged_back_transaction_ids.add(transaction_id)
        self._frozen = True

    def _ensure_new_transaction(self, transaction_id: int) -> None:
        if transaction_id in self._transactions:
            raise DuplicateTransactionError(transaction_id)

    def _available_after_debit(self, debit: Amount) -> Amount:
        """Calculate, but do not assign, the available balance after a debit."""
        try:
            return self._available - debit
        except AmountUnderflowError:
            raise InsufficientBalanceError(available=self._available, requested=debit) from None

    def _get_disputable_transaction(self, transaction_id: int) -> DisputableTransaction:
        disputable = self._transactions.get(transaction_id)
        if disputable is None:
            raise TransactionDoesNotExistError(transaction_id)
        return disputable

    def _get_disputed_transaction(self, transaction_id: int) -> DisputableTransaction:
        disputable = self._get_disputable_transaction(transaction_id)
        if transaction_id not in self._disputed_transaction_ids:
            raise TransactionNotUnderDisputeError(transaction_id)
        return disputable
