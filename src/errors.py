from amount import Amount


class TransactionError(Exception):
    """
    A record was refused by an account.
    Non-fatal: the account is left exactly as it was before the record.
    """


class InsufficientBalanceError(TransactionError):
    def __init__(self, available: Amount, requested: Amount):
        self.available = available
        self.requested = requested
        super().__init__(f"Insufficient balance. Available: {available}. Requested: {requested}")


class DuplicateTransactionError(TransactionError):
    def __init__(self, transaction_id: int):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction {transaction_id} already exists")


class TransactionDoesNotExistError(TransactionError):
    def __init__(self, transaction_id: int):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction {transaction_id} does not exist")


class TransactionNotUnderDisputeError(TransactionError):
    def __init__(self, transaction_id: int):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction {transaction_id} is not under dispute")


class TransactionIndisputableError(TransactionError):
    def __init__(self, transaction_type):
        self.transaction_type = transaction_type
        super().__init__(f"Transaction type {transaction_type.value} is not disputable")


class AlreadyChargedBackError(TransactionError):
    def __init__(self, transaction_id: int):
        self.transaction_id = transaction_id
        super().__init__(f"Transaction {transaction_id} already charged back")


class NoAmountError(TransactionError):
    def __init__(self):
        super().__init__("No amount specified for transaction")


class AccountFrozenError(TransactionError):
    def __init__(self, client_id: int):
        self.client_id = client_id
        super().__init__(f"Account {client_id} is frozen")


class LedgerInvariantError(RuntimeError):
    """
    Balance arithmetic failed where the account's own preconditions should
    have made that impossible. Processing must stop.
    """
