from typing import Dict, List, Optional

from account import Account
from models import AccountSnapshot, Transaction


class Ledger:
    """
    Client accounts keyed by client id.
    Accounts are created on first reference and never removed. Callers only
    ever see immutable snapshots of them.
    """

    def __init__(self):
        self._accounts: Dict[int, Account] = {}

    def route(self, transaction: Transaction) -> None:
        """Apply a record to its client's account. TransactionError propagates unchanged."""
        account = self._get_or_create_account(transaction.client_id)
        account.apply(transaction)

    def _get_or_create_account(self, client_id: int) -> Account:
        """Get existing account or create new one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = Account(client_id=client_id)
        return self._accounts[client_id]

    def get_snapshot(self, client_id: int) -> Optional[AccountSnapshot]:
        account = self._accounts.get(client_id)
        if account is None:
            return None
        return account.snapshot()

    def snapshot(self) -> List[AccountSnapshot]:
        """Return all accounts ordered by client id (for final output)."""
        return [self._accounts[client_id].snapshot() for client_id in sorted(self._accounts)]

    def __len__(self) -> int:
        return len(self._accounts)

    def __contains__(self, client_id: int) -> bool:
        return client_id in self._accounts
