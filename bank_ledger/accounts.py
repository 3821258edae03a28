"""
Account Ledger Module

Maps account identifiers to their append-only transaction sequences. Accounts
carry no stored balance: balances are always derived from the transactions
and the interest rule history.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .transactions import Transaction


@dataclass
class Account:
    """
    Bank account holding its transactions in posting order
    """
    id: str
    transactions: List['Transaction'] = field(default_factory=list)
    
    def append(self, transaction: 'Transaction') -> None:
        """Append a posted transaction; entries are never reordered or removed"""
        self.transactions.append(transaction)
    
    def transactions_between(self, start_date: str, end_date: str) -> List['Transaction']:
        """Transactions dated within [start_date, end_date], in chronological order"""
        selected = [t for t in self.transactions if start_date <= t.date <= end_date]
        # sorted() is stable, so same-date entries keep posting order
        return sorted(selected, key=lambda t: t.date)
    
    def transactions_on(self, on_date: str) -> List['Transaction']:
        """Transactions dated exactly on the given day, in posting order"""
        return [t for t in self.transactions if t.date == on_date]
    
    def earliest_date(self) -> Optional[str]:
        """Date of the chronologically first transaction"""
        if not self.transactions:
            return None
        return min(t.date for t in self.transactions)
    
    @property
    def has_transactions(self) -> bool:
        return bool(self.transactions)


class AccountStore:
    """In-memory account ledger store; pure bookkeeping, no validation"""
    
    def __init__(self):
        self._accounts: Dict[str, Account] = {}
    
    def get_or_none(self, account_id: str) -> Optional[Account]:
        """Get account by ID"""
        return self._accounts.get(account_id)
    
    def get_or_create(self, account_id: str) -> Account:
        """Get account by ID, creating an empty one on first use"""
        account = self._accounts.get(account_id)
        if account is None:
            account = Account(id=account_id)
            self._accounts[account_id] = account
        return account
    
    def account_ids(self) -> List[str]:
        return list(self._accounts)
    
    def __contains__(self, account_id: str) -> bool:
        return account_id in self._accounts
    
    def __iter__(self) -> Iterator[Account]:
        return iter(list(self._accounts.values()))
    
    def __len__(self) -> int:
        return len(self._accounts)
