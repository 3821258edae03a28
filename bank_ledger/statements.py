"""
Statement Assembly Module

Builds read-only account statements: a monthly view with the reconstructed
opening balance and a synthetic interest line for finished months, and a
recency view listing the latest transactions. Interest lines exist only in
the returned statement and are never written to the ledger.
"""

from decimal import Decimal
from dataclasses import dataclass
from datetime import date
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from .accounts import Account, AccountStore
from .amounts import ZERO
from .balances import BalanceReconstructor
from .dates import month_end, month_start
from .exceptions import AccountNotFound
from .interest import InterestAccrualEngine
from .logging_config import get_logger
from .transactions import Transaction, TransactionType

# Returns the current calendar date
Clock = Callable[[], date]

DEFAULT_RECENT_COUNT = 10


@dataclass(frozen=True)
class AccountStatement:
    """Derived view of an account; not persisted"""
    account_id: str
    transactions: Tuple[Transaction, ...]
    opening_balance: Decimal = ZERO
    
    def running_balances(self) -> List[Decimal]:
        """Balance after each line, starting from the opening balance"""
        balances = []
        balance = self.opening_balance
        for transaction in self.transactions:
            balance += transaction.signed_amount
            balances.append(balance)
        return balances
    
    @property
    def closing_balance(self) -> Decimal:
        balances = self.running_balances()
        return balances[-1] if balances else self.opening_balance
    
    @property
    def interest_line(self) -> Optional[Transaction]:
        for transaction in self.transactions:
            if transaction.is_interest:
                return transaction
        return None
    
    def to_dict(self) -> Dict[str, Any]:
        return {
            "account_id": self.account_id,
            "opening_balance": str(self.opening_balance),
            "closing_balance": str(self.closing_balance),
            "transactions": [t.to_dict() for t in self.transactions]
        }


class StatementGenerator:
    """
    Assembles monthly and recent-transaction statements
    """
    
    def __init__(
        self,
        store: AccountStore,
        balances: BalanceReconstructor,
        interest_engine: InterestAccrualEngine,
        clock: Optional[Clock] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.store = store
        self.balances = balances
        self.interest_engine = interest_engine
        self.clock = clock or date.today
        self.logger = logger or get_logger("bank_ledger.statements")
    
    def monthly_statement(self, account_id: str, year: int, month: int) -> AccountStatement:
        """
        Statement for one calendar month
        
        Transactions dated within the month in chronological order (same-date
        entries in posting order). Unless the month is the current one, a
        positive interest amount is appended as an Interest line dated the
        month's last day.
        
        Raises:
            AccountNotFound: If the account does not exist
        """
        account = self._get_account(account_id)
        
        start_date = month_start(year, month)
        end_date = month_end(year, month)
        
        opening_balance = self.balances.monthly_opening_balance(account, year, month)
        transactions = account.transactions_between(start_date, end_date)
        
        if not self._is_current_month(year, month):
            interest = self.interest_engine.accrue(account_id, year, month, opening_balance)
            if interest > ZERO:
                transactions.append(Transaction(
                    date=end_date,
                    account_id=account_id,
                    type=TransactionType.INTEREST,
                    amount=interest
                ))
        
        return AccountStatement(
            account_id=account_id,
            transactions=tuple(transactions),
            opening_balance=opening_balance
        )
    
    def recent_transactions(self, account_id: str, count: int = DEFAULT_RECENT_COUNT) -> AccountStatement:
        """
        The ``count`` most recently dated transactions, oldest first
        
        This view does not reconstruct balances: its opening balance is
        always zero.
        
        Raises:
            AccountNotFound: If the account does not exist
        """
        account = self._get_account(account_id)
        
        newest_first = sorted(account.transactions, key=lambda t: t.date, reverse=True)
        latest = sorted(newest_first[:max(count, 0)], key=lambda t: t.date)
        
        return AccountStatement(account_id=account_id, transactions=tuple(latest))
    
    def account_statement(
        self,
        account_id: str,
        year: Optional[int] = None,
        month: Optional[int] = None,
        count: int = DEFAULT_RECENT_COUNT
    ) -> AccountStatement:
        """Monthly view when both year and month are given, recency view otherwise"""
        if year is not None and month is not None:
            return self.monthly_statement(account_id, year, month)
        return self.recent_transactions(account_id, count)
    
    def _get_account(self, account_id: str) -> Account:
        account = self.store.get_or_none(account_id)
        if account is None:
            self.logger.error(f"Account not found: {account_id}")
            raise AccountNotFound()
        return account
    
    def _is_current_month(self, year: int, month: int) -> bool:
        today = self.clock()
        return (year, month) == (today.year, today.month)
