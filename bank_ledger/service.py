"""
Bank Account Service Module

Single owner of the ledger state. Each service instance holds its own
account store and interest rule registry and wires the processing,
reconstruction, accrual and statement components around them, so
independent instances never share state.
"""

from decimal import Decimal
import logging
from typing import Optional, Tuple, Union

from .accounts import AccountStore
from .amounts import AmountLike
from .balances import BalanceReconstructor
from .config import get_config
from .exceptions import AccountNotFound
from .interest import InterestAccrualEngine
from .logging_config import get_logger
from .rules import InterestRule, InterestRuleRegistry
from .statements import AccountStatement, Clock, StatementGenerator
from .transactions import Transaction, TransactionProcessor, TransactionType


class BankAccountService:
    """
    Ledger and interest engine with all components initialized
    """
    
    def __init__(self, clock: Optional[Clock] = None, logger: Optional[logging.Logger] = None):
        self.logger = logger or get_logger("bank_ledger.service")
        
        # Owned state
        self.store = AccountStore()
        self.rules = InterestRuleRegistry(logger=logger)
        
        # Components
        self.interest_engine = InterestAccrualEngine(self.store, self.rules, logger=logger)
        self.balances = BalanceReconstructor(self.interest_engine)
        self.transaction_processor = TransactionProcessor(self.store, self.balances, logger=logger)
        self.statements = StatementGenerator(
            self.store, self.balances, self.interest_engine, clock=clock, logger=logger
        )
    
    def process_transaction(
        self,
        date: str,
        account_id: str,
        transaction_type: Union[TransactionType, str],
        amount: AmountLike
    ) -> Transaction:
        """Post a deposit or withdrawal"""
        return self.transaction_processor.post(date, account_id, transaction_type, amount)
    
    def add_interest_rule(self, date: str, rule_id: str, rate: AmountLike) -> InterestRule:
        """Insert or replace the interest rule effective on a date"""
        return self.rules.upsert(date, rule_id, rate)
    
    def get_interest_rules(self) -> Tuple[InterestRule, ...]:
        """All interest rules, ascending by effective date"""
        return self.rules.list()
    
    def get_balance(self, account_id: str, date: str) -> Decimal:
        """Balance of an account at the end of a day"""
        account = self.store.get_or_none(account_id)
        if account is None:
            self.logger.error(f"Account not found: {account_id}")
            raise AccountNotFound()
        return self.balances.balance_as_of(account, date)
    
    def calculate_interest(self, account_id: str, year: int, month: int,
                           opening_balance: AmountLike) -> Decimal:
        """Interest accrued over a month from the given opening balance"""
        return self.interest_engine.accrue(account_id, year, month, opening_balance)
    
    def get_monthly_statement(self, account_id: str, year: int, month: int) -> AccountStatement:
        return self.statements.monthly_statement(account_id, year, month)
    
    def get_recent_transactions(self, account_id: str, count: Optional[int] = None) -> AccountStatement:
        if count is None:
            count = get_config().recent_transactions_count
        return self.statements.recent_transactions(account_id, count)
    
    def get_account_statement(self, account_id: str, year: Optional[int] = None,
                              month: Optional[int] = None) -> AccountStatement:
        """Monthly statement when year and month are given, recent transactions otherwise"""
        if year is not None and month is not None:
            return self.get_monthly_statement(account_id, year, month)
        return self.get_recent_transactions(account_id)
