"""
Balance Reconstruction Module

Derives balances by replaying an account's history from its first month,
folding each completed month's accrued interest into the principal carried
forward. Nothing is cached: every call recomputes from the first transaction,
so results cannot go stale when back-dated transactions or rules arrive.
"""

from decimal import Decimal

from .accounts import Account
from .amounts import ZERO
from .dates import iter_months, month_end, month_start, year_month
from .interest import InterestAccrualEngine


class BalanceReconstructor:
    """
    Computes opening and as-of balances from transactions and interest rules
    """
    
    def __init__(self, interest_engine: InterestAccrualEngine):
        self.interest_engine = interest_engine
    
    def balance_as_of(self, account: Account, as_of: str) -> Decimal:
        """
        Balance at the end of a day
        
        The month's opening balance plus every transaction dated from the
        first of that month up to and including ``as_of``.
        """
        year, month = year_month(as_of)
        balance = self.monthly_opening_balance(account, year, month)
        
        for transaction in account.transactions_between(month_start(year, month), as_of):
            balance += transaction.signed_amount
        
        return balance
    
    def monthly_opening_balance(self, account: Account, year: int, month: int) -> Decimal:
        """
        Balance at the first instant of (year, month)
        
        Walks forward from the month of the earliest transaction. Each month
        applies its transactions and adds the interest accrued on the balance
        the month opened with.
        """
        first_date = account.earliest_date()
        if first_date is None:
            return ZERO
        
        balance = ZERO
        for current_year, current_month in iter_months(year_month(first_date), (year, month)):
            opening_balance = balance
            
            month_transactions = account.transactions_between(
                month_start(current_year, current_month),
                month_end(current_year, current_month)
            )
            for transaction in month_transactions:
                balance += transaction.signed_amount
            
            interest = self.interest_engine.accrue(
                account.id, current_year, current_month, opening_balance
            )
            if interest > ZERO:
                balance += interest
        
        return balance
