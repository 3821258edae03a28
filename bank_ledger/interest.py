"""
Interest Accrual Engine Module

Computes a month's interest by simulating the account day by day. Each day
first folds in that day's transactions, then earns interest at the rule
effective that day:

    daily interest = balance * annual rate % / 36500

The divisor assumes a 365-day year regardless of leap years. Interest is
summed across the month without compounding inside it, and the total is
rounded to the cent half away from zero.
"""

from decimal import Decimal
from collections import defaultdict
import logging
from typing import Dict, Optional

from .accounts import AccountStore
from .amounts import AmountLike, ZERO, quantize_cents, to_decimal
from .dates import iter_days, month_end, month_start
from .exceptions import AccountNotFound
from .logging_config import get_logger
from .rules import InterestRuleRegistry

DAYS_PER_YEAR = Decimal('365')
PERCENT = Decimal('100')
DAILY_DIVISOR = DAYS_PER_YEAR * PERCENT  # 36500


class InterestAccrualEngine:
    """
    Day-granular interest calculation under an effective-dated rate schedule
    """
    
    def __init__(
        self,
        store: AccountStore,
        rules: InterestRuleRegistry,
        logger: Optional[logging.Logger] = None
    ):
        self.store = store
        self.rules = rules
        self.logger = logger or get_logger("bank_ledger.interest")
    
    def accrue(self, account_id: str, year: int, month: int, opening_balance: AmountLike) -> Decimal:
        """
        Calculate interest earned by an account over one calendar month
        
        Args:
            account_id: Account identifier
            year: Calendar year
            month: Calendar month (1-12)
            opening_balance: Balance at the first instant of the month
            
        Returns:
            Interest rounded to the cent
            
        Raises:
            AccountNotFound: If the account does not exist
        """
        self.logger.info(f"Calculating interest for account {account_id} for {year}-{month}")
        
        account = self.store.get_or_none(account_id)
        if account is None:
            self.logger.error(f"Account not found: {account_id}")
            raise AccountNotFound()
        
        start_date = month_start(year, month)
        end_date = month_end(year, month)
        
        deltas: Dict[str, Decimal] = defaultdict(lambda: ZERO)
        month_transactions = account.transactions_between(start_date, end_date)
        for transaction in month_transactions:
            deltas[transaction.date] += transaction.signed_amount
        self.logger.info(
            f"Period: {start_date} to {end_date}, {len(month_transactions)} transactions"
        )
        
        balance = to_decimal(opening_balance)
        total_interest = ZERO
        
        for day in iter_days(year, month):
            # Same-day transactions count towards that day's interest
            balance += deltas.get(day, ZERO)
            
            rate = self.rules.rate_effective_on(day)
            if rate > ZERO:
                daily_interest = balance * rate / DAILY_DIVISOR
                total_interest += daily_interest
                self.logger.debug(
                    f"Day {day}: Balance={balance}, Rate={rate}%, Interest={daily_interest:.4f}"
                )
        
        rounded_interest = quantize_cents(total_interest)
        self.logger.info(f"Total interest for period: {rounded_interest}")
        return rounded_interest
