"""
Transaction Processing Module

Validates and posts deposits and withdrawals. Withdrawals are checked against
the balance reconstructed as of the transaction date, and every posted
transaction receives a per-account, per-date sequence identifier.
"""

from decimal import Decimal
from dataclasses import dataclass
from enum import Enum
import logging
from typing import Dict, Optional, Union, TYPE_CHECKING

from .accounts import Account, AccountStore
from .amounts import (
    AmountLike, MAX_INTEGER_DIGITS, ZERO, has_cent_precision, quantize_cents,
    to_decimal, within_amount_limit
)
from .exceptions import InsufficientBalance, InvalidAmount, NewAccountWithdrawal
from .logging_config import get_logger, log_action

if TYPE_CHECKING:
    from .balances import BalanceReconstructor


class TransactionType(Enum):
    """Types of ledger transactions"""
    DEPOSIT = "D"
    WITHDRAWAL = "W"
    INTEREST = "I"  # Synthetic, produced by statements only
    
    @classmethod
    def parse(cls, value: Union['TransactionType', str]) -> 'TransactionType':
        """Accept an enum member or its code in any letter case"""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(f"Unknown transaction type: {value!r}")


@dataclass(frozen=True)
class Transaction:
    """
    Ledger entry. Interest entries carry an empty transaction id.
    """
    date: str
    account_id: str
    type: TransactionType
    amount: Decimal
    transaction_id: str = ""
    
    def __post_init__(self):
        if not isinstance(self.amount, Decimal):
            object.__setattr__(self, 'amount', to_decimal(self.amount))
        
        # Validate amount is positive
        if self.amount <= ZERO:
            raise InvalidAmount()
    
    @property
    def signed_amount(self) -> Decimal:
        """Effect on the balance: withdrawals subtract, everything else adds"""
        if self.type == TransactionType.WITHDRAWAL:
            return -self.amount
        return self.amount
    
    @property
    def is_interest(self) -> bool:
        return self.type == TransactionType.INTEREST
    
    def to_dict(self) -> Dict[str, str]:
        return {
            "date": self.date,
            "account_id": self.account_id,
            "type": self.type.value,
            "amount": str(self.amount),
            "transaction_id": self.transaction_id
        }


class TransactionProcessor:
    """
    Posts deposits and withdrawals to the account ledger store
    """
    
    def __init__(
        self,
        store: AccountStore,
        balances: 'BalanceReconstructor',
        logger: Optional[logging.Logger] = None
    ):
        self.store = store
        self.balances = balances
        self.logger = logger or get_logger("bank_ledger.transactions")
    
    def post(
        self,
        date: str,
        account_id: str,
        transaction_type: Union[TransactionType, str],
        amount: AmountLike
    ) -> Transaction:
        """
        Validate and append a transaction
        
        Args:
            date: YYYYMMDD transaction date
            account_id: Account identifier; unknown accounts are created by deposits
            transaction_type: Deposit or withdrawal
            amount: Positive amount with at most two decimals
            
        Returns:
            The posted Transaction
            
        Raises:
            InvalidAmount: If the amount is not positive, finer than a cent or too large
            NewAccountWithdrawal: If withdrawing from an unknown account
            InsufficientBalance: If a withdrawal exceeds the balance as of date
        """
        transaction_type = TransactionType.parse(transaction_type)
        self.logger.info(
            f"Processing transaction: {date} {account_id} {transaction_type.value} {amount}"
        )
        
        if transaction_type == TransactionType.INTEREST:
            self.logger.error("Interest transactions cannot be posted")
            raise ValueError("Only deposits and withdrawals can be posted")
        
        amount = self._validate_amount(amount)
        
        account = self.store.get_or_none(account_id)
        if account is None:
            if transaction_type == TransactionType.WITHDRAWAL:
                self.logger.error(f"Cannot withdraw from a new account: {account_id}")
                raise NewAccountWithdrawal()
            current_balance = ZERO
        else:
            # Calculate current balance for validation
            current_balance = self.balances.balance_as_of(account, date)
        
        if transaction_type == TransactionType.WITHDRAWAL and current_balance < amount:
            self.logger.error(f"Insufficient balance: {current_balance} < {amount}")
            raise InsufficientBalance()
        
        if account is None:
            self.logger.info(f"Creating new account: {account_id}")
            account = self.store.get_or_create(account_id)
        
        transaction = Transaction(
            date=date,
            account_id=account_id,
            type=transaction_type,
            amount=amount,
            transaction_id=self._generate_transaction_id(date, account)
        )
        account.append(transaction)
        
        log_action(
            self.logger, "info",
            f"Transaction processed. New balance: {current_balance + transaction.signed_amount}",
            action="post_transaction", resource=f"account:{account_id}",
            extra=transaction.to_dict()
        )
        return transaction
    
    def _validate_amount(self, amount: AmountLike) -> Decimal:
        try:
            value = to_decimal(amount)
        except ValueError:
            self.logger.error(f"Amount is not a number: {amount}")
            raise InvalidAmount()
        
        if value <= ZERO:
            self.logger.error(f"Amount must be greater than 0: {value}")
            raise InvalidAmount()
        
        if not has_cent_precision(value):
            self.logger.error(f"Amount has more than 2 decimal places: {value}")
            raise InvalidAmount("Amount must have at most 2 decimal places")
        
        if not within_amount_limit(value):
            self.logger.error(f"Amount is too large: {value}")
            raise InvalidAmount(f"Amount must have at most {MAX_INTEGER_DIGITS} integer digits")
        
        return quantize_cents(value)
    
    @staticmethod
    def _generate_transaction_id(date: str, account: Account) -> str:
        """<date>-<nn>, numbered per account and exact date in posting order"""
        sequence_number = len(account.transactions_on(date)) + 1
        return f"{date}-{sequence_number:02d}"
