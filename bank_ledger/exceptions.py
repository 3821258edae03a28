"""
Ledger Exceptions Module

Domain-specific errors for ledger operations. Every error aborts the
operation before any state is changed; callers branch on the error type or
on its ``kind``.
"""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Kinds of ledger failures"""
    INVALID_AMOUNT = "invalid_amount"
    NEW_ACCOUNT_WITHDRAWAL = "new_account_withdrawal"
    INSUFFICIENT_BALANCE = "insufficient_balance"
    ACCOUNT_NOT_FOUND = "account_not_found"
    INVALID_RATE = "invalid_rate"


class LedgerError(ValueError):
    """Base exception for ledger business-rule violations"""

    kind: ErrorKind
    default_message = "Ledger operation failed"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return self.args[0]


class InvalidAmount(LedgerError):
    """Transaction amount is zero, negative or finer than a cent"""
    kind = ErrorKind.INVALID_AMOUNT
    default_message = "Amount must be greater than 0"


class NewAccountWithdrawal(LedgerError):
    """Withdrawal requested against an account that does not exist yet"""
    kind = ErrorKind.NEW_ACCOUNT_WITHDRAWAL
    default_message = "Cannot withdraw from a new account"


class InsufficientBalance(LedgerError):
    """Withdrawal exceeds the balance as of the transaction date"""
    kind = ErrorKind.INSUFFICIENT_BALANCE
    default_message = "Insufficient balance"


class AccountNotFound(LedgerError):
    """Account identifier does not resolve"""
    kind = ErrorKind.ACCOUNT_NOT_FOUND
    default_message = "Account not found"


class InvalidRate(LedgerError):
    """Interest rate outside the open interval (0, 100)"""
    kind = ErrorKind.INVALID_RATE
    default_message = "Interest rate must be between 0 and 100"
