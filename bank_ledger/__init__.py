"""
Bank Ledger

An in-memory ledger and interest-accrual engine for a retail-banking
simulator. All monetary values use Decimal; balances are always derived
from the transaction history and the interest rule schedule.
"""

__version__ = "1.0.0"
