"""
Test suite for statement assembly

Tests monthly statements with synthetic interest lines and the recent
transactions view. A fixed clock keeps results independent of today's date.
"""

import pytest
from decimal import Decimal
from datetime import date

from bank_ledger.accounts import AccountStore
from bank_ledger.balances import BalanceReconstructor
from bank_ledger.exceptions import AccountNotFound
from bank_ledger.interest import InterestAccrualEngine
from bank_ledger.rules import InterestRuleRegistry
from bank_ledger.statements import AccountStatement, StatementGenerator
from bank_ledger.transactions import Transaction, TransactionProcessor, TransactionType


class TestStatementGenerator:
    """Test statement generation"""
    
    def setup_method(self):
        """Set up test fixtures"""
        self.today = date(2024, 1, 15)
        self.store = AccountStore()
        self.rules = InterestRuleRegistry()
        self.engine = InterestAccrualEngine(self.store, self.rules)
        self.balances = BalanceReconstructor(self.engine)
        self.processor = TransactionProcessor(self.store, self.balances)
        self.statements = StatementGenerator(
            self.store, self.balances, self.engine, clock=lambda: self.today
        )
    
    def test_monthly_statement_with_interest(self):
        """Test a finished month gets an interest line on its last day"""
        self.rules.upsert("20230601", "RULE01", "2.0")
        deposit = self.processor.post("20230601", "AC001", "D", "1000.00")
        
        statement = self.statements.monthly_statement("AC001", 2023, 6)
        
        assert statement.account_id == "AC001"
        assert statement.opening_balance == Decimal('0')
        assert statement.transactions == (
            deposit,
            Transaction("20230630", "AC001", TransactionType.INTEREST, Decimal('1.64'))
        )
        assert statement.closing_balance == Decimal('1001.64')
    
    def test_monthly_statement_opening_balance(self):
        """Test the statement lists only the month's transactions"""
        self.processor.post("20230510", "AC001", "D", "750.00")
        self.processor.post("20230601", "AC001", "D", "1000.00")
        self.processor.post("20230615", "AC001", "W", "500.00")
        
        statement = self.statements.monthly_statement("AC001", 2023, 6)
        
        assert statement.opening_balance == Decimal('750.00')
        assert len(statement.transactions) == 2
        assert statement.interest_line is None
    
    def test_transactions_in_date_order(self):
        """Test back-dated posts are listed chronologically"""
        self.processor.post("20230601", "AC001", "D", "100.00")
        late = self.processor.post("20230620", "AC001", "D", "50.00")
        early = self.processor.post("20230605", "AC001", "W", "20.00")
        
        statement = self.statements.monthly_statement("AC001", 2023, 6)
        
        assert [t.date for t in statement.transactions] == ["20230601", "20230605", "20230620"]
        assert statement.transactions[1] is early
        assert statement.transactions[2] is late
        assert statement.running_balances() == [Decimal('100.00'), Decimal('80.00'), Decimal('130.00')]
    
    def test_current_month_has_no_interest(self):
        """Test the current month's interest is not yet finalized"""
        self.today = date(2023, 6, 20)
        self.rules.upsert("20230601", "RULE01", "2.0")
        self.processor.post("20230601", "AC001", "D", "1000.00")
        
        statement = self.statements.monthly_statement("AC001", 2023, 6)
        
        assert statement.interest_line is None
        assert len(statement.transactions) == 1
    
    def test_statement_is_idempotent(self):
        """Test interest lines are never written back to the ledger"""
        self.rules.upsert("20230601", "RULE01", "2.0")
        self.processor.post("20230601", "AC001", "D", "1000.00")
        
        first = self.statements.monthly_statement("AC001", 2023, 6)
        second = self.statements.monthly_statement("AC001", 2023, 6)
        
        assert first == second
        assert len(self.store.get_or_none("AC001").transactions) == 1
        assert self.statements.monthly_statement("AC001", 2023, 7).opening_balance == Decimal('1001.64')
    
    def test_interest_accumulates_across_months(self):
        """Test each month's opening includes all earlier interest"""
        self.rules.upsert("20230401", "RULE01", "2.0")
        self.rules.upsert("20230501", "RULE02", "2.5")
        self.rules.upsert("20230601", "RULE03", "3.0")
        self.processor.post("20230401", "AC001", "D", "1000.00")
        
        april = self.statements.monthly_statement("AC001", 2023, 4)
        may = self.statements.monthly_statement("AC001", 2023, 5)
        june = self.statements.monthly_statement("AC001", 2023, 6)
        
        assert april.interest_line.amount == Decimal('1.64')
        assert may.interest_line.amount == Decimal('2.13')
        assert june.opening_balance == Decimal('1000.00') + Decimal('1.64') + Decimal('2.13')
        assert june.interest_line.amount == Decimal('2.48')
        assert june.closing_balance == Decimal('1006.25')
    
    def test_non_positive_interest_is_dropped(self):
        """Test negative interest neither appears nor carries forward"""
        self.rules.upsert("20230601", "RULE01", "36.5")
        self.processor.post("20230601", "AC001", "D", "100.00")
        self.processor.post("20230629", "AC001", "W", "100.00")
        self.processor.post("20230602", "AC001", "W", "100.00")
        
        assert self.engine.accrue("AC001", 2023, 6, 0) == Decimal('-0.10')
        assert self.statements.monthly_statement("AC001", 2023, 6).interest_line is None
        assert self.statements.monthly_statement("AC001", 2023, 7).opening_balance == Decimal('-100.00')
    
    def test_recent_transactions(self):
        """Test the latest transactions are returned oldest first"""
        for day, amount in [("01", "100.00"), ("02", "200.00"), ("03", "300.00"),
                            ("04", "400.00"), ("05", "500.00")]:
            self.processor.post(f"202306{day}", "AC001", "D", amount)
        
        statement = self.statements.recent_transactions("AC001", 3)
        
        assert [t.amount for t in statement.transactions] == [
            Decimal('300.00'), Decimal('400.00'), Decimal('500.00')
        ]
        assert statement.opening_balance == Decimal('0')
    
    def test_recent_transactions_ties_keep_posting_order(self):
        """Test same-date entries stay in posting order"""
        self.processor.post("20230601", "AC001", "D", "1.00")
        second = self.processor.post("20230602", "AC001", "D", "2.00")
        third = self.processor.post("20230602", "AC001", "D", "3.00")
        fourth = self.processor.post("20230603", "AC001", "D", "4.00")
        
        statement = self.statements.recent_transactions("AC001", 3)
        
        assert statement.transactions == (second, third, fourth)
    
    def test_recent_transactions_by_date_not_posting_order(self):
        """Test recency is by transaction date"""
        newest = self.processor.post("20230630", "AC001", "D", "1.00")
        self.processor.post("20230101", "AC001", "D", "2.00")
        
        statement = self.statements.recent_transactions("AC001", 1)
        
        assert statement.transactions == (newest,)
    
    def test_recent_transactions_has_no_interest(self):
        """Test the recency view never synthesizes interest"""
        self.rules.upsert("20230101", "RULE01", "2.0")
        self.processor.post("20230101", "AC001", "D", "1000.00")
        
        statement = self.statements.recent_transactions("AC001")
        assert statement.interest_line is None
        assert len(statement.transactions) == 1
    
    def test_account_statement_dispatch(self):
        """Test monthly view with a period and recency view without"""
        self.processor.post("20230510", "AC001", "D", "750.00")
        self.processor.post("20230601", "AC001", "D", "100.00")
        
        monthly = self.statements.account_statement("AC001", 2023, 6)
        recent = self.statements.account_statement("AC001")
        only_year = self.statements.account_statement("AC001", 2023)
        
        assert monthly.opening_balance == Decimal('750.00')
        assert len(monthly.transactions) == 1
        assert recent.opening_balance == Decimal('0')
        assert len(recent.transactions) == 2
        assert only_year == recent
    
    def test_unknown_account(self):
        """Test both views reject unknown accounts"""
        with pytest.raises(AccountNotFound):
            self.statements.monthly_statement("NONEXISTENT", 2023, 6)
        with pytest.raises(AccountNotFound):
            self.statements.recent_transactions("NONEXISTENT")


class TestAccountStatement:
    """Test the statement record"""
    
    def test_to_dict(self):
        """Test serialization of a statement"""
        statement = AccountStatement(
            account_id="AC001",
            transactions=(
                Transaction("20230601", "AC001", TransactionType.DEPOSIT, Decimal('100.00'), "20230601-01"),
                Transaction("20230630", "AC001", TransactionType.INTEREST, Decimal('0.16')),
            ),
            opening_balance=Decimal('10.00')
        )
        
        assert statement.to_dict() == {
            "account_id": "AC001",
            "opening_balance": "10.00",
            "closing_balance": "110.16",
            "transactions": [
                {"date": "20230601", "account_id": "AC001", "type": "D",
                 "amount": "100.00", "transaction_id": "20230601-01"},
                {"date": "20230630", "account_id": "AC001", "type": "I",
                 "amount": "0.16", "transaction_id": ""},
            ]
        }
    
    def test_empty_statement_closing(self):
        """Test closing equals opening with no lines"""
        statement = AccountStatement("AC001", (), Decimal('5.00'))
        assert statement.closing_balance == Decimal('5.00')
