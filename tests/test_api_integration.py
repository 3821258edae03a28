"""
Integration tests for the Bank Ledger API
Tests end-to-end workflows using FastAPI TestClient
"""

import pytest
from datetime import date
from fastapi.testclient import TestClient

from bank_ledger.api import create_app
from bank_ledger.service import BankAccountService


@pytest.fixture
def client():
    """Create a test client with its own ledger"""
    service = BankAccountService(clock=lambda: date(2024, 1, 15))
    return TestClient(create_app(service))


class TestHealthEndpoints:
    """Test basic health endpoint"""
    
    def test_health(self, client):
        """Test health endpoint"""
        r = client.get("/health")
        assert r.status_code == 200
        assert r.json()["status"] == "healthy"


class TestTransactionFlow:
    """End-to-end transaction tests"""
    
    def test_post_deposit(self, client):
        """Test posting a deposit"""
        r = client.post("/transactions", json={
            "date": "20230601", "account_id": "AC001", "type": "D", "amount": "100.00"
        })
        assert r.status_code == 201
        assert r.json() == {
            "date": "20230601",
            "account_id": "AC001",
            "type": "D",
            "amount": "100.00",
            "transaction_id": "20230601-01"
        }
    
    def test_withdraw_from_new_account(self, client):
        """Test business-rule failures map to 400 with their kind"""
        r = client.post("/transactions", json={
            "date": "20230601", "account_id": "AC001", "type": "W", "amount": "100.00"
        })
        assert r.status_code == 400
        assert r.json() == {
            "detail": "Cannot withdraw from a new account",
            "kind": "new_account_withdrawal"
        }
    
    def test_unknown_type(self, client):
        """Test unknown transaction types are rejected"""
        r = client.post("/transactions", json={
            "date": "20230601", "account_id": "AC001", "type": "X", "amount": "100.00"
        })
        assert r.status_code == 400
    
    def test_malformed_date(self, client):
        """Test request validation of the date format"""
        r = client.post("/transactions", json={
            "date": "2023-06-01", "account_id": "AC001", "type": "D", "amount": "100.00"
        })
        assert r.status_code == 422
    
    def test_balance(self, client):
        """Test balance as of a date"""
        client.post("/transactions", json={
            "date": "20230601", "account_id": "AC001", "type": "D", "amount": "100.00"
        })
        r = client.get("/accounts/AC001/balance", params={"date": "20230630"})
        assert r.status_code == 200
        assert r.json()["balance"] == "100.00"
    
    def test_oversized_amount(self, client):
        """Test amounts beyond the cent-exact range are rejected as invalid"""
        r = client.post("/transactions", json={
            "date": "20230601", "account_id": "AC001", "type": "D", "amount": "1e30"
        })
        assert r.status_code == 400
        assert r.json()["kind"] == "invalid_amount"
    
    def test_amount_normalized_to_cents(self, client):
        """Test exponent input is stored and returned with two decimals"""
        r = client.post("/transactions", json={
            "date": "20230601", "account_id": "AC001", "type": "D", "amount": "1e2"
        })
        assert r.status_code == 201
        assert r.json()["amount"] == "100.00"
    
    def test_nonexistent_calendar_day(self, client):
        """Test dates that match the format but are not real days"""
        r = client.post("/transactions", json={
            "date": "20230231", "account_id": "AC001", "type": "D", "amount": "100.00"
        })
        assert r.status_code == 422
        
        r = client.get("/accounts/AC001/balance", params={"date": "20230331"})
        assert r.status_code == 404
    
    def test_invalid_month_keeps_account_new(self, client):
        """Test a rejected deposit does not open the account"""
        r = client.post("/transactions", json={
            "date": "20231301", "account_id": "NEW", "type": "D", "amount": "100.00"
        })
        assert r.status_code == 422
        
        r = client.post("/transactions", json={
            "date": "20231201", "account_id": "NEW", "type": "W", "amount": "10.00"
        })
        assert r.status_code == 400
        assert r.json()["kind"] == "new_account_withdrawal"
    
    def test_balance_requires_calendar_day(self, client):
        """Test the balance query date is checked"""
        client.post("/transactions", json={
            "date": "20230601", "account_id": "AC001", "type": "D", "amount": "100.00"
        })
        r = client.get("/accounts/AC001/balance", params={"date": "20230231"})
        assert r.status_code == 400


class TestInterestFlow:
    """End-to-end interest rule and statement tests"""
    
    def test_rules(self, client):
        """Test adding and listing rules"""
        r = client.post("/interest-rules", json={"date": "20230615", "rule_id": "RULE03", "rate": "2.20"})
        assert r.status_code == 201
        
        r = client.get("/interest-rules")
        assert r.json() == {"rules": [{"date": "20230615", "rule_id": "RULE03", "rate": "2.20"}]}
    
    def test_invalid_rate(self, client):
        """Test invalid rates map to 400"""
        r = client.post("/interest-rules", json={"date": "20230615", "rule_id": "RULE03", "rate": "100"})
        assert r.status_code == 400
        assert r.json()["kind"] == "invalid_rate"
    
    def test_rule_requires_calendar_day(self, client):
        """Test rule dates are checked"""
        r = client.post("/interest-rules", json={"date": "20230231", "rule_id": "RULE03", "rate": "2.20"})
        assert r.status_code == 422
        assert client.get("/interest-rules").json() == {"rules": []}
    
    def test_monthly_statement(self, client):
        """Test a monthly statement with interest"""
        client.post("/interest-rules", json={"date": "20230601", "rule_id": "RULE01", "rate": "2.0"})
        client.post("/transactions", json={
            "date": "20230601", "account_id": "AC001", "type": "D", "amount": "1000.00"
        })
        
        r = client.get("/accounts/AC001/statement", params={"year": 2023, "month": 6})
        assert r.status_code == 200
        data = r.json()
        assert data["opening_balance"] == "0"
        assert data["closing_balance"] == "1001.64"
        assert [t["type"] for t in data["transactions"]] == ["D", "I"]
    
    def test_recent_statement(self, client):
        """Test the statement without a period lists recent transactions"""
        client.post("/transactions", json={
            "date": "20230601", "account_id": "AC001", "type": "D", "amount": "10.00"
        })
        r = client.get("/accounts/AC001/statement")
        assert r.status_code == 200
        assert len(r.json()["transactions"]) == 1
    
    def test_interest_endpoint(self, client):
        """Test interest for a month from a given opening balance"""
        client.post("/interest-rules", json={"date": "20230101", "rule_id": "RULE01", "rate": "3.65"})
        client.post("/transactions", json={
            "date": "20230101", "account_id": "AC001", "type": "D", "amount": "1.00"
        })
        r = client.get("/accounts/AC001/interest", params={
            "year": 2024, "month": 2, "opening_balance": "1000"
        })
        assert r.status_code == 200
        assert r.json()["interest"] == "2.90"
    
    def test_unknown_account(self, client):
        """Test unknown accounts map to 404"""
        r = client.get("/accounts/NONEXISTENT/statement", params={"year": 2023, "month": 6})
        assert r.status_code == 404
        assert r.json() == {"detail": "Account not found", "kind": "account_not_found"}
    
    def test_invalid_month(self, client):
        """Test month bounds are checked"""
        client.post("/transactions", json={
            "date": "20230601", "account_id": "AC001", "type": "D", "amount": "10.00"
        })
        r = client.get("/accounts/AC001/statement", params={"year": 2023, "month": 13})
        assert r.status_code == 400
