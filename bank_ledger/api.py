"""
FastAPI REST API Module

Exposes the ledger over HTTP: posting transactions, managing interest rules,
and reading balances, interest and statements. Each application instance
owns one BankAccountService.
"""

from typing import Optional
from fastapi import FastAPI, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, field_validator
import uvicorn

from .config import get_config
from .dates import is_valid_date
from .exceptions import ErrorKind, LedgerError
from .service import BankAccountService


def _calendar_date(value: str) -> str:
    if not is_valid_date(value):
        raise ValueError("Date must be a real calendar day in YYYYMMDD format")
    return value


class TransactionRequest(BaseModel):
    date: str = Field(..., description="Transaction date (YYYYMMDD)", pattern=r"^\d{8}$")
    account_id: str = Field(..., min_length=1)
    type: str = Field(..., description="D (deposit) or W (withdrawal)")
    amount: str = Field(..., description="Decimal amount as string")
    
    @field_validator("date")
    @classmethod
    def validate_date(cls, v):
        return _calendar_date(v)


class InterestRuleRequest(BaseModel):
    date: str = Field(..., description="Effective date (YYYYMMDD)", pattern=r"^\d{8}$")
    rule_id: str = Field(..., min_length=1)
    rate: str = Field(..., description="Annual rate in percent as string")
    
    @field_validator("date")
    @classmethod
    def validate_date(cls, v):
        return _calendar_date(v)


def get_service(request: Request) -> BankAccountService:
    return request.app.state.service


def create_app(service: Optional[BankAccountService] = None) -> FastAPI:
    """Create and configure the FastAPI application"""
    app = FastAPI(
        title="Bank Ledger API",
        description="In-memory ledger with day-granular interest accrual",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc"
    )
    app.state.service = service or BankAccountService()
    
    @app.exception_handler(LedgerError)
    async def ledger_error_handler(request: Request, exc: LedgerError):
        status_code = 404 if exc.kind == ErrorKind.ACCOUNT_NOT_FOUND else 400
        return JSONResponse(
            status_code=status_code,
            content={"detail": exc.message, "kind": exc.kind.value}
        )
    
    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        return JSONResponse(status_code=400, content={"detail": str(exc)})
    
    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": "bank_ledger_api",
            "version": "1.0.0"
        }
    
    # Handlers are coroutines so requests reach the service one at a time
    @app.post("/transactions", status_code=status.HTTP_201_CREATED)
    async def post_transaction(
        request: TransactionRequest,
        service: BankAccountService = Depends(get_service)
    ):
        """Post a deposit or withdrawal"""
        transaction = service.process_transaction(
            request.date, request.account_id, request.type, request.amount
        )
        return transaction.to_dict()
    
    @app.get("/interest-rules")
    async def list_interest_rules(service: BankAccountService = Depends(get_service)):
        """List interest rules ascending by date"""
        return {"rules": [rule.to_dict() for rule in service.get_interest_rules()]}
    
    @app.post("/interest-rules", status_code=status.HTTP_201_CREATED)
    async def add_interest_rule(
        request: InterestRuleRequest,
        service: BankAccountService = Depends(get_service)
    ):
        """Insert or replace the rule effective on a date"""
        service.add_interest_rule(request.date, request.rule_id, request.rate)
        return {"rules": [rule.to_dict() for rule in service.get_interest_rules()]}
    
    @app.get("/accounts/{account_id}/statement")
    async def get_statement(
        account_id: str,
        year: Optional[int] = None,
        month: Optional[int] = None,
        service: BankAccountService = Depends(get_service)
    ):
        """Monthly statement, or recent transactions when no period is given"""
        if month is not None and not 1 <= month <= 12:
            raise ValueError("Month must be between 1 and 12")
        return service.get_account_statement(account_id, year, month).to_dict()
    
    @app.get("/accounts/{account_id}/balance")
    async def get_balance(
        account_id: str,
        date: str,
        service: BankAccountService = Depends(get_service)
    ):
        """Balance at the end of a day"""
        _calendar_date(date)
        balance = service.get_balance(account_id, date)
        return {"account_id": account_id, "date": date, "balance": str(balance)}
    
    @app.get("/accounts/{account_id}/interest")
    async def get_interest(
        account_id: str,
        year: int,
        month: int,
        opening_balance: str = "0",
        service: BankAccountService = Depends(get_service)
    ):
        """Interest accrued over a month from a given opening balance"""
        if not 1 <= month <= 12:
            raise ValueError("Month must be between 1 and 12")
        interest = service.calculate_interest(account_id, year, month, opening_balance)
        return {
            "account_id": account_id,
            "year": year,
            "month": month,
            "interest": str(interest)
        }
    
    return app


def run_server(host: Optional[str] = None, port: Optional[int] = None, debug: bool = False):
    """Run the FastAPI server"""
    config = get_config()
    uvicorn.run(
        "bank_ledger.api:create_app",
        factory=True,
        host=host or config.api_host,
        port=port or config.api_port,
        reload=debug,
        log_level="info"
    )
