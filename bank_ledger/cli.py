"""
Interactive Menu Module

Text menu for entering transactions and interest rules and printing
statements. All input validation happens here; the ledger core assumes
well-formed dates and identifiers.
"""

from decimal import Decimal
import sys
from typing import List, Optional, Sequence, TextIO, Tuple

from tabulate import DataRow, TableFormat, tabulate

from .amounts import ZERO, decimal_from_string, format_amount, has_cent_precision
from .dates import is_valid_date
from .rules import InterestRule
from .service import BankAccountService
from .statements import AccountStatement
from .transactions import TransactionType

MENU_OPTIONS = (
    "[T] Input transactions",
    "[I] Define interest rules",
    "[P] Print statement",
    "[Q] Quit",
)

TRANSACTION_PROMPT = (
    "Please enter transaction details in <Date(YYYYMMDD)> <Account> <Type> <Amount> format "
    "(or enter blank to go back to main menu):"
)
RULE_PROMPT = (
    "Please enter interest rules details in <Date(YYYYMMDD)> <RuleId> <Rate in %> format "
    "(or enter blank to go back to main menu):"
)
STATEMENT_PROMPT = (
    "Please enter account and month to generate the statement <Account> <Year><Month> "
    "(or enter blank to go back to main menu):"
)


# Pipe rows with no rule lines; the header is printed like any other row
LEDGER_TABLE = TableFormat(
    lineabove=None,
    linebelowheader=None,
    linebetweenrows=None,
    linebelow=None,
    headerrow=DataRow("|", "|", "|"),
    datarow=DataRow("|", "|", "|"),
    padding=1,
    with_header_hide=None
)


def parse_transaction_input(text: str) -> Tuple[str, str, TransactionType, Decimal]:
    """
    Parse ``<Date> <Account> <Type> <Amount>``
    
    Raises:
        ValueError: With a message suitable for the user
    """
    parts = text.split()
    if len(parts) != 4:
        raise ValueError("Invalid input format. Expected: <Date> <Account> <Type> <Amount>")
    
    date, account_id, type_code, amount_text = parts
    if not is_valid_date(date):
        raise ValueError("Invalid date. Expected a valid date in YYYYMMDD format")
    
    type_code = type_code.upper()
    if type_code not in (TransactionType.DEPOSIT.value, TransactionType.WITHDRAWAL.value):
        raise ValueError("Invalid transaction type. Expected D (deposit) or W (withdrawal)")
    
    amount = _parse_amount(amount_text)
    return date, account_id, TransactionType(type_code), amount


def parse_rule_input(text: str) -> Tuple[str, str, Decimal]:
    """
    Parse ``<Date> <RuleId> <Rate in %>``
    
    Raises:
        ValueError: With a message suitable for the user
    """
    parts = text.split()
    if len(parts) != 3:
        raise ValueError("Invalid input format. Expected: <Date> <RuleId> <Rate in %>")
    
    date, rule_id, rate_text = parts
    if not is_valid_date(date):
        raise ValueError("Invalid date. Expected a valid date in YYYYMMDD format")
    
    try:
        rate = decimal_from_string(rate_text)
    except ValueError:
        raise ValueError("Invalid rate. Expected a number")
    return date, rule_id, rate


def parse_statement_input(text: str) -> Tuple[str, int, int]:
    """
    Parse ``<Account> <YYYYMM>``
    
    Raises:
        ValueError: With a message suitable for the user
    """
    parts = text.split()
    if len(parts) != 2:
        raise ValueError("Invalid input format. Expected: <Account> <Year><Month>")
    
    account_id, period = parts
    if len(period) != 6 or not period.isdigit():
        raise ValueError("Invalid period. Expected YYYYMM")
    
    year, month = int(period[:4]), int(period[4:])
    if year < 1 or not 1 <= month <= 12:
        raise ValueError("Invalid period. Expected YYYYMM")
    return account_id, year, month


def _parse_amount(text: str) -> Decimal:
    try:
        amount = decimal_from_string(text)
    except ValueError:
        raise ValueError("Invalid amount. Expected a number")
    if amount <= ZERO:
        raise ValueError("Invalid amount. Amount must be greater than 0")
    if not has_cent_precision(amount):
        raise ValueError("Invalid amount. At most 2 decimal places are allowed")
    return amount


def render_table(headers: Sequence[str], rows: Sequence[Sequence[str]],
                 right_aligned: Sequence[int] = ()) -> List[str]:
    """Render a pipe-delimited table with columns padded to the widest cell"""
    colalign = ["right" if index in right_aligned else "left" for index in range(len(headers))]
    # Headers go in as the first row so they share the column alignment
    table = tabulate(
        [list(headers)] + [list(row) for row in rows],
        tablefmt=LEDGER_TABLE,
        colalign=colalign,
        disable_numparse=True
    )
    return table.splitlines()


def render_statement(statement: AccountStatement, show_balance: bool = True) -> List[str]:
    """Statement lines; the balance column needs a reconstructed opening balance"""
    headers = ["Date", "Txn Id", "Type", "Amount"]
    if show_balance:
        headers.append("Balance")
    
    rows = []
    balances = statement.running_balances()
    for transaction, balance in zip(statement.transactions, balances):
        row = [
            transaction.date,
            transaction.transaction_id,
            transaction.type.value,
            format_amount(transaction.amount)
        ]
        if show_balance:
            row.append(format_amount(balance))
        rows.append(row)
    
    lines = [f"Account: {statement.account_id}"]
    lines.extend(render_table(headers, rows, right_aligned=(3, 4)))
    return lines


def render_rules(rules: Sequence[InterestRule]) -> List[str]:
    rows = [[rule.effective_date, rule.rule_id, format_amount(rule.rate)] for rule in rules]
    lines = ["Interest rules:"]
    lines.extend(render_table(["Date", "RuleId", "Rate (%)"], rows, right_aligned=(2,)))
    return lines


class BankCLI:
    """
    Interactive menu over a BankAccountService
    """
    
    def __init__(
        self,
        service: BankAccountService,
        input_stream: Optional[TextIO] = None,
        output_stream: Optional[TextIO] = None,
        bank_name: str = "AwesomeGIC Bank"
    ):
        self.service = service
        self.input = input_stream or sys.stdin
        self.output = output_stream or sys.stdout
        self.bank_name = bank_name
    
    def run(self) -> None:
        """Show the main menu until the user quits or input ends"""
        first_time = True
        while True:
            if first_time:
                self._print(f"\nWelcome to {self.bank_name}! What would you like to do?")
            else:
                self._print("\nIs there anything else you'd like to do?")
            for option in MENU_OPTIONS:
                self._print(option)
            
            answer = self._prompt()
            if answer is None:
                self.farewell()
                return
            
            choice = answer.strip().upper()
            if choice == "T":
                first_time = self._transaction_menu()
            elif choice == "I":
                first_time = self._interest_rule_menu()
            elif choice == "P":
                first_time = self._print_statement_menu()
            elif choice == "Q":
                self.farewell()
                return
            else:
                self._print("Invalid choice. Please try again.")
                first_time = False
    
    def _transaction_menu(self) -> bool:
        """Returns True when the user went back with a blank line"""
        while True:
            self._print(f"\n{TRANSACTION_PROMPT}")
            text = self._prompt()
            if text is None or not text.strip():
                return True
            try:
                date, account_id, transaction_type, amount = parse_transaction_input(text)
                self.service.process_transaction(date, account_id, transaction_type, amount)
            except ValueError as e:
                self._print(str(e))
                continue
            
            statement = self.service.get_recent_transactions(account_id)
            self._print_lines(render_statement(statement, show_balance=False))
            return False
    
    def _interest_rule_menu(self) -> bool:
        while True:
            self._print(f"\n{RULE_PROMPT}")
            text = self._prompt()
            if text is None or not text.strip():
                return True
            try:
                date, rule_id, rate = parse_rule_input(text)
                self.service.add_interest_rule(date, rule_id, rate)
            except ValueError as e:
                self._print(str(e))
                continue
            
            self._print_lines(render_rules(self.service.get_interest_rules()))
            return False
    
    def _print_statement_menu(self) -> bool:
        while True:
            self._print(f"\n{STATEMENT_PROMPT}")
            text = self._prompt()
            if text is None or not text.strip():
                return True
            try:
                account_id, year, month = parse_statement_input(text)
                statement = self.service.get_monthly_statement(account_id, year, month)
            except ValueError as e:
                self._print(str(e))
                continue
            
            self._print_lines(render_statement(statement))
            return False
    
    def farewell(self) -> None:
        self._print(f"\nThank you for banking with {self.bank_name}.")
        self._print("Have a nice day!")
    
    def _prompt(self) -> Optional[str]:
        self.output.write("> ")
        self.output.flush()
        line = self.input.readline()
        if not line:
            return None
        return line.rstrip("\n")
    
    def _print(self, text: str) -> None:
        self.output.write(text + "\n")
    
    def _print_lines(self, lines: Sequence[str]) -> None:
        for line in lines:
            self._print(line)
