#!/usr/bin/env python3
"""Main entry point for the interactive bank menu"""

from .cli import BankCLI
from .config import get_config
from .logging_config import setup_logging
from .service import BankAccountService


def main():
    """Start the interactive menu, logging to a dated file"""
    config = get_config()
    setup_logging(
        level=config.log_level,
        log_format=config.log_format,
        log_file=config.log_file or "bank-account-service.log",
        log_dir=config.log_dir
    )
    
    cli = BankCLI(BankAccountService(), bank_name=config.bank_name)
    try:
        cli.run()
    except KeyboardInterrupt:
        cli.farewell()


if __name__ == "__main__":
    main()
