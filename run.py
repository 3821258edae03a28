#!/usr/bin/env python3
"""
Bank Ledger API Entry Point

Starts the FastAPI server with an in-memory ledger.
"""

import sys

from bank_ledger.api import run_server
from bank_ledger.config import get_config
from bank_ledger.logging_config import setup_logging


if __name__ == "__main__":
    config = get_config()
    setup_logging(config.log_level, log_format=config.log_format,
                  log_file=config.log_file, log_dir=config.log_dir)
    
    print(f"Starting {config.bank_name} ledger API...")
    print(f"API available at: http://{config.api_host}:{config.api_port}")
    print(f"Documentation at: http://{config.api_host}:{config.api_port}/docs")
    print()
    
    try:
        run_server()
    except KeyboardInterrupt:
        print("\nShutting down ledger API...")
    except Exception as e:
        print(f"Error starting server: {e}")
        sys.exit(1)
