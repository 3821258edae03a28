"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from pydantic_settings import BaseSettings
from typing import Optional


class LedgerConfig(BaseSettings):
    """Bank ledger configuration"""
    
    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text
    log_file: Optional[str] = None  # If None, logs to stderr
    log_dir: str = "logs"  # Relative log_file names are placed here
    
    # Statement configuration
    recent_transactions_count: int = 10
    bank_name: str = "AwesomeGIC Bank"
    
    # API configuration
    api_host: str = "127.0.0.1"
    api_port: int = 8090
    
    class Config:
        env_prefix = "BANK_LEDGER_"
        env_file = ".env"
        case_sensitive = False


# Global configuration instance
config = LedgerConfig()


def get_config() -> LedgerConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> LedgerConfig:
    """Reload configuration from environment"""
    global config
    config = LedgerConfig()
    return config
