"""
Configuration Management
Loads and validates exchange, transport and logging settings from the environment
"""

import os
from typing import Dict, List, Optional
from dotenv import load_dotenv

from ..exchange.models import ExchangeConfig, RateLimit, RateLimitConfig


class Config:
    """
    Centralized configuration for the SDK
    Loads settings from environment variables (and an optional .env file) with validation
    """

    def __init__(self, env_file: Optional[str] = None):
        """
        Initialize configuration from environment variables

        Args:
            env_file: Path to .env file (optional)
        """
        if env_file:
            load_dotenv(env_file)
        else:
            load_dotenv()

        self._load_configuration()
        self._validate_configuration()

    def _load_configuration(self):
        """Read every setting from the environment"""

        # ===== Exchange Configuration =====
        self.EXCHANGE = os.getenv('EXCHANGE', 'gemini').lower()
        self.EXCHANGE_ENVIRONMENT = os.getenv('EXCHANGE_ENVIRONMENT', 'testnet')

        # ===== API Credentials =====
        self.GEMINI_API_KEY = os.getenv('GEMINI_API_KEY', '')
        self.GEMINI_API_SECRET = os.getenv('GEMINI_API_SECRET', '')
        self.GEMINI_BASE_URL = os.getenv('GEMINI_BASE_URL', '')

        # ===== Transport Configuration =====
        self.API_TIMEOUT = float(os.getenv('API_TIMEOUT', '30'))
        self.PUBLIC_RATE_LIMIT_REQUESTS = int(os.getenv('PUBLIC_RATE_LIMIT_REQUESTS', '120'))
        self.PUBLIC_RATE_LIMIT_INTERVAL = float(os.getenv('PUBLIC_RATE_LIMIT_INTERVAL', '60'))
        self.PRIVATE_RATE_LIMIT_REQUESTS = int(os.getenv('PRIVATE_RATE_LIMIT_REQUESTS', '600'))
        self.PRIVATE_RATE_LIMIT_INTERVAL = float(os.getenv('PRIVATE_RATE_LIMIT_INTERVAL', '60'))
        self.DEFAULT_HEADERS = self._parse_headers(os.getenv('DEFAULT_HEADERS', ''))
        self.PROXIES = self._parse_list(os.getenv('PROXIES', ''))

        # ===== Logging Configuration =====
        self.LOG_API_CALLS = self._str_to_bool(os.getenv('LOG_API_CALLS', 'true'))
        self.LOG_RATE_LIMITING = self._str_to_bool(os.getenv('LOG_RATE_LIMITING', 'true'))
        self.LOG_SIGNING = self._str_to_bool(os.getenv('LOG_SIGNING', 'false'))
        self.LOG_SYSTEM_EVENTS = self._str_to_bool(os.getenv('LOG_SYSTEM_EVENTS', 'true'))
        self.LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
        self.LOG_OUTPUT = os.getenv('LOG_OUTPUT', 'console')
        self.LOG_FILE_PATH = os.getenv('LOG_FILE_PATH', './logs')
        self.LOG_FILE_MAX_SIZE = int(os.getenv('LOG_FILE_MAX_SIZE', '10'))
        self.LOG_FILE_BACKUP_COUNT = int(os.getenv('LOG_FILE_BACKUP_COUNT', '5'))

    def _validate_configuration(self):
        """Reject settings the client cannot run with"""

        if self.EXCHANGE_ENVIRONMENT not in ['testnet', 'production']:
            raise ValueError("EXCHANGE_ENVIRONMENT must be 'testnet' or 'production'")

        if self.GEMINI_BASE_URL and not self.GEMINI_BASE_URL.startswith(('http://', 'https://')):
            raise ValueError("GEMINI_BASE_URL must start with http:// or https://")

        if self.API_TIMEOUT <= 0:
            raise ValueError("API_TIMEOUT must be positive")

        for name in ('PUBLIC_RATE_LIMIT', 'PRIVATE_RATE_LIMIT'):
            if getattr(self, f'{name}_REQUESTS') < 0:
                raise ValueError(f"{name}_REQUESTS must not be negative")
            if getattr(self, f'{name}_INTERVAL') <= 0:
                raise ValueError(f"{name}_INTERVAL must be positive")

        if self.LOG_LEVEL not in ['DEBUG', 'INFO', 'WARNING', 'ERROR']:
            raise ValueError("LOG_LEVEL must be DEBUG, INFO, WARNING, or ERROR")

        if self.LOG_OUTPUT not in ['console', 'file', 'both']:
            raise ValueError("LOG_OUTPUT must be console, file, or both")

    @staticmethod
    def _str_to_bool(value: str) -> bool:
        """Interpret true/1/yes/on (any case) as True"""
        return value.lower() in ('true', '1', 'yes', 'on')

    @staticmethod
    def _parse_list(value: str) -> List[str]:
        """Parse a comma-separated list, dropping blanks"""
        return [item.strip() for item in value.split(',') if item.strip()]

    @staticmethod
    def _parse_headers(value: str) -> Dict[str, str]:
        """Parse 'Name:Value,Name:Value' into a header mapping"""
        headers = {}
        for item in Config._parse_list(value):
            if ':' not in item:
                raise ValueError(f"Invalid header entry '{item}', expected Name:Value")
            name, header_value = item.split(':', 1)
            headers[name.strip()] = header_value.strip()
        return headers

    def is_production_environment(self) -> bool:
        """True when targeting the production host rather than the sandbox"""
        return self.EXCHANGE_ENVIRONMENT == 'production'

    def to_exchange_config(self, logger=None) -> ExchangeConfig:
        """
        Build the exchange client configuration

        Args:
            logger: Optional cex_sdk.sdk_logging.Logger

        Returns:
            ExchangeConfig populated from this configuration
        """
        return ExchangeConfig(
            api_key=self.GEMINI_API_KEY,
            secret_key=self.GEMINI_API_SECRET,
            base_url=self.GEMINI_BASE_URL,
            timeout=self.API_TIMEOUT,
            rate_limit=RateLimitConfig(
                public=RateLimit(self.PUBLIC_RATE_LIMIT_REQUESTS, self.PUBLIC_RATE_LIMIT_INTERVAL),
                private=RateLimit(self.PRIVATE_RATE_LIMIT_REQUESTS, self.PRIVATE_RATE_LIMIT_INTERVAL),
            ),
            headers=dict(self.DEFAULT_HEADERS),
            proxies=list(self.PROXIES),
            testnet=not self.is_production_environment(),
            logger=logger,
        )

    def __repr__(self) -> str:
        """String representation of configuration (credentials omitted)"""
        return (
            f"Config(exchange={self.EXCHANGE}, "
            f"env={self.EXCHANGE_ENVIRONMENT}, "
            f"proxies={len(self.PROXIES)})"
        )
