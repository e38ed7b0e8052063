"""
SDK Errors
Standardized error codes and exception hierarchy for all exchange operations
"""

from enum import Enum
from typing import Optional


class ErrorCode(Enum):
    """Standardized error codes"""
    # General errors
    UNKNOWN = "UNKNOWN_ERROR"
    INVALID_INPUT = "INVALID_INPUT"
    TIMEOUT = "TIMEOUT"
    RATE_LIMIT = "RATE_LIMIT_EXCEEDED"
    NETWORK_ERROR = "NETWORK_ERROR"
    INVALID_RESPONSE = "INVALID_RESPONSE"

    # Authentication errors
    INVALID_API_KEY = "INVALID_API_KEY"
    INVALID_SIGNATURE = "INVALID_SIGNATURE"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    API_KEY_EXPIRED = "API_KEY_EXPIRED"

    # Exchange specific errors
    EXCHANGE_NOT_SUPPORTED = "EXCHANGE_NOT_SUPPORTED"
    EXCHANGE_UNAVAILABLE = "EXCHANGE_UNAVAILABLE"
    INVALID_SYMBOL = "INVALID_SYMBOL"
    INSUFFICIENT_BALANCE = "INSUFFICIENT_BALANCE"
    ORDER_NOT_FOUND = "ORDER_NOT_FOUND"
    INVALID_ORDER_TYPE = "INVALID_ORDER_TYPE"
    API_ERROR = "API_ERROR"

    # Data parsing errors
    JSON_PARSING = "JSON_PARSING_ERROR"
    DATA_PARSING = "DATA_PARSING_ERROR"
    DATA_FORMAT = "INVALID_DATA_FORMAT"
    MISSING_FIELD = "MISSING_FIELD"
    INVALID_DATA_TYPE = "INVALID_DATA_TYPE"


class SDKError(Exception):
    """
    Base exception for every error raised by the SDK

    Carries a standardized code, a human-readable message, optional
    diagnostic details and the lower-level exception it wraps.
    """

    default_code = ErrorCode.UNKNOWN

    def __init__(self, message: str, code: Optional[ErrorCode] = None,
                 details: Optional[str] = None, cause: Optional[BaseException] = None):
        """
        Initialize SDK error

        Args:
            message: Human-readable message
            code: Error code (defaults to the class default)
            details: Optional diagnostic details
            cause: Wrapped lower-level exception
        """
        self.code = code or self.default_code
        self.message = message
        self.details = details
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.details:
            return f"[{self.code.value}] {self.message}: {self.details}"
        return f"[{self.code.value}] {self.message}"

    def with_details(self, details: str) -> "SDKError":
        """Attach diagnostic details and return self"""
        self.details = details
        self.args = (str(self),)
        return self


class InvalidInputError(SDKError):
    """Missing credentials, malformed configuration or bad arguments"""
    default_code = ErrorCode.INVALID_INPUT


class NetworkError(SDKError):
    """Connection failure, transport timeout or non-200 HTTP status"""
    default_code = ErrorCode.NETWORK_ERROR

    def __init__(self, message: str, code: Optional[ErrorCode] = None,
                 details: Optional[str] = None, cause: Optional[BaseException] = None,
                 status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message, code=code, details=details, cause=cause)


class RateLimitError(SDKError):
    """Cancelled or timed out while waiting for a rate-limit token"""
    default_code = ErrorCode.RATE_LIMIT


class DataParsingError(SDKError):
    """JSON marshal/unmarshal failure on a request or response"""
    default_code = ErrorCode.DATA_PARSING


class APIError(SDKError):
    """Application-level error reported by the exchange inside a 200 response"""
    default_code = ErrorCode.API_ERROR

    def __init__(self, reason: str, api_message: str, exchange: str = "Gemini"):
        self.reason = reason
        self.api_message = api_message
        super().__init__(f"{exchange} API error: {reason} - {api_message}")


class ExchangeNotSupportedError(SDKError):
    """Requested exchange has no registered constructor"""
    default_code = ErrorCode.EXCHANGE_NOT_SUPPORTED


class CancelledError(Exception):
    """Raised when a RequestContext is cancelled or its deadline passes"""


def is_sdk_error(exc: BaseException) -> bool:
    """Check if an exception is an SDKError"""
    return isinstance(exc, SDKError)


def is_cancellation(exc: BaseException) -> bool:
    """
    Check if an error comes from a cancelled or expired RequestContext

    True for RateLimitError and for any error whose cause chain reaches a
    CancelledError.
    """
    if isinstance(exc, RateLimitError):
        return True

    seen = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        if isinstance(current, CancelledError):
            return True
        seen.add(id(current))
        current = current.__cause__
    return False


def get_code(exc: BaseException) -> ErrorCode:
    """Extract the error code from an exception (UNKNOWN for foreign exceptions)"""
    if isinstance(exc, SDKError):
        return exc.code
    return ErrorCode.UNKNOWN
