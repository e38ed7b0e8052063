"""
SDK Logging Module
Category-based logging system with zero overhead when disabled
Note: Named 'sdk_logging' to avoid conflict with Python's built-in 'logging' module
"""

from .logger import Logger, LogCategory, format_fields

__all__ = ['Logger', 'LogCategory', 'format_fields']
