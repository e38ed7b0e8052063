"""
Utility Module
"""

from .helpers import (
    extract_base_currency,
    extract_quote_currency,
    parse_float_from_string,
    format_duration,
)
from .rwlock import ReadWriteLock

__all__ = [
    'extract_base_currency',
    'extract_quote_currency',
    'parse_float_from_string',
    'format_duration',
    'ReadWriteLock',
]
