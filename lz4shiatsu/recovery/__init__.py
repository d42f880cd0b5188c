"""
lz4shiatsu JSON Recovery System.

This module provides JSON span repair, layered parsing, and the fallback
chain that degrades from structured value to repaired text to sanitized text.
"""

from .recoverer import JsonRecoverer, RecoveryChain
from .strategies import (
    DEFAULT_ATTEMPTS,
    JsonParser,
    extraction_attempt,
    lenient_attempt,
    strict_attempt,
    try_parse,
)

__all__ = [
    "JsonRecoverer",
    "RecoveryChain",
    "JsonParser",
    "try_parse",
    "strict_attempt",
    "lenient_attempt",
    "extraction_attempt",
    "DEFAULT_ATTEMPTS",
]
