"""
lz4shiatsu limits and exceptions.

This module provides resource limits and the exception hierarchy.
"""

from .exceptions import FrameDecodeError, LZ4ShiatsuError, RecoveryError, SecurityError
from .limits import LimitValidator

__all__ = [
    'LZ4ShiatsuError', 'SecurityError', 'FrameDecodeError', 'RecoveryError',
    'LimitValidator'
]
