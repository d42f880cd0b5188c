"""
Exception types raised by lz4shiatsu.
"""

from typing import Optional


class LZ4ShiatsuError(Exception):
    """Base class for all lz4shiatsu errors."""


class SecurityError(LZ4ShiatsuError):
    """Raised when a payload violates a configured resource limit."""


class FrameDecodeError(LZ4ShiatsuError):
    """Raised when an LZ4 frame cannot be decoded at any tried offset."""

    def __init__(self, message: str, attempts: int = 0, input_length: int = 0):
        self.attempts = attempts
        self.input_length = input_length
        super().__init__(
            f"{message} ({attempts} attempts on {input_length} bytes)"
        )


class RecoveryError(LZ4ShiatsuError):
    """Raised when the recovery chain itself faults unexpectedly."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
