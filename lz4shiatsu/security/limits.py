"""
Resource limits for lz4shiatsu.
This module validates payload sizes before any decoding work is done.
"""

from typing import Union

from ..utils.config import ParseLimits
from .exceptions import SecurityError


class LimitValidator:
    """Validates payload limits to prevent resource exhaustion."""

    def __init__(self, limits: ParseLimits):
        self.limits = limits

    def validate_input_size(self, data: Union[str, bytes, int]) -> None:
        """Validate that the payload (or a precomputed size) is within limits."""
        size = data if isinstance(data, int) else len(data)
        if size > self.limits.max_input_size:
            raise SecurityError(
                f"Input size {size} exceeds limit {self.limits.max_input_size}"
            )

    def validate_output_size(self, data: bytes) -> None:
        """
        Validate that decompressed output is within limits.

        Decoders stop one byte past the limit, so data may be a truncated
        prefix of the real output.
        """
        if len(data) > self.limits.max_input_size:
            raise SecurityError(
                f"Decompressed output exceeds limit {self.limits.max_input_size}"
            )

    @property
    def max_output_length(self) -> int:
        """Bytes a decoder may produce: enough to detect a violation."""
        return self.limits.max_input_size + 1
