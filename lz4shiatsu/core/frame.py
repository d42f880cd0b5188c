"""
LZ4 frame encoding and tolerant decoding.

The block codec itself comes from the ``lz4`` distribution. This module adds
the recovery behaviour on top: when a frame does not decode as-is, the decoder
retries with a small, bounded number of leading bytes skipped, which recovers
frames whose header was prefixed with stray bytes upstream.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import lz4.frame

from ..security.exceptions import FrameDecodeError
from .constants import (
    DECOMPRESS_FAILED_MESSAGE,
    DEFAULT_COMPRESSION_LEVEL,
    DEFAULT_MAX_SKIP_OFFSET,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrameDecodeResult:
    """Outcome of a decode: the data and the offset it was found at."""

    data: Optional[bytes]
    offset: Optional[int]
    attempts: int

    @property
    def ok(self) -> bool:
        """Whether any attempt succeeded."""
        return self.data is not None


class FrameDecoder:
    """Decompresses LZ4 frames, skipping up to max_skip_offset leading bytes."""

    def __init__(self, max_skip_offset: int = DEFAULT_MAX_SKIP_OFFSET):
        self.max_skip_offset = max_skip_offset

    def decode(
        self, data: bytes, max_length: Optional[int] = None
    ) -> FrameDecodeResult:
        """
        Decode data, trying offset 0 and then offsets 1..max_skip_offset.

        Args:
            data: The frame bytes, possibly with a stray prefix
            max_length: Stop decoding once this many bytes are produced. The
                result then holds a truncated prefix of the frame content.

        Returns:
            A FrameDecodeResult; ``ok`` is False when every offset failed
        """
        attempts = 0
        for offset in self._offsets(len(data)):
            attempts += 1
            decoded = self._decode_at(data, offset, max_length)
            if decoded is None:
                continue

            if offset:
                logger.debug("LZ4 frame decoded after skipping %d bytes", offset)
            return FrameDecodeResult(bytes(decoded), offset, attempts)

        return FrameDecodeResult(None, None, attempts)

    @staticmethod
    def _decode_at(
        data: bytes, offset: int, max_length: Optional[int]
    ) -> Optional[bytes]:
        decompressor = lz4.frame.LZ4FrameDecompressor()
        try:
            decoded = decompressor.decompress(
                data[offset:], max_length=-1 if max_length is None else max_length
            )
        except (RuntimeError, ValueError):
            return None

        if decompressor.eof:
            return decoded
        if max_length is not None and len(decoded) >= max_length:
            return decoded
        # Frame ended early
        return None

    def _offsets(self, length: int) -> range:
        # Offset 0 is the direct decode; skipped slices must be non-empty
        return range(0, max(1, min(self.max_skip_offset + 1, length)))


class FrameEncoder:
    """Produces LZ4 frames from raw bytes."""

    def __init__(self, compression_level: int = DEFAULT_COMPRESSION_LEVEL):
        # Recorded for the host configuration; frames use the codec default
        self.compression_level = compression_level

    def encode(self, data: bytes) -> bytes:
        """Compress data into a single LZ4 frame."""
        return lz4.frame.compress(data)


def decompress(data: bytes, max_skip_offset: int = DEFAULT_MAX_SKIP_OFFSET) -> bytes:
    """
    Decompress an LZ4 frame, raising instead of returning a failure value.

    Raises:
        FrameDecodeError: if no offset yields a valid frame
    """
    result = FrameDecoder(max_skip_offset).decode(data)
    if not result.ok:
        raise FrameDecodeError(
            DECOMPRESS_FAILED_MESSAGE, attempts=result.attempts, input_length=len(data)
        )
    assert result.data is not None
    return result.data


def compress(data: bytes) -> bytes:
    """Compress data into an LZ4 frame."""
    return FrameEncoder().encode(data)
