"""
Payload format detection.

Classifies a raw payload into the processing path it should take. Sniffing is
total: every payload maps to exactly one classification and no input raises.
"""

import base64
import binascii
import json
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union

from ..preprocessing.extractors import extract_json_span
from ..utils.config import DetectionSettings
from .constants import LZ4_FRAME_MAGIC, MIN_FRAME_LENGTH
from .validator import is_valid_structure

_NON_BASE64 = re.compile(r"[^A-Za-z0-9+/]")


class Classification(Enum):
    """Processing path selected for a payload."""

    COMPRESSED_FRAME = "compressed_frame"
    BASE64_COMPRESSED_FRAME = "base64_compressed_frame"
    CORRUPTED_TEXT = "corrupted_text"
    PLAIN_BYTES = "plain_bytes"


@dataclass(frozen=True)
class SniffResult:
    """A classification together with the data the chosen path consumes."""

    classification: Classification
    data: Union[bytes, str]

    @property
    def is_compressed(self) -> bool:
        """Whether the payload should be decompressed."""
        return self.classification in (
            Classification.COMPRESSED_FRAME,
            Classification.BASE64_COMPRESSED_FRAME,
        )


def has_frame_magic(data: bytes) -> bool:
    """Check for the LZ4 frame magic number at offset 0."""
    if len(data) <= MIN_FRAME_LENGTH:
        return False
    return int.from_bytes(data[:4], "little") == LZ4_FRAME_MAGIC


def serialize_structured(value: Any) -> bytes:
    """Serialize a structured value with compact canonical JSON."""
    try:
        text = json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        # Circular references and the like
        text = str(value)
    return text.encode("utf-8")


class FormatSniffer:
    """Inspects raw input and decides which processing path it takes."""

    def __init__(self, settings: Optional[DetectionSettings] = None):
        self.settings = settings or DetectionSettings()
        self._control_chars = re.compile(self.settings.control_char_pattern)
        self._corrupted_structure = re.compile(
            self.settings.corrupted_structure_pattern, re.ASCII
        )

    def classify(self, payload: Any) -> SniffResult:
        """Classify a payload of bytes, text, or a structured value."""
        if isinstance(payload, (bytes, bytearray, memoryview)):
            data = bytes(payload)
            if has_frame_magic(data):
                return SniffResult(Classification.COMPRESSED_FRAME, data)
            return SniffResult(Classification.PLAIN_BYTES, data)

        if isinstance(payload, str):
            return self._classify_text(payload)

        return SniffResult(Classification.PLAIN_BYTES, serialize_structured(payload))

    def is_corrupted(self, text: str) -> bool:
        """Whether text shows signs of transport damage."""
        if self._control_chars.search(text):
            return True
        if self._corrupted_structure.search(text):
            return True
        if self.settings.detect_unbalanced_structure:
            span = extract_json_span(text)
            if span is not None and not is_valid_structure(span):
                return True
        return False

    def _classify_text(self, text: str) -> SniffResult:
        if self.is_corrupted(text):
            return SniffResult(Classification.CORRUPTED_TEXT, text)

        decoded = self._decode_base64(text)
        if decoded is not None and has_frame_magic(decoded):
            return SniffResult(Classification.BASE64_COMPRESSED_FRAME, decoded)

        return SniffResult(Classification.PLAIN_BYTES, text.encode("utf-8"))

    @staticmethod
    def _decode_base64(text: str) -> Optional[bytes]:
        # Padding is optional on the wire
        body = _NON_BASE64.sub("", text)
        try:
            return base64.b64decode(body + "=" * (-len(body) % 4))
        except (binascii.Error, ValueError):
            return None


_default_sniffer = FormatSniffer()


def classify(payload: Any, config: Optional[DetectionSettings] = None) -> SniffResult:
    """Classify a payload, with the default detection settings unless given."""
    sniffer = _default_sniffer if config is None else FormatSniffer(config)
    return sniffer.classify(payload)
