"""
lz4shiatsu - Therapeutic payload handler that gently massages LZ4 frames and
damaged JSON back into shape.

lz4shiatsu takes a payload of unknown provenance from a streaming pipeline
(bytes, text, or an already-parsed structure), works out what it is, and
returns the cleanest structured result it can.

Key Features:
- Detects LZ4 frames, base64-wrapped LZ4 frames and transport-damaged text
- Tolerant LZ4 decoding that skips stray bytes in front of a frame header
- Repairs damaged JSON: junk after '{', excess closers, control bytes,
  corrupted string bodies, trailing commas, missing separators
- Layered parsing: strict, lenient, then extraction from mixed content
- Compresses plain payloads, falling back to cleanup when LZ4 does not pay off

Quick Start:
    import lz4shiatsu

    result = lz4shiatsu.process('{garbage{"a": 1, "b": 2,}}}')
    result.payload            # {'a': 1, 'b': 2}
    result.operation.value    # 'cleanup'

    # Individual stages
    lz4shiatsu.sanitize("a\\x00b")                 # 'ab'
    lz4shiatsu.recover_json('noise {"a": 1,} tail') # '{"a": 1}'
    lz4shiatsu.try_parse("{a: 'b'}")                # {'a': 'b'}

    # Pipeline node with host callbacks
    node = lz4shiatsu.LZ4Node({"outputFormat": "base64"}, send=print)
    node.on_input({"payload": {"x": 1}, "topic": "events"})
"""

from typing import Any, Optional

from .core import (
    Classification,
    FormatSniffer,
    FrameDecoder,
    FrameDecodeResult,
    FrameEncoder,
    NodeStatus,
    Operation,
    PayloadProcessor,
    ProcessingOutcome,
    RecoveryResult,
    SniffResult,
    StatusLevel,
    StructuralValidator,
    classify,
    compress,
    decompress,
    is_valid_structure,
)
from .node import LZ4Node
from .preprocessing import TextSanitizer, sanitize
from .recovery import JsonParser, JsonRecoverer, RecoveryChain, try_parse
from .security.exceptions import (
    FrameDecodeError,
    LZ4ShiatsuError,
    RecoveryError,
    SecurityError,
)
from .utils.config import OutputFormat, ProcessorConfig

__version__ = "0.1.0"
__author__ = "lz4shiatsu contributors"


def process(payload: Any, config: Optional[ProcessorConfig] = None) -> Optional[RecoveryResult]:
    """Process a single payload; returns None for an empty payload."""
    return PayloadProcessor(config).process(payload)


def recover_json(text: Any) -> str:
    """Extract and repair the JSON span of text."""
    return JsonRecoverer().recover(text)


__all__ = [
    # One-shot functions
    "process", "classify", "sanitize", "recover_json", "try_parse",
    "is_valid_structure", "compress", "decompress",
    # Components
    "PayloadProcessor", "FormatSniffer", "FrameDecoder", "FrameEncoder",
    "TextSanitizer", "JsonRecoverer", "JsonParser", "RecoveryChain",
    "StructuralValidator", "LZ4Node",
    # Result and configuration types
    "Classification", "SniffResult", "FrameDecodeResult", "RecoveryResult",
    "ProcessingOutcome", "Operation", "NodeStatus", "StatusLevel",
    "ProcessorConfig", "OutputFormat",
    # Exception classes
    "LZ4ShiatsuError", "SecurityError", "FrameDecodeError", "RecoveryError",
]
