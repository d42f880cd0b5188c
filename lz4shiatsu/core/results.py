"""
Result and status types returned by the payload processor.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class Operation(Enum):
    """The processing path that actually ran for a payload."""

    COMPRESS = "compress"
    DECOMPRESS = "decompress"
    DECOMPRESS_FAILED = "decompress_failed"
    CLEANUP = "cleanup"
    CLEANUP_FAILED = "cleanup_failed"
    CLEANED = "cleaned"  # Compression skipped, payload cleaned instead


class StatusLevel(Enum):
    """Severity of a status update."""

    SUCCESS = "success"  # Ready, or compressed
    RECOVERED = "recovered"  # Output produced with caveats
    WARNING = "warning"
    FAILURE = "failure"


# (fill, shape) used by pipeline hosts to render a status indicator
_STATUS_STYLE = {
    StatusLevel.SUCCESS: ("green", "dot"),
    StatusLevel.RECOVERED: ("blue", "dot"),
    StatusLevel.WARNING: ("yellow", "ring"),
    StatusLevel.FAILURE: ("red", "ring"),
}


@dataclass(frozen=True)
class NodeStatus:
    """A status update for the host pipeline."""

    level: StatusLevel
    text: str

    @property
    def fill(self) -> str:
        return _STATUS_STYLE[self.level][0]

    @property
    def shape(self) -> str:
        return _STATUS_STYLE[self.level][1]

    def to_dict(self) -> dict[str, str]:
        """Render the status the way pipeline hosts expect it."""
        return {"fill": self.fill, "shape": self.shape, "text": self.text}


@dataclass
class RecoveryResult:
    """The outcome of processing one payload."""

    payload: Any
    operation: Operation
    original_size: Optional[int] = None
    decompressed_size: Optional[int] = None
    compressed_size: Optional[int] = None
    compression_ratio: Optional[float] = None
    output_format: Optional[str] = None
    error: Optional[str] = None
    status: Optional[NodeStatus] = field(default=None, compare=False)

    def to_metadata(self) -> dict[str, Any]:
        """Build the metadata record attached to outbound messages."""
        metadata: dict[str, Any] = {"operation": self.operation.value}
        optional_fields = (
            ("originalSize", self.original_size),
            ("decompressedSize", self.decompressed_size),
            ("compressedSize", self.compressed_size),
            (
                "compressionRatio",
                None
                if self.compression_ratio is None
                else f"{self.compression_ratio:.2f}%",
            ),
            ("format", self.output_format),
            ("error", self.error),
        )
        for key, value in optional_fields:
            if value is not None:
                metadata[key] = value
        return metadata


@dataclass
class ProcessingOutcome:
    """What the host should do with a message: send it (or not) and show a status."""

    message: Optional[dict[str, Any]]
    status: NodeStatus
    result: Optional[RecoveryResult] = None
    error: Optional[str] = None

    @property
    def should_send(self) -> bool:
        return self.message is not None
