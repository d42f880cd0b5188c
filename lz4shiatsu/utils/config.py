"""
Configuration and limits for lz4shiatsu payload processing.

This module defines size limits, compression output settings, corruption
detection heuristics and repair toggles for the payload processor.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from ..core.constants import (
    CONTROL_CHAR_PATTERN,
    CORRUPTED_STRUCTURE_PATTERN,
    DEFAULT_COMPRESSION_LEVEL,
    DEFAULT_MAX_SKIP_OFFSET,
    DEFAULT_MIN_COMPRESSION_RATIO,
)


class OutputFormat(Enum):
    """Encoding used for successfully compressed output."""

    BUFFER = "buffer"  # Raw bytes
    BASE64 = "base64"  # Base64 text
    HEX = "hex"  # Lowercase hex text

    @classmethod
    def from_value(cls, value: Any) -> "OutputFormat":
        """Resolve an OutputFormat from an enum member or its string value."""
        if isinstance(value, cls):
            return value
        if value is None or value == "":
            return cls.BUFFER
        try:
            return cls(str(value).lower())
        except ValueError as e:
            raise ValueError(
                f"Unknown output format {value!r}, expected one of "
                f"{[fmt.value for fmt in cls]}"
            ) from e


@dataclass
class SizeLimits:
    """Input size limits."""
    max_input_size: int = 64 * 1024 * 1024


@dataclass
class ParseLimits:
    """Resource limits applied to each payload."""

    size_limits: Optional[SizeLimits] = None

    def __init__(
        self,
        *,
        size_limits: Optional[SizeLimits] = None,
        **legacy_args: Any,  # Flat keyword arguments
    ):
        if size_limits is not None:
            self.size_limits = size_limits
        elif "max_input_size" in legacy_args:
            self.size_limits = SizeLimits(
                max_input_size=legacy_args["max_input_size"]
            )
        else:
            self.size_limits = SizeLimits()

        if self.size_limits.max_input_size <= 0:
            raise ValueError("max_input_size must be positive")

    @property
    def max_input_size(self) -> int:
        """Maximum payload size in bytes (or characters for text)."""
        assert self.size_limits is not None
        return self.size_limits.max_input_size


@dataclass
class CompressionSettings:
    """Settings for the compression path."""
    output_format: OutputFormat = OutputFormat.BUFFER
    compression_level: int = DEFAULT_COMPRESSION_LEVEL  # Reserved
    min_compression_ratio: float = DEFAULT_MIN_COMPRESSION_RATIO


@dataclass
class DetectionSettings:
    """Heuristics used to flag text as corrupted."""
    control_char_pattern: str = CONTROL_CHAR_PATTERN
    corrupted_structure_pattern: str = CORRUPTED_STRUCTURE_PATTERN
    detect_unbalanced_structure: bool = True


@dataclass
class FrameSettings:
    """Settings for LZ4 frame decoding."""
    max_skip_offset: int = DEFAULT_MAX_SKIP_OFFSET


@dataclass
class RepairSettings:
    """Toggles for individual JSON recovery steps."""
    fix_start: bool = True
    fix_end: bool = True
    strip_invalid_characters: bool = True
    repair_string_bodies: bool = True
    fix_structure: bool = True


@dataclass
class ProcessorConfig:
    """Configuration options for the payload processor."""

    limits: Optional[ParseLimits] = None
    compression: Optional[CompressionSettings] = None
    detection: Optional[DetectionSettings] = None
    frame: Optional[FrameSettings] = None
    repair: Optional[RepairSettings] = None
    logger: Optional[logging.Logger] = None

    def __init__(
        self,
        *,
        limits: Optional[ParseLimits] = None,
        compression: Optional[CompressionSettings] = None,
        detection: Optional[DetectionSettings] = None,
        frame: Optional[FrameSettings] = None,
        repair: Optional[RepairSettings] = None,
        logger: Optional[logging.Logger] = None,
        **config_options: Any,  # Flat keyword arguments
    ):
        self.limits = limits or ParseLimits(**{
            k: v for k, v in config_options.items() if k == "max_input_size"
        })
        self.logger = logger

        if compression is not None:
            self.compression = compression
        else:
            self.compression = CompressionSettings(
                output_format=OutputFormat.from_value(
                    config_options.get("output_format", OutputFormat.BUFFER)
                ),
                compression_level=config_options.get(
                    "compression_level", DEFAULT_COMPRESSION_LEVEL
                ),
                min_compression_ratio=config_options.get(
                    "min_compression_ratio", DEFAULT_MIN_COMPRESSION_RATIO
                ),
            )

        if detection is not None:
            self.detection = detection
        else:
            self.detection = DetectionSettings(
                control_char_pattern=config_options.get(
                    "control_char_pattern", CONTROL_CHAR_PATTERN
                ),
                corrupted_structure_pattern=config_options.get(
                    "corrupted_structure_pattern", CORRUPTED_STRUCTURE_PATTERN
                ),
                detect_unbalanced_structure=config_options.get(
                    "detect_unbalanced_structure", True
                ),
            )

        if frame is not None:
            self.frame = frame
        else:
            self.frame = FrameSettings(
                max_skip_offset=config_options.get(
                    "max_skip_offset", DEFAULT_MAX_SKIP_OFFSET
                ),
            )

        self.repair = repair or RepairSettings()

        if self.frame.max_skip_offset < 0:
            raise ValueError("max_skip_offset must not be negative")
        if not 0 <= self.compression.min_compression_ratio <= 100:
            raise ValueError("min_compression_ratio must be between 0 and 100")

    @classmethod
    def from_node_config(cls, node_config: dict[str, Any]) -> "ProcessorConfig":
        """Create configuration from a host pipeline node definition.

        The host uses camelCase keys (``outputFormat``, ``compressionLevel``);
        missing keys fall back to defaults.
        """
        return cls(
            output_format=node_config.get("outputFormat") or OutputFormat.BUFFER,
            compression_level=(
                node_config.get("compressionLevel") or DEFAULT_COMPRESSION_LEVEL
            ),
        )

    @property
    def output_format(self) -> OutputFormat:
        """Encoding for successfully compressed output."""
        assert self.compression is not None
        return self.compression.output_format

    @property
    def compression_level(self) -> int:
        """Configured compression level (reserved)."""
        assert self.compression is not None
        return self.compression.compression_level

    @property
    def min_compression_ratio(self) -> float:
        """Minimum saving in percent for compressed output to be emitted."""
        assert self.compression is not None
        return self.compression.min_compression_ratio

    @property
    def max_skip_offset(self) -> int:
        """Highest byte offset tried when a frame fails to decode."""
        assert self.frame is not None
        return self.frame.max_skip_offset

    @property
    def max_input_size(self) -> int:
        """Maximum payload size."""
        assert self.limits is not None
        return self.limits.max_input_size
