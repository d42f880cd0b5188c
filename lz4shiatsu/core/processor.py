"""
Payload processor - sequences sniffing, decoding, recovery and compression.

Each call is independent: the classification is computed per payload and
passed along explicitly, and the processor holds nothing but read-only
configuration and stateless collaborators. One processor may therefore serve
concurrent calls.
"""

import base64
import logging
from collections.abc import Mapping
from typing import Any, Optional, Union

from ..preprocessing.sanitizers import TextSanitizer
from ..recovery.recoverer import JsonRecoverer, RecoveryChain
from ..security.exceptions import RecoveryError
from ..security.limits import LimitValidator
from ..utils.config import OutputFormat, ProcessorConfig
from .constants import DECOMPRESS_FAILED_MESSAGE
from .frame import FrameDecoder, FrameEncoder
from .results import (
    NodeStatus,
    Operation,
    ProcessingOutcome,
    RecoveryResult,
    StatusLevel,
)
from .sniffer import Classification, FormatSniffer, serialize_structured

NO_PAYLOAD_STATUS = NodeStatus(StatusLevel.WARNING, "no payload")
FAILED_STATUS = NodeStatus(StatusLevel.FAILURE, "operation failed")


def is_empty_payload(payload: Any) -> bool:
    """Whether a payload is absent or an empty string/byte sequence."""
    if payload is None:
        return True
    if isinstance(payload, (str, bytes, bytearray, memoryview)):
        return len(payload) == 0
    return False


def payload_size(payload: Any) -> int:
    """Size of a raw payload as received, before any classification."""
    if isinstance(payload, memoryview):
        return payload.nbytes
    if isinstance(payload, (str, bytes, bytearray)):
        return len(payload)
    return len(serialize_structured(payload))


def encode_output(data: bytes, output_format: OutputFormat) -> Union[bytes, str]:
    """Encode compressed bytes in the configured output format."""
    if output_format is OutputFormat.BASE64:
        return base64.b64encode(data).decode("ascii")
    if output_format is OutputFormat.HEX:
        return data.hex()
    return data


def compression_ratio(original_size: int, compressed_size: int) -> float:
    """Space saved by compression, in percent rounded to two decimals."""
    if original_size <= 0:
        return 0.0
    return round((original_size - compressed_size) / original_size * 100, 2)


class PayloadProcessor:
    """Classifies a payload and runs the matching processing path."""

    def __init__(self, config: Optional[ProcessorConfig] = None):
        self.config = config or ProcessorConfig()
        self.logger = self.config.logger or logging.getLogger(__name__)

        assert self.config.detection is not None
        self.sniffer = FormatSniffer(self.config.detection)
        self.decoder = FrameDecoder(self.config.max_skip_offset)
        self.encoder = FrameEncoder(self.config.compression_level)
        self.chain = RecoveryChain(
            sanitizer=TextSanitizer(self.config.detection.control_char_pattern),
            recoverer=JsonRecoverer(settings=self.config.repair),
        )
        self.limit_validator = LimitValidator(self.config.limits)

        self.logger.info(
            "PayloadProcessor initialized (output format: %s)",
            self.config.output_format.value,
        )

    def process(self, payload: Any) -> Optional[RecoveryResult]:
        """
        Process one payload.

        Returns:
            The result, or None when the payload is empty

        Raises:
            SecurityError: if the payload exceeds configured limits
        """
        if is_empty_payload(payload):
            self.logger.warning("No payload found in message")
            return None

        self.limit_validator.validate_input_size(payload_size(payload))
        sniffed = self.sniffer.classify(payload)

        if sniffed.classification is Classification.CORRUPTED_TEXT:
            assert isinstance(sniffed.data, str)
            return self._cleanup(sniffed.data)

        assert isinstance(sniffed.data, bytes)
        if sniffed.is_compressed:
            return self._decompress(sniffed.data)
        return self._compress(sniffed.data)

    def process_message(self, msg: Mapping[str, Any]) -> ProcessingOutcome:
        """
        Process an inbound message and build the outbound one.

        The outbound message is a copy of msg with the payload replaced and
        the metadata record stored under ``lz4``. Any unexpected fault is
        scoped to this message: it is logged and nothing is sent.
        """
        try:
            result = self.process(msg.get("payload"))
            if result is None:
                return ProcessingOutcome(None, NO_PAYLOAD_STATUS)

            outbound = dict(msg)
            outbound["payload"] = result.payload
            outbound["lz4"] = result.to_metadata()
            assert result.status is not None
            return ProcessingOutcome(outbound, result.status, result)
        except Exception as e:
            self.logger.error("LZ4 operation failed: %s", e)
            return ProcessingOutcome(None, FAILED_STATUS, error=str(e))

    def _recover(self, data: Union[str, bytes]) -> tuple[Any, Optional[str]]:
        """Run the recovery chain, falling back to the input on a fault."""
        try:
            return self.chain.run(data), None
        except RecoveryError as e:
            self.logger.warning("%s, returning input unchanged", e)
            if isinstance(data, bytes):
                data = data.decode("utf-8", errors="replace")
            return data, str(e)

    def _cleanup(self, text: str) -> RecoveryResult:
        payload, error = self._recover(text)
        if error is not None:
            return RecoveryResult(
                payload=payload,
                operation=Operation.CLEANUP_FAILED,
                original_size=len(text),
                error=error,
                status=NodeStatus(StatusLevel.WARNING, "cleanup failed"),
            )

        return RecoveryResult(
            payload=payload,
            operation=Operation.CLEANUP,
            original_size=len(text),
            status=NodeStatus(StatusLevel.RECOVERED, "cleaned data"),
        )

    def _decompress(self, data: bytes) -> RecoveryResult:
        decoded = self.decoder.decode(
            data, max_length=self.limit_validator.max_output_length
        )

        if not decoded.ok:
            self.logger.warning(
                "All LZ4 decompression methods failed, returning original data"
            )
            return RecoveryResult(
                payload=data,
                operation=Operation.DECOMPRESS_FAILED,
                original_size=len(data),
                error=DECOMPRESS_FAILED_MESSAGE,
                status=NodeStatus(StatusLevel.WARNING, "decompress failed"),
            )

        assert decoded.data is not None
        self.limit_validator.validate_output_size(decoded.data)
        text = decoded.data.decode("utf-8", errors="replace")
        payload, error = self._recover(text)

        return RecoveryResult(
            payload=payload,
            operation=Operation.DECOMPRESS,
            original_size=len(data),
            decompressed_size=len(decoded.data),
            output_format="decompressed",
            error=error,
            status=NodeStatus(
                StatusLevel.RECOVERED,
                f"decompressed ({len(data)}→{len(decoded.data)})",
            ),
        )

    def _compress(self, data: bytes) -> RecoveryResult:
        compressed = self.encoder.encode(data)
        original_size = len(data)
        compressed_size = len(compressed)
        ratio = compression_ratio(original_size, compressed_size)

        if ratio < self.config.min_compression_ratio:
            # Not worth compressing; hand back a cleaned original instead
            payload, error = self._recover(data.decode("utf-8", errors="replace"))
            return RecoveryResult(
                payload=payload,
                operation=Operation.CLEANED,
                original_size=original_size,
                error=error,
                status=NodeStatus(StatusLevel.RECOVERED, "cleaned data"),
            )

        output_format = self.config.output_format
        return RecoveryResult(
            payload=encode_output(compressed, output_format),
            operation=Operation.COMPRESS,
            original_size=original_size,
            compressed_size=compressed_size,
            compression_ratio=ratio,
            output_format=output_format.value,
            status=NodeStatus(
                StatusLevel.SUCCESS,
                f"{ratio:.2f}% saved ({original_size}→{compressed_size})",
            ),
        )
