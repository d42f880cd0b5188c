"""
Test cases for the payload processor.

Tests focus on path selection, metadata, fallbacks and message handling.
"""

import base64
import logging
import unittest
from unittest.mock import patch

import lz4.frame

from lz4shiatsu.core.constants import LZ4_MAGIC_BYTES
from lz4shiatsu.core.processor import (
    PayloadProcessor,
    compression_ratio,
    encode_output,
    is_empty_payload,
    payload_size,
)
from lz4shiatsu.core.results import Operation, StatusLevel
from lz4shiatsu.security.exceptions import RecoveryError, SecurityError
from lz4shiatsu.utils.config import OutputFormat, ProcessorConfig

COMPRESSIBLE = {"readings": [{"sensor": "temp", "value": 21.5}] * 50}


class TestHelpers(unittest.TestCase):
    """Test module-level helper functions."""

    def test_empty_payloads(self):
        """None and empty sequences are empty; other falsy values are not."""
        for payload in (None, "", b"", bytearray()):
            self.assertTrue(is_empty_payload(payload), repr(payload))
        for payload in (0, False, {}, [], " ", b"\x00"):
            self.assertFalse(is_empty_payload(payload), repr(payload))

    def test_encode_output(self):
        """Compressed bytes are rendered in each output format."""
        data = b"\x04\x22\x4d\x18\xff"
        self.assertEqual(encode_output(data, OutputFormat.BUFFER), data)
        self.assertEqual(encode_output(data, OutputFormat.BASE64), "BCJNGP8=")
        self.assertEqual(encode_output(data, OutputFormat.HEX), "04224d18ff")

    def test_compression_ratio(self):
        """The ratio is a percentage rounded to two decimals."""
        self.assertEqual(compression_ratio(200, 117), 41.5)
        self.assertEqual(compression_ratio(3, 2), 33.33)
        self.assertEqual(compression_ratio(10, 20), -100.0)
        self.assertEqual(compression_ratio(0, 5), 0.0)

    def test_payload_size(self):
        """Raw sizes are measured without classifying the payload."""
        self.assertEqual(payload_size("héllo"), 5)
        self.assertEqual(payload_size(b"\x00" * 7), 7)
        self.assertEqual(payload_size(bytearray(3)), 3)
        self.assertEqual(payload_size(memoryview(b"abcd")), 4)
        self.assertEqual(payload_size({"a": [1, 2]}), len(b'{"a":[1,2]}'))
        self.assertEqual(payload_size(False), 5)


class TestCleanupPath(unittest.TestCase):
    """Test processing of corrupted text."""

    def setUp(self):
        self.processor = PayloadProcessor()

    def test_corrupted_json_recovered(self):
        """Damaged JSON text is repaired and parsed."""
        result = self.processor.process('{garbage{"a": 1, "b": 2,}}}')
        self.assertEqual(result.payload, {"a": 1, "b": 2})
        self.assertEqual(result.operation, Operation.CLEANUP)
        self.assertEqual(result.original_size, 27)
        self.assertEqual(result.status.level, StatusLevel.RECOVERED)
        self.assertEqual(result.status.text, "cleaned data")

    def test_control_bytes_removed(self):
        """Control characters interleaved in JSON are stripped."""
        result = self.processor.process('{"id": 7,\x00 "name": "pump\x1f-3"}')
        self.assertEqual(result.payload, {"id": 7, "name": "pump-3"})
        self.assertEqual(result.operation, Operation.CLEANUP)

    def test_unrecoverable_text_returned_cleaned(self):
        """Text without JSON comes back sanitized."""
        result = self.processor.process("status\x00 ok\x07  now")
        self.assertEqual(result.payload, "status ok now")
        self.assertEqual(result.operation, Operation.CLEANUP)

    def test_chain_fault_reports_cleanup_failed(self):
        """A faulting recovery chain yields cleanup_failed with the input text."""
        with patch.object(
            self.processor.chain, "run", side_effect=RecoveryError("Recovery chain failed")
        ):
            result = self.processor.process("bad\x00text")
        self.assertEqual(result.operation, Operation.CLEANUP_FAILED)
        self.assertEqual(result.payload, "bad\x00text")
        self.assertEqual(result.error, "Recovery chain failed")
        self.assertEqual(result.status.level, StatusLevel.WARNING)


class TestDecompressPath(unittest.TestCase):
    """Test processing of LZ4 frames."""

    def setUp(self):
        self.processor = PayloadProcessor()

    def test_frame_decompressed_and_parsed(self):
        """A frame holding JSON is decompressed and parsed."""
        frame = lz4.frame.compress(b'{"a": 1, "b": [1, 2]}')
        result = self.processor.process(frame)
        self.assertEqual(result.payload, {"a": 1, "b": [1, 2]})
        self.assertEqual(result.operation, Operation.DECOMPRESS)
        self.assertEqual(result.original_size, len(frame))
        self.assertEqual(result.decompressed_size, 21)
        self.assertEqual(result.output_format, "decompressed")
        self.assertEqual(
            result.status.text, f"decompressed ({len(frame)}→21)"
        )

    def test_frame_with_damaged_json(self):
        """Decompressed text goes through the same recovery chain."""
        frame = lz4.frame.compress(b'{\x01"ok": true,}}')
        result = self.processor.process(frame)
        self.assertEqual(result.payload, {"ok": True})

    def test_frame_with_plain_text(self):
        """Decompressed non-JSON text is returned sanitized."""
        frame = lz4.frame.compress(b"hello\n\n  world\xff")
        result = self.processor.process(frame)
        self.assertEqual(result.payload, "hello world")

    def test_base64_frame(self):
        """Base64-wrapped frames are decompressed."""
        frame = lz4.frame.compress(b'{"k": "v"}')
        result = self.processor.process(base64.b64encode(frame).decode("ascii"))
        self.assertEqual(result.payload, {"k": "v"})
        self.assertEqual(result.operation, Operation.DECOMPRESS)
        self.assertEqual(result.original_size, len(frame))

    def test_duplicated_magic_recovered(self):
        """A frame behind a duplicated magic number is recovered."""
        frame = lz4.frame.compress(b'{"k": 1}')
        result = self.processor.process(LZ4_MAGIC_BYTES + frame)
        self.assertEqual(result.payload, {"k": 1})
        self.assertEqual(result.operation, Operation.DECOMPRESS)

    def test_decompress_failed(self):
        """Undecodable frames pass the original bytes through with a warning."""
        data = LZ4_MAGIC_BYTES + b"not really a frame at all"
        with self.assertLogs("lz4shiatsu.core.processor", level="WARNING") as logs:
            result = self.processor.process(data)
        self.assertEqual(result.payload, data)
        self.assertEqual(result.operation, Operation.DECOMPRESS_FAILED)
        self.assertEqual(result.error, "All decompression methods failed")
        self.assertEqual(result.status.level, StatusLevel.WARNING)
        self.assertEqual(result.status.text, "decompress failed")
        self.assertIn("decompression methods failed", logs.output[0])

    def test_decompressed_size_limit(self):
        """Oversized decompressed output violates the limit."""
        processor = PayloadProcessor(ProcessorConfig(max_input_size=500))
        frame = lz4.frame.compress(b"a" * 1000)
        with self.assertRaises(SecurityError):
            processor.process(frame)

    def test_decompression_stops_past_limit(self):
        """A highly compressible frame is never inflated beyond the limit."""
        processor = PayloadProcessor(ProcessorConfig(max_input_size=1000))
        frame = lz4.frame.compress(b"a" * 200_000)
        self.assertLess(len(frame), 1000)

        validator = processor.limit_validator
        with patch.object(
            validator, "validate_output_size", wraps=validator.validate_output_size
        ) as check:
            with self.assertRaises(SecurityError):
                processor.process(frame)

        (checked,), _ = check.call_args
        self.assertEqual(len(checked), 1001)

    def test_output_at_limit_accepted(self):
        """Output exactly at the limit is within bounds."""
        processor = PayloadProcessor(ProcessorConfig(max_input_size=500))
        result = processor.process(lz4.frame.compress(b"a" * 500))
        self.assertEqual(result.operation, Operation.DECOMPRESS)
        self.assertEqual(result.decompressed_size, 500)


class TestInputLimits(unittest.TestCase):
    """Test that size limits apply before any inspection of the payload."""

    def test_oversized_text_rejected_before_classification(self):
        processor = PayloadProcessor(ProcessorConfig(max_input_size=100))
        with patch.object(processor.sniffer, "classify") as classify:
            with self.assertRaises(SecurityError) as ctx:
                processor.process("{" * 6000)

        classify.assert_not_called()
        self.assertIn("Input size 6000 exceeds limit 100", str(ctx.exception))

    def test_oversized_structured_value_rejected(self):
        processor = PayloadProcessor(ProcessorConfig(max_input_size=100))
        with patch.object(processor.sniffer, "classify") as classify:
            with self.assertRaises(SecurityError):
                processor.process({"items": ["x" * 20] * 10})

        classify.assert_not_called()

    def test_payload_at_limit_is_classified(self):
        processor = PayloadProcessor(ProcessorConfig(max_input_size=100))
        result = processor.process("a" * 100)
        self.assertIsNotNone(result)


class TestCompressPath(unittest.TestCase):
    """Test compression of plain payloads."""

    def test_structured_value_compressed(self):
        """A compressible object is emitted as an LZ4 frame."""
        result = PayloadProcessor().process(COMPRESSIBLE)
        self.assertEqual(result.operation, Operation.COMPRESS)
        self.assertIsInstance(result.payload, bytes)
        self.assertTrue(result.payload.startswith(LZ4_MAGIC_BYTES))
        self.assertGreater(result.original_size, result.compressed_size)
        self.assertEqual(result.compressed_size, len(result.payload))
        self.assertGreaterEqual(result.compression_ratio, 5.0)
        self.assertEqual(result.output_format, "buffer")
        self.assertEqual(result.status.level, StatusLevel.SUCCESS)
        self.assertTrue(result.status.text.endswith(
            f"% saved ({result.original_size}→{result.compressed_size})"
        ))

    def test_base64_output(self):
        """Compressed output can be base64 text."""
        processor = PayloadProcessor(ProcessorConfig(output_format="base64"))
        result = processor.process("abc" * 200)
        self.assertEqual(result.output_format, "base64")
        frame = base64.b64decode(result.payload)
        self.assertEqual(lz4.frame.decompress(frame), b"abc" * 200)

    def test_hex_output(self):
        """Compressed output can be hex text."""
        processor = PayloadProcessor(ProcessorConfig(output_format=OutputFormat.HEX))
        result = processor.process(b"xyz" * 200)
        self.assertEqual(result.output_format, "hex")
        self.assertEqual(lz4.frame.decompress(bytes.fromhex(result.payload)), b"xyz" * 200)

    def test_poor_compression_cleans_instead(self):
        """Small payloads are not worth compressing and come back cleaned."""
        result = PayloadProcessor().process("hello   world")
        self.assertEqual(result.operation, Operation.CLEANED)
        self.assertEqual(result.payload, "hello world")
        self.assertEqual(result.original_size, 13)
        self.assertIsNone(result.compressed_size)
        self.assertEqual(result.status.text, "cleaned data")

    def test_small_json_text_parsed(self):
        """Well-formed JSON too small to compress is returned parsed."""
        result = PayloadProcessor().process('{"a": 1}')
        self.assertEqual(result.operation, Operation.CLEANED)
        self.assertEqual(result.payload, {"a": 1})

    def test_threshold_is_configurable(self):
        """Raising the threshold turns compression off for modest savings."""
        processor = PayloadProcessor(ProcessorConfig(min_compression_ratio=100))
        result = processor.process(COMPRESSIBLE)
        self.assertEqual(result.operation, Operation.CLEANED)
        self.assertEqual(result.payload, COMPRESSIBLE)

    def test_falsy_scalar_is_processed(self):
        """Zero is a real payload."""
        result = PayloadProcessor().process(0)
        self.assertEqual(result.operation, Operation.CLEANED)
        self.assertEqual(result.payload, 0)


class TestProcessMessage(unittest.TestCase):
    """Test message-level handling."""

    def setUp(self):
        self.processor = PayloadProcessor()

    def test_outbound_message(self):
        """The outbound message copies the inbound one and adds metadata."""
        msg = {"payload": '{"a": 1,}}', "topic": "sensors", "_msgid": "m1"}
        outcome = self.processor.process_message(msg)
        self.assertTrue(outcome.should_send)
        self.assertEqual(outcome.message["payload"], {"a": 1})
        self.assertEqual(outcome.message["topic"], "sensors")
        self.assertEqual(outcome.message["_msgid"], "m1")
        self.assertEqual(
            outcome.message["lz4"], {"operation": "cleanup", "originalSize": 10}
        )
        self.assertEqual(msg["payload"], '{"a": 1,}}')

    def test_empty_payload(self):
        """Empty payloads produce no message and a warning."""
        for msg in ({}, {"payload": None}, {"payload": ""}, {"payload": b""}):
            with self.assertLogs("lz4shiatsu.core.processor", level="WARNING"):
                outcome = self.processor.process_message(msg)
            self.assertFalse(outcome.should_send)
            self.assertEqual(outcome.status.level, StatusLevel.WARNING)
            self.assertEqual(outcome.status.text, "no payload")

    def test_fault_is_message_scoped(self):
        """Unexpected faults are logged and suppress the send."""
        processor = PayloadProcessor(ProcessorConfig(max_input_size=10))
        with self.assertLogs("lz4shiatsu.core.processor", level="ERROR") as logs:
            outcome = processor.process_message({"payload": "x" * 100})
        self.assertIsNone(outcome.message)
        self.assertEqual(outcome.status.level, StatusLevel.FAILURE)
        self.assertEqual(outcome.status.text, "operation failed")
        self.assertIn("exceeds limit", outcome.error)
        self.assertIn("LZ4 operation failed", logs.output[0])

    def test_injected_logger(self):
        """A logger supplied through configuration is used."""
        custom = logging.getLogger("tests.custom_processor_logger")
        processor = PayloadProcessor(ProcessorConfig(logger=custom))
        with self.assertLogs("tests.custom_processor_logger", level="WARNING"):
            processor.process(None)


if __name__ == "__main__":
    unittest.main()
