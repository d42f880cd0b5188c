"""
lz4shiatsu Core Processing Engine.

This module provides format sniffing, LZ4 frame handling, structural
validation and the payload processor.
"""

from .constants import LZ4_FRAME_MAGIC, LZ4_MAGIC_BYTES
from .validator import StructuralValidator, is_valid_structure
from .sniffer import Classification, FormatSniffer, SniffResult, classify
from .frame import FrameDecoder, FrameDecodeResult, FrameEncoder, compress, decompress
from .results import NodeStatus, Operation, ProcessingOutcome, RecoveryResult, StatusLevel
from .processor import PayloadProcessor

__all__ = [
    'LZ4_FRAME_MAGIC', 'LZ4_MAGIC_BYTES',
    'StructuralValidator', 'is_valid_structure',
    'Classification', 'FormatSniffer', 'SniffResult', 'classify',
    'FrameDecoder', 'FrameDecodeResult', 'FrameEncoder', 'compress', 'decompress',
    'NodeStatus', 'Operation', 'ProcessingOutcome', 'RecoveryResult', 'StatusLevel',
    'PayloadProcessor'
]
