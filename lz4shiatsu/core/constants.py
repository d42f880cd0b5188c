"""
Common constants and patterns used across the lz4shiatsu library.
"""

# LZ4 frame magic number, read little-endian from the first four bytes
LZ4_FRAME_MAGIC = 0x184D2204
LZ4_MAGIC_BYTES = LZ4_FRAME_MAGIC.to_bytes(4, "little")

# Payloads must be strictly longer than the magic to be considered frames
MIN_FRAME_LENGTH = 4

DEFAULT_MAX_SKIP_OFFSET = 20
DEFAULT_MIN_COMPRESSION_RATIO = 5.0
DEFAULT_COMPRESSION_LEVEL = 1

# C0 controls except tab/newline/carriage return, DEL, and C1 controls
CONTROL_CHAR_PATTERN = r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F-\x9F]"

# A brace, then a run of characters outside the JSON token set, then a brace
CORRUPTED_STRUCTURE_PATTERN = r'[{}].*[^\w\s",:{}\[\].-]+.*[{}]'

REPLACEMENT_CHAR = "\ufffd"

# Characters allowed inside repaired string bodies (besides \w and \s)
STRING_BODY_EXTRA_CHARS = frozenset('",:{}[].-')

# Tails tried, in order, when repairing excess closing brackets
END_REPAIR_TAILS = ("}", "]", "]}", "}}")

DECOMPRESS_FAILED_MESSAGE = "All decompression methods failed"
