"""
Text sanitization.

Strips control characters and decoder replacement characters from arbitrary
text and normalizes its whitespace. Sanitization is total: any string goes
in, a string comes out.
"""

import re
from typing import Union

from ..core.constants import CONTROL_CHAR_PATTERN, REPLACEMENT_CHAR

_CONTROL_CHARS = re.compile(CONTROL_CHAR_PATTERN)
_WHITESPACE_RUN = re.compile(r"\s+")


class TextSanitizer:
    """Removes control/invalid characters and collapses whitespace."""

    def __init__(self, control_char_pattern: str = CONTROL_CHAR_PATTERN):
        self._control_chars = (
            _CONTROL_CHARS
            if control_char_pattern == CONTROL_CHAR_PATTERN
            else re.compile(control_char_pattern)
        )

    def sanitize(self, text: Union[str, bytes]) -> str:
        """Return a cleaned, single-line copy of text."""
        if isinstance(text, (bytes, bytearray)):
            text = bytes(text).decode("utf-8", errors="replace")

        cleaned = self._control_chars.sub("", text)
        cleaned = cleaned.replace(REPLACEMENT_CHAR, "")
        cleaned = _WHITESPACE_RUN.sub(" ", cleaned)
        return cleaned.strip()


_default_sanitizer = TextSanitizer()


def sanitize(text: Union[str, bytes]) -> str:
    """Sanitize text with the default control character set."""
    return _default_sanitizer.sanitize(text)
