"""
Layered best-effort JSON parsing.

Parsing is an ordered chain of attempts. Each attempt is a pure function
returning ``(found, value)``; the chain stops at the first attempt that finds
a value. Unparseable text is not an error: the chain simply returns None.
"""

import json
import re
from typing import Any, Optional

from ..core.interfaces import ParseAttempt

_TRAILING_COMMA = re.compile(r",(\s*[}\]])")
_UNQUOTED_KEY = re.compile(r"([{,]\s*)([a-zA-Z_][a-zA-Z0-9_]*)\s*:")
_OBJECT_SPAN = re.compile(r"{.*}", re.DOTALL)


def _loads(text: str) -> tuple[bool, Any]:
    try:
        return True, json.loads(text)
    except (ValueError, RecursionError):
        return False, None


def strict_attempt(text: str) -> tuple[bool, Any]:
    """Parse the text exactly as given."""
    return _loads(text)


def lenient_attempt(text: str) -> tuple[bool, Any]:
    """Fix trailing commas, unquoted keys and single quotes, then parse."""
    fixed = _TRAILING_COMMA.sub(r"\1", text)
    fixed = _UNQUOTED_KEY.sub(r'\1"\2":', fixed)
    fixed = fixed.replace("'", '"').strip()
    return _loads(fixed)


def extraction_attempt(text: str) -> tuple[bool, Any]:
    """Parse only the outermost {...} span found in mixed content."""
    match = _OBJECT_SPAN.search(text)
    if not match:
        return False, None
    return _loads(match.group(0))


DEFAULT_ATTEMPTS: tuple[ParseAttempt, ...] = (
    strict_attempt,
    lenient_attempt,
    extraction_attempt,
)


class JsonParser:
    """Runs parse attempts in order until one yields a value."""

    def __init__(self, attempts: Optional[tuple[ParseAttempt, ...]] = None):
        self.attempts = attempts if attempts is not None else DEFAULT_ATTEMPTS

    def try_parse(self, text: Any) -> Any:
        """
        Parse text with progressively more lenient attempts.

        A literal JSON ``null`` is indistinguishable from failure and is
        reported as None.

        Returns:
            The parsed value, or None if every attempt failed
        """
        if not text or not isinstance(text, str):
            return None

        for attempt in self.attempts:
            found, value = attempt(text)
            if found and value is not None:
                return value

        return None


_default_parser = JsonParser()


def try_parse(text: Any) -> Any:
    """Parse text with the default attempt chain, returning None on failure."""
    return _default_parser.try_parse(text)
