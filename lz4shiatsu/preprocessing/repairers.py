"""
Structure repair steps.

This module contains recovery steps that repair damaged JSON structure:
junk after the opening brace, excess or junk closers at the end, corrupted
string bodies, trailing commas and missing separators between objects.
"""

import re
from typing import Callable, Optional

from ..core.constants import END_REPAIR_TAILS, STRING_BODY_EXTRA_CHARS
from ..core.validator import StructuralValidator
from ..utils.config import RepairSettings
from .base import PreprocessingStepBase
from .string_utils import StringStateTracker, next_non_space

# Valid characters following a backslash inside a JSON string
_JSON_ESCAPES = frozenset('"\\/bfnrtu')


def looks_like_json(text: Optional[str]) -> bool:
    """Quick check that text resembles a JSON object with key/value pairs."""
    if not text or not text.startswith("{") or '"' not in text:
        return False

    has_key_value_pairs = re.search(r'"[^"]*"\s*:\s*[^,}]+', text) is not None
    has_valid_ending = text.strip().endswith(("}", "]"))
    return has_key_value_pairs and has_valid_ending


class StartRepairer(PreprocessingStepBase):
    """Removes junk between the opening brace and the first quoted key."""

    setting = "fix_start"

    _WELL_FORMED = re.compile(r'^{\s*"')

    # { + junk + {"   /   {{ or {{{   /   { + space + junk + {"
    _PATTERNS = (
        re.compile(r'^{\s*([^"{}]+)({.*)', re.DOTALL),
        re.compile(r"^{+(.*)$", re.DOTALL),
        re.compile(r'^{\s+([^"{}]+)({.*)', re.DOTALL),
    )

    def process(self, text: str, config: RepairSettings) -> str:
        if self._WELL_FORMED.match(text):
            return text

        for pattern in self._PATTERNS:
            match = pattern.match(text)
            if not match:
                continue

            groups = match.groups()
            remaining = groups[1] if len(groups) > 1 and groups[1] else groups[0]

            for candidate in (remaining, "{" + remaining):
                if (
                    candidate.startswith("{")
                    and '"' in candidate
                    and looks_like_json(candidate)
                ):
                    return candidate

        return text


class EndRepairer(PreprocessingStepBase):
    """Replaces excess or junk-laden closing brackets with a balanced tail."""

    setting = "fix_end"

    # ...} + junk + }
    _JUNK_BEFORE_CLOSERS = re.compile(r'^(.*["\]}])([^"\]}\s]+)}+$', re.DOTALL)

    def __init__(
        self,
        validator: Optional[Callable[[str], bool]] = None,
        tails: tuple[str, ...] = END_REPAIR_TAILS,
    ):
        self.validator = validator or StructuralValidator()
        self.tails = tails

    def process(self, text: str, config: RepairSettings) -> str:
        if self.validator(text):
            return text

        for main in (self._strip_excess_closers(text), self._strip_junk_tail(text)):
            if not main:
                continue
            repaired = self._first_valid(main)
            if repaired is not None:
                return repaired

        return text

    @staticmethod
    def _strip_excess_closers(text: str) -> Optional[str]:
        """Return the text before a trailing run of two or more closers."""
        stripped = text.rstrip("}]")
        if len(text) - len(stripped) < 2:
            return None
        return stripped.rstrip()

    def _strip_junk_tail(self, text: str) -> Optional[str]:
        """Return the text before junk characters that precede the final braces."""
        match = self._JUNK_BEFORE_CLOSERS.match(text)
        return match.group(1) if match else None

    def _first_valid(self, main: str) -> Optional[str]:
        for tail in self.tails:
            candidate = main + tail
            if self.validator(candidate):
                return candidate
        return None


class StringBodyRepairer(PreprocessingStepBase):
    """Deletes corrupted characters from inside quoted strings."""

    setting = "repair_string_bodies"

    def process(self, text: str, config: RepairSettings) -> str:
        result = []
        in_string = False
        i = 0

        while i < len(text):
            char = text[i]

            if not in_string:
                if char == '"':
                    in_string = True
                result.append(char)
                i += 1
                continue

            if char == '"':
                in_string = False
                result.append(char)
            elif char == "\\":
                # Keep valid escapes intact, drop stray backslashes
                if i + 1 < len(text) and text[i + 1] in _JSON_ESCAPES:
                    result.append(text[i : i + 2])
                    i += 2
                    continue
            elif self._is_allowed(char):
                result.append(char)

            i += 1

        return "".join(result)

    @staticmethod
    def _is_allowed(char: str) -> bool:
        return char.isalnum() or char == "_" or char.isspace() or (
            char in STRING_BODY_EXTRA_CHARS
        )


class StructureFixer(PreprocessingStepBase):
    """Removes trailing commas and separates adjacent sibling objects."""

    setting = "fix_structure"

    def process(self, text: str, config: RepairSettings) -> str:
        result = []
        tracker = StringStateTracker()
        i = 0

        while i < len(text):
            char = text[i]

            if tracker.update_state(char):
                result.append(char)
                i += 1
                continue

            if char == ",":
                j = next_non_space(text, i + 1)
                if j < len(text) and text[j] in "}]":
                    # Trailing comma: drop it together with the gap
                    i = j
                    continue
            elif char == "}":
                j = next_non_space(text, i + 1)
                if j < len(text) and text[j] == "{":
                    result.append("}, ")
                    i = j
                    continue

            result.append(char)
            i += 1

        return "".join(result)
