"""
Structural validation of JSON-like text.

The validator only checks that braces and brackets outside string literals
balance. It does not check JSON grammar; it is a cheap filter applied to
repair candidates before they are accepted.
"""

from typing import Any


def is_valid_structure(text: Any) -> bool:
    """
    Check whether text looks like a balanced JSON object.

    Args:
        text: Candidate text

    Returns:
        True if the trimmed text starts with '{', ends with '}' or ']', and
        every brace and bracket outside strings is balanced
    """
    if not text or not isinstance(text, str):
        return False

    trimmed = text.strip()
    if not trimmed.startswith("{"):
        return False
    if not trimmed.endswith(("}", "]")):
        return False

    brace_count = 0
    bracket_count = 0
    in_string = False
    escaped = False

    for char in trimmed:
        if escaped:
            escaped = False
            continue

        if char == "\\":
            escaped = True
            continue

        if char == '"':
            in_string = not in_string
            continue

        if in_string:
            continue

        if char == "{":
            brace_count += 1
        elif char == "}":
            brace_count -= 1
        elif char == "[":
            bracket_count += 1
        elif char == "]":
            bracket_count -= 1

    return brace_count == 0 and bracket_count == 0


class StructuralValidator:
    """Callable wrapper so the validator can be injected into repair steps."""

    def is_valid(self, text: Any) -> bool:
        """Return True if text has balanced JSON structure."""
        return is_valid_structure(text)

    __call__ = is_valid
