"""
JSON span extraction.

Locates the JSON-like region of noisy text: everything from the first '{'
to the last '}'.
"""

from typing import Optional


def extract_json_span(text: str) -> Optional[str]:
    """
    Extract the span from the first '{' to the last '}' inclusive.

    Returns:
        The span, or None when no brace-delimited region exists
    """
    start = text.find("{")
    end = text.rfind("}")

    if start == -1 or end == -1 or start >= end:
        return None

    return text[start : end + 1]
