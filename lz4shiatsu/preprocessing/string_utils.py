"""
Utility functions for string-literal aware scanning.

Repair steps share these helpers to tell structural characters apart from
characters that sit inside a double-quoted JSON string.
"""

class StringStateTracker:
    """Helper class to track double-quoted string state during scanning."""

    def __init__(self) -> None:
        self.in_string = False
        self.escaped = False

    def update_state(self, char: str) -> bool:
        """
        Update string state based on the current character.

        Args:
            char: Current character

        Returns:
            True if the character belongs to a string literal, quotes included
        """
        if self.in_string:
            if self.escaped:
                self.escaped = False
            elif char == "\\":
                self.escaped = True
            elif char == '"':
                self.in_string = False
            return True

        if char == '"':
            self.in_string = True
            return True

        return False


def next_non_space(text: str, start: int) -> int:
    """Return the index of the first non-whitespace character at or after start."""
    i = start
    while i < len(text) and text[i].isspace():
        i += 1
    return i
