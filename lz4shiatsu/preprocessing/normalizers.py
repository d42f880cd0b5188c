"""
Text normalization steps.

This module contains recovery steps that normalize the character set and
whitespace of a JSON span.
"""

import re

from ..utils.config import RepairSettings
from .base import PreprocessingStepBase


class CharacterFilter(PreprocessingStepBase):
    """Drops everything except printable ASCII, whitespace and JSON punctuation."""

    setting = "strip_invalid_characters"

    _DISALLOWED = re.compile(r'[^\x20-\x7E\s{}\[\]":,.-]')

    def process(self, text: str, config: RepairSettings) -> str:
        return self._DISALLOWED.sub("", text)


class WhitespaceNormalizer(PreprocessingStepBase):
    """Collapses whitespace runs to a single space and trims."""

    def process(self, text: str, config: RepairSettings) -> str:
        return re.sub(r"\s+", " ", text).strip()
