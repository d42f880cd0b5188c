"""
JSON recovery steps.

This module provides a modular pipeline for sanitizing text and repairing
damaged JSON spans. Each repair is a focused, single-responsibility step that
can be composed into a pipeline.
"""

from .base import PreprocessingStepBase
from .extractors import extract_json_span
from .normalizers import CharacterFilter, WhitespaceNormalizer
from .pipeline import PreprocessingPipeline
from .repairers import EndRepairer, StartRepairer, StringBodyRepairer, StructureFixer
from .sanitizers import TextSanitizer, sanitize

__all__ = [
    "PreprocessingPipeline",
    "PreprocessingStepBase",
    "extract_json_span",
    "TextSanitizer",
    "sanitize",
    "StartRepairer",
    "EndRepairer",
    "CharacterFilter",
    "StringBodyRepairer",
    "StructureFixer",
    "WhitespaceNormalizer",
]
