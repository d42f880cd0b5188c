"""
JSON text recovery and the best-effort recovery chain.

``JsonRecoverer`` cuts the JSON span out of noisy text and runs the repair
pipeline over it. ``RecoveryChain`` combines sanitizing, recovery and parsing
into the fallback sequence used by every processing path:

    parsed recovered text -> parsed sanitized text -> recovered text -> sanitized text
"""

import logging
import re
from typing import Any, Optional, Union

from ..preprocessing.extractors import extract_json_span
from ..preprocessing.pipeline import PreprocessingPipeline
from ..preprocessing.sanitizers import TextSanitizer
from ..security.exceptions import RecoveryError
from ..utils.config import RepairSettings
from .strategies import JsonParser

logger = logging.getLogger(__name__)


class JsonRecoverer:
    """Extracts and repairs the JSON-like region of a text."""

    def __init__(
        self,
        pipeline: Optional[PreprocessingPipeline] = None,
        settings: Optional[RepairSettings] = None,
    ):
        self.pipeline = pipeline or PreprocessingPipeline.create_recovery_pipeline()
        self.settings = settings or RepairSettings()

    def recover(self, text: Any) -> str:
        """
        Repair the JSON span of text.

        Text without a '{' ... '}' span is returned unchanged, as is the
        input when a repair step fails.
        """
        if not isinstance(text, str):
            return "" if text is None else str(text)

        try:
            span = extract_json_span(text)
            if span is None:
                return text
            return self.pipeline.process(span, self.settings)
        except (re.error, ValueError, TypeError, IndexError, RecursionError) as e:
            logger.debug("JSON recovery failed, keeping original text: %s", e)
            return text


class RecoveryChain:
    """Sanitize, recover and parse a payload with graceful degradation."""

    def __init__(
        self,
        sanitizer: Optional[TextSanitizer] = None,
        recoverer: Optional[JsonRecoverer] = None,
        parser: Optional[JsonParser] = None,
    ):
        self.sanitizer = sanitizer or TextSanitizer()
        self.recoverer = recoverer or JsonRecoverer()
        self.parser = parser or JsonParser()

    def run(self, data: Union[str, bytes]) -> Any:
        """
        Return the best available form of data.

        Raises:
            RecoveryError: if a stage faults unexpectedly
        """
        try:
            clean_text = self.sanitizer.sanitize(data)
            recovered_text = self.recoverer.recover(clean_text)

            for candidate in (recovered_text, clean_text):
                parsed = self.parser.try_parse(candidate)
                if parsed is not None:
                    return parsed

            return recovered_text or clean_text
        except Exception as e:
            raise RecoveryError("Recovery chain failed", cause=e) from e
