"""
Recovery pipeline for composable JSON repair steps.

This module implements the pipeline pattern so the repair steps applied to a
JSON span can be composed and toggled through configuration.
"""

import logging
from typing import Optional

from ..core.interfaces import PreprocessingStep
from ..utils.config import RepairSettings
from .normalizers import CharacterFilter, WhitespaceNormalizer
from .repairers import EndRepairer, StartRepairer, StringBodyRepairer, StructureFixer

logger = logging.getLogger(__name__)


class PreprocessingPipeline:
    """Manages a sequence of repair steps applied to a JSON span."""

    def __init__(self, steps: Optional[list[PreprocessingStep]] = None):
        self.steps = steps or []

    def add_step(self, step: PreprocessingStep) -> None:
        """Add a repair step to the pipeline."""
        self.steps.append(step)

    def process(self, text: str, config: Optional[RepairSettings] = None) -> str:
        """Apply all applicable steps to the text."""
        if config is None:
            config = RepairSettings()

        result = text
        for step in self.steps:
            if not step.should_apply(config):
                continue
            repaired = step.process(result, config)
            if repaired != result:
                logger.debug(
                    "%s changed span (%d -> %d chars)",
                    type(step).__name__,
                    len(result),
                    len(repaired),
                )
            result = repaired
        return result

    @classmethod
    def create_recovery_pipeline(cls) -> "PreprocessingPipeline":
        """Create the standard recovery pipeline."""
        pipeline = cls()

        # Boundary repair first, while the damage is still recognizable
        pipeline.add_step(StartRepairer())
        pipeline.add_step(EndRepairer())

        # Character-level cleanup
        pipeline.add_step(CharacterFilter())
        pipeline.add_step(StringBodyRepairer())

        pipeline.add_step(StructureFixer())

        # Final cleanup
        pipeline.add_step(WhitespaceNormalizer())

        return pipeline
