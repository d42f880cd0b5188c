"""
Recovery step base class.

A recovery step rewrites one aspect of a damaged JSON span (its opening,
its closing brackets, stray characters, string bodies) and leaves the rest
alone. Steps are toggled by a boolean flag on ``RepairSettings``; a step names
its flag in ``setting`` and is always applied when it has none.
"""

from typing import Optional

from ..utils.config import RepairSettings


class PreprocessingStepBase:
    """Base class for JSON span recovery steps."""

    # Name of the RepairSettings flag that enables this step
    setting: Optional[str] = None

    @property
    def name(self) -> str:
        return type(self).__name__

    def should_apply(self, config: RepairSettings) -> bool:
        if self.setting is None:
            return True
        return bool(getattr(config, self.setting))

    def process(self, text: str, _config: RepairSettings) -> str:
        """Return the repaired span. Must be implemented by subclasses."""
        raise NotImplementedError(f"{self.name} must implement process()")

    def __repr__(self) -> str:
        if self.setting is None:
            return f"{self.name}()"
        return f"{self.name}(setting={self.setting!r})"
