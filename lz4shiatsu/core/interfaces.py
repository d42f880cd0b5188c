"""
Core interfaces and protocols for the payload processing system.

This module defines the contracts that processing components implement,
enabling composition of repair steps and parse attempts.
"""

from typing import TYPE_CHECKING, Any, Optional, Protocol

if TYPE_CHECKING:
    from .results import NodeStatus


class PreprocessingStep(Protocol):
    """Protocol for steps in the JSON recovery pipeline."""

    def process(self, text: str, config: Any) -> str:
        """Process the input text according to this step."""
        ...

    def should_apply(self, config: Any) -> bool:
        """Determine if this step should be applied given the configuration."""
        ...


class ParseAttempt(Protocol):
    """Protocol for a single parse attempt in the fallback chain."""

    def __call__(self, text: str) -> tuple[bool, Any]:
        """Return (found, value); found is False when the attempt fails."""
        ...


class StatusReporter(Protocol):
    """Protocol for receiving status updates from the processor."""

    def __call__(self, status: Optional["NodeStatus"]) -> None:
        """Report the latest status; None clears the indicator."""
        ...
