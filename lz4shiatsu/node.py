"""
Host pipeline adapter.

``LZ4Node`` plays the part of a processing node inside a flow-based pipeline:
it receives messages, forwards results through a ``send`` callback and reports
its most recent outcome through a ``status`` callback.
"""

import logging
from collections.abc import Mapping
from typing import Any, Callable, Optional

from .core.interfaces import StatusReporter
from .core.processor import PayloadProcessor
from .core.results import NodeStatus, ProcessingOutcome, StatusLevel
from .utils.config import ProcessorConfig

logger = logging.getLogger(__name__)

READY_STATUS = NodeStatus(StatusLevel.SUCCESS, "ready")

SendCallback = Callable[[dict[str, Any]], None]


class LZ4Node:
    """A pipeline node that compresses, decompresses or cleans payloads."""

    def __init__(
        self,
        node_config: Optional[Mapping[str, Any]] = None,
        *,
        config: Optional[ProcessorConfig] = None,
        send: Optional[SendCallback] = None,
        status: Optional[StatusReporter] = None,
    ):
        if config is None:
            config = ProcessorConfig.from_node_config(dict(node_config or {}))
        self.processor = PayloadProcessor(config)
        self._send = send
        self._status_callback = status
        self.status: Optional[NodeStatus] = None

        self._set_status(READY_STATUS)

    def on_input(self, msg: Mapping[str, Any]) -> ProcessingOutcome:
        """Handle one inbound message."""
        outcome = self.processor.process_message(msg)
        self._set_status(outcome.status)

        if outcome.message is not None and self._send is not None:
            self._send(outcome.message)
        return outcome

    def close(self) -> None:
        """Clear the status indicator when the node shuts down."""
        self._set_status(None)

    def _set_status(self, status: Optional[NodeStatus]) -> None:
        # Informational only; it never feeds back into processing
        self.status = status
        if self._status_callback is not None:
            self._status_callback(status)
        elif status is not None:
            logger.debug("Node status: %s (%s)", status.text, status.level.value)
