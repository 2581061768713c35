"""Observability sinks for structured pipeline events."""

import logging
import threading
from typing import Any, Dict, List, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)


class EventSink(Protocol):
    """Receives structured events. Implementations must not raise into callers."""

    def emit(self, event: str, **fields: Any) -> None:
        ...


class LoggingEventSink:
    """Writes events through the standard logging module."""

    def __init__(self, name: str = "brandpulse.events", level: int = logging.INFO):
        self._logger = logging.getLogger(name)
        self._level = level

    def emit(self, event: str, **fields: Any) -> None:
        details = " ".join(f"{k}={v}" for k, v in sorted(fields.items()))
        self._logger.log(self._level, f"{event} {details}".rstrip())


class CollectingEventSink:
    """Keeps events in memory, mainly for tests and diagnostics."""

    def __init__(self):
        self._lock = threading.Lock()
        self.events: List[Tuple[str, Dict[str, Any]]] = []

    def emit(self, event: str, **fields: Any) -> None:
        with self._lock:
            self.events.append((event, dict(fields)))

    def names(self) -> List[str]:
        with self._lock:
            return [name for name, _ in self.events]

    def of(self, event: str) -> List[Dict[str, Any]]:
        with self._lock:
            return [fields for name, fields in self.events if name == event]


def safe_emit(sink: Optional[EventSink], event: str, **fields: Any) -> None:
    """Emit an event, logging and ignoring any sink failure."""
    if sink is None:
        return
    try:
        sink.emit(event, **fields)
    except Exception as e:
        logger.warning(f"Event sink failed on '{event}': {e}")
