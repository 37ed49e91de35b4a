"""Event system for Piano Listener components."""

import logging
from typing import Dict, List, Callable, Any
from enum import Enum, auto

logger = logging.getLogger(__name__)


class DetectionEventType(Enum):
    """Event types for note detection."""

    NOTE_DETECTED = auto()
    SILENCE = auto()


class EventEmitter:
    """Event emitter for Piano Listener components."""

    def __init__(self):
        """Initialize the event emitter."""
        self._listeners: Dict[Any, List[Callable]] = {}

    def on(self, event_type: Any, callback: Callable) -> None:
        """Register a callback for an event type.

        Args:
            event_type: Event type to listen for
            callback: Function to call when the event occurs
        """
        if event_type not in self._listeners:
            self._listeners[event_type] = []

        if callback not in self._listeners[event_type]:
            self._listeners[event_type].append(callback)
            logger.debug(f"Added listener for event {event_type}")

    def emit(self, event_type: Any, *args, **kwargs) -> None:
        """Emit an event.

        Listeners run on the audio thread. A failing listener is logged and
        does not prevent the others from running.

        Args:
            event_type: Event type to emit
            *args: Positional arguments to pass to listeners
            **kwargs: Keyword arguments to pass to listeners
        """
        if event_type not in self._listeners:
            return

        for callback in self._listeners[event_type]:
            try:
                callback(*args, **kwargs)
            except Exception as e:
                logger.error(f"Error in event listener for {event_type}: {e}", exc_info=True)

    def listener_count(self, event_type: Any) -> int:
        return len(self._listeners.get(event_type, []))

    def clear(self) -> None:
        """Remove all event listeners."""
        self._listeners = {}
        logger.debug("Cleared all event listeners")


class DetectionEvents:
    """Event emitter specifically for note detection events."""

    def __init__(self):
        """Initialize the note detection events."""
        self._emitter = EventEmitter()

    def on_note_detected(self, callback: Callable) -> None:
        """Register a callback for note detection events.

        Args:
            callback: Function called with the DetectionResult of each detected block
        """
        self._emitter.on(DetectionEventType.NOTE_DETECTED, callback)

    def on_silence(self, callback: Callable) -> None:
        """Register a callback for blocks without a usable signal.

        Args:
            callback: Function called with the block timestamp
        """
        self._emitter.on(DetectionEventType.SILENCE, callback)

    def emit_note_detected(self, result) -> None:
        self._emitter.emit(DetectionEventType.NOTE_DETECTED, result)

    def emit_silence(self, timestamp: float) -> None:
        self._emitter.emit(DetectionEventType.SILENCE, timestamp)

    def clear(self) -> None:
        """Remove all event listeners."""
        self._emitter.clear()
