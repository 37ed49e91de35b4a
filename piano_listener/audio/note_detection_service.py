"""Note detection service that integrates audio input and note detection."""

from __future__ import annotations
import logging
import time
from typing import Optional, Callable

import numpy as np

from ..note_types import DetectionResult
from ..core.events import DetectionEvents
from ..core.interfaces import INoteDetectionService, INoteDetector, IAudioInput

logger = logging.getLogger(__name__)


class NoteDetectionService(INoteDetectionService):
    """Service that integrates audio input and note detection.

    This class acts as a facade for the audio input and the detection
    pipeline. Every block delivered by the audio input is classified on the
    audio thread, and each detection is handed to the registered listeners.
    """

    def __init__(self, audio_input: IAudioInput, note_detector: INoteDetector) -> None:
        """Initialize the note detection service.

        Args:
            audio_input: Source of fixed-size mono blocks
            note_detector: Pipeline classifying each block
        """
        self._audio_input = audio_input
        self._note_detector = note_detector
        self._events = DetectionEvents()

        self._running = False
        self._start_time = 0.0
        self._stop_time = 0.0
        self._last_result: Optional[DetectionResult] = None
        self._blocks_processed = 0
        self._detections = 0

    def add_listener(self, callback: Callable[[DetectionResult], None]) -> None:
        """Register an additional reporter for detected notes."""
        self._events.on_note_detected(callback)

    def add_silence_listener(self, callback: Callable[[float], None]) -> None:
        """Register a callback for blocks without a usable signal."""
        self._events.on_silence(callback)

    def start(self, callback: Optional[Callable[[DetectionResult], None]] = None) -> bool:
        """Start note detection.

        Args:
            callback: Function to call with each detection, in addition to
                the listeners already registered

        Returns:
            True if started, False if the service or its audio input was
            already running

        Raises:
            AudioDeviceError: If the audio input cannot be started
        """
        if self._running:
            logger.warning("Note detection already running")
            return False

        if callback is not None:
            self._events.on_note_detected(callback)

        if not self._audio_input.start(self._process_audio):
            logger.warning("Audio input refused to start")
            return False

        self._start_time = time.time()
        self._stop_time = 0.0
        self._running = True
        logger.info("Note detection started")
        return True

    def stop(self) -> None:
        """Stop note detection and release the audio input."""
        if not self._running:
            return

        self._audio_input.stop()
        self._running = False
        self._stop_time = time.time()
        logger.info(
            f"Note detection stopped after {self._blocks_processed} blocks "
            f"({self._detections} detections)"
        )

    def _process_audio(self, audio_data: np.ndarray, timestamp: float) -> None:
        """Classify one block and notify the listeners.

        Args:
            audio_data: Mono block of samples, only valid during this call
            timestamp: Capture timestamp of the block
        """
        try:
            result = self._note_detector.process(audio_data)
        except ValueError as e:
            # A malformed block must not tear down the audio stream
            logger.error(f"Dropping audio block: {e}")
            return

        self._blocks_processed += 1
        self._last_result = result

        if result is None:
            self._events.emit_silence(timestamp)
            return

        self._detections += 1
        self._events.emit_note_detected(result)

    def is_running(self) -> bool:
        """Check if note detection is running.

        Returns:
            True if note detection is running, False otherwise
        """
        return self._running

    @property
    def last_result(self) -> Optional[DetectionResult]:
        """Detection of the most recent block, None if it was silent."""
        return self._last_result

    @property
    def blocks_processed(self) -> int:
        return self._blocks_processed

    @property
    def detections(self) -> int:
        return self._detections

    @property
    def elapsed(self) -> float:
        """Seconds between start and stop, or since start while running."""
        if not self._start_time:
            return 0.0
        return (self._stop_time or time.time()) - self._start_time
