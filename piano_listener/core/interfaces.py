"""Defines the core interfaces for the Piano Listener application."""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Optional, Callable

import numpy as np

from ..note_types import DetectionResult

# Receives one mono block of samples and the capture timestamp
AudioCallback = Callable[[np.ndarray, float], None]


class IAudioInput(ABC):
    """Interface for audio sources delivering fixed-size mono blocks."""

    @abstractmethod
    def start(self, callback: AudioCallback) -> bool:
        """Start capturing audio."""
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stop capturing audio."""
        pass

    @abstractmethod
    def is_running(self) -> bool:
        """Check if audio is running."""
        pass


class INoteDetector(ABC):
    """Interface for note detection algorithms."""

    @abstractmethod
    def process(self, block: np.ndarray) -> Optional[DetectionResult]:
        """Process one block of audio and return the detected note, if any."""
        pass


class INoteDetectionService(ABC):
    """Interface for the main note detection service."""

    @abstractmethod
    def start(self, callback: Callable[[DetectionResult], None]) -> bool:
        """Start the note detection service."""
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stop the note detection service."""
        pass

    @abstractmethod
    def is_running(self) -> bool:
        """Check if the service is running."""
        pass
