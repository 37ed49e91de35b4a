"""Type definitions for the Piano Listener project."""

from typing import Tuple
from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class Note:
    """A reference note of the equal-tempered note table."""

    name: str  # Pitch class plus octave (e.g., 'A4', 'C#3')
    frequency: float  # Reference frequency in Hz

    def __str__(self):
        return f"{self.name} ({self.frequency:.2f} Hz)"

    @property
    def pitch_class(self) -> str:
        """The note name without its octave number (e.g., 'C#')."""
        return self.name.rstrip("0123456789")

    @property
    def octave(self) -> int:
        return int(self.name[len(self.pitch_class) :])


@dataclass(frozen=True)
class DetectionResult:
    """Represents the note detected in one audio block."""

    note: Note  # Nearest note after harmonic correction
    raw_frequency: float  # Peak frequency in Hz before correction
    magnitude: float  # Peak magnitude, used as the detection confidence
    corrected_frequency: float  # Working frequency after harmonic correction

    @property
    def note_name(self) -> str:
        return self.note.name

    @property
    def harmonic_corrected(self) -> bool:
        """True if the peak was folded down one octave."""
        return self.corrected_frequency != self.raw_frequency

    def as_report(self) -> Tuple[str, float, float, float]:
        """Return the (note name, note frequency, raw frequency, magnitude) tuple."""
        return (self.note.name, self.note.frequency, self.raw_frequency, self.magnitude)


class PipelineState(Enum):
    """Classification of the most recent audio block."""

    IDLE = "idle"  # No usable signal
    DETECTED = "detected"  # A note was reported
