"""Octave-error correction for the single-peak pitch estimate."""

import logging
from typing import Tuple

from ..note_matcher import NoteMatcher
from ..note_types import Note

logger = logging.getLogger(__name__)


class HarmonicCorrector:
    """Folds a detected frequency down one octave when it looks like a harmonic.

    For notes above middle C the second harmonic is often stronger than the
    fundamental, so the dominant bin lands one octave too high. When half of
    the detected frequency sits within one bin of a table note, that half is
    taken as the fundamental. At most one octave is corrected per block.
    """

    DEFAULT_MAGNITUDE_FLOOR = 0.05
    DEFAULT_MIN_FREQUENCY = 261.0  # ~C4

    def __init__(
        self,
        matcher: NoteMatcher,
        freq_resolution: float,
        magnitude_floor: float = DEFAULT_MAGNITUDE_FLOOR,
        min_frequency: float = DEFAULT_MIN_FREQUENCY,
    ) -> None:
        """Initialize the corrector.

        Args:
            matcher: Matcher over the shared note table
            freq_resolution: Spectrum bin width in Hz
            magnitude_floor: Peaks at or below this magnitude are never corrected
            min_frequency: Peaks at or below this frequency are never corrected
        """
        self._matcher = matcher
        self._freq_resolution = freq_resolution
        self._magnitude_floor = magnitude_floor
        self._min_frequency = min_frequency

    def correct(self, raw_frequency: float, raw_magnitude: float) -> Tuple[Note, float]:
        """Pick the note for a detected peak.

        Args:
            raw_frequency: Peak frequency in Hz
            raw_magnitude: Peak magnitude

        Returns:
            The nearest note and the working frequency it was matched from
        """
        closest = self._matcher.nearest(raw_frequency)
        frequency = raw_frequency

        if raw_magnitude > self._magnitude_floor and raw_frequency > self._min_frequency:
            fundamental = raw_frequency / 2.0
            candidate = self._matcher.nearest(fundamental)
            if abs(fundamental - candidate.frequency) < self._freq_resolution:
                logger.debug(
                    f"Harmonic correction: {raw_frequency:.1f}Hz ({closest.name}) -> "
                    f"{fundamental:.1f}Hz ({candidate.name})"
                )
                frequency = fundamental
                closest = candidate

        return closest, frequency
