"""Dominant-bin search over a bounded part of the spectrum."""

from typing import Tuple

import numpy as np


class PeakDetector:
    """Finds the strongest bin below the musical search bound.

    This is a single-bin heuristic without interpolation, so detected
    frequencies are quantized to ``freq_resolution``.
    """

    DEFAULT_MAX_FREQUENCY = 2200.0  # Hz, above the highest table note

    def __init__(
        self,
        sample_rate: int,
        frame_size: int,
        max_frequency: float = DEFAULT_MAX_FREQUENCY,
    ) -> None:
        self._freq_resolution = sample_rate / frame_size
        self._search_limit = int(max_frequency / self._freq_resolution)

    @property
    def freq_resolution(self) -> float:
        """Bin width in Hz."""
        return self._freq_resolution

    @property
    def search_limit(self) -> int:
        """Number of bins scanned, starting at bin 0."""
        return self._search_limit

    def find_peak(self, spectrum: np.ndarray) -> Tuple[float, float]:
        """Return the (frequency, magnitude) of the dominant bin.

        The lowest bin wins when several share the maximum. A spectrum that
        is all zeros in the search range yields ``(0.0, 0.0)``.
        """
        window = spectrum[: min(self._search_limit, len(spectrum))]
        if len(window) == 0:
            return 0.0, 0.0

        index = int(np.argmax(window))
        magnitude = float(window[index])
        if magnitude <= 0.0:
            return 0.0, 0.0
        return index * self._freq_resolution, magnitude
