"""Magnitude spectrum of one audio block."""

import numpy as np


class SpectralAnalyzer:
    """Transforms a block of real samples into a magnitude spectrum.

    No window function is applied. Spectral leakage is accepted because the
    magnitude floor of the pipeline is calibrated on unwindowed magnitudes.
    """

    def __init__(self, frame_size: int) -> None:
        """Initialize the analyzer.

        Args:
            frame_size: Number of samples in every block
        """
        self._frame_size = frame_size
        # Output buffer reused for every block, only the lower half of the DFT
        # is independent. The float64 cast and rfft still allocate per call.
        self._magnitudes = np.zeros(frame_size // 2, dtype=np.float64)

    @property
    def frame_size(self) -> int:
        return self._frame_size

    def analyze(self, block: np.ndarray) -> np.ndarray:
        """Compute the magnitude spectrum of a block.

        Args:
            block: 1D array of exactly ``frame_size`` samples in [-1.0, 1.0]

        Returns:
            ``frame_size // 2`` magnitudes, bin ``i`` at ``i * sample_rate / frame_size`` Hz.
            The array is reused and is only valid until the next call.

        Raises:
            ValueError: If the block does not hold exactly ``frame_size`` samples
        """
        block = np.asarray(block)
        if block.ndim != 1 or block.shape[0] != self._frame_size:
            raise ValueError(
                f"Expected a mono block of {self._frame_size} samples, got shape {block.shape}"
            )

        # Real input, so rfft yields the same lower half as a full complex DFT
        spectrum = np.fft.rfft(block.astype(np.float64, copy=False))
        np.abs(spectrum[: self._magnitudes.shape[0]], out=self._magnitudes)
        return self._magnitudes
