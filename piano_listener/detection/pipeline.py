"""Per-block note detection pipeline."""

from __future__ import annotations
import logging
import numpy as np
from typing import Optional

from ..note_matcher import NoteMatcher
from ..note_table import NoteTable
from ..note_types import DetectionResult, PipelineState
from ..core.config import DetectorConfig
from ..core.interfaces import INoteDetector
from .spectral_analyzer import SpectralAnalyzer
from .peak_detector import PeakDetector
from .harmonic_corrector import HarmonicCorrector

logger = logging.getLogger(__name__)


class DetectionPipeline(INoteDetector):
    """Classifies each audio block as silence or as one piano note.

    Blocks are classified independently: there is no smoothing, hysteresis
    or debouncing across consecutive blocks. ``state`` only reflects the
    most recent block.
    """

    def __init__(
        self,
        config: Optional[DetectorConfig] = None,
        note_table: Optional[NoteTable] = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            config: Pipeline parameters, or None for the defaults
            note_table: Shared note table, or None to build one from the config
        """
        self._config = config or DetectorConfig()
        self._note_table = note_table or NoteTable.build(
            self._config.reference_frequency, self._config.reference_offset
        )

        self._analyzer = SpectralAnalyzer(self._config.frame_size)
        self._peak_detector = PeakDetector(
            self._config.sample_rate,
            self._config.frame_size,
            self._config.max_search_frequency,
        )
        self._matcher = NoteMatcher(self._note_table)
        self._corrector = HarmonicCorrector(
            self._matcher,
            self._peak_detector.freq_resolution,
            magnitude_floor=self._config.magnitude_floor,
            min_frequency=self._config.harmonic_min_frequency,
        )
        self._state = PipelineState.IDLE

        logger.info(
            f"Detection pipeline initialized: sample_rate={self._config.sample_rate}, "
            f"frame_size={self._config.frame_size}, "
            f"resolution={self.freq_resolution:.2f}Hz, search_limit={self.search_limit}"
        )

    @property
    def config(self) -> DetectorConfig:
        return self._config

    @property
    def note_table(self) -> NoteTable:
        return self._note_table

    @property
    def matcher(self) -> NoteMatcher:
        return self._matcher

    @property
    def freq_resolution(self) -> float:
        return self._peak_detector.freq_resolution

    @property
    def search_limit(self) -> int:
        return self._peak_detector.search_limit

    @property
    def state(self) -> PipelineState:
        """Classification of the last processed block."""
        return self._state

    def process(self, block: np.ndarray) -> Optional[DetectionResult]:
        """Detect the note played in one block.

        Args:
            block: 1D array of exactly ``frame_size`` samples

        Returns:
            The detection, or None when the block holds no usable signal

        Raises:
            ValueError: If the block has the wrong length
        """
        spectrum = self._analyzer.analyze(block)
        raw_frequency, raw_magnitude = self._peak_detector.find_peak(spectrum)
        return self.classify(raw_frequency, raw_magnitude)

    def classify(self, raw_frequency: float, raw_magnitude: float) -> Optional[DetectionResult]:
        """Turn a spectrum peak into a detection.

        Peaks at or below the magnitude floor are reported as no detection.
        """
        if raw_magnitude <= self._config.magnitude_floor:
            self._state = PipelineState.IDLE
            return None

        note, frequency = self._corrector.correct(raw_frequency, raw_magnitude)
        self._state = PipelineState.DETECTED
        return DetectionResult(
            note=note,
            raw_frequency=raw_frequency,
            magnitude=raw_magnitude,
            corrected_frequency=frequency,
        )
