"""Pitch-detection pipeline components."""

from .spectral_analyzer import SpectralAnalyzer
from .peak_detector import PeakDetector
from .harmonic_corrector import HarmonicCorrector
from .pipeline import DetectionPipeline

__all__ = ["SpectralAnalyzer", "PeakDetector", "HarmonicCorrector", "DetectionPipeline"]
