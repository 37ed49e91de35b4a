"""Synthetic test tones.

Used to exercise the detector without an instrument, either as numpy
blocks or as sound files written with soundfile.
"""

from typing import Iterable, Tuple

import numpy as np
import soundfile as sf

Partial = Tuple[float, float]  # (frequency in Hz, amplitude)


def sine_wave(
    frequency: float,
    frame_size: int = 2048,
    sample_rate: int = 44100,
    amplitude: float = 1.0,
) -> np.ndarray:
    """A sine wave starting at phase zero."""
    t = np.arange(frame_size) / sample_rate
    return (amplitude * np.sin(2 * np.pi * frequency * t)).astype(np.float32)


def tone(
    partials: Iterable[Partial],
    frame_size: int = 2048,
    sample_rate: int = 44100,
) -> np.ndarray:
    """Sum of sine partials, clipped to [-1.0, 1.0].

    Args:
        partials: (frequency, amplitude) pairs
        frame_size: Number of samples to generate
        sample_rate: Sample rate in Hz
    """
    signal = np.zeros(frame_size, dtype=np.float32)
    for frequency, amplitude in partials:
        signal += sine_wave(frequency, frame_size, sample_rate, amplitude)
    return np.clip(signal, -1.0, 1.0)


def write_tone(
    path: str,
    partials: Iterable[Partial],
    duration: float = 1.0,
    sample_rate: int = 44100,
) -> int:
    """Write a tone to a sound file.

    Returns:
        Number of samples written
    """
    frames = int(round(duration * sample_rate))
    signal = tone(partials, frames, sample_rate)
    sf.write(path, signal, sample_rate, subtype="FLOAT")
    return frames
