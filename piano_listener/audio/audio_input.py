"""Audio sources feeding fixed-size mono blocks to the detection pipeline."""

from __future__ import annotations
import logging
import threading
from abc import ABC, abstractmethod
from typing import Optional

import numpy as np
import soundfile as sf

from ..core.interfaces import IAudioInput, AudioCallback

logger = logging.getLogger(__name__)


class AudioDeviceError(Exception):
    """Raised when an audio source cannot be opened or started."""


class AudioInputHandler(IAudioInput, ABC):
    """Abstract base class for audio input handlers."""

    def __init__(self, sample_rate: int, frame_size: int) -> None:
        self._sample_rate = sample_rate
        self._frame_size = frame_size
        self._callback: Optional[AudioCallback] = None
        self._running = False

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def frame_size(self) -> int:
        return self._frame_size

    def is_running(self) -> bool:
        """Check if audio input is running.

        Returns:
            True if audio input is running, False otherwise
        """
        return self._running

    @abstractmethod
    def start(self, callback: AudioCallback) -> bool:
        """Start capturing audio and pass each block to the callback.

        Args:
            callback: Function to call with a mono block and its timestamp

        Returns:
            True if started, False if already running

        Raises:
            AudioDeviceError: If the source cannot be started
        """
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stop capturing audio."""
        pass


class WavFileInput(AudioInputHandler):
    """Provides audio blocks by reading from a sound file."""

    def __init__(
        self,
        file_path: str,
        frame_size: int = 2048,
        sample_rate: Optional[int] = None,
        realtime: bool = False,
        loop: bool = False,
        gain: float = 1.0,
    ) -> None:
        """Initialize the file reader.

        Args:
            file_path: Path to a file readable by soundfile (WAV, FLAC, ...)
            frame_size: Samples per block
            sample_rate: Sample rate the pipeline expects, or None to accept the file's rate
            realtime: If True, deliver blocks at playback speed
            loop: If True, restart at the beginning of the file when it ends
            gain: Linear gain applied to every sample

        Raises:
            AudioDeviceError: If the file cannot be read or its rate does not match
        """
        try:
            info = sf.info(file_path)
        except (sf.LibsndfileError, RuntimeError) as e:
            raise AudioDeviceError(f"Could not open audio file {file_path}: {e}") from e

        if sample_rate is not None and info.samplerate != sample_rate:
            raise AudioDeviceError(
                f"{file_path} is sampled at {info.samplerate}Hz, expected {sample_rate}Hz"
            )

        super().__init__(info.samplerate, frame_size)
        self._file_path = file_path
        self._channels = info.channels
        self._realtime = realtime
        self._loop = loop
        self._gain = gain
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()
        self._blocks_read = 0

    @property
    def channels(self) -> int:
        return self._channels

    @property
    def blocks_read(self) -> int:
        return self._blocks_read

    def start(self, callback: AudioCallback) -> bool:
        if self._running:
            logger.warning("File input already running")
            return False

        self._callback = callback
        self._stop_event.clear()
        self._running = True
        self._thread = threading.Thread(
            target=self._stream_data, name="wav-file-input", daemon=True
        )
        self._thread.start()
        logger.info(f"Streaming {self._file_path} ({self._sample_rate}Hz, {self._channels} channels)")
        return True

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the file has been fully delivered.

        Returns:
            True if streaming finished, False if the timeout expired
        """
        if self._thread is not None:
            self._thread.join(timeout)
            return not self._thread.is_alive()
        return True

    def stop(self) -> None:
        self._stop_event.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join()
            self._thread = None
        self._running = False

    def _stream_data(self) -> None:
        block_duration = self._frame_size / self._sample_rate
        try:
            while not self._stop_event.is_set():
                # The final partial block is zero-padded to a full frame
                for block in sf.blocks(
                    self._file_path,
                    blocksize=self._frame_size,
                    dtype="float32",
                    always_2d=True,
                    fill_value=0.0,
                ):
                    if self._stop_event.is_set():
                        break

                    audio_data = block[:, 0]
                    if self._gain != 1.0:
                        audio_data = np.clip(audio_data * self._gain, -1.0, 1.0)

                    timestamp = self._blocks_read * block_duration
                    self._blocks_read += 1
                    if self._callback:
                        self._callback(audio_data, timestamp)

                    # Simulate real-time capture speed
                    if self._realtime:
                        self._stop_event.wait(block_duration)

                if not self._loop:
                    break
        except (sf.LibsndfileError, RuntimeError) as e:
            logger.error(f"Error streaming {self._file_path}: {e}")
        finally:
            self._running = False
            logger.info(f"Finished streaming {self._file_path} ({self._blocks_read} blocks)")
