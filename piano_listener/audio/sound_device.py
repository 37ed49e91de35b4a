"""Live microphone input using the sounddevice library."""

from __future__ import annotations
import logging
import time
from typing import Any, Dict, List, Optional, ClassVar

import numpy as np
import sounddevice as sd

from ..core.interfaces import AudioCallback
from .audio_input import AudioInputHandler, AudioDeviceError

logger = logging.getLogger(__name__)


class SoundDeviceInput(AudioInputHandler):
    """Audio input handler using the sounddevice library."""

    # Audio configuration
    SAMPLE_RATE: ClassVar[int] = 44100  # Hz
    FRAME_SIZE: ClassVar[int] = 2048  # Must match the pipeline frame size
    CHANNELS: ClassVar[int] = 1  # Mono audio

    def __init__(
        self,
        device_id: Optional[int] = None,
        sample_rate: Optional[int] = None,
        frame_size: Optional[int] = None,
        channels: Optional[int] = None,
    ) -> None:
        """Initialize the audio input handler.

        Args:
            device_id: Audio input device ID, or None for the default input device
            sample_rate: Sample rate in Hz, or None for default (44100)
            frame_size: Samples per block, or None for default (2048)
            channels: Number of audio channels, or None for default (1)
        """
        super().__init__(sample_rate or self.SAMPLE_RATE, frame_size or self.FRAME_SIZE)
        self._device_id = device_id
        self._channels = channels or self.CHANNELS
        self._stream: Optional[sd.InputStream] = None

    @property
    def device_id(self) -> Optional[int]:
        return self._device_id

    def _audio_callback(
        self,
        indata: np.ndarray,
        _frames: int,
        _time_info,
        status: sd.CallbackFlags,
    ) -> None:
        """Callback for processing audio data from the input stream.

        Args:
            indata: The input audio data as a numpy array (frames x channels)
            _frames: Number of frames in the buffer
            _time_info: Timing information from PortAudio
            status: Status flags indicating whether input/output underflow or overflow occurred

        Note:
            This is called from a separate audio thread, so it should be fast
            and avoid any blocking operations to prevent audio glitches.
        """
        if status:
            logger.warning(f"Audio callback status: {status}")

        if self._callback:
            # Extract mono audio data (take first channel if multi-channel)
            audio_data = indata[:, 0] if indata.ndim > 1 else indata
            self._callback(audio_data, time.time())

    def start(self, callback: AudioCallback) -> bool:
        if self._running:
            logger.warning("Audio input already running")
            return False

        self._callback = callback
        try:
            sd.check_input_settings(
                device=self._device_id,
                channels=self._channels,
                samplerate=self._sample_rate,
                dtype="float32",
            )
            self._stream = sd.InputStream(
                device=self._device_id,
                samplerate=self._sample_rate,
                blocksize=self._frame_size,
                channels=self._channels,
                dtype="float32",
                callback=self._audio_callback,
            )
            self._stream.start()
        except (sd.PortAudioError, ValueError) as e:
            if self._stream is not None:
                self._stream.close()
                self._stream = None
            raise AudioDeviceError(
                f"Could not open audio input (device={self._device_id}, "
                f"rate={self._sample_rate}Hz): {e}"
            ) from e

        self._running = True
        logger.info(
            f"Audio input started: device={self._device_id}, rate={self._sample_rate}Hz, "
            f"block={self._frame_size} samples"
        )
        return True

    def stop(self) -> None:
        """Stop capturing audio.

        Stopping waits for the block being processed to return, it never
        interrupts a running callback.
        """
        if not self._running:
            return

        try:
            if self._stream:
                self._stream.stop()
                self._stream.close()
        except sd.PortAudioError as e:
            logger.error(f"Error stopping audio input: {e}")
        finally:
            self._stream = None
            self._running = False
        logger.info("Audio input stopped")


def list_input_devices() -> List[Dict[str, Any]]:
    """List the audio devices that can record.

    Returns:
        One dictionary per input device with its id, name, channel count and default rate
    """
    devices = []
    for device_id, device in enumerate(sd.query_devices()):
        if device["max_input_channels"] > 0:
            devices.append(
                {
                    "id": device_id,
                    "name": device["name"],
                    "channels": device["max_input_channels"],
                    "default_samplerate": device["default_samplerate"],
                }
            )
    return devices


def default_input_device() -> Optional[int]:
    """Return the id of the default input device, or None if there is none."""
    device_id = sd.default.device[0]
    if device_id is None or device_id < 0:
        return None
    return int(device_id)
