"""Factory for creating Piano Listener components."""

import logging
from typing import Optional

from ..note_table import NoteTable
from ..detection.pipeline import DetectionPipeline
from ..audio.audio_input import WavFileInput
from ..audio.note_detection_service import NoteDetectionService
from .config import ConfigManager, DetectorConfig
from .interfaces import IAudioInput

logger = logging.getLogger(__name__)


class ComponentFactory:
    """Factory for creating Piano Listener components.

    The note table is built once per factory and shared by every pipeline
    it creates.
    """

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        """Initialize the component factory.

        Args:
            config_manager: Configuration manager, or None to create a default one
        """
        self.config_manager = config_manager or ConfigManager()
        self.detector_config: DetectorConfig = self.config_manager.detector_config()
        self._note_table: Optional[NoteTable] = None

    @property
    def note_table(self) -> NoteTable:
        if self._note_table is None:
            self._note_table = NoteTable.build(
                self.detector_config.reference_frequency,
                self.detector_config.reference_offset,
            )
        return self._note_table

    def create_pipeline(self) -> DetectionPipeline:
        """Create a detection pipeline sharing the factory's note table."""
        return DetectionPipeline(self.detector_config, self.note_table)

    def create_audio_input(self, device_id: Optional[int] = None) -> IAudioInput:
        """Create a live audio input.

        Args:
            device_id: Audio input device ID, or None to use the configured one

        Returns:
            Audio input instance
        """
        # Imported here so file analysis works on machines without PortAudio
        from ..audio.sound_device import SoundDeviceInput

        config = self.config_manager.get_config("audio_input")
        if device_id is None:
            device_id = config.get("device_id")

        instance = SoundDeviceInput(
            device_id=device_id,
            sample_rate=self.detector_config.sample_rate,
            frame_size=self.detector_config.frame_size,
            channels=config.get("channels", 1),
        )
        logger.info(f"Created audio input: device={device_id}")
        return instance

    def create_file_input(
        self, file_path: str, realtime: bool = False, loop: bool = False
    ) -> WavFileInput:
        """Create an input streaming a sound file at the configured rate.

        Args:
            file_path: Path to the sound file
            realtime: Deliver blocks at playback speed
            loop: Restart at the beginning of the file until stopped

        Raises:
            AudioDeviceError: If the file cannot be read or its rate does not match
        """
        instance = WavFileInput(
            file_path,
            frame_size=self.detector_config.frame_size,
            sample_rate=self.detector_config.sample_rate,
            realtime=realtime,
            loop=loop,
        )
        logger.info(f"Created file input: {file_path}")
        return instance

    def create_note_detection_service(
        self, audio_input: Optional[IAudioInput] = None
    ) -> NoteDetectionService:
        """Create a note detection service.

        Args:
            audio_input: Audio source, or None to create a live input

        Returns:
            Note detection service instance
        """
        if audio_input is None:
            audio_input = self.create_audio_input()

        instance = NoteDetectionService(audio_input, self.create_pipeline())
        logger.info("Created note detection service")
        return instance
