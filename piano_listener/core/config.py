"""Configuration management for Piano Listener components."""

from __future__ import annotations
import logging
from dataclasses import dataclass, asdict, fields
from typing import Dict, Any, Optional
import json
import os
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DetectorConfig:
    """Fixed parameters of the detection pipeline.

    The sample rate and frame size are set once at initialization. The
    thresholds are empirical constants of the detection heuristic; they are
    kept here so they can be tuned without touching the pipeline.
    """

    sample_rate: int = 44100  # CD-quality sample rate
    frame_size: int = 2048  # Samples per block, ~46 ms at 44.1 kHz
    reference_frequency: float = 440.0  # A4
    reference_offset: int = 33  # Index of A4 in the note table
    magnitude_floor: float = 0.05  # Peaks at or below this are silence
    harmonic_min_frequency: float = 261.0  # ~C4, no octave correction below
    max_search_frequency: float = 2200.0  # Upper bound of the peak search

    def __post_init__(self):
        if self.sample_rate <= 0:
            raise ValueError("sample_rate must be positive")
        if self.frame_size <= 0 or self.frame_size % 2:
            raise ValueError("frame_size must be a positive even number")
        if self.reference_frequency <= 0:
            raise ValueError("reference_frequency must be positive")
        if self.magnitude_floor < 0:
            raise ValueError("magnitude_floor must not be negative")
        if self.harmonic_min_frequency <= 0:
            raise ValueError("harmonic_min_frequency must be positive")
        if self.max_search_frequency <= 0:
            raise ValueError("max_search_frequency must be positive")

    @property
    def freq_resolution(self) -> float:
        """Width of one spectrum bin in Hz."""
        return self.sample_rate / self.frame_size

    @property
    def search_limit(self) -> int:
        """Number of bins scanned by the peak search."""
        return int(self.max_search_frequency / self.freq_resolution)

    @property
    def block_duration(self) -> float:
        """Duration of one block in seconds."""
        return self.frame_size / self.sample_rate

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> DetectorConfig:
        """Build a config from a dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            logger.warning(f"Ignoring unknown pipeline settings: {', '.join(unknown)}")
        return cls(**{k: v for k, v in values.items() if k in known})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ConfigManager:
    """Configuration manager for Piano Listener components."""

    def __init__(self, config_dir: Optional[str] = None):
        """Initialize the configuration manager.

        Args:
            config_dir: Directory to store configuration files, or None to use default
        """
        if config_dir is None:
            # Use ~/.config/piano_listener by default
            home = os.path.expanduser("~")
            config_dir = os.path.join(home, ".config", "piano_listener")

        self.config_dir = Path(config_dir)
        self.config_dir.mkdir(parents=True, exist_ok=True)

        # Default configurations
        self.default_configs = {
            "pipeline": DetectorConfig().to_dict(),
            "audio_input": {
                "device_id": None,
                "channels": 1,
            },
        }

        # Load existing configurations or create default ones
        self.configs = {}
        for config_name, default_config in self.default_configs.items():
            self.configs[config_name] = self.load_config(config_name, default_config)

    def load_config(self, name: str, default_config: Dict[str, Any]) -> Dict[str, Any]:
        """Load configuration from file or create default.

        Args:
            name: Configuration name
            default_config: Default configuration to use if file doesn't exist

        Returns:
            Configuration dictionary
        """
        config_file = self.config_dir / f"{name}.json"

        if config_file.exists():
            try:
                with open(config_file, "r") as f:
                    config = json.load(f)
                logger.info(f"Loaded configuration from {config_file}")
            except (OSError, json.JSONDecodeError) as e:
                logger.error(f"Error loading configuration from {config_file}: {e}")
                return default_config.copy()

            if not isinstance(config, dict):
                logger.error(f"Configuration in {config_file} is not an object")
                return default_config.copy()

            # Ensure all default keys are present
            for key, value in default_config.items():
                if key not in config:
                    config[key] = value

            return config

        # Create default configuration
        config = default_config.copy()
        self.save_config(name, config)
        return config

    def save_config(self, name: str, config: Dict[str, Any]) -> bool:
        """Save configuration to file.

        Args:
            name: Configuration name
            config: Configuration dictionary

        Returns:
            True if saved successfully, False otherwise
        """
        config_file = self.config_dir / f"{name}.json"

        try:
            with open(config_file, "w") as f:
                json.dump(config, f, indent=2)
            logger.info(f"Saved configuration to {config_file}")
            return True
        except OSError as e:
            logger.error(f"Error saving configuration to {config_file}: {e}")
            return False

    def get_config(self, name: str) -> Dict[str, Any]:
        """Get configuration by name.

        Args:
            name: Configuration name

        Returns:
            Configuration dictionary
        """
        return self.configs.get(name, {}).copy()

    def detector_config(self) -> DetectorConfig:
        """Get the pipeline configuration as a validated DetectorConfig."""
        return DetectorConfig.from_dict(self.get_config("pipeline"))

    def update_config(self, name: str, updates: Dict[str, Any]) -> bool:
        """Update configuration and save to file.

        Args:
            name: Configuration name
            updates: Dictionary of updates to apply

        Returns:
            True if updated and saved successfully, False otherwise
        """
        if name not in self.configs:
            logger.error(f"Unknown configuration: {name}")
            return False

        # Update configuration
        self.configs[name].update(updates)

        # Save to file
        return self.save_config(name, self.configs[name])

    def reset_config(self, name: str) -> bool:
        """Reset configuration to default.

        Args:
            name: Configuration name

        Returns:
            True if reset successfully, False otherwise
        """
        if name not in self.default_configs:
            logger.error(f"Unknown configuration: {name}")
            return False

        # Reset to default
        self.configs[name] = self.default_configs[name].copy()

        # Save to file
        return self.save_config(name, self.configs[name])
