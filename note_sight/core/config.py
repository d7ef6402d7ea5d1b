"""Configuration management for Note Sight components."""

from __future__ import annotations

import copy
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from ..instruments.tunings import DOUBLE_BASS, strings_to_config
from ..logger import get_logger

logger = get_logger(__name__)


DEFAULT_CONFIGS: Dict[str, Dict[str, Any]] = {
    "detection": {
        "band": [80.0, 2000.0],
        "threshold": 80.0,
        "reference_pitch": {"note": "A4", "freq": 440.0},
        "octave_range": [0, 10],
        "fft_size": 4096,
        "smoothing": 0.8,
        "sample_rate": 44100,
        "block_size": 1024,
        "keyboard_octaves": [3, 4, 5],
        "staff_shift": 12,
    },
    "instrument": {
        "name": "double_bass",
        "strings": strings_to_config(DOUBLE_BASS),
    },
}


@dataclass(frozen=True)
class DetectionConfig:
    """Typed view of the 'detection' configuration."""

    band: Tuple[float, float] = (80.0, 2000.0)
    threshold: float = 80.0
    reference_note: str = "A4"
    reference_frequency: float = 440.0
    octave_range: Tuple[int, int] = (0, 10)
    fft_size: int = 4096
    smoothing: float = 0.8
    sample_rate: int = 44100
    block_size: int = 1024
    keyboard_octaves: Tuple[int, ...] = field(default=(3, 4, 5))
    staff_shift: int = 12

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> DetectionConfig:
        """Build from a config dict, falling back to defaults for missing keys.

        Raises:
            ValueError: If a value has the wrong shape
        """
        defaults = DEFAULT_CONFIGS["detection"]
        merged = {**defaults, **config}
        band = merged["band"]
        if len(band) != 2:
            raise ValueError(f"band must be [min_hz, max_hz], got {band}")
        octave_range = merged["octave_range"]
        if len(octave_range) != 2:
            raise ValueError(
                f"octave_range must be [lowest, highest], got {octave_range}"
            )
        reference = {**defaults["reference_pitch"], **merged["reference_pitch"]}
        return cls(
            band=(float(band[0]), float(band[1])),
            threshold=float(merged["threshold"]),
            reference_note=str(reference["note"]),
            reference_frequency=float(reference["freq"]),
            octave_range=(int(octave_range[0]), int(octave_range[1])),
            fft_size=int(merged["fft_size"]),
            smoothing=float(merged["smoothing"]),
            sample_rate=int(merged["sample_rate"]),
            block_size=int(merged["block_size"]),
            keyboard_octaves=tuple(int(o) for o in merged["keyboard_octaves"]),
            staff_shift=int(merged["staff_shift"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "band": list(self.band),
            "threshold": self.threshold,
            "reference_pitch": {
                "note": self.reference_note,
                "freq": self.reference_frequency,
            },
            "octave_range": list(self.octave_range),
            "fft_size": self.fft_size,
            "smoothing": self.smoothing,
            "sample_rate": self.sample_rate,
            "block_size": self.block_size,
            "keyboard_octaves": list(self.keyboard_octaves),
            "staff_shift": self.staff_shift,
        }


class ConfigManager:
    """Configuration manager for Note Sight components."""

    def __init__(self, config_dir: Optional[str] = None):
        """Initialize the configuration manager.

        Args:
            config_dir: Directory to store configuration files, or None to use default
        """
        if config_dir is None:
            # Use ~/.config/note_sight by default
            home = os.path.expanduser("~")
            config_dir = os.path.join(home, ".config", "note_sight")

        self.config_dir = Path(config_dir)
        self.config_dir.mkdir(parents=True, exist_ok=True)

        self.default_configs = copy.deepcopy(DEFAULT_CONFIGS)

        # Load existing configurations or create default ones
        self.configs: Dict[str, Dict[str, Any]] = {}
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
            except (OSError, json.JSONDecodeError) as e:
                logger.error(f"Error loading configuration from {config_file}: {e}")
                return copy.deepcopy(default_config)

            if not isinstance(config, dict):
                logger.error(f"Configuration in {config_file} is not an object")
                return copy.deepcopy(default_config)

            logger.info(f"Loaded configuration from {config_file}")

            # Ensure all default keys are present
            for key, value in default_config.items():
                if key not in config:
                    config[key] = copy.deepcopy(value)

            return config

        # Create default configuration
        config = copy.deepcopy(default_config)
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
        """Get a copy of a configuration by name."""
        return copy.deepcopy(self.configs.get(name, {}))

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

        self.configs[name].update(updates)
        return self.save_config(name, self.configs[name])

    def reset_config(self, name: str) -> bool:
        """Reset configuration to default.

        Returns:
            True if reset successfully, False otherwise
        """
        if name not in self.default_configs:
            logger.error(f"Unknown configuration: {name}")
            return False

        self.configs[name] = copy.deepcopy(self.default_configs[name])
        return self.save_config(name, self.configs[name])

    def detection_config(self) -> DetectionConfig:
        return DetectionConfig.from_dict(self.get_config("detection"))

    def string_records(self) -> List[Dict[str, Any]]:
        return self.get_config("instrument").get("strings", [])
