"""Configuration management for violin tuner components."""

from typing import Dict, Any, List, Optional
import json
import os
from pathlib import Path

from ..errors import ConfigError
from ..logger import get_logger
from ..tuner_types import TargetString
from ..tuning import DEFAULT_STRING_FREQUENCIES, targets_from_mapping

logger = get_logger(__name__)

# Open interval of accepted string frequencies in Hz
MIN_STRING_FREQUENCY = 50.0
MAX_STRING_FREQUENCY = 2000.0


def validate_string_frequency(frequency: Any) -> float:
    """Return the frequency as a float if it is a sensible string target.

    Raises:
        ConfigError: If the value is not a number strictly between 50 and 2000 Hz
    """
    if isinstance(frequency, str):
        frequency = frequency.strip().replace(",", ".")
    try:
        value = float(frequency)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid frequency value: {frequency!r}") from None
    if not MIN_STRING_FREQUENCY < value < MAX_STRING_FREQUENCY:
        raise ConfigError(
            f"Frequency {value} Hz outside the allowed range "
            f"({MIN_STRING_FREQUENCY:g}-{MAX_STRING_FREQUENCY:g} Hz)"
        )
    return value


class ConfigManager:
    """Configuration manager for violin tuner components."""

    def __init__(self, config_dir: Optional[str] = None):
        """Initialize the configuration manager.

        Args:
            config_dir: Directory to store configuration files, or None to use default
        """
        if config_dir is None:
            # Use ~/.config/violin_tuner by default
            home = os.path.expanduser("~")
            config_dir = os.path.join(home, ".config", "violin_tuner")

        self.config_dir = Path(config_dir)
        self.config_dir.mkdir(parents=True, exist_ok=True)

        # Default configurations
        self.default_configs = {
            "detector": {
                "sample_rate": 44100,
                "buffer_size": 8192,
                "min_frequency": 150.0,
                "max_frequency": 750.0,
                "min_amplitude": 0.01,
                "confidence_divisor": 10.0,
                "smoothing_samples": 5,
                "cents_in_tune": 5.0,
                "cents_slight": 15.0,
                "cents_acceptable": 25.0,
            },
            "strings": dict(DEFAULT_STRING_FREQUENCIES),
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
                if not isinstance(config, dict):
                    raise ValueError(f"expected a JSON object, got {type(config).__name__}")
                logger.info(f"Loaded configuration from {config_file}")

                # Ensure all default keys are present
                for key, value in default_config.items():
                    if key not in config:
                        config[key] = value

                return config
            except (OSError, ValueError) as e:
                logger.error(f"Error loading configuration from {config_file}: {e}")
                return default_config.copy()
        else:
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

    def get_targets(self) -> List[TargetString]:
        """Get the target strings from the 'strings' configuration.

        Stored values outside the allowed range are replaced by the default
        frequency of that string.

        Returns:
            Ordered list of TargetString, lowest string first
        """
        defaults = self.default_configs["strings"]
        stored = self.configs["strings"]
        frequencies = {}
        for name, default_frequency in defaults.items():
            try:
                frequencies[name] = validate_string_frequency(stored.get(name))
            except ConfigError as e:
                logger.warning(f"String {name}: {e}; using {default_frequency} Hz")
                frequencies[name] = default_frequency
        return targets_from_mapping(frequencies)

    def set_string_frequency(self, name: str, frequency: Any) -> float:
        """Change and persist the target frequency of one string.

        Args:
            name: String name ('G', 'D', 'A' or 'E', case-insensitive)
            frequency: New frequency in Hz (number or text, ',' accepted as decimal point)

        Returns:
            The stored frequency

        Raises:
            ConfigError: If the string is unknown or the frequency is out of range
        """
        key = name.strip().upper()
        if key not in self.default_configs["strings"]:
            known = ", ".join(self.default_configs["strings"])
            raise ConfigError(f"Unknown string {name!r} (known strings: {known})")
        value = validate_string_frequency(frequency)
        if not self.update_config("strings", {key: value}):
            raise ConfigError(f"Could not save frequency for string {key}")
        return value
