"""Factory for creating violin tuner components from the stored configuration."""

from typing import Any, Callable, Optional

from ..audio.wav_input import WavFileInput
from ..detection.peak_extractor import PeakExtractor
from ..detection.pitch_detector import PitchDetector
from ..errors import ConfigError
from ..logger import get_logger
from ..session import TunerSession
from ..tuning import TuningThresholds
from .config import ConfigManager
from .interfaces import IAudioSource

logger = get_logger(__name__)


def _setting(config: dict, key: str, cast: Callable[[Any], Any] = float) -> Any:
    """Read one detector setting, converted with cast.

    Raises:
        ConfigError: If the setting is missing or cannot be converted
    """
    value = config.get(key)
    if isinstance(value, bool):
        raise ConfigError(f"Invalid detector setting {key}={value!r}")
    try:
        return cast(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid detector setting {key}={value!r}") from e


class ComponentFactory:
    """Factory for creating violin tuner components."""

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        """Initialize the component factory.

        Args:
            config_manager: Configuration manager, or None to create a default one
        """
        self.config_manager = config_manager or ConfigManager()

    def _detector_config(self, overrides: dict) -> dict:
        config = self.config_manager.get_config("detector")
        config.update({k: v for k, v in overrides.items() if v is not None})
        return config

    def create_pitch_detector(self, **kwargs) -> PitchDetector:
        """Create a pitch detector.

        Args:
            **kwargs: Values overriding the 'detector' configuration

        Returns:
            Pitch detector instance

        Raises:
            ConfigError: If a detector setting is invalid
        """
        config = self._detector_config(kwargs)

        min_frequency = _setting(config, "min_frequency")
        max_frequency = _setting(config, "max_frequency")
        confidence_divisor = _setting(config, "confidence_divisor")
        sample_rate = _setting(config, "sample_rate", int)
        min_amplitude = _setting(config, "min_amplitude")

        if not 0 < min_frequency < max_frequency:
            raise ConfigError(
                f"Invalid detector band {min_frequency}-{max_frequency} Hz"
            )
        if sample_rate <= 0 or min_amplitude < 0:
            raise ConfigError(
                f"Invalid detector settings: sample_rate={sample_rate}, "
                f"min_amplitude={min_amplitude}"
            )

        try:
            extractor = PeakExtractor(
                min_frequency=min_frequency,
                max_frequency=max_frequency,
                confidence_divisor=confidence_divisor,
            )
        except ValueError as e:
            raise ConfigError(f"Invalid detector settings: {e}") from e

        instance = PitchDetector(
            sample_rate=sample_rate,
            min_amplitude=min_amplitude,
            peak_extractor=extractor,
        )

        logger.info("Created pitch detector")
        return instance

    def create_session(
        self, selected_target: Optional[str] = None, **kwargs
    ) -> TunerSession:
        """Create a tuner session with the configured strings and thresholds.

        Args:
            selected_target: Name of a string for manual mode, or None for automatic mode
            **kwargs: Values overriding the 'detector' configuration

        Returns:
            Tuner session instance

        Raises:
            ConfigError: If a detector setting is invalid or selected_target
                is not one of the configured strings
        """
        config = self._detector_config(kwargs)

        smoothing_samples = _setting(config, "smoothing_samples", int)
        if smoothing_samples < 1:
            raise ConfigError(
                f"Invalid detector setting smoothing_samples={smoothing_samples}"
            )
        try:
            thresholds = TuningThresholds(
                in_tune=_setting(config, "cents_in_tune"),
                slight=_setting(config, "cents_slight"),
                acceptable=_setting(config, "cents_acceptable"),
            )
        except ConfigError:
            raise
        except ValueError as e:
            raise ConfigError(f"Invalid detector settings: {e}") from e

        instance = TunerSession(
            detector=self.create_pitch_detector(**kwargs),
            smoothing_samples=smoothing_samples,
            thresholds=thresholds,
            targets=self.config_manager.get_targets(),
            selected_target=selected_target,
        )

        logger.info("Created tuner session")
        return instance

    def create_audio_source(
        self, file_path: Optional[str] = None, **kwargs
    ) -> IAudioSource:
        """Create an audio source.

        Args:
            file_path: WAV file to read, or None to capture from an input device
            **kwargs: Additional parameters to pass to the constructor

        Returns:
            Audio source instance

        Raises:
            ConfigError: If the configured buffer size or sample rate is invalid
        """
        config = self.config_manager.get_config("detector")
        if "block_size" not in kwargs:
            kwargs["block_size"] = _setting(config, "buffer_size", int)

        if file_path is not None:
            instance = WavFileInput(file_path, **kwargs)
            logger.info(f"Created WAV file source: {file_path}")
            return instance

        # Needs PortAudio, so only imported for live capture
        from ..audio.live_input import SoundDeviceInput

        if "sample_rate" not in kwargs:
            kwargs["sample_rate"] = _setting(config, "sample_rate", int)
        instance = SoundDeviceInput(**kwargs)
        logger.info("Created live audio source")
        return instance
