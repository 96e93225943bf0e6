"""
violin_tuner - real-time pitch detection and tuning for stringed instruments
"""

from .detection import PeakExtractor, PitchDetector, SmoothingState, detect
from .errors import AudioDeviceError, ConfigError, InvalidInputError, TunerError
from .session import TunerSession
from .tuner_types import (
    EMPTY_ESTIMATE,
    IDLE_READING,
    PitchEstimate,
    TargetString,
    TuningReading,
    TuningStatus,
)
from .tuning import (
    DEFAULT_TARGETS,
    TuningThresholds,
    calculate_cents,
    classify,
    find_closest_string,
)

__version__ = "0.1.0"
__all__ = [
    "detect",
    "PitchDetector",
    "PeakExtractor",
    "SmoothingState",
    "TunerSession",
    "PitchEstimate",
    "TargetString",
    "TuningReading",
    "TuningStatus",
    "EMPTY_ESTIMATE",
    "IDLE_READING",
    "DEFAULT_TARGETS",
    "TuningThresholds",
    "calculate_cents",
    "classify",
    "find_closest_string",
    "TunerError",
    "InvalidInputError",
    "AudioDeviceError",
    "ConfigError",
]
