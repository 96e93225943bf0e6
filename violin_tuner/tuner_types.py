"""Type definitions for the violin tuner."""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar


class TuningStatus(Enum):
    """How far a measured pitch is from its target.

    Each member carries a severity rank (0 = in tune, 3 = very far off,
    -1 = no signal) and the message shown to the player.
    """

    NO_SIGNAL = ("no_signal", -1, "Play a string...")
    IN_TUNE = ("in_tune", 0, "Perfectly tuned!")
    SLIGHTLY_SHARP = ("slightly_sharp", 1, "Slightly sharp")
    SLIGHTLY_FLAT = ("slightly_flat", 1, "Slightly flat")
    SHARP = ("sharp", 2, "Too high - loosen the string")
    FLAT = ("flat", 2, "Too low - tighten the string")
    VERY_SHARP = ("very_sharp", 3, "Way too high!")
    VERY_FLAT = ("very_flat", 3, "Way too low!")

    def __init__(self, key: str, severity: int, message: str):
        self.key = key
        self.severity = severity
        self.message = message

    @property
    def is_sharp(self) -> bool:
        return self in (
            TuningStatus.SLIGHTLY_SHARP,
            TuningStatus.SHARP,
            TuningStatus.VERY_SHARP,
        )

    @property
    def is_flat(self) -> bool:
        return self in (
            TuningStatus.SLIGHTLY_FLAT,
            TuningStatus.FLAT,
            TuningStatus.VERY_FLAT,
        )


@dataclass(frozen=True)
class PitchEstimate:
    """Result of analyzing one audio block."""

    # Below this the spectral peak is not trusted
    CONFIDENCE_THRESHOLD: ClassVar[float] = 0.3

    frequency: float  # Detected frequency in Hz (0.0 = no pitch)
    amplitude: float  # RMS of the unwindowed block
    confidence: float  # Peak prominence score (0-1)

    @property
    def is_valid(self) -> bool:
        return self.frequency > 0 and self.confidence > self.CONFIDENCE_THRESHOLD


# Returned whenever the block is silent or no peak was found
EMPTY_ESTIMATE = PitchEstimate(frequency=0.0, amplitude=0.0, confidence=0.0)


@dataclass(frozen=True)
class TargetString:
    """An instrument string and the frequency it should be tuned to."""

    name: str  # e.g. 'G'
    frequency: float  # Target frequency in Hz
    display_name: str = ""  # e.g. 'G (196 Hz)'

    def __post_init__(self):
        if self.frequency <= 0:
            raise ValueError(
                f"Target frequency for string {self.name!r} must be positive, "
                f"got {self.frequency}"
            )
        if not self.display_name:
            object.__setattr__(self, "display_name", self.name)

    def __str__(self):
        return self.display_name


@dataclass(frozen=True)
class TuningReading:
    """One reportable tuner state, recomputed for every analyzed block."""

    is_active: bool = False  # Whether a signal is being tracked
    note: str = "-"  # Name of the matched or selected string
    frequency: float = 0.0  # Smoothed measured frequency in Hz
    target_frequency: float = 0.0  # Target frequency in Hz
    cents: float = 0.0  # Signed deviation (positive = sharp)
    status: TuningStatus = TuningStatus.NO_SIGNAL
    amplitude: float = 0.0  # RMS of the block that produced the reading


# "Waiting for a signal" state
IDLE_READING = TuningReading()
