"""Target matching, cents deviation and tuning classification."""

import math
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence

from .tuner_types import TargetString, TuningStatus

# Standard violin tuning, lowest string first
DEFAULT_STRING_FREQUENCIES: Dict[str, float] = {
    "G": 196.00,
    "D": 293.66,
    "A": 440.00,
    "E": 659.26,
}


def format_hz(frequency: float) -> str:
    """Format a frequency for display ('196 Hz', '442.5 Hz')."""
    if frequency == int(frequency):
        return f"{int(frequency)} Hz"
    return f"{frequency:.1f} Hz"


def targets_from_mapping(frequencies: Mapping[str, float]) -> List[TargetString]:
    """Build the ordered list of target strings from a name -> Hz mapping."""
    return [
        TargetString(name, float(freq), f"{name} ({format_hz(float(freq))})")
        for name, freq in frequencies.items()
    ]


DEFAULT_TARGETS: List[TargetString] = targets_from_mapping(DEFAULT_STRING_FREQUENCIES)


def calculate_cents(measured: float, target: float) -> float:
    """Calculate the deviation in cents between two frequencies.

    100 cents is one semitone and 1200 cents one octave.

    Args:
        measured: The measured frequency in Hz
        target: The target frequency in Hz

    Returns:
        Deviation in cents (positive = too high, negative = too low);
        0.0 if either frequency is not positive
    """
    if target <= 0 or measured <= 0:
        return 0.0
    return 1200.0 * math.log2(measured / target)


def find_closest_string(
    frequency: float, targets: Sequence[TargetString]
) -> Optional[TargetString]:
    """Find the target string closest to the frequency in cents.

    Ties go to the string listed first.

    Returns:
        The closest TargetString, or None if the frequency is not positive
        or there are no targets
    """
    if frequency <= 0 or not targets:
        return None
    # min() keeps the first of equal keys
    return min(targets, key=lambda string: abs(calculate_cents(frequency, string.frequency)))


def find_target(name: str, targets: Sequence[TargetString]) -> Optional[TargetString]:
    """Look up a target string by name (case-insensitive)."""
    wanted = name.strip().upper()
    for string in targets:
        if string.name.upper() == wanted:
            return string
    return None


@dataclass(frozen=True)
class TuningThresholds:
    """Ascending absolute-cents limits of the tuning categories."""

    in_tune: float = 5.0  # Perfectly tuned
    slight: float = 15.0  # Slightly off
    acceptable: float = 25.0  # Off; anything above is very off

    def __post_init__(self):
        if not 0 <= self.in_tune <= self.slight <= self.acceptable:
            raise ValueError(
                "Tuning thresholds must be ascending and non-negative, got "
                f"{self.in_tune}, {self.slight}, {self.acceptable}"
            )


DEFAULT_THRESHOLDS = TuningThresholds()


def classify(
    cents: float, thresholds: TuningThresholds = DEFAULT_THRESHOLDS
) -> TuningStatus:
    """Determine the tuning status for a cents deviation.

    Each limit belongs to the better category: exactly 5.0 cents is in tune.
    """
    abs_cents = abs(cents)
    sharp = cents > 0

    if abs_cents <= thresholds.in_tune:
        return TuningStatus.IN_TUNE
    if abs_cents <= thresholds.slight:
        return TuningStatus.SLIGHTLY_SHARP if sharp else TuningStatus.SLIGHTLY_FLAT
    if abs_cents <= thresholds.acceptable:
        return TuningStatus.SHARP if sharp else TuningStatus.FLAT
    return TuningStatus.VERY_SHARP if sharp else TuningStatus.VERY_FLAT
