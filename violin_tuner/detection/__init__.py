"""Pitch detection pipeline components."""

from .peak_extractor import PeakExtractor, interpolate_peak
from .pitch_detector import PitchDetector, calculate_rms, detect
from .smoother import SmoothingState

__all__ = [
    "PeakExtractor",
    "interpolate_peak",
    "PitchDetector",
    "calculate_rms",
    "detect",
    "SmoothingState",
]
