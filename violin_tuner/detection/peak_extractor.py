"""Dominant spectral peak search with sub-bin refinement."""

import math
from typing import ClassVar, Optional, Tuple

import numpy as np

from ..logger import get_logger

logger = get_logger(__name__)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def interpolate_peak(
    magnitudes: np.ndarray, peak_bin: int, resolution: float
) -> float:
    """Refine a peak location with quadratic interpolation.

    Fits a parabola through the magnitudes at peak_bin - 1, peak_bin and
    peak_bin + 1. Peaks on the edge of the spectrum, or a flat neighbourhood,
    fall back to the bin centre.

    Args:
        magnitudes: Full magnitude spectrum
        peak_bin: Index of the strongest bin
        resolution: Width of one bin in Hz

    Returns:
        The refined peak frequency in Hz
    """
    if peak_bin <= 0 or peak_bin >= len(magnitudes) - 1:
        return peak_bin * resolution

    alpha = magnitudes[peak_bin - 1]
    beta = magnitudes[peak_bin]
    gamma = magnitudes[peak_bin + 1]

    denominator = alpha - 2 * beta + gamma
    if abs(denominator) < PeakExtractor.EPSILON:
        return peak_bin * resolution

    p = 0.5 * (alpha - gamma) / denominator
    return float((peak_bin + p) * resolution)


class PeakExtractor:
    """Locates the dominant peak of a magnitude spectrum within a frequency band.

    The band is the plausible range of the instrument, independent of the
    sample rate. Confidence is the peak height relative to the mean height
    of the band, divided by a calibration constant and clamped to [0, 1].
    """

    MIN_FREQUENCY: ClassVar[float] = 150.0  # Hz - a little below the G string
    MAX_FREQUENCY: ClassVar[float] = 750.0  # Hz - a little above the E string
    CONFIDENCE_DIVISOR: ClassVar[float] = 10.0
    EPSILON: ClassVar[float] = 1e-10

    def __init__(
        self,
        min_frequency: Optional[float] = None,
        max_frequency: Optional[float] = None,
        confidence_divisor: Optional[float] = None,
    ) -> None:
        """Initialize the extractor.

        Args:
            min_frequency: Lower edge of the search band in Hz (default 150.0)
            max_frequency: Upper edge of the search band in Hz (default 750.0)
            confidence_divisor: Peak-to-mean ratio that maps to full confidence
                (default 10.0)
        """
        self.min_frequency = float(
            min_frequency if min_frequency is not None else self.MIN_FREQUENCY
        )
        self.max_frequency = float(
            max_frequency if max_frequency is not None else self.MAX_FREQUENCY
        )
        self.confidence_divisor = float(
            confidence_divisor
            if confidence_divisor is not None
            else self.CONFIDENCE_DIVISOR
        )
        if self.confidence_divisor <= 0:
            raise ValueError(
                f"confidence_divisor must be positive, got {self.confidence_divisor}"
            )

    def bin_range(self, size: int, sample_rate: int) -> Tuple[int, int]:
        """Return the [min_bin, max_bin) slice searched for a spectrum of the given size."""
        resolution = sample_rate / size
        min_bin = _round_half_up(self.min_frequency / resolution)
        max_bin = min(_round_half_up(self.max_frequency / resolution), size // 2)
        return min_bin, max_bin

    def extract(self, magnitudes: np.ndarray, sample_rate: int) -> Tuple[float, float]:
        """Find the dominant frequency in the spectrum.

        Args:
            magnitudes: Magnitude spectrum of a block of N samples
            sample_rate: Sample rate of the block in Hz

        Returns:
            Tuple of (frequency in Hz, confidence 0-1); (0.0, 0.0) if there is no peak
        """
        magnitudes = np.asarray(magnitudes, dtype=np.float64)
        n = len(magnitudes)
        if n == 0:
            return 0.0, 0.0

        resolution = sample_rate / n
        min_bin, max_bin = self.bin_range(n, sample_rate)
        if min_bin >= max_bin:
            logger.debug(
                f"Empty search band for N={n} at {sample_rate}Hz "
                f"(bins {min_bin}-{max_bin})"
            )
            return 0.0, 0.0

        band = magnitudes[min_bin:max_bin]
        # argmax returns the first of equal maxima, like a strict > scan
        peak_bin = min_bin + int(np.argmax(band))
        max_magnitude = float(magnitudes[peak_bin])
        if max_magnitude == 0.0:
            return 0.0, 0.0

        frequency = interpolate_peak(magnitudes, peak_bin, resolution)

        average_magnitude = float(np.mean(band))
        if average_magnitude > 0:
            confidence = max_magnitude / average_magnitude / self.confidence_divisor
            confidence = min(1.0, max(0.0, confidence))
        else:
            confidence = 0.0

        return frequency, confidence
