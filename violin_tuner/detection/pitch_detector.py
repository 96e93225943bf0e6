"""Single-block pitch detection: RMS gate, Hann window, FFT, peak search."""

from typing import ClassVar, Optional

import numpy as np

from ..dsp.fft import fft, is_power_of_two, magnitude
from ..dsp.window import apply_hann_window
from ..errors import InvalidInputError
from ..logger import get_logger
from ..tuner_types import EMPTY_ESTIMATE, PitchEstimate
from .peak_extractor import PeakExtractor

logger = get_logger(__name__)


def calculate_rms(samples: np.ndarray) -> float:
    """Calculate the RMS (root mean square) level of the samples."""
    samples = np.asarray(samples, dtype=np.float64)
    if samples.size == 0:
        return 0.0
    return float(np.sqrt(np.mean(samples**2)))


class PitchDetector:
    """Detects the dominant pitch of one block of audio.

    The detector keeps no state between calls: each block is analyzed on
    its own, so the same instance may be shared by several sessions.
    """

    SAMPLE_RATE: ClassVar[int] = 44100  # Hz
    BUFFER_SIZE: ClassVar[int] = 8192  # Samples per block, must be a power of 2
    MIN_AMPLITUDE: ClassVar[float] = 0.01  # RMS noise floor

    def __init__(
        self,
        sample_rate: Optional[int] = None,
        min_amplitude: Optional[float] = None,
        peak_extractor: Optional[PeakExtractor] = None,
    ) -> None:
        """Initialize the PitchDetector.

        Args:
            sample_rate: Default sample rate in Hz when detect() is not given one (default 44100)
            min_amplitude: RMS level below which a block counts as silence (default 0.01)
            peak_extractor: Spectral peak search to use (default: 150-750 Hz band)
        """
        self._sample_rate = int(
            sample_rate if sample_rate is not None else self.SAMPLE_RATE
        )
        self._min_amplitude = float(
            min_amplitude if min_amplitude is not None else self.MIN_AMPLITUDE
        )
        self._peak_extractor = peak_extractor or PeakExtractor()

        logger.info(
            f"Initialized PitchDetector with sample_rate={self._sample_rate}Hz, "
            f"min_amplitude={self._min_amplitude}, band="
            f"{self._peak_extractor.min_frequency}-{self._peak_extractor.max_frequency}Hz"
        )

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def min_amplitude(self) -> float:
        return self._min_amplitude

    @property
    def peak_extractor(self) -> PeakExtractor:
        return self._peak_extractor

    def detect(
        self, samples: np.ndarray, sample_rate: Optional[int] = None
    ) -> PitchEstimate:
        """Analyze an audio block and detect its pitch.

        Args:
            samples: Mono samples normalized to [-1.0, 1.0]; the length must be a power of 2
            sample_rate: Sample rate of the block in Hz, or None for the detector's default

        Returns:
            PitchEstimate with the detected frequency, or EMPTY_ESTIMATE when
            the block is silent

        Raises:
            InvalidInputError: If the block is not 1-D or its length is not a power of 2
        """
        samples = np.asarray(samples, dtype=np.float64)
        if samples.ndim != 1:
            raise InvalidInputError(
                f"Audio block must be 1-D (mono), got shape {samples.shape}"
            )
        if samples.size == 0:
            return EMPTY_ESTIMATE
        if not is_power_of_two(samples.size):
            raise InvalidInputError(
                f"Block size must be a power of 2, but was {samples.size}"
            )

        rate = int(sample_rate if sample_rate is not None else self._sample_rate)

        amplitude = calculate_rms(samples)
        if amplitude < self._min_amplitude:
            logger.debug(f"Signal below noise floor: {amplitude:.4f}")
            return EMPTY_ESTIMATE

        real = apply_hann_window(samples)
        imag = np.zeros_like(real)
        fft(real, imag)

        frequency, confidence = self._peak_extractor.extract(
            magnitude(real, imag), rate
        )
        estimate = PitchEstimate(
            frequency=frequency, amplitude=amplitude, confidence=confidence
        )
        logger.debug(
            f"Pitch: {frequency:.2f} Hz, Confidence: {confidence:.2f}, "
            f"Signal: {amplitude:.4f}"
        )
        return estimate


_default_detector: Optional[PitchDetector] = None


def detect(samples: np.ndarray, sample_rate: int) -> PitchEstimate:
    """Detect the pitch of one block with the default detector configuration."""
    global _default_detector
    if _default_detector is None:
        _default_detector = PitchDetector()
    return _default_detector.detect(samples, sample_rate)
