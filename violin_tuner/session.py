"""Tuning session: turns a stream of audio blocks into tuning readings."""

from __future__ import annotations

import math
from typing import Iterable, Iterator, List, Mapping, Optional, Sequence, Union

import numpy as np

from .detection.pitch_detector import PitchDetector
from .detection.smoother import SmoothingState
from .errors import ConfigError
from .logger import get_logger
from .tuner_types import (
    IDLE_READING,
    PitchEstimate,
    TargetString,
    TuningReading,
    TuningStatus,
)
from .tuning import (
    DEFAULT_TARGETS,
    DEFAULT_THRESHOLDS,
    TuningThresholds,
    calculate_cents,
    classify,
    find_closest_string,
    find_target,
    targets_from_mapping,
)

logger = get_logger(__name__)

Targets = Union[Sequence[TargetString], Mapping[str, float]]


def _as_target_list(targets: Targets) -> List[TargetString]:
    if isinstance(targets, Mapping):
        return targets_from_mapping(targets)
    return list(targets)


def _is_valid_frequency(frequency: Optional[float]) -> bool:
    return frequency is not None and math.isfinite(frequency) and frequency > 0


class TunerSession:
    """Orchestrates detection, smoothing, target matching and classification.

    A session owns the rolling smoothing history, so blocks must be fed in
    arrival order from a single consumer. The session is not thread-safe;
    protect it with a lock if blocks are processed on more than one thread.

    The ``targets`` and ``selected_target`` attributes are read once per
    block by readings() and process(), so they can be replaced between
    blocks (for example after the string frequencies were changed).
    """

    def __init__(
        self,
        detector: Optional[PitchDetector] = None,
        smoothing_samples: int = SmoothingState.DEFAULT_CAPACITY,
        thresholds: TuningThresholds = DEFAULT_THRESHOLDS,
        targets: Optional[Targets] = None,
        selected_target: Optional[str] = None,
    ) -> None:
        """Initialize the session.

        Args:
            detector: Pitch detector for raw blocks (default configuration if None)
            smoothing_samples: Number of recent frequencies kept for smoothing
            thresholds: Cents limits for the tuning categories
            targets: Target strings, or a name -> Hz mapping (default: violin G/D/A/E)
            selected_target: Name of a manually selected string, or None for automatic mode
        """
        self._detector = detector or PitchDetector()
        self._smoothing = SmoothingState(smoothing_samples)
        self._thresholds = thresholds
        self.targets: List[TargetString] = _as_target_list(
            targets if targets is not None else DEFAULT_TARGETS
        )
        self.selected_target: Optional[str] = None
        if selected_target is not None:
            self.select_target(selected_target)
        self._last_reading: TuningReading = IDLE_READING

    @property
    def detector(self) -> PitchDetector:
        return self._detector

    @property
    def smoothing(self) -> SmoothingState:
        return self._smoothing

    @property
    def thresholds(self) -> TuningThresholds:
        return self._thresholds

    @property
    def last_reading(self) -> TuningReading:
        return self._last_reading

    def set_targets(self, targets: Targets) -> None:
        """Replace the target strings and return to automatic mode."""
        self.targets = _as_target_list(targets)
        self.selected_target = None
        logger.info(
            "Targets updated: " + ", ".join(str(t) for t in self.targets)
        )

    def select_target(self, name: Optional[str]) -> None:
        """Select a string by name for manual mode, or None for automatic mode.

        Raises:
            ConfigError: If no target string has that name
        """
        if name is None:
            self.selected_target = None
            logger.info("Automatic string detection enabled")
            return
        string = find_target(name, self.targets)
        if string is None:
            known = ", ".join(t.name for t in self.targets)
            raise ConfigError(f"Unknown string {name!r} (known strings: {known})")
        self.selected_target = string.name
        logger.info(f"Manual mode: tuning string {string}")

    def update(
        self,
        raw_frequency: Optional[float],
        targets: Targets,
        selected_target: Optional[str] = None,
        amplitude: float = 0.0,
    ) -> TuningReading:
        """Fold one raw frequency estimate into the session and classify it.

        Args:
            raw_frequency: Detected frequency in Hz; None, a non-positive or a
                non-finite value means no valid pitch in this block
            targets: Target strings, or a name -> Hz mapping
            selected_target: Name of the manually selected string, or None to
                match the nearest target
            amplitude: Signal level reported with the reading

        Returns:
            The new TuningReading
        """
        if not _is_valid_frequency(raw_frequency):
            self._smoothing.clear()
            self._last_reading = IDLE_READING
            return self._last_reading

        smoothed = self._smoothing.add(raw_frequency)
        target_list = _as_target_list(targets)

        if selected_target is not None:
            target = find_target(selected_target, target_list)
            if target is None:
                logger.warning(f"Selected string {selected_target!r} is not a target")
        else:
            target = find_closest_string(smoothed, target_list)

        if target is None:
            self._last_reading = TuningReading(
                is_active=True,
                frequency=smoothed,
                status=TuningStatus.NO_SIGNAL,
                amplitude=amplitude,
            )
            return self._last_reading

        cents = calculate_cents(smoothed, target.frequency)
        status = classify(cents, self._thresholds)

        if status != self._last_reading.status or target.name != self._last_reading.note:
            logger.debug(
                f"{target.name}: {smoothed:.2f}Hz vs {target.frequency:.2f}Hz "
                f"({cents:+.1f} cents) -> {status.name}"
            )

        self._last_reading = TuningReading(
            is_active=True,
            note=target.name,
            frequency=smoothed,
            target_frequency=target.frequency,
            cents=cents,
            status=status,
            amplitude=amplitude,
        )
        return self._last_reading

    def process(
        self,
        estimate: PitchEstimate,
        targets: Optional[Targets] = None,
        selected_target: Optional[str] = None,
    ) -> TuningReading:
        """Turn a pitch estimate into a reading.

        Low-confidence estimates count as no pitch. Without explicit
        targets the session's current targets and selection are used.
        """
        frequency = estimate.frequency if estimate.is_valid else None
        if targets is None:
            targets = self.targets
            selected_target = self.selected_target
        return self.update(
            frequency,
            targets,
            selected_target,
            amplitude=estimate.amplitude,
        )

    def estimates(
        self, blocks: Iterable[np.ndarray], sample_rate: Optional[int] = None
    ) -> Iterator[PitchEstimate]:
        """Lazily detect the pitch of every block, in order.

        The sequence is as long as the block source; stop pulling to stop.
        """
        for block in blocks:
            yield self._detector.detect(block, sample_rate)

    def readings(
        self, blocks: Iterable[np.ndarray], sample_rate: Optional[int] = None
    ) -> Iterator[TuningReading]:
        """Lazily produce one tuning reading per block.

        Every call starts a fresh smoothing window. Closing the generator
        (or exhausting the source) clears the smoothing history.
        """
        self._smoothing.clear()
        try:
            for estimate in self.estimates(blocks, sample_rate):
                yield self.process(estimate)
        finally:
            self.stop()

    def stop(self) -> None:
        """Discard the smoothing history and return to the idle reading."""
        self._smoothing.clear()
        self._last_reading = IDLE_READING
        logger.debug("Tuner session stopped")
