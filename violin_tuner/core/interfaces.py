"""Defines the core interfaces for the violin tuner."""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Iterator

import numpy as np


class IAudioSource(ABC):
    """Interface for sources of fixed-size mono audio blocks."""

    @abstractmethod
    def start(self) -> None:
        """Start capturing audio."""
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stop capturing audio and drop any blocks not yet read."""
        pass

    @abstractmethod
    def is_running(self) -> bool:
        """Check if audio is running."""
        pass

    @abstractmethod
    def blocks(self) -> Iterator[np.ndarray]:
        """Yield blocks of block_size samples normalized to [-1.0, 1.0]."""
        pass

    @property
    @abstractmethod
    def sample_rate(self) -> int:
        """The sample rate of the audio stream."""
        pass

    @property
    @abstractmethod
    def block_size(self) -> int:
        """The number of samples in each block."""
        pass

    def __enter__(self) -> IAudioSource:
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
