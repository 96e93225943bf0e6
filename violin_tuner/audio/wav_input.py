"""Audio blocks read from a WAV file."""

import time
from typing import Iterator

import numpy as np
import soundfile as sf

from ..core.interfaces import IAudioSource
from ..errors import AudioDeviceError
from ..logger import get_logger

logger = get_logger(__name__)


class WavFileInput(IAudioSource):
    """Provides audio blocks by reading from a WAV file.

    Only the first channel is used. A trailing block shorter than
    block_size is dropped.
    """

    def __init__(
        self,
        file_path: str,
        block_size: int = 8192,
        loop: bool = False,
        gain: float = 1.0,
        realtime: bool = False,
    ):
        """Open the file and read its format.

        Args:
            file_path: Path of the audio file
            block_size: Samples per block
            loop: Start again from the beginning at the end of the file
            gain: Factor applied to every sample (result clipped to [-1, 1])
            realtime: Sleep between blocks to simulate live capture

        Raises:
            AudioDeviceError: If the file cannot be opened
        """
        self._file_path = file_path
        self._block_size = int(block_size)
        self._loop = loop
        self._gain = float(gain)
        self._realtime = realtime
        self._running = False

        try:
            with sf.SoundFile(self._file_path) as f:
                self._sample_rate = f.samplerate
                self._channels = f.channels
                self._frames = f.frames
        except (RuntimeError, OSError) as e:
            raise AudioDeviceError(f"Cannot open audio file {file_path}: {e}") from e

        logger.info(
            f"Opened {file_path}: {self._sample_rate}Hz, {self._channels} channel(s)"
        )

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def block_size(self) -> int:
        return self._block_size

    @property
    def channels(self) -> int:
        return self._channels

    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        self._running = True

    def stop(self) -> None:
        self._running = False

    def blocks(self) -> Iterator[np.ndarray]:
        """Yield full blocks from the file until the end (or stop() when looping)."""
        if self._frames < self._block_size:
            logger.warning(
                f"{self._file_path} holds {self._frames} samples, less than one block"
            )
            return

        self._running = True
        try:
            with sf.SoundFile(self._file_path) as f:
                while self._running:
                    data = f.read(self._block_size, dtype="float32", always_2d=True)
                    if len(data) < self._block_size:
                        if self._loop:
                            f.seek(0)
                            continue
                        break

                    block = data[:, 0]
                    if self._gain != 1.0:
                        block = np.clip(block * self._gain, -1.0, 1.0)

                    yield block

                    if self._realtime:
                        time.sleep(self._block_size / self._sample_rate)
        except (RuntimeError, OSError) as e:
            raise AudioDeviceError(f"Error reading {self._file_path}: {e}") from e
        finally:
            self._running = False
