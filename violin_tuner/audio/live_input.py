"""Live microphone capture using sounddevice."""

from __future__ import annotations
import queue
from typing import ClassVar, Iterator, Optional

import numpy as np
import sounddevice as sd

from ..core.interfaces import IAudioSource
from ..errors import AudioDeviceError
from ..logger import get_logger
from .devices import default_input_device

logger = get_logger(__name__)


class SoundDeviceInput(IAudioSource):
    """Captures mono blocks from an input device.

    The PortAudio callback runs on its own thread and only copies each
    block into a bounded queue; blocks() hands them to the consumer in
    arrival order. When the consumer falls behind, new blocks are dropped
    so the ones already queued stay in order.
    """

    # Audio configuration
    SAMPLE_RATE: ClassVar[int] = 44100  # Hz
    BLOCK_SIZE: ClassVar[int] = 8192  # Samples per block - must be a power of 2
    QUEUE_SIZE: ClassVar[int] = 8  # Blocks buffered between callback and consumer
    POLL_TIMEOUT: ClassVar[float] = 0.5  # Seconds between checks for stop()

    def __init__(
        self,
        device_id: Optional[int] = None,
        sample_rate: Optional[int] = None,
        block_size: Optional[int] = None,
    ) -> None:
        """Initialize the audio input handler.

        Args:
            device_id: Audio input device ID, or None for the default input device
            sample_rate: Sample rate in Hz, or None for default (44100)
            block_size: Block size in samples, or None for default (8192)
        """
        self._device_id = device_id
        self._sample_rate = int(sample_rate or self.SAMPLE_RATE)
        self._block_size = int(block_size or self.BLOCK_SIZE)

        self._stream: Optional[sd.InputStream] = None
        self._queue: queue.Queue = queue.Queue(maxsize=self.QUEUE_SIZE)
        self._running = False
        self._dropped_blocks = 0

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def block_size(self) -> int:
        return self._block_size

    @property
    def dropped_blocks(self) -> int:
        """Number of blocks discarded because the consumer fell behind."""
        return self._dropped_blocks

    def is_running(self) -> bool:
        return self._running

    def _resolve_sample_rate(self) -> None:
        """Keep the requested rate if the device accepts it, else use the device default."""
        try:
            sd.check_input_settings(
                device=self._device_id, samplerate=self._sample_rate, channels=1
            )
            return
        except (sd.PortAudioError, ValueError) as e:
            logger.warning(f"Sample rate {self._sample_rate} Hz not supported: {e}")

        try:
            device_info = sd.query_devices(self._device_id, "input")
        except (sd.PortAudioError, ValueError) as e:
            raise AudioDeviceError(f"No usable input device: {e}") from e

        device_rate = int(device_info["default_samplerate"])
        logger.info(
            f"Using device sample rate: {device_rate}Hz (requested {self._sample_rate}Hz)"
        )
        self._sample_rate = device_rate

    def _audio_callback(
        self,
        indata: np.ndarray,
        _frames: int,
        _time_info,
        status: sd.CallbackFlags,
    ) -> None:
        """Copy the first channel of each block into the queue.

        Note:
            This is called from a separate audio thread, so it should be fast
            and avoid any blocking operations to prevent audio glitches.
        """
        if status:
            logger.warning(f"Audio callback status: {status}")

        block = indata[:, 0].copy() if indata.ndim > 1 else indata.copy()
        try:
            self._queue.put_nowait(block)
        except queue.Full:
            self._dropped_blocks += 1
            logger.debug(f"Consumer behind, dropped block ({self._dropped_blocks} total)")

    def start(self) -> None:
        """Open the input stream and start capturing.

        Raises:
            AudioDeviceError: If no input device is available or the stream cannot be opened
        """
        if self._running:
            logger.warning("Audio input already running")
            return

        if self._device_id is None:
            self._device_id = default_input_device()
            if self._device_id is None:
                raise AudioDeviceError("No audio input device available")

        self._resolve_sample_rate()
        self._dropped_blocks = 0

        try:
            self._stream = sd.InputStream(
                device=self._device_id,
                samplerate=self._sample_rate,
                blocksize=self._block_size,
                channels=1,
                dtype="float32",
                callback=self._audio_callback,
            )
            self._stream.start()
        except sd.PortAudioError as e:
            self._stream = None
            raise AudioDeviceError(f"Failed to start audio stream: {e}") from e

        self._running = True
        logger.info(
            f"Audio input started: device={self._device_id}, "
            f"{self._sample_rate}Hz, {self._block_size} samples per block"
        )

    def stop(self) -> None:
        """Stop capturing audio and discard queued blocks."""
        if not self._running:
            return

        self._running = False
        if self._stream is not None:
            try:
                self._stream.stop()
                self._stream.close()
                logger.info("Audio input stopped")
            except sd.PortAudioError as e:
                logger.error(f"Error stopping audio input: {e}")
            finally:
                self._stream = None

        if self._dropped_blocks:
            logger.warning(f"Dropped {self._dropped_blocks} blocks while capturing")

        while True:
            try:
                self._queue.get_nowait()
            except queue.Empty:
                break

    def blocks(self) -> Iterator[np.ndarray]:
        """Yield captured blocks until stop() is called."""
        while self._running:
            try:
                block = self._queue.get(timeout=self.POLL_TIMEOUT)
            except queue.Empty:
                continue
            if not self._running:
                break
            yield block
