"""Audio device utilities."""

import logging
from typing import Any, Dict, List, Optional, Tuple

import sounddevice as sd

from ..errors import AudioDeviceError

logger = logging.getLogger(__name__)

COMMON_SAMPLE_RATES = [8000, 16000, 22050, 44100, 48000, 96000]


def list_input_devices() -> List[Tuple[int, Dict[str, Any]]]:
    """Return (device_id, device_info) for every device with input channels.

    Raises:
        AudioDeviceError: If PortAudio cannot enumerate the devices
    """
    try:
        devices = sd.query_devices()
    except sd.PortAudioError as e:
        raise AudioDeviceError(f"Could not query audio devices: {e}") from e
    return [
        (device_id, device)
        for device_id, device in enumerate(devices)
        if device["max_input_channels"] > 0
    ]


def supported_sample_rates(device_id: int) -> List[int]:
    """Return the common sample rates the input device accepts for mono capture."""
    rates = []
    for rate in COMMON_SAMPLE_RATES:
        try:
            sd.check_input_settings(device=device_id, samplerate=rate, channels=1)
            rates.append(rate)
        except sd.PortAudioError as e:
            logger.debug(f"Device {device_id}: {rate} Hz not supported ({e})")
        except ValueError as e:
            logger.debug(f"Device {device_id}: {rate} Hz rejected ({e})")
    return rates


def find_input_device(
    name_fragment: str,
) -> Tuple[Optional[int], Optional[Dict[str, Any]]]:
    """Find the first input device whose name contains name_fragment (case-insensitive).

    Returns:
        A tuple of (device_id, device_info) if found, (None, None) otherwise
    """
    for device_id, device in list_input_devices():
        if name_fragment.lower() in device["name"].lower():
            logger.info(f"Found input device: {device['name']}")
            return device_id, device
    return None, None


def default_input_device() -> Optional[int]:
    """Return the id of the default input device, or None if there is none."""
    device_id = sd.default.device[0]
    if device_id is None or device_id < 0:
        return None
    return int(device_id)
