"""Signal processing primitives: FFT and analysis windows."""

from .fft import fft, inverse_fft, is_power_of_two, magnitude
from .window import apply_hann_window

__all__ = ["fft", "inverse_fft", "is_power_of_two", "magnitude", "apply_hann_window"]
