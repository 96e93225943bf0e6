"""Analysis windows applied before the spectral transform."""

import numpy as np


def apply_hann_window(samples: np.ndarray) -> np.ndarray:
    """Apply a Hann window to reduce spectral leakage.

    Sample i is scaled by 0.5 * (1 - cos(2*pi*i / (N - 1))). The input is
    left untouched. A single sample is returned unchanged.

    Args:
        samples: Audio samples

    Returns:
        New float64 array holding the windowed samples
    """
    samples = np.asarray(samples, dtype=np.float64)
    return samples * np.hanning(len(samples))
