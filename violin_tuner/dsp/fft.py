"""In-place radix-2 fast Fourier transform.

The transform works on a pair of float arrays (real and imaginary parts)
and leaves the coefficients in natural frequency order: DC at index 0 and
the Nyquist bin at index N/2. Each butterfly stage is evaluated for all
blocks at once with numpy, so the cost is O(N log N) without recursion.
"""

import numpy as np

from ..errors import InvalidInputError


def is_power_of_two(n: int) -> bool:
    """Return True if n is a positive power of two."""
    return n > 0 and (n & (n - 1)) == 0


def _validate_buffers(real: np.ndarray, imag: np.ndarray) -> int:
    """Check that both buffers can be transformed in place.

    Returns:
        The common buffer length

    Raises:
        InvalidInputError: If the buffers are not writable 1-D float arrays
            of the same power-of-two length
    """
    for name, buf in (("real", real), ("imag", imag)):
        if not isinstance(buf, np.ndarray):
            raise InvalidInputError(
                f"{name} buffer must be a numpy array, got {type(buf).__name__}"
            )
        if buf.ndim != 1:
            raise InvalidInputError(f"{name} buffer must be 1-D, got shape {buf.shape}")
        if not np.issubdtype(buf.dtype, np.floating):
            raise InvalidInputError(f"{name} buffer must hold floats, got {buf.dtype}")
        if not buf.flags.writeable or not buf.flags.c_contiguous:
            raise InvalidInputError(f"{name} buffer must be writable and contiguous")

    n = real.shape[0]
    if imag.shape[0] != n:
        raise InvalidInputError(
            f"Real and imaginary buffers must have the same size ({n} != {imag.shape[0]})"
        )
    if not is_power_of_two(n):
        raise InvalidInputError(f"Size must be a power of 2, but was {n}")
    return n


def _bit_reversed_indices(n: int) -> np.ndarray:
    """Index permutation that reverses the bits of each position."""
    bits = n.bit_length() - 1
    indices = np.arange(n)
    reversed_indices = np.zeros(n, dtype=np.intp)
    for bit in range(bits):
        reversed_indices |= ((indices >> bit) & 1) << (bits - 1 - bit)
    return reversed_indices


def fft(real: np.ndarray, imag: np.ndarray) -> None:
    """Perform a forward FFT in place.

    Args:
        real: Real parts, replaced by the real FFT coefficients
        imag: Imaginary parts, replaced by the imaginary FFT coefficients

    Raises:
        InvalidInputError: If the length is not a power of two or the
            buffers differ in length
    """
    n = _validate_buffers(real, imag)
    if n == 1:
        return

    order = _bit_reversed_indices(n)
    real[:] = real[order]
    imag[:] = imag[order]

    size = 2
    while size <= n:
        half_size = size // 2
        table_step = n // size

        angle = -2.0 * np.pi * np.arange(half_size) * table_step / n
        cos_angle = np.cos(angle)
        sin_angle = np.sin(angle)

        # One row per butterfly block; rows are views into the buffers
        re = real.reshape(-1, size)
        im = imag.reshape(-1, size)

        t_real = re[:, half_size:] * cos_angle - im[:, half_size:] * sin_angle
        t_imag = re[:, half_size:] * sin_angle + im[:, half_size:] * cos_angle

        even_real = re[:, :half_size].copy()
        even_imag = im[:, :half_size].copy()

        re[:, half_size:] = even_real - t_real
        im[:, half_size:] = even_imag - t_imag
        re[:, :half_size] = even_real + t_real
        im[:, :half_size] = even_imag + t_imag

        size *= 2


def inverse_fft(real: np.ndarray, imag: np.ndarray) -> None:
    """Perform an inverse FFT in place (conjugate, forward FFT, conjugate, scale)."""
    n = _validate_buffers(real, imag)
    np.negative(imag, out=imag)
    fft(real, imag)
    np.negative(imag, out=imag)
    real /= n
    imag /= n


def magnitude(real: np.ndarray, imag: np.ndarray) -> np.ndarray:
    """Calculate the magnitude spectrum from FFT coefficients.

    Args:
        real: Real FFT coefficients
        imag: Imaginary FFT coefficients

    Returns:
        New array with sqrt(real**2 + imag**2) for every bin
    """
    real = np.asarray(real, dtype=np.float64)
    imag = np.asarray(imag, dtype=np.float64)
    if real.shape != imag.shape:
        raise InvalidInputError(
            f"Real and imaginary buffers must have the same shape ({real.shape} != {imag.shape})"
        )
    return np.sqrt(real * real + imag * imag)
