"""Sub-pixel translation via the Fourier shift theorem."""

from __future__ import annotations

import numpy as np

from subpixreg.errors import InvalidArgumentError
from subpixreg.registration.fft import fftfreq, plan_fft


def _validate_shift(shift, ndim: int) -> tuple[float, ...]:
    shift = tuple(float(s) for s in np.atleast_1d(np.asarray(shift, dtype=np.float64)))
    if len(shift) != ndim:
        raise InvalidArgumentError(
            f"shift has {len(shift)} components but the array is {ndim}D"
        )
    return shift


def fourier_shift_inplace(
    image_freq: np.ndarray,
    shift,
    phasediff: float = 0.0,
) -> np.ndarray:
    """Shift a spectrum by ``shift`` (dy, dx), modifying it in place.

    Every element is multiplied by
    ``exp(-2πi (f_y * dy + f_x * dx) + i * phasediff)`` with ``f`` the
    per-axis DFT frequencies in cycles per pixel.

    Parameters
    ----------
    image_freq : np.ndarray
        2D complex spectrum (DC at index 0). Overwritten.
    shift : array-like
        (dy, dx) shift in pixels.
    phasediff : float, optional
        Global phase added to every element, in radians.

    Returns
    -------
    np.ndarray
        ``image_freq`` itself.
    """
    if not isinstance(image_freq, np.ndarray) or not np.iscomplexobj(image_freq):
        raise InvalidArgumentError(
            "fourier_shift_inplace needs a complex ndarray; use fourier_shift for real images"
        )
    if image_freq.ndim != 2:
        raise InvalidArgumentError(f"Expected a 2D spectrum, got shape {image_freq.shape}")
    dy, dx = _validate_shift(shift, image_freq.ndim)

    real_dtype = np.finfo(image_freq.dtype).dtype
    freqs1 = fftfreq(image_freq.shape[0], 1, real_dtype)[:, None]
    freqs2 = fftfreq(image_freq.shape[1], 1, real_dtype)[None, :]
    phase = -2 * np.pi * (freqs1 * dy + freqs2 * dx) + phasediff
    image_freq *= np.exp(1j * phase).astype(image_freq.dtype, copy=False)
    return image_freq


def fourier_shift(
    image: np.ndarray,
    shift,
    phasediff: float = 0.0,
) -> np.ndarray:
    """
    Shift a 2D image by ``shift`` (dy, dx) using its Fourier phase.

    The translation is circular: content leaving one edge re-enters on the
    opposite side.

    Args:
        image: Input image with shape (Y, X). Not modified.
        shift: (dy, dx) shift in pixels; fractional values are allowed.
        phasediff: Global phase offset in radians.

    Returns:
        Real part of the shifted image, same shape as input.
    """
    image = np.asarray(image)
    _validate_shift(shift, image.ndim)

    plan = plan_fft(image)
    shifted = fourier_shift_inplace(plan.forward(image), shift, phasediff)
    return np.real(plan.inverse(shifted, overwrite=True))
