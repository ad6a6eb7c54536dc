"""Reusable 2D FFT plans backed by scipy.fft."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

import numpy as np

from subpixreg.errors import InvalidArgumentError, ShapeMismatchError


def complex_dtype(dtype) -> np.dtype:
    """Complex counterpart of ``dtype``; integer and bool inputs map to complex128."""
    dtype = np.dtype(dtype)
    if np.issubdtype(dtype, np.complexfloating):
        return dtype
    if np.issubdtype(dtype, np.floating):
        return np.result_type(dtype, np.complex64)
    return np.dtype(np.complex128)


@dataclass(frozen=True)
class FFTPlan:
    """Forward/inverse 2D transform for one array shape and complex dtype.

    scipy.fft plans internally, so the plan object mainly pins the shape and
    precision that every transform through it must share.
    """

    shape: tuple[int, int]
    dtype: np.dtype
    workers: int | None = None

    def _check_shape(self, array: np.ndarray) -> None:
        if array.shape != self.shape:
            raise ShapeMismatchError(
                f"Array shape {array.shape} does not match plan shape {self.shape}"
            )

    def forward(self, array: np.ndarray) -> np.ndarray:
        """Forward transform; the input is cast to the plan's complex dtype."""
        from scipy.fft import fft2

        array = np.asarray(array)
        self._check_shape(array)
        return fft2(array.astype(self.dtype, copy=False), workers=self.workers)

    def inverse(self, spectrum: np.ndarray, overwrite: bool = False) -> np.ndarray:
        """Inverse transform.

        With ``overwrite=True`` scipy may reuse ``spectrum`` as scratch space,
        so only pass buffers nobody else reads afterwards.
        """
        from scipy.fft import ifft2

        self._check_shape(spectrum)
        return ifft2(spectrum, overwrite_x=overwrite, workers=self.workers)


@lru_cache(maxsize=32)
def _cached_plan(shape: tuple[int, int], dtype: np.dtype, workers: int | None) -> FFTPlan:
    return FFTPlan(shape=shape, dtype=dtype, workers=workers)


def plan_fft(array_or_shape, dtype=None, workers: int | None = None) -> FFTPlan:
    """Return a cached :class:`FFTPlan` for a 2D array (or an explicit shape).

    Parameters
    ----------
    array_or_shape : np.ndarray or tuple[int, int]
        Template array, or its shape.
    dtype : dtype-like, optional
        Element type. Defaults to the template array's dtype, or float64 when
        only a shape is given. Real types map to their complex counterpart.
    workers : int | None, optional
        Thread count forwarded to scipy.fft.

    Returns
    -------
    FFTPlan
        Plan shared by every caller asking for the same shape/dtype/workers.
    """
    if isinstance(array_or_shape, np.ndarray):
        shape = array_or_shape.shape
        if dtype is None:
            dtype = array_or_shape.dtype
    else:
        shape = tuple(array_or_shape)
    if dtype is None:
        dtype = np.float64

    shape = tuple(int(s) for s in shape)
    if len(shape) != 2:
        raise InvalidArgumentError(f"Expected a 2D shape, got {shape}")
    return _cached_plan(shape, complex_dtype(dtype), workers)


def fftfreq(n: int, upsample_factor: int = 1, dtype=np.float64) -> np.ndarray:
    """DFT sample frequencies for an axis of length ``n``.

    Frequencies are in cycles per ``1/upsample_factor`` pixel, i.e.
    ``k / (n * upsample_factor)`` in standard FFT ordering (DC first,
    negative frequencies in the upper half).
    """
    from scipy.fft import fftfreq as _fftfreq

    return _fftfreq(n, d=upsample_factor).astype(dtype, copy=False)
