"""subpixreg: sub-pixel image registration by phase correlation."""

from subpixreg import registration
from subpixreg.errors import InvalidArgumentError, ShapeMismatchError
from subpixreg.registration import (
    FFTPlan,
    coregister,
    coregister_inplace,
    fourier_shift,
    fourier_shift_inplace,
    phase_offset,
    phase_offset_freq,
    phase_offset_skimage,
    plan_fft,
    register,
    upsampled_dft,
)
from subpixreg.types import PhaseOffsetResult, Shift2D

__version__ = "0.1.0"

__all__ = [
    # Registration module and functions
    "registration",
    "phase_offset",
    "phase_offset_freq",
    "phase_offset_skimage",
    "upsampled_dft",
    "fourier_shift",
    "fourier_shift_inplace",
    "register",
    "coregister",
    "coregister_inplace",
    "plan_fft",
    "FFTPlan",
    # Types and errors
    "PhaseOffsetResult",
    "Shift2D",
    "ShapeMismatchError",
    "InvalidArgumentError",
    # Package metadata
    "__version__",
]
