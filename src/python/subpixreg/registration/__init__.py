"""Registration module for sub-pixel image alignment."""

from subpixreg.registration._skimage_backend import phase_offset_skimage
from subpixreg.registration.coregister import coregister, coregister_inplace, register
from subpixreg.registration.fft import FFTPlan, fftfreq, plan_fft
from subpixreg.registration.fourier_shift import fourier_shift, fourier_shift_inplace
from subpixreg.registration.metrics import (
    alignment_quality_report,
    normalized_cross_correlation,
    print_quality_report,
    structural_similarity,
)
from subpixreg.registration.phase_correlation import (
    calculate_stats,
    phase_offset,
    phase_offset_freq,
    upsampled_dft,
)

__all__ = [
    # Offset estimation
    "phase_offset",
    "phase_offset_freq",
    "upsampled_dft",
    "calculate_stats",
    "phase_offset_skimage",
    # Shifting and drivers
    "fourier_shift",
    "fourier_shift_inplace",
    "register",
    "coregister",
    "coregister_inplace",
    # Transform plans
    "FFTPlan",
    "plan_fft",
    "fftfreq",
    # Quality metrics
    "normalized_cross_correlation",
    "structural_similarity",
    "alignment_quality_report",
    "print_quality_report",
]
