"""scikit-image based phase correlation (for comparison/benchmarking)."""

from __future__ import annotations

import numpy as np
from skimage.registration import phase_cross_correlation

from subpixreg.registration.phase_correlation import validate_pair, validate_upsample_factor
from subpixreg.types import PhaseOffsetResult


def phase_offset_skimage(
    source: np.ndarray,
    target: np.ndarray,
    upsample_factor: int = 1,
) -> PhaseOffsetResult:
    """
    Compute shift using scikit-image phase_cross_correlation.

    Args:
        source: Reference image with shape (Y, X).
        target: Image to align with shape (Y, X).
        upsample_factor: Sub-pixel precision factor.

    Returns:
        PhaseOffsetResult; the shift follows the same convention as
        ``phase_offset`` (shift that moves target onto source).
    """
    validate_upsample_factor(upsample_factor)
    source = np.asarray(source)
    target = np.asarray(target)
    validate_pair(source, target)

    shift, error, phasediff = phase_cross_correlation(
        source, target, upsample_factor=upsample_factor, normalization="phase"
    )
    return PhaseOffsetResult(
        shift=(float(shift[0]), float(shift[1])),
        error=float(error),
        phasediff=float(phasediff),
    )
