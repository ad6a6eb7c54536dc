"""Alignment quality metrics.

Image-similarity scores plus the residual offset left after registration,
for checking that a registered frame actually landed on its reference.
"""

from __future__ import annotations

import numpy as np
from skimage.metrics import structural_similarity as _ssim

from subpixreg.registration.phase_correlation import phase_offset, validate_pair


def structural_similarity(
    img1: np.ndarray,
    img2: np.ndarray,
    win_size: int | None = None,
    data_range: float | None = None,
) -> float:
    """Compute Structural Similarity Index (SSIM) between two images.

    Parameters
    ----------
    img1 : np.ndarray
        First 2D image.
    img2 : np.ndarray
        Second image (same shape as img1).
    win_size : int | None, optional
        Size of the sliding window for local statistics. Must be odd.
        If None, uses min(7, smallest_dimension) and ensures it's odd.
    data_range : float | None, optional
        Data range of the images. If None, computed from img1.

    Returns
    -------
    float
        SSIM value in range [-1, 1]. 1 = identical, 0 = no similarity.
    """
    img1 = np.asarray(img1, dtype=np.float64)
    img2 = np.asarray(img2, dtype=np.float64)
    validate_pair(img1, img2)

    if data_range is None:
        data_range = img1.max() - img1.min()
        if data_range == 0:
            data_range = 1.0  # Constant image

    if win_size is None:
        min_dim = min(img1.shape)
        win_size = min(7, min_dim)
        if win_size % 2 == 0:
            win_size = max(3, win_size - 1)

    return float(_ssim(img1, img2, win_size=win_size, data_range=data_range))


def normalized_cross_correlation(img1: np.ndarray, img2: np.ndarray) -> float:
    """Compute zero-mean normalized cross-correlation between two images.

    Returns
    -------
    float
        NCC value in range [-1, 1]. 1 = perfect correlation, 0 = uncorrelated.
    """
    img1 = np.asarray(img1, dtype=np.float64)
    img2 = np.asarray(img2, dtype=np.float64)

    img1_norm = (img1 - img1.mean()) / (img1.std() + 1e-10)
    img2_norm = (img2 - img2.mean()) / (img2.std() + 1e-10)

    return float(np.mean(img1_norm * img2_norm))


def alignment_quality_report(
    ref: np.ndarray,
    before: np.ndarray,
    after: np.ndarray,
    upsample_factor: int = 10,
) -> dict[str, dict[str, float]]:
    """Compare an image with its reference before and after registration.

    Parameters
    ----------
    ref : np.ndarray
        Reference image.
    before : np.ndarray
        Image before registration (same shape as ref).
    after : np.ndarray
        Image after registration (same shape as ref).
    upsample_factor : int, optional
        Precision used to measure the residual offset. Default 10.

    Returns
    -------
    dict
        ``{"ncc": {...}, "ssim": {...}, "residual_shift": {...}}`` with
        "before"/"after" entries. The residual shift is the Euclidean norm
        of the remaining ``phase_offset`` in pixels.
    """
    residual = {}
    for label, img in (("before", before), ("after", after)):
        dy, dx = phase_offset(ref, img, upsample_factor=upsample_factor).shift
        residual[label] = float(np.hypot(dy, dx))

    return {
        "ncc": {
            "before": normalized_cross_correlation(ref, before),
            "after": normalized_cross_correlation(ref, after),
        },
        "ssim": {
            "before": structural_similarity(ref, before),
            "after": structural_similarity(ref, after),
        },
        "residual_shift": residual,
    }


def print_quality_report(report: dict[str, dict[str, float]]) -> None:
    """Print a report produced by :func:`alignment_quality_report`."""
    print("=" * 52)
    print("ALIGNMENT QUALITY REPORT")
    print("=" * 52)
    print(f"\n{'Metric':<26} {'Before':>12} {'After':>12}")
    print("-" * 52)

    b, a = report["ncc"]["before"], report["ncc"]["after"]
    print(f"{'NCC (↑ better)':<26} {b:>12.4f} {a:>12.4f}")

    b, a = report["ssim"]["before"], report["ssim"]["after"]
    print(f"{'SSIM (↑ better)':<26} {b:>12.4f} {a:>12.4f}")

    b, a = report["residual_shift"]["before"], report["residual_shift"]["after"]
    print(f"{'Residual shift px (↓)':<26} {b:>12.3f} {a:>12.3f}")

    print("=" * 52)
