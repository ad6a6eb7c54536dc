"""Synthetic images and shifted stacks with known ground-truth offsets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

import numpy as np

from subpixreg.registration.fourier_shift import fourier_shift


@dataclass
class SyntheticConfig:
    """Configuration for a synthetic coregistration stack."""

    # Image dimensions
    height: int = 128
    width: int = 128
    n_slices: int = 5

    # Spot generation
    n_spots: int = 40
    spot_sigma: float = 2.0
    spot_intensity: tuple[float, float] = (100.0, 255.0)
    background: float = 20.0
    noise_std: float = 0.0

    # Per-slice shifts, drawn uniformly in [-max_shift, max_shift]
    max_shift: float = 6.0

    # Random seed for reproducibility
    seed: int = 42


def get_preset_config(preset: Literal["mini", "standard"]) -> SyntheticConfig:
    """Get predefined configuration for a preset.

    Parameters
    ----------
    preset : {"mini", "standard"}
        - "mini": 64x64, 4 slices (fast unit tests)
        - "standard": 256x256, 8 slices (benchmarks)

    Returns
    -------
    SyntheticConfig
        Configuration for the specified preset
    """
    presets = {
        "mini": SyntheticConfig(height=64, width=64, n_slices=4, n_spots=15, max_shift=4.0),
        "standard": SyntheticConfig(height=256, width=256, n_slices=8, n_spots=100, max_shift=12.0),
    }
    if preset not in presets:
        raise ValueError(f"Unknown preset: {preset}. Choose from: {list(presets.keys())}")
    return presets[preset]


def create_ramp_image(shape: tuple[int, int] = (10, 10)) -> np.ndarray:
    """Values ``1..N`` laid out column by column (Fortran order), as float64."""
    n = shape[0] * shape[1]
    return np.arange(1.0, n + 1.0).reshape(shape, order="F")


def create_spot_image(
    shape: tuple[int, int],
    n_spots: int = 40,
    spot_sigma: float = 2.0,
    spot_intensity: tuple[float, float] = (100.0, 255.0),
    background: float = 20.0,
    noise_std: float = 0.0,
    seed: int | None = None,
) -> np.ndarray:
    """Create a float64 2D periodic image of Gaussian spots on a flat background.

    Parameters
    ----------
    shape : tuple[int, int]
        Image shape as (y, x)
    n_spots : int
        Number of spots at random positions
    spot_sigma : float
        Gaussian sigma of each spot
    spot_intensity : tuple[float, float]
        Range of spot peak intensities
    background : float
        Constant background level
    noise_std : float
        Standard deviation of additive Gaussian noise (0 disables)
    seed : int, optional
        Random seed for reproducibility

    Returns
    -------
    np.ndarray
        2D image
    """
    rng = np.random.default_rng(seed)
    image = np.full(shape, background, dtype=np.float64)

    # Localized Gaussian kernels; 4 sigma covers >99% of each spot.
    # Spots wrap around the edges so the image stays periodic.
    kernel_radius = int(np.ceil(spot_sigma * 4))
    offsets = np.arange(-kernel_radius, kernel_radius + 1)
    kernel_1d = np.exp(-(offsets**2) / (2 * spot_sigma**2))
    kernel = np.outer(kernel_1d, kernel_1d)

    ys = rng.integers(0, shape[0], n_spots)
    xs = rng.integers(0, shape[1], n_spots)
    intensities = rng.uniform(*spot_intensity, n_spots)
    for y, x, intensity in zip(ys, xs, intensities):
        rows = (y + offsets) % shape[0]
        cols = (x + offsets) % shape[1]
        np.add.at(image, np.ix_(rows, cols), intensity * kernel)

    if noise_std > 0:
        image += rng.normal(0, noise_std, shape)

    return image


def random_shifts(
    n: int,
    max_shift: float = 5.0,
    seed: int | None = None,
) -> list[tuple[float, float]]:
    """Draw ``n`` (dy, dx) shifts uniformly from ``[-max_shift, max_shift]``."""
    rng = np.random.default_rng(seed)
    return [
        (float(dy), float(dx)) for dy, dx in rng.uniform(-max_shift, max_shift, (n, 2))
    ]


def create_shifted_stack(
    image: np.ndarray,
    shifts: list[tuple[float, float]],
    axis: int = 0,
) -> np.ndarray:
    """Stack Fourier-shifted copies of ``image`` along ``axis``.

    Parameters
    ----------
    image : np.ndarray
        Base 2D image
    shifts : list[tuple[float, float]]
        (dy, dx) applied to each slice; use (0, 0) for the reference slice
    axis : int
        Stacking axis of the output

    Returns
    -------
    np.ndarray
        3D float stack with ``len(shifts)`` slices
    """
    return np.stack([fourier_shift(image, s) for s in shifts], axis=axis)


def generate_synthetic_stack(
    config: SyntheticConfig | None = None,
    preset: Literal["mini", "standard"] = "mini",
) -> tuple[np.ndarray, list[tuple[float, float]]]:
    """Generate a stack whose first slice is the unshifted reference.

    Returns
    -------
    tuple[np.ndarray, list[tuple[float, float]]]
        ``(stack, shifts)`` with stack shape ``(n_slices, height, width)``
        and the shift applied to each slice (``(0.0, 0.0)`` first).
    """
    if config is None:
        config = get_preset_config(preset)

    image = create_spot_image(
        (config.height, config.width),
        n_spots=config.n_spots,
        spot_sigma=config.spot_sigma,
        spot_intensity=config.spot_intensity,
        background=config.background,
        noise_std=config.noise_std,
        seed=config.seed,
    )
    shifts = [(0.0, 0.0)] + random_shifts(
        config.n_slices - 1, max_shift=config.max_shift, seed=config.seed + 1
    )
    return create_shifted_stack(image, shifts), shifts
