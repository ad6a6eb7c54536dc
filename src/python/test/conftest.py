"""Pytest fixtures for subpixreg tests."""

import numpy as np
import pytest

from subpixreg.testdata import create_ramp_image, create_spot_image


@pytest.fixture
def ramp_image() -> np.ndarray:
    """10x10 column-major ramp 1..100."""
    return create_ramp_image((10, 10))


@pytest.fixture
def spot_image() -> np.ndarray:
    """64x64 image of smooth Gaussian spots (negligible Nyquist content)."""
    return create_spot_image((64, 64), n_spots=40, spot_sigma=2.0, seed=0)


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)
