"""Type definitions shared across the registration layer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, TypeAlias

import numpy as np

# Type aliases
Shift2D: TypeAlias = tuple[float, float]  # (dy, dx)
Image: TypeAlias = np.ndarray  # Shape: (Y, X)
Stack: TypeAlias = np.ndarray  # Shape: (N, Y, X), iteration axis configurable


@dataclass(frozen=True)
class PhaseOffsetResult:
    """Outcome of a single phase offset estimate.

    ``shift`` is the displacement that moves the target onto the source.
    ``error`` is the normalized RMSE statistic of the correlation peak and
    ``phasediff`` the global phase difference (radians) between the two
    spectra.

    Unpacks like a tuple: ``shift, error, phasediff = result``.
    """

    shift: Shift2D
    error: float
    phasediff: float

    def __iter__(self) -> Iterator:
        return iter((self.shift, self.error, self.phasediff))
