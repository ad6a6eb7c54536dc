"""Benchmark utilities for sub-pixel registration."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable

import numpy as np

from subpixreg.registration._skimage_backend import phase_offset_skimage
from subpixreg.registration.fourier_shift import fourier_shift
from subpixreg.registration.phase_correlation import phase_offset


@dataclass
class BenchmarkResult:
    """Result of one method at one upsample factor."""

    method: str
    upsample_factor: int
    time_sec: float
    shift_error: float


def _measure_registration(
    func: Callable,
    source: np.ndarray,
    targets: list[np.ndarray],
    expected: list[tuple[float, float]],
    upsample_factor: int,
) -> tuple[float, float]:
    """
    Measure mean time and mean absolute per-axis error over all targets.

    Returns:
        Tuple of (mean_time_sec, mean_shift_error).
    """
    # Warm-up run
    _ = func(source, targets[0], upsample_factor=upsample_factor)

    times = []
    errors = []
    for target, exp in zip(targets, expected):
        start = time.perf_counter()
        detected = func(source, target, upsample_factor=upsample_factor).shift
        times.append(time.perf_counter() - start)
        errors.extend(abs(d - e) for d, e in zip(detected, exp))

    return float(np.mean(times)), float(np.mean(errors))


def run_benchmark(
    shape: tuple[int, int] = (256, 256),
    upsample_factors: list[int] | None = None,
    methods: list[str] | None = None,
    n_shifts: int = 5,
    seed: int = 42,
) -> list[BenchmarkResult]:
    """
    Sweep upsample factors on a synthetic image with known fractional shifts.

    Args:
        shape: (Y, X) image size.
        upsample_factors: Factors to test. Defaults to [1, 5, 20, 100].
        methods: "numpy" and/or "skimage". Defaults to both.
        n_shifts: Number of random shifts per factor.
        seed: Random seed for reproducibility.

    Returns:
        List of BenchmarkResult objects.
    """
    from subpixreg.testdata import create_spot_image, random_shifts

    if upsample_factors is None:
        upsample_factors = [1, 5, 20, 100]
    if methods is None:
        methods = ["numpy", "skimage"]

    method_funcs = {
        "numpy": phase_offset,
        "skimage": phase_offset_skimage,
    }

    source = create_spot_image(shape, seed=seed)
    shifts = random_shifts(n_shifts, max_shift=min(shape) / 8, seed=seed)
    targets = [fourier_shift(source, s) for s in shifts]
    # phase_offset reports the shift that undoes the applied one
    expected = [(-dy, -dx) for dy, dx in shifts]

    results = []
    for factor in upsample_factors:
        for method in methods:
            mean_time, error = _measure_registration(
                method_funcs[method], source, targets, expected, factor
            )
            results.append(
                BenchmarkResult(
                    method=method,
                    upsample_factor=factor,
                    time_sec=mean_time,
                    shift_error=error,
                )
            )

    return results


def print_benchmark_table(results: list[BenchmarkResult]) -> None:
    """Print benchmark results as formatted table."""
    print()
    print("| Method  | Upsample | Time (ms) | Shift Error (px) |")
    print("|---------|----------|-----------|------------------|")

    for r in results:
        print(
            f"| {r.method:<7} | {r.upsample_factor:>8} | {r.time_sec * 1e3:>9.2f} | {r.shift_error:>16.4f} |"
        )

    print()
