"""Register image pairs and coregister stacks of 2D frames."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import numpy as np

from subpixreg.errors import InvalidArgumentError
from subpixreg.logging import log_step, logger
from subpixreg.registration.fft import FFTPlan, plan_fft
from subpixreg.registration.fourier_shift import fourier_shift_inplace
from subpixreg.registration.phase_correlation import (
    phase_offset_freq,
    validate_pair,
    validate_upsample_factor,
)


@log_step
def register(
    source: np.ndarray,
    target: np.ndarray,
    upsample_factor: int = 1,
) -> np.ndarray:
    """
    Align ``target`` to ``source`` with phase correlation and a Fourier shift.

    Args:
        source: Reference image with shape (Y, X).
        target: Image to align, same shape as source.
        upsample_factor: Registration precision is ``1/upsample_factor`` pixel.

    Returns:
        Real-valued aligned copy of target.
    """
    validate_upsample_factor(upsample_factor)
    source = np.asarray(source)
    target = np.asarray(target)
    validate_pair(source, target)

    plan = plan_fft(source, dtype=np.result_type(source.dtype, target.dtype))
    target_freq = plan.forward(target)
    result = phase_offset_freq(
        plan, plan.forward(source), target_freq, upsample_factor=upsample_factor
    )
    logger.info(f"Estimated shift {result.shift} (error={result.error:.4g})")

    shifted = fourier_shift_inplace(target_freq, result.shift, result.phasediff)
    return np.real(plan.inverse(shifted, overwrite=True))


def _normalize_axis(axis: int, ndim: int) -> int:
    if isinstance(axis, bool) or not isinstance(axis, (int, np.integer)):
        raise InvalidArgumentError(f"axis must be an integer, got {axis!r}")
    if not -ndim <= axis < ndim:
        raise InvalidArgumentError(f"axis {axis} is out of range for a {ndim}D stack")
    return int(axis) % ndim


def _resolve_ref_index(ref_index: int | None, n_slices: int) -> int:
    if ref_index is None:
        return 0
    if isinstance(ref_index, bool) or not isinstance(ref_index, (int, np.integer)):
        raise InvalidArgumentError(f"ref_index must be an integer, got {ref_index!r}")
    if not -n_slices <= ref_index < n_slices:
        raise InvalidArgumentError(
            f"ref_index {ref_index} is out of range for {n_slices} slices"
        )
    return int(ref_index) % n_slices


def _align_slice(
    frames: np.ndarray,
    idx: int,
    plan: FFTPlan,
    source_freq: np.ndarray,
    upsample_factor: int,
) -> tuple[float, float]:
    """Align ``frames[idx]`` to the reference spectrum and write it back."""
    target_freq = plan.forward(frames[idx])
    result = phase_offset_freq(plan, source_freq, target_freq, upsample_factor=upsample_factor)
    fourier_shift_inplace(target_freq, result.shift, result.phasediff)
    # frames is a view of the caller's stack
    frames[idx] = np.real(plan.inverse(target_freq, overwrite=True))
    logger.debug(f"Slice {idx}: shift {result.shift}")
    return result.shift


@log_step
def coregister_inplace(
    stack: np.ndarray,
    axis: int = 0,
    ref_index: int | None = None,
    upsample_factor: int = 1,
    max_workers: int | None = None,
) -> np.ndarray:
    """Coregister the 2D slices of ``stack`` along ``axis``, modifying it in place.

    The slice at ``ref_index`` is the fixed source frame and is left
    untouched. Every other slice is aligned to it independently.

    Parameters
    ----------
    stack : np.ndarray
        3D floating-point array.
    axis : int, optional
        Axis indexing the slices. Default 0.
    ref_index : int | None, optional
        Reference slice; negative values count from the end. Default first slice.
    upsample_factor : int, optional
        Registration precision is ``1/upsample_factor`` pixel. Default 1.
    max_workers : int | None, optional
        If > 1, align slices on a thread pool of this size.

    Returns
    -------
    np.ndarray
        ``stack`` itself.
    """
    validate_upsample_factor(upsample_factor)
    if not isinstance(stack, np.ndarray):
        raise InvalidArgumentError(
            f"coregister_inplace needs an ndarray, got {type(stack).__name__}"
        )
    if stack.ndim != 3:
        raise InvalidArgumentError(f"Expected a 3D stack, got shape {stack.shape}")
    if not np.issubdtype(stack.dtype, np.floating):
        raise InvalidArgumentError(
            f"Cannot write aligned slices into a {stack.dtype} stack in place; use coregister"
        )
    if max_workers is not None and max_workers < 1:
        raise InvalidArgumentError(f"max_workers must be >= 1, got {max_workers}")

    axis = _normalize_axis(axis, stack.ndim)
    frames = np.moveaxis(stack, axis, 0)
    n_slices = frames.shape[0]
    ref_index = _resolve_ref_index(ref_index, n_slices)

    plan = plan_fft(frames[ref_index])
    source_freq = plan.forward(frames[ref_index])
    indices = [i for i in range(n_slices) if i != ref_index]
    logger.info(
        f"Coregistering {len(indices)} slices along axis {axis} to reference {ref_index}"
    )

    if max_workers is not None and max_workers > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            list(
                executor.map(
                    lambda idx: _align_slice(frames, idx, plan, source_freq, upsample_factor),
                    indices,
                )
            )
    else:
        for idx in indices:
            _align_slice(frames, idx, plan, source_freq, upsample_factor)

    return stack


def coregister(
    stack: np.ndarray,
    axis: int = 0,
    ref_index: int | None = None,
    upsample_factor: int = 1,
    max_workers: int | None = None,
) -> np.ndarray:
    """Coregister a copy of ``stack``; see :func:`coregister_inplace`.

    Non-floating stacks are promoted to float64 before alignment.
    """
    stack = np.asarray(stack)
    dtype = stack.dtype if np.issubdtype(stack.dtype, np.floating) else np.float64
    return coregister_inplace(
        np.array(stack, dtype=dtype, copy=True),
        axis=axis,
        ref_index=ref_index,
        upsample_factor=upsample_factor,
        max_workers=max_workers,
    )
