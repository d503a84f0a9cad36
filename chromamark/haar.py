# chromamark/haar.py
"""
Haar Discrete Wavelet Transform (lifting form) and its multi-level 2D pyramid.

One forward step turns an even-length sequence into

    [approx(0..N/2), detail(0..N/2)]
    approx[i] = S0 * x[2i] + S1 * x[2i+1]
    detail[i] = W0 * x[2i] + W1 * x[2i+1]

The 2D pyramid repeats row + column passes on the shrinking top-left
region, so after L levels the top-left (rows >> L, cols >> L) block is the
LL subband and everything else is detail at some scale.
"""

import numpy as np

# Lifting weights
S0 = 0.5
S1 = 0.5
W0 = 0.5
W1 = -0.5

# Determinant of [[S0, S1], [W0, W1]]; the inverse step divides by it
_DET = S0 * W1 - S1 * W0


def _check(data: np.ndarray, axis: int) -> int:
    if not isinstance(data, np.ndarray) or not np.issubdtype(data.dtype, np.floating):
        raise ValueError("In-place transform needs a floating point numpy array")
    n = data.shape[axis]
    if n % 2:
        raise ValueError(f"Haar transform needs an even length, got {n}")
    return n >> 1


def fwt(data: np.ndarray, axis: int = -1) -> np.ndarray:
    """Forward Haar step along `axis`, in place. Returns `data`."""
    h = _check(data, axis)
    moved = np.moveaxis(data, axis, -1)
    even = moved[..., 0::2].copy()
    odd = moved[..., 1::2].copy()
    moved[..., :h] = S0 * even + S1 * odd
    moved[..., h:] = W0 * even + W1 * odd
    return data


def iwt(data: np.ndarray, axis: int = -1) -> np.ndarray:
    """
    Inverse Haar step along `axis`, in place.
    Solves the 2x2 lifting system directly, so it stays exact for any
    invertible choice of weights.
    """
    h = _check(data, axis)
    moved = np.moveaxis(data, axis, -1)
    approx = moved[..., :h].copy()
    detail = moved[..., h:].copy()
    moved[..., 0::2] = (W1 * approx - S1 * detail) / _DET
    moved[..., 1::2] = (S0 * detail - W0 * approx) / _DET
    return data


def _check_levels(data: np.ndarray, levels: int) -> None:
    if data.ndim != 2:
        raise ValueError(f"2D Haar transform needs a 2D array, got shape {data.shape}")
    if levels < 0:
        raise ValueError(f"levels must not be negative, got {levels}")
    step = 1 << levels
    rows, cols = data.shape
    if rows % step or cols % step:
        raise ValueError(
            f"Shape {data.shape} is not divisible by 2**{levels} = {step}"
        )


def fwt2(data: np.ndarray, levels: int) -> np.ndarray:
    """
    Multi-level forward 2D Haar transform, in place.
    Level k works on the top-left (rows >> k, cols >> k) region: rows first,
    then columns.
    """
    _check_levels(data, levels)
    rows, cols = data.shape
    for k in range(levels):
        region = data[:rows >> k, :cols >> k]
        fwt(region, axis=1)
        fwt(region, axis=0)
    return data


def iwt2(data: np.ndarray, levels: int) -> np.ndarray:
    """
    Inverse of fwt2: levels from coarsest to finest, columns before rows.
    """
    _check_levels(data, levels)
    rows, cols = data.shape
    for k in range(levels - 1, -1, -1):
        region = data[:rows >> k, :cols >> k]
        iwt(region, axis=0)
        iwt(region, axis=1)
    return data
