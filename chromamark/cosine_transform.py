# chromamark/cosine_transform.py
"""
Orthonormal Discrete Cosine Transform (DCT-II forward, DCT-III inverse).

Forward, for a sequence x of length N:

    X[k] = sqrt(2/N) * sum_n x[n] * cos((2n + 1) * k * pi / (2N)),  X[0] /= sqrt(2)

Inverse:

    x[k] = sqrt(2/N) * (X[0] / sqrt(2) + sum_{n>=1} X[n] * cos((2k + 1) * n * pi / (2N)))

This is scipy's type-2 / type-3 DCT with norm="ortho". The wrappers here
write the result back into the input array and transform along one axis,
so stacked blocks of shape (..., R, C) are handled independently in a
single call.
"""

import numpy as np
from scipy.fft import dct as _dct, idct as _idct


def _check_inplace(data: np.ndarray) -> None:
    if not isinstance(data, np.ndarray) or not np.issubdtype(data.dtype, np.floating):
        raise ValueError("In-place transform needs a floating point numpy array")


def dct(data: np.ndarray, axis: int = -1) -> np.ndarray:
    """Forward 1D DCT along `axis`, in place. Returns `data`."""
    _check_inplace(data)
    if data.shape[axis] == 0:
        return data
    data[...] = _dct(data, type=2, axis=axis, norm="ortho")
    return data


def idct(data: np.ndarray, axis: int = -1) -> np.ndarray:
    """Inverse 1D DCT along `axis`, in place. Returns `data`."""
    _check_inplace(data)
    if data.shape[axis] == 0:
        return data
    data[...] = _idct(data, type=2, axis=axis, norm="ortho")
    return data


def dct2(data: np.ndarray) -> np.ndarray:
    """
    Separable 2D DCT over the last two axes: every row, then every column.
    """
    dct(data, axis=-1)
    dct(data, axis=-2)
    return data


def idct2(data: np.ndarray) -> np.ndarray:
    """
    Inverse of dct2: every column, then every row.
    """
    idct(data, axis=-2)
    idct(data, axis=-1)
    return data
