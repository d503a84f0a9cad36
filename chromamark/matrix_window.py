# chromamark/matrix_window.py
"""
Rectangular sub-region extraction with strict bounds checking.
"""

import numpy as np

from .errors import OutOfRangeError


def submatrix(source: np.ndarray, start_row: int, end_row: int,
              start_col: int, end_col: int) -> np.ndarray:
    """
    Return a copy of source[start_row..end_row, start_col..end_col] (closed
    intervals). Any negative, inverted or out-of-bounds index raises
    OutOfRangeError; the source is never touched.
    Extra trailing axes (e.g. colour channels) come along unchanged.
    """
    if source is None:
        raise OutOfRangeError("source matrix is None")

    rows, cols = source.shape[0], source.shape[1]
    if (start_row > end_row or start_col > end_col
            or start_row < 0 or end_row >= rows
            or start_col < 0 or end_col >= cols):
        raise OutOfRangeError(
            "Argument out of range.",
            {
                "rows": (start_row, end_row),
                "cols": (start_col, end_col),
                "shape": (rows, cols),
            },
        )

    return np.array(source[start_row:end_row + 1, start_col:end_col + 1], copy=True)


def ll_subband(data: np.ndarray, levels: int) -> np.ndarray:
    """
    Copy of the coarsest approximation band left by `levels` forward Haar
    passes: the top-left (rows >> levels, cols >> levels) region.
    """
    rows, cols = data.shape[0] >> levels, data.shape[1] >> levels
    return submatrix(data, 0, rows - 1, 0, cols - 1)
