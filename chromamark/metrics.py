# chromamark/metrics.py
"""
Quality measures for a watermark round trip.
"""

import numpy as np


def _as_bits(mark: np.ndarray) -> np.ndarray:
    arr = np.asarray(mark)
    if arr.dtype == np.bool_:
        return arr
    arr = arr.astype(np.float64)
    if arr.ndim == 3:
        arr = arr[..., 0]
    return arr > 0.5


def bit_accuracy(expected: np.ndarray, recovered: np.ndarray) -> float:
    """
    Fraction of matching bits. Accepts bool grids or bitmaps (red > 0.5).
    """
    a, b = _as_bits(expected), _as_bits(recovered)
    if a.shape != b.shape:
        raise ValueError(f"Bitmap shapes differ: {a.shape} vs {b.shape}")
    if a.size == 0:
        return 1.0
    return float(np.mean(a == b))


def psnr(original: np.ndarray, processed: np.ndarray, peak: float = 1.0) -> float:
    """PSNR in dB over the RGB channels of two float buffers."""
    a = np.asarray(original, dtype=np.float64)[..., :3]
    b = np.asarray(processed, dtype=np.float64)[..., :3]
    mse = np.mean((a - b) ** 2)
    if mse == 0:
        return float("inf")
    return float(20 * np.log10(peak / np.sqrt(mse)))
