# chromamark/color_model.py
"""
RGB <-> YUV conversion with fixed analog (BT.601-like) coefficients.

All functions are vectorized over the last axis of a numpy array, so a whole
(H, W, C) pixel buffer converts in one call. Channels beyond the third
(alpha) are ignored on input. Nothing is clamped.
"""

import numpy as np


def _channels(pixels):
    arr = np.asarray(pixels, dtype=np.float64)
    if arr.shape[-1] < 3:
        raise ValueError("Expected at least 3 channels (R, G, B) on the last axis")
    return arr[..., 0], arr[..., 1], arr[..., 2]


def rgb_to_y(pixels) -> np.ndarray:
    r, g, b = _channels(pixels)
    return 0.299 * r + 0.587 * g + 0.114 * b


def rgb_to_u(pixels) -> np.ndarray:
    r, g, b = _channels(pixels)
    return -0.147 * r - 0.289 * g + 0.436 * b


def rgb_to_v(pixels) -> np.ndarray:
    r, g, b = _channels(pixels)
    return 0.615 * r - 0.515 * g - 0.100 * b


def rgb_to_yuv(pixels) -> np.ndarray:
    return np.stack([rgb_to_y(pixels), rgb_to_u(pixels), rgb_to_v(pixels)], axis=-1)


def yuv_to_rgb(yuv) -> np.ndarray:
    y, u, v = _channels(yuv)
    r = y + 1.140 * v
    g = y - 0.395 * u - 0.581 * v
    b = y + 2.032 * u
    return np.stack([r, g, b], axis=-1)


def u_to_rgb(u) -> np.ndarray:
    """
    RGB for a colour whose only non-zero component is U.
    Shortcut for yuv_to_rgb on (0, u, 0) used when turning the embed
    channel into a pixel delta.
    """
    u = np.asarray(u, dtype=np.float64)
    zeros = np.zeros_like(u)
    return yuv_to_rgb(np.stack([zeros, u, zeros], axis=-1))
