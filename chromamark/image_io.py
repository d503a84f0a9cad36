# chromamark/image_io.py
"""
Pixel buffer I/O for the watermark codec.

The codec works on float (H, W, 4) buffers in [0, 1]. This module moves
between those and image files (Pillow), resizes a candidate back to the
original resolution (OpenCV), and renders the embed delta for inspection.
"""

from pathlib import Path
from typing import Tuple

import cv2
import numpy as np
from PIL import Image


def from_uint8(arr: np.ndarray) -> np.ndarray:
    return np.asarray(arr, dtype=np.float64) / 255.0


def to_uint8(pixels: np.ndarray) -> np.ndarray:
    """
    Float [0, 1] -> uint8. This is the only place values get clamped.
    """
    return np.clip(np.round(np.asarray(pixels) * 255.0), 0, 255).astype(np.uint8)


def read_pixels(path) -> np.ndarray:
    """
    Read any Pillow-supported image as a float64 RGBA buffer in [0, 1].
    """
    path = Path(path)
    try:
        with Image.open(path) as img:
            arr = np.array(img.convert("RGBA"))
    except (OSError, ValueError) as e:
        raise ValueError(f"Could not read image: {path}") from e
    return from_uint8(arr)


def write_pixels(path, pixels: np.ndarray) -> None:
    """
    Write a float buffer as an 8-bit image. Alpha is dropped for formats
    that cannot carry it (JPEG).
    """
    path = Path(path)
    arr = to_uint8(pixels)
    # mode (L / RGB / RGBA) follows from the array shape
    img = Image.fromarray(arr)
    if path.suffix.lower() in (".jpg", ".jpeg") and img.mode == "RGBA":
        img = img.convert("RGB")
    try:
        img.save(path)
    except (OSError, ValueError) as e:
        raise ValueError(f"Could not write image: {path}") from e


def resample(pixels: np.ndarray, size: Tuple[int, int]) -> np.ndarray:
    """
    Resize a buffer to (width, height) with bilinear filtering.
    Returns the input untouched when it already has that size.
    """
    width, height = int(size[0]), int(size[1])
    arr = np.asarray(pixels)
    if arr.shape[1] == width and arr.shape[0] == height:
        return arr
    resized = cv2.resize(arr.astype(np.float32), (width, height), interpolation=cv2.INTER_LINEAR)
    return resized.astype(np.float64)


def render_delta_preview(delta: np.ndarray) -> np.ndarray:
    """
    Visualize an RGB embed delta around mid gray: 0.5 - delta, opaque.
    """
    delta = np.asarray(delta, dtype=np.float64)
    out = np.ones(delta.shape[:2] + (4,), dtype=np.float64)
    out[..., :3] = 0.5 - delta[..., :3]
    return out
