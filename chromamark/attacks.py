# chromamark/attacks.py
"""
Image degradations used to measure watermark robustness.

These stand in for the real-world processing a watermarked image goes
through (re-encoding, rescaling, filtering). The codec never calls them;
the tests, the robustness harness and the CLI --attack mode do.

Every attack takes a float pixel buffer and returns one of the same shape,
quantized to 8 bits on the way like a real file round trip would be.
"""

import io

import cv2
import numpy as np
from PIL import Image

from .image_io import from_uint8, to_uint8


def _split_alpha(pixels: np.ndarray):
    arr = np.asarray(pixels)
    alpha = arr[..., 3:4] if arr.shape[2] == 4 else None
    return to_uint8(arr[..., :3]), alpha


def _join_alpha(rgb_u8: np.ndarray, alpha) -> np.ndarray:
    rgb = from_uint8(rgb_u8)
    if alpha is None:
        return rgb
    return np.concatenate([rgb, np.asarray(alpha, dtype=np.float64)], axis=-1)


def jpeg_compression(pixels: np.ndarray, quality: int = 75) -> np.ndarray:
    """
    Lossy JPEG encode/decode round trip at `quality` (1..100), in memory.
    """
    if not 1 <= quality <= 100:
        raise ValueError(f"JPEG quality must be in 1..100, got {quality}")
    rgb, alpha = _split_alpha(pixels)
    buf = io.BytesIO()
    Image.fromarray(rgb).save(buf, "JPEG", quality=int(quality))
    buf.seek(0)
    with Image.open(buf) as img:
        decoded = np.array(img.convert("RGB"))
    return _join_alpha(decoded, alpha)


def resize_round_trip(pixels: np.ndarray, distortion_percent: float) -> np.ndarray:
    """Shrink by `distortion_percent` and scale back up (Lanczos)."""
    rgb, alpha = _split_alpha(pixels)
    h, w = rgb.shape[:2]
    scale = 1.0 - (distortion_percent / 100.0)
    img = Image.fromarray(rgb)
    small = img.resize((max(1, int(w * scale)), max(1, int(h * scale))), Image.LANCZOS)
    back = small.resize((w, h), Image.LANCZOS)
    return _join_alpha(np.array(back), alpha)


def gaussian_blur(pixels: np.ndarray, distortion_percent: float) -> np.ndarray:
    rgb, alpha = _split_alpha(pixels)
    kernel_size = 1 + 2 * int(distortion_percent / 10)
    if kernel_size < 3:
        kernel_size = 3
    blurred = cv2.GaussianBlur(rgb, (kernel_size, kernel_size), 0)
    return _join_alpha(blurred, alpha)


def brightness(pixels: np.ndarray, distortion_percent: float) -> np.ndarray:
    """Scale the HSV value channel by 1 + distortion_percent / 100."""
    rgb, alpha = _split_alpha(pixels)
    hsv = cv2.cvtColor(rgb, cv2.COLOR_RGB2HSV).astype(np.float64)
    multiplier = 1.0 + (distortion_percent / 100.0)
    hsv[..., 2] = np.clip(hsv[..., 2] * multiplier, 0, 255)
    bright = cv2.cvtColor(hsv.astype(np.uint8), cv2.COLOR_HSV2RGB)
    return _join_alpha(bright, alpha)


ATTACKS = {
    "jpeg": lambda pixels, level: jpeg_compression(pixels, max(100 - int(level), 10)),
    "resize": resize_round_trip,
    "blur": gaussian_blur,
    "brightness": brightness,
}
