# chromamark/codec.py
"""
DWT + DCT spread-spectrum watermark in the U (chroma) channel.

Method summary:
- Start from an all-zero channel buffer of side embed_size.
- Multi-level Haar DWT, then take the LL subband.
- Split the subband into DCT blocks, one per watermark bit.
- Forward DCT each block and push the sum of its mid-band coefficients
  towards +sigma (bit 1) or -sigma (bit 0), scaled by the block energy.
- Inverse DCT, put the subband back, inverse DWT.
- Read the result as a U component and add the matching RGB delta to the
  top-left embed_size square of the host.

Extraction reads U from the candidate, repeats DWT + block DCT and decodes
each bit from the sign of the mid-band sum. It is blind: the host is not
needed.

Public API:
- embed_watermark(host, mark, config=None) -> watermarked pixels
- extract_watermark(candidate, config=None, size=None) -> RGBA bitmap
- extract_bits(candidate, config=None, size=None) -> bool grid
- compute_embed_delta(mark, config=None) -> RGB delta
- is_embeddable(shape, config=None) -> bool

Blocks never share coefficients, so every stage runs on the whole stack of
blocks at once; the result does not depend on block order.
"""

import logging
import time
from typing import Iterator, Optional, Tuple

import numpy as np

from . import color_model, cosine_transform, haar
from .config import WatermarkConfig
from .errors import PreconditionError
from .matrix_window import ll_subband, submatrix

logger = logging.getLogger(__name__)


# ====== Helpers: validation ======

def _resolve(config: Optional[WatermarkConfig]) -> WatermarkConfig:
    return (config or WatermarkConfig()).validate()


def _check_pixels(pixels: np.ndarray, name: str) -> np.ndarray:
    arr = np.asarray(pixels)
    if arr.ndim != 3 or arr.shape[2] not in (3, 4):
        raise PreconditionError(
            f"{name} must be an (H, W, 3) or (H, W, 4) pixel buffer",
            {"shape": arr.shape},
        )
    return arr


def _check_covers_embed_region(shape: Tuple[int, ...], config: WatermarkConfig, name: str) -> None:
    size = config.embed_size
    if shape[0] < size or shape[1] < size:
        raise PreconditionError(
            f"{name} is smaller than the embed region",
            {"height": shape[0], "width": shape[1], "embed_size": size},
        )


def is_embeddable(shape: Tuple[int, ...], config: Optional[WatermarkConfig] = None) -> bool:
    """
    True when an image of `shape` (H, W, ...) can hold the watermark.
    """
    config = _resolve(config)
    ok = shape[0] >= config.embed_size and shape[1] >= config.embed_size
    if not ok:
        logger.warning(
            "Image %dx%d is smaller than the %dx%d embed region",
            shape[1], shape[0], config.embed_size, config.embed_size,
        )
    return ok


def _watermark_bits(mark: np.ndarray, config: WatermarkConfig) -> np.ndarray:
    """
    Boolean (size, size) grid from a watermark bitmap; red channel > 0.5.
    A 2D array is read as a single channel.
    """
    arr = np.asarray(mark, dtype=np.float64)
    if arr.ndim == 3:
        arr = arr[..., 0]
    size = config.watermark_size
    if arr.shape != (size, size):
        raise PreconditionError(
            "Watermark bitmap must be watermark_size x watermark_size",
            {"shape": np.asarray(mark).shape, "watermark_size": size},
        )
    return arr > 0.5


# ====== Helpers: blocks ======

def _iterate_blocks(subband: np.ndarray, block_size: int,
                    grid_w: int, grid_h: int) -> Iterator[Tuple[int, int, np.ndarray]]:
    """
    Yield (x, y, block_copy) in row-major order; block (x, y) covers subband
    rows y*B..y*B+B-1 and columns x*B..x*B+B-1.
    """
    for y in range(grid_h):
        for x in range(grid_w):
            r, c = y * block_size, x * block_size
            yield x, y, submatrix(subband, r, r + block_size - 1, c, c + block_size - 1)


def _split_blocks(subband: np.ndarray, config: WatermarkConfig,
                  grid_w: int, grid_h: int) -> np.ndarray:
    b = config.dct_block_size
    blocks = np.empty((grid_h, grid_w, b, b), dtype=np.float64)
    for x, y, block in _iterate_blocks(subband, b, grid_w, grid_h):
        blocks[y, x] = block
    return blocks


def _merge_blocks(subband: np.ndarray, blocks: np.ndarray) -> None:
    """Write a (grid_h, grid_w, B, B) stack back into the subband, in place."""
    grid_h, grid_w, b, _ = blocks.shape
    subband[:grid_h * b, :grid_w * b] = blocks.transpose(0, 2, 1, 3).reshape(grid_h * b, grid_w * b)


def _midband_index(config: WatermarkConfig) -> Tuple[np.ndarray, np.ndarray]:
    """(rows, cols) index arrays; offsets are (x, y) so x picks the column."""
    rows = np.array([y for _, y in config.midbands], dtype=np.intp)
    cols = np.array([x for x, _ in config.midbands], dtype=np.intp)
    return rows, cols


def _midband_sums(coeffs: np.ndarray, config: WatermarkConfig) -> np.ndarray:
    rows, cols = _midband_index(config)
    return coeffs[..., rows, cols].sum(axis=-1)


def _encode_blocks(blocks: np.ndarray, bits: np.ndarray, config: WatermarkConfig) -> np.ndarray:
    """
    DCT every block, shift its mid-band coefficients by +-sigma times the
    block's mid-band energy, inverse DCT. Works in place on the stack.
    """
    cosine_transform.dct2(blocks)
    energy = np.maximum(config.min_energy, np.abs(_midband_sums(blocks, config)))
    sigma = np.where(bits, config.sigma, -config.sigma)
    rows, cols = _midband_index(config)
    blocks[..., rows, cols] += (energy * sigma)[..., np.newaxis]
    cosine_transform.idct2(blocks)
    return blocks


def _decode_blocks(blocks: np.ndarray, config: WatermarkConfig) -> np.ndarray:
    cosine_transform.dct2(blocks)
    return _midband_sums(blocks, config) > 0


# ====== Public API: Embed ======

def compute_embed_delta(mark: np.ndarray, config: Optional[WatermarkConfig] = None) -> np.ndarray:
    """
    RGB delta of shape (embed_size, embed_size, 3) that carries `mark`.
    The host image plays no part in it.
    """
    config = _resolve(config)
    bits = _watermark_bits(mark, config)
    size = config.embed_size
    grid = config.watermark_size

    t0 = time.perf_counter()
    channel = np.zeros((size, size), dtype=np.float64)
    haar.fwt2(channel, config.dwt_levels)
    subband = ll_subband(channel, config.dwt_levels)

    blocks = _split_blocks(subband, config, grid, grid)
    _encode_blocks(blocks, bits, config)
    _merge_blocks(subband, blocks)

    n = config.subband_size
    channel[:n, :n] = subband
    haar.iwt2(channel, config.dwt_levels)
    logger.debug("Embed delta computed in %.1f ms", (time.perf_counter() - t0) * 1000.0)

    return color_model.u_to_rgb(channel)


def embed_watermark(host: np.ndarray, mark: np.ndarray,
                    config: Optional[WatermarkConfig] = None) -> np.ndarray:
    """
    Add the watermark delta onto the top-left embed_size square of `host`.
    Returns a new float64 buffer with the host's shape; no clamping, the
    alpha channel (if any) is left as is.
    """
    config = _resolve(config)
    host = _check_pixels(host, "Host image")
    _check_covers_embed_region(host.shape, config, "Host image")
    _watermark_bits(mark, config)

    delta = compute_embed_delta(mark, config)

    size = config.embed_size
    out = np.array(host, dtype=np.float64, copy=True)
    out[:size, :size, :3] += delta
    logger.debug(
        "Embedded %dx%d watermark into %dx%d image",
        config.watermark_size, config.watermark_size, host.shape[1], host.shape[0],
    )
    return out


# ====== Public API: Extract ======

def _resolve_size(size: Optional[Tuple[int, int]], config: WatermarkConfig) -> Tuple[int, int]:
    if size is None:
        return config.watermark_size, config.watermark_size
    width, height = int(size[0]), int(size[1])
    if not (0 < width <= config.watermark_size and 0 < height <= config.watermark_size):
        raise PreconditionError(
            "Requested watermark size exceeds the embedded grid",
            {"width": width, "height": height, "watermark_size": config.watermark_size},
        )
    return width, height


def extract_bits(candidate: np.ndarray, config: Optional[WatermarkConfig] = None,
                 size: Optional[Tuple[int, int]] = None) -> np.ndarray:
    """
    Decode the watermark from `candidate` as a (height, width) bool grid.
    The candidate must already be at the original host resolution.
    """
    config = _resolve(config)
    candidate = _check_pixels(candidate, "Candidate image")
    _check_covers_embed_region(candidate.shape, config, "Candidate image")
    width, height = _resolve_size(size, config)

    t0 = time.perf_counter()
    last = config.embed_size - 1
    region = submatrix(np.asarray(candidate, dtype=np.float64), 0, last, 0, last)
    channel = color_model.rgb_to_u(region)

    haar.fwt2(channel, config.dwt_levels)
    subband = ll_subband(channel, config.dwt_levels)

    blocks = _split_blocks(subband, config, width, height)
    bits = _decode_blocks(blocks, config)
    logger.debug("Watermark decoded in %.1f ms", (time.perf_counter() - t0) * 1000.0)
    return bits


def bits_to_pixels(bits: np.ndarray) -> np.ndarray:
    """Bool grid -> RGBA buffer, white for 1 and black for 0, opaque."""
    value = np.asarray(bits, dtype=np.float64)
    out = np.ones(value.shape + (4,), dtype=np.float64)
    out[..., :3] = value[..., np.newaxis]
    return out


def extract_watermark(candidate: np.ndarray, config: Optional[WatermarkConfig] = None,
                      size: Optional[Tuple[int, int]] = None) -> np.ndarray:
    """
    Recovered watermark as an RGBA (height, width, 4) black/white buffer.
    """
    return bits_to_pixels(extract_bits(candidate, config, size))
