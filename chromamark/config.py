# chromamark/config.py
"""
Embedding parameters.

The three size parameters are tied together:

    embed_size = watermark_size * dct_block_size * 2 ** dwt_levels

so the lowest wavelet subband holds exactly one DCT block per watermark bit.
With the defaults (64, 4, 2) the embed region is 1024x1024 pixels.
"""

import numbers
from typing import Optional, Sequence, Tuple

from .errors import ConfigurationError

# ====== Defaults ======
WATERMARK_SIZE = 64
DWT_LEVELS = 2
DCT_BLOCK_SIZE = 4
SIGMA = 10.0 / 255.0
MIN_ENERGY = 2.0  # floor on |mid-band sum| so empty blocks still get a push
# Mid-band offsets are (x, y): horizontal frequency first, so (2, 0) is
# block coefficient [row 0, col 2].
MIDBANDS: Tuple[Tuple[int, int], ...] = ((1, 2), (2, 0), (2, 1), (2, 2))


def _is_power_of_two(n) -> bool:
    return n > 0 and (n & (n - 1)) == 0


def _is_integer(value) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def is_high_band(x: int, y: int, block_size: int) -> bool:
    """
    Offsets too close to the top frequencies to carry a mark: everything past
    the x + y == block_size diagonal, plus the corner coefficient.
    """
    return x + y > block_size or (x, y) == (block_size - 1, block_size - 1)


def default_midbands(block_size: int) -> Tuple[Tuple[int, int], ...]:
    """
    Mid-band (x, y) offsets for a block size.
    Size 4 uses the fixed table; other sizes take the anti-diagonals between
    block_size // 2 and block_size - 1, which skips DC and the top frequencies.
    """
    if block_size == DCT_BLOCK_SIZE:
        return MIDBANDS
    lo, hi = max(1, block_size // 2), block_size - 1
    return tuple(
        (x, y)
        for x in range(block_size)
        for y in range(block_size)
        if lo <= x + y <= hi
    )


class WatermarkConfig:
    def __init__(
        self,
        watermark_size: int = WATERMARK_SIZE,
        dwt_levels: int = DWT_LEVELS,
        dct_block_size: int = DCT_BLOCK_SIZE,
        sigma: float = SIGMA,
        midbands: Optional[Sequence[Tuple[int, int]]] = None,
        min_energy: float = MIN_ENERGY,
    ):
        self.watermark_size = watermark_size
        self.dwt_levels = dwt_levels
        self.dct_block_size = dct_block_size
        self.sigma = sigma
        if midbands is None:
            midbands = default_midbands(dct_block_size)
        self.midbands = tuple((int(x), int(y)) for x, y in midbands)
        self.min_energy = min_energy

    @property
    def subband_size(self) -> int:
        return self.watermark_size * self.dct_block_size

    @property
    def embed_size(self) -> int:
        return self.subband_size << self.dwt_levels

    def validate(self) -> "WatermarkConfig":
        """
        Check the parameters once, before any transform runs.
        Returns self so it can be chained.
        """
        for name in ("watermark_size", "dct_block_size"):
            value = getattr(self, name)
            if not _is_integer(value) or not _is_power_of_two(value):
                raise ConfigurationError(
                    f"{name} must be a positive power of two", {name: value}
                )
        if not _is_integer(self.dwt_levels) or self.dwt_levels < 1:
            raise ConfigurationError(
                "dwt_levels must be a positive integer", {"dwt_levels": self.dwt_levels}
            )
        if not self.sigma > 0:
            raise ConfigurationError("sigma must be positive", {"sigma": self.sigma})
        if self.min_energy < 0:
            raise ConfigurationError(
                "min_energy must not be negative", {"min_energy": self.min_energy}
            )
        if not self.midbands:
            raise ConfigurationError("mid-band set is empty")
        if len(set(self.midbands)) != len(self.midbands):
            raise ConfigurationError("mid-band set has duplicates", {"midbands": self.midbands})
        b = self.dct_block_size
        for x, y in self.midbands:
            if (x, y) == (0, 0):
                raise ConfigurationError("mid-band set must not contain the DC coefficient")
            if not (0 <= x < b and 0 <= y < b):
                raise ConfigurationError(
                    "mid-band offset outside the DCT block",
                    {"offset": (x, y), "dct_block_size": b},
                )
            if is_high_band(x, y, b):
                raise ConfigurationError(
                    "mid-band offset is in the highest frequencies",
                    {"offset": (x, y), "dct_block_size": b},
                )
        return self

    def __repr__(self) -> str:
        return (
            f"WatermarkConfig(watermark_size={self.watermark_size}, "
            f"dwt_levels={self.dwt_levels}, dct_block_size={self.dct_block_size}, "
            f"sigma={self.sigma:.6f}, midbands={self.midbands}, "
            f"embed_size={self.embed_size})"
        )
