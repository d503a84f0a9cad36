# chromamark test configuration
# Shared configurations and synthetic images

import numpy as np
import pytest

from chromamark.config import WatermarkConfig


@pytest.fixture
def rng():
    """Deterministic random generator."""
    return np.random.default_rng(20240611)


@pytest.fixture(scope="session")
def default_config():
    return WatermarkConfig().validate()


@pytest.fixture
def small_config():
    """2x2 watermark, 2x2 DCT blocks, one DWT level: an 8x8 embed region."""
    return WatermarkConfig(watermark_size=2, dct_block_size=2, dwt_levels=1, sigma=0.1).validate()


@pytest.fixture
def gray_host():
    """Flat mid-gray opaque image, large enough for the default config."""
    def _make(height=1024, width=1024):
        host = np.full((height, width, 4), 0.5)
        host[..., 3] = 1.0
        return host
    return _make


@pytest.fixture
def smooth_host():
    """Gentle colour gradient around mid gray (no clipping after embedding)."""
    size = 1024
    yy, xx = np.mgrid[0:size, 0:size] / float(size)
    host = np.ones((size, size, 4))
    host[..., 0] = 0.4 + 0.2 * xx
    host[..., 1] = 0.4 + 0.2 * yy
    host[..., 2] = 0.5
    return host


@pytest.fixture
def random_mark(rng):
    def _make(size=64):
        return rng.integers(0, 2, size=(size, size)).astype(np.float64)
    return _make
