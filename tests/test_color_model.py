import numpy as np
import pytest

from chromamark import color_model


def test_white_has_no_chroma():
    white = np.array([1.0, 1.0, 1.0])
    y, u, v = color_model.rgb_to_yuv(white)
    assert y == pytest.approx(1.0)
    assert u == pytest.approx(0.0, abs=1e-9)
    assert v == pytest.approx(0.0, abs=1e-9)


def test_known_primary():
    red = np.array([1.0, 0.0, 0.0])
    assert color_model.rgb_to_y(red) == pytest.approx(0.299)
    assert color_model.rgb_to_u(red) == pytest.approx(-0.147)
    assert color_model.rgb_to_v(red) == pytest.approx(0.615)


def test_round_trip_is_close(rng):
    rgb = rng.uniform(0, 1, size=(16, 16, 3))
    back = color_model.yuv_to_rgb(color_model.rgb_to_yuv(rgb))
    # the coefficient tables are rounded to three decimals
    assert np.allclose(back, rgb, atol=5e-3)


def test_alpha_channel_is_ignored(rng):
    rgba = rng.uniform(0, 1, size=(4, 4, 4))
    assert np.allclose(color_model.rgb_to_u(rgba), color_model.rgb_to_u(rgba[..., :3]))


def test_no_clamping():
    rgb = color_model.yuv_to_rgb(np.array([1.0, 0.5, 0.5]))
    assert rgb[0] > 1.0
    assert rgb[1] < 1.0 - 0.3


def test_u_only_colour_reads_back_as_u(rng):
    u = rng.uniform(-0.2, 0.2, size=(8, 8))
    rgb = color_model.u_to_rgb(u)
    assert rgb.shape == (8, 8, 3)
    assert np.allclose(rgb[..., 0], 0.0)
    assert np.allclose(color_model.rgb_to_u(rgb), u, rtol=1e-3)


def test_too_few_channels_rejected():
    with pytest.raises(ValueError):
        color_model.rgb_to_u(np.zeros((2, 2)))
