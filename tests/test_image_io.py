import numpy as np
import pytest
from PIL import Image

from chromamark import attacks, image_io, metrics
from chromamark.detect import detect_file_type, is_lossy


class TestImageIO:

    def test_png_round_trip_within_quantization(self, rng, tmp_path):
        pixels = rng.uniform(0, 1, size=(10, 12, 4))
        path = tmp_path / "pixels.png"
        image_io.write_pixels(path, pixels)
        back = image_io.read_pixels(path)
        assert back.shape == (10, 12, 4)
        assert np.allclose(back, pixels, atol=0.5 / 255 + 1e-9)

    def test_rgb_file_reads_as_opaque_rgba(self, tmp_path):
        path = tmp_path / "rgb.png"
        Image.fromarray(np.full((4, 4, 3), 200, dtype=np.uint8)).save(path)
        pixels = image_io.read_pixels(path)
        assert pixels.shape == (4, 4, 4)
        assert np.allclose(pixels[..., 3], 1.0)
        assert np.allclose(pixels[..., :3], 200 / 255)

    def test_jpeg_write_drops_alpha(self, tmp_path):
        path = tmp_path / "out.jpg"
        image_io.write_pixels(path, np.full((8, 8, 4), 0.5))
        with Image.open(path) as img:
            assert img.mode == "RGB"

    def test_to_uint8_clamps(self):
        out = image_io.to_uint8(np.array([-0.2, 0.5, 1.7]))
        assert out.tolist() == [0, 128, 255]

    def test_missing_file(self, tmp_path):
        with pytest.raises(ValueError):
            image_io.read_pixels(tmp_path / "nope.png")

    def test_resample_to_original_size(self, rng):
        pixels = rng.uniform(0, 1, size=(20, 30, 4))
        resized = image_io.resample(pixels, (15, 10))
        assert resized.shape == (10, 15, 4)
        assert image_io.resample(pixels, (30, 20)) is pixels

    def test_delta_preview(self):
        delta = np.full((4, 4, 3), 0.1)
        preview = image_io.render_delta_preview(delta)
        assert preview.shape == (4, 4, 4)
        assert np.allclose(preview[..., :3], 0.4)
        assert np.allclose(preview[..., 3], 1.0)


class TestAttacks:

    def test_jpeg_keeps_shape_and_alpha(self, rng):
        pixels = rng.uniform(0, 1, size=(32, 32, 4))
        out = attacks.jpeg_compression(pixels, 75)
        assert out.shape == pixels.shape
        assert np.array_equal(out[..., 3], pixels[..., 3])

    def test_jpeg_high_quality_is_close(self):
        yy, xx = np.mgrid[0:64, 0:64] / 64.0
        pixels = np.stack([xx, yy, 0.5 * np.ones_like(xx)], axis=-1)
        out = attacks.jpeg_compression(pixels, 95)
        assert metrics.psnr(pixels, out) > 30

    @pytest.mark.parametrize("quality", [0, 101])
    def test_jpeg_quality_range(self, quality):
        with pytest.raises(ValueError):
            attacks.jpeg_compression(np.zeros((8, 8, 3)), quality)

    @pytest.mark.parametrize("name", sorted(attacks.ATTACKS))
    def test_every_attack_keeps_shape(self, name, rng):
        pixels = rng.uniform(0, 1, size=(24, 24, 4))
        assert attacks.ATTACKS[name](pixels, 10).shape == pixels.shape


class TestMetrics:

    def test_bit_accuracy(self):
        a = np.array([[1.0, 0.0], [1.0, 1.0]])
        b = np.array([[True, False], [False, True]])
        assert metrics.bit_accuracy(a, b) == pytest.approx(0.75)

    def test_bit_accuracy_on_bitmaps(self):
        mark = np.zeros((2, 2, 4))
        mark[0, 0, 0] = 1.0
        assert metrics.bit_accuracy(mark, np.array([[1, 0], [0, 0]])) == 1.0

    def test_bit_accuracy_shape_mismatch(self):
        with pytest.raises(ValueError):
            metrics.bit_accuracy(np.zeros((2, 2)), np.zeros((3, 3)))

    def test_psnr(self):
        a = np.zeros((4, 4, 3))
        assert metrics.psnr(a, a) == float("inf")
        assert metrics.psnr(a, a + 0.1) == pytest.approx(20.0)


class TestDetect:

    def test_png_and_jpeg(self, tmp_path):
        png, jpg = tmp_path / "a.png", tmp_path / "a.jpg"
        Image.new("RGB", (4, 4)).save(png)
        Image.new("RGB", (4, 4)).save(jpg)
        assert detect_file_type(png) == "png"
        assert detect_file_type(jpg) == "jpeg"
        assert is_lossy("jpeg") and not is_lossy("png")

    def test_unknown(self, tmp_path):
        path = tmp_path / "a.txt"
        path.write_text("hello")
        assert detect_file_type(path) == "unknown"

    @pytest.mark.parametrize("suffix, expected", [(".gif", "gif"), (".webp", "webp"),
                                                  (".bmp", "bmp"), (".tiff", "tiff")])
    def test_other_pillow_formats(self, tmp_path, suffix, expected):
        path = tmp_path / ("a" + suffix)
        Image.new("RGB", (4, 4)).save(path)
        assert detect_file_type(path) == expected
        assert image_io.read_pixels(path).shape == (4, 4, 4)
