"""Tests for alpha classification and transformation"""

import numpy as np
import pytest

from banner_patcher.core.alpha import (
    AlphaDecision,
    alpha_cutoff,
    classify_alpha,
    flatten_alpha,
    normalize_transparency,
    stretch_alpha,
)

from conftest import rgba


THRESHOLD = 0.4  # cutoff 102


class TestClassify:
    """Test the keep / flatten / stretch decision."""

    def test_fully_opaque_is_kept(self) -> None:
        assert classify_alpha(np.full((4, 4), 255, np.uint8), THRESHOLD) is AlphaDecision.KEEP

    def test_alpha_above_cutoff_is_flattened(self) -> None:
        alpha = np.array([[255, 200], [103, 254]], np.uint8)
        assert classify_alpha(alpha, THRESHOLD) is AlphaDecision.FLATTEN

    def test_alpha_below_cutoff_is_stretched(self) -> None:
        alpha = np.array([[255, 200], [101, 255]], np.uint8)
        assert classify_alpha(alpha, THRESHOLD) is AlphaDecision.STRETCH

    def test_cutoff_is_strict(self) -> None:
        # 0.4 * 255 == 102: a pixel exactly at the cutoff is not "below" it
        assert alpha_cutoff(THRESHOLD) == pytest.approx(102)
        alpha = np.array([102, 255], np.uint8)
        assert classify_alpha(alpha, THRESHOLD) is AlphaDecision.FLATTEN

    def test_zero_threshold_never_stretches(self) -> None:
        alpha = np.array([0, 1, 255], np.uint8)
        assert classify_alpha(alpha, 0.0) is AlphaDecision.FLATTEN


class TestTransforms:
    """Test the pixel transforms on their own."""

    def test_flatten_drops_alpha_keeps_rgb(self) -> None:
        pixels = rgba([[10, 200]], rgb=(1, 2, 3))
        flat = flatten_alpha(pixels)
        assert flat.shape == (1, 2, 3)
        assert (flat == [1, 2, 3]).all()

    def test_stretch_divides_by_threshold(self) -> None:
        pixels = rgba([[0, 50, 51, 101, 102, 200, 255]])
        stretched = stretch_alpha(pixels, THRESHOLD)
        assert stretched[0, :, 3].tolist() == [0, 125, 127, 252, 255, 255, 255]
        assert (stretched[..., :3] == pixels[..., :3]).all()

    def test_transforms_do_not_touch_input(self) -> None:
        pixels = rgba([[0, 50, 200]])
        before = pixels.copy()
        flatten_alpha(pixels)
        stretch_alpha(pixels, THRESHOLD)
        assert (pixels == before).all()


class TestNormalize:
    """Test the full classify-then-transform contract."""

    def test_opaque_image_needs_no_change(self) -> None:
        assert normalize_transparency(rgba(np.full((8, 8), 255)), THRESHOLD) is None

    def test_image_without_alpha_needs_no_change(self) -> None:
        assert normalize_transparency(np.zeros((2, 2, 3), np.uint8), THRESHOLD) is None

    def test_semi_transparent_image_is_flattened(self) -> None:
        pixels = rgba([[255, 200], [150, 255]], rgb=(40, 50, 60))
        result = normalize_transparency(pixels, THRESHOLD)

        assert result is not None
        assert result.preserve_gradient is False
        assert result.pixels.shape == (2, 2, 3)
        assert (result.pixels == [40, 50, 60]).all()

    def test_transparent_image_is_stretched(self) -> None:
        alpha = np.array([[0, 50, 101], [102, 200, 255]], np.uint8)
        result = normalize_transparency(rgba(alpha), THRESHOLD)

        assert result is not None
        assert result.preserve_gradient is True
        expected = np.trunc(np.clip(alpha / THRESHOLD, 0, 255)).astype(np.uint8)
        assert (result.pixels[..., 3] == expected).all()

    def test_single_transparent_pixel_switches_whole_image_to_gradient(self) -> None:
        alpha = np.full((16, 16), 200, np.uint8)
        alpha[15, 15] = 50
        result = normalize_transparency(rgba(alpha), THRESHOLD)

        assert result.preserve_gradient is True
        assert result.pixels[0, 0, 3] == 255
        assert result.pixels[15, 15, 3] == 125

    def test_cut_out_alpha_needs_no_change(self) -> None:
        alpha = np.array([[0, 255], [255, 0]], np.uint8)
        assert classify_alpha(alpha, THRESHOLD) is AlphaDecision.STRETCH
        assert normalize_transparency(rgba(alpha), THRESHOLD) is None

    def test_stretch_truncating_back_to_original_counts_as_no_change(self) -> None:
        # 254 < 0.997 * 255, but 254 / 0.997 truncates back to 254
        alpha = np.array([[254, 255], [254, 254]], np.uint8)
        assert classify_alpha(alpha, 0.997) is AlphaDecision.STRETCH
        assert normalize_transparency(rgba(alpha), 0.997) is None

    def test_gradients_disabled_flattens_everything(self) -> None:
        result = normalize_transparency(rgba([[0, 50, 255]]), 0.0)
        assert result.preserve_gradient is False
        assert result.pixels.shape == (1, 3, 3)
