"""
Test luminance and gradient extraction
"""
import pytest
import os
import sys

import numpy as np

# Ensure project root is in path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from analysis.errors import InvalidFrameError
from analysis.gradient import (
    composite_index,
    extract,
    gradient_components,
    gradient_magnitude,
    interior_slice,
    luminance,
)


def _solid(rgb, size=(4, 4)):
    frame = np.zeros((size[0], size[1], 3), dtype=np.uint8)
    frame[:, :] = rgb
    return frame


class TestLuminance:
    """Test Rec.601 luminance"""

    @pytest.mark.parametrize("rgb,expected", [
        ((255, 0, 0), 76),     # 76.245
        ((0, 255, 0), 150),    # 149.685
        ((0, 0, 255), 29),     # 29.07
        ((255, 255, 255), 255),
        ((0, 0, 0), 0),
        ((128, 128, 128), 128),
    ])
    def test_weighted_sum_rounded(self, rgb, expected):
        """Test luminance rounds the weighted channel sum"""
        lum = luminance(_solid(rgb))
        assert lum.dtype == np.uint8
        assert np.all(lum == expected)


class TestGradients:
    """Test central-difference gradients"""

    def test_horizontal_ramp(self, ramp_frame):
        """Test a +1 per column ramp gives gx == 2 and gy == 0 inside"""
        maps = extract(ramp_frame)
        inner = interior_slice(maps.luminance.shape)

        assert np.all(maps.gx[inner] == 2)
        assert np.all(maps.gy[inner] == 0)
        assert np.allclose(maps.magnitude[inner], 2.0)

    def test_border_is_zero(self, noise_frame):
        """Test gradients are zero on the 1-pixel border"""
        maps = extract(noise_frame)
        for grid in (maps.gx, maps.gy, maps.magnitude):
            assert np.all(grid[0, :] == 0)
            assert np.all(grid[-1, :] == 0)
            assert np.all(grid[:, 0] == 0)
            assert np.all(grid[:, -1] == 0)

    def test_signed_differences(self):
        """Test gx/gy keep their sign"""
        lum = np.zeros((3, 3), dtype=np.uint8)
        lum[1, 0] = 200  # left of centre
        lum[2, 1] = 50   # below centre
        gx, gy = gradient_components(lum)

        assert gx[1, 1] == -200
        assert gy[1, 1] == 50

    @pytest.mark.parametrize("shape", [(1, 1), (2, 2), (2, 10), (10, 2)])
    def test_degenerate_maps_all_zero(self, shape):
        """Test frames without interior have all-zero gradients"""
        lum = np.full(shape, 99, dtype=np.uint8)
        gx, gy = gradient_components(lum)
        assert gx.shape == shape
        assert not gx.any()
        assert not gy.any()

    def test_magnitude(self):
        """Test magnitude is the Euclidean norm"""
        gx = np.array([[3, 0]], dtype=np.int32)
        gy = np.array([[4, -5]], dtype=np.int32)
        assert gradient_magnitude(gx, gy).tolist() == [[5.0, 5.0]]

    def test_extract_dimensions(self, noise_frame):
        """Test extract reports the frame dimensions"""
        maps = extract(noise_frame)
        assert maps.width == 80
        assert maps.height == 60
        assert maps.luminance.shape == (60, 80)

    def test_extract_rejects_none(self):
        """Test extract validates its input"""
        with pytest.raises(InvalidFrameError):
            extract(None)


class TestCompositeIndex:
    """Test the darkness + gradient segmentation index"""

    def test_bright_smooth_scores_zero(self):
        """Test white smooth pixels score 0"""
        lum = np.array([[255]], dtype=np.uint8)
        assert composite_index(lum, np.array([[0.0]]))[0, 0] == pytest.approx(0.0)

    def test_dark_smooth(self):
        """Test black smooth pixels score 0.6 * 255"""
        lum = np.array([[0]], dtype=np.uint8)
        assert composite_index(lum, np.array([[0.0]]))[0, 0] == pytest.approx(153.0)

    def test_gradient_weight(self):
        """Test gradient contributes 0.4 of its magnitude"""
        lum = np.array([[255]], dtype=np.uint8)
        assert composite_index(lum, np.array([[100.0]]))[0, 0] == pytest.approx(40.0)
