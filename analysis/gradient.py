"""
Grayscale / gradient extraction

Shared by segmentation and diagnostics:
- Rec.601 luminance, rounded to 0-255 integers
- Central-difference gradients on the luminance map (zero on the border)
- Composite index used by the segmentation threshold
"""
from dataclasses import dataclass

import numpy as np

from .frame import as_frame

# Rec.601 luma weights
LUMA_R = 0.299
LUMA_G = 0.587
LUMA_B = 0.114

# Composite index blend: darker and/or more textured pixels score higher
INDEX_DARKNESS_WEIGHT = 0.6
INDEX_GRADIENT_WEIGHT = 0.4


@dataclass(frozen=True, eq=False)
class LuminanceGradient:
    """Luminance and gradient maps derived from one frame"""

    luminance: np.ndarray  # (H, W) uint8
    gx: np.ndarray  # (H, W) int32, 0 on border
    gy: np.ndarray  # (H, W) int32, 0 on border
    magnitude: np.ndarray  # (H, W) float64, 0 on border

    @property
    def width(self) -> int:
        return self.luminance.shape[1]

    @property
    def height(self) -> int:
        return self.luminance.shape[0]


def luminance(frame: np.ndarray) -> np.ndarray:
    """
    Compute per-pixel luminance: round(0.299 R + 0.587 G + 0.114 B).

    Args:
        frame: RGB frame (H, W, 3)

    Returns:
        (H, W) uint8 luminance map
    """
    rgb = frame.astype(np.float64)
    lum = LUMA_R * rgb[:, :, 0] + LUMA_G * rgb[:, :, 1] + LUMA_B * rgb[:, :, 2]
    return np.clip(np.rint(lum), 0, 255).astype(np.uint8)


def interior_slice(shape):
    """Index selecting everything except the 1-pixel border of a 2D map"""
    return (slice(1, max(1, shape[0] - 1)), slice(1, max(1, shape[1] - 1)))


def gradient_components(lum: np.ndarray):
    """
    Central differences over 4 neighbours.

    gx = lum(x+1, y) - lum(x-1, y)
    gy = lum(x, y+1) - lum(x, y-1)

    Border rows/columns are left at zero.

    Returns:
        tuple: (gx, gy) as int32 arrays with the same shape as lum
    """
    h, w = lum.shape
    gx = np.zeros((h, w), dtype=np.int32)
    gy = np.zeros((h, w), dtype=np.int32)

    if h < 3 or w < 3:
        return gx, gy

    src = lum.astype(np.int32)
    gx[1:-1, 1:-1] = src[1:-1, 2:] - src[1:-1, :-2]
    gy[1:-1, 1:-1] = src[2:, 1:-1] - src[:-2, 1:-1]
    return gx, gy


def gradient_magnitude(gx: np.ndarray, gy: np.ndarray) -> np.ndarray:
    """Euclidean gradient magnitude sqrt(gx^2 + gy^2)"""
    gx = gx.astype(np.float64)
    gy = gy.astype(np.float64)
    return np.sqrt(gx * gx + gy * gy)


def extract(frame) -> LuminanceGradient:
    """
    Derive luminance and gradient maps from a frame in two passes.

    Raises:
        InvalidFrameError: frame is None or has no pixels
    """
    frame = as_frame(frame)
    lum = luminance(frame)
    gx, gy = gradient_components(lum)
    return LuminanceGradient(
        luminance=lum,
        gx=gx,
        gy=gy,
        magnitude=gradient_magnitude(gx, gy),
    )


def composite_index(lum: np.ndarray, magnitude: np.ndarray) -> np.ndarray:
    """
    Segmentation score: 0.6 * (255 - luminance) + 0.4 * gradient magnitude
    """
    darkness = 255.0 - lum.astype(np.float64)
    return INDEX_DARKNESS_WEIGHT * darkness + INDEX_GRADIENT_WEIGHT * magnitude
