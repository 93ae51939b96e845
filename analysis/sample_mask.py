"""
Sample mask segmentation

Strategy:
- Convert to luminance and compute a simple gradient (texture) so particles
  stand out against a smooth background.
- Adaptive threshold from the mean and standard deviation of a composite
  darkness + gradient index.
- Remove small noise regions (area filter over 8-connected components).
- Optional preview with a translucent blue background.
"""
from dataclasses import dataclass
from typing import Optional, Tuple

import cv2
import numpy as np

from .frame import as_frame, has_interior
from .gradient import composite_index, extract, interior_slice
from .logger import app_logger

# Adaptive threshold: mean + k * stddev, clamped against flat images
THRESHOLD_STD_MULTIPLIER = 0.3
THRESHOLD_MIN = 20.0
THRESHOLD_MAX = 240.0

# Area filter: max(MIN_REGION_FLOOR, pixels // MIN_REGION_DIVISOR)
MIN_REGION_FLOOR = 80
MIN_REGION_DIVISOR = 30000

# Preview tint for background pixels (RGB)
PREVIEW_TINT = (0, 90, 200)
PREVIEW_ALPHA = 0.65

KEPT_CONFIDENCE = 1.0


@dataclass(frozen=True)
class SampleMaskRecord:
    """Per-pixel mask record (only present for kept sample pixels)"""

    is_sample: bool
    is_background: bool
    is_border: bool
    mask_confidence: float
    gray_value: int
    gradient_magnitude: float


@dataclass(frozen=True, eq=False)
class SampleMaskGrid:
    """
    Sample/background classification for one frame.

    Pixels without a record (``is_set`` False) are implicitly background or
    unknown. Every kept pixel is a sample pixel with confidence 1.0; border
    flags are never raised by this segmentation.
    """

    is_set: np.ndarray  # (H, W) bool, True where a record exists
    gray_value: np.ndarray  # (H, W) uint8 luminance
    gradient_magnitude: np.ndarray  # (H, W) float64
    threshold: float = 0.0
    min_region_size: int = 0
    regions_found: int = 0
    regions_kept: int = 0

    @property
    def width(self) -> int:
        return self.is_set.shape[1]

    @property
    def height(self) -> int:
        return self.is_set.shape[0]

    @property
    def is_sample(self) -> np.ndarray:
        return self.is_set

    @property
    def is_background(self) -> np.ndarray:
        # Set records are always sample records
        return np.zeros_like(self.is_set)

    @property
    def is_border(self) -> np.ndarray:
        return np.zeros_like(self.is_set)

    @property
    def mask_confidence(self) -> np.ndarray:
        return np.where(self.is_set, KEPT_CONFIDENCE, 0.0)

    @property
    def sample_count(self) -> int:
        return int(np.count_nonzero(self.is_set))

    @property
    def sample_fraction(self) -> float:
        return self.sample_count / float(self.is_set.size)

    def record_at(self, x: int, y: int) -> Optional[SampleMaskRecord]:
        """Return the record at column x, row y, or None when unset"""
        if not self.is_set[y, x]:
            return None
        return SampleMaskRecord(
            is_sample=True,
            is_background=False,
            is_border=False,
            mask_confidence=KEPT_CONFIDENCE,
            gray_value=int(self.gray_value[y, x]),
            gradient_magnitude=float(self.gradient_magnitude[y, x]),
        )


def min_region_size(width: int, height: int) -> int:
    """Resolution-adaptive noise floor for kept components"""
    return max(MIN_REGION_FLOOR, (width * height) // MIN_REGION_DIVISOR)


def adaptive_threshold(index_values: np.ndarray) -> float:
    """
    Distribution-adaptive threshold over composite index values.

    threshold = clamp(mean + 0.3 * stddev, 20, 240)
    """
    count = index_values.size
    if count == 0:
        return THRESHOLD_MIN

    values = index_values.astype(np.float64, copy=False)
    mean = float(values.sum()) / count
    variance = max(0.0, float(np.square(values).sum()) / count - mean * mean)
    threshold = mean + THRESHOLD_STD_MULTIPLIER * float(np.sqrt(variance))
    return float(min(THRESHOLD_MAX, max(THRESHOLD_MIN, threshold)))


def filter_small_regions(candidates: np.ndarray, min_size: int):
    """
    Keep only 8-connected components with at least min_size pixels.

    Labeling is iterative over a flat label grid, so large uniform regions
    cannot exhaust the stack.

    Args:
        candidates: (H, W) bool candidate map
        min_size: Minimum component size to keep

    Returns:
        tuple: (keep mask, components found, components kept)
    """
    num_labels, labels, stats, _ = cv2.connectedComponentsWithStats(
        candidates.astype(np.uint8), connectivity=8
    )

    # Label 0 is the non-candidate background
    areas = stats[:, cv2.CC_STAT_AREA]
    keep_label = areas >= min_size
    keep_label[0] = False

    keep = keep_label[labels]
    return keep, num_labels - 1, int(np.count_nonzero(keep_label))


def tint_background(frame: np.ndarray, keep: np.ndarray,
                    color=PREVIEW_TINT, alpha: float = PREVIEW_ALPHA) -> np.ndarray:
    """
    Blend a translucent colour over every pixel not in keep.

    Kept pixels are copied unchanged; others become
    trunc(src * (1 - alpha) + color * alpha).
    """
    preview = frame.copy()
    tint = np.asarray(color, dtype=np.float64)
    blended = frame[~keep].astype(np.float64) * (1.0 - alpha) + tint * alpha
    preview[~keep] = np.clip(blended, 0, 255).astype(np.uint8)
    return preview


def segment(frame, with_preview: bool = False) -> Tuple[SampleMaskGrid, Optional[np.ndarray]]:
    """
    Classify pixels as sample or background.

    Background is light and smooth; sample is darker and/or more textured.

    Args:
        frame: RGB frame (H, W, 3) or PIL image
        with_preview: Also build the tinted visualization frame

    Returns:
        tuple: (SampleMaskGrid, preview frame or None)

    Raises:
        InvalidFrameError: frame is None or has no pixels
    """
    frame = as_frame(frame)
    h, w = frame.shape[:2]
    maps = extract(frame)

    if not has_interior(frame):
        app_logger.warning(f"Segmentation skipped: {w}x{h} frame has no interior pixels")
        grid = SampleMaskGrid(
            is_set=np.zeros((h, w), dtype=bool),
            gray_value=maps.luminance,
            gradient_magnitude=maps.magnitude,
            threshold=THRESHOLD_MIN,
            min_region_size=min_region_size(w, h),
        )
        return grid, (frame.copy() if with_preview else None)

    inner = interior_slice((h, w))
    index = composite_index(maps.luminance[inner], maps.magnitude[inner])
    threshold = adaptive_threshold(index)

    # Border pixels are never candidates
    candidates = np.zeros((h, w), dtype=bool)
    candidates[inner] = index >= threshold

    min_size = min_region_size(w, h)
    keep, found, kept = filter_small_regions(candidates, min_size)

    grid = SampleMaskGrid(
        is_set=keep,
        gray_value=maps.luminance,
        gradient_magnitude=maps.magnitude,
        threshold=threshold,
        min_region_size=min_size,
        regions_found=found,
        regions_kept=kept,
    )

    app_logger.debug(
        f"Segmentation {w}x{h}: threshold={threshold:.2f}, min_region={min_size}, "
        f"regions={found} kept={kept}, sample={grid.sample_fraction:.1%}"
    )

    preview = tint_background(frame, keep) if with_preview else None
    return grid, preview
