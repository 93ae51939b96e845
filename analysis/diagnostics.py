"""
Image quality diagnostics: focus, clipping and foreground coverage

Computed over the interior region (1-pixel border excluded) and
independent of any sample mask.
"""
from dataclasses import dataclass

import numpy as np

from .frame import as_frame, has_interior
from .gradient import extract, interior_slice
from .logger import app_logger

FOREGROUND_MIN_GRAY = 5  # gray > 5 counts as foreground
CLIP_LOW_GRAY = 5  # gray < 5 is crushed black
CLIP_HIGH_GRAY = 250  # gray > 250 is blown white
FOCUS_NORMALIZER = 255.0 * 255.0


@dataclass(frozen=True)
class DiagnosticsResult:
    """Scalar image-quality summary, every field in [0, 1]"""

    focus_score: float = 0.0
    saturation_clipping_fraction: float = 0.0
    foreground_fraction: float = 0.0

    @property
    def focus_score_percent(self) -> float:
        """Focus on a 0-100 scale for display and reports"""
        return self.focus_score * 100.0

    def to_dict(self) -> dict:
        return {
            'focus_score': round(self.focus_score, 6),
            'saturation_clipping_fraction': round(self.saturation_clipping_fraction, 6),
            'foreground_fraction': round(self.foreground_fraction, 6),
        }


def diagnose(frame) -> DiagnosticsResult:
    """
    Compute basic image diagnostics.

    - FocusScore: mean squared gradient energy normalized by 255^2, capped at 1
    - SaturationClippingFraction: share of near-black or near-white pixels
    - ForegroundFraction: share of pixels brighter than near-black

    Frames without interior pixels (2 pixels or fewer on a side) use a
    denominator of 1 and return zero scores.

    Raises:
        InvalidFrameError: frame is None or has no pixels
    """
    frame = as_frame(frame)
    maps = extract(frame)

    if not has_interior(frame):
        app_logger.debug(f"Diagnostics on {frame.shape[1]}x{frame.shape[0]} frame: no interior pixels")
        return DiagnosticsResult()

    inner = interior_slice(maps.luminance.shape)
    gray = maps.luminance[inner]
    gx = maps.gx[inner].astype(np.float64)
    gy = maps.gy[inner].astype(np.float64)

    total = max(1, gray.size)
    foreground = int(np.count_nonzero(gray > FOREGROUND_MIN_GRAY))
    clipped = int(np.count_nonzero((gray < CLIP_LOW_GRAY) | (gray > CLIP_HIGH_GRAY)))
    grad_sum = float(np.sum(gx * gx + gy * gy))

    focus = min(1.0, grad_sum / total / FOCUS_NORMALIZER)

    result = DiagnosticsResult(
        focus_score=focus,
        saturation_clipping_fraction=clipped / total,
        foreground_fraction=foreground / total,
    )
    app_logger.debug(
        f"Diagnostics: focus={result.focus_score:.4f}, "
        f"clipping={result.saturation_clipping_fraction:.2%}, "
        f"foreground={result.foreground_fraction:.2%}"
    )
    return result
