"""
UV mode support and visualization

Mode presets set the blue enhancement, contrast boost, false-colour flag
and gamma used to simulate UV fluorescence on visible-light frames.
"""
from dataclasses import dataclass, replace
from enum import Enum

import numpy as np

from .frame import as_frame
from .logger import app_logger
from .tone import GAMMA_RANGE, MID_GRAY, clamp_value, apply_gamma, to_uint8

BLUE_ENHANCEMENT_RANGE = (0.0, 3.0)
CONTRAST_BOOST_RANGE = (0.0, 3.0)

# False-colour buckets on blue / intensity ratio
HIGH_UV_RATIO = 1.2
MEDIUM_UV_RATIO = 0.8
MAX_UV_BOOST = 1.5
HIGH_UV_FACTORS = (0.6, 1.0, 1.2)     # cyan/white, scaled by intensity * boost
MEDIUM_UV_FACTORS = (0.7, 0.4, 1.1)   # purple, scaled by intensity
LOW_UV_FACTORS = (0.6, 0.6, 0.8)      # darken, scaled by channel


class UvMode(Enum):
    """UV illumination modes"""
    NORMAL = "Normal"        # Visible light
    UV_A = "UvA"             # 365-400nm fluorescence
    UV_B = "UvB"             # 280-315nm
    UV_C = "UvC"             # 200-280nm, needs special equipment
    SIMULATED = "Simulated"  # UV-like visualization of normal images


# (blue_enhancement, contrast_boost, false_color_enabled, gamma)
# UV_C has no preset: switching to it keeps the previous numbers.
MODE_PRESETS = {
    UvMode.NORMAL: (1.0, 1.0, False, 1.0),
    UvMode.UV_A: (1.4, 1.25, False, 1.15),
    UvMode.UV_B: (1.5, 1.3, True, 1.2),
    UvMode.SIMULATED: (1.6, 1.35, True, 1.25),
}

MODE_DESCRIPTIONS = {
    UvMode.NORMAL: "Visible light (normal)",
    UvMode.UV_A: "UV-A (365-400nm)",
    UvMode.UV_B: "UV-B (280-315nm)",
    UvMode.UV_C: "UV-C (200-280nm)",
    UvMode.SIMULATED: "Simulated UV",
}


@dataclass(frozen=True)
class UvParameters:
    """UV visualization settings; numeric values are clamped on construction"""

    mode: UvMode = UvMode.NORMAL
    blue_enhancement: float = 1.3
    contrast_boost: float = 1.2
    false_color_enabled: bool = False
    gamma: float = 1.1

    def __post_init__(self):
        if not isinstance(self.mode, UvMode):
            object.__setattr__(self, 'mode', UvMode(self.mode))
        object.__setattr__(self, 'blue_enhancement',
                           clamp_value(self.blue_enhancement, BLUE_ENHANCEMENT_RANGE))
        object.__setattr__(self, 'contrast_boost',
                           clamp_value(self.contrast_boost, CONTRAST_BOOST_RANGE))
        object.__setattr__(self, 'false_color_enabled', bool(self.false_color_enabled))
        object.__setattr__(self, 'gamma', clamp_value(self.gamma, GAMMA_RANGE))

    @property
    def is_active(self) -> bool:
        return self.mode is not UvMode.NORMAL

    @classmethod
    def for_mode(cls, mode):
        """Default settings switched to mode"""
        return cls().with_mode(mode)

    def with_mode(self, mode):
        """
        Switch mode and apply its preset.

        Selecting the active mode again changes nothing. UvC only changes
        the mode tag.
        """
        mode = UvMode(mode)
        if mode is self.mode:
            return self

        preset = MODE_PRESETS.get(mode)
        if preset is None:
            app_logger.debug(f"UV mode {mode.value} has no preset, keeping current settings")
            return replace(self, mode=mode)

        blue, contrast, false_color, gamma = preset
        return UvParameters(mode, blue, contrast, false_color, gamma)

    def toggled(self):
        """Normal switches to Simulated, any other mode back to Normal"""
        if self.mode is UvMode.NORMAL:
            return self.with_mode(UvMode.SIMULATED)
        return self.with_mode(UvMode.NORMAL)

    def describe(self) -> str:
        return MODE_DESCRIPTIONS.get(self.mode, "Unknown")

    def status_text(self) -> str:
        if not self.is_active:
            return "UV: Off"
        return f"UV: {self.describe()}"


def recommended_mode(hardware_uv_supported: bool = False) -> UvMode:
    """UV-A with UV-capable hardware, otherwise software simulation"""
    return UvMode.UV_A if hardware_uv_supported else UvMode.SIMULATED


def apply_uv(frame, params: UvParameters) -> np.ndarray:
    """
    Apply UV visualization to a frame.

    Gamma LUT, then contrast boost around mid-gray with extra gain on the
    blue channel, then (optionally) false-colour bucketing by how blue each
    pixel is relative to its intensity.

    Args:
        frame: RGB frame (H, W, 3) or PIL image
        params: UV settings; Normal mode returns an unchanged copy

    Returns:
        New RGB frame; the source is never modified

    Raises:
        InvalidFrameError: frame is None or has no pixels
    """
    frame = as_frame(frame)
    if not params.is_active:
        return frame.copy()

    img = apply_gamma(frame, params.gamma).astype(np.float64)

    contrast = params.contrast_boost
    offset = MID_GRAY * (1.0 - contrast)
    r = img[:, :, 0] * contrast + offset
    g = img[:, :, 1] * contrast + offset
    b = img[:, :, 2] * params.blue_enhancement * contrast + offset

    if params.false_color_enabled:
        r, g, b = _false_color(r, g, b)

    return to_uint8(np.stack([r, g, b], axis=-1))


def _false_color(r, g, b):
    intensity = (r + g + b) / 3.0
    blue_ratio = b / np.maximum(1.0, intensity)

    high = blue_ratio > HIGH_UV_RATIO
    medium = ~high & (blue_ratio > MEDIUM_UV_RATIO)
    low = ~(high | medium)

    boost = np.minimum(MAX_UV_BOOST, blue_ratio)
    boosted = intensity * boost

    out_r = np.empty_like(r)
    out_g = np.empty_like(g)
    out_b = np.empty_like(b)

    # High UV response: cyan/white
    out_r[high] = boosted[high] * HIGH_UV_FACTORS[0]
    out_g[high] = boosted[high] * HIGH_UV_FACTORS[1]
    out_b[high] = boosted[high] * HIGH_UV_FACTORS[2]

    # Medium UV response: purple
    out_r[medium] = intensity[medium] * MEDIUM_UV_FACTORS[0]
    out_g[medium] = intensity[medium] * MEDIUM_UV_FACTORS[1]
    out_b[medium] = intensity[medium] * MEDIUM_UV_FACTORS[2]

    # Low UV response: darken
    out_r[low] = r[low] * LOW_UV_FACTORS[0]
    out_g[low] = g[low] * LOW_UV_FACTORS[1]
    out_b[low] = b[low] * LOW_UV_FACTORS[2]

    return out_r, out_g, out_b
