"""
Tone adjustments: brightness, contrast, gamma and saturation

Per pixel and channel, in a fixed order:
1. Gamma via a 256-entry lookup table built for each call
2. Contrast around mid-gray plus brightness offset
3. Saturation around Rec.601 luma (skipped when |saturation| <= 0.01)
4. Clamp to 0-255 and truncate

Gamma and contrast round-trips are lossy: 8-bit truncation in the LUT and
the final clamp discard information, so an inverse parameter set does not
restore the source frame.
"""
from dataclasses import dataclass, replace
from enum import Enum

import cv2
import numpy as np

from .frame import as_frame
from .gradient import LUMA_B, LUMA_G, LUMA_R
from .logger import app_logger

BRIGHTNESS_RANGE = (-1.0, 1.0)
CONTRAST_RANGE = (-1.0, 1.0)
GAMMA_RANGE = (0.1, 3.0)
SATURATION_RANGE = (-1.0, 1.0)

SATURATION_EPSILON = 0.01
PRESET_TOLERANCE = 1e-6
MID_GRAY = 128.0


class TonePreset(Enum):
    """Quick image adjustment presets"""
    STANDARD = "Standard"               # No adjustments
    HIGH_BRIGHTNESS = "HighBrightness"  # Dim samples
    LOW_NOISE = "LowNoise"              # Reduced contrast and saturation
    HIGH_CONTRAST = "HighContrast"      # Detail visibility
    UV_MODE = "UVMode"                  # UV-optimized settings
    CUSTOM = "Custom"                   # User-defined values


# (brightness, contrast, gamma, saturation)
PRESET_VALUES = {
    TonePreset.STANDARD: (0.0, 0.0, 1.0, 0.0),
    TonePreset.HIGH_BRIGHTNESS: (0.25, 0.1, 1.1, 0.0),
    TonePreset.LOW_NOISE: (0.05, -0.15, 0.95, -0.1),
    TonePreset.HIGH_CONTRAST: (0.0, 0.35, 1.15, 0.1),
    TonePreset.UV_MODE: (0.15, 0.2, 1.2, 0.15),
}


def clamp_value(value, bounds):
    low, high = bounds
    return min(high, max(low, float(value)))


@dataclass(frozen=True)
class ToneParameters:
    """
    Tone adjustment values plus the preset they came from.

    Values are clamped to their documented ranges on construction.
    """

    brightness: float = 0.0   # -1.0 to +1.0
    contrast: float = 0.0     # -1.0 to +1.0
    gamma: float = 1.0        # 0.1 to 3.0
    saturation: float = 0.0   # -1.0 to +1.0
    preset: TonePreset = TonePreset.STANDARD

    def __post_init__(self):
        object.__setattr__(self, 'brightness', clamp_value(self.brightness, BRIGHTNESS_RANGE))
        object.__setattr__(self, 'contrast', clamp_value(self.contrast, CONTRAST_RANGE))
        object.__setattr__(self, 'gamma', clamp_value(self.gamma, GAMMA_RANGE))
        object.__setattr__(self, 'saturation', clamp_value(self.saturation, SATURATION_RANGE))
        if not isinstance(self.preset, TonePreset):
            object.__setattr__(self, 'preset', TonePreset(self.preset))

    @property
    def values(self):
        return (self.brightness, self.contrast, self.gamma, self.saturation)

    @classmethod
    def for_preset(cls, preset):
        """Parameters for a named preset (Custom yields neutral values)"""
        preset = TonePreset(preset)
        values = PRESET_VALUES.get(preset, PRESET_VALUES[TonePreset.STANDARD])
        return cls(*values, preset=preset)

    def with_preset(self, preset):
        """
        Switch to another preset. Custom keeps the current values.
        """
        preset = TonePreset(preset)
        if preset is TonePreset.CUSTOM:
            return replace(self, preset=TonePreset.CUSTOM)
        return ToneParameters.for_preset(preset)

    def with_values(self, **changes):
        """
        Adjust individual values.

        The preset tag switches to Custom as soon as any value diverges
        from the active preset's tuple.
        """
        updated = replace(self, **changes)
        if updated.preset is not TonePreset.CUSTOM and not _matches(updated.values, updated.preset):
            app_logger.debug(f"Tone preset {updated.preset.value} -> Custom")
            updated = replace(updated, preset=TonePreset.CUSTOM)
        return updated


def _matches(values, preset) -> bool:
    expected = PRESET_VALUES.get(preset)
    if expected is None:
        return False
    return all(abs(a - b) <= PRESET_TOLERANCE for a, b in zip(values, expected))


def detect_preset(values) -> TonePreset:
    """Return the preset whose tuple equals values, or Custom"""
    for preset in PRESET_VALUES:
        if _matches(tuple(values), preset):
            return preset
    return TonePreset.CUSTOM


def gamma_lut(gamma: float) -> np.ndarray:
    """
    256-entry gamma lookup table: int(255 * (i / 255) ** (1 / gamma)).

    Built per call; gamma is clamped to 0.1-3.0.
    """
    gamma = clamp_value(gamma, GAMMA_RANGE)
    if gamma == 1.0:
        return np.arange(256, dtype=np.uint8)
    inv_gamma = 1.0 / gamma
    # Scalar pow per entry keeps the table bit-exact with C pow()
    lut = np.array([255.0 * (i / 255.0) ** inv_gamma for i in range(256)], dtype=np.float64)
    return np.clip(lut, 0, 255).astype(np.uint8)


def apply_gamma(frame: np.ndarray, gamma: float) -> np.ndarray:
    """Apply the gamma LUT to each RGB channel independently"""
    return cv2.LUT(frame, gamma_lut(gamma))


def to_uint8(values: np.ndarray) -> np.ndarray:
    """Clamp float pixel values to 0-255 and truncate"""
    return np.clip(values, 0, 255).astype(np.uint8)


def apply_tone(frame, params: ToneParameters = None) -> np.ndarray:
    """
    Apply brightness, contrast, gamma and saturation to a frame.

    Args:
        frame: RGB frame (H, W, 3) or PIL image
        params: Tone parameters (Standard preset when omitted)

    Returns:
        New RGB frame; the source is never modified

    Raises:
        InvalidFrameError: frame is None or has no pixels
    """
    frame = as_frame(frame)
    if params is None:
        params = ToneParameters()

    # 1) Gamma
    img = apply_gamma(frame, params.gamma).astype(np.float64)

    # 2) Contrast and brightness, no clamping yet
    contrast_factor = 1.0 + params.contrast
    offset = MID_GRAY * (1.0 - contrast_factor) + params.brightness * 255.0
    img = img * contrast_factor + offset

    # 3) Saturation around luma of the adjusted values
    if abs(params.saturation) > SATURATION_EPSILON:
        gray = LUMA_R * img[:, :, 0] + LUMA_G * img[:, :, 1] + LUMA_B * img[:, :, 2]
        gray = gray[:, :, np.newaxis]
        img = gray + (1.0 + params.saturation) * (img - gray)

    # 4) Clamp and truncate
    return to_uint8(img)
