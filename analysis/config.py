"""
Configuration management for HVS Sample Analysis
"""
import copy
import json
import os

from utils_paths import get_default_config_path

from .logger import app_logger
from .quality import DEFAULT_THRESHOLDS
from .sample_mask import PREVIEW_ALPHA, PREVIEW_TINT
from .tone import PRESET_VALUES, TonePreset, ToneParameters
from .uv_mode import UvMode, UvParameters, recommended_mode

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULT_CONFIG = {
    # Tone adjustments (preset name or explicit values)
    "tone": {
        "preset": TonePreset.STANDARD.value,
        "brightness": PRESET_VALUES[TonePreset.STANDARD][0],
        "contrast": PRESET_VALUES[TonePreset.STANDARD][1],
        "gamma": PRESET_VALUES[TonePreset.STANDARD][2],
        "saturation": PRESET_VALUES[TonePreset.STANDARD][3],
    },

    # UV visualization
    "uv": {
        "mode": UvMode.NORMAL.value,
        "blue_enhancement": 1.3,
        "contrast_boost": 1.2,
        "false_color_enabled": False,
        "gamma": 1.1,
        "hardware_uv_supported": False,
    },

    # Quality consistency thresholds
    "quality": dict(DEFAULT_THRESHOLDS),

    # Segmentation preview overlay
    "segmentation": {
        "preview_enabled": False,
        "preview_tint": list(PREVIEW_TINT),  # RGB
        "preview_alpha": PREVIEW_ALPHA,
    },

    # Logging
    "logging": {
        "console_level": "INFO",
    },
}


class Config:
    def __init__(self, config_path=None):
        # Explicit path wins, otherwise the per-user data directory
        if config_path is None:
            config_path = get_default_config_path()

        self.config_path = config_path
        self.data = self.load()

    def load(self):
        """Load configuration from JSON file or return defaults"""
        config = copy.deepcopy(DEFAULT_CONFIG)
        if not os.path.exists(self.config_path):
            return config

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                loaded = json.load(f)
        except (OSError, ValueError) as e:
            app_logger.error(f"Error loading config {self.config_path}: {e}")
            return config

        if not isinstance(loaded, dict):
            app_logger.error(f"Error loading config {self.config_path}: top level is not an object")
            return config

        # Deep merge for nested sections so new keys keep their defaults
        for key, value in loaded.items():
            if isinstance(value, dict) and isinstance(config.get(key), dict):
                config[key].update(value)
            else:
                config[key] = value

        return config

    def save(self):
        """Save current configuration to JSON file"""
        try:
            directory = os.path.dirname(self.config_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(self.config_path, 'w', encoding='utf-8') as f:
                json.dump(self.data, f, indent=2)
            return True
        except OSError as e:
            app_logger.error(f"Error saving config: {e}")
            return False

    def get(self, key, default=None):
        """Get configuration value"""
        return self.data.get(key, default)

    def set(self, key, value):
        """Set configuration value"""
        self.data[key] = value

    def get_section(self, name):
        """Get a nested section, falling back to its defaults"""
        section = self.data.get(name)
        if not isinstance(section, dict):
            return copy.deepcopy(DEFAULT_CONFIG.get(name, {}))
        return section

    def tone_parameters(self) -> ToneParameters:
        """
        Build tone parameters from the "tone" section.

        A named preset other than Custom takes its preset values; Custom
        (or an unknown preset name) uses the stored numbers.
        """
        tone = self.get_section("tone")
        try:
            preset = TonePreset(tone.get("preset", TonePreset.STANDARD.value))
        except ValueError:
            app_logger.warning(f"Unknown tone preset {tone.get('preset')!r}, using stored values")
            preset = TonePreset.CUSTOM

        if preset is not TonePreset.CUSTOM:
            return ToneParameters.for_preset(preset)

        return ToneParameters(
            brightness=tone.get("brightness", 0.0),
            contrast=tone.get("contrast", 0.0),
            gamma=tone.get("gamma", 1.0),
            saturation=tone.get("saturation", 0.0),
            preset=TonePreset.CUSTOM,
        )

    def set_tone_parameters(self, params: ToneParameters):
        self.data["tone"] = {
            "preset": params.preset.value,
            "brightness": params.brightness,
            "contrast": params.contrast,
            "gamma": params.gamma,
            "saturation": params.saturation,
        }

    def uv_parameters(self) -> UvParameters:
        uv = self.get_section("uv")
        try:
            mode = UvMode(uv.get("mode", UvMode.NORMAL.value))
        except ValueError:
            app_logger.warning(f"Unknown UV mode {uv.get('mode')!r}, using Normal")
            mode = UvMode.NORMAL

        return UvParameters(
            mode=mode,
            blue_enhancement=uv.get("blue_enhancement", 1.3),
            contrast_boost=uv.get("contrast_boost", 1.2),
            false_color_enabled=uv.get("false_color_enabled", False),
            gamma=uv.get("gamma", 1.1),
        )

    def set_uv_mode(self, mode) -> UvParameters:
        """Switch the stored UV mode, applying its preset values"""
        params = self.uv_parameters().with_mode(mode)
        uv = self.get_section("uv")
        uv.update({
            "mode": params.mode.value,
            "blue_enhancement": params.blue_enhancement,
            "contrast_boost": params.contrast_boost,
            "false_color_enabled": params.false_color_enabled,
            "gamma": params.gamma,
        })
        self.data["uv"] = uv
        return params

    def recommended_uv_mode(self) -> UvMode:
        """UV-A when the configured hardware supports UV, otherwise simulation"""
        uv = self.get_section("uv")
        return recommended_mode(bool(uv.get("hardware_uv_supported", False)))

    def console_level(self) -> str:
        """Console log level name from the "logging" section"""
        level = str(self.get_section("logging").get("console_level", "INFO")).upper()
        if level not in LOG_LEVELS:
            app_logger.warning(f"Unknown console log level {level!r}, using INFO")
            return "INFO"
        return level

    def quality_thresholds(self):
        """Thresholds for check_consistency(), unknown keys dropped"""
        stored = self.get_section("quality")
        thresholds = dict(DEFAULT_THRESHOLDS)
        for key in DEFAULT_THRESHOLDS:
            if key in stored:
                thresholds[key] = float(stored[key])
        return thresholds

    def preview_style(self):
        """Tint colour and alpha for the segmentation preview"""
        seg = self.get_section("segmentation")
        tint = tuple(int(c) for c in seg.get("preview_tint", PREVIEW_TINT))
        alpha = min(1.0, max(0.0, float(seg.get("preview_alpha", PREVIEW_ALPHA))))
        return tint, alpha
