"""
Test settings persistence - save, load, and typed accessors
"""
import pytest
import json
import logging
import os
import sys

# Ensure project root is in path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from analysis.config import Config, DEFAULT_CONFIG
from analysis.logger import app_logger
from analysis.quality import DEFAULT_THRESHOLDS
from analysis.tone import TonePreset
from analysis.uv_mode import UvMode


class TestConfigPersistence:
    """Test configuration save/load functionality"""

    def test_default_config_loaded(self, temp_config):
        """Test that default config is loaded when no file exists"""
        config = Config(temp_config)

        for key in ('tone', 'uv', 'quality', 'segmentation', 'logging'):
            assert key in config.data

    def test_defaults_not_shared(self, temp_config):
        """Test that editing a loaded section leaves DEFAULT_CONFIG alone"""
        config = Config(temp_config)
        config.data['tone']['gamma'] = 2.5

        assert DEFAULT_CONFIG['tone']['gamma'] == 1.0

    def test_config_save_and_load(self, temp_config):
        """Test that config is saved and can be reloaded"""
        config = Config(temp_config)
        config.set('custom_key', 42)
        assert config.save() is True

        config2 = Config(temp_config)
        assert config2.get('custom_key') == 42

    def test_nested_config_merge(self, temp_config):
        """Test that partial nested sections keep their other defaults"""
        with open(temp_config, 'w') as f:
            json.dump({'uv': {'mode': 'UvA'}}, f)

        config = Config(temp_config)

        assert config.data['uv']['mode'] == 'UvA'
        assert config.data['uv']['gamma'] == DEFAULT_CONFIG['uv']['gamma']
        assert 'tone' in config.data

    def test_corrupt_file_falls_back_to_defaults(self, temp_config):
        """Test that invalid JSON loads defaults instead of raising"""
        with open(temp_config, 'w') as f:
            f.write("{not json")

        config = Config(temp_config)
        assert config.data == DEFAULT_CONFIG

    def test_non_object_file_falls_back_to_defaults(self, temp_config):
        """Test that a JSON list at top level is ignored"""
        with open(temp_config, 'w') as f:
            json.dump([1, 2, 3], f)

        assert Config(temp_config).data == DEFAULT_CONFIG

    def test_save_creates_directory(self, temp_dir):
        """Test saving into a missing directory"""
        path = os.path.join(temp_dir, 'sub', 'config.json')
        assert Config(path).save() is True
        assert os.path.exists(path)

    def test_default_path_from_environment(self, temp_config, monkeypatch):
        """Test HVS_CONFIG_PATH picks the config location"""
        monkeypatch.setenv('HVS_CONFIG_PATH', temp_config)
        assert Config().config_path == temp_config


class TestToneSettings:
    """Test tone parameter accessors"""

    def test_default_tone(self, temp_config):
        """Test defaults give the Standard preset"""
        params = Config(temp_config).tone_parameters()
        assert params.preset is TonePreset.STANDARD
        assert params.values == (0.0, 0.0, 1.0, 0.0)

    def test_named_preset_wins(self, temp_config):
        """Test a named preset ignores stored numbers"""
        config = Config(temp_config)
        config.data['tone'] = {'preset': 'HighContrast', 'brightness': 0.9}

        params = config.tone_parameters()
        assert params.preset is TonePreset.HIGH_CONTRAST
        assert params.brightness == 0.0

    def test_custom_values(self, temp_config):
        """Test Custom uses the stored numbers, clamped"""
        config = Config(temp_config)
        config.data['tone'] = {'preset': 'Custom', 'brightness': 0.2, 'gamma': 7.0}

        params = config.tone_parameters()
        assert params.preset is TonePreset.CUSTOM
        assert params.brightness == 0.2
        assert params.gamma == 3.0

    def test_unknown_preset_uses_values(self, temp_config):
        """Test an unknown preset name falls back to Custom"""
        config = Config(temp_config)
        config.data['tone'] = {'preset': 'Sepia', 'contrast': 0.4}

        params = config.tone_parameters()
        assert params.preset is TonePreset.CUSTOM
        assert params.contrast == 0.4

    def test_set_tone_round_trip(self, temp_config):
        """Test tone parameters survive save and reload"""
        config = Config(temp_config)
        params = config.tone_parameters().with_values(saturation=0.3)
        config.set_tone_parameters(params)
        config.save()

        reloaded = Config(temp_config).tone_parameters()
        assert reloaded.preset is TonePreset.CUSTOM
        assert reloaded.saturation == 0.3


class TestUvSettings:
    """Test UV parameter accessors"""

    def test_default_uv(self, temp_config):
        """Test defaults give Normal mode"""
        params = Config(temp_config).uv_parameters()
        assert params.mode is UvMode.NORMAL
        assert not params.is_active

    def test_set_uv_mode(self, temp_config):
        """Test switching mode stores the preset numbers"""
        config = Config(temp_config)
        params = config.set_uv_mode(UvMode.UV_B)

        assert params.mode is UvMode.UV_B
        assert config.data['uv']['mode'] == 'UvB'
        assert config.data['uv']['false_color_enabled'] is True
        assert config.data['uv']['hardware_uv_supported'] is False

    def test_unknown_mode_is_normal(self, temp_config):
        """Test an unknown stored mode falls back to Normal"""
        config = Config(temp_config)
        config.data['uv']['mode'] = 'Infrared'
        assert config.uv_parameters().mode is UvMode.NORMAL

    def test_recommended_mode_without_hardware(self, temp_config):
        """Test defaults recommend software simulation"""
        assert Config(temp_config).recommended_uv_mode() is UvMode.SIMULATED

    def test_recommended_mode_with_hardware(self, temp_config):
        """Test declared UV hardware recommends UV-A"""
        config = Config(temp_config)
        config.data['uv']['hardware_uv_supported'] = True
        assert config.recommended_uv_mode() is UvMode.UV_A


class TestLoggingSettings:
    """Test the console log level accessor"""

    def test_default_console_level(self, temp_config):
        """Test defaults echo INFO and above"""
        assert Config(temp_config).console_level() == "INFO"

    def test_console_level_normalized(self, temp_config):
        """Test level names are upper-cased"""
        config = Config(temp_config)
        config.data['logging']['console_level'] = 'debug'
        assert config.console_level() == "DEBUG"

    def test_unknown_console_level(self, temp_config):
        """Test an unknown level falls back to INFO"""
        config = Config(temp_config)
        config.data['logging']['console_level'] = 'LOUD'
        assert config.console_level() == "INFO"

    def test_logger_accepts_level_name(self):
        """Test the logger takes level names from config"""
        before = app_logger.console_level
        try:
            app_logger.set_console_level("WARNING")
            assert app_logger.console_level == logging.WARNING

            with pytest.raises(ValueError):
                app_logger.set_console_level("LOUD")
        finally:
            app_logger.set_console_level(before)


class TestQualitySettings:
    """Test quality and preview accessors"""

    def test_default_thresholds(self, temp_config):
        """Test defaults match the quality module"""
        assert Config(temp_config).quality_thresholds() == DEFAULT_THRESHOLDS

    def test_threshold_override(self, temp_config):
        """Test stored thresholds override and unknown keys are dropped"""
        config = Config(temp_config)
        config.data['quality'] = {'focus_min_good': 0.6, 'bogus': 1}

        thresholds = config.quality_thresholds()
        assert thresholds['focus_min_good'] == 0.6
        assert thresholds['clipping_max_good'] == DEFAULT_THRESHOLDS['clipping_max_good']
        assert 'bogus' not in thresholds

    def test_preview_style(self, temp_config):
        """Test preview tint and alpha, alpha clamped to [0, 1]"""
        config = Config(temp_config)
        assert config.preview_style() == ((0, 90, 200), 0.65)

        config.data['segmentation']['preview_alpha'] = 4
        assert config.preview_style()[1] == 1.0
