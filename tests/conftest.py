"""
Pytest configuration and fixtures
"""
import pytest
import os
import sys
import tempfile
import shutil

import numpy as np

# Add project root to path
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

# Keep test logs out of the user's data directory (read when analysis is imported)
os.environ.setdefault("HVS_LOG_DIR", tempfile.mkdtemp(prefix="hvs_test_logs_"))


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files"""
    temp_path = tempfile.mkdtemp(prefix="hvs_test_")
    yield temp_path
    # Cleanup after test
    if os.path.exists(temp_path):
        shutil.rmtree(temp_path)


@pytest.fixture
def temp_config(temp_dir):
    """Create a temporary config file"""
    config_path = os.path.join(temp_dir, "config.json")
    return config_path


@pytest.fixture
def sample_image():
    """Create a sample test image"""
    from PIL import Image
    img = Image.new('RGB', (64, 48), color=(100, 100, 100))
    return img


@pytest.fixture
def gray_frame():
    """100x100 uniform mid-gray frame"""
    return np.full((100, 100, 3), 128, dtype=np.uint8)


@pytest.fixture
def dark_square_frame():
    """100x100 light background (240) with a dark (10) 20x20 square at rows/cols 40-59"""
    frame = np.full((100, 100, 3), 240, dtype=np.uint8)
    frame[40:60, 40:60] = 10
    return frame


@pytest.fixture
def ramp_frame():
    """64x256 frame where every column holds a different gray level 0-255"""
    levels = np.arange(256, dtype=np.uint8)
    return np.repeat(np.tile(levels, (64, 1))[:, :, np.newaxis], 3, axis=2)


@pytest.fixture
def noise_frame():
    """Reproducible random RGB frame"""
    rng = np.random.default_rng(1234)
    return rng.integers(0, 256, size=(60, 80, 3), dtype=np.uint8)


# Mark slow tests
def pytest_configure(config):
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "cli: marks tests that run the command line entry point"
    )
