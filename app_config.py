"""
Application Configuration - Central place for app identity
Change these values when renaming the application
"""

# Application Identity
APP_NAME = "HvsSampleAnalysis"
APP_DISPLAY_NAME = "HVS Sample Analysis"
APP_SUBTITLE = "Microscope sample segmentation, diagnostics and tone tools"

# Directory names (used for AppData paths)
APP_DATA_FOLDER = APP_NAME  # %LOCALAPPDATA%\{APP_DATA_FOLDER}

# File names
MAIN_CONFIG_FILE = "config.json"
LOG_FILE = "analysis.log"
LOGGER_NAME = "HvsSampleAnalysis"

# Environment overrides
LOG_DIR_ENV = "HVS_LOG_DIR"
CONFIG_PATH_ENV = "HVS_CONFIG_PATH"

# Default output naming for the command line runner
DEFAULT_PREVIEW_SUFFIX = "_mask"
DEFAULT_TONE_SUFFIX = "_tone"
