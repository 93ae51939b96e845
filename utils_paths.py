"""
Path utilities for application data, logs and configuration
Resolves per-user directories on Windows and other platforms
"""
import os
import sys

from app_config import APP_DATA_FOLDER, CONFIG_PATH_ENV, LOG_DIR_ENV, MAIN_CONFIG_FILE


def get_app_data_dir():
    r"""
    Get application data directory (for logs, user config, etc.)

    Returns:
        Path to %LOCALAPPDATA%\{APP_DATA_FOLDER} (Windows) or ~/.{APP_DATA_FOLDER}
    """
    if sys.platform == 'win32':
        local_app_data = os.environ.get('LOCALAPPDATA')
        if not local_app_data:
            # Fallback to APPDATA if LOCALAPPDATA not available
            local_app_data = os.environ.get('APPDATA', os.path.expanduser('~'))
        app_dir = os.path.join(local_app_data, APP_DATA_FOLDER)
    else:
        app_dir = os.path.join(os.path.expanduser('~'), f'.{APP_DATA_FOLDER}')

    os.makedirs(app_dir, exist_ok=True)

    return app_dir


def get_log_dir():
    r"""
    Get log directory path

    The HVS_LOG_DIR environment variable takes precedence over the
    default %LOCALAPPDATA%\{APP_DATA_FOLDER}\Logs location.

    Returns:
        Path to the log directory (created if missing)
    """
    log_dir = os.environ.get(LOG_DIR_ENV)
    if not log_dir:
        log_dir = os.path.join(get_app_data_dir(), 'Logs')
    os.makedirs(log_dir, exist_ok=True)
    return log_dir


def get_default_config_path():
    """
    Get the default config.json path (HVS_CONFIG_PATH overrides it)
    """
    override = os.environ.get(CONFIG_PATH_ENV)
    if override:
        return override
    return os.path.join(get_app_data_dir(), MAIN_CONFIG_FILE)
