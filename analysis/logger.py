"""
Thread-safe logging module with a UI message queue and 7-day rotating file logs
"""
import queue
import logging
import logging.handlers
from datetime import datetime, timedelta
from pathlib import Path

from app_config import LOG_FILE, LOGGER_NAME
from utils_paths import get_log_dir


class AppLogger:
    """Thread-safe logger with UI queue and 7-day rotating file logs"""

    def __init__(self, log_dir=None, console_level=logging.INFO):
        self.message_queue = queue.Queue()
        self.error_callback = None  # Callback for error notifications (status bar, alerts)
        self.console_level = console_level

        # Set up file logging
        self.log_dir = Path(log_dir) if log_dir else Path(get_log_dir())
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self._setup_file_logging()
        self._cleanup_old_logs()

    def _setup_file_logging(self):
        """Set up rotating file handler for 7-day logs"""
        # Silence chatty third-party loggers before anything else logs
        for logger_name in ['PIL', 'PIL.PngImagePlugin', 'PIL.TiffImagePlugin']:
            third_party_logger = logging.getLogger(logger_name)
            third_party_logger.setLevel(logging.CRITICAL)
            third_party_logger.propagate = False

        # Dedicated logger for the app (not root logger)
        self.file_logger = logging.getLogger(LOGGER_NAME)
        self.file_logger.setLevel(logging.DEBUG)
        self.file_logger.propagate = False

        # Remove any existing handlers to avoid duplicates
        for handler in list(self.file_logger.handlers):
            self.file_logger.removeHandler(handler)
            handler.close()

        log_file = self.log_dir / LOG_FILE
        handler = logging.handlers.TimedRotatingFileHandler(
            log_file,
            when='midnight',
            interval=1,
            backupCount=7,  # Keep 7 days
            encoding='utf-8',
            delay=True
        )

        # Format: [2025-12-22 18:30:43] INFO     - Message
        formatter = logging.Formatter('[%(asctime)s] %(levelname)-8s - %(message)s',
                                      datefmt='%Y-%m-%d %H:%M:%S')
        handler.setFormatter(formatter)

        self.file_logger.addHandler(handler)
        self.file_handler = handler

    def _cleanup_old_logs(self):
        """Delete log files older than 7 days"""
        if not self.log_dir.exists():
            return

        cutoff = datetime.now() - timedelta(days=7)
        for log_file in self.log_dir.glob(f'{LOG_FILE}*'):
            try:
                mtime = datetime.fromtimestamp(log_file.stat().st_mtime)
                if mtime < cutoff:
                    log_file.unlink()
            except OSError as e:
                print(f"Error cleaning up old log: {e}")

    def get_log_dir(self):
        """Get the log directory path for display"""
        return str(self.log_dir)

    def set_console_level(self, level):
        """Set the minimum level echoed to the console (name or logging constant)"""
        if isinstance(level, str):
            level = logging.getLevelName(level.upper())
            if not isinstance(level, int):
                raise ValueError(f"Unknown log level: {level}")
        self.console_level = level

    def set_error_callback(self, callback):
        """Set callback for error messages"""
        self.error_callback = callback

    def log(self, message, level="INFO"):
        """Add a log message to queue AND file"""
        timestamp = datetime.now().strftime('%H:%M:%S')
        formatted_message = f"[{timestamp}] {level}: {message}"
        log_level = getattr(logging, level, logging.INFO)

        # Queue for UI consumers
        self.message_queue.put(formatted_message)

        # Console
        if log_level >= self.console_level:
            print(formatted_message)

        # File logging
        self.file_logger.log(log_level, message)

        if level == "ERROR" and self.error_callback:
            try:
                self.error_callback(message)
            except Exception as e:
                print(f"Error in error callback: {e}")

    def info(self, message):
        """Log info message"""
        self.log(message, "INFO")

    def error(self, message):
        """Log error message"""
        self.log(message, "ERROR")

    def warning(self, message):
        """Log warning message"""
        self.log(message, "WARN")

    def debug(self, message):
        """Log debug message"""
        self.log(message, "DEBUG")

    def get_messages(self):
        """Get all queued messages (non-blocking)"""
        messages = []
        while not self.message_queue.empty():
            try:
                messages.append(self.message_queue.get_nowait())
            except queue.Empty:
                break
        return messages

    def get_log_location(self):
        """Get the log file location for display to users"""
        return str(self.log_dir / LOG_FILE)


# Singleton pattern to ensure only one logger instance
_logger_instance = None

def get_app_logger():
    """Get or create the singleton logger instance"""
    global _logger_instance
    if _logger_instance is None:
        _logger_instance = AppLogger()
    return _logger_instance

# Global logger instance (singleton)
app_logger = get_app_logger()
