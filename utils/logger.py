"""
Logger utility for the projects tracker
Provides centralized logging functionality
"""

from datetime import datetime
import logging
import sys
from typing import Any, Optional

from config.settings import get_settings

LOGGER_NAME = "ProjectsTracker"


class Logger:
    """Centralized logging utility"""

    _instance: Optional["Logger"] = None
    _initialized: bool = False

    def __new__(cls) -> "Logger":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if not self._initialized:
            self.setup_logging()
            Logger._initialized = True

    def setup_logging(self) -> None:
        """Setup logging configuration.

        Note:
            If structured logging is already configured via
            utils.structured_logging.setup_logging(), this method will not
            reconfigure handlers. It will simply obtain the namespaced logger.
        """
        root = logging.getLogger()
        if getattr(root, "_projects_structured_logging_configured", False):
            self.logger = logging.getLogger(LOGGER_NAME)
            return

        # Fallback basic configuration
        settings = get_settings()
        log_dir = settings.log_dir
        log_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d")
        log_file = log_dir / f"projects_{timestamp}.log"

        logging.basicConfig(
            level=getattr(logging, settings.log_level, logging.INFO),
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            handlers=[
                logging.FileHandler(log_file, encoding="utf-8"),
                logging.StreamHandler(sys.stderr),
            ],
        )

        self.logger = logging.getLogger(LOGGER_NAME)

    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log info message"""
        self.logger.info(message, *args, **kwargs)

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log warning message"""
        self.logger.warning(message, *args, **kwargs)

    def error(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log error message"""
        self.logger.error(message, *args, **kwargs)

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log debug message"""
        self.logger.debug(message, *args, **kwargs)

    def critical(self, message: str, *args: Any, **kwargs: Any) -> None:
        """Log critical message"""
        self.logger.critical(message, *args, **kwargs)
