"""
Service logger setup

One call per process configures the root handlers; modules keep using
logging.getLogger(__name__).
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from core.config import LoggingConfig

_configured = False


def setup_service_logger(
    service_name: str,
    level: Optional[str] = None,
    config: Optional[LoggingConfig] = None,
) -> logging.Logger:
    """
    Configure logging for a service and return its named logger

    Args:
        service_name: Logger name, also used in the log file name
        level: Overrides config.log_level when given
        config: Logging configuration (read from environment if omitted)

    Returns:
        Logger for the service
    """
    global _configured
    config = config or LoggingConfig.from_env()
    log_level = (level or config.log_level).upper()

    if not _configured:
        root = logging.getLogger()
        root.setLevel(log_level)
        formatter = logging.Formatter(config.log_format)

        if config.enable_console:
            console = logging.StreamHandler(sys.stdout)
            console.setFormatter(formatter)
            root.addHandler(console)

        if config.log_file:
            Path(config.log_file).parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(config.log_file, encoding="utf-8")
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)

        # httpx logs every request at INFO
        logging.getLogger("httpx").setLevel(logging.WARNING)
        _configured = True

    logger = logging.getLogger(service_name)
    logger.setLevel(log_level)
    return logger


__all__ = ["setup_service_logger"]
