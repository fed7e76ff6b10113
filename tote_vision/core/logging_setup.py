"""
Logging Setup
=============

Configures the root logger from a LoggingConfig section:
- Console handler (stderr)
- Optional rotating file handler
"""

import logging
import logging.handlers
from typing import Optional

from .config import LoggingConfig

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'

logger = logging.getLogger(__name__)


def setup_logging(log_config: Optional[LoggingConfig] = None) -> logging.Logger:
    """
    Configure root logging handlers.

    Calling it again replaces the handlers installed by a previous call,
    so the level or file path can be changed at runtime.

    Args:
        log_config: Logging section of the configuration (defaults if None)

    Returns:
        The configured root logger
    """
    log_config = log_config or LoggingConfig()
    root = logging.getLogger()

    level = getattr(logging, str(log_config.level).upper(), None)
    if not isinstance(level, int):
        logger.warning(f"Unknown log level '{log_config.level}', using INFO")
        level = logging.INFO
    root.setLevel(level)

    for handler in list(root.handlers):
        if getattr(handler, '_tote_vision', False):
            root.removeHandler(handler)
            handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    if log_config.console_enabled:
        console = logging.StreamHandler()
        console.setFormatter(formatter)
        console._tote_vision = True
        root.addHandler(console)

    if log_config.file_enabled:
        try:
            file_handler = logging.handlers.RotatingFileHandler(
                log_config.file_path,
                maxBytes=log_config.max_file_size,
                backupCount=log_config.backup_count,
            )
        except OSError as e:
            logger.error(f"Cannot open log file {log_config.file_path}: {e}")
        else:
            file_handler.setFormatter(formatter)
            file_handler._tote_vision = True
            root.addHandler(file_handler)

    return root
