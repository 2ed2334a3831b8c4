import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional, Union

from library_api.core.config import Settings, get_settings
from library_api.logging.filters import SensitiveDataFilter
from library_api.logging.formatters import ColorizedFormatter, JSONFormatter

__all__ = ["get_logger", "setup_logging"]

ROOT_LOGGER_NAME = "library_api"
_HANDLER_MARK = "_library_api_handler"


def get_logger(
    name: str, extra: Optional[Dict[str, Any]] = None
) -> Union[logging.Logger, logging.LoggerAdapter]:
    """
    Get a logger inside the application's logger tree.

    Args:
        name: Logger name, usually ``__name__``
        extra: Extra fields attached to every message

    Returns:
        Configured logger
    """
    if not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    logger = logging.getLogger(name)

    if extra:
        return logging.LoggerAdapter(logger, extra)
    return logger


def setup_logging(settings: Optional[Settings] = None) -> None:
    """
    Configure handlers on the ``library_api`` logger.

    Console output is colorized in development and JSON when ``LOG_JSON`` is
    set; production additionally writes a rotating ``app.log`` under
    ``LOG_DIR``. Calling it again replaces the handlers it installed before.

    Args:
        settings: Application settings, defaults to the cached instance
    """
    settings = settings or get_settings()
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    app_logger = logging.getLogger(ROOT_LOGGER_NAME)
    app_logger.setLevel(log_level)
    app_logger.propagate = False

    for handler in list(app_logger.handlers):
        if getattr(handler, _HANDLER_MARK, False):
            app_logger.removeHandler(handler)
            handler.close()

    sensitive_filter = SensitiveDataFilter()
    formatter = JSONFormatter() if settings.LOG_JSON else ColorizedFormatter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(log_level)
    console_handler.addFilter(sensitive_filter)
    setattr(console_handler, _HANDLER_MARK, True)
    app_logger.addHandler(console_handler)

    if settings.is_production:
        log_dir = Path(settings.LOG_DIR)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_dir / "app.log",
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(JSONFormatter())
        file_handler.setLevel(log_level)
        file_handler.addFilter(sensitive_filter)
        setattr(file_handler, _HANDLER_MARK, True)
        app_logger.addHandler(file_handler)

    # SQL echo goes through the sqlalchemy logger, keep it quiet unless asked
    if not settings.DB_ECHO:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    app_logger.debug(f"Logging configured with level: {settings.LOG_LEVEL}")
