"""
Logging for the application.

- Formatters: JSON and colorized console output
- Filters: masking of secrets and personal data
- Setup: one-time configuration of the ``library_api`` logger tree
"""

from library_api.logging.filters import SensitiveDataFilter
from library_api.logging.formatters import ColorizedFormatter, JSONFormatter
from library_api.logging.setup import get_logger, setup_logging

__all__ = [
    "ColorizedFormatter",
    "JSONFormatter",
    "SensitiveDataFilter",
    "get_logger",
    "setup_logging",
]
