"""Utility modules for lpn."""

from .error_handlers import handle_docker_error, log_error
from .logging import get_logger, setup_logging

__all__ = [
    "handle_docker_error",
    "log_error",
    "get_logger",
    "setup_logging",
]
