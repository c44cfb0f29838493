"""Core module initialization."""

from .config_manager import ConfigManager, AzBlobConfig, LoggingConfig, TransportConfig
from .logging_config import setup_logging, get_logger, log_with_context
from .uri_builder import UriBuilder, PathSegments, build_uri, split_path

__all__ = [
    "ConfigManager",
    "AzBlobConfig",
    "LoggingConfig",
    "TransportConfig",
    "setup_logging",
    "get_logger",
    "log_with_context",
    "UriBuilder",
    "PathSegments",
    "build_uri",
    "split_path",
]
