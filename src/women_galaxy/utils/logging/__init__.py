# ABOUTME: Logging configuration, progress tracking, and output formatting
# ABOUTME: Provides rich console output and structured logging for the importer

from .config import LoggingMode, configure_logging, detect_logging_mode, get_logging_status
from .progress import BatchProgressTracker, create_batch_progress
from .utils import get_logger, log_api_call, with_import_context, with_pipeline_context

__all__ = [
    # Configuration
    "LoggingMode",
    "configure_logging",
    "detect_logging_mode",
    "get_logging_status",
    # Progress
    "BatchProgressTracker",
    "create_batch_progress",
    # Utilities
    "get_logger",
    "log_api_call",
    "with_import_context",
    "with_pipeline_context",
]
