"""
Core utilities and configuration for the radspool pipeline.

This package provides foundational components used throughout the pipeline:

Modules:
    config: Settings from the environment and the immutable SpoolConfig
    database: SQLAlchemy engine creation
    exceptions: Custom exception hierarchy for error handling
    logging: Logging configuration

Usage:
    from core.config import settings
    from core.exceptions import AlreadyRunningError, MalformedRecordError
    from core.logging import setup_logging

Example:
    setup_logging()
    config = settings.to_spool_config()
"""

__all__ = [
    "settings",
    "SpoolConfig",
    "setup_logging",
    "create_backend_engine",
    # Exceptions
    "SpoolException",
    "ConfigurationError",
    "FatalRunError",
    "AlreadyRunningError",
    "SpoolDirUnavailableError",
    "BackendUnavailableError",
    "RotationError",
    "FileProcessingError",
    "FileOpenError",
    "MalformedRecordError",
    "BackendError",
    "InsertError",
    "TransactionError",
    "PostCommitDeleteError",
]
