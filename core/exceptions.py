"""
Custom exceptions for the spool pipeline with structured error context.

Every exception carries context information for logging. The hierarchy
separates run-level failures, which abort the whole job, from per-file
failures, which the coordinator turns into a retained file and moves on.

Exception Hierarchy:
    SpoolException (base)
    ├── ConfigurationError          (fatal)
    ├── FatalRunError
    │   ├── AlreadyRunningError
    │   ├── SpoolDirUnavailableError
    │   └── BackendUnavailableError
    ├── RotationError               (soft, never escapes the rotator)
    └── FileProcessingError
        ├── FileOpenError
        ├── MalformedRecordError
        ├── BackendError
        │   ├── InsertError
        │   └── TransactionError
        └── PostCommitDeleteError
"""

from typing import Optional, Dict, Any
from datetime import datetime, timezone


class SpoolException(Exception):
    """
    Base exception for all spool pipeline errors.

    Attributes:
        message: Human-readable error message
        context: Additional context information (file path, table, etc.)
        original_exception: The original exception that was caught (if any)
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[BaseException] = None
    ):
        self.message = message
        self.context = context or {}
        self.original_exception = original_exception
        self.timestamp = datetime.now(timezone.utc)

        self.context["error_timestamp"] = self.timestamp.isoformat()

        super().__init__(message)
        if original_exception:
            self.__cause__ = original_exception

    def __str__(self) -> str:
        """Format error message with context."""
        base_msg = f"{self.__class__.__name__}: {self.message}"

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" | Context: {context_str}"

        if self.original_exception:
            base_msg += (
                f" | Caused by: {type(self.original_exception).__name__}: "
                f"{self.original_exception}"
            )

        return base_msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "original_error": str(self.original_exception) if self.original_exception else None
        }


class ConfigurationError(SpoolException):
    """Raised when the settings cannot be turned into a valid SpoolConfig."""
    pass


# ============================================================================
# Run-level Errors (abort the job)
# ============================================================================

class FatalRunError(SpoolException):
    """Base exception for failures that abort the whole run."""
    pass


class AlreadyRunningError(FatalRunError):
    """
    Another instance holds the single-instance lock.

    Context should include:
        - lock_file: Path of the lock file
    """
    pass


class SpoolDirUnavailableError(FatalRunError):
    """
    The spool directory cannot be listed.

    Context should include:
        - spool_dir: Path of the spool directory
    """
    pass


class BackendUnavailableError(FatalRunError):
    """
    The backend connection could not be established.

    Context should include:
        - database_url: Connection URL with the password masked
    """
    pass


# ============================================================================
# Rotation Errors
# ============================================================================

class RotationError(SpoolException):
    """
    The active log could not be moved into the spool.

    Soft condition: logged by the rotator and reported as a RotationResult,
    the run continues with the existing spool contents.
    """
    pass


# ============================================================================
# Per-file Errors (file retained, run continues)
# ============================================================================

class FileProcessingError(SpoolException):
    """Base exception for failures scoped to a single spool file."""
    pass


class FileOpenError(FileProcessingError):
    """
    A spool file could not be opened or read.

    Context should include:
        - file_path: Path to the spool file
    """
    pass


class MalformedRecordError(FileProcessingError):
    """
    A line could not be decoded into an accounting record.

    Context should include:
        - file_path: Path to the spool file (added by the coordinator)
        - line_number: 1-based line number
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[BaseException] = None,
        line_number: Optional[int] = None
    ):
        super().__init__(message, context, original_exception)
        self.line_number = line_number
        if line_number is not None:
            self.context["line_number"] = line_number


class BackendError(FileProcessingError):
    """Base exception for backend operations inside a file's transaction."""
    pass


class InsertError(BackendError):
    """
    An insert statement failed.

    Context should include:
        - table_name: Destination table
        - row_index: 0-based index of the row in the file
    """
    pass


class TransactionError(BackendError):
    """
    Begin, commit or rollback failed.

    Context should include:
        - operation: BEGIN, COMMIT or ROLLBACK
    """
    pass


class PostCommitDeleteError(FileProcessingError):
    """
    A spool file was committed but could not be deleted.

    The backend data is correct, but the file will be ingested again on the
    next run and its rows duplicated.

    Context should include:
        - file_path: Path to the spool file
        - rows_committed: Number of rows already committed
    """
    pass
