# ============================================================================
# File: ingestion/runner.py
# Description: Spool runner and per-file transaction coordinator
# ============================================================================
"""
Spool Runner - moves spooled accounting files into the backend.

This module provides:
- FileTransactionCoordinator: the per-file state machine
  (open, parse, begin, insert*, commit or rollback, delete or retain)
- SpoolRunner: the run-level sequence
  (lock, rotate, enumerate, connect, coordinate, disconnect)

A spool file is never partially applied: either every row is committed and
the file is deleted, or nothing is visible in the backend and the file stays
byte-for-byte where it was.
"""

from pathlib import Path
from typing import Iterable, List, Optional
from datetime import datetime
import logging

from core.config import SpoolConfig
from core.exceptions import (
    BackendError,
    FileOpenError,
    MalformedRecordError,
    PostCommitDeleteError,
    SpoolException,
)
from ingestion.base import BackendGateway
from ingestion.guard import SingleInstanceGuard
from ingestion.loaders.sql_gateway import SQLBackendGateway
from ingestion.rotator import SpoolRotator
from ingestion.spool import list_spool_files
from ingestion.transformers.mapper import AttributeMapper, MappedRow
from ingestion.transformers.parser import parse_line
from models.base import FileOutcome, FileState, RunStatus
from schemas.results import FileResult, RunSummary

logger = logging.getLogger(__name__)


class FileTransactionCoordinator:
    """
    Apply spool files to the backend, one transaction per file.

    Responsibilities:
    - Parse and map a whole file before touching the backend
    - Scope exactly one transaction to each file
    - Delete a file strictly after its commit
    - Keep failures local to the file that caused them
    """

    def __init__(self, gateway: BackendGateway, mapper: AttributeMapper):
        self.gateway = gateway
        self.mapper = mapper

    def process_files(self, paths: Iterable[Path]) -> List[FileResult]:
        """Run every file through its state machine, in order."""
        results = []
        for path in paths:
            results.append(self.process_file(Path(path)))
        return results

    def process_file(self, path: Path) -> FileResult:
        """
        Run one spool file through
        OPENED -> PARSED -> TRANSACTION_BEGUN -> INSERTING* ->
        COMMITTED|ROLLED_BACK -> DELETED|RETAINED.

        Never raises for per-file failures; the outcome is in the result.
        """
        # --------------------------------------------------
        # OPENED / PARSED
        # --------------------------------------------------
        try:
            rows = self._read_rows(path)
        except FileOpenError as e:
            logger.warning(
                f"Could not open '{path}', leaving it for the next run: {e.message}",
                extra={"error_context": e.to_dict()}
            )
            return self._retained(path, FileOutcome.OPEN_FAILED, e, last_state=None)
        except MalformedRecordError as e:
            logger.warning(
                f"Malformed record in '{path}' at line {e.line_number}, "
                f"file retained without touching the backend",
                extra={"error_context": e.to_dict()}
            )
            return self._retained(
                path, FileOutcome.MALFORMED, e,
                last_state=FileState.OPENED,
                line_number=e.line_number
            )

        state = FileState.PARSED
        logger.debug(f"Parsed {len(rows)} records from '{path}'")

        # --------------------------------------------------
        # TRANSACTION_BEGUN / INSERTING / COMMITTED
        # --------------------------------------------------
        try:
            self.gateway.begin_transaction()
            state = FileState.TRANSACTION_BEGUN
            for index, row in enumerate(rows):
                state = FileState.INSERTING
                try:
                    self.gateway.insert(row)
                except BackendError as e:
                    e.context.setdefault("row_index", index)
                    raise
            self.gateway.commit()

        except Exception as e:
            # ROLLED_BACK -> RETAINED
            error = e if isinstance(e, SpoolException) else BackendError(
                "Unexpected error while applying file",
                original_exception=e
            )
            error.context.setdefault("file_path", str(path))
            error.context["failed_in"] = state.value
            logger.warning(
                f"Transaction for '{path}' failed, doing rollback: {error}",
                extra={"error_context": error.to_dict()}
            )
            self._rollback(path)
            return self._retained(
                path, FileOutcome.INSERT_FAILED, error,
                last_state=FileState.ROLLED_BACK
            )

        # --------------------------------------------------
        # DELETED
        # --------------------------------------------------
        try:
            self._delete(path, len(rows))
        except PostCommitDeleteError as e:
            logger.critical(
                f"Committed {len(rows)} rows from '{path}' but could not delete it; "
                f"the file will be ingested again and its rows duplicated",
                extra={"error_context": e.to_dict()}
            )
            return FileResult(
                path=path,
                outcome=FileOutcome.COMMITTED_NOT_DELETED,
                final_state=FileState.COMMITTED,
                last_state=FileState.COMMITTED,
                rows_committed=len(rows),
                error_type=type(e).__name__,
                error_message=e.message,
            )

        logger.info(f"Committed {len(rows)} rows from '{path}' and deleted it")
        return FileResult(
            path=path,
            outcome=FileOutcome.INGESTED,
            final_state=FileState.DELETED,
            last_state=FileState.COMMITTED,
            rows_committed=len(rows),
        )

    def _read_rows(self, path: Path) -> List[MappedRow]:
        # Binary mode so each line is decoded on its own
        try:
            fh = open(path, "rb")
        except OSError as e:
            raise FileOpenError(
                "Could not open spool file",
                context={"file_path": str(path)},
                original_exception=e
            )

        rows: List[MappedRow] = []
        line_number = 0
        with fh:
            try:
                for line_number, raw in enumerate(fh, start=1):
                    try:
                        line = raw.decode("utf-8")
                    except UnicodeDecodeError as e:
                        raise MalformedRecordError(
                            "Line is not valid UTF-8",
                            original_exception=e,
                            line_number=line_number
                        )
                    record = parse_line(line, line_number=line_number)
                    rows.append(self.mapper.map(record))
            except MalformedRecordError as e:
                e.context["file_path"] = str(path)
                raise
            except OSError as e:
                raise FileOpenError(
                    "Could not read spool file",
                    context={"file_path": str(path), "line_number": line_number + 1},
                    original_exception=e
                )
        return rows

    def _rollback(self, path: Path) -> None:
        try:
            self.gateway.rollback()
        except Exception as e:
            logger.error(f"Rollback for '{path}' failed: {e}")

    def _delete(self, path: Path, rows_committed: int) -> None:
        try:
            path.unlink()
        except FileNotFoundError:
            # Nothing left to ingest twice
            logger.warning(f"'{path}' was already gone after commit")
        except OSError as e:
            raise PostCommitDeleteError(
                "Could not delete committed spool file",
                context={"file_path": str(path), "rows_committed": rows_committed},
                original_exception=e
            )

    @staticmethod
    def _retained(
        path: Path,
        outcome: FileOutcome,
        error: SpoolException,
        last_state: Optional[FileState],
        line_number: Optional[int] = None
    ) -> FileResult:
        return FileResult(
            path=path,
            outcome=outcome,
            final_state=FileState.RETAINED,
            last_state=last_state,
            error_type=type(error).__name__,
            error_message=str(error),
            line_number=line_number,
        )


class SpoolRunner:
    """
    Run-level orchestration.

    Run-level failures (lock held, spool dir unreadable, backend down) are
    raised as FatalRunError subclasses. Per-file failures are reported in the
    returned RunSummary.
    """

    def __init__(
        self,
        config: SpoolConfig,
        gateway: Optional[BackendGateway] = None,
        rotate: bool = True
    ):
        self.config = config
        self.rotate = rotate
        if gateway is None:
            gateway = SQLBackendGateway(config)
        self.gateway = gateway

    def run(self, now: Optional[datetime] = None) -> RunSummary:
        with SingleInstanceGuard(self.config.lock_file):
            return self._run_locked(now)

    def _run_locked(self, now: Optional[datetime]) -> RunSummary:
        rotation = None
        if self.rotate:
            rotation = SpoolRotator(self.config).rotate(now)

        files = list_spool_files(self.config.spool_dir)
        if not files:
            logger.info(f"{self.config.spool_dir} is empty, nothing to do")
            return RunSummary(status=RunStatus.NOTHING_TO_DO, rotation=rotation)

        logger.info(f"Processing {len(files)} spool files")

        coordinator = FileTransactionCoordinator(
            self.gateway,
            AttributeMapper(self.config.attribute_mapping)
        )

        try:
            self.gateway.connect()
            results = coordinator.process_files(files)
        finally:
            self.gateway.disconnect()

        summary = RunSummary(status=RunStatus.COMPLETED, rotation=rotation, files=results)
        logger.info(
            f"Run completed: ingested={summary.files_ingested}, "
            f"retained={summary.files_retained}, "
            f"not_deleted={summary.files_not_deleted}, "
            f"rows={summary.rows_committed}"
        )
        return summary


def run_pipeline(
    config: SpoolConfig,
    gateway: Optional[BackendGateway] = None,
    rotate: bool = True
) -> RunSummary:
    """Convenience wrapper for one scheduled invocation."""
    return SpoolRunner(config, gateway=gateway, rotate=rotate).run()
