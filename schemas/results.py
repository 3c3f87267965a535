"""
Pydantic schemas for rotation, per-file and run outcomes
"""

from pathlib import Path
from typing import List, Optional
from pydantic import BaseModel, Field, computed_field
from models.base import FileOutcome, FileState, RotationStatus, RunStatus


class RotationResult(BaseModel):
    """Outcome of moving the active log into the spool."""

    status: RotationStatus
    source: Path
    destination: Optional[Path] = None
    reason: Optional[str] = None

    @property
    def rotated(self) -> bool:
        return self.status == RotationStatus.ROTATED


class FileResult(BaseModel):
    """
    Outcome of one spool file's state machine.

    Ensures:
    - final_state is DELETED only for INGESTED files
    - rows_committed is zero unless the transaction committed

    last_state is the state reached just before final_state: ROLLED_BACK
    for a failed transaction, OPENED for a malformed file, COMMITTED once
    the rows are in, None when the file could not be opened.
    """

    path: Path
    outcome: FileOutcome
    final_state: FileState
    last_state: Optional[FileState] = None
    rows_committed: int = Field(0, ge=0)
    error_type: Optional[str] = None
    error_message: Optional[str] = None
    line_number: Optional[int] = None

    @property
    def retained(self) -> bool:
        return self.final_state == FileState.RETAINED


class RunSummary(BaseModel):
    """Run-level outcome returned by SpoolRunner.run()"""

    status: RunStatus
    rotation: Optional[RotationResult] = None
    files: List[FileResult] = Field(default_factory=list)

    @computed_field
    @property
    def files_ingested(self) -> int:
        return sum(1 for f in self.files if f.outcome == FileOutcome.INGESTED)

    @computed_field
    @property
    def files_retained(self) -> int:
        return sum(1 for f in self.files if f.retained)

    @computed_field
    @property
    def files_not_deleted(self) -> int:
        return sum(1 for f in self.files if f.outcome == FileOutcome.COMMITTED_NOT_DELETED)

    @computed_field
    @property
    def rows_committed(self) -> int:
        return sum(f.rows_committed for f in self.files)
