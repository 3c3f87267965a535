"""
Move the active accounting log into the spool directory
"""

import os
from datetime import datetime
from pathlib import Path
from typing import Optional
from core.config import SpoolConfig
from core.exceptions import RotationError
from models.base import RotationStatus
from schemas.results import RotationResult
import logging

logger = logging.getLogger(__name__)

SPOOL_FILE_PREFIX = "acctlog.json."


def spool_file_name(now: datetime) -> str:
    """
    Build the spool name for a capture time.

    Format: acctlog.json.<YYYYMMDDHHMMSS><mmm>, milliseconds truncated.
    """
    return f"{SPOOL_FILE_PREFIX}{now:%Y%m%d%H%M%S}{now.microsecond // 1000:03d}"


def rotate(active_path: Path, spool_dir: Path, now: Optional[datetime] = None) -> RotationResult:
    """
    Atomically rename the active log into the spool.

    Never copies or truncates: a producer still writing to the old name is
    never observed half-way. Every failure is soft and reported in the
    returned RotationResult.
    """
    active_path = Path(active_path)
    spool_dir = Path(spool_dir)
    now = now or datetime.now()
    destination = spool_dir / spool_file_name(now)

    if not active_path.exists():
        logger.info(f"No new accounting file at '{active_path}'")
        return RotationResult(status=RotationStatus.NO_ACTIVE_FILE, source=active_path)

    try:
        if destination.exists():
            raise RotationError(
                "Spool file name already taken",
                context={"destination": str(destination)}
            )
        try:
            os.rename(active_path, destination)
        except FileNotFoundError as e:
            if active_path.exists():
                raise RotationError(
                    "Spool directory does not exist",
                    context={"source": str(active_path), "destination": str(destination)},
                    original_exception=e
                )
            # Moved away between the check and the rename
            logger.info(f"No new accounting file at '{active_path}'")
            return RotationResult(status=RotationStatus.NO_ACTIVE_FILE, source=active_path)
        except OSError as e:
            raise RotationError(
                "Cannot move accounting file into spool",
                context={"source": str(active_path), "destination": str(destination)},
                original_exception=e
            )
    except RotationError as e:
        logger.warning(
            f"Rotation skipped: {e}",
            extra={"error_context": e.to_dict()}
        )
        return RotationResult(
            status=RotationStatus.FAILED,
            source=active_path,
            destination=destination,
            reason=str(e)
        )

    logger.info(f"Rotated '{active_path}' to '{destination}'")
    return RotationResult(
        status=RotationStatus.ROTATED,
        source=active_path,
        destination=destination
    )


class SpoolRotator:
    """Rotator bound to the configured active log and spool directory."""

    def __init__(self, config: SpoolConfig):
        self.config = config

    def rotate(self, now: Optional[datetime] = None) -> RotationResult:
        return rotate(self.config.acct_file, self.config.spool_dir, now)
