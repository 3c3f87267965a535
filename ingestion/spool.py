"""
Spool directory enumeration
"""

import os
from pathlib import Path
from typing import List
from core.exceptions import SpoolDirUnavailableError
import logging

logger = logging.getLogger(__name__)


def list_spool_files(spool_dir: Path) -> List[Path]:
    """
    List the regular files directly inside the spool directory.

    Subdirectories are not descended into. Results are sorted by name so the
    oldest rotation is processed first; correctness does not depend on it.

    Raises:
        SpoolDirUnavailableError: the directory cannot be listed
    """
    spool_dir = Path(spool_dir)
    try:
        with os.scandir(spool_dir) as entries:
            files = [Path(entry.path) for entry in entries if entry.is_file()]
    except OSError as e:
        raise SpoolDirUnavailableError(
            "Could not open spool directory",
            context={"spool_dir": str(spool_dir)},
            original_exception=e
        )

    files.sort(key=lambda p: p.name)
    logger.debug(f"Found {len(files)} files in {spool_dir}")
    return files
