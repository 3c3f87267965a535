"""
Spool-and-commit pipeline for RADIUS accounting records.

Modules:
    guard: Single-instance advisory lock
    rotator: Atomic rename of the active log into the spool
    spool: Spool directory enumeration
    base: Abstract backend gateway
    runner: File transaction coordinator and run orchestration

Subpackages:
    transformers: JSON line parser and attribute mapper
    loaders: SQLAlchemy backend gateway

Architecture:
    Each scheduled run takes the lock, rotates the active log into the
    spool, then applies every spool file in its own transaction:

    1. Parse - Decode every line; one bad line retains the whole file
    2. Map - Build a row with every configured column, sorted by name
    3. Load - Insert all rows, commit, then delete the file

    A file whose transaction fails is rolled back and left in the spool
    for the next run.

Usage:
    from core.config import settings
    from ingestion.runner import SpoolRunner

Example:
    summary = SpoolRunner(settings.to_spool_config()).run()
    print(f"Ingested {summary.files_ingested} files")
"""

__all__ = [
    "BackendGateway",
    "SingleInstanceGuard",
    "SpoolRotator",
    "list_spool_files",
    "AttributeMapper",
    "parse_line",
    "SQLBackendGateway",
    "FileTransactionCoordinator",
    "SpoolRunner",
]
