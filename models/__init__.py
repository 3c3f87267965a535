"""
Shared enums and table definitions.

Models:
    base: Coordinator and run enums (FileState, FileOutcome, RotationStatus, RunStatus)
    accounting: SQLAlchemy Core table for the accounting destination

Usage:
    from models.base import FileState, FileOutcome
    from models.accounting import build_accounting_table

Example:
    table = build_accounting_table("radacct", ["USERNAME", "ACCTSESSIONID"])
    assert [c.name for c in table.columns] == ["ACCTSESSIONID", "USERNAME"]
"""

__all__ = [
    "FileState",
    "FileOutcome",
    "RotationStatus",
    "RunStatus",
    "build_accounting_table",
]
