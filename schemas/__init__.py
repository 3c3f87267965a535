"""
Pydantic schemas for pipeline outcomes.

Schemas:
    results: RotationResult, FileResult and RunSummary

Usage:
    from schemas.results import FileResult, RunSummary
"""

from schemas.results import RotationResult, FileResult, RunSummary

__all__ = [
    "RotationResult",
    "FileResult",
    "RunSummary",
]
