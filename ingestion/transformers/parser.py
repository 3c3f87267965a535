"""
Decode spool file lines into accounting records
"""

import json
from typing import Any, Dict, Optional
from core.exceptions import MalformedRecordError

AccountingRecord = Dict[str, Optional[str]]


def _to_text(value: Any) -> Optional[str]:
    """Render a decoded JSON value as the text stored in the backend."""
    if value is None:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "1" if value else "0"
    # Nested arrays/objects
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def parse_line(line: str, line_number: Optional[int] = None) -> AccountingRecord:
    """
    Decode one line into an AccountingRecord.

    Numbers keep the literal text they were logged with. JSON null is
    treated as an absent attribute.

    Raises:
        MalformedRecordError: if the line is not a single JSON object
    """
    try:
        decoded = json.loads(line, parse_int=str, parse_float=str)
    except ValueError as e:
        raise MalformedRecordError(
            "Line is not valid JSON",
            original_exception=e,
            line_number=line_number
        )

    if not isinstance(decoded, dict):
        raise MalformedRecordError(
            f"Expected a JSON object, got {type(decoded).__name__}",
            line_number=line_number
        )

    return {key: _to_text(value) for key, value in decoded.items()}
