"""
Translate accounting records into rows for the destination table
"""

from typing import Dict, Mapping, Optional, Tuple

MappedRow = Dict[str, str]


class AttributeMapper:
    """
    Map source attributes onto destination columns.

    Every configured column is present in every row, in sorted column order.
    Missing attributes become an empty string, never NULL.
    """

    def __init__(self, mapping: Mapping[str, str]):
        # (column, attribute) pairs sorted by column name
        self._pairs: Tuple[Tuple[str, str], ...] = tuple(
            sorted((column, attribute) for attribute, column in mapping.items())
        )

    @property
    def columns(self) -> Tuple[str, ...]:
        return tuple(column for column, _ in self._pairs)

    def map(self, record: Mapping[str, Optional[str]]) -> MappedRow:
        row: MappedRow = {}
        for column, attribute in self._pairs:
            value = record.get(attribute)
            row[column] = "" if value is None else value
        return row


def map_record(record: Mapping[str, Optional[str]], mapping: Mapping[str, str]) -> MappedRow:
    """Functional shortcut for one-off mapping."""
    return AttributeMapper(mapping).map(record)
