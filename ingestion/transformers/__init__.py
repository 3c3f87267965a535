from ingestion.transformers.parser import AccountingRecord, parse_line
from ingestion.transformers.mapper import AttributeMapper, MappedRow, map_record

__all__ = [
    "AccountingRecord",
    "parse_line",
    "AttributeMapper",
    "MappedRow",
    "map_record",
]
