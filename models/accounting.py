from typing import Iterable, Optional
from sqlalchemy import Column, MetaData, Table, Text


def build_accounting_table(
    table_name: str,
    columns: Iterable[str],
    metadata: Optional[MetaData] = None
) -> Table:
    """
    Describe the accounting destination table.

    Design:
    - One text column per configured destination column
    - Columns declared in sorted order, which is also the insert order
    - Column names come from static configuration only; the dialect quotes them
    """
    metadata = metadata if metadata is not None else MetaData()
    return Table(
        table_name,
        metadata,
        *[Column(name, Text, nullable=False) for name in sorted(columns)]
    )
