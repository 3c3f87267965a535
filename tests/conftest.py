"""
Pytest configuration and fixtures
"""

import json
from pathlib import Path
from typing import Dict, Iterable, List

import pytest
from sqlalchemy import MetaData, create_engine, select
from sqlalchemy.pool import NullPool

from core.config import SpoolConfig
from models.accounting import build_accounting_table


TEST_MAPPING = {
    "username": "USERNAME",
    "acct_session_id": "ACCTSESSIONID",
    "acct_status_type": "ACCTSTATUSTYPE",
}


@pytest.fixture
def spool_paths(tmp_path) -> Dict[str, Path]:
    """Spool directory, active log, lock file and database file under tmp_path"""
    spool_dir = tmp_path / "spool"
    spool_dir.mkdir()
    return {
        "spool_dir": spool_dir,
        "acct_file": tmp_path / "acctlog-combined.json",
        "lock_file": tmp_path / "radspool.lock",
        "database": tmp_path / "accounting.db",
    }


@pytest.fixture
def spool_config(spool_paths) -> SpoolConfig:
    return SpoolConfig(
        acct_file=spool_paths["acct_file"],
        spool_dir=spool_paths["spool_dir"],
        lock_file=spool_paths["lock_file"],
        database_url=f"sqlite:///{spool_paths['database']}",
        db_table="radacct",
        attribute_mapping=TEST_MAPPING,
    )


@pytest.fixture
def test_engine(spool_config):
    """SQLite engine with the accounting table created"""
    engine = create_engine(spool_config.database_url, poolclass=NullPool)
    metadata = MetaData()
    build_accounting_table(spool_config.db_table, spool_config.columns, metadata)
    metadata.create_all(engine)

    yield engine

    engine.dispose()


@pytest.fixture
def fetch_rows(spool_config, test_engine):
    """Read back committed rows, in insertion order"""
    table = build_accounting_table(spool_config.db_table, spool_config.columns)

    def _fetch() -> List[Dict[str, str]]:
        with test_engine.connect() as conn:
            result = conn.execute(select(table))
            return [dict(row._mapping) for row in result]

    return _fetch


def json_lines(records: Iterable[dict]) -> str:
    return "".join(json.dumps(record) + "\n" for record in records)


@pytest.fixture
def write_spool_file(spool_paths):
    """Create a spool file from records (dicts) or raw text"""

    def _write(name: str, records) -> Path:
        path = spool_paths["spool_dir"] / name
        content = records if isinstance(records, str) else json_lines(records)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def mock_accounting_records():
    """Mock accounting records as written by the RADIUS server"""
    return [
        {
            "username": "alice",
            "acct_session_id": "S1",
            "acct_status_type": "Start",
            "nas_identifier": "nas-01"
        },
        {
            "username": "alice",
            "acct_session_id": "S1",
            "acct_status_type": "Stop",
            "acct_input_octets": 1024
        },
        {
            "username": "bob",
            "acct_status_type": "Start"
        }
    ]


@pytest.fixture
def json_text():
    """Render records as newline-delimited JSON"""
    return json_lines
