"""
Unit tests for the scheduler entry point
"""

import pytest
from core.config import Settings
from models.base import FileOutcome, FileState, RunStatus
from schemas.results import FileResult, RunSummary
from scripts import run_spool


def result(outcome, state, rows=0):
    return FileResult(path="/spool/acctlog.json.1", outcome=outcome, final_state=state, rows_committed=rows)


class TestExitCodes:

    def test_all_ingested(self):
        summary = RunSummary(
            status=RunStatus.COMPLETED,
            files=[result(FileOutcome.INGESTED, FileState.DELETED, 3)]
        )
        assert run_spool.exit_code_for(summary) == run_spool.EXIT_OK

    def test_nothing_to_do(self):
        assert run_spool.exit_code_for(RunSummary(status=RunStatus.NOTHING_TO_DO)) == 0

    def test_retained(self):
        summary = RunSummary(
            status=RunStatus.COMPLETED,
            files=[
                result(FileOutcome.INGESTED, FileState.DELETED, 1),
                result(FileOutcome.MALFORMED, FileState.RETAINED),
            ]
        )
        assert run_spool.exit_code_for(summary) == run_spool.EXIT_RETAINED

    def test_not_deleted_takes_precedence(self):
        summary = RunSummary(
            status=RunStatus.COMPLETED,
            files=[
                result(FileOutcome.INSERT_FAILED, FileState.RETAINED),
                result(FileOutcome.COMMITTED_NOT_DELETED, FileState.COMMITTED, 2),
            ]
        )
        assert run_spool.exit_code_for(summary) == run_spool.EXIT_NOT_DELETED
        assert summary.rows_committed == 2


class TestMain:

    @pytest.fixture(autouse=True)
    def quiet_logging(self, monkeypatch):
        monkeypatch.setattr(run_spool, "setup_logging", lambda level=None: None)

    def make_settings(self, spool_paths, **overrides):
        values = dict(
            ACCT_FILE=str(spool_paths["acct_file"]),
            SPOOL_DIR=str(spool_paths["spool_dir"]),
            LOCK_FILE=str(spool_paths["lock_file"]),
            DATABASE_URL=f"sqlite:///{spool_paths['database']}",
            ATTRIBUTE_MAPPING={"username": "USERNAME"},
        )
        values.update(overrides)
        return Settings(**values)

    def test_nothing_to_do_exits_zero(self, spool_paths, monkeypatch):
        monkeypatch.setattr(run_spool, "settings", self.make_settings(spool_paths))

        assert run_spool.main([]) == 0

    def test_invalid_configuration_exits_fatal(self, spool_paths, monkeypatch):
        bad = self.make_settings(spool_paths, ATTRIBUTE_MAPPING={})
        monkeypatch.setattr(run_spool, "settings", bad)

        assert run_spool.main([]) == run_spool.EXIT_FATAL

    def test_unparseable_database_url_exits_fatal(self, spool_paths, monkeypatch):
        settings = self.make_settings(spool_paths, DATABASE_URL="not a url")
        monkeypatch.setattr(run_spool, "settings", settings)
        spool_paths["acct_file"].write_text('{"username": "alice"}\n')

        assert run_spool.main([]) == run_spool.EXIT_FATAL
        assert spool_paths["acct_file"].exists()

    def test_backend_down_exits_fatal(self, spool_paths, tmp_path, monkeypatch):
        settings = self.make_settings(
            spool_paths, DATABASE_URL=f"sqlite:///{tmp_path}/no/such/dir/acct.db"
        )
        monkeypatch.setattr(run_spool, "settings", settings)
        spool_paths["acct_file"].write_text('{"username": "alice"}\n')

        assert run_spool.main([]) == run_spool.EXIT_FATAL

    def test_malformed_file_exits_retained(self, spool_paths, monkeypatch):
        monkeypatch.setattr(run_spool, "settings", self.make_settings(spool_paths))
        spool_paths["acct_file"].write_text("garbage\n")

        assert run_spool.main([]) == run_spool.EXIT_RETAINED
        assert len(list(spool_paths["spool_dir"].iterdir())) == 1

    def test_skip_rotation_flag(self, spool_paths, monkeypatch):
        monkeypatch.setattr(run_spool, "settings", self.make_settings(spool_paths))
        spool_paths["acct_file"].write_text("garbage\n")

        assert run_spool.main(["--skip-rotation"]) == 0
        assert spool_paths["acct_file"].exists()
