"""
Unit tests for configuration
"""

import pytest
from pydantic import ValidationError
from core.config import DEFAULT_ATTRIBUTE_MAPPING, Settings, SpoolConfig
from core.exceptions import ConfigurationError


def make_config(tmp_path, **overrides):
    values = dict(
        acct_file=tmp_path / "acctlog-combined.json",
        spool_dir=tmp_path / "spool",
        lock_file=tmp_path / "radspool.lock",
        database_url="sqlite://",
        db_table="radacct",
        attribute_mapping={"username": "USERNAME", "acct_session_id": "ACCTSESSIONID"},
    )
    values.update(overrides)
    return SpoolConfig(**values)


class TestSpoolConfig:

    def test_columns_sorted(self, tmp_path):
        config = make_config(tmp_path)

        assert config.columns == ("ACCTSESSIONID", "USERNAME")

    def test_is_immutable(self, tmp_path):
        config = make_config(tmp_path)

        with pytest.raises(ValidationError):
            config.db_table = "other"

    def test_empty_mapping_rejected(self, tmp_path):
        with pytest.raises(ValidationError):
            make_config(tmp_path, attribute_mapping={})

    def test_duplicate_destination_rejected(self, tmp_path):
        with pytest.raises(ValidationError) as exc_info:
            make_config(tmp_path, attribute_mapping={"username": "USER", "username_nas": "USER"})

        assert "mapped twice" in str(exc_info.value)

    def test_blank_destination_rejected(self, tmp_path):
        with pytest.raises(ValidationError):
            make_config(tmp_path, attribute_mapping={"username": " "})

    def test_unparseable_database_url_rejected(self, tmp_path):
        with pytest.raises(ValidationError) as exc_info:
            make_config(tmp_path, database_url="not a url")

        assert "database_url" in str(exc_info.value)

    def test_lock_file_inside_spool_rejected(self, tmp_path):
        with pytest.raises(ValidationError):
            make_config(tmp_path, lock_file=tmp_path / "spool" / "radspool.lock")


class TestSettings:

    def test_default_mapping(self):
        settings = Settings()

        assert settings.ATTRIBUTE_MAPPING["acct_session_id"] == "ACCTSESSIONID"
        assert len(DEFAULT_ATTRIBUTE_MAPPING) == 21

    def test_mapping_from_environment(self, monkeypatch):
        monkeypatch.setenv("ATTRIBUTE_MAPPING", '{"username": "USERNAME"}')

        settings = Settings()

        assert settings.ATTRIBUTE_MAPPING == {"username": "USERNAME"}

    def test_to_spool_config(self, tmp_path):
        settings = Settings(
            ACCT_FILE=str(tmp_path / "acct.json"),
            SPOOL_DIR=str(tmp_path / "spool"),
            LOCK_FILE=str(tmp_path / "radspool.lock"),
            DATABASE_URL="sqlite://",
            ENVIRONMENT="development",
        )

        config = settings.to_spool_config()

        assert config.spool_dir == tmp_path / "spool"
        assert config.echo_sql is True
        assert len(config.columns) == 21

    def test_invalid_settings_raise_configuration_error(self, tmp_path):
        settings = Settings(
            SPOOL_DIR=str(tmp_path),
            LOCK_FILE=str(tmp_path / "radspool.lock"),
        )

        with pytest.raises(ConfigurationError):
            settings.to_spool_config()
